# sgf_parser.py
# Single-pass SGF scanner.
#
#   text --sgf_cleanup--> parse_branches --(on ")")--> expand_node_chain --> parse_node_data
#
# Every "(" opens a branch node, every ")" closes it. The text collected for a
# branch is a run of ";"-separated nodes; when the branch closes it is unfolded
# into a chain of single-child nodes and the branch's own variations are hung
# under the last node of the chain.
#
# The scanner knows nothing about brackets: a "(" or ")" inside a property
# value is read as a branch delimiter. Malformed input gives an unspecified
# tree unless strict=True is passed.
from typing import List

from sgftree.game_tree import Node
from sgftree.sgf_properties import SgfError, parse_node_data

DEBUG = False


class UnbalancedParentheses(SgfError):
    def __init__(self, message: str, position: int):
        super().__init__(f"{message} at offset {position}")
        self.position = position


class _Frame:
    """One open branch: its node and the text collected for it so far."""
    __slots__ = ("node", "chars")

    def __init__(self, node: Node):
        self.node = node
        self.chars: List[str] = []


def sgf_cleanup(sgf_text: str) -> str:
    return sgf_text.strip().replace("\n", "").replace("\r", "").replace("\t", "")


def expand_node_chain(node: Node, text: str, strict: bool = False):
    """
    Unfold the ";"-separated nodes of `text` into a chain starting at `node`.

    The first node's data goes onto `node`; each following one becomes the only
    child of the previous one. The original children of `node` (its variations)
    end up under the last node of the chain.
    """
    variations = node.children
    nodes_text = [t for t in text.split(";") if t != ""]

    node.properties = parse_node_data(nodes_text[0], strict=strict) if nodes_text else {}
    current = node
    for node_text in nodes_text[1:]:
        child = Node(properties=parse_node_data(node_text, strict=strict), parent=current)
        current.children = [child]
        current = child

    current.children = variations
    for v in variations:
        v.parent = current


def parse_branches(sgf_text: str, strict: bool = False) -> Node:
    root = Node()
    # explicit stack of open branches instead of walking parent links back up
    stack: List[_Frame] = [_Frame(root)]

    for pos, ch in enumerate(sgf_text):
        if ch == "(":
            parent = stack[-1].node
            branch = Node(parent=parent)
            parent.children.append(branch)
            stack.append(_Frame(branch))
        elif ch == ")":
            if len(stack) == 1:
                if strict:
                    raise UnbalancedParentheses("unexpected ')'", pos)
                if DEBUG:
                    print("[SgfParser] ignoring unmatched ')' at", pos)
                continue
            frame = stack.pop()
            expand_node_chain(frame.node, "".join(frame.chars), strict=strict)
        else:
            stack[-1].chars.append(ch)

    if len(stack) > 1:
        if strict:
            raise UnbalancedParentheses("%d unclosed '('" % (len(stack) - 1), len(sgf_text))
        if DEBUG:
            print("[SgfParser]", len(stack) - 1, "branch(es) left open")

    return root


def parse_sgf(sgf_text: str, strict: bool = False) -> Node:
    """
    Parse SGF text into a tree and return its synthetic root.

    Leading/trailing whitespace, newlines and tabs are removed first; nothing
    else is normalized. The root's children are the games of the collection.
    """
    cleaned = sgf_cleanup(sgf_text)
    root = parse_branches(cleaned, strict=strict)
    if DEBUG:
        print("[SgfParser] parsed", len(cleaned), "chars into", len(root.children), "game(s)")
    return root
