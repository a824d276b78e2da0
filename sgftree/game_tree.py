# game_tree.py
# SGF game tree: node model, coordinate-addressed editing and serialization.
#
# Goals:
# - Keep one canonical representation per node (properties); the node text is
#   always formatted from it, so the two can never disagree.
# - Edit the tree by {down, right} coordinates: walk `down` first children,
#   then address the `right`-th (1-based) child of the node reached.
# - Serialize back to SGF text, to a nested {data, children} object and to a
#   compact [text, [children...]] array.
#
# Coordinates are a caller precondition: nothing here checks that a position
# is free or that a descent stays inside the tree. The one exception is
# shift(), which refuses to swap with a neighbor that does not exist.
import json
from collections import namedtuple
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from sgftree.config import GameDefaults
from sgftree.sgf_properties import PropertyMap, format_node_data, parse_node_data, values_as_list

DEBUG = False


class InvalidCoordinates(IndexError): pass


TreeCoordinates = namedtuple('TreeCoordinates', ['down', 'right'])

Coordinates = Union[TreeCoordinates, Tuple[int, int]]

# [raw_text, [child arrays...]]
SgfTreeArray = List[Any]


# -------------------------
# Node model
# -------------------------
class Node:
    """
    A single SGF node (one move, or one game-info entry).
    - properties: PropertyMap, the canonical data of the node
    - raw_text: property text formatted from `properties` (assigning re-parses it)
    - children: ordered child nodes; the sibling index is the variation number
    - parent: back-reference to the parent node, None for the synthetic root
    """
    __slots__ = ("properties", "children", "parent")

    def __init__(self, properties: Optional[PropertyMap] = None, children: Optional[List["Node"]] = None,
                 parent: Optional["Node"] = None, raw_text: str = ""):
        self.properties: PropertyMap = properties if properties is not None else {}
        self.children: List["Node"] = children if children is not None else []
        self.parent: Optional["Node"] = parent
        if raw_text:
            self.properties = parse_node_data(raw_text)

    @property
    def raw_text(self) -> str:
        return format_node_data(self.properties)

    @raw_text.setter
    def raw_text(self, text: str):
        self.properties = parse_node_data(text)

    # convenience: property values as a list, or None
    def get_prop(self, key: str) -> Optional[List[str]]:
        if key not in self.properties:
            return None
        return values_as_list(self.properties[key])

    def has_move(self) -> bool:
        return bool(self.get_prop("B") or self.get_prop("W"))

    def __repr__(self):
        mv = None
        if "B" in self.properties:
            mv = f"B {self.properties['B']}"
        elif "W" in self.properties:
            mv = f"W {self.properties['W']}"
        return f"<Node move={mv} props={{{', '.join(self.properties.keys())}}} children={len(self.children)}>"

    # -------------------------
    # Changing the tree
    # -------------------------
    def _get_down_to_parent(self, down: int) -> "Node":
        current = self
        for _ in range(down):
            current = current.children[0]
        return current

    def add(self, node: "Node", coordinates: Coordinates):
        """
        Insert `node` as child number `right` of the node `down` levels below.

        Whether the position is already occupied is not checked: the node is
        inserted before whatever sits there now.
        """
        down, right = coordinates
        parent_node = self._get_down_to_parent(down)
        node.parent = parent_node
        parent_node.children.insert(right - 1, node)
        if DEBUG:
            print("[GameTree] add", node, "at", (down, right), "under", parent_node)

    def remove(self, coordinates: Coordinates) -> Optional["Node"]:
        """Detach and return the child at the coordinates; right == 0 does nothing."""
        down, right = coordinates
        parent_node = self._get_down_to_parent(down)
        if not right:
            return None
        removed = parent_node.children.pop(right - 1)
        if DEBUG:
            print("[GameTree] remove", removed, "at", (down, right))
        return removed

    def shift(self, coordinates: Coordinates, left: bool = False):
        """Swap the addressed child with its left (or right) sibling."""
        down, right = coordinates
        parent_node = self._get_down_to_parent(down)
        index = right - 1
        other = index - 1 if left else index + 1
        count = len(parent_node.children)
        if not (0 <= index < count and 0 <= other < count):
            raise InvalidCoordinates(
                "cannot shift child %d %s among %d children" % (right, "left" if left else "right", count))
        children = parent_node.children
        children[index], children[other] = children[other], children[index]
        if DEBUG:
            print("[GameTree] shift", (down, right), "left" if left else "right")

    # -------------------------
    # Serialization
    # -------------------------
    def to_sgf(self) -> str:
        if self.parent is None:
            return "".join("(;" + c.to_sgf() + ")" for c in self.children)

        if len(self.children) == 1:
            child = self.children[0]
            # an empty node has no text of its own to stand between two ";"
            if self.raw_text and child.raw_text:
                return self.raw_text + ";" + child.to_sgf()
            return self.raw_text + "(;" + child.to_sgf() + ")"
        if self.children:
            return self.raw_text + "".join("(;" + c.to_sgf() + ")" for c in self.children)
        return self.raw_text

    def to_json(self) -> Dict[str, Any]:
        data = {k: (v if isinstance(v, str) else list(v)) for k, v in self.properties.items()}
        return {
            "data": data,
            "children": [c.to_json() for c in self.children],
        }

    def to_pretty_json_string(self) -> str:
        return json.dumps(self.to_json(), indent=2)

    def to_array(self) -> SgfTreeArray:
        return [self.raw_text, [c.to_array() for c in self.children]]


# -------------------------
# GameTree wrapper
# -------------------------
class GameTree:
    """
    Wrapper around a parsed SGF collection.
    - root: the synthetic root Node; its children are the games of the collection.
      It has no properties and is not written out itself.
    """

    def __init__(self, root: Optional[Node] = None):
        self.root: Node = root if root is not None else Node()

    @classmethod
    def from_sgf(cls, sgf_text: str, strict: bool = False) -> "GameTree":
        tree = cls()
        tree.load_sgf(sgf_text, strict=strict)
        return tree

    def load_sgf(self, sgf_text: str, strict: bool = False):
        # imported here: sgf_parser builds Node objects from this module
        from sgftree.sgf_parser import parse_sgf
        self.root = parse_sgf(sgf_text, strict=strict)
        if DEBUG:
            print("[GameTree] loaded", len(self.root.children), "game(s)")

    def to_sgf(self) -> str:
        return self.root.to_sgf()

    def to_json(self) -> Dict[str, Any]:
        return self.root.to_json()

    def to_array(self) -> SgfTreeArray:
        return self.root.to_array()

    # coordinates are relative to the synthetic root: down=1 reaches the first game node
    def add(self, node: Node, coordinates: Coordinates):
        self.root.add(node, coordinates)

    def remove(self, coordinates: Coordinates) -> Optional[Node]:
        return self.root.remove(coordinates)

    def shift(self, coordinates: Coordinates, left: bool = False):
        self.root.shift(coordinates, left=left)

    # -------------------------
    # Utilities
    # -------------------------
    def get_node_path(self, node: Node) -> List[Node]:
        """
        Nodes from the synthetic root (excluded) down to `node`.

        A node only counts as attached when every step up is also owned by the
        parent's children; a removed subtree keeps its parent link but gets [].
        """
        path: List[Node] = []
        cur = node
        while cur is not self.root:
            parent = cur.parent
            if parent is None or not any(c is cur for c in parent.children):
                return []
            path.append(cur)
            cur = parent
        return path[::-1]

    def mainline(self) -> Iterator[Node]:
        """Nodes of the first game, following the first child at each step."""
        cur = self.root.children[0] if self.root.children else None
        while cur is not None:
            yield cur
            cur = cur.children[0] if cur.children else None

    def find_last_mainline_node(self) -> Optional[Node]:
        last = None
        for last in self.mainline():
            pass
        return last

    def add_game_node(self, defaults: Optional[GameDefaults] = None) -> Node:
        """
        Make sure the collection has a game to attach moves to.
        An empty root gets a game-info node (GM, FF, CA, AP, KM, SZ, DT);
        otherwise the first existing game node is returned untouched.
        """
        if self.root.children:
            return self.root.children[0]
        if defaults is None:
            defaults = GameDefaults()
        node = Node(properties=defaults.to_properties())
        self.root.add(node, TreeCoordinates(down=0, right=1))
        if DEBUG:
            print("[GameTree] created game node:", node.properties)
        return node
