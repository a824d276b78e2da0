# tests/test_sgf_parser.py
import pytest
from sgftree import sgf_parser
from sgftree.game_tree import Node
from sgftree.sgf_parser import UnbalancedParentheses, expand_node_chain, parse_sgf, sgf_cleanup
from sgftree.sgf_properties import SgfError


def test_cleanup_strips_whitespace_newlines_and_tabs():
    assert sgf_cleanup("  (;B[aa]\n\t;W[bb])\r\n ") == "(;B[aa];W[bb])"
    # inner spaces are kept
    assert sgf_cleanup("(;C[a b])") == "(;C[a b])"


def test_sequence_expansion():
    root = parse_sgf("(;B[aa];W[bb])")
    assert root.parent is None
    assert root.properties == {}
    assert len(root.children) == 1
    b = root.children[0]
    assert b.properties == {"B": "aa"}
    assert len(b.children) == 1
    w = b.children[0]
    assert w.properties == {"W": "bb"}
    assert w.children == []
    assert w.parent is b
    assert b.parent is root


def test_branching():
    root = parse_sgf("(;B[aa](;W[bb])(;W[cc]))")
    b = root.children[0]
    assert b.properties == {"B": "aa"}
    assert [c.properties for c in b.children] == [{"W": "bb"}, {"W": "cc"}]
    assert all(c.children == [] for c in b.children)
    assert all(c.parent is b for c in b.children)


def test_variations_hang_under_last_node_of_sequence():
    root = parse_sgf("(;GM[1];B[aa];W[bb](;B[cc])(;B[dd];W[ee]))")
    game = root.children[0]
    b = game.children[0]
    w = b.children[0]
    assert w.properties == {"W": "bb"}
    assert [c.properties for c in w.children] == [{"B": "cc"}, {"B": "dd"}]
    assert w.children[1].children[0].properties == {"W": "ee"}
    assert w.children[0].parent is w


def test_nested_variations():
    root = parse_sgf("(;B[pd](;W[dp];B[pp])(;W[pp](;B[dp])(;B[po])))")
    b = root.children[0]
    assert len(b.children) == 2
    second = b.children[1]
    assert second.properties == {"W": "pp"}
    assert [c.properties["B"] for c in second.children] == ["dp", "po"]


def test_collection_of_games():
    root = parse_sgf("(;GM[1]C[one])(;GM[1]C[two])")
    assert [g.properties["C"] for g in root.children] == ["one", "two"]


def test_multi_value_property_in_tree():
    root = parse_sgf("(;AB[aa][bb][cc]AW[dd])")
    assert root.children[0].properties == {"AB": ["aa", "bb", "cc"], "AW": "dd"}


def test_empty_branch_has_empty_properties():
    root = parse_sgf("(;)")
    assert root.children[0].properties == {}
    assert root.children[0].children == []


def test_empty_input():
    root = parse_sgf("")
    assert root.children == []
    assert root.properties == {}


def test_multiline_input():
    text = "\n(;GM[1]FF[4]\n;B[aa]\n\t;W[bb])\n"
    root = parse_sgf(text)
    game = root.children[0]
    assert game.properties == {"GM": "1", "FF": "4"}
    assert game.children[0].properties == {"B": "aa"}
    assert game.children[0].children[0].properties == {"W": "bb"}


def test_spaces_are_not_normalized():
    # only newlines and tabs are dropped; a space before a key is part of it
    root = parse_sgf("(;B[aa] C[hi])")
    assert root.children[0].properties == {"B": "aa", " C": "hi"}


def test_expand_node_chain_keeps_variations():
    node = Node()
    v1 = Node(raw_text="W[bb]", parent=node)
    v2 = Node(raw_text="W[cc]", parent=node)
    node.children = [v1, v2]
    expand_node_chain(node, ";B[aa];W[xx];B[yy]")
    assert node.properties == {"B": "aa"}
    tail = node.children[0].children[0]
    assert tail.properties == {"B": "yy"}
    assert tail.children == [v1, v2]
    assert v1.parent is tail and v2.parent is tail


def test_expand_node_chain_without_nodes():
    node = Node(properties={"B": "aa"})
    expand_node_chain(node, ";;")
    assert node.properties == {}
    assert node.children == []


def test_lenient_mode_tolerates_unbalanced_input():
    root = parse_sgf("(;B[aa]))")
    assert root.children[0].properties == {"B": "aa"}
    root = parse_sgf("(;B[aa](;W[bb])")
    assert len(root.children) == 1


def test_strict_mode_unbalanced_close():
    with pytest.raises(UnbalancedParentheses) as excinfo:
        parse_sgf("(;B[aa]))", strict=True)
    assert excinfo.value.position == 8


def test_strict_mode_unclosed_open():
    with pytest.raises(UnbalancedParentheses):
        parse_sgf("(;B[aa](;W[bb])", strict=True)


def test_strict_mode_bad_node_text():
    with pytest.raises(SgfError):
        parse_sgf("(;C[never closed)", strict=True)


def test_debug_output(monkeypatch, capsys):
    monkeypatch.setattr(sgf_parser, "DEBUG", True)
    parse_sgf("(;B[aa])")
    assert "[SgfParser]" in capsys.readouterr().out
