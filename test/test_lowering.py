"""
Lowering tests: syntax tree to runtime values
"""

import pytest
from lowering import lower, read_int64
from parsing import SyntaxNode, ROOT_TAG, NUMBER_TAG, SEXPR_TAG, QEXPR_TAG, CHAR_TAG, ANCHOR_TAG
from printer import show
from values import Error, Number, QExpr, SExpr, Symbol, destroy


def sexpr_node(*children):
  return SyntaxNode(SEXPR_TAG, "", (SyntaxNode(CHAR_TAG, "("),) + children + (SyntaxNode(CHAR_TAG, ")"),))


class TestReadInt64:
  """Decimal literal parsing with an explicit result"""

  @pytest.mark.parametrize("text,expected", [
      ("0", 0),
      ("42", 42),
      ("-7", -7),
      ("007", 7),
      ("9223372036854775807", 2 ** 63 - 1),
      ("-9223372036854775808", -(2 ** 63)),
  ])
  def test_in_range(self, text, expected):
    assert read_int64(text) == expected

  @pytest.mark.parametrize("text", [
      "9223372036854775808",
      "-9223372036854775809",
      "99999999999999999999999",
      "",
      "1_000",
      " 5",
      "+5",
  ])
  def test_rejected(self, text):
    assert read_int64(text) is None


class TestLower:
  """Classification by tag and child skipping"""

  def test_number_round_trip(self, read, ledger):
    for literal in ("42", "-7", "0"):
      value = read(literal)
      assert show(value) == f"({literal})"
      destroy(value)

  def test_out_of_range_number_is_error(self, read, ledger):
    value = read("9223372036854775808")
    assert isinstance(value.cells[0], Error)
    assert "Invalid number" in value.cells[0].message
    destroy(value)

  def test_root_is_sexpr(self, read, ledger):
    value = read("+ 1 {2}")
    assert isinstance(value, SExpr)
    assert [type(child) for child in value.cells] == [Symbol, Number, QExpr]
    destroy(value)

  def test_punctuation_and_anchors_skipped(self, read, ledger):
    value = read("{}")
    assert len(value.cells) == 1
    assert value.cells[0].cells == []
    destroy(value)

  def test_symbol_text_verbatim(self, read, ledger):
    value = read("join")
    assert value.cells[0].name == "join"
    destroy(value)

  def test_leaf_rule_wins_over_group(self, ledger):
    node = SyntaxNode("expr|number|sexpr", "12")
    value = lower(node)
    assert isinstance(value, Number)
    destroy(value)

  def test_unknown_tag(self):
    with pytest.raises(ValueError):
      lower(SyntaxNode("expr|string", "x"))

  def test_hand_built_tree(self, ledger):
    tree = SyntaxNode(ROOT_TAG, "", (
        SyntaxNode(ANCHOR_TAG, ""),
        sexpr_node(SyntaxNode("expr|symbol|char", "+"), SyntaxNode(NUMBER_TAG, "1")),
        SyntaxNode(QEXPR_TAG, "", ()),
        SyntaxNode(ANCHOR_TAG, ""),
    ))
    value = lower(tree)
    assert show(value) == "((+ 1) {})"
    destroy(value)

  def test_depth_limit(self, ledger):
    node = SyntaxNode(NUMBER_TAG, "1")
    for _ in range(10):
      node = sexpr_node(node)
    value = lower(node, max_depth=5)
    assert "nested deeper than 5 levels" in show(value)
    destroy(value)
