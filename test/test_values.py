"""
Value model tests: constructors, ownership transfer and release
"""

import pytest
from values import (
    INT64_MAX,
    INT64_MIN,
    Number,
    OwnershipError,
    QExpr,
    SExpr,
    allocation_stats,
    append,
    destroy,
    first_error_index,
    join_into,
    make_error,
    make_number,
    make_qexpr,
    make_sexpr,
    make_symbol,
    pop_child,
    reclassify,
    take_child,
    type_name,
    wrap_int64,
)


def numbers(expr):
  return [child.number for child in expr.cells]


def build(variant_maker, *ns):
  expr = variant_maker()
  for n in ns:
    expr = append(expr, make_number(n))
  return expr


class TestConstructors:
  """Fresh leaf and empty expression values"""

  def test_leaves(self, ledger):
    values = [make_number(4), make_error("boom"), make_symbol("+")]
    assert [type_name(v) for v in values] == ["Number", "Error", "Symbol"]
    assert ledger()['allocated'] == 3
    for v in values:
      destroy(v)

  def test_empty_expressions(self, ledger):
    s, q = make_sexpr(), make_qexpr()
    assert s.cells == [] and q.cells == []
    assert type_name(s) == "S-Expression"
    assert type_name(q) == "Q-Expression"
    destroy(s)
    destroy(q)

  def test_number_range(self):
    assert make_number(INT64_MAX).number == INT64_MAX
    assert make_number(INT64_MIN).number == INT64_MIN
    with pytest.raises(ValueError):
      make_number(INT64_MAX + 1)

  def test_wrap_int64(self):
    assert wrap_int64(INT64_MAX + 1) == INT64_MIN
    assert wrap_int64(INT64_MIN - 1) == INT64_MAX
    assert wrap_int64(-5) == -5


class TestOwnershipTransfer:
  """append, pop_child, take_child and join_into move children"""

  def test_append_preserves_order(self, ledger):
    expr = build(make_sexpr, 1, 2, 3)
    assert numbers(expr) == [1, 2, 3]
    destroy(expr)

  def test_pop_child_compacts(self, ledger):
    expr = build(make_qexpr, 1, 2, 3)
    child = pop_child(expr, 1)
    assert child.number == 2
    assert numbers(expr) == [1, 3]
    destroy(child)
    destroy(expr)

  def test_pop_child_out_of_range(self, ledger):
    expr = build(make_sexpr, 1)
    with pytest.raises(IndexError):
      pop_child(expr, 1)
    with pytest.raises(IndexError):
      pop_child(expr, -1)
    destroy(expr)

  def test_take_child_releases_rest(self, ledger):
    expr = build(make_sexpr, 1, 2, 3)
    child = take_child(expr, 2)
    assert child.number == 3
    assert not expr.alive
    assert ledger()['live'] == 1
    destroy(child)

  def test_join_into(self, ledger):
    x = build(make_qexpr, 1, 2)
    y = build(make_qexpr, 3, 4)
    joined = join_into(x, y)
    assert joined is x
    assert numbers(joined) == [1, 2, 3, 4]
    assert not y.alive
    destroy(joined)

  def test_cannot_append_to_itself(self, ledger):
    expr = make_sexpr()
    with pytest.raises(OwnershipError):
      append(expr, expr)
    destroy(expr)

  def test_cannot_append_to_leaf(self, ledger):
    leaf, child = make_number(1), make_number(2)
    with pytest.raises(TypeError):
      append(leaf, child)
    destroy(leaf)
    destroy(child)


class TestReclassify:
  """S-Expression and Q-Expression swap wrappers, not children"""

  def test_sexpr_to_qexpr_moves_children(self, ledger):
    sexpr = build(make_sexpr, 1, 2)
    cells = sexpr.cells
    qexpr = reclassify(sexpr, QExpr)
    assert isinstance(qexpr, QExpr)
    assert qexpr.cells is cells
    assert not sexpr.alive
    assert ledger()['allocated'] == 3
    destroy(qexpr)

  def test_same_variant_is_unchanged(self, ledger):
    qexpr = make_qexpr()
    assert reclassify(qexpr, QExpr) is qexpr
    destroy(qexpr)

  def test_round_trip(self, ledger):
    sexpr = reclassify(reclassify(build(make_sexpr, 7), QExpr), SExpr)
    assert isinstance(sexpr, SExpr)
    assert numbers(sexpr) == [7]
    destroy(sexpr)

  def test_moved_wrapper_cannot_be_destroyed(self, ledger):
    sexpr = make_sexpr()
    qexpr = reclassify(sexpr, QExpr)
    with pytest.raises(OwnershipError):
      destroy(sexpr)
    destroy(qexpr)


class TestDestroy:
  """Release happens exactly once"""

  def test_recursive_release(self, ledger):
    outer = make_sexpr()
    inner = build(make_qexpr, 1, 2)
    outer = append(outer, inner)
    outer = append(outer, make_symbol("head"))
    destroy(outer)
    assert ledger() == {'allocated': 5, 'released': 5, 'live': 0}
    assert not inner.alive

  def test_double_destroy_raises(self, ledger):
    n = make_number(1)
    destroy(n)
    with pytest.raises(OwnershipError):
      destroy(n)

  def test_use_after_destroy_raises(self, ledger):
    expr = make_sexpr()
    destroy(expr)
    with pytest.raises(OwnershipError):
      append(expr, Number(1))

  def test_first_error_index(self, ledger):
    expr = build(make_sexpr, 1)
    expr = append(expr, make_error("a"))
    expr = append(expr, make_error("b"))
    assert first_error_index(expr) == 1
    destroy(expr)
    assert allocation_stats()['live'] == 0
