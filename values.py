"""
Sammallus Value Model
Tagged runtime values with single-owner child sequences
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Type, Union


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Bound on syntax nesting and evaluation recursion, kept below the
# nesting the grammar accepts (about 60 levels)
DEFAULT_MAX_DEPTH = 32


class OwnershipError(Exception):
  """Raised when a value is used after it was released or moved"""
  pass


# ============================================================================
# VALUE VARIANTS
# ============================================================================

@dataclass(eq=False)
class Number:
  """Signed 64-bit integer"""
  number: int
  alive: bool = field(default=True, repr=False)


@dataclass(eq=False)
class Error:
  """Error message flowing through evaluation as an ordinary result"""
  message: str
  alive: bool = field(default=True, repr=False)


@dataclass(eq=False)
class Symbol:
  """Name of a builtin"""
  name: str
  alive: bool = field(default=True, repr=False)


@dataclass(eq=False)
class SExpr:
  """Executable expression, reduced by the evaluator"""
  cells: List['Value'] = field(default_factory=list)
  alive: bool = field(default=True, repr=False)


@dataclass(eq=False)
class QExpr:
  """Quoted expression, never evaluated automatically"""
  cells: List['Value'] = field(default_factory=list)
  alive: bool = field(default=True, repr=False)


Value = Union[Number, Error, Symbol, SExpr, QExpr]
Expression = Union[SExpr, QExpr]

TYPE_NAMES: Dict[type, str] = {
    Number: "Number",
    Error: "Error",
    Symbol: "Symbol",
    SExpr: "S-Expression",
    QExpr: "Q-Expression",
}


def type_name(value: Value) -> str:
  """Human readable variant name"""
  return TYPE_NAMES[type(value)]


def is_expression(value: Value) -> bool:
  return isinstance(value, (SExpr, QExpr))


# ============================================================================
# ALLOCATION LEDGER
# ============================================================================

_ledger: Dict[str, int] = {'allocated': 0, 'released': 0}


def allocation_stats() -> Dict[str, int]:
  """Snapshot of constructor and destroy counts"""
  allocated = _ledger['allocated']
  released = _ledger['released']
  return {
      'allocated': allocated,
      'released': released,
      'live': allocated - released
  }


def reset_allocation_stats() -> None:
  _ledger['allocated'] = 0
  _ledger['released'] = 0


def _allocate(value: Value) -> Value:
  _ledger['allocated'] += 1
  return value


def ensure_alive(value: Value, action: str = "use") -> None:
  """Raise OwnershipError if value has been destroyed or moved"""
  if not value.alive:
    raise OwnershipError(f"Cannot {action} a released {type_name(value)}")


# ============================================================================
# CONSTRUCTORS
# ============================================================================

def wrap_int64(n: int) -> int:
  """Wrap an integer to signed 64-bit two's complement"""
  return (n - INT64_MIN) % (2 ** 64) + INT64_MIN


def make_number(n: int) -> Number:
  if not INT64_MIN <= n <= INT64_MAX:
    raise ValueError(f"{n} does not fit in a signed 64-bit integer")
  return _allocate(Number(n))


def make_error(message: str) -> Error:
  return _allocate(Error(message))


def make_symbol(name: str) -> Symbol:
  return _allocate(Symbol(name))


def make_sexpr() -> SExpr:
  return _allocate(SExpr())


def make_qexpr() -> QExpr:
  return _allocate(QExpr())


# ============================================================================
# OWNERSHIP TRANSFER
# ============================================================================

def append(expr: Expression, child: Value) -> Expression:
  """Move child onto the end of expr and return expr"""
  ensure_alive(expr, "append to")
  ensure_alive(child, "append")
  if not is_expression(expr):
    raise TypeError(f"Cannot append to {type_name(expr)}")
  if child is expr:
    raise OwnershipError("An expression cannot contain itself")
  expr.cells.append(child)
  return expr


def pop_child(expr: Expression, i: int) -> Value:
  """Remove the child at index i and hand ownership to the caller"""
  ensure_alive(expr, "pop from")
  count = len(expr.cells)
  if not 0 <= i < count:
    raise IndexError(f"Child index {i} out of range for {count} children")
  return expr.cells.pop(i)


def take_child(expr: Expression, i: int) -> Value:
  """Pop the child at index i and destroy what remains of expr"""
  child = pop_child(expr, i)
  destroy(expr)
  return child


def join_into(x: Expression, y: Expression) -> Expression:
  """Move every child of y onto the end of x, then destroy y"""
  ensure_alive(x, "join into")
  ensure_alive(y, "join")
  if x is y:
    raise OwnershipError("Cannot join an expression into itself")
  x.cells.extend(y.cells)
  y.cells = []
  destroy(y)
  return x


def reclassify(expr: Expression, variant: Type[Expression]) -> Expression:
  """
  Switch an expression between S-Expression and Q-Expression.

  The child list moves into the new wrapper unchanged and the old wrapper is
  retired. The ledger treats this as the same allocation.
  """
  ensure_alive(expr, "reclassify")
  if not is_expression(expr):
    raise TypeError(f"Cannot reclassify {type_name(expr)}")
  if isinstance(expr, variant):
    return expr
  moved = variant(expr.cells)
  expr.cells = []
  expr.alive = False
  return moved


def destroy(value: Value) -> None:
  """Release value and everything it owns"""
  ensure_alive(value, "destroy")
  if is_expression(value):
    for child in value.cells:
      destroy(child)
    value.cells = []
  value.alive = False
  _ledger['released'] += 1


def first_error_index(expr: Expression) -> Optional[int]:
  """Index of the leftmost Error child, or None"""
  for i, child in enumerate(expr.cells):
    if isinstance(child, Error):
      return i
  return None
