"""
Sammallus Standard Library
Arithmetic and list builtins. Every builtin takes ownership of its argument
list and returns one owned value, a result or an Error.
"""

from functools import partial
from typing import Callable, Dict, List, Optional
import operator

from utilities import (
  check_all_types,
  check_arity,
  check_has_arguments,
  check_not_empty,
  check_type,
  truncating_div,
)
from values import (
  Number,
  QExpr,
  SExpr,
  Value,
  destroy,
  join_into,
  make_error,
  pop_child,
  reclassify,
  take_child,
  wrap_int64,
)


# ============================================================================
# ARITHMETIC FUNCTIONS
# ============================================================================

ARITHMETIC_OPERATORS: Dict[str, Callable[[int, int], int]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": truncating_div,
}


def builtin_operator(args: SExpr, op: str) -> Value:
  """Fold op left to right over numeric arguments"""
  error = check_has_arguments(op, args)
  if error:
    return error

  for child in args.cells:
    if not isinstance(child, Number):
      destroy(args)
      return make_error("Cannot operate on non-numbers.")

  apply_op = ARITHMETIC_OPERATORS[op]
  first = pop_child(args, 0)

  if op == "-" and not args.cells:
    first.number = wrap_int64(-first.number)

  while args.cells:
    following = pop_child(args, 0)
    if op == "/" and following.number == 0:
      destroy(first)
      destroy(following)
      first = make_error("Division by zero.")
      break
    first.number = wrap_int64(apply_op(first.number, following.number))
    destroy(following)

  destroy(args)
  return first


# ============================================================================
# LIST FUNCTIONS
# ============================================================================

def builtin_list(args: SExpr) -> Value:
  """Quote the argument list"""
  return reclassify(args, QExpr)


def builtin_head(args: SExpr) -> Value:
  """Q-Expression holding only the first element"""
  error = (
      check_arity("head", args, 1) or
      check_type("head", args, 0, QExpr) or
      check_not_empty("head", args, 0)
  )
  if error:
    return error

  qexpr = take_child(args, 0)
  while len(qexpr.cells) > 1:
    destroy(pop_child(qexpr, 1))
  return qexpr


def builtin_tail(args: SExpr) -> Value:
  """Q-Expression without its first element"""
  error = (
      check_arity("tail", args, 1) or
      check_type("tail", args, 0, QExpr) or
      check_not_empty("tail", args, 0)
  )
  if error:
    return error

  qexpr = take_child(args, 0)
  destroy(pop_child(qexpr, 0))
  return qexpr


def builtin_join(args: SExpr) -> Value:
  """Concatenate Q-Expressions in argument order"""
  error = check_all_types("join", args, QExpr)
  if error:
    return error

  if not args.cells:
    return reclassify(args, QExpr)

  joined = pop_child(args, 0)
  while args.cells:
    joined = join_into(joined, pop_child(args, 0))
  destroy(args)
  return joined


# ============================================================================
# BUILT-IN FUNCTION REGISTRY
# ============================================================================

def make_builtin_function(name: str, func: Callable[[SExpr], Value], usage: str = "") -> Dict:
  """Create a built-in function entry"""
  return {
      'name': name,
      'func': func,
      'usage': usage
  }


# Note: eval is registered in interpreter.py because it needs the evaluator
BUILTIN_FUNCTIONS: Dict[str, Dict] = {
    # Arithmetic functions
    "+": make_builtin_function("+", partial(builtin_operator, op="+"), "(+ n ...)"),
    "-": make_builtin_function("-", partial(builtin_operator, op="-"), "(- n ...)"),
    "*": make_builtin_function("*", partial(builtin_operator, op="*"), "(* n ...)"),
    "/": make_builtin_function("/", partial(builtin_operator, op="/"), "(/ n ...)"),

    # List functions
    "list": make_builtin_function("list", builtin_list, "(list a ...)"),
    "head": make_builtin_function("head", builtin_head, "(head {a ...})"),
    "tail": make_builtin_function("tail", builtin_tail, "(tail {a ...})"),
    "join": make_builtin_function("join", builtin_join, "(join {a ...} ...)"),
}


def get_builtin_function(name: str) -> Optional[Dict]:
  """Get a built-in function by exact name"""
  return BUILTIN_FUNCTIONS.get(name)


def list_builtin_functions() -> List[str]:
  """List all available built-in functions"""
  return list(BUILTIN_FUNCTIONS.keys())
