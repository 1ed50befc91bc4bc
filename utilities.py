"""
Utilities module for the Sammallus interpreter
Argument checks shared by the builtins
"""

from typing import Optional, Type

from values import (
  Value,
  Error,
  SExpr,
  destroy,
  make_error,
  type_name,
  TYPE_NAMES,
)


# ==================== ERROR MESSAGE BUILDERS ====================

def arity_error(func_name: str, expected: int, got: int) -> Error:
  """
  Generate arity mismatch error

  Args:
    func_name: Builtin name
    expected: Expected number of arguments
    got: Actual number of arguments

  Returns:
    Error value with formatted message
  """
  noun = "argument" if expected == 1 else "arguments"
  return make_error(
    f"Function '{func_name}' passed {got} arguments, expected {expected} {noun}."
  )


def type_mismatch_error(func_name: str, position: int, expected: str, actual: Value) -> Error:
  """
  Generate type mismatch error

  Args:
    func_name: Builtin name
    position: 1-based argument position
    expected: Expected variant name
    actual: The offending argument

  Returns:
    Error value with formatted message
  """
  return make_error(
    f"Function '{func_name}' passed {type_name(actual)} for argument {position}, expected {expected}."
  )


def empty_error(func_name: str, position: int) -> Error:
  return make_error(f"Function '{func_name}' passed {{}} for argument {position}.")


# ==================== VALIDATION UTILITIES ====================
#
# Each check returns None when the arguments are acceptable. On failure it
# destroys the argument list and returns the Error, so callers can chain
# checks with `or` and return the first failure directly.

def check_arity(func_name: str, args: SExpr, expected: int) -> Optional[Error]:
  got = len(args.cells)
  if got != expected:
    destroy(args)
    return arity_error(func_name, expected, got)
  return None


def check_type(func_name: str, args: SExpr, index: int, expected: Type[Value]) -> Optional[Error]:
  actual = args.cells[index]
  if not isinstance(actual, expected):
    error = type_mismatch_error(func_name, index + 1, TYPE_NAMES[expected], actual)
    destroy(args)
    return error
  return None


def check_all_types(func_name: str, args: SExpr, expected: Type[Value]) -> Optional[Error]:
  for i in range(len(args.cells)):
    error = check_type(func_name, args, i, expected)
    if error:
      return error
  return None


def check_not_empty(func_name: str, args: SExpr, index: int) -> Optional[Error]:
  if not args.cells[index].cells:
    destroy(args)
    return empty_error(func_name, index + 1)
  return None


def check_has_arguments(func_name: str, args: SExpr) -> Optional[Error]:
  if not args.cells:
    destroy(args)
    return make_error(f"Function '{func_name}' passed no arguments.")
  return None


# ==================== ARITHMETIC ====================

def truncating_div(x: int, y: int) -> int:
  """Integer division rounding toward zero"""
  quotient = abs(x) // abs(y)
  return quotient if (x < 0) == (y < 0) else -quotient
