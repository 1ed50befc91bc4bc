"""
Sammallus Interpreter
Reduces S-Expressions by evaluating their children and dispatching the
leading symbol to a builtin. Single threaded, strictly depth first.
"""

from typing import Callable, Dict, List

from lowering import lower
from parsing import create_parser
from printer import show
from stdlib import BUILTIN_FUNCTIONS, get_builtin_function, make_builtin_function
from utilities import check_arity, check_type
from values import (
  DEFAULT_MAX_DEPTH,
  QExpr,
  SExpr,
  Symbol,
  Value,
  destroy,
  first_error_index,
  make_error,
  pop_child,
  reclassify,
  take_child,
)


# ============================================================================
# EVALUATION
# ============================================================================

def evaluate(value: Value, debug: bool = False, max_depth: int = DEFAULT_MAX_DEPTH, depth: int = 0) -> Value:
  """
  Evaluate a value, taking ownership of it.
  Anything other than an S-Expression evaluates to itself.
  """
  if isinstance(value, SExpr):
    return evaluate_sexpr(value, debug, max_depth, depth)
  return value


def evaluate_sexpr(value: SExpr, debug: bool = False, max_depth: int = DEFAULT_MAX_DEPTH, depth: int = 0) -> Value:
  """Reduce an S-Expression to a single value"""
  if depth >= max_depth:
    destroy(value)
    return make_error(f"Maximum evaluation depth of {max_depth} exceeded.")

  if debug:
    print(f"{'  ' * depth}Evaluating: {show(value)}")

  for i in range(len(value.cells)):
    value.cells[i] = evaluate(value.cells[i], debug, max_depth, depth + 1)

  error_index = first_error_index(value)
  if error_index is not None:
    return take_child(value, error_index)

  if not value.cells:
    return value

  if len(value.cells) == 1:
    return take_child(value, 0)

  first = pop_child(value, 0)
  if not isinstance(first, Symbol):
    destroy(first)
    destroy(value)
    return make_error("S-expression does not start with a symbol.")

  result = call_builtin(first.name, value, debug, max_depth, depth)
  destroy(first)
  return result


def builtin_eval(args: SExpr, debug: bool = False, max_depth: int = DEFAULT_MAX_DEPTH, depth: int = 0) -> Value:
  """Turn a Q-Expression into an S-Expression and evaluate it"""
  error = check_arity("eval", args, 1) or check_type("eval", args, 0, QExpr)
  if error:
    return error

  quoted = take_child(args, 0)
  return evaluate(reclassify(quoted, SExpr), debug, max_depth, depth + 1)


def call_builtin(name: str, args: SExpr, debug: bool = False, max_depth: int = DEFAULT_MAX_DEPTH, depth: int = 0) -> Value:
  """Dispatch an argument list to the builtin registered under name"""
  if debug:
    print(f"{'  ' * depth}Calling {name} with {len(args.cells)} arguments")

  if name == "eval":
    return builtin_eval(args, debug, max_depth, depth)

  builtin = get_builtin_function(name)
  if builtin is None:
    destroy(args)
    return make_error(f"Unknown function '{name}'.")
  return builtin['func'](args)


def create_builtin_table() -> Dict[str, Dict]:
  """All builtins, including eval"""
  table = dict(BUILTIN_FUNCTIONS)
  table["eval"] = make_builtin_function("eval", builtin_eval, "(eval {expr ...})")
  return table


def list_all_builtins() -> List[str]:
  return list(create_builtin_table().keys())


# ============================================================================
# FACTORIES
# ============================================================================

def create_interpreter(debug: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> Callable[..., str]:
  """
  Factory function returning an interpreter for single lines of input.

  The returned function parses, lowers, evaluates and prints one line and
  releases every value before returning. Syntax errors raise
  SammallusParseError.
  """
  parser = create_parser(debug)

  def interpret_line(text: str, filename: str = "<input>") -> str:
    tree = parser.parse_string(text, filename)
    result = evaluate(lower(tree, max_depth, debug), debug, max_depth)
    try:
      return show(result)
    finally:
      destroy(result)

  return interpret_line
