"""
Sammallus Lowering
Turns the parser's generic syntax tree into runtime values
"""

import re
from typing import Optional

from parsing import SyntaxNode, ROOT_TAG, ANCHOR_TAG
from values import (
  Value,
  DEFAULT_MAX_DEPTH,
  INT64_MIN,
  INT64_MAX,
  append,
  make_error,
  make_number,
  make_qexpr,
  make_sexpr,
  make_symbol,
)


_DECIMAL = re.compile(r'-?[0-9]+')

PUNCTUATION = ("(", ")", "{", "}")


def read_int64(text: str) -> Optional[int]:
  """Parse a decimal literal, or None if it is not a signed 64-bit integer"""
  if not _DECIMAL.fullmatch(text):
    return None
  n = int(text)
  if not INT64_MIN <= n <= INT64_MAX:
    return None
  return n


def lower_number(node: SyntaxNode) -> Value:
  n = read_int64(node.contents)
  if n is None:
    return make_error(f"Invalid number '{node.contents}'. Numbers must fit in a signed 64-bit integer.")
  return make_number(n)


def is_skipped(node: SyntaxNode) -> bool:
  """Brackets and input anchors carry no value"""
  return node.contents in PUNCTUATION or node.tag == ANCHOR_TAG


def lower(node: SyntaxNode, max_depth: int = DEFAULT_MAX_DEPTH, debug: bool = False, depth: int = 0) -> Value:
  """
  Lower a syntax tree node into an owned value.

  Leaf rules win over group rules because composed tags can name both.
  Nesting beyond max_depth lowers to an Error value.
  """
  tag = node.tag
  if debug:
    print(f"{'  ' * depth}Lowering: {tag} {node.contents!r}")

  if "number" in tag:
    return lower_number(node)
  if "symbol" in tag:
    return make_symbol(node.contents)

  if tag == ROOT_TAG or "sexpr" in tag:
    expr = make_sexpr()
  elif "qexpr" in tag:
    expr = make_qexpr()
  else:
    raise ValueError(f"Cannot lower syntax node tagged {tag!r}")

  if depth >= max_depth:
    append(expr, make_error(f"Expression nested deeper than {max_depth} levels"))
    return expr

  for child in node.children:
    if is_skipped(child):
      continue
    expr = append(expr, lower(child, max_depth, debug, depth + 1))

  return expr
