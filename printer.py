"""
Sammallus Printer
Renders values as text without consuming them
"""

from values import Value, Number, Error, Symbol, SExpr, QExpr, ensure_alive


ERROR_PREFIX = "Error: "


def show_expression(value: Value, open_char: str, close_char: str) -> str:
  return open_char + " ".join(show(child) for child in value.cells) + close_char


def show(value: Value) -> str:
  """Convert value to its printed form"""
  ensure_alive(value, "print")
  if isinstance(value, Number):
    return str(value.number)
  elif isinstance(value, Error):
    return ERROR_PREFIX + value.message
  elif isinstance(value, Symbol):
    return value.name
  elif isinstance(value, SExpr):
    return show_expression(value, "(", ")")
  elif isinstance(value, QExpr):
    return show_expression(value, "{", "}")
  raise TypeError(f"Cannot print {type(value).__name__}")


def print_value(value: Value) -> None:
  """Print a value followed by a newline"""
  print(show(value))
