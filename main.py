"""
Sammallus - Main Entry Point
Read-eval-print loop and script runner for a small S-expression language
"""

import sys
import argparse
import atexit
import os
from pathlib import Path
from typing import List, Optional

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from error_handling import SammallusParseError
from interpreter import create_interpreter, list_all_builtins
from parsing import create_parser, pretty_print_tree
from values import DEFAULT_MAX_DEPTH


VERSION = "0.1"
PROMPT = "lispy> "
HISTORY_FILE = "~/.sammallus_history"
HISTORY_LENGTH = 1000


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='sammallus',
      description='Sammallus - a small S-expression interpreter',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                        # Interactive mode
  %(prog)s script.lspy            # Evaluate each line of a script
  %(prog)s --parse script.lspy    # Show the syntax tree of each line
  %(prog)s -i --debug             # Interactive mode with evaluation trace
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Script file; every non-blank line is evaluated on its own'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show syntax trees (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Trace parsing, lowering and evaluation'
  )

  parser.add_argument(
      '--max-depth',
      type=int,
      default=DEFAULT_MAX_DEPTH,
      help=f'Maximum expression nesting depth (default: {DEFAULT_MAX_DEPTH}). '
           'The parser itself rejects input nested more than about 60 levels'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=f'Sammallus Version {VERSION}'
  )

  return parser


def read_script_lines(script_path: str) -> List[str]:
  """Non-blank lines of a script file"""
  with open(script_path, 'r', encoding='utf-8') as f:
    return [line for line in f.read().splitlines() if line.strip()]


def parse_file(script_path: str, debug: bool = False) -> int:
  """Show the syntax tree of every line of a script"""
  parser = create_parser(debug)
  status = 0
  for line in read_script_lines(script_path):
    try:
      print(pretty_print_tree(parser.parse_string(line, script_path)), end='')
    except SammallusParseError as e:
      print(e)
      status = 1
  return status


def run_script_file(script_path: str, debug: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> int:
  """Evaluate every line of a script, printing each result"""
  interpret_line = create_interpreter(debug, max_depth)
  status = 0
  for line in read_script_lines(script_path):
    try:
      print(interpret_line(line, script_path))
    except SammallusParseError as e:
      print(e)
      status = 1
  return status


def setup_readline() -> None:
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser(HISTORY_FILE)
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First session, no history yet

  readline.set_history_length(HISTORY_LENGTH)

  completions = list_all_builtins() + [":parse", ":help"]

  def completer(text: str, state: int) -> Optional[str]:
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  def save_history() -> None:
    try:
      readline.write_history_file(history_file)
    except OSError:
      pass  # Read-only home directory

  atexit.register(save_history)


def show_help() -> None:
  print("REPL Commands:")
  print("  :parse <expr>     - Show the syntax tree")
  print("  :help             - Show this help")
  print("  Ctrl+c / Ctrl+d   - Exit")
  print()
  print("Language:")
  print("  (+ 1 2 3)                 - Arithmetic: + - * /")
  print("  {1 2 3}                   - Quoted list, never evaluated")
  print("  (list 1 2 3)              - Build a quoted list")
  print("  (head {1 2 3})            - {1}")
  print("  (tail {1 2 3})            - {2 3}")
  print("  (join {1 2} {3})          - {1 2 3}")
  print("  (eval {+ 1 2})            - Evaluate a quoted list")


def run_interactive_mode(debug: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
  """Run the read-eval-print loop until Ctrl+c or end of input"""
  print(f"Sammallus Version {VERSION}")
  print("Press Ctrl+c to Exit\n")

  setup_readline()

  parser = create_parser(debug)
  interpret_line = create_interpreter(debug, max_depth)

  while True:
    try:
      code = input(PROMPT)
    except (KeyboardInterrupt, EOFError):
      print()
      break

    if code.strip() == ":help":
      show_help()
      continue

    try:
      if code.startswith(":parse"):
        print(pretty_print_tree(parser.parse_string(code[len(":parse"):])), end='')
      else:
        print(interpret_line(code))
    except SammallusParseError as e:
      print(e)


def main(argv: Optional[List[str]] = None) -> int:
  """Main entry point for Sammallus"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.script:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist")
      return 1
    if args.parse:
      return parse_file(args.script, debug=args.debug)
    return run_script_file(args.script, debug=args.debug, max_depth=args.max_depth)

  run_interactive_mode(debug=args.debug, max_depth=args.max_depth)
  return 0


if __name__ == "__main__":
  sys.exit(main())
