"""
Test configuration for Sammallus tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from interpreter import evaluate
from lowering import lower
from parsing import create_parser
from printer import show
from values import allocation_stats, destroy, reset_allocation_stats


@pytest.fixture
def parser():
  """Provide a fresh parser for each test"""
  return create_parser()


@pytest.fixture
def read(parser):
  """Parse and lower one line of input"""
  def read_line(text):
    return lower(parser.parse_string(text))
  return read_line


@pytest.fixture
def run(read):
  """Evaluate one line of input and return its printed result"""
  def run_line(text):
    result = evaluate(read(text))
    printed = show(result)
    destroy(result)
    return printed
  return run_line


@pytest.fixture
def ledger():
  """Reset the allocation ledger and check nothing is left live afterwards"""
  reset_allocation_stats()
  yield allocation_stats
  assert allocation_stats()['live'] == 0
