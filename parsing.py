"""
Sammallus Parser
pyparsing grammar producing a generic syntax tree of tagged nodes
"""

from typing import List, Dict, Any, Tuple
from dataclasses import dataclass, field

from pyparsing import (
    Forward, Keyword, Literal, MatchFirst, ParseBaseException, ParserElement,
    Regex, StringEnd, StringStart, ZeroOrMore, one_of
)

from error_handling import SammallusParseError

# Enable packrat parsing for performance
ParserElement.enable_packrat()


# Tags compose the names of every grammar rule a node matched, outermost first
ROOT_TAG = ">"
NUMBER_TAG = "expr|number|regex"
OPERATOR_TAG = "expr|symbol|char"
KEYWORD_TAG = "expr|symbol|string"
SEXPR_TAG = "expr|sexpr|>"
QEXPR_TAG = "expr|qexpr|>"
CHAR_TAG = "char"
ANCHOR_TAG = "regex"

OPERATORS = ("+", "-", "*", "/")
KEYWORDS = ("list", "head", "tail", "join", "eval")


@dataclass(frozen=True)
class SyntaxNode:
    """Generic syntax tree node: rule tag, literal text, ordered children"""
    tag: str
    contents: str = ""
    children: Tuple['SyntaxNode', ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        if self.children:
            children_str = ", ".join(str(child) for child in self.children)
            return f"{self.tag}[{children_str}]"
        return f"{self.tag}({self.contents!r})"


def _leaf(tag: str):
    return lambda t: SyntaxNode(tag, t[0])


def _group(tag: str):
    return lambda t: SyntaxNode(tag, "", tuple(t))


def _anchor(t):
    return SyntaxNode(ANCHOR_TAG, "")


class SammallusGrammar:
    """Sammallus grammar definition using pyparsing"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        """Setup numbers, symbols and the two bracketed expression forms"""

        expression = Forward()

        # Numbers are tried before symbols so that "-5" is a number and "- 5" is not
        number = Regex(r"-?[0-9]+").set_parse_action(_leaf(NUMBER_TAG))

        operator_symbol = one_of(" ".join(OPERATORS)).set_parse_action(_leaf(OPERATOR_TAG))
        keyword_symbol = MatchFirst([Keyword(k) for k in KEYWORDS]).set_parse_action(_leaf(KEYWORD_TAG))
        symbol = operator_symbol | keyword_symbol

        def punctuation(char: str):
            return Literal(char).set_parse_action(_leaf(CHAR_TAG))

        s_expression = (
            punctuation("(") - (ZeroOrMore(expression) + punctuation(")"))
        ).set_parse_action(_group(SEXPR_TAG))

        q_expression = (
            punctuation("{") - (ZeroOrMore(expression) + punctuation("}"))
        ).set_parse_action(_group(QEXPR_TAG))

        expression <<= number | symbol | s_expression | q_expression

        program = (
            StringStart().set_parse_action(_anchor) +
            ZeroOrMore(expression) +
            StringEnd().set_parse_action(_anchor)
        ).set_parse_action(_group(ROOT_TAG))

        self.program = program

    def parse_program(self, text: str, filename: str = "<input>") -> SyntaxNode:
        """Parse one line of input into a root node"""
        if self.debug:
            print(f"Parsing: {text!r}")
        try:
            result = self.program.parse_string(text, parse_all=True)
        except ParseBaseException as e:
            raise SammallusParseError.from_exception(e, text, filename) from e
        except RecursionError:
            raise SammallusParseError("Input is nested too deeply to parse", filename=filename)
        return result[0]


class SammallusParser:
    """Main Sammallus parser"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = SammallusGrammar(debug)

    def parse_string(self, text: str, filename: str = "<input>") -> SyntaxNode:
        """Parse Sammallus source code from string"""
        return self.grammar.parse_program(text, filename)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> SammallusParser:
    """Create a Sammallus parser"""
    return SammallusParser(debug=debug)



# Utility functions for working with syntax trees
def find_nodes_by_tag(tree: SyntaxNode, fragment: str) -> List[SyntaxNode]:
    """Find all nodes whose tag contains fragment"""
    result = []

    def search(node: SyntaxNode):
        if fragment in node.tag:
            result.append(node)
        for child in node.children:
            search(child)

    search(tree)
    return result


def pretty_print_tree(tree: SyntaxNode, indent: int = 0) -> str:
    """Pretty print a syntax tree for debugging"""
    result = "  " * indent + tree.tag
    if tree.contents:
        result += f": '{tree.contents}'"
    result += "\n"

    for child in tree.children:
        result += pretty_print_tree(child, indent + 1)

    return result


def tree_to_dict(tree: SyntaxNode) -> Dict[str, Any]:
    """Convert a syntax tree to dictionary representation"""
    return {
        "tag": tree.tag,
        "contents": tree.contents,
        "children": [tree_to_dict(child) for child in tree.children]
    }
