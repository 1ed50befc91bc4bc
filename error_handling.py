"""
Syntax error reporting for the Sammallus parser
"""

from typing import List, Optional
from pyparsing import ParseBaseException
import re


RECOGNISED_SYMBOLS = "+ - * / list head tail join eval"


class SammallusParseError(Exception):
    """Syntax error in one line of Sammallus input"""

    def __init__(self, message: str, filename: str = "<input>", line: int = 0, column: int = 0,
                 source_line: str = "", suggestions: Optional[List[str]] = None):
        self.message = message
        self.filename = filename
        self.line = line
        self.column = column
        self.source_line = source_line
        self.suggestions = suggestions or []
        super().__init__(message)

    @classmethod
    def from_exception(cls, exc: ParseBaseException, source_text: str,
                       filename: str = "<input>") -> 'SammallusParseError':
        """Wrap a pyparsing failure, keeping its position"""
        lines = source_text.split('\n')
        source_line = lines[exc.lineno - 1] if 0 < exc.lineno <= len(lines) else ""
        return cls(
            message=exc.msg,
            filename=filename,
            line=exc.lineno,
            column=exc.column,
            source_line=source_line,
            suggestions=suggest_fixes(source_text, source_line[exc.column - 1:])
        )

    def __str__(self) -> str:
        if self.line:
            header = f"Parse error in {self.filename} at line {self.line}, column {self.column}:"
        else:
            header = f"Parse error in {self.filename}:"
        parts = [header, f"  {self.message}"]

        if self.source_line:
            parts.append(f"    {self.source_line}")
            parts.append(f"    {' ' * (self.column - 1)}^")

        for suggestion in self.suggestions:
            parts.append(f"  Hint: {suggestion}")

        return '\n'.join(parts)


def suggest_fixes(source_text: str, remainder: str) -> List[str]:
    """Hints for the usual mistakes: unbalanced brackets, unknown words, decimals"""
    suggestions = []

    if source_text.count("(") != source_text.count(")"):
        suggestions.append("Check that every '(' has a matching ')'")

    if source_text.count("{") != source_text.count("}"):
        suggestions.append("Check that every '{' has a matching '}'")

    if re.match(r"\s*[A-Za-z_]", remainder):
        suggestions.append(f"The only recognised symbols are: {RECOGNISED_SYMBOLS}")

    if re.match(r"\s*-?[0-9]*\.", remainder):
        suggestions.append("Numbers are whole numbers only")

    return suggestions
