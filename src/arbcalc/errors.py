# src/arbcalc/errors.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

SourceRange = tuple[int, int]


class UserInputError(Exception):
    """Raised for bad user-supplied input outside the expression core (profiles, CLI options)."""


class ErrorKind(Enum):
    # parse time
    CANNOT_PARSE_NUMBER = "Cannot parse number"
    CANNOT_PARSE_HEX_NUMBER = "Cannot parse hexadecimal number"
    CANNOT_PARSE_OCTAL_NUMBER = "Cannot parse octal number"
    CANNOT_PARSE_BINARY_NUMBER = "Cannot parse binary number"
    CANNOT_PARSE_FRACTIONAL_NUMBER = "Cannot parse fraction"
    CANNOT_PARSE_EXPONENT = "Cannot parse exponent"
    CANNOT_PARSE_IDENTIFIER = "Cannot parse identifier"
    CANNOT_PARSE_VARIABLE = "Cannot parse variable"
    CANNOT_PARSE_QUOTED_VARIABLE = "Cannot parse quoted variable"
    CANNOT_PARSE_OPERATOR = "Cannot parse operator"
    ZERO_LENGTH_VARIABLE = "Variables must be at least one character long"
    UNKNOWN_OPERATOR = "Unknown operator"
    MISSING_OPEN_PARENTHESIS = "Missing opening parenthesis"
    MISSING_CLOSE_PARENTHESIS = "Missing closing parenthesis"
    EMPTY_FUNCTION_ARGUMENT = "Empty function argument"
    EMPTY_GROUP = "Empty group"
    INVALID_FORMAT = "Invalid format"
    MISSING_LEFT_OPERAND = "Missing left operand"
    MISSING_RIGHT_OPERAND = "Missing right operand"

    # evaluation time
    UNKNOWN_FUNCTION = "Unknown function"
    UNKNOWN_VARIABLE = "Unknown variable"
    DIVIDE_BY_ZERO = "Division by zero"
    INVALID_ARGUMENTS = "Invalid arguments"
    ARGUMENT_NOT_INTEGER = "Argument(s) must be integer(s)"
    ARGUMENT_NOT_POSITIVE = "Argument(s) must be positive"
    ARGUMENT_NOT_LOGICAL_VALUE = "Argument(s) must be either true/1 or false/0"
    RECURSIVE_SUBSTITUTION = "Substitution refers to itself"
    INTERNAL_ERROR = "An internal error has occured"

    @property
    def is_parse_error(self) -> bool:
        return self in _PARSE_KINDS


_PARSE_KINDS = frozenset({
    ErrorKind.CANNOT_PARSE_NUMBER,
    ErrorKind.CANNOT_PARSE_HEX_NUMBER,
    ErrorKind.CANNOT_PARSE_OCTAL_NUMBER,
    ErrorKind.CANNOT_PARSE_BINARY_NUMBER,
    ErrorKind.CANNOT_PARSE_FRACTIONAL_NUMBER,
    ErrorKind.CANNOT_PARSE_EXPONENT,
    ErrorKind.CANNOT_PARSE_IDENTIFIER,
    ErrorKind.CANNOT_PARSE_VARIABLE,
    ErrorKind.CANNOT_PARSE_QUOTED_VARIABLE,
    ErrorKind.CANNOT_PARSE_OPERATOR,
    ErrorKind.ZERO_LENGTH_VARIABLE,
    ErrorKind.UNKNOWN_OPERATOR,
    ErrorKind.MISSING_OPEN_PARENTHESIS,
    ErrorKind.MISSING_CLOSE_PARENTHESIS,
    ErrorKind.EMPTY_FUNCTION_ARGUMENT,
    ErrorKind.EMPTY_GROUP,
    ErrorKind.INVALID_FORMAT,
    ErrorKind.MISSING_LEFT_OPERAND,
    ErrorKind.MISSING_RIGHT_OPERAND,
})

# kinds whose message names the offending operator/identifier
_QUOTED_DETAIL = frozenset({
    ErrorKind.MISSING_LEFT_OPERAND,
    ErrorKind.MISSING_RIGHT_OPERAND,
    ErrorKind.UNKNOWN_FUNCTION,
    ErrorKind.UNKNOWN_VARIABLE,
    ErrorKind.UNKNOWN_OPERATOR,
})


def describe(kind: ErrorKind, detail: str | None = None) -> str:
    """
    Human readable message for an error kind.

    >>> describe(ErrorKind.UNKNOWN_FUNCTION, "foo")
    "Unknown function 'foo'"
    """
    if detail and kind in _QUOTED_DETAIL:
        return f"{kind.value} '{detail}'"
    return kind.value


class MathParserError(Exception):
    """Raised by the tokenizer, parser and builtin functions; carries the offending source range."""

    def __init__(self, kind: ErrorKind, range: SourceRange, detail: str | None = None):
        self.kind = kind
        self.range = (int(range[0]), int(range[1]))
        self.detail = detail
        super().__init__(describe(kind, detail))

    @property
    def description(self) -> str:
        return describe(self.kind, self.detail)


@dataclass(frozen=True)
class EvaluationError:
    """Failed evaluation as handed to callers: message plus a [start, end) range into the source text."""
    kind: ErrorKind
    description: str
    source_range: SourceRange

    @classmethod
    def from_exception(cls, exc: MathParserError) -> EvaluationError:
        return cls(kind=exc.kind, description=exc.description, source_range=exc.range)

    def highlight(self, expression: str) -> str:
        """Return a caret line marking the error range under `expression`."""
        start, end = self.source_range
        start = max(0, min(start, len(expression)))
        end = max(start + 1, min(end, len(expression) + 1))
        return " " * start + "^" * (end - start)
