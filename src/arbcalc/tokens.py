# -----------------------------------------------------------------------------
#  tokens.py
#  Tokenizer: expression text -> flat list of Tokens, each with a [start, end)
#  range into the source. Numbers are converted to Rational here.
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from arbcalc.errors import ErrorKind, MathParserError, SourceRange
from arbcalc.rational import Rational


class TokenKind(Enum):
    NUMBER = "number"
    IDENTIFIER = "identifier"
    VARIABLE = "variable"
    OPERATOR = "operator"
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    range: SourceRange
    value: Rational | None = None      # NUMBER only

    @property
    def start(self) -> int:
        return self.range[0]

    @property
    def end(self) -> int:
        return self.range[1]


# unicode vulgar fractions
FRACTION_GLYPHS: dict[str, Rational] = {
    "½": Rational(1, 2), "⅓": Rational(1, 3), "⅔": Rational(2, 3),
    "¼": Rational(1, 4), "¾": Rational(3, 4),
    "⅕": Rational(1, 5), "⅖": Rational(2, 5), "⅗": Rational(3, 5), "⅘": Rational(4, 5),
    "⅙": Rational(1, 6), "⅚": Rational(5, 6),
    "⅛": Rational(1, 8), "⅜": Rational(3, 8), "⅝": Rational(5, 8), "⅞": Rational(7, 8),
}

# single-character identifiers that are not letters
SYMBOL_IDENTIFIERS = frozenset("πτϕ∑∏")

# longest first, so "**" wins over "*" and "<=" over "<"
OPERATORS: tuple[str, ...] = (
    "||", "&&", "==", "!=", "<=", ">=", "<<", ">>", "**", "!!", "↑↑",
    "∨", "∧", "=", "≠", "<", ">", "≤", "≥", "|", "⊕", "&",
    "+", "-", "−", "*", "×", "/", "÷", "%",
    "¬", "!", "~", "√", "∛", "^", "°",
)

# identifiers that are spelled-out operators unless used as a call, e.g. xor(1, 2)
WORD_OPERATORS = frozenset({"xor"})

_RADIX_PREFIXES = {
    "x": (16, "0123456789abcdefABCDEF", ErrorKind.CANNOT_PARSE_HEX_NUMBER),
    "o": (8, "01234567", ErrorKind.CANNOT_PARSE_OCTAL_NUMBER),
    "b": (2, "01", ErrorKind.CANNOT_PARSE_BINARY_NUMBER),
}


def _is_identifier_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_" or ch in SYMBOL_IDENTIFIERS


def _is_identifier_part(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class Tokenizer:
    """
    Split an expression into tokens.

    >>> [t.text for t in Tokenizer("2pi + $x").tokenize()]
    ['2', 'pi', '+', '$x']
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        text = self.text
        while True:
            self._skip_whitespace()
            if self.pos >= len(text):
                return tokens
            ch = text[self.pos]
            if ch.isdigit() or ch in FRACTION_GLYPHS or (ch == "." and self._peek(1).isdigit()):
                tokens.append(self._number())
            elif ch == ".":
                raise MathParserError(ErrorKind.CANNOT_PARSE_NUMBER, (self.pos, self.pos + 1))
            elif ch == "$":
                tokens.append(self._variable())
            elif ch in "\"'":
                tokens.append(self._quoted_variable())
            elif _is_identifier_start(ch):
                tokens.append(self._identifier())
            elif ch in "([":
                tokens.append(self._single(TokenKind.LPAREN))
            elif ch in ")]":
                tokens.append(self._single(TokenKind.RPAREN))
            elif ch == ",":
                tokens.append(self._single(TokenKind.COMMA))
            else:
                tokens.append(self._operator())

    # ---------- helpers -------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.text[i] if 0 <= i < len(self.text) else ""

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _single(self, kind: TokenKind) -> Token:
        start = self.pos
        self.pos += 1
        return Token(kind, self.text[start], (start, self.pos))

    def _digits(self, allowed: str = "0123456789") -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in allowed:
            self.pos += 1
        return self.text[start:self.pos]

    # ---------- numbers -------------------------------------------------------

    def _number(self) -> Token:
        start = self.pos
        text = self.text

        if text[start] in FRACTION_GLYPHS:
            self.pos += 1
            return Token(TokenKind.NUMBER, text[start], (start, self.pos), FRACTION_GLYPHS[text[start]])

        if text[start] == "0" and self._peek(1).lower() in _RADIX_PREFIXES:
            return self._radix_number()

        self._digits()
        if self._peek() == ".":
            self.pos += 1
            if not self._digits():
                raise MathParserError(ErrorKind.CANNOT_PARSE_FRACTIONAL_NUMBER, (start, self.pos))
            if self._peek() == ".":
                raise MathParserError(ErrorKind.CANNOT_PARSE_NUMBER, (start, self.pos + 1))

        # exponent only when digits follow: "2e" is 2·e, "2e3" is 2000
        if self._peek() in ("e", "E"):
            sign = 1 if self._peek(1) in ("+", "-") else 0
            if self._peek(1 + sign).isdigit():
                self.pos += 1 + sign
                self._digits()
                if self._peek() == ".":
                    raise MathParserError(ErrorKind.CANNOT_PARSE_EXPONENT, (start, self.pos + 1))

        literal = text[start:self.pos]
        try:
            value = Rational.parse(literal)
        except ValueError as err:
            raise MathParserError(ErrorKind.CANNOT_PARSE_NUMBER, (start, self.pos)) from err

        # mixed number: 1½
        glyph = self._peek()
        if glyph in FRACTION_GLYPHS and "." not in literal:
            self.pos += 1
            value = value + FRACTION_GLYPHS[glyph]

        return Token(TokenKind.NUMBER, text[start:self.pos], (start, self.pos), value)

    def _radix_number(self) -> Token:
        start = self.pos
        base, allowed, error = _RADIX_PREFIXES[self._peek(1).lower()]
        self.pos += 2
        digits = self._digits(allowed + "_")
        if not digits.strip("_") or _is_identifier_part(self._peek()):
            while _is_identifier_part(self._peek()):
                self.pos += 1
            raise MathParserError(error, (start, self.pos))
        value = Rational(int(digits.replace("_", ""), base), reduced=True)
        return Token(TokenKind.NUMBER, self.text[start:self.pos], (start, self.pos), value)

    # ---------- names ---------------------------------------------------------

    def _identifier(self) -> Token:
        start = self.pos
        if self.text[start] in SYMBOL_IDENTIFIERS:
            self.pos += 1
        else:
            while _is_identifier_part(self._peek()):
                self.pos += 1
        name = self.text[start:self.pos]
        if name in WORD_OPERATORS:
            save = self.pos
            self._skip_whitespace()
            is_call = self._peek() == "("
            self.pos = save
            if not is_call:
                return Token(TokenKind.OPERATOR, name, (start, self.pos))
        return Token(TokenKind.IDENTIFIER, name, (start, self.pos))

    def _variable(self) -> Token:
        start = self.pos
        self.pos += 1
        while _is_identifier_part(self._peek()):
            self.pos += 1
        name = self.text[start + 1:self.pos]
        if not name:
            if self._peek() and not self._peek().isspace() and self._peek() not in "()[],":
                raise MathParserError(ErrorKind.CANNOT_PARSE_VARIABLE, (start, self.pos + 1))
            raise MathParserError(ErrorKind.ZERO_LENGTH_VARIABLE, (start, self.pos))
        return Token(TokenKind.VARIABLE, name, (start, self.pos))

    def _quoted_variable(self) -> Token:
        start = self.pos
        quote = self.text[start]
        end = self.text.find(quote, start + 1)
        if end < 0:
            raise MathParserError(ErrorKind.CANNOT_PARSE_QUOTED_VARIABLE, (start, len(self.text)))
        self.pos = end + 1
        name = self.text[start + 1:end]
        if not name:
            raise MathParserError(ErrorKind.ZERO_LENGTH_VARIABLE, (start, self.pos))
        return Token(TokenKind.VARIABLE, name, (start, self.pos))

    # ---------- operators -----------------------------------------------------

    def _operator(self) -> Token:
        start = self.pos
        for op in OPERATORS:
            if self.text.startswith(op, start):
                self.pos += len(op)
                return Token(TokenKind.OPERATOR, op, (start, self.pos))
        if self.text[start] == "↑":
            raise MathParserError(ErrorKind.CANNOT_PARSE_OPERATOR, (start, start + 1))
        raise MathParserError(ErrorKind.UNKNOWN_OPERATOR, (start, start + 1), self.text[start])


def tokenize(text: str) -> list[Token]:
    return Tokenizer(text).tokenize()
