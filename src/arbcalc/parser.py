# -----------------------------------------------------------------------------
#  parser.py
#  Recursive-descent parser: tokens -> AST of NumberNode / VariableNode /
#  FunctionNode. Every operator becomes a call of the builtin it maps to
#  (1 + 2 -> add(1, 2)), so the evaluator only ever dispatches functions.
# -----------------------------------------------------------------------------

from __future__ import annotations

from arbcalc.errors import ErrorKind, MathParserError
from arbcalc.nodes import FunctionNode, Node, NumberNode, VariableNode, link_parents
from arbcalc.runtime import debug
from arbcalc.tokens import Token, TokenKind, tokenize

# binary operators, lowest precedence first
BINARY_LEVELS: tuple[dict[str, str], ...] = (
    {"||": "l_or", "∨": "l_or"},
    {"&&": "l_and", "∧": "l_and"},
    {"==": "l_eq", "=": "l_eq", "!=": "l_neq", "≠": "l_neq"},
    {"<": "l_lt", ">": "l_gt", "<=": "l_ltoe", "≤": "l_ltoe", ">=": "l_gtoe", "≥": "l_gtoe"},
    {"|": "or"},
    {"xor": "xor", "⊕": "xor"},
    {"&": "and"},
    {"<<": "lshift", ">>": "rshift"},
    {"+": "add", "-": "subtract", "−": "subtract"},
    {"*": "multiply", "×": "multiply", "/": "divide", "÷": "divide", "%": "mod"},
)
MULTIPLICATIVE_LEVEL = len(BINARY_LEVELS) - 1

PREFIX_OPERATORS = {
    "-": "negate", "−": "negate", "+": None,
    "¬": "l_not", "!": "l_not", "!!": "l_not", "~": "not",
    "√": "sqrt", "∛": "cuberoot",
}

# right associative
POWER_OPERATORS = {"^": "pow", "**": "pow", "↑↑": "tetr"}

POSTFIX_OPERATORS = {"!": "factorial", "!!": "factorial2", "%": "percent", "°": "dtor"}

ALL_BINARY = frozenset(op for level in BINARY_LEVELS for op in level) | frozenset(POWER_OPERATORS)


class Parser:
    """
    Parse a token list into an AST.

    Precedence, loosest to tightest: logical or, logical and, equality,
    comparison, bitwise or, xor, bitwise and, shifts, additive,
    multiplicative (including implicit multiplication such as ``2pi``),
    prefix operators, powers (right associative), postfix operators.
    """

    def __init__(self, tokens: list[Token], text: str = ""):
        self.tokens = tokens
        self.text = text
        self.i = 0
        self.depth = 0

    # ---------- token helpers -------------------------------------------------

    def _peek(self, offset: int = 0) -> Token | None:
        j = self.i + offset
        return self.tokens[j] if j < len(self.tokens) else None

    def _advance(self) -> Token:
        tok = self.tokens[self.i]
        self.i += 1
        return tok

    def _end_range(self) -> tuple[int, int]:
        n = len(self.text)
        return (n, n)

    @staticmethod
    def _is_operator(tok: Token | None, ops) -> bool:
        return tok is not None and tok.kind is TokenKind.OPERATOR and tok.text in ops

    @staticmethod
    def _starts_operand(tok: Token | None) -> bool:
        """True when `tok` can begin an operand without an operator in front (implicit multiplication)."""
        if tok is None:
            return False
        if tok.kind in (TokenKind.NUMBER, TokenKind.IDENTIFIER, TokenKind.VARIABLE, TokenKind.LPAREN):
            return True
        return tok.kind is TokenKind.OPERATOR and tok.text in ("√", "∛", "¬", "~")

    # ---------- entry point ---------------------------------------------------

    def parse(self) -> Node:
        if not self.tokens:
            raise MathParserError(ErrorKind.INVALID_FORMAT, (0, len(self.text)))
        node = self._binary(0)
        tok = self._peek()
        if tok is not None:
            if tok.kind is TokenKind.RPAREN:
                raise MathParserError(ErrorKind.MISSING_OPEN_PARENTHESIS, tok.range)
            raise MathParserError(ErrorKind.INVALID_FORMAT, tok.range)
        return link_parents(node)

    # ---------- binary levels -------------------------------------------------

    def _binary(self, level: int) -> Node:
        if level >= len(BINARY_LEVELS):
            return self._prefix()
        ops = BINARY_LEVELS[level]
        left = self._binary(level + 1)
        while True:
            tok = self._peek()
            if self._is_operator(tok, ops):
                self._advance()
                self._require_right_operand(tok)
                right = self._binary(level + 1)
                left = _call(ops[tok.text], [left, right], tok.range)
            elif level == MULTIPLICATIVE_LEVEL and self._starts_operand(tok):
                right = self._binary(level + 1)
                left = _call("implicitmultiply", [left, right], (left.range[1], right.range[0]))
            else:
                return left

    def _require_right_operand(self, op: Token) -> None:
        nxt = self._peek()
        if nxt is None or nxt.kind in (TokenKind.RPAREN, TokenKind.COMMA):
            raise MathParserError(ErrorKind.MISSING_RIGHT_OPERAND, op.range, op.text)
        if nxt.kind is TokenKind.OPERATOR and nxt.text in ALL_BINARY and nxt.text not in PREFIX_OPERATORS:
            raise MathParserError(ErrorKind.MISSING_RIGHT_OPERAND, op.range, op.text)

    # ---------- unary / power / postfix ---------------------------------------

    def _prefix(self) -> Node:
        tok = self._peek()
        if self._is_operator(tok, PREFIX_OPERATORS):
            self._advance()
            self._require_right_operand(tok)
            operand = self._prefix()
            name = PREFIX_OPERATORS[tok.text]
            if name is None:
                return operand
            if tok.text == "!!":
                operand = _call("l_not", [operand], (tok.start + 1, tok.end))
            return _call(name, [operand], tok.range)
        return self._power()

    def _power(self) -> Node:
        base = self._postfix()
        tok = self._peek()
        if self._is_operator(tok, POWER_OPERATORS):
            self._advance()
            self._require_right_operand(tok)
            exponent = self._prefix()       # right associative; allows 2^-1
            return _call(POWER_OPERATORS[tok.text], [base, exponent], tok.range)
        return base

    def _postfix(self) -> Node:
        node = self._primary()
        while True:
            tok = self._peek()
            if not self._is_operator(tok, POSTFIX_OPERATORS):
                return node
            # "7 % 3" is modulo, "7%" and "100 + 7%" are percent
            if tok.text == "%" and self._starts_operand(self._peek(1)):
                return node
            self._advance()
            node = _call(POSTFIX_OPERATORS[tok.text], [node], tok.range)

    # ---------- primaries -----------------------------------------------------

    def _primary(self) -> Node:
        tok = self._peek()
        if tok is None:
            raise MathParserError(ErrorKind.INVALID_FORMAT, self._end_range())

        if tok.kind is TokenKind.NUMBER:
            self._advance()
            return NumberNode(tok.range, value=tok.value)

        if tok.kind is TokenKind.VARIABLE:
            self._advance()
            return VariableNode(tok.range, name=tok.text)

        if tok.kind is TokenKind.IDENTIFIER:
            self._advance()
            if self._peek() is not None and self._peek().kind is TokenKind.LPAREN:
                return self._call_arguments(tok)
            return FunctionNode(tok.range, name=tok.text, name_range=tok.range, bare=True)

        if tok.kind is TokenKind.LPAREN:
            return self._group()

        if tok.kind is TokenKind.RPAREN:
            if self.depth == 0:
                raise MathParserError(ErrorKind.MISSING_OPEN_PARENTHESIS, tok.range)
            raise MathParserError(ErrorKind.INVALID_FORMAT, tok.range)

        if tok.kind is TokenKind.OPERATOR:
            raise MathParserError(ErrorKind.MISSING_LEFT_OPERAND, tok.range, tok.text)

        raise MathParserError(ErrorKind.INVALID_FORMAT, tok.range)

    def _group(self) -> Node:
        open_tok = self._advance()
        if self._peek() is not None and self._peek().kind is TokenKind.RPAREN:
            raise MathParserError(ErrorKind.EMPTY_GROUP, (open_tok.start, self._peek().end))
        self.depth += 1
        node = self._binary(0)
        self._expect_close(open_tok)
        self.depth -= 1
        return node

    def _call_arguments(self, name_tok: Token) -> FunctionNode:
        open_tok = self._advance()
        args: list[Node] = []
        self.depth += 1
        nxt = self._peek()
        if nxt is not None and nxt.kind is TokenKind.RPAREN:
            close = self._advance()
            self.depth -= 1
            return FunctionNode((name_tok.start, close.end), name=name_tok.text, name_range=name_tok.range)

        while True:
            nxt = self._peek()
            if nxt is not None and nxt.kind in (TokenKind.COMMA, TokenKind.RPAREN):
                raise MathParserError(ErrorKind.EMPTY_FUNCTION_ARGUMENT, nxt.range)
            args.append(self._binary(0))
            nxt = self._peek()
            if nxt is not None and nxt.kind is TokenKind.COMMA:
                self._advance()
                continue
            break

        close = self._expect_close(open_tok)
        self.depth -= 1
        return FunctionNode((name_tok.start, close.end), name=name_tok.text,
                            arguments=args, name_range=name_tok.range)

    def _expect_close(self, open_tok: Token) -> Token:
        tok = self._peek()
        if tok is None:
            raise MathParserError(ErrorKind.MISSING_CLOSE_PARENTHESIS, (open_tok.start, len(self.text)))
        if tok.kind is not TokenKind.RPAREN:
            raise MathParserError(ErrorKind.INVALID_FORMAT, tok.range)
        return self._advance()


def _call(name: str, args: list[Node], op_range: tuple[int, int]) -> FunctionNode:
    start = min(a.range[0] for a in args) if args else op_range[0]
    end = max(a.range[1] for a in args) if args else op_range[1]
    start, end = min(start, op_range[0]), max(end, op_range[1])
    return FunctionNode((start, end), name=name, arguments=args, name_range=op_range)


def parse(text: str) -> Node:
    """Tokenize and parse `text`; raises MathParserError with the offending range."""
    tokens = tokenize(text)
    node = Parser(tokens, text).parse()
    debug("parse", f"{text!r}: {len(tokens)} token(s)")
    return node
