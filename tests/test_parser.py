# tests/test_parser.py
"""
Tokenizer and parser: operator precedence, implicit multiplication and the
error kinds (with source ranges) reported for malformed input.
"""

from __future__ import annotations

import pytest

from arbcalc.errors import ErrorKind, MathParserError
from arbcalc.nodes import FunctionNode, describe_tree
from arbcalc.parser import parse
from arbcalc.rational import Rational
from arbcalc.tokens import TokenKind, tokenize

# ---------- tokenizer ---------------------------------------------------------


def test_token_ranges():
    tokens = tokenize("12 + sin(x)")
    assert [t.text for t in tokens] == ["12", "+", "sin", "(", "x", ")"]
    assert [t.range for t in tokens] == [(0, 2), (3, 4), (5, 8), (8, 9), (9, 10), (10, 11)]


NUMBER_CASES = [
    ("3.25", Rational(13, 4)),
    ("1e3", Rational(1000)),
    ("2.5e-1", Rational(1, 4)),
    ("½", Rational(1, 2)),
    ("1½", Rational(3, 2)),
    ("0x1F", Rational(31)),
    ("0b101", Rational(5)),
    ("0o17", Rational(15)),
]


@pytest.mark.parametrize("text,expected", NUMBER_CASES, ids=[c[0] for c in NUMBER_CASES])
def test_number_literals(text, expected):
    (tok,) = tokenize(text)
    assert tok.kind is TokenKind.NUMBER
    assert tok.value == expected


def test_exponent_needs_digits():
    # "2e" is 2·e, not a malformed exponent
    assert [t.kind for t in tokenize("2e")] == [TokenKind.NUMBER, TokenKind.IDENTIFIER]


def test_variables():
    tokens = tokenize("$x + 'long name'")
    assert tokens[0].kind is TokenKind.VARIABLE and tokens[0].text == "x"
    assert tokens[2].kind is TokenKind.VARIABLE and tokens[2].text == "long name"


def test_xor_is_an_operator_unless_called():
    assert tokenize("1 xor 2")[1].kind is TokenKind.OPERATOR
    assert tokenize("xor(1, 2)")[0].kind is TokenKind.IDENTIFIER


TOKEN_ERRORS = [
    ("5.", ErrorKind.CANNOT_PARSE_FRACTIONAL_NUMBER),
    ("1.2.3", ErrorKind.CANNOT_PARSE_NUMBER),
    ("1e2.5", ErrorKind.CANNOT_PARSE_EXPONENT),
    ("0xZZ", ErrorKind.CANNOT_PARSE_HEX_NUMBER),
    ("0b102", ErrorKind.CANNOT_PARSE_BINARY_NUMBER),
    ("$ + 1", ErrorKind.ZERO_LENGTH_VARIABLE),
    ("'abc", ErrorKind.CANNOT_PARSE_QUOTED_VARIABLE),
    ("2 ↑ 3", ErrorKind.CANNOT_PARSE_OPERATOR),
    ("2 @ 3", ErrorKind.UNKNOWN_OPERATOR),
]


@pytest.mark.parametrize("text,kind", TOKEN_ERRORS, ids=[c[0] for c in TOKEN_ERRORS])
def test_tokenizer_errors(text, kind):
    with pytest.raises(MathParserError) as info:
        tokenize(text)
    assert info.value.kind is kind


def test_unknown_operator_names_the_character():
    with pytest.raises(MathParserError) as info:
        tokenize("2 @ 3")
    assert info.value.range == (2, 3)
    assert "'@'" in info.value.description


# ---------- parser ------------------------------------------------------------

TREE_CASES = [
    ("1 + 2*3", "add(1, multiply(2, 3))"),
    ("(1 + 2)*3", "multiply(add(1, 2), 3)"),
    ("1 - 2 - 3", "subtract(subtract(1, 2), 3)"),
    ("2^3^2", "pow(2, pow(3, 2))"),
    ("-2^2", "negate(pow(2, 2))"),
    ("2^-1", "pow(2, negate(1))"),
    ("5!", "factorial(5)"),
    ("5!!", "factorial2(5)"),
    ("2pi", "implicitmultiply(2, pi)"),
    ("2(3 + 4)", "implicitmultiply(2, add(3, 4))"),
    ("7 % 3", "mod(7, 3)"),
    ("200 + 10%", "add(200, percent(10))"),
    ("90°", "dtor(90)"),
    ("√16", "sqrt(16)"),
    ("1 < 2 && 3 >= 3", "l_and(l_lt(1, 2), l_gtoe(3, 3))"),
    ("1 || 0 && 0", "l_or(1, l_and(0, 0))"),
    ("6 & 3 | 8", "or(and(6, 3), 8)"),
    ("1 << 4 + 1", "lshift(1, add(4, 1))"),
    ("1 xor 3", "xor(1, 3)"),
    ("2 ↑↑ 3", "tetr(2, 3)"),
    ("max(1, 2, 3)", "max(1, 2, 3)"),
    ("pi()", "pi()"),
    ("$a * $b", "multiply($a, $b)"),
]


@pytest.mark.parametrize("text,tree", TREE_CASES, ids=[c[0] for c in TREE_CASES])
def test_precedence(text, tree):
    assert describe_tree(parse(text)) == tree


def test_call_ranges():
    node = parse("unknownFn(1)")
    assert isinstance(node, FunctionNode)
    assert node.range == (0, 12)
    assert node.name_range == (0, 9)


def test_operator_node_covers_operands():
    node = parse("10 + 2")
    assert node.range == (0, 6)
    assert node.name_range == (3, 4)


def test_parents_are_linked():
    node = parse("200 + 10%")
    percent = node.arguments[1]
    assert percent.parent is node


PARSE_ERRORS = [
    ("", ErrorKind.INVALID_FORMAT, None),
    ("1 +", ErrorKind.MISSING_RIGHT_OPERAND, (2, 3)),
    ("* 2", ErrorKind.MISSING_LEFT_OPERAND, (0, 1)),
    ("(1 + 2", ErrorKind.MISSING_CLOSE_PARENTHESIS, None),
    ("1 + 2)", ErrorKind.MISSING_OPEN_PARENTHESIS, (5, 6)),
    ("()", ErrorKind.EMPTY_GROUP, (0, 2)),
    ("max(1,,2)", ErrorKind.EMPTY_FUNCTION_ARGUMENT, None),
    ("max(1,)", ErrorKind.EMPTY_FUNCTION_ARGUMENT, None),
]


@pytest.mark.parametrize("text,kind,span", PARSE_ERRORS, ids=[repr(c[0]) for c in PARSE_ERRORS])
def test_parse_errors(text, kind, span):
    with pytest.raises(MathParserError) as info:
        parse(text)
    assert info.value.kind is kind
    if span is not None:
        assert info.value.range == span


def test_missing_operand_names_the_operator():
    with pytest.raises(MathParserError) as info:
        parse("3 *")
    assert info.value.description == "Missing right operand '*'"
