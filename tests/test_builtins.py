# tests/test_builtins.py
"""
Builtin function table: every category evaluated through the full
parse → evaluate pipeline.

Exact results must be exact (no approximation flag); irrational results are
compared with sympy to the requested precision.

Run: pytest -v
"""

from __future__ import annotations

import pytest
import sympy

from arbcalc.context import AngleMode, EvaluationParameters
from arbcalc.errors import ErrorKind, EvaluationError
from arbcalc.evaluator import evaluate
from arbcalc.factorization import Factorization
from arbcalc.rational import FALSE, TRUE, Rational

DECIMALS = 20
PARAMS = EvaluationParameters(decimals=DECIMALS)
DEGREES = EvaluationParameters(decimals=DECIMALS, angle_mode=AngleMode.DEGREES)

# ---------- helpers -----------------------------------------------------------


def run(expression: str, params: EvaluationParameters = PARAMS):
    value = evaluate(expression, parameters=params)
    assert not isinstance(value, EvaluationError), f"{expression}: {value.description}"
    return value


def reference(expr) -> Rational:
    return Rational.parse(str(sympy.N(expr, 60)))


def _q(text: str) -> Rational:
    return Rational.parse(text)


# ---------- table discovery ---------------------------------------------------

EXPECTED_CATEGORIES = {
    "Aggregate", "Arithmetic", "Bitwise", "Constants", "Hyperbolic", "Logical",
    "Roots & Logarithms", "Rounding & Digits", "Sequences & Number Theory", "Trigonometric",
}


def test_categories(table):
    assert set(table.by_category()) == EXPECTED_CATEGORIES


def test_aliases_share_one_record(table):
    assert table.get("choose") is table.get("C") is table.get("binomial")
    assert table.get("pi") is table.get("π")
    assert table.get("multiply") is table.get("implicitmultiply")


def test_no_duplicate_names(table):
    assert table.duplicates == ()


def test_operator_targets_exist(table):
    from arbcalc.parser import BINARY_LEVELS, POSTFIX_OPERATORS, POWER_OPERATORS, PREFIX_OPERATORS

    targets = {name for level in BINARY_LEVELS for name in level.values()}
    targets |= set(POWER_OPERATORS.values()) | set(POSTFIX_OPERATORS.values())
    targets |= {name for name in PREFIX_OPERATORS.values() if name}
    missing = sorted(name for name in targets if name not in table)
    assert not missing, missing


# ---------- exact results -----------------------------------------------------

EXACT_CASES = [
    # arithmetic
    ("2 + 3*4", "14"),
    ("1/3 + 1/6", "1/2"),
    ("2^10", "1024"),
    ("2**-2", "1/4"),
    ("(-8)^(1/3)", "-2"),
    ("8^(2/3)", "4"),
    ("abs(-5/3)", "5/3"),
    ("negate(4)", "-4"),
    ("5!", "120"),
    ("7!!", "105"),
    ("0!!", "1"),
    ("pow(4, 13, 497)", "445"),
    ("2↑↑3", "16"),
    ("tetration(2, 0)", "1"),
    ("mod(10, 4)", "2"),
    ("modulo(-7, 3)", "2"),
    ("7 % 3", "1"),
    ("50%", "1/2"),
    ("200 + 10%", "220"),
    ("200 - 10%", "180"),
    ("10% + 200", "2001/10"),
    ("2(3 + 4)", "14"),
    ("1½ × 2", "3"),
    ("0x10 + 0b11 + 0o7", "26"),
    ("6 ÷ 4", "3/2"),
    ("1e3 − 1", "999"),
    # roots & logarithms
    ("sqrt(16)", "4"),
    ("√(9/4)", "3/2"),
    ("cbrt(-27)", "-3"),
    ("∛8", "2"),
    ("nthroot(4, 81)", "3"),
    ("nthroot(3, -1/8)", "-1/2"),
    ("log(1000)", "3"),
    ("log(2, 1024)", "10"),
    ("log2(1/8)", "-3"),
    ("lb(64)", "6"),
    ("ln(1)", "0"),
    ("exp(0)", "1"),
    # bitwise
    ("6 & 3", "2"),
    ("6 | 3", "7"),
    ("6 xor 3", "5"),
    ("6 ⊕ 3", "5"),
    ("xor(12, 10)", "6"),
    ("~5", "-6"),
    ("1 << 10", "1024"),
    ("1024 >> 3", "128"),
    ("lshift(3, 2)", "12"),
    ("rshift(-16, 2)", "-4"),
    # aggregate
    ("sum(1, 2, 3)", "6"),
    ("∑(1/2, 1/3)", "5/6"),
    ("product(2, 3, 4)", "24"),
    ("∏(1/2, 4)", "2"),
    ("count(1, 2, 3, 4)", "4"),
    ("min(3, -1, 2)", "-1"),
    ("max(3, -1, 2)", "3"),
    ("average(1, 2, 3, 4)", "5/2"),
    ("mean(2, 4)", "3"),
    ("median(5, 1, 3)", "3"),
    ("median(4, 1, 3, 2)", "5/2"),
    ("stddev(2, 4, 4, 4, 5, 5, 7, 9)", "2"),
    # rounding & digits
    ("ceil(7/2)", "4"),
    ("ceil(-7/2)", "-3"),
    ("floor(-7/2)", "-4"),
    ("trunc(-7/2)", "-3"),
    ("round(5/2)", "3"),
    ("round(-5/2)", "-3"),
    ("round(2/3, 2)", "67/100"),
    ("digits(12345)", "5"),
    ("digits(-1/4)", "3"),
    ("decimal(1/4, 5)", "1/4"),
    # sequences & number theory
    ("fibonacci(10)", "55"),
    ("F(-8)", "-21"),
    ("lucas(5)", "11"),
    ("L(0)", "2"),
    ("catalan(5)", "42"),
    ("bell(5)", "52"),
    ("B(3)", "5"),
    ("choose(10, 3)", "120"),
    ("C(5, 7)", "0"),
    ("binomial(52, 5)", "2598960"),
    ("P(10, 3)", "720"),
    ("s(4, 2)", "11"),
    ("StirlingS1(5, 5)", "1"),
    ("S(4, 2)", "7"),
    ("StirlingS2(10, 3)", "9330"),
    ("lah(5, 2)", "240"),
    ("gcd(12, 18, 27)", "3"),
    ("gcd(-4, 6)", "2"),
    ("lcm(4, 6, 10)", "60"),
    ("derivative(12)", "16"),
    # logical values used arithmetically
    ("true + 1", "2"),
    ("if(1 < 2, 10, 20)", "10"),
    ("if(false, 10, 20)", "20"),
    ("l_if(0, 1/0, 3)", "3"),
    # trigonometry at exact points
    ("sin(0)", "0"),
    ("cos(0)", "1"),
    ("sec(0)", "1"),
    ("sinh(0)", "0"),
    ("tanh(0)", "0"),
    ("asinh(0)", "0"),
]


@pytest.mark.parametrize("expression,expected", EXACT_CASES, ids=[c[0] for c in EXACT_CASES])
def test_exact(expression, expected):
    value = run(expression)
    assert value == _q(expected)
    assert not value.approximate


DEGREE_CASES = [
    ("sin(30)", "1/2"),
    ("sin(150)", "1/2"),
    ("sin(-90)", "-1"),
    ("cos(60)", "1/2"),
    ("cos(180)", "-1"),
    ("csc(30)", "2"),
    ("versin(60)", "1/2"),
    ("vercosin(60)", "3/2"),
    ("coversin(90)", "0"),
    ("covercosin(30)", "3/2"),
    ("haversin(180)", "1"),
    ("havercosin(120)", "1/4"),
    ("hacoversin(210)", "3/4"),
    ("hacovercosin(-30)", "1/4"),
    ("excsc(90)", "0"),
    ("exsec(0)", "0"),
    ("crd(60)", "1"),
]


@pytest.mark.parametrize("expression,expected", DEGREE_CASES, ids=[c[0] for c in DEGREE_CASES])
def test_exact_in_degrees(expression, expected):
    value = run(expression, DEGREES)
    assert value == _q(expected)
    assert not value.approximate


LOGICAL_CASES = [
    ("1 < 2", TRUE),
    ("2 <= 2", TRUE),
    ("2 ≤ 1", FALSE),
    ("3 > 4", FALSE),
    ("3 >= 4", FALSE),
    ("4 ≥ 4", TRUE),
    ("1 == 1", TRUE),
    ("1/2 = 2/4", TRUE),
    ("1 != 2", TRUE),
    ("1 ≠ 1", FALSE),
    ("true && false", FALSE),
    ("1 ∧ 1", TRUE),
    ("true || false", TRUE),
    ("0 ∨ 0", FALSE),
    ("!0", TRUE),
    ("¬true", FALSE),
    ("l_impl(1, 0)", FALSE),
    ("l_implication(0, 0)", TRUE),
    ("l_eqv(0, 0)", TRUE),
    ("l_equivalence(1, 0)", FALSE),
    ("yes", TRUE),
    ("no", FALSE),
    ("prime(97)", TRUE),
    ("p(91)", FALSE),
    ("isprime(2^61 - 1)", TRUE),
    ("1/0 == 1/0", TRUE),
    ("1/0 < 1", FALSE),
    ("1/0 > 1", FALSE),
]


@pytest.mark.parametrize("expression,expected", LOGICAL_CASES, ids=[c[0] for c in LOGICAL_CASES])
def test_logical(expression, expected):
    value = run(expression)
    assert value.is_boolean
    assert value == expected


NAN_CASES = [
    "1/0", "sqrt(-4)", "0^0", "(-1)!", "acosh(1/2)", "atanh(2)", "max(1, 1/0)", "median(2, 0/0)",
    "ln(-1)", "log(-5)", "log2(-8)", "lb(-1/2)", "log(0, 5)", "log(-2, 8)", "log(1, 8)",
]


@pytest.mark.parametrize("expression", NAN_CASES)
def test_nan(expression):
    assert run(expression).is_nan


def test_factor_returns_factorization():
    value = run("factor(360)")
    assert isinstance(value, Factorization)
    assert value.description() == "2³ × 3² × 5"


def test_factor_accepts_true():
    value = run("factor(true)")
    assert isinstance(value, Factorization)
    assert value.description() == "1"


# ---------- approximations ----------------------------------------------------

SR = sympy.Rational
APPROX_CASES = [
    ("sqrt(2)", sympy.sqrt(2)),
    ("pi", sympy.pi),
    ("π/4", sympy.pi / 4),
    ("pi_2", sympy.pi / 2),
    ("tau_4", sympy.pi / 2),
    ("pi_4", sympy.pi / 4),
    ("tau", 2 * sympy.pi),
    ("τ", 2 * sympy.pi),
    ("e", sympy.E),
    ("phi", sympy.GoldenRatio),
    ("sqrt2", sympy.sqrt(2)),
    ("ln2", sympy.log(2)),
    ("ln10", sympy.log(10)),
    ("log2e", 1 / sympy.log(2)),
    ("log10e", 1 / sympy.log(10)),
    ("2pi", 2 * sympy.pi),
    ("exp(2)", sympy.exp(2)),
    ("ln(3)", sympy.log(3)),
    ("log(3, 7)", sympy.log(7) / sympy.log(3)),
    ("log(5)", sympy.log(5, 10)),
    ("2^(1/3)", sympy.cbrt(2)),
    ("2^0.5", sympy.sqrt(2)),
    ("sin(1)", sympy.sin(1)),
    ("cos(2)", sympy.cos(2)),
    ("tan(1/2)", sympy.tan(SR(1, 2))),
    ("cot(1)", sympy.cot(1)),
    ("sec(1)", sympy.sec(1)),
    ("csc(1)", sympy.csc(1)),
    ("crd(1)", 2 * sympy.sin(SR(1, 2))),
    ("exsec(1)", sympy.sec(1) - 1),
    ("coversin(1)", 1 - sympy.sin(1)),
    ("haversin(1)", (1 - sympy.cos(1)) / 2),
    ("sinh(1)", sympy.sinh(1)),
    ("cosh(1)", sympy.cosh(1)),
    ("tanh(1)", sympy.tanh(1)),
    ("coth(2)", sympy.coth(2)),
    ("sech(1)", sympy.sech(1)),
    ("csch(1)", sympy.csch(1)),
    ("asinh(1)", sympy.asinh(1)),
    ("acosh(2)", sympy.acosh(2)),
    ("atanh(1/3)", sympy.atanh(SR(1, 3))),
    ("acsch(2)", sympy.asinh(SR(1, 2))),
    ("asech(1/2)", sympy.acosh(2)),
    ("acoth(3)", sympy.atanh(SR(1, 3))),
    ("90°", sympy.pi / 2),
    ("dtor(45)", sympy.pi / 4),
    ("rtod(1)", 180 / sympy.pi),
    ("stddev(1, 2, 4)", sympy.sqrt(SR(14, 9))),
]


@pytest.mark.parametrize("expression,expected", APPROX_CASES, ids=[c[0] for c in APPROX_CASES])
def test_approximation(expression, expected):
    value = run(expression)
    assert value.approximate
    target = reference(expected)
    scale = max(1, abs(int(target)))
    assert abs(value - target) < Rational(scale, 10 ** (DECIMALS - 2)), value.description()


def test_gamma_for_fractions():
    value = run("(1/2)!")
    assert value.approximate
    assert abs(value - reference(sympy.gamma(SR(3, 2)))) < Rational(1, 10 ** 9)


def test_decimal_truncates_and_marks_approximation():
    value = run("decimal(2/3, 3)")
    assert value == Rational(666, 1000)
    assert value.approximate


# ---------- argument errors ---------------------------------------------------

ERROR_CASES = [
    ("sqrt()", ErrorKind.INVALID_ARGUMENTS),
    ("sqrt(1, 2)", ErrorKind.INVALID_ARGUMENTS),
    ("pi(1)", ErrorKind.INVALID_ARGUMENTS),
    ("gcd(4)", ErrorKind.INVALID_ARGUMENTS),
    ("if(1, 2)", ErrorKind.INVALID_ARGUMENTS),
    ("pow(2, 1/2, 5)", ErrorKind.INVALID_ARGUMENTS),
    ("factor(360) + 1", ErrorKind.INVALID_ARGUMENTS),
    ("fibonacci(1/2)", ErrorKind.ARGUMENT_NOT_INTEGER),
    ("1.5 & 1", ErrorKind.ARGUMENT_NOT_INTEGER),
    ("factor(1/2)", ErrorKind.ARGUMENT_NOT_INTEGER),
    ("choose(5, 1/2)", ErrorKind.ARGUMENT_NOT_INTEGER),
    ("catalan(-1)", ErrorKind.ARGUMENT_NOT_POSITIVE),
    ("1 << -1", ErrorKind.ARGUMENT_NOT_POSITIVE),
    ("nthroot(0, 8)", ErrorKind.ARGUMENT_NOT_POSITIVE),
    ("decimal(1/3, 0)", ErrorKind.ARGUMENT_NOT_POSITIVE),
    ("round(1/3, -1)", ErrorKind.ARGUMENT_NOT_POSITIVE),
    ("(-1)!!", ErrorKind.ARGUMENT_NOT_POSITIVE),
    ("true && 2", ErrorKind.ARGUMENT_NOT_LOGICAL_VALUE),
    ("if(2, 1, 0)", ErrorKind.ARGUMENT_NOT_LOGICAL_VALUE),
    ("csc(0)", ErrorKind.DIVIDE_BY_ZERO),
    ("cotan(0)", ErrorKind.DIVIDE_BY_ZERO),
    ("excsc(0)", ErrorKind.DIVIDE_BY_ZERO),
    ("csch(0)", ErrorKind.DIVIDE_BY_ZERO),
    ("coth(0)", ErrorKind.DIVIDE_BY_ZERO),
    ("acsch(0)", ErrorKind.DIVIDE_BY_ZERO),
    ("asech(0)", ErrorKind.DIVIDE_BY_ZERO),
    ("acoth(0)", ErrorKind.DIVIDE_BY_ZERO),
]


@pytest.mark.parametrize("expression,kind", ERROR_CASES, ids=[c[0] for c in ERROR_CASES])
def test_argument_errors(expression, kind):
    err = evaluate(expression, parameters=PARAMS)
    assert isinstance(err, EvaluationError)
    assert err.kind is kind


def test_argument_error_points_at_the_call():
    err = evaluate("1 + sqrt(1, 2)", parameters=PARAMS)
    assert err.source_range == (4, 14)
