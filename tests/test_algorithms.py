# tests/test_algorithms.py
"""
Numeric algorithms (Computation) checked against sympy.

Exact integer results must match bit for bit; approximations must agree to
the requested number of decimals.

Run: pytest -v
"""

from __future__ import annotations

import pytest
import sympy
from sympy.functions.combinatorial.numbers import stirling

from arbcalc.algorithms import Computation, exact_root
from arbcalc.cancellation import CancellationToken
from arbcalc.context import AngleMode, EvaluationParameters
from arbcalc.rational import FALSE, INFINITY, TRUE, Rational

DECIMALS = 20

# ---------- helpers -----------------------------------------------------------


def reference(expr) -> Rational:
    return Rational.parse(str(sympy.N(expr, 60)))


def assert_close(value: Rational, expected, decimals: int = DECIMALS - 1) -> None:
    assert not value.is_nan, "unexpected NaN"
    target = expected if isinstance(expected, Rational) else reference(expected)
    scale = max(1, abs(int(target)))
    assert abs(value - target) < Rational(scale, 10 ** decimals), value.description()


@pytest.fixture
def compute() -> Computation:
    return Computation(EvaluationParameters(decimals=DECIMALS), CancellationToken())


R = sympy.Rational

# ---------- roots -------------------------------------------------------------


def test_exact_root():
    assert exact_root(Rational(9, 4), 2) == Rational(3, 2)
    assert exact_root(Rational(2), 2) is None
    assert exact_root(Rational(-8), 3) is None


EXACT_ROOTS = [
    (Rational(16), 2, Rational(4)),
    (Rational(9, 4), 2, Rational(3, 2)),
    (Rational(-27), 3, Rational(-3)),
    (Rational(1, 32), 5, Rational(1, 2)),
    (Rational(0), 4, Rational(0)),
]


@pytest.mark.parametrize("x,n,expected", EXACT_ROOTS, ids=[f"{c[0]}^(1/{c[1]})" for c in EXACT_ROOTS])
def test_perfect_powers_stay_exact(compute, x, n, expected):
    value = compute.root(x, n)
    assert value == expected
    assert not value.approximate


@pytest.mark.parametrize("x,n", [(2, 2), (10, 3), (7, 5), (12345678901234567890, 2)])
def test_irrational_roots(compute, x, n):
    value = compute.root(Rational(x), n)
    assert value.approximate
    assert_close(value, sympy.root(x, n))


def test_root_below_one(compute):
    assert_close(compute.sqrt(Rational(1, 3)), sympy.sqrt(R(1, 3)))


def test_even_root_of_negative_is_nan(compute):
    assert compute.sqrt(Rational(-4)).is_nan


# ---------- factorial / gamma -------------------------------------------------


def test_factorial_exact(compute):
    assert compute.factorial(Rational(25)) == Rational(int(sympy.factorial(25)))


def test_factorial_poles(compute):
    assert compute.factorial(Rational(-3)).is_nan


def test_factorial_of_fraction_uses_gamma(compute):
    value = compute.factorial(Rational(1, 2))
    assert value.approximate
    # Γ(3/2) = √π/2; the approximation is good to about ten places
    assert_close(value, sympy.gamma(R(3, 2)), decimals=9)


def test_factorial_overflows_to_infinity():
    small = Computation(EvaluationParameters(decimals=10, max_digits=100), CancellationToken())
    assert small.factorial(Rational(1000)) == INFINITY


@pytest.mark.parametrize("n", [0, 1, 7, 12])
def test_double_factorial(compute, n):
    assert compute.double_factorial(Rational(n)) == Rational(int(sympy.factorial2(n)))


# ---------- sequences ---------------------------------------------------------


@pytest.mark.parametrize("n", [0, 1, 2, 63, 64, 100, 1001])
def test_fibonacci(compute, n):
    assert compute.fibonacci(n) == Rational(int(sympy.fibonacci(n)))


def test_fibonacci_negative_index(compute):
    assert compute.fibonacci(-8) == Rational(-21)
    assert compute.fibonacci(-7) == Rational(13)


@pytest.mark.parametrize("k", [*range(-40, 41, 3), 64, 65, 500, -333, 1001])
def test_fibonacci_doubling_identity(compute, k):
    fk, fk_1 = compute.fibonacci(k), compute.fibonacci(k - 1)
    assert compute.fibonacci(2 * k) == fk * (2 * fk_1 + fk)


@pytest.mark.parametrize("n", range(1, 30))
def test_fibonacci_reflection(compute, n):
    sign = 1 if n % 2 else -1
    assert compute.fibonacci(-n) == sign * compute.fibonacci(n)


@pytest.mark.parametrize("n", [0, 1, 10, 90])
def test_lucas(compute, n):
    assert compute.lucas(n) == Rational(int(sympy.lucas(n)))


def test_lucas_negative_index(compute):
    assert compute.lucas(-3) == Rational(-4)
    assert compute.lucas(-4) == Rational(7)


@pytest.mark.parametrize("n", [0, 5, 30])
def test_catalan(compute, n):
    assert compute.catalan(n) == Rational(int(sympy.catalan(n)))


@pytest.mark.parametrize("n", [0, 10, 19, 20, 40])
def test_bell(compute, n):
    assert compute.bell(n) == Rational(int(sympy.bell(n)))


# ---------- combinatorics -----------------------------------------------------

COMBINATORIAL_CASES = [(n, k) for n in (0, 1, 5, 12, 30) for k in (0, 1, 2, 4, 11)]


@pytest.mark.parametrize("n,k", COMBINATORIAL_CASES)
def test_binomial(compute, n, k):
    assert compute.binomial(Rational(n), k) == Rational(int(sympy.binomial(n, k)))


@pytest.mark.parametrize("n", [0, 1, 2, 7, 20, 53, 100])
def test_binomial_symmetry(compute, n):
    for k in range(n + 1):
        assert compute.binomial(Rational(n), k) == compute.binomial(Rational(n), n - k)


def test_binomial_of_fraction(compute):
    assert compute.binomial(Rational(1, 2), 2) == Rational(-1, 8)


def test_variations(compute):
    assert compute.variations(Rational(10), 3) == Rational(720)
    assert compute.variations(Rational(3), 5) == Rational(0)


@pytest.mark.parametrize("n,k", COMBINATORIAL_CASES)
def test_stirling_first_kind(compute, n, k):
    assert compute.stirling1(n, k) == Rational(int(stirling(n, k, kind=1)))


@pytest.mark.parametrize("n,k", COMBINATORIAL_CASES)
def test_stirling_second_kind(compute, n, k):
    assert compute.stirling2(n, k) == Rational(int(stirling(n, k)))


LAH_CASES = [(1, 1, 1), (4, 1, 24), (5, 2, 240), (6, 3, 1200), (7, 6, 42), (3, 5, 0)]


@pytest.mark.parametrize("n,k,expected", LAH_CASES)
def test_lah(compute, n, k, expected):
    assert compute.lah(n, k) == Rational(expected)


# ---------- number theory -----------------------------------------------------


def test_gcd_lcm(compute):
    assert compute.gcd(12, -18) == 6
    assert compute.lcm(4, 6) == 12
    assert compute.lcm(0, 6) == 0


def test_is_prime(compute):
    assert compute.is_prime(Rational(2 ** 61 - 1)) == TRUE
    assert compute.is_prime(Rational(1)) == FALSE
    assert compute.is_prime(Rational(7, 2)) == FALSE


@pytest.mark.parametrize("n,expected", [(1, 0), (7, 1), (12, 16), (-12, -16), (2 ** 10, 10 * 2 ** 9)])
def test_arithmetic_derivative(compute, n, expected):
    assert compute.derivative(Rational(n)) == Rational(expected)


def test_derivative_of_fraction(compute):
    # (1/2)' = (0·2 - 1·1)/4
    assert compute.derivative(Rational(1, 2)) == Rational(-1, 4)


def test_digit_count(compute):
    assert compute.digit_count(Rational(12345)) == Rational(5)
    assert compute.digit_count(Rational(-1, 4)) == Rational(3)


# ---------- powers ------------------------------------------------------------


def test_integer_power_is_exact(compute):
    assert compute.power(Rational(2, 3), Rational(10)) == Rational(1024, 59049)
    assert compute.power(Rational(2), Rational(-3)) == Rational(1, 8)


def test_rational_exponent_with_exact_root(compute):
    value = compute.power(Rational(8), Rational(2, 3))
    assert value == Rational(4)
    assert not value.approximate


def test_rational_exponent_approximation(compute):
    assert_close(compute.power(Rational(2), Rational(1, 3)), sympy.cbrt(2))
    assert_close(compute.power(Rational(10), Rational(7, 10)), sympy.Integer(10) ** R(7, 10), decimals=17)


def test_negative_base_odd_root(compute):
    assert compute.power(Rational(-8), Rational(1, 3)) == Rational(-2)
    assert compute.power(Rational(-8), Rational(1, 2)).is_nan


def test_huge_power_becomes_infinity():
    small = Computation(EvaluationParameters(decimals=10, max_digits=1000), CancellationToken())
    assert small.power(Rational(10), Rational(10 ** 6)) == INFINITY


def test_modular_power(compute):
    assert compute.modular_power(4, 13, 497) == Rational(445)
    assert compute.modular_power(3, 5, 0).is_nan


def test_tetration(compute):
    assert compute.tetration(Rational(2), 3) == Rational(16)
    assert compute.tetration(Rational(3), 0) == Rational(1)


# ---------- exp / ln / log ----------------------------------------------------


@pytest.mark.parametrize("x", [R(1), R(-3), R(10), R(1, 7), R(123, 4)])
def test_exp(compute, x):
    assert_close(compute.exp(Rational(x.p, x.q)), sympy.exp(x))


def test_constants(compute):
    assert_close(compute.e(), sympy.E)
    assert_close(compute.pi(), sympy.pi)
    assert_close(compute.ln2(), sympy.log(2))
    assert_close(compute.ln10(), sympy.log(10))
    assert_close(compute.phi(), sympy.GoldenRatio)


@pytest.mark.parametrize("x", [R(2), R(1, 3), R(1000), R(7, 3), R(10 ** 30 + 1)])
def test_ln(compute, x):
    assert_close(compute.ln(Rational(x.p, x.q)), sympy.log(x))


def test_ln_domain(compute):
    assert compute.ln(Rational(-1)).is_nan
    assert compute.ln(Rational(0)).is_infinite


def test_exact_logarithms(compute):
    for x, base, expected in [(Rational(1000), None, 3), (Rational(8), Rational(2), 3),
                              (Rational(1, 100), None, -2)]:
        value = compute.log(x, base)
        assert value == Rational(expected)
        assert not value.approximate


def test_inexact_logarithm(compute):
    assert_close(compute.log(Rational(2)), sympy.log(2, 10))


def test_expm1_near_zero(compute):
    assert_close(compute.expm1(Rational(1, 10 ** 6)), sympy.exp(R(1, 10 ** 6)) - 1, decimals=25)


# ---------- trigonometry ------------------------------------------------------

TRIG_POINTS = [R(1, 2), R(1), R(-2), R(3), R(100)]


@pytest.mark.parametrize("x", TRIG_POINTS)
def test_sin_cos(compute, x):
    value = Rational(x.p, x.q)
    assert_close(compute.sin(value), sympy.sin(x), decimals=DECIMALS - 2)
    assert_close(compute.cos(value), sympy.cos(x), decimals=DECIMALS - 2)


def test_tan(compute):
    assert_close(compute.tan(Rational(1, 3)), sympy.tan(R(1, 3)), decimals=DECIMALS - 2)


def test_special_sines_are_exact_in_degrees():
    deg = Computation(EvaluationParameters(decimals=DECIMALS, angle_mode=AngleMode.DEGREES), CancellationToken())
    assert deg.sin(Rational(30)) == Rational(1, 2)
    assert not deg.sin(Rational(30)).approximate
    assert deg.sin(Rational(270)) == Rational(-1)
    assert deg.cos(Rational(60)) == Rational(1, 2)


def test_sine_of_pi_multiple(compute):
    assert compute.sin(compute.pi() / 6) == Rational(1, 2)
    assert compute.sin(compute.pi()) == Rational(0)


@pytest.mark.parametrize("x", [R(1, 2), R(2), R(-3, 2)])
def test_hyperbolic(compute, x):
    value = Rational(x.p, x.q)
    assert_close(compute.sinh(value), sympy.sinh(x))
    assert_close(compute.cosh(value), sympy.cosh(x))
    assert_close(compute.tanh(value), sympy.tanh(x))
    assert_close(compute.asinh(value), sympy.asinh(x))


def test_inverse_hyperbolic_domains(compute):
    assert_close(compute.acosh(Rational(3)), sympy.acosh(3))
    assert_close(compute.atanh(Rational(1, 2)), sympy.atanh(R(1, 2)))
    assert compute.acosh(Rational(1, 2)).is_nan
    assert compute.atanh(Rational(2)).is_nan
    assert compute.atanh(Rational(1)) == INFINITY


# ---------- cancellation ------------------------------------------------------


def test_cancelled_token_yields_nan():
    token = CancellationToken()
    token.request_cancel()
    cancelled = Computation(EvaluationParameters(decimals=DECIMALS), token)
    assert cancelled.factorial(Rational(500)).is_nan
    assert cancelled.sqrt(Rational(2)).is_nan
    assert cancelled.bell(60).is_nan
