# tests/test_series.py
"""
Truncated series against high-precision sympy values.

Run: pytest -v
"""

from __future__ import annotations

import pytest
import sympy

from arbcalc.cancellation import CancellationToken
from arbcalc.rational import ONE, Rational
from arbcalc.series import Expansion, TaylorSeries


def reference(expr) -> Rational:
    return Rational.parse(str(sympy.N(expr, 80)))


def assert_close(value: Rational, expected: Rational, decimals: int) -> None:
    assert not value.is_nan
    assert abs(value - expected) < Rational(1, 10 ** decimals), value.description()


SERIES_CASES = [
    (Expansion.SIN, Rational(1, 2), sympy.sin(sympy.Rational(1, 2))),
    (Expansion.SIN, Rational(-3, 2), sympy.sin(sympy.Rational(-3, 2))),
    (Expansion.LN, Rational(1, 2), sympy.log(sympy.Rational(1, 2))),
    (Expansion.LN, Rational(9, 10), sympy.log(sympy.Rational(9, 10))),
    (Expansion.EXP, Rational(1, 3), sympy.exp(sympy.Rational(1, 3))),
    (Expansion.EXP, Rational(-1, 2), sympy.exp(sympy.Rational(-1, 2))),
    (Expansion.EXPM1, Rational(1, 1000), sympy.exp(sympy.Rational(1, 1000)) - 1),
]


@pytest.mark.parametrize("expansion,x,expected", SERIES_CASES,
                         ids=[f"{c[0].value}({c[1]})" for c in SERIES_CASES])
@pytest.mark.parametrize("decimals", [10, 40])
def test_series_precision(expansion, x, expected, decimals):
    value = TaylorSeries(expansion, decimals).evaluate(x)
    assert value.approximate
    assert_close(value, reference(expected), decimals)


def test_pi_digits():
    value = TaylorSeries(Expansion.PI, 60).evaluate()
    assert_close(value, reference(sympy.pi), 60)


def test_pi_cache_serves_shorter_requests():
    long = TaylorSeries(Expansion.PI, 50).evaluate()
    short = TaylorSeries(Expansion.PI, 15).evaluate()
    assert short.approximate
    assert abs(long - short) < Rational(1, 10 ** 15)


def test_ln_outside_convergence_range_is_nan():
    assert TaylorSeries(Expansion.LN, 10).evaluate(Rational(2)).is_nan
    assert TaylorSeries(Expansion.LN, 10).evaluate(Rational(0)).is_nan


def test_ln_of_one_is_zero():
    assert TaylorSeries(Expansion.LN, 10).evaluate(ONE) == 0


def test_missing_argument_is_nan():
    assert TaylorSeries(Expansion.SIN, 10).evaluate().is_nan
    assert TaylorSeries(Expansion.EXP, 10).evaluate(Rational.nan()).is_nan


def test_cancelled_series_is_nan():
    token = CancellationToken()
    token.request_cancel()
    assert TaylorSeries(Expansion.SIN, 20, token).evaluate(Rational(1, 3)).is_nan


def test_iteration_bound_grows_with_magnitude():
    series = TaylorSeries(Expansion.EXP, 20)
    assert series.iteration_bound(Rational(100)) > series.iteration_bound(Rational(1, 2))
    assert series.iteration_bound() >= 4 * series.working_digits
