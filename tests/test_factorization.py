# tests/test_factorization.py
"""
Wheel trial division and the Factorization result type.

Run: pytest -v
"""

from __future__ import annotations

import pytest

from arbcalc.cancellation import CancellationToken
from arbcalc.factorization import NAN_FACTOR, WHEEL_INCREMENTS, Factor, Factorization
from arbcalc.runtime import current


def test_wheel_covers_one_turn():
    assert len(WHEEL_INCREMENTS) == 48
    assert sum(WHEEL_INCREMENTS) == 210
    assert WHEEL_INCREMENTS[:4] == (2, 4, 2, 4)


FACTOR_CASES = [
    (360, [Factor(2, 3), Factor(3, 2), Factor(5)], "2³ × 3² × 5"),
    (-12, [Factor(-1), Factor(2, 2), Factor(3)], "-1 × 2² × 3"),
    (0, [Factor(0)], "0"),
    (1, [Factor(1)], "1"),
    (-1, [Factor(-1)], "-1"),
    (97, [Factor(97)], "97"),
    (2 ** 10, [Factor(2, 10)], "2¹⁰"),
    (11 * 13 * 13 * 209, [Factor(11, 2), Factor(13, 2), Factor(19)], "11² × 13² × 19"),
]


@pytest.mark.parametrize("n,factors,text", FACTOR_CASES, ids=[str(c[0]) for c in FACTOR_CASES])
def test_factor(n, factors, text):
    fac = Factorization(n).factor()
    assert fac.factors == factors
    assert fac.description() == text
    assert fac.is_complete


def test_two_large_primes():
    fac = Factorization(999_983 * 1_000_003).factor()
    assert fac.factors == [Factor(999_983), Factor(1_000_003)]


def test_product_reassembles_magnitude():
    for n in (360, -360, 2 ** 5 * 3 ** 4 * 7 * 101, 600_851_475_143):
        fac = Factorization(n).factor()
        assert fac.product() == abs(n)


def test_prime_powers_drop_sign_and_degenerate_factors():
    assert Factorization(-8).factor().prime_powers == [Factor(2, 3)]
    assert Factorization(1).factor().prime_powers == []


def test_cancelled_factorization_ends_with_nan():
    token = CancellationToken()
    token.request_cancel()
    fac = Factorization(360).factor(token)
    assert fac.factors[-1] == NAN_FACTOR
    assert fac.is_nan
    assert not fac.is_complete
    assert fac.description().endswith("NaN")


def test_factor_runs_once():
    fac = Factorization(360)
    assert fac.factor() is fac
    first = list(fac.factors)
    token = CancellationToken()
    token.request_cancel()
    assert fac.factor(token).factors == first


def test_equality():
    assert Factorization(12).factor() == Factorization(12).factor()
    assert Factorization(12).factor() != Factorization(18).factor()
    assert repr(Factorization(12).factor()) == "Factorization(12: 2² × 3)"


def test_large_prime_factors_are_written_in_full():
    m127 = 2 ** 127 - 1
    assert Factorization(m127).factor().description() == "170141183460469231731687303715884105727"
    fac = Factorization(3 * (2 ** 89 - 1)).factor()
    assert fac.description() == "3 × 618970019642690137449562111"


def test_debug_trace_goes_through_runtime(monkeypatch, capsys):
    monkeypatch.setattr(current(), "debug", True)
    Factorization(360).factor()
    assert "[factor] 360: 3 factor(s), complete" in capsys.readouterr().err
