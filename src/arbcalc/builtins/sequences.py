# -----------------------------------------------------------------------------
#  sequences.py
#  Integer sequences, combinatorial numbers and number theory
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Callable

from arbcalc.errors import ErrorKind
from arbcalc.factorization import Factorization
from arbcalc.functions import EvaluationState
from arbcalc.rational import Rational
from arbcalc.registry import builtin

CATEGORY = "Sequences & Number Theory"


def _index(state: EvaluationState, *, non_negative: bool = False) -> int:
    state.require_count(1)
    (n,) = state.integers(state.default_arguments(), non_negative=non_negative)
    return n


def _pair(state: EvaluationState, compute: Callable[[int, int], Rational]) -> Rational:
    state.require_count(2)
    n, k = state.integers(state.default_arguments(), non_negative=True)
    return compute(n, k)


@builtin("fibonacci", "F", category=CATEGORY, description="Fibonacci number F(n), also for negative n")
def fibonacci(state: EvaluationState):
    return state.computation.fibonacci(_index(state))


@builtin("lucas", "L", category=CATEGORY, description="Lucas number L(n)")
def lucas(state: EvaluationState):
    return state.computation.lucas(_index(state))


@builtin("catalan", category=CATEGORY, description="Catalan number C(2n, n)/(n + 1)")
def catalan(state: EvaluationState):
    return state.computation.catalan(_index(state, non_negative=True))


@builtin("bell", "B", category=CATEGORY, description="Bell number: partitions of an n-set")
def bell(state: EvaluationState):
    return state.computation.bell(_index(state, non_negative=True))


@builtin("choose", "C", "binomial", category=CATEGORY, description="Binomial coefficient C(n, k)")
def choose(state: EvaluationState):
    computation = state.computation
    return _pair(state, lambda n, k: computation.binomial(Rational(n), k))


@builtin("P", "variations", category=CATEGORY, description="k-permutations of n, n!/(n-k)!")
def variations(state: EvaluationState):
    computation = state.computation
    return _pair(state, lambda n, k: computation.variations(Rational(n), k))


@builtin("s", "StirlingS1", category=CATEGORY, description="Unsigned Stirling number of the first kind")
def stirling_cycles(state: EvaluationState):
    return _pair(state, state.computation.stirling1)


@builtin("S", "StirlingS2", category=CATEGORY, description="Stirling number of the second kind")
def stirling_partitions(state: EvaluationState):
    return _pair(state, state.computation.stirling2)


@builtin("lah", category=CATEGORY, description="Unsigned Lah number L(n, k)")
def lah(state: EvaluationState):
    return _pair(state, state.computation.lah)


@builtin("prime", "p", "isprime", category=CATEGORY, description="Primality test, true or false")
def prime(state: EvaluationState):
    state.require_count(1)
    (n,) = state.default_arguments()
    return state.computation.is_prime(n)


def _fold(state: EvaluationState, op: Callable[[int, int], int | None]) -> Rational:
    state.require_at_least(2)
    values = state.integers(state.default_arguments())
    acc = values[0]
    for value in values[1:]:
        acc = op(acc, value)
        if acc is None:
            return Rational.nan()
    return Rational(abs(acc))


@builtin("gcd", category=CATEGORY, description="Greatest common divisor")
def gcd(state: EvaluationState):
    return _fold(state, state.computation.gcd)


@builtin("lcm", category=CATEGORY, description="Least common multiple")
def lcm(state: EvaluationState):
    return _fold(state, state.computation.lcm)


@builtin("derivative", category=CATEGORY, description="Arithmetic derivative n' (p' = 1, (ab)' = a'b + ab')")
def derivative(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return state.computation.derivative(x)


@builtin("factor", category=CATEGORY, description="Prime factorization, e.g. 2³ × 3² × 5")
def factor(state: EvaluationState):
    state.require_count(1)
    (n,) = state.default_arguments()
    if not n.is_integer:
        raise state.error(ErrorKind.ARGUMENT_NOT_INTEGER)
    return Factorization(n.numerator).factor(state.token)
