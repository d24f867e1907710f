# -----------------------------------------------------------------------------
#  constants.py
#  Named constants. Irrational ones are computed to the working precision of
#  the evaluation and carry the approximation flag.
# -----------------------------------------------------------------------------

from __future__ import annotations

from arbcalc.functions import EvaluationState
from arbcalc.rational import ONE, Rational
from arbcalc.registry import builtin

CATEGORY = "Constants"


def _computation(state: EvaluationState):
    state.require_count(0)
    return state.computation


@builtin("true", "yes", category=CATEGORY, description="Logical true")
def true(state: EvaluationState):
    state.require_count(0)
    return Rational.boolean(True)


@builtin("false", "no", category=CATEGORY, description="Logical false")
def false(state: EvaluationState):
    state.require_count(0)
    return Rational.boolean(False)


@builtin("pi", "π", "tau_2", category=CATEGORY, description="π ≈ 3.14159")
def pi(state: EvaluationState):
    return _computation(state).pi()


@builtin("pi_2", "tau_4", category=CATEGORY, description="π/2")
def half_pi(state: EvaluationState):
    return _computation(state).pi() / 2


@builtin("pi_4", "tau_8", category=CATEGORY, description="π/4")
def quarter_pi(state: EvaluationState):
    return _computation(state).pi() / 4


@builtin("tau", "τ", category=CATEGORY, description="τ = 2π")
def tau(state: EvaluationState):
    return 2 * _computation(state).pi()


@builtin("e", category=CATEGORY, description="Euler's number ≈ 2.71828")
def euler(state: EvaluationState):
    return _computation(state).e()


@builtin("phi", "ϕ", category=CATEGORY, description="Golden ratio (1 + √5)/2")
def golden_ratio(state: EvaluationState):
    return _computation(state).phi()


@builtin("sqrt2", category=CATEGORY, description="√2")
def sqrt2(state: EvaluationState):
    return _computation(state).sqrt(Rational(2))


@builtin("ln2", category=CATEGORY, description="Natural logarithm of 2")
def ln2(state: EvaluationState):
    return _computation(state).ln2()


@builtin("ln10", category=CATEGORY, description="Natural logarithm of 10")
def ln10(state: EvaluationState):
    return _computation(state).ln10()


@builtin("log2e", category=CATEGORY, description="log₂ e = 1/ln 2")
def log2e(state: EvaluationState):
    return ONE / _computation(state).ln2()


@builtin("log10e", category=CATEGORY, description="log₁₀ e = 1/ln 10")
def log10e(state: EvaluationState):
    return ONE / _computation(state).ln10()
