# -----------------------------------------------------------------------------
#  hyperbolic.py
#  Hyperbolic functions, their reciprocals and inverses
# -----------------------------------------------------------------------------

from __future__ import annotations

from arbcalc.errors import ErrorKind
from arbcalc.functions import EvaluationState
from arbcalc.rational import ONE, Rational
from arbcalc.registry import builtin

CATEGORY = "Hyperbolic"


def _argument(state: EvaluationState) -> Rational:
    state.require_count(1)
    (x,) = state.default_arguments()
    return x


def _inverted(state: EvaluationState, value: Rational) -> Rational:
    if value.is_zero:
        raise state.error(ErrorKind.DIVIDE_BY_ZERO)
    return ONE / value


@builtin("sinh", category=CATEGORY, description="Hyperbolic sine")
def hyperbolic_sine(state: EvaluationState):
    return state.computation.sinh(_argument(state))


@builtin("cosh", category=CATEGORY, description="Hyperbolic cosine")
def hyperbolic_cosine(state: EvaluationState):
    return state.computation.cosh(_argument(state))


@builtin("tanh", category=CATEGORY, description="Hyperbolic tangent")
def hyperbolic_tangent(state: EvaluationState):
    return state.computation.tanh(_argument(state))


@builtin("csch", category=CATEGORY, description="Hyperbolic cosecant, 1/sinh")
def hyperbolic_cosecant(state: EvaluationState):
    return _inverted(state, state.computation.sinh(_argument(state)))


@builtin("sech", category=CATEGORY, description="Hyperbolic secant, 1/cosh")
def hyperbolic_secant(state: EvaluationState):
    return _inverted(state, state.computation.cosh(_argument(state)))


@builtin("cotanh", "coth", category=CATEGORY, description="Hyperbolic cotangent, 1/tanh")
def hyperbolic_cotangent(state: EvaluationState):
    return _inverted(state, state.computation.tanh(_argument(state)))


@builtin("asinh", "arsinh", category=CATEGORY, description="Inverse hyperbolic sine")
def area_sine(state: EvaluationState):
    return state.computation.asinh(_argument(state))


@builtin("acosh", "arcosh", category=CATEGORY, description="Inverse hyperbolic cosine (x ≥ 1)")
def area_cosine(state: EvaluationState):
    return state.computation.acosh(_argument(state))


@builtin("atanh", "artanh", category=CATEGORY, description="Inverse hyperbolic tangent (|x| ≤ 1)")
def area_tangent(state: EvaluationState):
    return state.computation.atanh(_argument(state))


@builtin("acsch", "arcsch", category=CATEGORY, description="Inverse hyperbolic cosecant, asinh(1/x)")
def area_cosecant(state: EvaluationState):
    return state.computation.asinh(_inverted(state, _argument(state)))


@builtin("asech", "arsech", category=CATEGORY, description="Inverse hyperbolic secant, acosh(1/x)")
def area_secant(state: EvaluationState):
    return state.computation.acosh(_inverted(state, _argument(state)))


@builtin("acotanh", "acoth", "arcoth", category=CATEGORY,
         description="Inverse hyperbolic cotangent, atanh(1/x)")
def area_cotangent(state: EvaluationState):
    return state.computation.atanh(_inverted(state, _argument(state)))
