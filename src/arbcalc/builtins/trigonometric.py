# -----------------------------------------------------------------------------
#  trigonometric.py
#  Circular functions and their historical relatives (versine, chord, ...).
#  Arguments follow the evaluation's angle mode.
# -----------------------------------------------------------------------------

from __future__ import annotations

from arbcalc.errors import ErrorKind
from arbcalc.functions import EvaluationState
from arbcalc.rational import ONE, Rational
from arbcalc.registry import builtin

CATEGORY = "Trigonometric"


def _argument(state: EvaluationState) -> Rational:
    state.require_count(1)
    (x,) = state.default_arguments()
    return x


def _reciprocal(state: EvaluationState, value: Rational) -> Rational:
    if value.is_zero:
        raise state.error(ErrorKind.DIVIDE_BY_ZERO)
    return ONE / value


@builtin("sin", category=CATEGORY, description="Sine")
def sine(state: EvaluationState):
    return state.computation.sin(_argument(state))


@builtin("cos", category=CATEGORY, description="Cosine")
def cosine(state: EvaluationState):
    return state.computation.cos(_argument(state))


@builtin("tan", category=CATEGORY, description="Tangent")
def tangent(state: EvaluationState):
    return state.computation.tan(_argument(state))


@builtin("csc", category=CATEGORY, description="Cosecant, 1/sin")
def cosecant(state: EvaluationState):
    return _reciprocal(state, state.computation.sin(_argument(state)))


@builtin("sec", category=CATEGORY, description="Secant, 1/cos")
def secant(state: EvaluationState):
    return _reciprocal(state, state.computation.cos(_argument(state)))


@builtin("cotan", "cot", category=CATEGORY, description="Cotangent, cos/sin")
def cotangent(state: EvaluationState):
    x = _argument(state)
    sin = state.computation.sin(x)
    if sin.is_zero:
        raise state.error(ErrorKind.DIVIDE_BY_ZERO)
    return state.computation.cos(x) / sin


@builtin("versin", "vers", "ver", category=CATEGORY, description="Versed sine, 1 - cos")
def versine(state: EvaluationState):
    return 1 - state.computation.cos(_argument(state))


@builtin("vercosin", "vercos", category=CATEGORY, description="Versed cosine, 1 + cos")
def vercosine(state: EvaluationState):
    return 1 + state.computation.cos(_argument(state))


@builtin("coversin", "cvs", category=CATEGORY, description="Coversed sine, 1 - sin")
def coversine(state: EvaluationState):
    return 1 - state.computation.sin(_argument(state))


@builtin("covercosin", category=CATEGORY, description="Coversed cosine, 1 + sin")
def covercosine(state: EvaluationState):
    return 1 + state.computation.sin(_argument(state))


@builtin("haversin", category=CATEGORY, description="Half versine, (1 - cos)/2")
def haversine(state: EvaluationState):
    return (1 - state.computation.cos(_argument(state))) / 2


@builtin("havercosin", category=CATEGORY, description="Half vercosine, (1 + cos)/2")
def havercosine(state: EvaluationState):
    return (1 + state.computation.cos(_argument(state))) / 2


@builtin("hacoversin", category=CATEGORY, description="Half coversine, (1 - sin)/2")
def hacoversine(state: EvaluationState):
    return (1 - state.computation.sin(_argument(state))) / 2


@builtin("hacovercosin", category=CATEGORY, description="Half covercosine, (1 + sin)/2")
def hacovercosine(state: EvaluationState):
    return (1 + state.computation.sin(_argument(state))) / 2


@builtin("exsec", category=CATEGORY, description="Exsecant, sec - 1")
def exsecant(state: EvaluationState):
    return _reciprocal(state, state.computation.cos(_argument(state))) - 1


@builtin("excsc", category=CATEGORY, description="Excosecant, csc - 1")
def excosecant(state: EvaluationState):
    return _reciprocal(state, state.computation.sin(_argument(state))) - 1


@builtin("crd", "chord", category=CATEGORY, description="Chord, 2·sin(x/2)")
def chord(state: EvaluationState):
    return 2 * state.computation.sin(_argument(state) / 2)


@builtin("dtor", category=CATEGORY, description="Degrees to radians (also postfix °)")
def degrees_to_radians(state: EvaluationState):
    return state.computation.to_radians(_argument(state))


@builtin("rtod", category=CATEGORY, description="Radians to degrees")
def radians_to_degrees(state: EvaluationState):
    return state.computation.from_radians(_argument(state))
