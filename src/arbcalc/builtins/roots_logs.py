# -----------------------------------------------------------------------------
#  roots_logs.py
#  Roots, logarithms and the exponential function
# -----------------------------------------------------------------------------

from __future__ import annotations

from arbcalc.functions import EvaluationState
from arbcalc.rational import Rational
from arbcalc.registry import builtin

CATEGORY = "Roots & Logarithms"


@builtin("sqrt", category=CATEGORY, description="Square root")
def square_root(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return state.computation.sqrt(x)


@builtin("cuberoot", "cbrt", category=CATEGORY, description="Cube root (real, also for negative x)")
def cube_root(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return state.computation.cbrt(x)


@builtin("nthroot", category=CATEGORY, description="nthroot(n, x): the real n-th root of x")
def nth_root(state: EvaluationState):
    state.require_count(2)
    n, x = state.default_arguments()
    (k,) = state.integers([n], positive=True)
    return state.computation.root(x, k)


@builtin("log", "lg", category=CATEGORY, description="log(x) to base 10, log(b, x) to base b")
def logarithm(state: EvaluationState):
    state.require_count(1, 2)
    args = state.default_arguments()
    if len(args) == 1:
        return state.computation.log(args[0])
    base, x = args
    return state.computation.log(x, base)


@builtin("ln", category=CATEGORY, description="Natural logarithm")
def natural_logarithm(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return state.computation.ln(x)


@builtin("log2", "lb", category=CATEGORY, description="Binary logarithm")
def binary_logarithm(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return state.computation.log(x, Rational(2))


@builtin("exp", category=CATEGORY, description="eˣ")
def exponential(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return state.computation.exp(x)
