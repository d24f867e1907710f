# -----------------------------------------------------------------------------
#  aggregate.py
#  Variadic aggregates (sum, product, statistics) and rounding / digit helpers
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import reduce

from arbcalc.errors import ErrorKind
from arbcalc.functions import EvaluationState
from arbcalc.rational import ONE, ZERO, Rational
from arbcalc.registry import builtin

CATEGORY = "Aggregate"
ROUNDING = "Rounding & Digits"


@builtin("sum", "∑", category=CATEGORY, description="Sum of all arguments")
def total(state: EvaluationState):
    state.require_at_least(1)
    return reduce(lambda acc, x: acc + x, state.default_arguments(), ZERO)


@builtin("product", "∏", category=CATEGORY, description="Product of all arguments")
def product(state: EvaluationState):
    state.require_at_least(1)
    return reduce(lambda acc, x: acc * x, state.default_arguments(), ONE)


@builtin("count", category=CATEGORY, description="Number of arguments")
def count(state: EvaluationState):
    return Rational(len(state.arguments))


@builtin("min", category=CATEGORY, description="Smallest argument")
def minimum(state: EvaluationState):
    state.require_at_least(1)
    values = state.default_arguments()
    if any(v.is_nan for v in values):
        return Rational.nan()
    return min(values)


@builtin("max", category=CATEGORY, description="Largest argument")
def maximum(state: EvaluationState):
    state.require_at_least(1)
    values = state.default_arguments()
    if any(v.is_nan for v in values):
        return Rational.nan()
    return max(values)


def _mean(values: list[Rational]) -> Rational:
    return reduce(lambda acc, x: acc + x, values, ZERO) / len(values)


@builtin("average", "avg", "mean", category=CATEGORY, description="Arithmetic mean")
def average(state: EvaluationState):
    state.require_at_least(1)
    return _mean(state.default_arguments())


@builtin("median", category=CATEGORY, description="Middle value of the sorted arguments")
def median(state: EvaluationState):
    state.require_at_least(1)
    values = state.default_arguments()
    if any(v.is_nan for v in values):
        return Rational.nan()
    values.sort()
    mid = len(values) // 2
    if len(values) % 2:
        return values[mid]
    return (values[mid - 1] + values[mid]) / 2


@builtin("stddev", category=CATEGORY, description="Population standard deviation")
def standard_deviation(state: EvaluationState):
    state.require_at_least(2)
    values = state.default_arguments()
    mean = _mean(values)
    variance = _mean([(v - mean) * (v - mean) for v in values])
    return state.computation.sqrt(variance)


# ---------- rounding & digits ------------------------------------------------


@builtin("ceil", category=ROUNDING, description="Smallest integer ≥ x")
def ceiling(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return x.ceil()


@builtin("floor", category=ROUNDING, description="Largest integer ≤ x")
def floor(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return x.floor()


@builtin("trunc", category=ROUNDING, description="x rounded toward zero")
def truncation(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return x.truncate()


@builtin("round", category=ROUNDING, description="round(x) or round(x, n): half away from zero")
def rounding(state: EvaluationState):
    state.require_count(1, 2)
    args = state.default_arguments()
    digits = 0
    if len(args) == 2:
        (digits,) = state.integers([args[1]], non_negative=True)
    return args[0].round(digits)


@builtin("digits", category=ROUNDING, description="Number of decimal digits of x")
def digits(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return state.computation.digit_count(x)


@builtin("decimal", category=ROUNDING, description="decimal(x, n): x cut to n decimals")
def decimal(state: EvaluationState):
    state.require_count(2)
    x, n = state.default_arguments()
    (places,) = state.integers([n], positive=True)
    if not x.is_finite:
        return x
    text, exact = x.decimal_expansion(places)
    try:
        value = Rational.parse(text)
    except ValueError as err:
        raise state.error(ErrorKind.INVALID_ARGUMENTS) from err
    return value.with_approximation(x.approximate or not exact)
