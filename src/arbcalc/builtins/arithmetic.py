# -----------------------------------------------------------------------------
#  arithmetic.py
#  Operators and basic arithmetic. In integer mode the four basic operations
#  run on IntegerValue (truncating division).
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Callable

from arbcalc.errors import ErrorKind
from arbcalc.functions import EvaluationState
from arbcalc.integer import IntegerValue
from arbcalc.nodes import FunctionNode
from arbcalc.rational import Rational
from arbcalc.registry import builtin

CATEGORY = "Arithmetic"


def _binary(state: EvaluationState, op: Callable) -> Rational:
    state.require_count(2)
    a, b = state.default_arguments()
    if state.parameters.integer_mode:
        return op(IntegerValue.from_rational(a), IntegerValue.from_rational(b)).to_rational()
    return op(a, b)


@builtin("add", category=CATEGORY, description="x + y")
def add(state: EvaluationState):
    return _binary(state, lambda a, b: a + b)


@builtin("subtract", category=CATEGORY, description="x - y")
def subtract(state: EvaluationState):
    return _binary(state, lambda a, b: a - b)


@builtin("multiply", "implicitmultiply", category=CATEGORY, description="x × y; also juxtaposition such as 2pi")
def multiply(state: EvaluationState):
    return _binary(state, lambda a, b: a * b)


@builtin("divide", category=CATEGORY, description="x ÷ y (NaN for y = 0; truncating in integer mode)")
def divide(state: EvaluationState):
    state.require_count(2)
    a, b = state.default_arguments()
    if state.parameters.integer_mode:
        if b.is_zero:
            raise state.error(ErrorKind.DIVIDE_BY_ZERO)
        return (IntegerValue.from_rational(a) / IntegerValue.from_rational(b)).to_rational()
    return a / b


@builtin("mod", "modulo", category=CATEGORY, description="Remainder of x ÷ y")
def modulo(state: EvaluationState):
    return _binary(state, lambda a, b: a % b)


@builtin("negate", category=CATEGORY, description="-x")
def negate(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return -x


@builtin("abs", category=CATEGORY, description="Absolute value")
def absolute(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return abs(x)


@builtin("factorial", category=CATEGORY, description="x! (Γ(x+1) approximation for non-integers)")
def factorial(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    return state.computation.factorial(x)


@builtin("factorial2", category=CATEGORY, description="Double factorial n!!")
def factorial2(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    state.integers([x], non_negative=True)
    return state.computation.double_factorial(x)


@builtin("pow", category=CATEGORY, description="x^y; pow(b, e, m) is the modular power")
def power(state: EvaluationState):
    state.require_count(2, 3)
    args = state.default_arguments()
    if len(args) == 3:
        if not all(a.is_integer for a in args):
            raise state.error(ErrorKind.INVALID_ARGUMENTS)
        b, e, m = (a.numerator for a in args)
        return state.computation.modular_power(b, e, m)
    return state.computation.power(args[0], args[1])


@builtin("tetr", "tetration", category=CATEGORY, description="a↑↑n, a power tower of height n")
def tetration(state: EvaluationState):
    state.require_count(2)
    a, n = state.default_arguments()
    (height,) = state.integers([n], non_negative=True)
    return state.computation.tetration(a, height)


@builtin("percent", category=CATEGORY, description="n% = n/100; x ± n% scales by x")
def percent(state: EvaluationState):
    state.require_count(1)
    (x,) = state.default_arguments()
    fraction = x / 100

    # only the right operand of add/subtract: "200 + 10%" is 220
    parent = state.node.parent
    if not isinstance(parent, FunctionNode) or parent.name not in ("add", "subtract"):
        return fraction
    if len(parent.arguments) != 2 or parent.arguments[1] is not state.node:
        return fraction
    base = state.evaluate(parent.arguments[0])
    if not isinstance(base, Rational):
        return fraction
    return base * fraction
