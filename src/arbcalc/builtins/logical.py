# -----------------------------------------------------------------------------
#  logical.py
#  Boolean connectives, comparisons and the lazy conditional.
#  Connectives take booleans or the integers 0 and 1.
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Callable

from arbcalc.functions import EvaluationState
from arbcalc.rational import Rational
from arbcalc.registry import builtin

CATEGORY = "Logical"


def _connective(state: EvaluationState, op: Callable[[bool, bool], bool]) -> Rational:
    state.require_count(2)
    p, q = (state.logical(v) for v in state.default_arguments())
    return Rational.boolean(op(p, q))


def _comparison(state: EvaluationState, op: Callable[[Rational, Rational], bool]) -> Rational:
    state.require_count(2)
    a, b = state.default_arguments()
    return Rational.boolean(op(a, b))


@builtin("l_and", category=CATEGORY, description="p && q")
def logical_and(state: EvaluationState):
    return _connective(state, lambda p, q: p and q)


@builtin("l_or", category=CATEGORY, description="p || q")
def logical_or(state: EvaluationState):
    return _connective(state, lambda p, q: p or q)


@builtin("l_not", category=CATEGORY, description="!p")
def logical_not(state: EvaluationState):
    state.require_count(1)
    (p,) = state.default_arguments()
    return Rational.boolean(not state.logical(p))


@builtin("l_impl", "l_implication", category=CATEGORY, description="p → q")
def implication(state: EvaluationState):
    return _connective(state, lambda p, q: not p or q)


@builtin("l_eqv", "l_equivalence", category=CATEGORY, description="p ↔ q")
def equivalence(state: EvaluationState):
    return _connective(state, lambda p, q: p == q)


@builtin("l_eq", category=CATEGORY, description="x == y")
def equal(state: EvaluationState):
    return _comparison(state, lambda a, b: a == b)


@builtin("l_neq", category=CATEGORY, description="x != y")
def not_equal(state: EvaluationState):
    return _comparison(state, lambda a, b: a != b)


@builtin("l_lt", category=CATEGORY, description="x < y")
def less_than(state: EvaluationState):
    return _comparison(state, lambda a, b: a < b)


@builtin("l_gt", category=CATEGORY, description="x > y")
def greater_than(state: EvaluationState):
    return _comparison(state, lambda a, b: a > b)


@builtin("l_ltoe", category=CATEGORY, description="x <= y")
def less_or_equal(state: EvaluationState):
    return _comparison(state, lambda a, b: a <= b)


@builtin("l_gtoe", category=CATEGORY, description="x >= y")
def greater_or_equal(state: EvaluationState):
    return _comparison(state, lambda a, b: a >= b)


@builtin("l_if", "if", category=CATEGORY, description="if(condition, then, else); only the chosen branch is evaluated")
def conditional(state: EvaluationState):
    state.require_count(3)
    condition, when_true, when_false = state.arguments
    if state.logical(state.numeric(condition)):
        return state.evaluate(when_true)
    return state.evaluate(when_false)
