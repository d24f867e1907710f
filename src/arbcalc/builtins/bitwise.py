# -----------------------------------------------------------------------------
#  bitwise.py
#  Two's-complement bit operations on integers
# -----------------------------------------------------------------------------

from __future__ import annotations

import math

from arbcalc.errors import ErrorKind
from arbcalc.functions import EvaluationState
from arbcalc.rational import Rational
from arbcalc.registry import builtin

CATEGORY = "Bitwise"

BITS_PER_DIGIT = math.log2(10)


def _int_pair(state: EvaluationState) -> tuple[int, int]:
    state.require_count(2)
    return tuple(state.integers(state.default_arguments()))


@builtin("and", category=CATEGORY, description="Bitwise and (&)")
def bit_and(state: EvaluationState):
    a, b = _int_pair(state)
    return Rational(a & b)


@builtin("or", category=CATEGORY, description="Bitwise or (|)")
def bit_or(state: EvaluationState):
    a, b = _int_pair(state)
    return Rational(a | b)


@builtin("xor", category=CATEGORY, description="Bitwise exclusive or (xor, ⊕)")
def bit_xor(state: EvaluationState):
    a, b = _int_pair(state)
    return Rational(a ^ b)


@builtin("not", category=CATEGORY, description="Bitwise complement (~)")
def bit_not(state: EvaluationState):
    state.require_count(1)
    (a,) = state.integers(state.default_arguments())
    return Rational(~a)


@builtin("lshift", category=CATEGORY, description="x << n")
def shift_left(state: EvaluationState):
    a, n = _int_pair(state)
    if n < 0:
        raise state.error(ErrorKind.ARGUMENT_NOT_POSITIVE)
    if a and n > state.parameters.max_digits * BITS_PER_DIGIT:
        return Rational.infinity(1 if a > 0 else -1, True)
    return Rational(a << n)


@builtin("rshift", category=CATEGORY, description="x >> n")
def shift_right(state: EvaluationState):
    a, n = _int_pair(state)
    if n < 0:
        raise state.error(ErrorKind.ARGUMENT_NOT_POSITIVE)
    return Rational(a >> n)
