# -----------------------------------------------------------------------------
#  integer.py
#  IntegerValue: the integer-only counterpart of Rational, used when an
#  evaluation runs in integer mode. Same sticky state, one Python int.
# -----------------------------------------------------------------------------

from __future__ import annotations

from arbcalc.fmt import int_text
from arbcalc.rational import Kind, Rational


class IntegerValue:
    """
    Arbitrary-precision integer with NaN / ±infinity / boolean states.

    Division truncates toward zero and the remainder takes the sign of the
    dividend. Division by zero yields NaN, as with Rational.
    """

    __slots__ = ("value", "kind", "approximate")

    def __init__(self, value: int = 0, *, kind: Kind = Kind.FINITE, approximate: bool = False):
        if kind is Kind.NAN:
            value = 0
        elif kind is Kind.INFINITE:
            value = 1 if value >= 0 else -1
        elif kind is Kind.BOOLEAN:
            value = 1 if value else 0
        self.value = int(value)
        self.kind = kind
        self.approximate = bool(approximate)

    @classmethod
    def nan(cls, approximate: bool = False) -> IntegerValue:
        return cls(kind=Kind.NAN, approximate=approximate)

    @classmethod
    def infinity(cls, sign: int = 1, approximate: bool = False) -> IntegerValue:
        return cls(sign, kind=Kind.INFINITE, approximate=approximate)

    @classmethod
    def from_rational(cls, r: Rational) -> IntegerValue:
        """Truncate a Rational toward zero; dropping a fraction marks the value approximate."""
        if r.is_nan:
            return cls.nan(r.approximate)
        if r.is_infinite:
            return cls.infinity(r.sign, r.approximate)
        if r.is_boolean:
            return cls(r.numerator, kind=Kind.BOOLEAN, approximate=r.approximate)
        return cls(int(r), approximate=r.approximate or r.denominator != 1)

    def to_rational(self) -> Rational:
        if self.kind is Kind.NAN:
            return Rational.nan(self.approximate)
        if self.kind is Kind.INFINITE:
            return Rational.infinity(self.value, self.approximate)
        if self.kind is Kind.BOOLEAN:
            return Rational.boolean(bool(self.value)).with_approximation(self.approximate)
        return Rational(self.value, approximate=self.approximate, reduced=True)

    @property
    def is_nan(self) -> bool:
        return self.kind is Kind.NAN

    @property
    def is_infinite(self) -> bool:
        return self.kind is Kind.INFINITE

    @property
    def is_boolean(self) -> bool:
        return self.kind is Kind.BOOLEAN

    @property
    def is_approximation(self) -> bool:
        return self.approximate

    @property
    def sign(self) -> int:
        if self.is_nan:
            return 0
        return (self.value > 0) - (self.value < 0)

    # ---------- arithmetic ----------------------------------------------------

    def _merge(self, other: IntegerValue) -> tuple[bool, IntegerValue | None]:
        approx = self.approximate or other.approximate
        if self.is_nan or other.is_nan:
            return approx, IntegerValue.nan(approx)
        return approx, None

    def __neg__(self) -> IntegerValue:
        if self.is_nan:
            return self
        if self.is_infinite:
            return IntegerValue.infinity(-self.value, self.approximate)
        return IntegerValue(-self.value, approximate=self.approximate)

    def __abs__(self) -> IntegerValue:
        return -self if self.sign < 0 else self

    def __add__(self, other) -> IntegerValue:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        approx, early = self._merge(other)
        if early is not None:
            return early
        if self.is_infinite or other.is_infinite:
            if self.is_infinite and other.is_infinite and self.sign != other.sign:
                return IntegerValue.nan(approx)
            return IntegerValue.infinity(self.sign if self.is_infinite else other.sign, approx)
        return IntegerValue(self.value + other.value, approximate=approx)

    __radd__ = __add__

    def __sub__(self, other) -> IntegerValue:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self + (-other)

    def __mul__(self, other) -> IntegerValue:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        approx, early = self._merge(other)
        if early is not None:
            return early
        if self.is_infinite or other.is_infinite:
            if self.sign == 0 or other.sign == 0:
                return IntegerValue.nan(approx)
            return IntegerValue.infinity(self.sign * other.sign, approx)
        return IntegerValue(self.value * other.value, approximate=approx)

    __rmul__ = __mul__

    def __truediv__(self, other) -> IntegerValue:
        """Integer division truncating toward zero."""
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        approx, early = self._merge(other)
        if early is not None:
            return early
        if other.sign == 0:
            return IntegerValue.nan(approx)
        if other.is_infinite:
            return IntegerValue.nan(approx) if self.is_infinite else IntegerValue(0, approximate=approx)
        if self.is_infinite:
            return IntegerValue.infinity(self.sign * other.sign, approx)
        q = abs(self.value) // abs(other.value)
        if self.sign * other.sign < 0:
            q = -q
        return IntegerValue(q, approximate=approx)

    def __mod__(self, other) -> IntegerValue:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        approx, early = self._merge(other)
        if early is not None:
            return early
        if other.sign == 0 or self.is_infinite or other.is_infinite:
            return IntegerValue.nan(approx)
        r = abs(self.value) % abs(other.value)
        return IntegerValue(-r if self.value < 0 else r, approximate=approx)

    # ---------- comparison ----------------------------------------------------

    def __eq__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        if self.is_nan or other.is_nan:
            return self.is_nan and other.is_nan
        return (self.is_infinite, self.value) == (other.is_infinite, other.value)

    def __lt__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        if self.is_nan or other.is_nan:
            return False
        rank_a = self.sign if self.is_infinite else 0
        rank_b = other.sign if other.is_infinite else 0
        if rank_a or rank_b:
            return rank_a < rank_b
        return self.value < other.value

    def __hash__(self) -> int:
        if self.is_nan:
            return hash("nan")
        if self.is_infinite:
            return hash(("inf", self.sign))
        return hash(self.value)

    def is_equal(self, other) -> bool:
        return isinstance(other, IntegerValue) and self == other

    def description(self) -> str:
        if self.is_nan:
            return "NaN"
        if self.is_infinite:
            return "∞" if self.value > 0 else "-∞"
        if self.is_boolean:
            return "true" if self.value else "false"
        return int_text(self.value)

    def __str__(self) -> str:
        return self.description()

    def __repr__(self) -> str:
        return f"IntegerValue({self.description()})" + ("~" if self.approximate else "")


def _coerce(value) -> IntegerValue:
    if isinstance(value, IntegerValue):
        return value
    if isinstance(value, int):
        return IntegerValue(value)
    return NotImplemented
