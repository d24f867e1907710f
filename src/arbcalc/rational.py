# -----------------------------------------------------------------------------
#  rational.py
#  Exact rational numbers with sticky NaN / infinity / boolean / approximation
#  state. Pure arithmetic only: transcendental and iterative algorithms live in
#  arbcalc.algorithms, which builds on this module (never the reverse).
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from gmpy2 import gcd as _gcd

from arbcalc.fmt import dec_digits, int_text, superscript

# |exponent| above which a value carries a scientific representation
EXPONENT_THRESHOLD = 6

_UNSET = object()

_DECIMAL_RE = re.compile(
    r"""
    ^\s*
    (?P<sign>[+-])?
    (?:
        (?P<int>\d+)(?:\.(?P<frac>\d*))?    # 12, 12., 12.5
      | \.(?P<frac_only>\d+)               # .5
    )
    (?:[eE](?P<exp>[+-]?\d+))?             # exponent
    \s*$
    """,
    re.VERBOSE,
)
_FRACTION_RE = re.compile(r"^\s*([+-]?\d+)\s*/\s*([+-]?\d+)\s*$")


class Kind(Enum):
    FINITE = "finite"
    NAN = "nan"
    INFINITE = "infinite"
    BOOLEAN = "boolean"


class DisplayMode(Enum):
    AUTOMATIC = "automatic"
    FRACTIONAL = "fractional"
    DECIMAL = "decimal"
    SCIENTIFIC = "scientific"

    @classmethod
    def parse(cls, name: str | DisplayMode | None) -> DisplayMode:
        if isinstance(name, DisplayMode):
            return name
        key = str(name or "automatic").strip().lower()
        for mode in cls:
            if mode.value == key or mode.value.startswith(key):
                return mode
        raise ValueError(f"unknown display mode: {name!r}")


@dataclass(frozen=True)
class ExponentRepresentation:
    """Value as mantissa × base^exponent, used for display and logarithm shortcuts."""
    mantissa: Rational
    base: int
    exponent: int

    def description(self) -> str:
        power = f"{self.base}{superscript(self.exponent)}"
        if self.mantissa == 1:
            return power
        if self.mantissa == -1:
            return f"-{power}"
        return f"{self.mantissa.description(DisplayMode.FRACTIONAL)} × {power}"


class Rational:
    """
    Exact fraction numerator/denominator over Python ints.

    Exactly one state `kind` applies to each value:
      - FINITE:   an ordinary fraction, always stored in lowest terms with a
                  positive denominator (unless built with ``reduced=True`` by a
                  caller that already guarantees that).
      - NAN:      not a number (numerator 0, denominator 1).
      - INFINITE: ±infinity; the sign lives in the numerator (±1).
      - BOOLEAN:  a logical value stored as 0/1; arithmetic treats it as the
                  number and yields a FINITE result.

    `approximate` is sticky: any arithmetic result is approximate if either
    operand was. Instances are never mutated after construction.
    """

    __slots__ = ("numerator", "denominator", "kind", "approximate", "_exp_rep")

    def __init__(self, numerator: int = 0, denominator: int = 1, *,
                 approximate: bool = False, reduced: bool = False):
        numerator = int(numerator)
        denominator = int(denominator)
        self.approximate = bool(approximate)
        self._exp_rep = _UNSET
        if denominator == 0:
            self.numerator, self.denominator, self.kind = 0, 1, Kind.NAN
            return
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        if not reduced:
            g = int(_gcd(numerator, denominator))
            if g > 1:
                numerator //= g
                denominator //= g
        self.numerator = numerator
        self.denominator = denominator
        self.kind = Kind.FINITE

    # ---------- special values ------------------------------------------------

    @classmethod
    def _special(cls, kind: Kind, numerator: int, approximate: bool = False) -> Rational:
        obj = cls.__new__(cls)
        obj.numerator = numerator
        obj.denominator = 1
        obj.kind = kind
        obj.approximate = approximate
        obj._exp_rep = _UNSET
        return obj

    @classmethod
    def nan(cls, approximate: bool = False) -> Rational:
        return cls._special(Kind.NAN, 0, approximate)

    @classmethod
    def infinity(cls, sign: int = 1, approximate: bool = False) -> Rational:
        return cls._special(Kind.INFINITE, 1 if sign >= 0 else -1, approximate)

    @classmethod
    def boolean(cls, value: bool) -> Rational:
        return cls._special(Kind.BOOLEAN, 1 if value else 0)

    # ---------- parsing -------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> Rational:
        """
        Parse an integer, decimal, fraction or scientific literal.

        >>> Rational.parse("0.25")
        Rational(1, 4)
        >>> Rational.parse("1.5e3")
        Rational(1500, 1)
        """
        s = str(text).strip()
        low = s.lower()
        if low == "nan":
            return NAN
        if low in {"∞", "inf", "infinity", "+∞", "+inf"}:
            return INFINITY
        if low in {"-∞", "-inf", "-infinity"}:
            return NEGATIVE_INFINITY
        if low in {"true", "false"}:
            return cls.boolean(low == "true")

        m = _FRACTION_RE.match(s)
        if m:
            num, den = int(m.group(1)), int(m.group(2))
            if den == 0:
                raise ValueError(f"zero denominator in {text!r}")
            return cls(num, den)

        m = _DECIMAL_RE.match(s)
        if not m:
            raise ValueError(f"not a rational literal: {text!r}")
        whole = m.group("int") or "0"
        frac = m.group("frac") or m.group("frac_only") or ""
        num = int(whole + frac)
        den = 10 ** len(frac)
        exp = int(m.group("exp") or 0)
        if exp >= 0:
            num *= 10 ** exp
        else:
            den *= 10 ** -exp
        if m.group("sign") == "-":
            num = -num
        return cls(num, den)

    # ---------- predicates ----------------------------------------------------

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
    def is_finite(self) -> bool:
        return self.kind is Kind.FINITE or self.kind is Kind.BOOLEAN

    @property
    def is_approximation(self) -> bool:
        return self.approximate

    @property
    def is_integer(self) -> bool:
        return self.is_finite and self.denominator == 1

    @property
    def is_zero(self) -> bool:
        return self.is_finite and self.numerator == 0

    @property
    def is_negative(self) -> bool:
        return not self.is_nan and self.numerator < 0

    @property
    def is_positive(self) -> bool:
        return not self.is_nan and self.numerator > 0

    @property
    def is_logical(self) -> bool:
        """True for booleans and for the integers 0 and 1."""
        return self.is_integer and self.numerator in (0, 1)

    @property
    def sign(self) -> int:
        if self.is_nan:
            return 0
        return (self.numerator > 0) - (self.numerator < 0)

    def with_approximation(self, approximate: bool = True) -> Rational:
        if self.approximate == approximate:
            return self
        if not self.is_finite or self.is_boolean:
            return Rational._special(self.kind, self.numerator, approximate)
        return Rational(self.numerator, self.denominator, approximate=approximate, reduced=True)

    # ---------- scientific representation -------------------------------------

    @property
    def exponent_representation(self) -> ExponentRepresentation | None:
        if self._exp_rep is _UNSET:
            self._exp_rep = self._compute_exponent_representation()
        return self._exp_rep

    def _compute_exponent_representation(self) -> ExponentRepresentation | None:
        if self.kind is not Kind.FINITE or self.numerator == 0:
            return None
        num, den = self.numerator, self.denominator
        up = 0
        while num % 10 == 0:
            num //= 10
            up += 1
        down = 0
        while den % 10 == 0:
            den //= 10
            down += 1
        exponent = up - down
        if abs(exponent) <= EXPONENT_THRESHOLD:
            return None
        mantissa = Rational(num, den, reduced=True)
        return ExponentRepresentation(mantissa=mantissa, base=10, exponent=exponent)

    # ---------- arithmetic ----------------------------------------------------

    def __neg__(self) -> Rational:
        if self.is_nan:
            return self
        if self.is_infinite:
            return Rational.infinity(-self.numerator, self.approximate)
        if self.numerator == 0:
            return ZERO if not self.approximate else ZERO.with_approximation()
        return Rational(-self.numerator, self.denominator, approximate=self.approximate, reduced=True)

    def __pos__(self) -> Rational:
        return self

    def __abs__(self) -> Rational:
        return -self if self.is_negative else self

    def __add__(self, other) -> Rational:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        approx = self.approximate or other.approximate
        if self.is_nan or other.is_nan:
            return Rational.nan(approx)
        if self.is_infinite or other.is_infinite:
            if self.is_infinite and other.is_infinite and self.sign != other.sign:
                return Rational.nan(approx)
            return Rational.infinity(self.sign if self.is_infinite else other.sign, approx)
        if self.denominator == other.denominator == 1:
            return Rational(self.numerator + other.numerator, approximate=approx, reduced=True)
        num = self.numerator * other.denominator + other.numerator * self.denominator
        return Rational(num, self.denominator * other.denominator, approximate=approx)

    __radd__ = __add__

    def __sub__(self, other) -> Rational:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other) -> Rational:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other + (-self)

    def __mul__(self, other) -> Rational:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        approx = self.approximate or other.approximate
        if self.is_nan or other.is_nan:
            return Rational.nan(approx)
        if self.is_infinite or other.is_infinite:
            if self.is_zero or other.is_zero:
                return Rational.nan(approx)
            return Rational.infinity(self.sign * other.sign, approx)
        # cross-reduce first so the product is already in lowest terms
        g1 = int(_gcd(self.numerator, other.denominator))
        g2 = int(_gcd(other.numerator, self.denominator))
        num = (self.numerator // g1) * (other.numerator // g2)
        den = (self.denominator // g2) * (other.denominator // g1)
        return Rational(num, den, approximate=approx, reduced=True)

    __rmul__ = __mul__

    def __truediv__(self, other) -> Rational:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        approx = self.approximate or other.approximate
        if self.is_nan or other.is_nan or other.is_zero:
            return Rational.nan(approx)
        if other.is_infinite:
            if self.is_infinite:
                return Rational.nan(approx)
            return ZERO.with_approximation(approx)
        if self.is_infinite:
            return Rational.infinity(self.sign * other.sign, approx)
        return self * other.reciprocal()

    def __rtruediv__(self, other) -> Rational:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other / self

    def __mod__(self, other) -> Rational:
        """Floored modulo: the result takes the sign of the divisor."""
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        approx = self.approximate or other.approximate
        if not (self.is_finite and other.is_finite) or other.is_zero:
            return Rational.nan(approx)
        num = (self.numerator * other.denominator) % (other.numerator * self.denominator)
        return Rational(num, self.denominator * other.denominator, approximate=approx)

    def __rmod__(self, other) -> Rational:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other % self

    def __pow__(self, exponent) -> Rational:
        """Exact power for integer exponents; rational exponents go through Computation.power."""
        approx = self.approximate
        if isinstance(exponent, Rational):
            approx = approx or exponent.approximate
            if exponent.is_nan:
                return Rational.nan(approx)
            if not exponent.is_integer:
                raise TypeError("non-integer exponents require Computation.power")
            exponent = exponent.numerator
        elif not isinstance(exponent, int):
            return NotImplemented
        return self._int_power(int(exponent), approx)

    def _int_power(self, e: int, approx: bool) -> Rational:
        if self.is_nan:
            return Rational.nan(approx)
        if e == 0:
            if self.is_zero or self.is_infinite:
                return Rational.nan(approx)  # 0^0 and ∞^0 are undefined
            return ONE.with_approximation(approx)
        if self.is_infinite:
            if e < 0:
                return ZERO.with_approximation(approx)
            sign = self.sign if e % 2 else 1
            return Rational.infinity(sign, approx)
        if self.is_zero:
            return Rational.nan(approx) if e < 0 else ZERO.with_approximation(approx)
        k = abs(e)
        num, den = self.numerator ** k, self.denominator ** k
        if e < 0:
            num, den = den, num
            if den < 0:
                num, den = -num, -den
        return Rational(num, den, approximate=approx, reduced=True)

    def reciprocal(self) -> Rational:
        if self.is_nan or self.is_zero:
            return Rational.nan(self.approximate)
        if self.is_infinite:
            return ZERO.with_approximation(self.approximate)
        num, den = self.denominator, self.numerator
        if den < 0:
            num, den = -num, -den
        return Rational(num, den, approximate=self.approximate, reduced=True)

    # ---------- rounding ------------------------------------------------------

    def floor(self) -> Rational:
        if not self.is_finite:
            return self
        return Rational(self.numerator // self.denominator, approximate=self.approximate, reduced=True)

    def ceil(self) -> Rational:
        if not self.is_finite:
            return self
        return Rational(-((-self.numerator) // self.denominator), approximate=self.approximate, reduced=True)

    def truncate(self) -> Rational:
        if not self.is_finite:
            return self
        q = abs(self.numerator) // self.denominator
        return Rational(q if self.numerator >= 0 else -q, approximate=self.approximate, reduced=True)

    def round(self, digits: int = 0) -> Rational:
        """Round half away from zero to `digits` decimals; keeps the approximation flag."""
        if not self.is_finite:
            return self
        scale = 10 ** max(0, digits)
        q, r = divmod(abs(self.numerator) * scale, self.denominator)
        if 2 * r >= self.denominator:
            q += 1
        if self.numerator < 0:
            q = -q
        return Rational(q, scale, approximate=self.approximate)

    def quantize(self, digits: int) -> Rational:
        """Like round(), but marks the result approximate whenever a digit was dropped."""
        if not self.is_finite:
            return self
        rounded = self.round(digits)
        if rounded.numerator * self.denominator != self.numerator * rounded.denominator:
            return rounded.with_approximation()
        return rounded

    def __int__(self) -> int:
        if not self.is_finite:
            raise ValueError(f"cannot convert {self.description()} to int")
        q = abs(self.numerator) // self.denominator
        return q if self.numerator >= 0 else -q

    def __float__(self) -> float:
        if self.is_nan:
            return float("nan")
        if self.is_infinite:
            return float("inf") * self.sign
        try:
            return self.numerator / self.denominator
        except OverflowError:
            return float("inf") * self.sign

    def __bool__(self) -> bool:
        return not self.is_zero

    # ---------- comparison ----------------------------------------------------

    def _compare(self, other: Rational) -> int | None:
        if self.is_nan or other.is_nan:
            return None
        rank_a = self.sign if self.is_infinite else 0
        rank_b = other.sign if other.is_infinite else 0
        if rank_a or rank_b:
            return (rank_a > rank_b) - (rank_a < rank_b)
        lhs = self.numerator * other.denominator
        rhs = other.numerator * self.denominator
        return (lhs > rhs) - (lhs < rhs)

    def __eq__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        if self.is_nan or other.is_nan:
            # NaN results compare equal to each other so evaluations can be compared
            return self.is_nan and other.is_nan
        return self._compare(other) == 0

    def __lt__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._compare(other) == -1

    def __le__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._compare(other) in (-1, 0)

    def __gt__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._compare(other) == 1

    def __ge__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._compare(other) in (0, 1)

    def __hash__(self) -> int:
        if self.is_nan:
            return hash("nan")
        if self.is_infinite:
            return hash(("inf", self.sign))
        if self.denominator == 1:
            return hash(self.numerator)
        return hash((self.numerator, self.denominator))

    def is_equal(self, other) -> bool:
        return isinstance(other, Rational) and self == other

    # ---------- text ----------------------------------------------------------

    def decimal_expansion(self, n_digits: int) -> tuple[str, bool]:
        """
        Long-division expansion truncated after `n_digits` decimals.

        Returns (digits, is_exact); trailing zeros are dropped.

        >>> Rational(1, 4).decimal_expansion(5)
        ('0.25', True)
        >>> Rational(2, 3).decimal_expansion(4)
        ('0.6666', False)
        """
        if self.is_nan:
            return "NaN", False
        if self.is_infinite:
            return ("∞" if self.numerator > 0 else "-∞"), False
        n_digits = max(0, int(n_digits))
        whole, rem = divmod(abs(self.numerator), self.denominator)
        scaled = rem * 10 ** n_digits
        frac, left = divmod(scaled, self.denominator)
        text = int_text(whole)
        if n_digits and frac:
            text += "." + int_text(frac).rjust(n_digits, "0").rstrip("0")
        if self.numerator < 0:
            text = "-" + text
        return text, left == 0

    def description(self, mode: DisplayMode = DisplayMode.AUTOMATIC, decimals: int = 20) -> str:
        if self.is_nan:
            return "NaN"
        if self.is_infinite:
            return "∞" if self.numerator > 0 else "-∞"
        if self.is_boolean:
            return "true" if self.numerator else "false"

        if mode is DisplayMode.FRACTIONAL:
            return self._fraction_text()
        if mode is DisplayMode.DECIMAL:
            return self._decimal_text(decimals)
        if mode is DisplayMode.SCIENTIFIC:
            return self._scientific_text(decimals)

        rep = self.exponent_representation
        if rep is not None and not self.approximate and rep.mantissa.is_integer:
            return rep.description()
        if self.is_integer:
            return int_text(self.numerator)
        if self.approximate:
            return self._decimal_text(decimals)
        digits, exact = self.decimal_expansion(decimals)
        return digits if exact else self._fraction_text()

    def _fraction_text(self) -> str:
        if self.denominator == 1:
            return int_text(self.numerator)
        return f"{int_text(self.numerator)}/{int_text(self.denominator)}"

    def _decimal_text(self, decimals: int) -> str:
        digits, exact = self.decimal_expansion(decimals)
        return digits if exact else digits + "…"

    def _scientific_text(self, decimals: int) -> str:
        if self.numerator == 0:
            return "0"
        exponent = dec_digits(self.numerator) - dec_digits(self.denominator)
        mantissa = abs(self) / Rational(10) ** exponent
        if mantissa < 1:
            exponent -= 1
            mantissa = mantissa * 10
        text = mantissa._decimal_text(decimals)
        if self.numerator < 0:
            text = "-" + text
        if exponent == 0:
            return text
        return f"{text} × 10{superscript(exponent)}"

    def __str__(self) -> str:
        return self.description()

    def __repr__(self) -> str:
        if self.is_nan:
            body = "Rational.nan()"
        elif self.is_infinite:
            body = "Rational.infinity()" if self.numerator > 0 else "Rational.infinity(-1)"
        elif self.is_boolean:
            body = f"Rational.boolean({bool(self.numerator)})"
        else:
            body = f"Rational({int_text(self.numerator)}, {int_text(self.denominator)})"
        return body + ("~" if self.approximate else "")


def _coerce(value) -> Rational:
    if isinstance(value, Rational):
        return value
    if isinstance(value, int):
        return Rational(value, reduced=True)
    return NotImplemented


ZERO = Rational(0)
ONE = Rational(1)
NAN = Rational.nan()
INFINITY = Rational.infinity(1)
NEGATIVE_INFINITY = Rational.infinity(-1)
TRUE = Rational.boolean(True)
FALSE = Rational.boolean(False)
