# -----------------------------------------------------------------------------
#  series.py
#  Truncated Taylor / Machin series for sine, natural logarithm, exponential
#  and pi. Argument reduction is the caller's job (see algorithms.py); the
#  series only sums terms until the remainder is below the requested precision.
# -----------------------------------------------------------------------------

from __future__ import annotations

from enum import Enum

from arbcalc.cancellation import CancellationToken, ensure_token
from arbcalc.rational import ONE, ZERO, Rational
from arbcalc.runtime import debug

DEFAULT_GUARD_DIGITS = 10

# digits -> pi quantized to that many digits (only completed runs are cached)
_PI_CACHE: dict[int, Rational] = {}


class Expansion(Enum):
    SIN = "sin"
    LN = "ln"
    EXP = "exp"
    EXPM1 = "expm1"
    PI = "pi"


class TaylorSeries:
    """
    Sum a series to `decimals` correct digits.

    Every term is derived from the previous one and rounded to
    ``decimals + guard`` digits, which keeps numerators and denominators
    from growing without bound. Summation stops when the remainder bound of
    the series drops below half a unit in the last working digit, or when
    the heuristic iteration bound is reached. The result is always marked
    approximate; a cancelled token yields NaN.
    """

    def __init__(self, expansion: Expansion, decimals: int,
                 token: CancellationToken | None = None, guard: int = DEFAULT_GUARD_DIGITS):
        self.expansion = expansion
        self.decimals = max(0, int(decimals))
        self.guard = max(0, int(guard))
        self.token = ensure_token(token)

    @property
    def working_digits(self) -> int:
        return self.decimals + self.guard

    @property
    def epsilon(self) -> Rational:
        return Rational(1, 2 * 10 ** self.working_digits, reduced=True)

    def iteration_bound(self, x: Rational | None = None) -> int:
        """Heuristic cap on the number of terms: proportional to |x|·decimals, never below 4·working digits."""
        magnitude = 1
        if x is not None and x.is_finite:
            magnitude = max(1, -(-abs(x.numerator) // x.denominator))
        return max(2 * magnitude * self.decimals, 4 * self.working_digits) + 16

    def evaluate(self, x: Rational | None = None) -> Rational:
        if self.expansion is Expansion.PI:
            return self._pi()
        if x is None or not x.is_finite:
            return Rational.nan()
        if self.expansion is Expansion.SIN:
            result = self._sin(x)
        elif self.expansion is Expansion.LN:
            result = self._ln(x)
        elif self.expansion is Expansion.EXP:
            result = self._exp(x, ONE)
        else:
            result = self._exp(x, ZERO)
        return result.with_approximation() if not result.is_nan else result

    # ---------- expansions ----------------------------------------------------

    def _sin(self, x: Rational) -> Rational:
        w, eps = self.working_digits, self.epsilon
        bound = self.iteration_bound(x)
        x2 = (x * x).quantize(w)
        magnitude = abs(x)
        term = x.quantize(w)
        total = term
        k = 1
        while k < bound:
            if self.token.is_cancel_requested():
                return Rational.nan()
            term = (-term * x2 / ((2 * k) * (2 * k + 1))).quantize(w)
            total = total + term
            if abs(term) < eps and 2 * k + 1 > magnitude:
                break
            k += 1
        self._trace(k, bound)
        return total

    def _ln(self, x: Rational) -> Rational:
        """ln(x) for 0 < x <= 1 as Σ (-1)^(k+1) (x-1)^k / k."""
        if not (ZERO < x <= ONE):
            return Rational.nan()
        if x == ONE:
            return ZERO
        w, eps = self.working_digits, self.epsilon
        y = x - 1
        bound = self.iteration_bound(y)
        power = ONE
        total = ZERO
        k = 1
        while k < bound:
            if self.token.is_cancel_requested():
                return Rational.nan()
            power = (power * y).quantize(w)
            term = power / k
            total = total + (term if k % 2 else -term)
            # tail after term k is at most |term|·|y| / (1 - |y|)
            if abs(term) * abs(y) < eps * (1 - abs(y)):
                break
            k += 1
        self._trace(k, bound)
        return total.quantize(w)

    def _exp(self, x: Rational, first: Rational) -> Rational:
        """Σ x^k/k! starting at k = 0 (first = 1) or at k = 1 (first = 0, i.e. exp(x) - 1)."""
        w, eps = self.working_digits, self.epsilon
        bound = self.iteration_bound(x)
        twice_magnitude = 2 * abs(x)
        term = ONE
        total = first
        k = 1
        while k < bound:
            if self.token.is_cancel_requested():
                return Rational.nan()
            term = (term * x / k).quantize(w)
            total = total + term
            # once k > 2|x| the tail is at most twice the last term
            if abs(term) < eps and k > twice_magnitude:
                break
            k += 1
        self._trace(k, bound)
        return total

    def _pi(self) -> Rational:
        """Machin: π = 16·atan(1/5) − 4·atan(1/239), in fixed point."""
        w = self.working_digits
        for digits in sorted(_PI_CACHE):
            if digits >= w:
                return _PI_CACHE[digits].quantize(w).with_approximation()

        scale = 10 ** (w + 5)
        first = self._atan_inverse(5, scale)
        second = self._atan_inverse(239, scale)
        if first is None or second is None:
            return Rational.nan()
        value = Rational(16 * first - 4 * second, scale).quantize(w).with_approximation()
        _PI_CACHE[w] = value
        return value

    def _atan_inverse(self, m: int, scale: int) -> int | None:
        """atan(1/m) · scale as an integer, or None when cancelled."""
        power = scale // m
        total = power
        m2 = m * m
        k = 1
        while power:
            if self.token.is_cancel_requested():
                return None
            power //= m2
            term = power // (2 * k + 1)
            total += -term if k % 2 else term
            k += 1
        self._trace(k, None)
        return total

    def _trace(self, terms: int, bound: int | None) -> None:
        cap = f"/{bound}" if bound is not None else ""
        debug("series", f"{self.expansion.value}: {terms}{cap} terms at {self.working_digits} digits")
