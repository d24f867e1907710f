# -----------------------------------------------------------------------------
#  algorithms.py
#  Numeric algorithms on Rational: roots, factorial/gamma, exponentials and
#  logarithms, trigonometric and hyperbolic functions, integer sequences and
#  combinatorics. Every loop polls the CancellationToken and unwinds with NaN.
# -----------------------------------------------------------------------------

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field

import gmpy2
from sympy import isprime

from arbcalc.cancellation import CancellationToken
from arbcalc.context import EvaluationParameters
from arbcalc.factorization import Factorization
from arbcalc.fmt import dec_digits
from arbcalc.rational import INFINITY, NEGATIVE_INFINITY, ONE, ZERO, Rational
from arbcalc.runtime import debug
from arbcalc.series import Expansion, TaylorSeries

LN10 = math.log(10)
LOG10_2 = math.log10(2)
LOG10_PHI = math.log10((1 + math.sqrt(5)) / 2)

HALF = Rational(1, 2)
_MAX_ROOT_ITERATIONS = 200

# Γ(x+1) is approximated at x + shift >= this value and brought back by recurrence
_GAMMA_SHIFT = 50


def _fibonacci_table(size: int) -> tuple[int, ...]:
    seq = [0, 1]
    while len(seq) < size:
        seq.append(seq[-1] + seq[-2])
    return tuple(seq)


FIBONACCI_TABLE = _fibonacci_table(64)

BELL_TABLE = (
    1, 1, 2, 5, 15, 52, 203, 877, 4140, 21147, 115975, 678570, 4213597,
    27644437, 190899322, 1382958545, 10480142147, 82864869804, 682076806159,
    5832742205057,
)

# sin(k·π/6) for the k where the value is rational
_SPECIAL_SINES = {
    0: ZERO,
    1: HALF,
    3: ONE,
    5: HALF,
    6: ZERO,
    7: -HALF,
    9: -ONE,
    11: -HALF,
}

# (name, working digits) -> constant; filled only by completed computations
_CONSTANTS: dict[tuple[str, int], Rational] = {}


def exact_root(x: Rational, n: int) -> Rational | None:
    """x^(1/n) when numerator and denominator are perfect n-th powers (x >= 0), else None."""
    if not x.is_finite or x.is_negative:
        return None
    rn, exact_n = gmpy2.iroot(gmpy2.mpz(x.numerator), n)
    if not exact_n:
        return None
    rd, exact_d = gmpy2.iroot(gmpy2.mpz(x.denominator), n)
    if not exact_d:
        return None
    return Rational(int(rn), int(rd), approximate=x.approximate, reduced=True)


@dataclass
class Computation:
    """
    Algorithms bound to one evaluation's parameters and cancellation token.

    Methods take and return Rational values. Domain problems (log of a
    negative number, poles of Γ, ...) yield NaN rather than raising; so does a
    cancelled token. Argument validation (integer-ness, positivity) belongs to
    the builtin functions that call in here.
    """
    parameters: EvaluationParameters = field(default_factory=EvaluationParameters)
    token: CancellationToken = field(default_factory=CancellationToken)

    @property
    def decimals(self) -> int:
        return self.parameters.decimals

    @property
    def working_digits(self) -> int:
        return self.parameters.working_digits

    def _cancelled(self) -> bool:
        return self.token.is_cancel_requested()

    def _series(self, expansion: Expansion, decimals: int | None = None) -> TaylorSeries:
        return TaylorSeries(expansion, self.decimals if decimals is None else decimals,
                            self.token, self.parameters.guard_digits)

    def _too_large(self, digits: float) -> bool:
        return digits > self.parameters.max_digits

    def _cached_constant(self, name: str, compute: Callable[[], Rational]) -> Rational:
        key = (name, self.working_digits)
        hit = _CONSTANTS.get(key)
        if hit is not None:
            return hit
        value = compute()
        if not value.is_nan:
            _CONSTANTS[key] = value
        return value

    # ---------- constants -----------------------------------------------------

    def pi(self) -> Rational:
        return self._series(Expansion.PI).evaluate()

    def _pi_with(self, decimals: int) -> Rational:
        return self._series(Expansion.PI, decimals).evaluate()

    def e(self) -> Rational:
        return self._cached_constant("e", lambda: self.exp(ONE))

    def ln2(self) -> Rational:
        return self._cached_constant("ln2", lambda: -self._series(Expansion.LN, self.decimals + 2).evaluate(HALF))

    def ln10(self) -> Rational:
        # ln 10 = 3·ln 2 - ln(8/10)
        def compute() -> Rational:
            tail = self._series(Expansion.LN, self.decimals + 2).evaluate(Rational(4, 5))
            return (3 * self.ln2() - tail).quantize(self.working_digits)
        return self._cached_constant("ln10", compute)

    def phi(self) -> Rational:
        return ((ONE + self.sqrt(Rational(5))) / 2).quantize(self.working_digits)

    # ---------- roots ---------------------------------------------------------

    def root(self, x: Rational, n: int) -> Rational:
        """Real n-th root: exact for perfect powers, otherwise Halley iteration."""
        if n <= 0 or x.is_nan:
            return Rational.nan(x.approximate)
        if n == 1:
            return x
        if x.is_infinite:
            return x if (x.is_positive or n % 2) else Rational.nan(x.approximate)
        if x.is_zero:
            return ZERO.with_approximation(x.approximate)
        if x.is_negative:
            if n % 2 == 0:
                return Rational.nan(x.approximate)
            return -self.root(-x, n)

        exact = exact_root(x, n)
        if exact is not None:
            return exact
        if x < ONE:
            # iterate on 1/x > 1 so the starting guess is close
            inner = self._halley_root(x.reciprocal(), n)
            return inner.reciprocal().quantize(self.working_digits).with_approximation()
        return self._halley_root(x, n)

    def _halley_root(self, x: Rational, n: int) -> Rational:
        """y^n = x for x > 1 by Halley's method, starting just above the true root."""
        w = self.working_digits
        eps = Rational(1, 2 * 10 ** w, reduced=True)
        whole = x.numerator // x.denominator
        y = Rational(int(gmpy2.iroot(gmpy2.mpz(whole), n)[0]) + 1)

        iterations = 0
        for iterations in range(1, _MAX_ROOT_ITERATIONS + 1):
            if self._cancelled():
                return Rational.nan()
            y_n2 = y ** (n - 2)
            y_n1 = y_n2 * y
            f = y_n1 * y - x
            if f.is_zero:
                break
            fp = n * y_n1
            fpp = n * (n - 1) * y_n2
            denom = 2 * fp * fp - f * fpp
            if denom.is_zero:
                break
            nxt = (y - 2 * f * fp / denom).quantize(w)
            step = abs(nxt - y)
            y = nxt
            if step < eps:
                break
        debug("root", f"halley n={n}: {iterations} iteration(s) at {w} digits")
        residual_free = (y ** n) == x
        return y.with_approximation(x.approximate or not residual_free)

    def sqrt(self, x: Rational) -> Rational:
        return self.root(x, 2)

    def cbrt(self, x: Rational) -> Rational:
        return self.root(x, 3)

    # ---------- factorial / gamma ---------------------------------------------

    def factorial(self, x: Rational) -> Rational:
        """x! : exact product for non-negative integers, Ramanujan's Γ(x+1) approximation otherwise."""
        if x.is_nan:
            return x
        if x.is_infinite:
            return x if x.is_positive else Rational.nan(x.approximate)
        if x.is_integer:
            n = x.numerator
            if n < 0:
                return Rational.nan(x.approximate)  # poles of Γ
            if self._too_large(math.lgamma(n + 1) / LN10):
                return INFINITY.with_approximation()
            result = 1
            for k in range(2, n + 1):
                if self._cancelled():
                    return Rational.nan()
                result *= k
            return Rational(result, approximate=x.approximate, reduced=True)
        return self._ramanujan_factorial(x)

    def _ramanujan_factorial(self, x: Rational) -> Rational:
        """Γ(x+1) ≈ √π · (x/e)^x · (8x³ + 4x² + x + 1/30)^(1/6), shifted to large x first."""
        shift = 0
        if x < _GAMMA_SHIFT:
            shift = int((Rational(_GAMMA_SHIFT) - x).ceil())
        y = x + shift
        inner = 8 * y ** 3 + 4 * y ** 2 + y + Rational(1, 30)
        log_part = self.ln(y)
        if log_part.is_nan:
            return log_part
        value = self.sqrt(self.pi()) * self.exp(y * (log_part - 1)) * self.root(inner, 6)
        divisor = ONE
        for k in range(1, shift + 1):
            if self._cancelled():
                return Rational.nan()
            divisor = divisor * (x + k)
        return (value / divisor).with_approximation()

    def double_factorial(self, x: Rational) -> Rational:
        """n!! for integers n >= -1."""
        if not x.is_integer or x.numerator < -1:
            return Rational.nan(x.approximate)
        n = x.numerator
        if self._too_large(math.lgamma(n + 2) / LN10 / 2 + 1):
            return INFINITY.with_approximation()
        result = 1
        for k in range(n, 1, -2):
            if self._cancelled():
                return Rational.nan()
            result *= k
        return Rational(result, approximate=x.approximate, reduced=True)

    # ---------- sequences -----------------------------------------------------

    def fibonacci(self, n: int) -> Rational:
        """F(n) by fast doubling; F(-n) = (-1)^(n+1)·F(n)."""
        if n < 0:
            value = self.fibonacci(-n)
            return value if (-n) % 2 == 1 or value.is_nan else -value
        if self._too_large(n * LOG10_PHI):
            return INFINITY.with_approximation()
        pair = self._fibonacci_pair(n)
        if pair is None:
            return Rational.nan()
        return Rational(pair[1], reduced=True)

    def _fibonacci_pair(self, n: int) -> tuple[int, int] | None:
        """(F(n-1), F(n)), or None when cancelled."""
        if n == 0:
            return 1, 0
        if n < len(FIBONACCI_TABLE):
            return FIBONACCI_TABLE[n - 1], FIBONACCI_TABLE[n]
        if self._cancelled():
            return None
        half = self._fibonacci_pair(n // 2)
        if half is None:
            return None
        a, b = half                         # F(k-1), F(k) with k = n // 2
        f2k = b * (2 * a + b)               # F(2k) = F(k)·(2·F(k-1) + F(k))
        f2k_1 = a * a + b * b               # F(2k-1) = F(k-1)² + F(k)²
        if n % 2 == 0:
            return f2k_1, f2k
        return f2k, f2k + f2k_1

    def lucas(self, n: int) -> Rational:
        """L(n) = 2·F(n-1) + F(n); L(-n) = (-1)^n·L(n)."""
        if n < 0:
            value = self.lucas(-n)
            return value if n % 2 == 0 or value.is_nan else -value
        if self._too_large(n * LOG10_PHI):
            return INFINITY.with_approximation()
        pair = self._fibonacci_pair(n)
        if pair is None:
            return Rational.nan()
        return Rational(2 * pair[0] + pair[1], reduced=True)

    def catalan(self, n: int) -> Rational:
        if n < 0:
            return ZERO
        return self.binomial(Rational(2 * n), n) / (n + 1)

    def bell(self, n: int) -> Rational:
        """B(n) = Σ_{i<n} C(n-1, i)·B(i), extending the lookup table."""
        if n < 0:
            return Rational.nan()
        if n < len(BELL_TABLE):
            return Rational(BELL_TABLE[n], reduced=True)
        bells = list(BELL_TABLE)
        for m in range(len(bells), n + 1):
            total = 0
            coefficient = 1                  # C(m-1, i)
            for i in range(m):
                if self._cancelled():
                    return Rational.nan()
                total += coefficient * bells[i]
                coefficient = coefficient * (m - 1 - i) // (i + 1)
            bells.append(total)
        return Rational(bells[n], reduced=True)

    # ---------- combinatorics -------------------------------------------------

    def binomial(self, n: Rational, k: int) -> Rational:
        """C(n, k) = Π_{i=1..k} (n+1-i)/i; n may be any rational, k a non-negative integer."""
        if n.is_nan or not n.is_finite:
            return Rational.nan(n.approximate)
        if k < 0:
            return ZERO
        if n.is_integer and n.numerator >= 0:
            total = n.numerator
            if k > total:
                return ZERO
            k = min(k, total - k)
            result = 1
            for i in range(1, k + 1):
                if self._cancelled():
                    return Rational.nan()
                result = result * (total + 1 - i) // i
            return Rational(result, approximate=n.approximate, reduced=True)
        value = ONE
        for i in range(k, 0, -1):
            if self._cancelled():
                return Rational.nan()
            value = value * (n + 1 - i) / i
        return value.with_approximation(n.approximate)

    def variations(self, n: Rational, k: int) -> Rational:
        """P(n, k) = n·(n-1)···(n-k+1)."""
        if n.is_nan or not n.is_finite:
            return Rational.nan(n.approximate)
        if k < 0:
            return ZERO
        if n.is_integer and n.numerator >= 0 and k > n.numerator:
            return ZERO
        value = ONE
        for i in range(k):
            if self._cancelled():
                return Rational.nan()
            value = value * (n - i)
        return value.with_approximation(n.approximate)

    def stirling1(self, n: int, k: int) -> Rational:
        """Unsigned Stirling numbers of the first kind: s(n,k) = (n-1)·s(n-1,k) + s(n-1,k-1)."""
        if n < 0 or k < 0:
            return Rational.nan()
        if n == k:
            return ONE
        if n == 0 or k == 0 or k > n:
            return ZERO
        if k == n - 1:
            return Rational(n * (n - 1) // 2)
        row = [1] + [0] * k
        for m in range(1, n + 1):
            if self._cancelled():
                return Rational.nan()
            for j in range(min(m, k), 0, -1):
                row[j] = (m - 1) * row[j] + row[j - 1]
            row[0] = 0
        return Rational(row[k], reduced=True)

    def stirling2(self, n: int, k: int) -> Rational:
        """Stirling numbers of the second kind: S(n,k) = k·S(n-1,k) + S(n-1,k-1)."""
        if n < 0 or k < 0:
            return Rational.nan()
        if n == k:
            return ONE
        if n == 0 or k == 0 or k > n:
            return ZERO
        if k == n - 1:
            return Rational(n * (n - 1) // 2)
        if k == 1:
            return ONE
        row = [1] + [0] * k
        for m in range(1, n + 1):
            if self._cancelled():
                return Rational.nan()
            for j in range(min(m, k), 0, -1):
                row[j] = j * row[j] + row[j - 1]
            row[0] = 0
        return Rational(row[k], reduced=True)

    def lah(self, n: int, k: int) -> Rational:
        """Unsigned Lah numbers via L(n,k) = L(n,k-1)·(n-k+1) / (k·(k-1)), L(n,1) = n!."""
        if n < 0 or k < 0:
            return Rational.nan()
        if n == k:
            return ONE
        if k == 0 or k > n:
            return ZERO
        if k == n - 1:
            return Rational(n * (n - 1))
        first = self.factorial(Rational(n))
        if not first.is_integer:
            return first
        if k == 1:
            return first
        value = first.numerator
        if k == 2:
            return Rational(value * (n - 1) // 2)
        for j in range(2, k + 1):
            if self._cancelled():
                return Rational.nan()
            value = value * (n - j + 1) // (j * (j - 1))
        return Rational(value, reduced=True)

    # ---------- number theory -------------------------------------------------

    def gcd(self, a: int, b: int) -> int | None:
        """Euclid's algorithm; None when cancelled."""
        a, b = abs(a), abs(b)
        while b:
            if self._cancelled():
                return None
            a, b = b, a % b
        return a

    def lcm(self, a: int, b: int) -> int | None:
        if a == 0 or b == 0:
            return 0
        g = self.gcd(a, b)
        return None if g is None else abs(a * b) // g

    def is_prime(self, x: Rational) -> Rational:
        return Rational.boolean(x.is_integer and x.numerator > 1 and bool(isprime(x.numerator)))

    def derivative(self, x: Rational) -> Rational:
        """Arithmetic derivative; rationals via (p/q)' = (p'q - pq')/q²."""
        if not x.is_finite:
            return Rational.nan(x.approximate)
        p, q = x.numerator, x.denominator
        dp = self._integer_derivative(p)
        if dp is None:
            return Rational.nan()
        if q == 1:
            return Rational(dp, approximate=x.approximate, reduced=True)
        dq = self._integer_derivative(q)
        if dq is None:
            return Rational.nan()
        return Rational(dp * q - p * dq, q * q, approximate=x.approximate)

    def _integer_derivative(self, n: int) -> int | None:
        if n < 0:
            d = self._integer_derivative(-n)
            return None if d is None else -d
        if n < 2:
            return 0
        fac = Factorization(n).factor(self.token)
        if not fac.is_complete:
            return None
        return sum(n // f.prime * f.multiplicity for f in fac.prime_powers)

    def digit_count(self, x: Rational) -> Rational:
        """Number of decimal digits shown for x (sign and decimal point excluded)."""
        if not x.is_finite:
            return Rational.nan(x.approximate)
        if x.is_integer:
            return Rational(dec_digits(x.numerator))
        digits, _ = x.decimal_expansion(self.decimals)
        return Rational(sum(ch.isdigit() for ch in digits))

    # ---------- powers --------------------------------------------------------

    def power(self, base: Rational, exponent: Rational) -> Rational:
        """base^exponent. Integer exponents are exact; 0^0 is NaN."""
        approx = base.approximate or exponent.approximate
        if base.is_nan or exponent.is_nan:
            return Rational.nan(approx)
        if exponent.is_infinite:
            return self._power_infinite_exponent(base, exponent, approx)
        if exponent.is_integer:
            return self.integer_power(base, exponent.numerator, approx)

        p, q = exponent.numerator, exponent.denominator
        if base.is_infinite:
            if exponent.is_negative:
                return ZERO.with_approximation(approx)
            return INFINITY.with_approximation(approx) if base.is_positive else Rational.nan(approx)
        if base.is_zero:
            return ZERO.with_approximation(approx) if exponent.is_positive else Rational.nan(approx)
        if base.is_negative:
            if q % 2 == 0:
                return Rational.nan(approx)
            magnitude = self.power(-base, exponent)
            return -magnitude if p % 2 else magnitude

        rooted = exact_root(base, q)
        if rooted is not None:
            return self.integer_power(rooted, p, approx)
        log_base = self.ln(base)
        if log_base.is_nan:
            return log_base
        return self.exp(exponent * log_base).with_approximation()

    def _power_infinite_exponent(self, base: Rational, exponent: Rational, approx: bool) -> Rational:
        if base.is_zero:
            return ZERO.with_approximation(approx) if exponent.is_positive else INFINITY.with_approximation(approx)
        magnitude = abs(base)
        if magnitude == 1:
            return Rational.nan(approx)
        grows = (magnitude > 1) == exponent.is_positive
        if not grows:
            return ZERO.with_approximation(approx)
        return INFINITY.with_approximation(approx) if base.is_positive else Rational.nan(approx)

    def integer_power(self, base: Rational, e: int, approx: bool | None = None) -> Rational:
        """Binary exponentiation; results beyond LIMITS.MAX_DIGITS become ±Infinity (or 0)."""
        if approx is None:
            approx = base.approximate
        if not base.is_finite or base.is_zero or e == 0:
            return (base ** e).with_approximation(approx) if not base.is_nan else base

        magnitude = abs(base)
        negative_result = base.is_negative and e % 2 == 1
        if magnitude == 1:
            return (-ONE if negative_result else ONE).with_approximation(approx)
        bits = max(base.numerator.bit_length(), base.denominator.bit_length())
        if self._too_large(abs(e) * bits * LOG10_2):
            if (e > 0) == (magnitude > 1):
                return Rational.infinity(-1 if negative_result else 1, True)
            return ZERO.with_approximation()

        result = ONE
        square = base
        k = abs(e)
        while k:
            if self._cancelled():
                return Rational.nan()
            if k & 1:
                result = result * square
            k >>= 1
            if k:
                square = square * square
        if e < 0:
            result = result.reciprocal()
        return result.with_approximation(approx)

    def modular_power(self, base: int, e: int, modulus: int) -> Rational:
        if modulus == 0:
            return Rational.nan()
        try:
            value = gmpy2.powmod(base, e, modulus)
        except (ValueError, ZeroDivisionError):
            return Rational.nan()  # no inverse for negative exponents
        return Rational(int(value), reduced=True)

    def tetration(self, a: Rational, height: int) -> Rational:
        """a ↑↑ n = a^(a ↑↑ (n-1)), a ↑↑ 0 = 1."""
        if height < 0:
            return Rational.nan(a.approximate)
        result = ONE.with_approximation(a.approximate)
        for _ in range(height):
            if self._cancelled():
                return Rational.nan()
            result = self.power(a, result)
            if not result.is_finite:
                break
        return result

    # ---------- exponential / logarithm ---------------------------------------

    def exp(self, x: Rational) -> Rational:
        if x.is_nan:
            return x
        if x.is_infinite:
            return x if x.is_positive else ZERO.with_approximation(x.approximate)
        if x.is_zero:
            return ONE.with_approximation(x.approximate)
        limit = self.parameters.max_digits * LN10
        xf = float(x)
        if xf > limit:
            return INFINITY.with_approximation()
        if xf < -limit:
            return ZERO.with_approximation()
        if x.is_negative:
            return self.exp(-x).reciprocal().with_approximation()

        # halve into (0, 1/2], sum the series, square back
        halvings = 0
        y = x
        while y > HALF:
            y = y / 2
            halvings += 1
        digits = self.decimals + int(xf / LN10) + 1 + halvings // 3 + 1
        w = digits + self.parameters.guard_digits
        value = self._series(Expansion.EXP, digits).evaluate(y)
        for _ in range(halvings):
            if self._cancelled() or value.is_nan:
                return Rational.nan()
            value = (value * value).quantize(w)
        return value.quantize(self.working_digits).with_approximation()

    def expm1(self, x: Rational) -> Rational:
        """exp(x) - 1 without cancellation error near zero."""
        if x.is_finite and abs(x) <= HALF:
            if x.is_zero:
                return ZERO.with_approximation(x.approximate)
            return self._series(Expansion.EXPM1).evaluate(x)
        return self.exp(x) - 1

    def ln(self, x: Rational) -> Rational:
        if x.is_nan or x.is_negative:
            return Rational.nan(x.approximate)
        if x.is_zero:
            return NEGATIVE_INFINITY.with_approximation(x.approximate)
        if x.is_infinite:
            return x
        if x == ONE:
            return ZERO.with_approximation(x.approximate)

        rep = x.exponent_representation
        if rep is not None:
            # ln(m·10^k) = ln(m) + k·ln(10)
            return (self.ln(rep.mantissa) + rep.exponent * self.ln10()).quantize(self.working_digits)
        if x > ONE:
            return -self._ln_below_one(x.reciprocal())
        return self._ln_below_one(x)

    def _ln_below_one(self, x: Rational) -> Rational:
        """ln(x) for 0 < x < 1: scale by 2^j into [1/2, 1], then ln(x) = ln(x·2^j) - j·ln 2."""
        j = x.denominator.bit_length() - x.numerator.bit_length()
        y = x * 2 ** j if j >= 0 else x / 2 ** -j
        if y > ONE:
            y = y / 2
            j -= 1
        extra = dec_digits(j) + 1
        value = self._series(Expansion.LN, self.decimals + extra).evaluate(y)
        if j == 0 or value.is_nan:
            return value.quantize(self.working_digits)
        ln2 = self._series(Expansion.LN, self.decimals + extra + 2).evaluate(HALF)
        return (value + j * ln2).quantize(self.working_digits).with_approximation()

    def log(self, x: Rational, base: Rational | None = None) -> Rational:
        """Logarithm to `base` (default 10); exact when x is an integer power of an integer base."""
        base = Rational(10) if base is None else base
        if x.is_nan or base.is_nan or not base.is_positive or base == ONE or base.is_infinite:
            return Rational.nan(x.approximate or base.approximate)
        exact = self._exact_log(x, base)
        if exact is not None:
            return exact
        numerator = self.ln(x)
        if not numerator.is_finite:
            return numerator
        return (numerator / self.ln(base)).quantize(self.working_digits).with_approximation()

    def _exact_log(self, x: Rational, base: Rational) -> Rational | None:
        if not (x.is_finite and x.is_positive and base.is_integer):
            return None
        b = base.numerator
        if x.denominator == 1:
            n, sign = x.numerator, 1
        elif x.numerator == 1:
            n, sign = x.denominator, -1
        else:
            return None
        k = 0
        while n % b == 0:
            if self._cancelled():
                return None
            n //= b
            k += 1
        if n != 1:
            return None
        return Rational(sign * k, approximate=x.approximate or base.approximate)

    # ---------- trigonometry --------------------------------------------------

    def to_radians(self, x: Rational) -> Rational:
        return (x * self.pi() / 180).quantize(self.working_digits)

    def from_radians(self, x: Rational) -> Rational:
        return (x * 180 / self.pi()).quantize(self.working_digits)

    def _special_sine(self, x: Rational) -> Rational | None:
        """Exact sine when x is a multiple of 30° (or, within precision, of π/6)."""
        if x.is_zero:
            return ZERO.with_approximation(x.approximate)
        if self.parameters.degrees:
            turns = x / 30
            if turns.is_integer:
                hit = _SPECIAL_SINES.get(turns.numerator % 12)
                return None if hit is None else hit.with_approximation(x.approximate)
            return None
        if not x.approximate:
            return None  # a nonzero exact rational is never a multiple of π
        turns = x * 6 / self.pi()
        nearest = turns.round()
        if abs(turns - nearest) >= Rational(1, 10 ** self.decimals):
            return None
        hit = _SPECIAL_SINES.get(int(nearest) % 12)
        return None if hit is None else hit.with_approximation()

    def sin(self, x: Rational) -> Rational:
        if not x.is_finite:
            return Rational.nan(x.approximate)
        special = self._special_sine(x)
        if special is not None:
            return special
        r = self.to_radians(x) if self.parameters.degrees else x
        # enough pi digits to keep the reduction accurate for large |x|
        pi = self._pi_with(self.decimals + dec_digits(int(r)) + 1)
        two_pi = 2 * pi
        r = r - two_pi * ((r + pi) / two_pi).floor()     # [-π, π)
        half_pi = pi / 2
        if r > half_pi:
            r = pi - r
        elif r < -half_pi:
            r = -pi - r
        return self._series(Expansion.SIN).evaluate(r.quantize(self.working_digits))

    def cos(self, x: Rational) -> Rational:
        if not x.is_finite:
            return Rational.nan(x.approximate)
        if x.is_zero:
            return ONE.with_approximation(x.approximate)
        if self.parameters.degrees:
            return self.sin(90 - x)
        return self.sin(self.pi() / 2 - x)

    def tan(self, x: Rational) -> Rational:
        return self.sin(x) / self.cos(x)

    # ---------- hyperbolic ----------------------------------------------------

    def sinh(self, x: Rational) -> Rational:
        if x.is_infinite:
            return x
        return ((self.expm1(x) - self.expm1(-x)) / 2).quantize(self.working_digits)

    def cosh(self, x: Rational) -> Rational:
        if x.is_infinite:
            return INFINITY.with_approximation(x.approximate)
        return ((self.exp(x) + self.exp(-x)) / 2).quantize(self.working_digits)

    def tanh(self, x: Rational) -> Rational:
        if x.is_nan:
            return x
        if x.is_zero:
            return ZERO.with_approximation(x.approximate)
        grown = self.expm1(2 * abs(x))
        if grown.is_infinite:
            value = ONE.with_approximation()
        else:
            value = (grown / (grown + 2)).quantize(self.working_digits)
        return -value if x.is_negative else value

    def asinh(self, x: Rational) -> Rational:
        if not x.is_finite:
            return x
        if x.is_zero:
            return ZERO.with_approximation(x.approximate)
        a = abs(x)
        value = self.ln(a + self.sqrt(a * a + 1))
        return -value if x.is_negative else value

    def acosh(self, x: Rational) -> Rational:
        if x.is_nan or x < ONE:
            return Rational.nan(x.approximate)
        if x.is_infinite:
            return x
        return self.ln(x + self.sqrt(x * x - 1))

    def atanh(self, x: Rational) -> Rational:
        if x.is_nan or abs(x) > ONE:
            return Rational.nan(x.approximate)
        if abs(x) == ONE:
            return Rational.infinity(x.sign, x.approximate)
        return (self.ln((1 + x) / (1 - x)) / 2).quantize(self.working_digits)
