# -----------------------------------------------------------------------------
#  factorization.py
#  Wheel trial division (2·3·5·7 wheel) producing a signed prime-power
#  factorization that can be interrupted through a CancellationToken.
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from math import gcd
from time import perf_counter

from sympy import isprime

from arbcalc.cancellation import CancellationToken, ensure_token
from arbcalc.fmt import abbr_int_fast, int_text, superscript
from arbcalc.runtime import debug

_SEED_PRIMES = (2, 3, 5, 7)
_WHEEL_MODULUS = 210
_WHEEL_START = 11


def _wheel_increments() -> tuple[int, ...]:
    """Gaps between consecutive residues coprime to 210, starting at 11 (48 entries)."""
    residues = [r for r in range(_WHEEL_START, _WHEEL_START + _WHEEL_MODULUS) if gcd(r, _WHEEL_MODULUS) == 1]
    residues.append(residues[0] + _WHEEL_MODULUS)
    return tuple(b - a for a, b in zip(residues, residues[1:]))


WHEEL_INCREMENTS = _wheel_increments()

# every this many candidates, check whether the remaining cofactor is prime
_PRIMALITY_PROBE_INTERVAL = 4096


@dataclass(frozen=True)
class Factor:
    """
    A prime power. `prime` is None for the NaN sentinel that terminates an
    interrupted factorization; 0, 1 and -1 appear as degenerate factors for
    the inputs 0, 1 and negative numbers.
    """
    prime: int | None
    multiplicity: int = 1

    @property
    def is_nan(self) -> bool:
        return self.prime is None

    def description(self) -> str:
        if self.prime is None:
            return "NaN"
        base = int_text(self.prime)
        return base if self.multiplicity == 1 else f"{base}{superscript(self.multiplicity)}"


NAN_FACTOR = Factor(None)


class Factorization:
    """
    Prime-power factorization of an integer.

    Call `factor()` once; afterwards `factors` holds the signed factorization,
    e.g. -360 → [-1, 2³, 3², 5]. If the token was cancelled midway, the list
    ends with the NaN sentinel and `is_complete` is False.
    """

    def __init__(self, integer: int):
        self.integer = int(integer)
        self.factors: list[Factor] = []
        self._factored = False

    @property
    def is_complete(self) -> bool:
        return self._factored and not any(f.is_nan for f in self.factors)

    @property
    def is_nan(self) -> bool:
        return any(f.is_nan for f in self.factors)

    @property
    def prime_powers(self) -> list[Factor]:
        """Factors excluding the sign (-1), the NaN sentinel and the degenerate 0/1."""
        return [f for f in self.factors if f.prime is not None and f.prime > 1]

    def factor(self, token: CancellationToken | None = None) -> Factorization:
        if self._factored:
            return self
        token = ensure_token(token)
        n = self.integer
        t0 = perf_counter()

        if n == 0:
            self.factors = [Factor(0)]
        elif n in (1, -1):
            self.factors = [Factor(n)]
        else:
            out: list[Factor] = []
            if n < 0:
                out.append(Factor(-1))
            self.factors = out + self._trial_division(abs(n), token)

        self._factored = True
        state = "complete" if self.is_complete else "cancelled"
        debug("factor", f"{abbr_int_fast(n)}: {len(self.factors)} factor(s), {state}, {perf_counter() - t0:.3f}s")
        return self

    @staticmethod
    def _trial_division(n: int, token: CancellationToken) -> list[Factor]:
        found: list[Factor] = []

        def divide_out(p: int) -> None:
            nonlocal n
            count = 0
            while n % p == 0:
                n //= p
                count += 1
            if count:
                found.append(Factor(p, count))

        for p in _SEED_PRIMES:
            if token.is_cancel_requested():
                return [*found, NAN_FACTOR]
            divide_out(p)

        candidate = _WHEEL_START
        step = 0
        probes = 0
        while candidate * candidate <= n:
            if token.is_cancel_requested():
                return [*found, NAN_FACTOR]
            divide_out(candidate)
            probes += 1
            if probes % _PRIMALITY_PROBE_INTERVAL == 0 and isprime(n):
                break
            candidate += WHEEL_INCREMENTS[step]
            step = (step + 1) % len(WHEEL_INCREMENTS)

        if n > 1:
            found.append(Factor(n))
        return found

    # ---------- Result protocol ----------------------------------------------

    def product(self) -> int:
        """Π prime^multiplicity over the prime powers (magnitude of the input when complete)."""
        return reduce(lambda acc, f: acc * f.prime ** f.multiplicity, self.prime_powers, 1)

    def description(self) -> str:
        """
        >>> Factorization(360).factor().description()
        '2³ × 3² × 5'
        """
        if not self.factors:
            return int_text(self.integer)
        return " × ".join(f.description() for f in self.factors)

    def is_equal(self, other) -> bool:
        return (
            isinstance(other, Factorization)
            and self.integer == other.integer
            and self.factors == other.factors
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Factorization):
            return NotImplemented
        return self.is_equal(other)

    __hash__ = None

    def __str__(self) -> str:
        return self.description()

    def __repr__(self) -> str:
        return f"Factorization({int_text(self.integer)}: {self.description()})"
