from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from arbcalc.runtime import CFG


class AngleMode(Enum):
    RADIANS = "radians"
    DEGREES = "degrees"

    @classmethod
    def parse(cls, name: str | AngleMode | None) -> AngleMode:
        if isinstance(name, AngleMode):
            return name
        key = str(name or "radians").strip().lower()
        if key in {"deg", "degree", "degrees", "°"}:
            return cls.DEGREES
        if key in {"rad", "radian", "radians"}:
            return cls.RADIANS
        raise ValueError(f"unknown angle mode: {name!r}")


@dataclass(frozen=True)
class EvaluationParameters:
    # --- precision / interpretation ---
    decimals: int = 20                          # correct decimal digits requested from series and roots
    angle_mode: AngleMode = AngleMode.RADIANS
    integer_mode: bool = False                  # evaluate to IntegerValue, integer division

    # --- safety ---
    max_digits: int = 100_000                   # results larger than this become ±Infinity
    guard_digits: int = 10                      # extra working digits for intermediate rounding

    @property
    def working_digits(self) -> int:
        return self.decimals + self.guard_digits

    @property
    def degrees(self) -> bool:
        return self.angle_mode is AngleMode.DEGREES

    def with_decimals(self, decimals: int) -> EvaluationParameters:
        return replace(self, decimals=max(0, int(decimals)))

    @classmethod
    def from_runtime(cls, **overrides) -> EvaluationParameters:
        """Build parameters from the active profile (see runtime.CFG); keyword overrides win."""
        params = cls(
            decimals=int(CFG("EVALUATION.DECIMALS", 20)),
            angle_mode=AngleMode.parse(CFG("EVALUATION.ANGLE_MODE", "radians")),
            integer_mode=bool(CFG("EVALUATION.INTEGER_MODE", False)),
            max_digits=int(CFG("LIMITS.MAX_DIGITS", 100_000)),
            guard_digits=int(CFG("LIMITS.GUARD_DIGITS", 10)),
        )
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(params, **overrides) if overrides else params
