"""
Souls: the game's integral currency.

Souls are whole units. Arithmetic stays integral (division truncates toward
zero) and never clamps, so intermediate values may go negative; callers clamp
with min/max where a transaction must keep balances non-negative.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True, order=True, slots=True)
class Souls:
    """An integer count of souls with tiered human-readable formatting."""

    value: int = 0

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Souls value must be an int, got {type(self.value).__name__}")

    def __add__(self, other: "Souls") -> "Souls":
        if not isinstance(other, Souls):
            return NotImplemented
        return Souls(self.value + other.value)

    def __sub__(self, other: "Souls") -> "Souls":
        if not isinstance(other, Souls):
            return NotImplemented
        return Souls(self.value - other.value)

    def __mul__(self, other: int) -> "Souls":
        if isinstance(other, Souls):
            return Souls(self.value * other.value)
        if isinstance(other, bool) or not isinstance(other, int):
            return NotImplemented
        return Souls(self.value * other)

    __rmul__ = __mul__

    def __truediv__(self, other: int) -> "Souls":
        if isinstance(other, bool) or not isinstance(other, int):
            return NotImplemented
        if other == 0:
            raise ZeroDivisionError("division of Souls by zero")
        quotient = abs(self.value) // abs(other)
        if (self.value < 0) != (other < 0):
            quotient = -quotient
        return Souls(quotient)

    def __int__(self) -> int:
        return self.value

    def __float__(self) -> float:
        return float(self.value)

    def __bool__(self) -> bool:
        return self.value != 0

    def times(self, x: int) -> "Souls":
        return self * x

    def scale(self, factor: float) -> "Souls":
        """Multiply by a real factor, rounding down."""
        return Souls(math.floor(self.value * factor))

    def __str__(self) -> str:
        for unit, suffix in ((Souls.T, "T"), (Souls.B, "B"), (Souls.M, "M")):
            if self >= unit:
                return f"{self.value / unit.value:.2f} {suffix}"
        return f"{self.value:,}"


Souls.ZERO = Souls(0)
Souls.K = Souls(1_000)
Souls.M = Souls(1_000_000)
Souls.B = Souls(1_000_000_000)
Souls.T = Souls(1_000_000_000_000)
