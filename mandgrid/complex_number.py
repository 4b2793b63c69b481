"""Complex arithmetic for the escape-time iteration."""

from __future__ import annotations

from dataclasses import dataclass

ESCAPE_RADIUS_SQUARED = 4.0


@dataclass(frozen=True)
class Complex:
    """Immutable complex value. Every operation returns a new instance."""

    r: float
    i: float

    @classmethod
    def new(cls, r: float, i: float) -> "Complex":
        return cls(r, i)

    def __str__(self) -> str:
        return f"{self.r} + {self.i}i"

    def dist_squared(self) -> float:
        return self.r * self.r + self.i * self.i

    def square(self) -> "Complex":
        return Complex(self.r * self.r - self.i * self.i, 2.0 * self.r * self.i)

    def plus(self, other: "Complex") -> "Complex":
        return Complex(self.r + other.r, self.i + other.i)

    def in_mand(self, iterations: int) -> bool:
        """Return True when the orbit of ``z = z**2 + self`` stays bounded.

        The escape test runs before the budget check on every pass, so a
        bounded point survives ``iterations + 2`` updates before it is
        accepted.
        """

        count = 0
        z = Complex(0.0, 0.0)
        while True:
            z = z.square().plus(self)
            if z.dist_squared() > ESCAPE_RADIUS_SQUARED:
                return False
            if count > iterations:
                return True
            count += 1
