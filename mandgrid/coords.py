"""Axis ranges and the pixel-index to complex-plane mapping."""

from __future__ import annotations

from dataclasses import dataclass

from .complex_number import Complex


@dataclass(frozen=True)
class CoordRange:
    """A closed interval of one axis of the complex plane."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError(f"CoordRange requires min <= max, got min={self.min!r} max={self.max!r}")

    def size(self) -> float:
        return self.max - self.min

    def get_position_by_portion(self, portion: float) -> float:
        """Interpolate into the range. Portions outside [0, 1] extrapolate."""

        return portion * self.size() + self.min


@dataclass(frozen=True)
class RowCol:
    """Row and column of a pixel in a ``width`` x ``height`` grid."""

    width: int
    height: int
    row: int
    col: int

    @classmethod
    def from_index(cls, index: int, width: int, height: int) -> "RowCol":
        # Row-major: index = row * width + col.
        return cls(width=width, height=height, row=index // width, col=index % width)

    @property
    def index(self) -> int:
        return self.row * self.width + self.col

    def to_complex(self, r_range: CoordRange, i_range: CoordRange) -> Complex:
        """Map the pixel to a point: columns run along the real axis, rows along the imaginary axis."""

        r_portion = float(self.col) / float(self.width)
        i_portion = float(self.row) / float(self.height)
        return Complex(
            r_range.get_position_by_portion(r_portion),
            i_range.get_position_by_portion(i_portion),
        )
