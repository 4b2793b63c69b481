"""The Mandelbrot membership grid."""

from __future__ import annotations

import enum
from typing import Iterator, Optional

import numpy as np

from .coords import CoordRange, RowCol

WIDTH = 800
HEIGHT = 800
ITERATIONS = 200
BACKENDS = ("scalar", "tensorflow")


class Pixel(enum.IntEnum):
    """Membership of one pixel, stored as a single byte."""

    Out = 0
    In = 1


def _scalar_pixels(r_range: CoordRange, i_range: CoordRange, width: int, height: int, iterations: int) -> Iterator[int]:
    for index in range(width * height):
        point = RowCol.from_index(index, width, height).to_complex(r_range, i_range)
        yield Pixel.In if point.in_mand(iterations) else Pixel.Out


class Mand:
    """Classification of every pixel of a viewport, computed once at construction.

    ``pixels()`` is a flat row-major buffer (``index = row * width + col``)
    with ``0`` for :attr:`Pixel.Out` and ``1`` for :attr:`Pixel.In`. The
    buffer is owned by the instance and is read-only.
    """

    def __init__(
        self,
        x_min: float,
        x_max: float,
        y_min: float,
        y_max: float,
        *,
        width: int = WIDTH,
        height: int = HEIGHT,
        iterations: int = ITERATIONS,
        backend: str = "tensorflow",
        device: Optional[str] = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        if iterations < 0:
            raise ValueError(f"Iteration budget must be non-negative, got {iterations}")
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{backend}'. Valid choices: {', '.join(BACKENDS)}.")

        x_range = CoordRange(x_min, x_max)
        y_range = CoordRange(y_min, y_max)

        if backend == "scalar":
            pixels = np.fromiter(
                _scalar_pixels(x_range, y_range, width, height, iterations),
                dtype=np.uint8,
                count=width * height,
            )
        else:
            # Deferred so the scalar backend runs without TensorFlow installed.
            from .kernel import classify_grid

            pixels = classify_grid(x_range, y_range, width, height, iterations, device=device)

        pixels.flags.writeable = False
        self._width = width
        self._height = height
        self._iterations = iterations
        self._x_range = x_range
        self._y_range = y_range
        self._pixels = pixels

    @classmethod
    def new(cls, x_min: float, x_max: float, y_min: float, y_max: float) -> "Mand":
        """Compute the default 800x800 grid with an iteration budget of 200."""

        return cls(x_min, x_max, y_min, y_max)

    def __repr__(self) -> str:
        return (
            f"Mand(x=[{self._x_range.min}, {self._x_range.max}], "
            f"y=[{self._y_range.min}, {self._y_range.max}], "
            f"{self._width}x{self._height}, iterations={self._iterations})"
        )

    def __len__(self) -> int:
        return self._pixels.size

    def __getitem__(self, index: int) -> Pixel:
        if isinstance(index, slice):
            raise TypeError("Mand supports integer indexing only; slice pixels() instead")
        return Pixel(int(self._pixels[index]))

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height

    @property
    def iterations(self) -> int:
        return self._iterations

    @property
    def x_range(self) -> CoordRange:
        return self._x_range

    @property
    def y_range(self) -> CoordRange:
        return self._y_range

    def pixels(self) -> np.ndarray:
        return self._pixels

    def to_image(self) -> np.ndarray:
        """The buffer viewed as ``(height, width)``; shares memory with :meth:`pixels`."""

        return self._pixels.reshape(self._height, self._width)

    def count(self, pixel: Pixel) -> int:
        return int(np.count_nonzero(self._pixels == int(pixel)))
