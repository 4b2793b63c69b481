"""Public API for computing Mandelbrot membership grids."""

from .complex_number import ESCAPE_RADIUS_SQUARED, Complex
from .coords import CoordRange, RowCol
from .engine import BACKENDS, HEIGHT, ITERATIONS, WIDTH, Mand, Pixel

__all__ = [
    "BACKENDS",
    "Complex",
    "CoordRange",
    "ESCAPE_RADIUS_SQUARED",
    "HEIGHT",
    "ITERATIONS",
    "Mand",
    "Pixel",
    "RowCol",
    "WIDTH",
]
