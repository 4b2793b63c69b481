"""Batch escape-time classification of a whole pixel grid with TensorFlow."""

from __future__ import annotations

from typing import Optional

import numpy as np
import tensorflow as tf

from .complex_number import ESCAPE_RADIUS_SQUARED
from .coords import CoordRange


@tf.function
def _escape_step(
    zr: tf.Tensor, zi: tf.Tensor, cr: tf.Tensor, ci: tf.Tensor, active: tf.Tensor
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every point that has not escaped by one ``z = z**2 + c`` update."""

    zr_new = zr * zr - zi * zi + cr
    zi_new = 2.0 * zr * zi + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    horizon = tf.constant(ESCAPE_RADIUS_SQUARED, dtype=zr.dtype)
    dist = zr * zr + zi * zi
    # A NaN distance counts as bounded.
    bounded = tf.logical_or(tf.less_equal(dist, horizon), tf.math.is_nan(dist))
    return zr, zi, tf.logical_and(active, bounded)


@tf.function
def _escape_run(cr: tf.Tensor, ci: tf.Tensor, updates: tf.Tensor) -> tf.Tensor:
    """Iterate until ``updates`` passes have run or every point has escaped."""

    updates = tf.cast(updates, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    active = tf.ones_like(cr, tf.bool)

    def cond(i: tf.Tensor, zr: tf.Tensor, zi: tf.Tensor, active: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less(i, updates), tf.reduce_any(active))

    def body(i: tf.Tensor, zr: tf.Tensor, zi: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
        zr, zi, active = _escape_step(zr, zi, cr, ci, active)
        return i + 1, zr, zi, active

    _, _, _, active = tf.while_loop(cond, body, (i, zr, zi, active))
    return active


def grid_coordinates(r_range: CoordRange, i_range: CoordRange, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Real and imaginary parts of every pixel, each shaped ``(height, width)``."""

    r_portions = np.arange(width, dtype=np.float64) / np.float64(width)
    i_portions = np.arange(height, dtype=np.float64) / np.float64(height)
    r = r_portions * np.float64(r_range.size()) + np.float64(r_range.min)
    i = i_portions * np.float64(i_range.size()) + np.float64(i_range.min)
    real, imag = np.meshgrid(r, i)
    return real, imag


def classify_grid(
    r_range: CoordRange,
    i_range: CoordRange,
    width: int,
    height: int,
    iterations: int,
    *,
    device: Optional[str] = None,
) -> np.ndarray:
    """Classify every pixel of the grid, returning a flat row-major ``uint8`` buffer.

    A pixel is ``1`` when its point survives ``iterations + 2`` updates
    without its squared magnitude exceeding the escape threshold, matching
    :meth:`mandgrid.complex_number.Complex.in_mand`.
    """

    real, imag = grid_coordinates(r_range, i_range, width, height)
    updates = tf.constant(iterations + 2, dtype=tf.int32)

    with tf.device(device if device is not None else "/CPU:0"):
        cr = tf.convert_to_tensor(real, dtype=tf.float64)
        ci = tf.convert_to_tensor(imag, dtype=tf.float64)
        active = _escape_run(cr, ci, updates)
        pixels = tf.cast(active, tf.uint8)

    return pixels.numpy().reshape(-1)
