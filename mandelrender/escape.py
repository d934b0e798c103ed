"""Escape-time evaluation of the Mandelbrot iteration and its coloring."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
import tensorflow as tf

if TYPE_CHECKING:
    from .renderer import Viewport

ESCAPE_RADIUS_SQUARED = 4.0
MAGNITUDE_EPSILON = 1e-16
_LOG2 = math.log(2.0)


def map_pixel(x: int, y: int, width: int, height: int, viewport: "Viewport") -> complex:
    """Map pixel ``(x, y)`` of a ``width`` x ``height`` raster into the viewport."""

    re = viewport.x_min + (x / width) * viewport.width
    im = viewport.y_min + (y / height) * viewport.height
    return complex(re, im)


def iterate(c: complex, max_iterations: int) -> tuple[int, complex]:
    """Iterate ``z <- z*z + c`` from zero until ``|z|^2 > 4`` or the budget runs out.

    Returns the step index at which the escape test first succeeded, or
    ``max_iterations`` for a bounded point, along with the last iterate.
    """

    z = 0j
    for n in range(max_iterations):
        z = z * z + c
        if z.real * z.real + z.imag * z.imag > ESCAPE_RADIUS_SQUARED:
            return n, z
    return max_iterations, z


def colorize(n: int, z: complex, max_iterations: int, smooth: bool) -> float:
    """Turn an escape result into a gradient position.

    Bounded points map to 0. Otherwise the discrete position is
    ``n / max_iterations``; the smooth position uses the continuous escape
    count ``n + 1 - log(log|z|) / log 2``, falling back to ``n`` when that
    estimate is negative or undefined.
    """

    if n >= max_iterations:
        return 0.0
    if not smooth:
        return n / max_iterations

    magnitude = math.hypot(z.real, z.imag)
    if magnitude <= 0:
        magnitude = MAGNITUDE_EPSILON
    log_magnitude = math.log(magnitude)
    if log_magnitude <= 0:
        # log(log|z|) is undefined here; treat it like a negative estimate.
        return n / max_iterations
    nu = n + 1 - math.log(log_magnitude) / _LOG2
    if nu < 0:
        nu = float(n)
    return nu / max_iterations


@tf.function
def _escape_step(zs: tf.Tensor, cs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor, step: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every still-bounded point by one iteration."""

    zs = tf.where(active, zs * zs + cs, zs)
    re = tf.math.real(zs)
    im = tf.math.imag(zs)
    escaped = tf.logical_and(active, re * re + im * im > ESCAPE_RADIUS_SQUARED)
    ns = tf.where(escaped, tf.fill(tf.shape(ns), step), ns)
    active = tf.logical_and(active, tf.logical_not(escaped))
    return zs, ns, active


@tf.function
def _escape_run(cs: tf.Tensor, max_iterations: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zs = tf.zeros_like(cs)
    ns = tf.fill(tf.shape(cs), max_iterations)
    active = tf.ones(tf.shape(cs), tf.bool)

    def cond(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
        zs, ns, active = _escape_step(zs, cs, ns, active, i)
        return i + 1, zs, ns, active

    return tf.while_loop(cond, body, (i, zs, ns, active))


def iterate_row_tensor(cs: np.ndarray, max_iterations: int, *, device: str = "/CPU:0") -> tuple[np.ndarray, np.ndarray]:
    """Vectorized :func:`iterate` over an array of points, evaluated with TensorFlow."""

    with tf.device(device):
        cs_tf = tf.convert_to_tensor(np.asarray(cs, dtype=np.complex128), dtype=tf.complex128)
        _, zs, ns, _ = _escape_run(cs_tf, tf.constant(max_iterations, dtype=tf.int32))
    return ns.numpy().astype(np.int64), zs.numpy()


def colorize_row(ns: np.ndarray, zs: np.ndarray, max_iterations: int, smooth: bool) -> np.ndarray:
    """Vectorized :func:`colorize`."""

    ns_float = ns.astype(np.float64)
    escaped = ns < max_iterations
    if not smooth:
        return np.where(escaped, ns_float / max_iterations, 0.0)

    magnitude = np.abs(zs)
    magnitude = np.where(magnitude <= 0, MAGNITUDE_EPSILON, magnitude)
    log_magnitude = np.log(magnitude)
    defined = log_magnitude > 0
    nu = ns_float + 1 - np.log(np.where(defined, log_magnitude, 1.0)) / _LOG2
    nu = np.where(defined & (nu >= 0), nu, ns_float)
    return np.where(escaped, nu / max_iterations, 0.0)
