"""Parameter validation and the parallel row scheduler."""

from __future__ import annotations

import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import ConfigurationError
from .escape import colorize, colorize_row, iterate, iterate_row_tensor, map_pixel
from .palette import Gradient, interpolate, normalize

BACKENDS = ("python", "tensorflow")


@dataclass(frozen=True)
class Viewport:
    """A rectangle of the complex plane mapped onto the raster."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    def validate(self) -> None:
        bounds = (self.x_min, self.x_max, self.y_min, self.y_max)
        if not all(math.isfinite(value) for value in bounds):
            raise ConfigurationError(f"viewport bounds must be finite, got {bounds}.")
        if self.x_min >= self.x_max:
            raise ConfigurationError(f"viewport needs x_min < x_max, got {self.x_min} >= {self.x_max}.")
        if self.y_min >= self.y_max:
            raise ConfigurationError(f"viewport needs y_min < y_max, got {self.y_min} >= {self.y_max}.")


DEFAULT_VIEWPORT = Viewport(-2.2, 1.0, -1.6, 1.6)


def default_workers() -> int:
    return os.cpu_count() or 1


def _require_positive_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive integer, got {value!r}.")


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set."""

    width: int
    height: int
    viewport: Viewport = DEFAULT_VIEWPORT
    max_iterations: int = 1200
    workers: Optional[int] = None
    smooth: bool = True
    backend: str = "tensorflow"

    @property
    def worker_count(self) -> int:
        return default_workers() if self.workers is None else self.workers

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` if the render cannot start."""

        for name in ("width", "height", "max_iterations"):
            _require_positive_int(name, getattr(self, name))
        if self.workers is not None:
            _require_positive_int("workers", self.workers)
        if self.backend not in BACKENDS:
            raise ConfigurationError(f"unknown backend {self.backend!r}; choose one of {', '.join(BACKENDS)}.")
        self.viewport.validate()


def allocate_raster(width: int, height: int) -> np.ndarray:
    return np.zeros((height, width, 4), dtype=np.uint8)


def compute_row(row: np.ndarray, y: int, params: RenderParameters, gradient: Gradient) -> None:
    """Fill ``row`` (the raster's row ``y``) with colored escape results."""

    width = params.width
    max_iterations = params.max_iterations

    if params.backend == "tensorflow":
        cs = np.array([map_pixel(x, y, width, params.height, params.viewport) for x in range(width)], dtype=np.complex128)
        ns, zs = iterate_row_tensor(cs, max_iterations)
        ts = colorize_row(ns, zs, max_iterations, params.smooth)
        for x in range(width):
            row[x] = interpolate(gradient, float(ts[x]))
        return

    for x in range(width):
        c = map_pixel(x, y, width, params.height, params.viewport)
        n, z = iterate(c, max_iterations)
        row[x] = interpolate(gradient, colorize(n, z, max_iterations, params.smooth))


def render_image(params: RenderParameters, gradient: Gradient) -> np.ndarray:
    """Render the full raster, one task per row on a fixed pool of workers.

    The gradient is normalized before any worker starts. Every row index is
    submitted exactly once and each task writes only its own row of the
    shared buffer, so no locking beyond the pool's work queue is involved. Returns once every row has been computed; an exception raised
    while computing a row propagates to the caller.
    """

    params.validate()
    gradient = normalize(gradient)
    raster = allocate_raster(params.width, params.height)

    with ThreadPoolExecutor(max_workers=params.worker_count, thread_name_prefix="mandelrender-row") as pool:
        futures = [pool.submit(compute_row, raster[y], y, params, gradient) for y in range(params.height)]
        for future in futures:
            future.result()

    return raster
