"""Public API for palette-driven Mandelbrot rendering."""

from .errors import ConfigurationError, MandelrenderError, PaletteNotFoundError
from .escape import colorize, colorize_row, iterate, iterate_row_tensor, map_pixel
from .palette import ColorStop, Gradient, interpolate, normalize, parse_color
from .registry import BUILTIN_PALETTES, PaletteRegistry, default_registry, gradient_from_colormap
from .renderer import DEFAULT_VIEWPORT, RenderParameters, Viewport, compute_row, render_image

__all__ = [
    "BUILTIN_PALETTES",
    "ColorStop",
    "ConfigurationError",
    "DEFAULT_VIEWPORT",
    "Gradient",
    "MandelrenderError",
    "PaletteNotFoundError",
    "PaletteRegistry",
    "RenderParameters",
    "Viewport",
    "colorize",
    "colorize_row",
    "compute_row",
    "default_registry",
    "gradient_from_colormap",
    "interpolate",
    "iterate",
    "iterate_row_tensor",
    "map_pixel",
    "normalize",
    "parse_color",
    "render_image",
]
