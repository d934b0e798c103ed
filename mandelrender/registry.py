"""Named palette lookup."""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping, Optional

import numpy as np

try:
    from matplotlib import colormaps as _mpl_colormaps
except ImportError:  # Matplotlib < 3.5
    from matplotlib import cm as _mpl_colormaps  # type: ignore

from .errors import ConfigurationError, PaletteNotFoundError
from .palette import ColorStop, Gradient, normalize

COLORMAP_PREFIX = "mpl:"

BUILTIN_PALETTES: tuple[Gradient, ...] = (
    Gradient.from_pairs("NebulaSpectre", [
        (0.0, (0x09, 0x04, 0x20, 0xFF)),
        (0.15, (0x3A, 0x0F, 0x73, 0xFF)),
        (0.35, (0x8D, 0x1A, 0xA8, 0xFF)),
        (0.55, (0xE7, 0x36, 0x7F, 0xFF)),
        (0.75, (0x3B, 0xD6, 0xC2, 0xFF)),
        (1.0, (0xF0, 0xFF, 0xFF, 0xFF)),
    ]),
    Gradient.from_pairs("MonochromeSlate", [
        (0.0, (0x00, 0x00, 0x00, 0xFF)),
        (0.5, (0x70, 0x70, 0x70, 0xFF)),
        (1.0, (0xFF, 0xFF, 0xFF, 0xFF)),
    ]),
    Gradient.from_pairs("MetallicChrome", [
        (0.0, (0x06, 0x0B, 0x14, 0xFF)),
        (0.2, (0x3A, 0x3F, 0x45, 0xFF)),
        (0.45, (0x9E, 0xAE, 0xB4, 0xFF)),
        (0.7, (0xE7, 0xD8, 0xB0, 0xFF)),
        (1.0, (0xFF, 0xFF, 0xFF, 0xFF)),
    ]),
    Gradient.from_pairs("ThermalHeat", [
        (0.0, (0x00, 0x00, 0x00, 0xFF)),
        (0.25, (0x70, 0x00, 0x00, 0xFF)),
        (0.5, (0xFF, 0x40, 0x00, 0xFF)),
        (0.75, (0xFF, 0xD0, 0x00, 0xFF)),
        (1.0, (0xFF, 0xFF, 0xFF, 0xFF)),
    ]),
    Gradient.from_pairs("AuroraArc", [
        (0.0, (0x01, 0x13, 0x1F, 0xFF)),
        (0.2, (0x03, 0x6B, 0x5F, 0xFF)),
        (0.45, (0x54, 0xE6, 0xB2, 0xFF)),
        (0.7, (0x95, 0x43, 0xD6, 0xFF)),
        (1.0, (0xF8, 0xF9, 0xFF, 0xFF)),
    ]),
)


def get_colormap(name):
    return _mpl_colormaps.get_cmap(name) if hasattr(_mpl_colormaps, "get_cmap") else _mpl_colormaps[name]


def gradient_from_colormap(name: str, samples: int = 16) -> Gradient:
    """Sample a matplotlib colormap into an evenly spaced gradient."""

    if samples < 2:
        raise ConfigurationError("a colormap gradient needs at least 2 samples.")
    try:
        cmap = get_colormap(name)
    except (KeyError, ValueError) as exc:
        raise PaletteNotFoundError(COLORMAP_PREFIX + name) from exc

    positions = np.linspace(0.0, 1.0, samples, dtype=np.float64)
    rgba = np.uint8(np.clip(np.asarray(cmap(positions)) * 255 + 0.5, 0, 255))
    stops = tuple(
        ColorStop(float(position), tuple(int(channel) for channel in color))
        for position, color in zip(positions, rgba)
    )
    return Gradient(COLORMAP_PREFIX + name, stops)


class PaletteRegistry:
    """An explicit name -> gradient mapping.

    Registered gradients are templates: :meth:`get` always hands out a freshly
    normalized copy and the stored value is never touched.
    """

    def __init__(self, gradients: Iterable[Gradient] = (), *, allow_colormaps: bool = False):
        self._by_name: dict[str, Gradient] = {}
        self.allow_colormaps = allow_colormaps
        for gradient in gradients:
            self.register(gradient)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Gradient], **kwargs) -> "PaletteRegistry":
        registry = cls(**kwargs)
        for name, gradient in mapping.items():
            registry.register(gradient, name=name)
        return registry

    def register(self, gradient: Gradient, *, name: Optional[str] = None) -> None:
        """Store ``gradient`` under ``name``, defaulting to its own name.

        A different ``name`` registers an alias: the stored template is a
        copy carrying that name, so keys and gradient names always agree.
        """

        key = gradient.name if name is None else name
        if not key:
            raise ConfigurationError("a registered gradient needs a name.")
        if key != gradient.name:
            gradient = Gradient(key, gradient.stops)
        self._by_name[key] = gradient

    def names(self) -> tuple[str, ...]:
        return tuple(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)

    def template(self, name: str) -> Optional[Gradient]:
        return self._by_name.get(name)

    def get(self, name: str) -> Gradient:
        """Return a normalized copy of the gradient registered as ``name``."""

        gradient = self._by_name.get(name)
        if gradient is not None:
            return normalize(gradient)
        if self.allow_colormaps and name.startswith(COLORMAP_PREFIX):
            try:
                return normalize(gradient_from_colormap(name[len(COLORMAP_PREFIX):]))
            except PaletteNotFoundError as exc:
                raise PaletteNotFoundError(name, self.names()) from exc
        raise PaletteNotFoundError(name, self.names())


def default_registry(*, allow_colormaps: bool = True) -> PaletteRegistry:
    return PaletteRegistry(BUILTIN_PALETTES, allow_colormaps=allow_colormaps)
