"""Exceptions raised by the rendering package."""

from __future__ import annotations


class MandelrenderError(Exception):
    """Base class for every error raised by :mod:`mandelrender`."""


class ConfigurationError(MandelrenderError, ValueError):
    """Render parameters or palette data are invalid."""


class PaletteNotFoundError(ConfigurationError, KeyError):
    """A palette name is not present in the registry."""

    def __init__(self, name: str, available: tuple[str, ...] = ()):
        self.name = name
        self.available = tuple(available)
        listing = ", ".join(self.available) or "(none)"
        super().__init__(f"palette {name!r} not found. Available palettes: {listing}")

    def __str__(self) -> str:
        return str(self.args[0])
