"""Color gradients: stop normalization and per-channel interpolation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Union

from .errors import ConfigurationError

RGBA = tuple[int, int, int, int]
ColorLike = Union[str, Sequence[int]]

DEFAULT_COLOR: RGBA = (0, 0, 0, 255)


def parse_color(value: ColorLike) -> RGBA:
    """Convert a ``#RRGGBB``/``#RRGGBBAA`` string or an RGB(A) sequence to RGBA."""

    if isinstance(value, str):
        hex_color = value.strip().lstrip("#")
        if len(hex_color) not in (6, 8):
            raise ConfigurationError(f"color {value!r} must be in the form #RRGGBB or #RRGGBBAA.")
        try:
            channels = [int(hex_color[i:i + 2], 16) for i in range(0, len(hex_color), 2)]
        except ValueError as exc:
            raise ConfigurationError(f"color {value!r} must contain only hexadecimal digits.") from exc
    else:
        channels = [int(channel) for channel in value]
        if len(channels) not in (3, 4):
            raise ConfigurationError(f"color {value!r} must have 3 or 4 channels.")
        if any(channel < 0 or channel > 255 for channel in channels):
            raise ConfigurationError(f"color {value!r} has channels outside 0..255.")
    if len(channels) == 3:
        channels.append(255)
    return tuple(channels)  # type: ignore[return-value]


@dataclass(frozen=True)
class ColorStop:
    """A color anchored at ``position``; a position of 0 means "infer it"."""

    position: float
    color: RGBA

    @classmethod
    def of(cls, position: float, color: ColorLike) -> "ColorStop":
        return cls(float(position), parse_color(color))


@dataclass(frozen=True)
class Gradient:
    """A named, ordered sequence of color stops."""

    name: str
    stops: tuple[ColorStop, ...] = field(default_factory=tuple)

    @classmethod
    def from_pairs(cls, name: str, pairs: Iterable[tuple[float, ColorLike]]) -> "Gradient":
        return cls(name, tuple(ColorStop.of(position, color) for position, color in pairs))

    @property
    def positions(self) -> tuple[float, ...]:
        return tuple(stop.position for stop in self.stops)

    def normalized(self) -> "Gradient":
        return normalize(self)

    def interpolate(self, t: float) -> RGBA:
        return interpolate(self, t)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _sorted(name: str, stops: Iterable[ColorStop]) -> Gradient:
    return Gradient(name, tuple(sorted(stops, key=lambda stop: stop.position)))


def normalize(gradient: Gradient) -> Gradient:
    """Return a copy of ``gradient`` with every stop position resolved.

    Stops with position 0 are treated as unspecified. When every stop carries
    an explicit position the stops are only sorted and clamped to [0, 1].
    Otherwise strictly positive positions act as anchors, the first and last
    stops are pinned to 0 and 1 unless already anchored, and the stops between
    two anchors are spread linearly by index. The input is never modified.
    """

    stops = list(gradient.stops)
    count = len(stops)
    if count == 0:
        return Gradient(gradient.name, ())
    if count == 1:
        return Gradient(gradient.name, (ColorStop(0.0, stops[0].color),))

    if all(stop.position != 0 for stop in stops):
        ordered = sorted(stops, key=lambda stop: stop.position)
        return Gradient(
            gradient.name,
            tuple(ColorStop(_clamp(stop.position, 0.0, 1.0), stop.color) for stop in ordered),
        )

    anchors = [(idx, min(stop.position, 1.0)) for idx, stop in enumerate(stops) if stop.position > 0]
    if not anchors:
        return Gradient(
            gradient.name,
            tuple(ColorStop(idx / (count - 1), stop.color) for idx, stop in enumerate(stops)),
        )

    if anchors[0][0] != 0:
        anchors.insert(0, (0, 0.0))
    if anchors[-1][0] != count - 1:
        anchors.append((count - 1, 1.0))

    positions = [stop.position for stop in stops]
    for (start_idx, start_pos), (end_idx, end_pos) in zip(anchors, anchors[1:]):
        span = end_idx - start_idx
        for idx in range(start_idx, end_idx + 1):
            positions[idx] = start_pos + (idx - start_idx) / span * (end_pos - start_pos)

    return _sorted(
        gradient.name,
        (ColorStop(position, stop.color) for position, stop in zip(positions, stops)),
    )


def _lerp_channel(a: int, b: int, frac: float) -> int:
    return int(round(_clamp((1.0 - frac) * a + frac * b, 0.0, 255.0)))


def interpolate(gradient: Gradient, t: float) -> RGBA:
    """Interpolate the color at ``t`` across a normalized gradient."""

    stops = gradient.stops
    if not stops:
        return DEFAULT_COLOR
    if t <= stops[0].position:
        return stops[0].color
    if t >= stops[-1].position:
        return stops[-1].color

    for lower, upper in zip(stops, stops[1:]):
        if lower.position <= t <= upper.position:
            width = upper.position - lower.position
            if width <= 0:
                return upper.color
            frac = (t - lower.position) / width
            return tuple(  # type: ignore[return-value]
                _lerp_channel(a, b, frac) for a, b in zip(lower.color, upper.color)
            )
    return stops[-1].color
