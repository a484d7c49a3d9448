"""Turns a configuration snapshot into reticle geometry and drives the spin animation.

The renderer is free of Qt types; it talks to a ``ReticleSurface`` that owns the
actual primitives (see ``reticle_client.qt_surface``).

Spin state machine::

    idle  --render(period > 0, center or period changed)-->  spinning(period)
    spinning --render(period == 0)--> idle
    spinning --rotation cycle completed--> spinning (restart from 0 degrees)

Renders that change neither the center nor the period keep the current state
and do not restart the rotation.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Tuple

_LOGGER = logging.getLogger("ReticleOverlay.Client")

Point = Tuple[float, float]

STATE_IDLE = "idle"
STATE_SPINNING = "spinning"

BAR_NAMES = ("top", "bottom", "left", "right")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_TRUE_TOKENS = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CircleGeometry:
    cx: float
    cy: float
    radius: float
    stroke: str
    stroke_width: float
    fill: Optional[str]
    visible: bool


@dataclass(frozen=True)
class BarGeometry:
    x: float
    y: float
    width: float
    height: float
    offset_x: float
    offset_y: float
    fill: str
    visible: bool

    @property
    def left(self) -> float:
        return self.x + self.offset_x

    @property
    def top(self) -> float:
        return self.y + self.offset_y


@dataclass(frozen=True)
class ReticleGeometry:
    center: Point
    outer_circle: CircleGeometry
    center_dot: CircleGeometry
    bars: Mapping[str, BarGeometry]


class ReticleSurface(Protocol):
    def viewport_size(self) -> Tuple[float, float]: ...
    def apply_circle(self, name: str, geometry: CircleGeometry) -> None: ...
    def apply_bar(self, name: str, geometry: BarGeometry) -> None: ...
    def stop_rotation(self, pivot: Point) -> None: ...
    def animate_rotation(self, pivot: Point, period_ms: int, on_complete: Callable[[], None]) -> None: ...


def _coerce_float(raw: Any, fallback: float = 0.0) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return fallback


def coerce_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in _TRUE_TOKENS
    return bool(raw)


def parse_period(raw: Any) -> int:
    """Leading-integer parse of the spin period; anything unparseable means 0."""
    if isinstance(raw, bool) or raw is None:
        return 0
    if isinstance(raw, (int, float)):
        return int(raw)
    match = _LEADING_INT.match(str(raw))
    return int(match.group(1)) if match else 0


def compute_geometry(center: Point, data: Mapping[str, Any]) -> ReticleGeometry:
    cx, cy = center
    outer_circle = CircleGeometry(
        cx=cx,
        cy=cy,
        radius=_coerce_float(data.get("circleRadius")),
        stroke=str(data.get("circleColor") or ""),
        stroke_width=_coerce_float(data.get("circleThickness")),
        fill=None,
        visible=coerce_bool(data.get("circleEnabled")),
    )
    dot_color = str(data.get("dotColor") or "")
    center_dot = CircleGeometry(
        cx=cx,
        cy=cy,
        radius=_coerce_float(data.get("dotRadius")),
        stroke=dot_color,
        stroke_width=1.0,
        fill=dot_color,
        visible=coerce_bool(data.get("dotEnabled")),
    )

    length = _coerce_float(data.get("crossLength"))
    spread = _coerce_float(data.get("crossSpread"))
    thickness = _coerce_float(data.get("crossThickness"))
    color = str(data.get("crossColor") or "")
    visible = coerce_bool(data.get("crossEnabled"))
    # Far-side offset for the top and left bars; near side is just the spread.
    far_offset = -length - spread
    half_thickness = -(thickness / 2)

    def bar(width: float, height: float, offset_x: float, offset_y: float) -> BarGeometry:
        return BarGeometry(
            x=cx,
            y=cy,
            width=width,
            height=height,
            offset_x=offset_x,
            offset_y=offset_y,
            fill=color,
            visible=visible,
        )

    bars: Dict[str, BarGeometry] = {
        "top": bar(thickness, length, half_thickness, far_offset),
        "bottom": bar(thickness, length, half_thickness, spread),
        "left": bar(length, thickness, far_offset, half_thickness),
        "right": bar(length, thickness, spread, half_thickness),
    }
    return ReticleGeometry(center=center, outer_circle=outer_circle, center_dot=center_dot, bars=bars)


class ReticleRenderer:
    """Applies reticle geometry to a surface and owns the spin state."""

    def __init__(self, surface: ReticleSurface, *, logger: Optional[logging.Logger] = None) -> None:
        self._surface = surface
        self._logger = logger or _LOGGER
        self.center: Point = (0.0, 0.0)
        self.current_period = 0
        self.geometry: Optional[ReticleGeometry] = None
        self.restart_count = 0

    @property
    def state(self) -> str:
        return STATE_SPINNING if self.current_period > 0 else STATE_IDLE

    def update_center(self) -> bool:
        width, height = self._surface.viewport_size()
        center = (width / 2, height / 2)
        if center != self.center:
            self.center = center
            return True
        return False

    def stop_spin(self) -> None:
        self._surface.stop_rotation(self.center)

    def start_spin(self) -> None:
        self.stop_spin()
        self.restart_count += 1
        self._surface.animate_rotation(self.center, self.current_period, self.animation_ended)

    def animation_ended(self) -> None:
        if self.current_period <= 0:
            return
        self.start_spin()

    def render(self, data: Mapping[str, Any]) -> ReticleGeometry:
        is_new_center = self.update_center()
        geometry = compute_geometry(self.center, data)
        self._surface.apply_circle("outer_circle", geometry.outer_circle)
        self._surface.apply_circle("center_dot", geometry.center_dot)
        for name in BAR_NAMES:
            self._surface.apply_bar(name, geometry.bars[name])
        self.geometry = geometry

        period = parse_period(data.get("crossSpinPeriod"))
        if is_new_center or self.current_period != period:
            if period > 0:
                self.current_period = period
                self._logger.debug("Spinning cross: period=%dms center=%s", period, self.center)
                self.start_spin()
            else:
                self.current_period = 0
                self._logger.debug("Cross spin stopped at center=%s", self.center)
                self.stop_spin()
        return geometry
