# File: lienzo/core/tween.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Animación de viewport (pan/zoom) guiada por tick(now).
# Notes: El tween no tiene timer propio; lo maneja ui.frame_timer (o el test).
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from lienzo.geom.primitives import PointLike
from lienzo.geom.viewport import ViewportState, clamp_zoom, zoom_to_point

Easing = Callable[[float], float]


def linear(t: float) -> float:
    return t


def ease_out(t: float) -> float:
    return 1 - (1 - t) ** 3


def ease_in(t: float) -> float:
    return t ** 3


def ease_in_out(t: float) -> float:
    if t < 0.5:
        return 4 * t ** 3
    return 1 - (-2 * t + 2) ** 3 / 2


def ease_out_quad(t: float) -> float:
    return 1 - (1 - t) * (1 - t)


def ease_out_expo(t: float) -> float:
    if t >= 1:
        return 1.0
    return 1 - 2 ** (-10 * t)


def ease_out_back(t: float) -> float:
    c1 = 1.70158
    c3 = c1 + 1
    return 1 + c3 * (t - 1) ** 3 + c1 * (t - 1) ** 2


EASINGS: dict[str, Easing] = {
    "linear": linear,
    "ease_out": ease_out,
    "ease_in": ease_in,
    "ease_in_out": ease_in_out,
    "ease_out_quad": ease_out_quad,
    "ease_out_expo": ease_out_expo,
    "ease_out_back": ease_out_back,
}

DEFAULT_EASING: Easing = ease_out_expo


def lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def zoom_animation_target(viewport: ViewportState, target_zoom: float, center: PointLike) -> ViewportState:
    """Destino de una animación de zoom que deja fijo `center` (pantalla)."""
    return zoom_to_point(viewport, target_zoom, center)


@dataclass
class ViewportTween:
    start: ViewportState
    end: ViewportState
    duration_ms: float
    start_time: float
    easing: Easing = DEFAULT_EASING
    complete: bool = False
    cancelled: bool = False

    @property
    def active(self) -> bool:
        return not (self.complete or self.cancelled)

    def progress(self, now: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        p = (now - self.start_time) / self.duration_ms
        return min(1.0, max(0.0, p))

    def tick(self, now: float) -> ViewportState:
        """Estado interpolado en `now` (ms). Al llegar a 1 queda `complete`."""
        if self.cancelled:
            return self.start
        p = self.progress(now)
        if p >= 1.0:
            self.complete = True
            return self.end
        e = self.easing(p)
        return ViewportState(
            pan_x=lerp(self.start.pan_x, self.end.pan_x, e),
            pan_y=lerp(self.start.pan_y, self.end.pan_y, e),
            zoom=clamp_zoom(lerp(self.start.zoom, self.end.zoom, e)),
        )

    def cancel(self) -> None:
        self.cancelled = True
