"""Viewport math: screen <-> canvas conversion, zoom about a point, wheel/drag pan.

Screen space is pixels inside the canvas container; `origin` is the
container's top-left in the same pixel space the pointer comes from (0,0 when
the caller already passes container-relative coordinates).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from lienzo.core.version import MAX_ZOOM, MIN_ZOOM, ZOOM_LEVELS
from lienzo.geom.primitives import Point, PointLike, as_point
from lienzo.utils.errors import LienzoSchemaError

# Zoom por pixel de scroll (pinch de trackpad llega con ctrl sin meta).
ZOOM_PINCH_SPEED = 0.01
ZOOM_WHEEL_SPEED = 0.005
PAN_SPEED = 1.0


def clamp_zoom(zoom: float) -> float:
    return min(MAX_ZOOM, max(MIN_ZOOM, float(zoom)))


@dataclass(frozen=True)
class ViewportState:
    pan_x: float = 0.0
    pan_y: float = 0.0
    zoom: float = 1.0

    def __post_init__(self) -> None:
        z = clamp_zoom(self.zoom)
        if z != self.zoom:
            object.__setattr__(self, "zoom", z)

    @property
    def pan(self) -> Point:
        return Point(self.pan_x, self.pan_y)

    def to_dict(self) -> dict[str, Any]:
        return {"panX": float(self.pan_x), "panY": float(self.pan_y), "zoom": float(self.zoom)}

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "ViewportState":
        if not isinstance(d, dict):
            raise LienzoSchemaError("ViewportState inválido: se esperaba dict")
        try:
            return ViewportState(
                pan_x=float(d.get("panX", 0.0)),
                pan_y=float(d.get("panY", 0.0)),
                zoom=float(d.get("zoom", 1.0)),
            )
        except (TypeError, ValueError) as e:
            raise LienzoSchemaError(f"ViewportState inválido: {d!r}") from e


def reset_viewport() -> ViewportState:
    return ViewportState(0.0, 0.0, 1.0)


# ----------------------------
# Conversión de coordenadas
# ----------------------------

def screen_to_canvas(
    point: PointLike,
    viewport: ViewportState,
    origin: PointLike = (0.0, 0.0),
) -> Point:
    px, py = as_point(point)
    ox, oy = as_point(origin)
    return Point(
        (px - ox - viewport.pan_x) / viewport.zoom,
        (py - oy - viewport.pan_y) / viewport.zoom,
    )


def canvas_to_screen(
    point: PointLike,
    viewport: ViewportState,
    origin: PointLike = (0.0, 0.0),
) -> Point:
    cx, cy = as_point(point)
    ox, oy = as_point(origin)
    return Point(
        cx * viewport.zoom + viewport.pan_x + ox,
        cy * viewport.zoom + viewport.pan_y + oy,
    )


def screen_delta_to_canvas(dx: float, dy: float, viewport: ViewportState) -> Point:
    """Delta de pantalla -> delta de canvas (el pan no influye)."""
    return Point(dx / viewport.zoom, dy / viewport.zoom)


# ----------------------------
# Mutadores (todos devuelven un estado nuevo con zoom clamped)
# ----------------------------

def set_zoom(viewport: ViewportState, zoom: float) -> ViewportState:
    return replace(viewport, zoom=clamp_zoom(zoom))


def set_pan(viewport: ViewportState, pan_x: float, pan_y: float) -> ViewportState:
    return replace(viewport, pan_x=float(pan_x), pan_y=float(pan_y))


def pan_by(viewport: ViewportState, dx: float, dy: float) -> ViewportState:
    return replace(viewport, pan_x=viewport.pan_x + dx, pan_y=viewport.pan_y + dy)


def zoom_to_point(viewport: ViewportState, new_zoom: float, screen_point: PointLike) -> ViewportState:
    """Cambia el zoom manteniendo fijo el punto de canvas bajo `screen_point`.

    `screen_point` es relativo al contenedor (mismo espacio que el pan).
    """
    sx, sy = as_point(screen_point)
    z = clamp_zoom(new_zoom)
    canvas_x = (sx - viewport.pan_x) / viewport.zoom
    canvas_y = (sy - viewport.pan_y) / viewport.zoom
    return ViewportState(pan_x=sx - canvas_x * z, pan_y=sy - canvas_y * z, zoom=z)


def next_zoom_in(current: float) -> float:
    # Tolerancia: 0.75000000001 no debe "saltarse" 0.75 por ruido de float.
    for level in ZOOM_LEVELS:
        if level > current + 1e-9:
            return level
    return MAX_ZOOM


def next_zoom_out(current: float) -> float:
    for level in reversed(ZOOM_LEVELS):
        if level < current - 1e-9:
            return level
    return MIN_ZOOM


def step_zoom_in(viewport: ViewportState, screen_point: PointLike) -> ViewportState:
    return zoom_to_point(viewport, next_zoom_in(viewport.zoom), screen_point)


def step_zoom_out(viewport: ViewportState, screen_point: PointLike) -> ViewportState:
    return zoom_to_point(viewport, next_zoom_out(viewport.zoom), screen_point)


# ----------------------------
# Rueda / drag
# ----------------------------

def apply_wheel(
    viewport: ViewportState,
    delta_x: float,
    delta_y: float,
    pointer: PointLike,
    *,
    ctrl: bool = False,
    meta: bool = False,
    shift: bool = False,
    origin: PointLike = (0.0, 0.0),
) -> ViewportState:
    """Rueda estilo Figma.

    - ctrl/meta + rueda: zoom hacia el cursor (ctrl solo = pinch, más rápido)
    - shift + rueda: pan horizontal con delta_y
    - rueda sola: pan en ambos ejes
    """
    if ctrl or meta:
        speed = ZOOM_PINCH_SPEED if (ctrl and not meta) else ZOOM_WHEEL_SPEED
        new_zoom = viewport.zoom * (1 - delta_y * speed)
        px, py = as_point(pointer)
        ox, oy = as_point(origin)
        return zoom_to_point(viewport, new_zoom, (px - ox, py - oy))

    if shift:
        return pan_by(viewport, -delta_y * PAN_SPEED, 0.0)

    return pan_by(viewport, -delta_x * PAN_SPEED, -delta_y * PAN_SPEED)


def pan_from_drag(start_pointer: PointLike, current_pointer: PointLike, start_pan: PointLike) -> Point:
    """Pan absoluto = pan inicial + desplazamiento del puntero (sin acumular)."""
    sx, sy = as_point(start_pointer)
    cx, cy = as_point(current_pointer)
    px, py = as_point(start_pan)
    return Point(px + (cx - sx), py + (cy - sy))
