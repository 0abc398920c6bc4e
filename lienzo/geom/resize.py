"""Resize handles: bounds math (edge/center based, aspect lock) and cursors."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional, Union

from lienzo.core.version import DEFAULT_MIN_SIZE
from lienzo.geom.primitives import Bounds, Point


class ResizeHandle(str, Enum):
    N = "n"
    S = "s"
    E = "e"
    W = "w"
    NW = "nw"
    NE = "ne"
    SW = "sw"
    SE = "se"

    @property
    def is_corner(self) -> bool:
        return len(self.value) == 2

    @property
    def moves_left(self) -> bool:
        return "w" in self.value

    @property
    def moves_right(self) -> bool:
        return "e" in self.value

    @property
    def moves_top(self) -> bool:
        return "n" in self.value

    @property
    def moves_bottom(self) -> bool:
        return "s" in self.value


HandleLike = Union[ResizeHandle, str]

ALL_HANDLES = (
    ResizeHandle.NW,
    ResizeHandle.N,
    ResizeHandle.NE,
    ResizeHandle.E,
    ResizeHandle.SE,
    ResizeHandle.S,
    ResizeHandle.SW,
    ResizeHandle.W,
)
CORNER_HANDLES = (ResizeHandle.NW, ResizeHandle.NE, ResizeHandle.SE, ResizeHandle.SW)
EDGE_HANDLES = (ResizeHandle.N, ResizeHandle.E, ResizeHandle.S, ResizeHandle.W)

# Cursores en sentido horario, un slot cada 45 grados (0 = norte).
CURSOR_SEQUENCE = (
    "ns-resize",
    "nesw-resize",
    "ew-resize",
    "nwse-resize",
    "ns-resize",
    "nesw-resize",
    "ew-resize",
    "nwse-resize",
)

HANDLE_BASE_ANGLES = {
    ResizeHandle.N: 0,
    ResizeHandle.NE: 45,
    ResizeHandle.E: 90,
    ResizeHandle.SE: 135,
    ResizeHandle.S: 180,
    ResizeHandle.SW: 225,
    ResizeHandle.W: 270,
    ResizeHandle.NW: 315,
}

# Posición relativa (0..1) de cada handle sobre la caja.
HANDLE_POSITIONS = {
    ResizeHandle.NW: Point(0.0, 0.0),
    ResizeHandle.N: Point(0.5, 0.0),
    ResizeHandle.NE: Point(1.0, 0.0),
    ResizeHandle.E: Point(1.0, 0.5),
    ResizeHandle.SE: Point(1.0, 1.0),
    ResizeHandle.S: Point(0.5, 1.0),
    ResizeHandle.SW: Point(0.0, 1.0),
    ResizeHandle.W: Point(0.0, 0.5),
}


def coerce_handle(value: HandleLike) -> ResizeHandle:
    if isinstance(value, ResizeHandle):
        return value
    return ResizeHandle(str(value).strip().lower())


def handle_position(handle: HandleLike) -> Point:
    return HANDLE_POSITIONS[coerce_handle(handle)]


def handle_positions() -> dict[ResizeHandle, Point]:
    return dict(HANDLE_POSITIONS)


def handle_points(bounds: Bounds) -> dict[ResizeHandle, Point]:
    """Posición absoluta (canvas, sin rotar) de los 8 handles."""
    return {
        h: Point(bounds.x + rel.x * bounds.width, bounds.y + rel.y * bounds.height)
        for h, rel in HANDLE_POSITIONS.items()
    }


def rotated_cursor(handle: HandleLike, rotation: float) -> str:
    """Cursor que apunta en la dirección visual del handle ya rotado."""
    rot = rotation % 360.0
    effective = (HANDLE_BASE_ANGLES[coerce_handle(handle)] + rot) % 360.0
    idx = int(math.floor(effective / 45.0 + 0.5)) % 8
    return CURSOR_SEQUENCE[idx]


def transform_delta_for_rotation(dx: float, dy: float, rotation: float) -> Point:
    """Delta de canvas -> delta en el marco local del elemento (rota -rotation)."""
    rad = math.radians(-rotation)
    c = math.cos(rad)
    s = math.sin(rad)
    return Point(dx * c - dy * s, dx * s + dy * c)


def calculate_resize(
    handle: HandleLike,
    start: Bounds,
    dx: float,
    dy: float,
    *,
    min_width: float = DEFAULT_MIN_SIZE,
    min_height: float = DEFAULT_MIN_SIZE,
    lock_aspect: bool = False,
    aspect_ratio: Optional[float] = None,
    center_based: bool = False,
) -> Bounds:
    """Caja nueva a partir de la caja inicial del drag y el delta total.

    - edge-based: el borde/esquina opuesta queda fija.
    - center-based: delta x2, la caja crece/encoge simétrica sobre su centro.
    - lock_aspect: si no se pasa `aspect_ratio` se usa el de `start`.
    El mínimo se aplica antes del ajuste de aspecto; si el aspecto lo rompe,
    la caja se agranda uniformemente hasta volver a cumplirlo.
    """
    h = coerce_handle(handle)
    factor = 2.0 if center_based else 1.0

    width = start.width
    height = start.height
    if h.moves_right:
        width = start.width + dx * factor
    elif h.moves_left:
        width = start.width - dx * factor
    if h.moves_bottom:
        height = start.height + dy * factor
    elif h.moves_top:
        height = start.height - dy * factor

    width = max(min_width, width)
    height = max(min_height, height)

    ratio = aspect_ratio
    if lock_aspect and not ratio and start.height > 0 and start.width > 0:
        ratio = start.width / start.height

    if lock_aspect and ratio:
        if h in (ResizeHandle.N, ResizeHandle.S):
            width = height * ratio
        elif h in (ResizeHandle.E, ResizeHandle.W):
            height = width / ratio
        elif abs(width - start.width) > abs(height - start.height):
            height = width / ratio
        else:
            width = height * ratio

        scale = 1.0
        if width > 0 and width < min_width:
            scale = max(scale, min_width / width)
        if height > 0 and height < min_height:
            scale = max(scale, min_height / height)
        width *= scale
        height *= scale

    if center_based:
        cx, cy = start.center
        return Bounds(cx - width / 2, cy - height / 2, width, height)

    x = start.right - width if h.moves_left else start.x
    y = start.bottom - height if h.moves_top else start.y
    return Bounds(x, y, width, height)
