"""Move / resize / rotate a nivel elemento (compone geom.* + snapping).

Todas las funciones parten del estado capturado al inicio del drag y del delta
TOTAL en canvas; no acumulan.
"""

from __future__ import annotations

from typing import Mapping, Optional

from lienzo.core.models import Element
from lienzo.core.version import DEFAULT_MIN_SIZE, DEFAULT_ROTATION_SNAP_DEG
from lienzo.geom.primitives import Bounds, Point, PointLike, as_point
from lienzo.geom.resize import HandleLike, calculate_resize, transform_delta_for_rotation
from lienzo.geom.rotation import calculate_angle, rotate_drag
from lienzo.geom.snap import GridSettings, snap_move, snap_resize_bounds


def move_positions(
    start_positions: Mapping[str, PointLike],
    delta: PointLike,
    grid: Optional[GridSettings] = None,
) -> dict[str, Point]:
    """Posición nueva de cada id (snapeada por separado si la grilla está activa)."""
    g = grid or GridSettings()
    return {
        eid: snap_move(start, delta, g.grid_size, g.enabled)
        for eid, start in start_positions.items()
    }


def resize_bounds(
    element: Element,
    handle: HandleLike,
    delta: PointLike,
    *,
    lock_aspect: bool = False,
    grid: Optional[GridSettings] = None,
    min_width: float = DEFAULT_MIN_SIZE,
    min_height: float = DEFAULT_MIN_SIZE,
) -> Bounds:
    """Caja nueva para `element` (tal como estaba al empezar el drag).

    Elemento rotado: el delta pasa al marco local y se escala sobre el centro.
    El snap de grilla solo aplica a cajas sin rotar.
    """
    dx, dy = as_point(delta)
    rotated = element.rotation != 0
    if rotated:
        dx, dy = transform_delta_for_rotation(dx, dy, element.rotation)

    start = element.bounds
    ratio = (start.width / start.height) if (lock_aspect and start.height > 0) else None
    out = calculate_resize(
        handle,
        start,
        dx,
        dy,
        min_width=min_width,
        min_height=min_height,
        lock_aspect=lock_aspect,
        aspect_ratio=ratio,
        center_based=rotated,
    )

    g = grid or GridSettings()
    if g.enabled and not rotated:
        out = snap_resize_bounds(out, g.grid_size, min_width, min_height)
    return out


def rotation_for_drag(
    element: Element,
    start_pointer: PointLike,
    current_pointer: PointLike,
    *,
    snap: bool = False,
    increment: float = DEFAULT_ROTATION_SNAP_DEG,
) -> float:
    """Rotación nueva: rotación inicial + delta angular alrededor del centro."""
    center = element.bounds.center
    start_angle = calculate_angle(center, start_pointer)
    current_angle = calculate_angle(center, current_pointer)
    return rotate_drag(start_angle, element.rotation, current_angle, snap=snap, increment=increment)
