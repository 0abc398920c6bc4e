"""Grid snapping for move/resize, threshold snapping and visible grid lines."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from lienzo.core.version import DEFAULT_GRID_SIZE, DEFAULT_MIN_SIZE
from lienzo.geom.primitives import Bounds, Point, PointLike, as_point
from lienzo.geom.viewport import ViewportState

SNAP_THRESHOLD = 5.0
MAJOR_GRID_MULTIPLE = 5


@dataclass(frozen=True)
class GridSettings:
    enabled: bool = False
    grid_size: float = DEFAULT_GRID_SIZE

    def __post_init__(self) -> None:
        if not (self.grid_size > 0):
            object.__setattr__(self, "grid_size", DEFAULT_GRID_SIZE)


@dataclass(frozen=True)
class SnapHit:
    value: float
    snapped: bool
    target: Optional[float] = None


@dataclass(frozen=True)
class GridLines:
    vertical: tuple[float, ...]
    horizontal: tuple[float, ...]
    major_vertical: tuple[float, ...]
    major_horizontal: tuple[float, ...]


def snap_to_grid(value: float, grid_size: float) -> float:
    """Redondeo a la línea más cercana; los .5 van hacia +inf (como Math.round)."""
    if grid_size <= 0:
        return float(value)
    return math.floor(value / grid_size + 0.5) * grid_size


def snap_point(point: PointLike, grid_size: float) -> Point:
    x, y = as_point(point)
    return Point(snap_to_grid(x, grid_size), snap_to_grid(y, grid_size))


def snap_move(start: PointLike, delta: PointLike, grid_size: float, enabled: bool) -> Point:
    """Posición final de un move: se snapea la posición, no el delta."""
    sx, sy = as_point(start)
    dx, dy = as_point(delta)
    p = Point(sx + dx, sy + dy)
    if not enabled:
        return p
    return snap_point(p, grid_size)


def snap_resize_bounds(
    bounds: Bounds,
    grid_size: float,
    min_width: float = DEFAULT_MIN_SIZE,
    min_height: float = DEFAULT_MIN_SIZE,
) -> Bounds:
    """Snapea los 4 bordes y re-deriva ancho/alto.

    Si el snap deja una dimensión por debajo del mínimo, se lleva al menor
    múltiplo de la grilla (>= 1 celda) que lo cumple, anclado al borde izq/sup.
    """
    if grid_size <= 0:
        return bounds
    left = snap_to_grid(bounds.x, grid_size)
    top = snap_to_grid(bounds.y, grid_size)
    right = snap_to_grid(bounds.right, grid_size)
    bottom = snap_to_grid(bounds.bottom, grid_size)

    width = right - left
    height = bottom - top
    if width < min_width:
        width = _cells_for(min_width, grid_size)
    if height < min_height:
        height = _cells_for(min_height, grid_size)
    return Bounds(left, top, width, height)


def _cells_for(minimum: float, grid_size: float) -> float:
    return max(1, math.ceil(minimum / grid_size)) * grid_size


def is_within_snap_threshold(value: float, target: float, threshold: float = SNAP_THRESHOLD) -> bool:
    return abs(value - target) <= threshold


def find_nearest_snap_point(
    value: float,
    candidates: Iterable[float],
    threshold: float = SNAP_THRESHOLD,
) -> SnapHit:
    """Candidato más cercano dentro del umbral (empate: el primero)."""
    best: Optional[float] = None
    best_dist = math.inf
    for c in candidates:
        dist = abs(value - c)
        if dist <= threshold and dist < best_dist:
            best_dist = dist
            best = c
    if best is None:
        return SnapHit(value=value, snapped=False)
    return SnapHit(value=best, snapped=True, target=best)


def visible_grid_lines(
    viewport_width: float,
    viewport_height: float,
    viewport: ViewportState,
    grid_size: float,
) -> GridLines:
    """Líneas de grilla (coordenadas de canvas) visibles en el contenedor."""
    if grid_size <= 0:
        return GridLines((), (), (), ())
    z = viewport.zoom
    start_x = -viewport.pan_x / z
    end_x = (viewport_width - viewport.pan_x) / z
    start_y = -viewport.pan_y / z
    end_y = (viewport_height - viewport.pan_y) / z

    vertical, major_v = _lines(start_x, end_x, grid_size)
    horizontal, major_h = _lines(start_y, end_y, grid_size)
    return GridLines(vertical, horizontal, major_v, major_h)


def _lines(start: float, end: float, grid_size: float) -> tuple[tuple[float, ...], tuple[float, ...]]:
    # Índices enteros: evita acumular error sumando grid_size en float.
    first = math.floor(start / grid_size)
    last = math.floor(end / grid_size)
    lines: list[float] = []
    major: list[float] = []
    for i in range(first, last + 1):
        v = i * grid_size
        lines.append(v)
        if i % MAJOR_GRID_MULTIPLE == 0:
            major.append(v)
    return tuple(lines), tuple(major)
