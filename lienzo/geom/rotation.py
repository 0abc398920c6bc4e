"""Rotation math: pointer angles, wraparound deltas, snapping and handles.

Angles are degrees, 0 = east, positive = clockwise (screen y grows down).
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from lienzo.core.version import (
    DEFAULT_ROTATION_HANDLE_OFFSET,
    DEFAULT_ROTATION_HANDLE_SIZE,
    DEFAULT_ROTATION_SNAP_DEG,
)
from lienzo.geom.primitives import Bounds, Point, PointLike, as_point


class RotationCorner(str, Enum):
    NW = "nw"
    NE = "ne"
    SW = "sw"
    SE = "se"


# Orden de hit-test.
ROTATION_CORNERS = (RotationCorner.NW, RotationCorner.NE, RotationCorner.SW, RotationCorner.SE)


def normalize_angle(angle: float) -> float:
    a = float(angle) % 360.0
    # -1e-18 % 360 da 360.0 en float.
    if a >= 360.0:
        a = 0.0
    return a


def calculate_angle(center: PointLike, point: PointLike) -> float:
    cx, cy = as_point(center)
    px, py = as_point(point)
    return normalize_angle(math.degrees(math.atan2(py - cy, px - cx)))


def rotation_delta(start_angle: float, current_angle: float) -> float:
    """Delta corregido por wraparound: 350 -> 10 es +20, no -340."""
    delta = current_angle - start_angle
    if delta > 180:
        delta -= 360
    elif delta < -180:
        delta += 360
    return delta


def snap_angle(angle: float, increment: float = DEFAULT_ROTATION_SNAP_DEG) -> float:
    if increment <= 0:
        return angle
    return math.floor(angle / increment + 0.5) * increment


def rotate_drag(
    start_angle: float,
    start_rotation: float,
    current_angle: float,
    snap: bool = False,
    increment: float = DEFAULT_ROTATION_SNAP_DEG,
) -> float:
    """Rotación nueva del elemento durante un drag, ya normalizada."""
    rot = start_rotation + rotation_delta(start_angle, current_angle)
    if snap:
        rot = snap_angle(rot, increment)
    return normalize_angle(rot)


def element_center(bounds: Bounds) -> Point:
    return bounds.center


def rotate_point(point: PointLike, center: PointLike, angle_deg: float) -> Point:
    px, py = as_point(point)
    cx, cy = as_point(center)
    rad = math.radians(angle_deg)
    c = math.cos(rad)
    s = math.sin(rad)
    tx = px - cx
    ty = py - cy
    return Point(tx * c - ty * s + cx, tx * s + ty * c + cy)


def rotated_bounding_box(bounds: Bounds, rotation: float) -> Bounds:
    """Caja alineada a ejes que contiene a `bounds` rotada sobre su centro."""
    if normalize_angle(rotation) == 0:
        return bounds
    center = bounds.center
    corners = (
        Point(bounds.x, bounds.y),
        Point(bounds.right, bounds.y),
        Point(bounds.right, bounds.bottom),
        Point(bounds.x, bounds.bottom),
    )
    pts = [rotate_point(c, center, rotation) for c in corners]
    xs = [p.x for p in pts]
    ys = [p.y for p in pts]
    return Bounds.from_edges(min(xs), min(ys), max(xs), max(ys))


def rotation_handle_positions(
    bounds: Bounds,
    offset: float = DEFAULT_ROTATION_HANDLE_OFFSET,
) -> dict[RotationCorner, Point]:
    """Handles en diagonal (45 grados) por fuera de cada esquina."""
    d = offset / math.sqrt(2)
    return {
        RotationCorner.NW: Point(bounds.x - d, bounds.y - d),
        RotationCorner.NE: Point(bounds.right + d, bounds.y - d),
        RotationCorner.SW: Point(bounds.x - d, bounds.bottom + d),
        RotationCorner.SE: Point(bounds.right + d, bounds.bottom + d),
    }


def is_point_in_handle(point: PointLike, handle: PointLike, size: float = DEFAULT_ROTATION_HANDLE_SIZE) -> bool:
    px, py = as_point(point)
    hx, hy = as_point(handle)
    half = size / 2
    return hx - half <= px <= hx + half and hy - half <= py <= hy + half


def rotation_handle_at_point(
    point: PointLike,
    bounds: Bounds,
    offset: float = DEFAULT_ROTATION_HANDLE_OFFSET,
    size: float = DEFAULT_ROTATION_HANDLE_SIZE,
) -> Optional[RotationCorner]:
    handles = rotation_handle_positions(bounds, offset)
    for corner in ROTATION_CORNERS:
        if is_point_in_handle(point, handles[corner], size):
            return corner
    return None
