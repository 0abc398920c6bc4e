"""Resize por handles: bordes, esquinas, centro, aspecto y cursores."""
from __future__ import annotations

import pytest

from lienzo.geom.primitives import Bounds, Point
from lienzo.geom.resize import (
    ALL_HANDLES,
    ResizeHandle,
    calculate_resize,
    coerce_handle,
    handle_points,
    rotated_cursor,
    transform_delta_for_rotation,
)

START = Bounds(10, 10, 100, 50)


def _tuple(b: Bounds):
    return (b.x, b.y, b.width, b.height)


class TestEdgeBased:
    def test_se_grows_from_top_left(self):
        assert _tuple(calculate_resize("se", START, 20, 10)) == (10, 10, 120, 60)

    def test_nw_keeps_bottom_right(self):
        b = calculate_resize(ResizeHandle.NW, START, 10, 10)
        assert _tuple(b) == (20, 20, 90, 40)
        assert b.right == START.right
        assert b.bottom == START.bottom

    def test_edge_handles_touch_one_axis(self):
        assert _tuple(calculate_resize("e", START, 30, 99)) == (10, 10, 130, 50)
        assert _tuple(calculate_resize("n", START, 99, -20)) == (10, -10, 100, 70)

    def test_min_size_and_anchor(self):
        b = calculate_resize("w", START, 500, 0, min_width=10)
        assert b.width == 10
        assert b.right == START.right

    @pytest.mark.parametrize("handle", [h.value for h in ALL_HANDLES])
    @pytest.mark.parametrize("delta", [(-1000, -1000), (1000, 1000), (-1000, 1000)])
    def test_never_below_min(self, handle, delta):
        b = calculate_resize(handle, START, *delta, min_width=10, min_height=10)
        assert b.width >= 10
        assert b.height >= 10


class TestCenterBased:
    def test_delta_doubles_and_center_stays(self):
        b = calculate_resize("e", Bounds(0, 0, 100, 50), 10, 0, center_based=True)
        assert _tuple(b) == (-10, 0, 120, 50)
        assert b.center == Point(50, 25)


class TestAspectLock:
    def test_edge_derives_other_axis(self):
        b = calculate_resize("e", Bounds(0, 0, 100, 50), 100, 0, lock_aspect=True)
        assert _tuple(b) == (0, 0, 200, 100)
        b = calculate_resize("s", Bounds(0, 0, 100, 50), 0, 50, lock_aspect=True)
        assert _tuple(b) == (0, 0, 200, 100)

    def test_corner_follows_larger_change(self):
        b = calculate_resize("se", Bounds(0, 0, 100, 50), 100, 10, lock_aspect=True)
        assert _tuple(b) == (0, 0, 200, 100)

    def test_explicit_ratio(self):
        b = calculate_resize("e", Bounds(0, 0, 100, 100), 100, 0, lock_aspect=True, aspect_ratio=2)
        assert (b.width, b.height) == (200, 100)

    def test_min_restored_by_uniform_scale(self):
        b = calculate_resize("e", Bounds(0, 0, 100, 10), -95, 0, lock_aspect=True, min_width=10, min_height=10)
        assert b.width == pytest.approx(100)
        assert b.height == pytest.approx(10)


class TestHandles:
    def test_coerce(self):
        assert coerce_handle(" SE ") is ResizeHandle.SE
        with pytest.raises(ValueError):
            coerce_handle("x")

    def test_flags(self):
        assert ResizeHandle.NE.is_corner
        assert not ResizeHandle.N.is_corner
        assert ResizeHandle.SW.moves_left and ResizeHandle.SW.moves_bottom

    def test_points(self):
        pts = handle_points(Bounds(0, 0, 100, 50))
        assert pts[ResizeHandle.SE] == Point(100, 50)
        assert pts[ResizeHandle.N] == Point(50, 0)
        assert len(pts) == 8


class TestCursor:
    @pytest.mark.parametrize(
        "handle,rotation,expected",
        [
            ("n", 0, "ns-resize"),
            ("n", 90, "ew-resize"),
            ("e", 45, "nwse-resize"),
            ("nw", 0, "nwse-resize"),
            ("n", 22.4, "ns-resize"),
            ("n", 22.5, "nesw-resize"),
            ("s", -90, "ew-resize"),
        ],
    )
    def test_rotated_cursor(self, handle, rotation, expected):
        assert rotated_cursor(handle, rotation) == expected


class TestLocalDelta:
    def test_zero_rotation_is_identity(self):
        assert transform_delta_for_rotation(3, 4, 0) == Point(3, 4)

    def test_quarter_turn(self):
        p = transform_delta_for_rotation(10, 0, 90)
        assert p.x == pytest.approx(0, abs=1e-9)
        assert p.y == pytest.approx(-10)
