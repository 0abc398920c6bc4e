"""Move / resize / rotate a nivel elemento."""
from __future__ import annotations

import pytest

from lienzo.core.drag_mode import DragMode, coerce_drag_mode
from lienzo.core.transform_ops import move_positions, resize_bounds, rotation_for_drag
from lienzo.geom.primitives import Point
from lienzo.geom.snap import GridSettings


class TestMove:
    def test_free(self):
        out = move_positions({"a": (10, 10), "b": (0, 5)}, (3, 4))
        assert out == {"a": Point(13, 14), "b": Point(3, 9)}

    def test_snapped(self):
        out = move_positions({"a": (10, 10)}, (3, 4), GridSettings(enabled=True, grid_size=20))
        assert out["a"] == Point(20, 20)


class TestResize:
    def test_unrotated(self, rect):
        b = resize_bounds(rect("a", 10, 10, 100, 50), "se", (20, 10))
        assert (b.x, b.y, b.width, b.height) == (10, 10, 120, 60)

    def test_grid_snaps_edges(self, rect):
        b = resize_bounds(rect("a", 10, 10, 100, 50), "se", (23, 7), grid=GridSettings(True, 20))
        assert (b.x, b.y, b.width, b.height) == (20, 20, 120, 40)

    def test_rotated_is_center_based(self, rect):
        el = rect("a", 0, 0, 100, 50, rotation=90)
        b = resize_bounds(el, "e", (0, 10), grid=GridSettings(True, 20))
        assert b.width == pytest.approx(120)
        assert b.height == pytest.approx(50)
        assert b.center.x == pytest.approx(50)
        assert b.center.y == pytest.approx(25)

    def test_lock_aspect_uses_start_ratio(self, rect):
        b = resize_bounds(rect("a", 0, 0, 100, 50), "e", (100, 0), lock_aspect=True)
        assert (b.width, b.height) == (200, 100)

    def test_min_size(self, rect):
        b = resize_bounds(rect("a", 0, 0, 100, 50), "se", (-500, -500), min_width=15, min_height=12)
        assert (b.width, b.height) == (15, 12)


class TestRotate:
    def test_quarter_turn(self, rect):
        el = rect("a", 0, 0, 100, 100)
        assert rotation_for_drag(el, (100, 50), (50, 100)) == pytest.approx(90)

    def test_adds_to_start_rotation(self, rect):
        el = rect("a", 0, 0, 100, 100, rotation=30)
        assert rotation_for_drag(el, (100, 50), (50, 100)) == pytest.approx(120)

    def test_snap(self, rect):
        el = rect("a", 0, 0, 100, 100)
        # ~21.8 grados
        assert rotation_for_drag(el, (100, 50), (100, 70), snap=True) == 15


class TestDragMode:
    def test_coerce(self):
        assert coerce_drag_mode("Moving") is DragMode.MOVING
        assert coerce_drag_mode(DragMode.ROTATING) is DragMode.ROTATING
        assert coerce_drag_mode("bogus") is DragMode.IDLE
        assert coerce_drag_mode(None, DragMode.PANNING) is DragMode.PANNING
