"""Viewport: conversiones, zoom anclado, escalones y rueda."""
from __future__ import annotations

import pytest

from lienzo.core.version import MAX_ZOOM, MIN_ZOOM
from lienzo.geom.primitives import Point
from lienzo.geom.viewport import (
    ViewportState,
    apply_wheel,
    canvas_to_screen,
    clamp_zoom,
    next_zoom_in,
    next_zoom_out,
    pan_by,
    pan_from_drag,
    reset_viewport,
    screen_delta_to_canvas,
    screen_to_canvas,
    set_zoom,
    step_zoom_in,
    step_zoom_out,
    zoom_to_point,
)
from lienzo.utils.errors import LienzoSchemaError


class TestState:
    def test_constructor_clamps_zoom(self):
        assert ViewportState(zoom=100).zoom == MAX_ZOOM
        assert ViewportState(zoom=0).zoom == MIN_ZOOM

    def test_dict_keys(self):
        vp = ViewportState(10, -5, 2)
        assert vp.to_dict() == {"panX": 10.0, "panY": -5.0, "zoom": 2.0}
        assert ViewportState.from_dict(vp.to_dict()) == vp

    def test_from_dict_rejects_garbage(self):
        with pytest.raises(LienzoSchemaError):
            ViewportState.from_dict({"zoom": "abc"})

    def test_reset(self):
        assert reset_viewport() == ViewportState(0, 0, 1)


class TestConversion:
    def test_screen_to_canvas(self):
        vp = ViewportState(100, 50, 2)
        assert screen_to_canvas((300, 150), vp) == Point(100, 50)

    def test_origin_is_subtracted(self):
        vp = ViewportState(0, 0, 1)
        assert screen_to_canvas((110, 220), vp, origin=(10, 20)) == Point(100, 200)

    @pytest.mark.parametrize("vp", [ViewportState(0, 0, 1), ViewportState(-40, 13, 0.5), ViewportState(7, 7, 3)])
    def test_inverse(self, vp):
        p = (123.5, -42.25)
        back = canvas_to_screen(screen_to_canvas(p, vp, (5, 6)), vp, (5, 6))
        assert back.x == pytest.approx(p[0])
        assert back.y == pytest.approx(p[1])

    def test_delta_ignores_pan(self):
        assert screen_delta_to_canvas(20, 10, ViewportState(500, 500, 2)) == Point(10, 5)


class TestZoom:
    @pytest.mark.parametrize("z", [-1, 0, 0.05, 1, 3.9, 4, 10])
    def test_clamp_range(self, z):
        assert MIN_ZOOM <= clamp_zoom(z) <= MAX_ZOOM
        assert MIN_ZOOM <= set_zoom(ViewportState(), z).zoom <= MAX_ZOOM

    @pytest.mark.parametrize("new_zoom", [0.3, 1.7, 2.5, 4.0])
    def test_zoom_to_point_keeps_anchor(self, new_zoom):
        vp = ViewportState(37, -12, 1.25)
        pointer = (240, 180)
        before = screen_to_canvas(pointer, vp)
        after_vp = zoom_to_point(vp, new_zoom, pointer)
        after = screen_to_canvas(pointer, after_vp)
        assert after.x == pytest.approx(before.x, abs=1e-6)
        assert after.y == pytest.approx(before.y, abs=1e-6)

    def test_zoom_to_point_clamps(self):
        assert zoom_to_point(ViewportState(), 99, (0, 0)).zoom == MAX_ZOOM

    def test_levels(self):
        assert next_zoom_in(1.0) == 1.25
        assert next_zoom_in(1.1) == 1.25
        assert next_zoom_in(MAX_ZOOM) == MAX_ZOOM
        assert next_zoom_out(1.0) == 0.75
        assert next_zoom_out(0.75000000001) == 0.5
        assert next_zoom_out(MIN_ZOOM) == MIN_ZOOM

    def test_step_zoom_anchors_pointer(self):
        vp = ViewportState(10, 10, 1)
        zin = step_zoom_in(vp, (100, 100))
        assert zin.zoom == 1.25
        assert screen_to_canvas((100, 100), zin).x == pytest.approx(90)
        assert step_zoom_out(vp, (0, 0)).zoom == 0.75


class TestWheel:
    def test_pinch_zoom(self):
        vp = apply_wheel(ViewportState(), 0, -10, (50, 50), ctrl=True)
        assert vp.zoom == pytest.approx(1.1)
        assert screen_to_canvas((50, 50), vp).x == pytest.approx(50)

    def test_meta_wheel_is_slower(self):
        vp = apply_wheel(ViewportState(), 0, -10, (0, 0), meta=True)
        assert vp.zoom == pytest.approx(1.05)

    def test_shift_pans_horizontally(self):
        vp = apply_wheel(ViewportState(), 3, 10, (0, 0), shift=True)
        assert (vp.pan_x, vp.pan_y) == (-10, 0)

    def test_plain_wheel_pans(self):
        vp = apply_wheel(ViewportState(5, 5, 1), 3, 4, (0, 0))
        assert (vp.pan_x, vp.pan_y) == (2, 1)

    def test_origin_used_for_zoom_anchor(self):
        vp = apply_wheel(ViewportState(), 0, -10, (60, 70), ctrl=True, origin=(10, 20))
        anchor = screen_to_canvas((50, 50), vp)
        assert anchor.x == pytest.approx(50)
        assert anchor.y == pytest.approx(50)


class TestPan:
    def test_pan_by(self):
        assert pan_by(ViewportState(1, 2, 1), 3, 4).pan == Point(4, 6)

    def test_pan_from_drag_is_absolute(self):
        assert pan_from_drag((10, 10), (30, 5), (100, 100)) == Point(120, 95)
