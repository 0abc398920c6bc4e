"""Element / Style / Scene: validación, merge y formato de intercambio."""
from __future__ import annotations

import pytest

from lienzo.core.models import Element, ElementKind, Scene, Style, coerce_kind, new_element_id, path_element_bounds
from lienzo.geom.path import create_line_path, create_rectangle_path
from lienzo.geom.viewport import ViewportState
from lienzo.utils.errors import LienzoSchemaError, LienzoValidationError


class TestElement:
    def test_post_init_normalizes(self):
        el = Element(id="a", kind="Ellipse", width=-5, height=3, rotation=-90, child_ids=["x"])
        assert el.kind is ElementKind.ELLIPSE
        assert el.width == 0
        assert el.rotation == 270
        assert el.child_ids == ("x",)

    def test_unknown_kind(self):
        with pytest.raises(LienzoSchemaError):
            coerce_kind("triangle")

    def test_updated_merges_style(self, rect, red_style):
        el = rect("a", style=red_style)
        el2 = el.updated(fill="#00ff00", x=5)
        assert el2.fill == "#00ff00"
        assert el2.stroke == "#000000"
        assert el2.x == 5
        assert el.fill == "#ff0000"

    def test_updated_refuses_id_change(self, rect):
        with pytest.raises(LienzoSchemaError):
            rect("a").updated(id="b")

    def test_bounds_and_translate(self, rect):
        el = rect("a", 1, 2, 3, 4).translated(10, 10)
        b = el.bounds
        assert (b.x, b.y, b.width, b.height) == (11, 12, 3, 4)


class TestElementDict:
    def test_rect_dict(self, rect, red_style):
        d = rect("a", 1, 2, 3, 4, style=red_style, name="Box").to_dict()
        assert d == {
            "id": "a",
            "type": "rectangle",
            "x": 1.0,
            "y": 2.0,
            "width": 3.0,
            "height": 4.0,
            "rotation": 0.0,
            "fill": "#ff0000",
            "stroke": "#000000",
            "strokeWidth": 2.0,
            "name": "Box",
            "locked": False,
            "visible": True,
        }

    def test_payloads_round_trip(self):
        group = Element(id="g", kind=ElementKind.GROUP, child_ids=("a", "b"))
        path = Element(id="p", kind=ElementKind.PATH, path_data=create_rectangle_path(0, 0, 5, 5))
        text = Element(id="t", kind=ElementKind.TEXT, content="hola")
        for el in (group, path, text):
            assert Element.from_dict(el.to_dict()) == el

    def test_accepts_kind_key(self):
        assert Element.from_dict({"id": "a", "kind": "frame"}).kind is ElementKind.FRAME

    @pytest.mark.parametrize(
        "raw",
        [
            {"type": "rectangle"},
            {"id": "a", "type": "nope"},
            {"id": "a", "type": "path"},
            {"id": "a", "type": "rectangle", "x": "abc"},
            {"id": "a", "type": "group", "childIds": "abc"},
        ],
    )
    def test_invalid(self, raw):
        with pytest.raises(LienzoValidationError):
            Element.from_dict(raw)


class TestScene:
    def test_round_trip(self, rect):
        scene = Scene(
            elements=(rect("a"), Element(id="g", kind="group", child_ids=("c",))),
            selected_ids=frozenset({"a"}),
            viewport=ViewportState(5, 6, 2),
            group_children={"g": (rect("c", 1, 1),)},
        )
        assert Scene.from_dict(scene.to_dict()) == scene

    def test_duplicate_ids(self, rect):
        d = {"elements": [rect("a").to_dict(), rect("a").to_dict()]}
        with pytest.raises(LienzoSchemaError):
            Scene.from_dict(d)

    def test_selection_filtered(self, rect):
        scene = Scene.from_dict({"elements": [rect("a").to_dict()], "selectedIds": ["a", "ghost"]})
        assert scene.selected_ids == frozenset({"a"})
        assert [el.id for el in scene.selected()] == ["a"]

    def test_get(self, rect):
        scene = Scene(elements=(rect("a"),))
        assert scene.get("a").id == "a"
        assert scene.get("zz") is None


class TestHelpers:
    def test_path_bounds_minimum(self):
        b = path_element_bounds(create_line_path(5, 5, 50, 5))
        assert (b.x, b.y, b.width, b.height) == (5, 5, 45, 1)

    def test_new_id(self):
        a = new_element_id("path")
        assert a.startswith("path_")
        assert a != new_element_id("path")

    def test_style_omits_none(self):
        assert Style(fill="red").to_dict() == {"fill": "red"}
