"""Escenas JSON de intercambio: carga, guardado y errores."""
from __future__ import annotations

import json

import pytest

from lienzo.core.models import Element, ElementKind, Scene
from lienzo.core.serialization import dumps_scene, load_scene, loads_scene, save_scene, scene_from_data
from lienzo.core.version import SCHEMA_VERSION
from lienzo.geom.path import create_ellipse_path
from lienzo.geom.viewport import ViewportState
from lienzo.utils.errors import LienzoIOError, LienzoSchemaError, LienzoValidationError


@pytest.fixture
def scene(rect):
    return Scene(
        elements=(
            rect("a", 0, 0, 10, 10, rotation=45),
            Element(id="g", kind=ElementKind.GROUP, x=20, y=20, width=30, height=30, child_ids=("p",)),
        ),
        selected_ids=frozenset({"g"}),
        viewport=ViewportState(12, 34, 1.5),
        group_children={
            "g": (Element(id="p", kind=ElementKind.PATH, width=30, height=30, path_data=create_ellipse_path(15, 15, 15, 15)),),
        },
    )


class TestRoundTrip:
    def test_file(self, scene, tmp_path):
        path = save_scene(scene, tmp_path / "nested" / "scene.json")
        assert path.exists()
        assert not path.with_suffix(".json.tmp").exists()
        assert load_scene(path) == scene

    def test_schema_version_written(self, scene):
        data = json.loads(dumps_scene(scene))
        assert data["schemaVersion"] == SCHEMA_VERSION
        assert set(data) == {"schemaVersion", "elements", "selectedIds", "viewport", "groupChildren"}

    def test_bare_list(self, rect):
        text = json.dumps([rect("a").to_dict(), rect("b").to_dict()])
        scene = loads_scene(text)
        assert [el.id for el in scene.elements] == ["a", "b"]
        assert scene.viewport == ViewportState()


class TestErrors:
    def test_malformed_json_reports_position(self):
        with pytest.raises(LienzoValidationError) as exc:
            loads_scene('{"elements": [\n  {]')
        assert "línea 2" in str(exc.value)

    def test_wrong_root(self):
        with pytest.raises(LienzoValidationError):
            scene_from_data("hola")

    def test_future_schema(self):
        with pytest.raises(LienzoValidationError):
            scene_from_data({"schemaVersion": SCHEMA_VERSION + 1, "elements": []})

    def test_bad_element_is_schema_error(self):
        with pytest.raises(LienzoSchemaError):
            scene_from_data({"elements": [{"id": "a", "type": "blob"}]})

    def test_missing_file(self, tmp_path):
        with pytest.raises(LienzoIOError):
            load_scene(tmp_path / "nope.json")

    def test_unwritable_target(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(LienzoIOError):
            save_scene(Scene(), blocker / "scene.json")
