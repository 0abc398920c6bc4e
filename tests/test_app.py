"""CLI: export / info / import-svg y códigos de salida."""
from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from lienzo.app import EXIT_ERROR, EXIT_OK, main
from lienzo.core.models import ElementKind, Scene, Style
from lienzo.core.serialization import load_scene, save_scene


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for key in ("LIENZO_EXPORT_PADDING", "LIENZO_GRID_SIZE"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def scene_file(tmp_path, rect):
    scene = Scene(
        elements=(
            rect("a", 0, 0, 10, 10, style=Style(fill="#f00")),
            rect("b", 20, 20, 10, 10, kind=ElementKind.ELLIPSE),
            rect("h", 100, 100, 10, 10, visible=False),
        )
    )
    return save_scene(scene, tmp_path / "scene.json")


class TestExport:
    def test_writes_svg(self, scene_file, tmp_path, capsys):
        out = tmp_path / "out.svg"
        assert main(["export", str(scene_file), "-o", str(out)]) == EXIT_OK
        root = ET.fromstring(out.read_text(encoding="utf-8"))
        # padding por defecto 20 alrededor de 30x30
        assert root.get("width") == "70"
        assert len(list(root)) == 2
        assert str(out) in capsys.readouterr().out

    def test_options(self, scene_file, tmp_path):
        out = tmp_path / "sel.svg"
        code = main(
            [
                "export",
                str(scene_file),
                "-o",
                str(out),
                "--padding",
                "0",
                "--background",
                "#fff",
                "--include-hidden",
                "--select",
                "a",
                "h",
            ]
        )
        assert code == EXIT_OK
        root = ET.fromstring(out.read_text(encoding="utf-8"))
        kids = list(root)
        assert kids[0].get("fill") == "#fff"
        assert len(kids) == 3
        assert root.get("width") == "110"

    def test_missing_scene(self, tmp_path, capsys):
        assert main(["export", str(tmp_path / "nope.json"), "-o", str(tmp_path / "x.svg")]) == EXIT_ERROR
        assert "error:" in capsys.readouterr().err

    def test_invalid_scene(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text('{"elements": [{"id": "a", "type": "blob"}]}', encoding="utf-8")
        assert main(["export", str(bad), "-o", str(tmp_path / "x.svg")]) == EXIT_ERROR


class TestInfo:
    def test_summary(self, scene_file, capsys):
        assert main(["info", str(scene_file)]) == EXIT_OK
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "elements: 3"
        assert "  ellipse: 1" in out
        assert "  rectangle: 2" in out
        assert out[-1] == "bbox: 0 0 110 110"

    def test_empty_scene(self, tmp_path, capsys):
        path = save_scene(Scene(), tmp_path / "empty.json")
        assert main(["info", str(path)]) == EXIT_OK
        assert "bbox: -" in capsys.readouterr().out


class TestImportSvg:
    def test_paths_become_scene(self, tmp_path):
        src = tmp_path / "in.svg"
        src.write_text(
            '<svg xmlns="http://www.w3.org/2000/svg"><path d="M 0 0 L 10 10"/><path d="M 5 5 L 6 9 Z"/></svg>',
            encoding="utf-8",
        )
        out = tmp_path / "scene.json"
        assert main(["import-svg", str(src), "-o", str(out)]) == EXIT_OK
        scene = load_scene(out)
        assert [el.kind for el in scene.elements] == [ElementKind.PATH, ElementKind.PATH]
        assert scene.selected_ids == frozenset()

    def test_bad_svg(self, tmp_path):
        assert main(["import-svg", str(tmp_path / "missing.svg"), "-o", str(tmp_path / "s.json")]) == EXIT_ERROR


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2
