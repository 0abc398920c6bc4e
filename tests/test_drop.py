"""Payload de drop desde la paleta y colores de acento."""
from __future__ import annotations

import json
import logging
import random

import pytest

from lienzo.core.drop import (
    ACCENT_COLORS,
    DROP_STROKE_WIDTH,
    PALETTE_ITEMS,
    AccentPicker,
    DropPayload,
    parse_drop_payload,
)
from lienzo.core.models import ElementKind


class TestParse:
    def test_json_string(self):
        raw = json.dumps({"kind": "rectangle", "label": "Rect", "defaultWidth": 150, "defaultHeight": 100})
        p = parse_drop_payload(raw)
        assert p == DropPayload(ElementKind.RECTANGLE, "Rect", 150.0, 100.0)

    def test_bytes_and_type_key(self):
        raw = b'{"type": "Ellipse", "defaultWidth": 40, "defaultHeight": 20}'
        p = parse_drop_payload(raw)
        assert p.kind is ElementKind.ELLIPSE
        assert p.label == "Ellipse"

    def test_palette_items_round_trip(self):
        for item in PALETTE_ITEMS:
            assert parse_drop_payload(item.to_dict()) == item

    def test_malformed_json_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="lienzo.core.drop"):
            assert parse_drop_payload("{not json") is None
        assert "JSON inválido" in caplog.text

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "",
            "[1, 2]",
            {"kind": "group", "defaultWidth": 10, "defaultHeight": 10},
            {"kind": "path", "defaultWidth": 10, "defaultHeight": 10},
            {"kind": "rectangle", "defaultWidth": "x", "defaultHeight": 10},
            {"kind": "rectangle", "defaultHeight": 10},
            {"kind": "rectangle", "defaultWidth": 0, "defaultHeight": 10},
        ],
    )
    def test_rejected(self, raw):
        assert parse_drop_payload(raw) is None


class TestAccentPicker:
    def test_never_repeats_consecutively(self):
        picker = AccentPicker(random.Random(7))
        last = None
        for _ in range(60):
            style = picker.pick()
            assert (style.fill, style.stroke) in ACCENT_COLORS
            assert style.stroke_width == DROP_STROKE_WIDTH
            assert picker.last_index != last
            last = picker.last_index

    def test_single_color_palette(self):
        picker = AccentPicker(random.Random(1), palette=(("a", "b"),))
        assert picker.pick().fill == "a"
        assert picker.pick().fill == "a"
