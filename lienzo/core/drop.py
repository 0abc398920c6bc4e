# File: lienzo/core/drop.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Payload de drag&drop desde la paleta + colores de acento.
# Notes: JSON mal formado se loguea y se descarta (nunca llega al motor).
from __future__ import annotations

import json
import random

from dataclasses import dataclass
from typing import Any, Optional, Union

from lienzo.core.models import ElementKind, Style
from lienzo.utils.log import get_logger

log = get_logger(__name__)

DROP_STROKE_WIDTH = 2.0

# (fill, stroke)
ACCENT_COLORS: tuple[tuple[str, str], ...] = (
    ("rgba(99, 102, 241, 0.2)", "rgb(99, 102, 241)"),
    ("rgba(236, 72, 153, 0.2)", "rgb(236, 72, 153)"),
    ("rgba(34, 197, 94, 0.2)", "rgb(34, 197, 94)"),
    ("rgba(249, 115, 22, 0.2)", "rgb(249, 115, 22)"),
    ("rgba(14, 165, 233, 0.2)", "rgb(14, 165, 233)"),
    ("rgba(168, 85, 247, 0.2)", "rgb(168, 85, 247)"),
)


@dataclass(frozen=True)
class DropPayload:
    kind: ElementKind
    label: str
    default_width: float
    default_height: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "label": self.label,
            "defaultWidth": float(self.default_width),
            "defaultHeight": float(self.default_height),
        }


PALETTE_ITEMS: tuple[DropPayload, ...] = (
    DropPayload(ElementKind.RECTANGLE, "Rectangle", 150.0, 100.0),
    DropPayload(ElementKind.ELLIPSE, "Ellipse", 120.0, 120.0),
    DropPayload(ElementKind.FRAME, "Frame", 200.0, 150.0),
    DropPayload(ElementKind.TEXT, "Text", 100.0, 40.0),
    DropPayload(ElementKind.IMAGE, "Image", 200.0, 150.0),
)

# Tipos que se pueden crear soltando desde la paleta.
DROPPABLE_KINDS = frozenset(p.kind for p in PALETTE_ITEMS)


def parse_drop_payload(raw: Union[str, bytes, dict[str, Any], None]) -> Optional[DropPayload]:
    """Parsea `{kind|type, label, defaultWidth, defaultHeight}`.

    Devuelve None (y loguea) si el payload no sirve.
    """
    if raw is None or raw == "" or raw == b"":
        return None
    data: Any = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            log.warning("Drop descartado: JSON inválido (%s)", e)
            return None

    if not isinstance(data, dict):
        log.warning("Drop descartado: se esperaba objeto, llegó %s", type(data).__name__)
        return None

    kind_raw = str(data.get("kind", data.get("type", "")) or "").strip().lower()
    kind = next((k for k in ElementKind if k.value == kind_raw), None)
    if kind not in DROPPABLE_KINDS:
        log.warning("Drop descartado: tipo no soportado %r", kind_raw)
        return None

    try:
        w = float(data.get("defaultWidth"))
        h = float(data.get("defaultHeight"))
    except (TypeError, ValueError):
        log.warning("Drop descartado: tamaño inválido en %r", data)
        return None
    if w <= 0 or h <= 0:
        log.warning("Drop descartado: tamaño no positivo (%s x %s)", w, h)
        return None

    label = str(data.get("label") or kind.value.capitalize())
    return DropPayload(kind=kind, label=label, default_width=w, default_height=h)


class AccentPicker:
    """Elige un color al azar de ACCENT_COLORS, distinto del anterior."""

    def __init__(self, rng: Optional[random.Random] = None, palette: tuple[tuple[str, str], ...] = ACCENT_COLORS):
        self._rng = rng or random.Random()
        self._palette = palette
        self._last: Optional[int] = None

    @property
    def last_index(self) -> Optional[int]:
        return self._last

    def pick(self) -> Style:
        n = len(self._palette)
        choices = [i for i in range(n) if i != self._last] or list(range(n))
        idx = self._rng.choice(choices)
        self._last = idx
        fill, stroke = self._palette[idx]
        return Style(fill=fill, stroke=stroke, stroke_width=DROP_STROKE_WIDTH)
