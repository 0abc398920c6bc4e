# File: lienzo/svg/importer.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Import de trazos SVG a PathData / elementos path (vía svgelements).
# Notes: Arcos se convierten a cúbicas; los demás segmentos mapean 1:1 a M/L/C/Q/Z.
from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from svgelements import SVG, Arc, Close, CubicBezier, Line, Move, QuadraticBezier, Shape
from svgelements import Path as SvgPath

from lienzo.core.models import Element, ElementKind, Style, new_element_id, path_element_bounds
from lienzo.geom.path import (
    PathData,
    PathPoint,
    close_point,
    curve_to,
    line_to,
    make_path,
    move_to,
    quad_to,
)
from lienzo.utils.errors import LienzoValidationError
from lienzo.utils.log import get_logger

log = get_logger(__name__)


def _xy(pt) -> tuple[float, float]:
    return float(pt.x), float(pt.y)


def path_data_from_d(d: str) -> PathData:
    """Parsea un atributo `d` (absoluto o relativo) a PathData."""
    if not d or not d.strip():
        return PathData()
    try:
        sp = SvgPath(d)
    except (ValueError, IndexError) as e:
        raise LienzoValidationError(f"Path SVG inválido: {d[:60]!r}") from e
    return _segments_to_path(sp)


def _segments_to_path(sp: SvgPath) -> PathData:
    points: list[PathPoint] = []
    started = False

    for seg in sp:
        if isinstance(seg, Move):
            points.append(move_to(*_xy(seg.end)))
            started = True
            continue

        # Segmento sin Move previo: anclamos en su inicio.
        if not started and seg.start is not None:
            points.append(move_to(*_xy(seg.start)))
            started = True

        # Close antes que Line: ambos son segmentos lineales en svgelements.
        if isinstance(seg, Close):
            points.append(close_point())
        elif isinstance(seg, Line):
            points.append(line_to(*_xy(seg.end)))
        elif isinstance(seg, CubicBezier):
            points.append(curve_to(*_xy(seg.end), _xy(seg.control1), _xy(seg.control2)))
        elif isinstance(seg, QuadraticBezier):
            points.append(quad_to(*_xy(seg.end), _xy(seg.control)))
        elif isinstance(seg, Arc):
            for cubic in seg.as_cubic_curves():
                points.append(curve_to(*_xy(cubic.end), _xy(cubic.control1), _xy(cubic.control2)))
        else:
            log.debug("Segmento SVG no soportado (%s); se usa línea al final", type(seg).__name__)
            if seg.end is not None:
                points.append(line_to(*_xy(seg.end)))

    closed = bool(points) and points[-1].is_close
    return make_path(points, closed=closed)


def _color(value) -> Optional[str]:
    if value is None or getattr(value, "value", None) is None:
        return None
    return str(value.hex)


def load_svg_paths(
    path: str | Path,
    *,
    id_factory: Optional[Callable[[str], str]] = None,
) -> list[Element]:
    """Un elemento `path` por cada shape del documento (transformaciones aplicadas)."""
    p = Path(path)
    if not p.is_file():
        raise LienzoValidationError(f"No se encontró SVG: {p}")
    try:
        svg = SVG.parse(str(p), reify=True)
    except Exception as e:
        # svgelements propaga errores de XML/parseo con tipos variados.
        raise LienzoValidationError(f"SVG inválido: {p}") from e

    make_id = id_factory or new_element_id
    out: list[Element] = []
    for node in svg.elements():
        if not isinstance(node, Shape):
            continue
        pd = path_data_from_d(node.d())
        if not pd.points:
            continue
        b = path_element_bounds(pd)
        sw = getattr(node, "stroke_width", None)
        style = Style(
            fill=_color(node.fill) or ("none" if not pd.closed else None),
            stroke=_color(node.stroke),
            stroke_width=float(sw) if sw is not None else None,
        )
        out.append(
            Element(
                id=make_id("path"),
                kind=ElementKind.PATH,
                x=b.x,
                y=b.y,
                width=b.width,
                height=b.height,
                style=style,
                name=str(node.id or "Path"),
                path_data=pd,
            )
        )

    log.info("Import SVG %s: %d trazos", p, len(out))
    return out
