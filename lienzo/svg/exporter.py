# File: lienzo/svg/exporter.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Serialización determinística de elementos a documento SVG.
# Notes: Números como JS (10, 10.5). Documento vacío -> 100x100 sin hijos.
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Mapping, Optional, Sequence
from xml.etree.ElementTree import Element as XmlElement, SubElement, indent, tostring

from lienzo.core.grouping import flatten_groups
from lienzo.core.models import Element, ElementKind
from lienzo.core.version import DEFAULT_EXPORT_PADDING
from lienzo.geom.path import bounding_box, fmt_num, to_path_string
from lienzo.geom.primitives import union_of_boxes
from lienzo.geom.rotation import rotated_bounding_box
from lienzo.utils.errors import LienzoIOError
from lienzo.utils.log import get_logger

log = get_logger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
EMPTY_SIZE = 100.0
CORNER_RADIUS = 4
GROUP_DASH = "5,5"


@dataclass(frozen=True)
class ExportOptions:
    padding: float = DEFAULT_EXPORT_PADDING
    background_color: Optional[str] = None
    include_hidden: bool = False
    # None o vacío = todos
    selected_ids: Optional[AbstractSet[str]] = None
    width: Optional[float] = None
    height: Optional[float] = None


def _style_attrs(el: Element, attrs: dict[str, str], *, fill: Optional[str] = None, stroke_width: Optional[float] = None) -> None:
    f = fill if fill is not None else el.fill
    if f is not None:
        attrs["fill"] = f
    if el.stroke is not None:
        attrs["stroke"] = el.stroke
    sw = stroke_width if stroke_width is not None else el.stroke_width
    if sw is not None:
        attrs["stroke-width"] = fmt_num(sw)


def _rotation_attr(el: Element) -> Optional[str]:
    if not el.rotation:
        return None
    c = el.bounds.center
    return f"rotate({fmt_num(el.rotation)} {fmt_num(c.x)} {fmt_num(c.y)})"


def _path_transform(el: Element) -> tuple[str, float]:
    """rotate(centro) translate(caja) scale(orig->caja) translate(-origen del trazo).

    Devuelve (transform, escala máxima) para compensar el grosor del trazo.
    """
    pd = el.path_data
    ob = bounding_box(pd) if pd is not None else None
    sx = el.width / ob.width if ob is not None and ob.width > 0 else 1.0
    sy = el.height / ob.height if ob is not None and ob.height > 0 else 1.0
    parts = []
    rot = _rotation_attr(el)
    if rot:
        parts.append(rot)
    parts.append(f"translate({fmt_num(el.x)} {fmt_num(el.y)})")
    parts.append(f"scale({fmt_num(sx)} {fmt_num(sy)})")
    min_x = ob.x if ob is not None else 0.0
    min_y = ob.y if ob is not None else 0.0
    parts.append(f"translate({fmt_num(-min_x)} {fmt_num(-min_y)})")
    return " ".join(parts), max(sx, sy)


def element_to_svg(el: Element) -> Optional[XmlElement]:
    """Nodo XML para un elemento (None si es un path sin datos)."""
    attrs: dict[str, str] = {}
    kind = el.kind

    if kind is ElementKind.ELLIPSE:
        c = el.bounds.center
        attrs.update(
            cx=fmt_num(c.x),
            cy=fmt_num(c.y),
            rx=fmt_num(el.width / 2),
            ry=fmt_num(el.height / 2),
        )
        _style_attrs(el, attrs)
        tag = "ellipse"

    elif kind is ElementKind.PATH:
        if el.path_data is None:
            return None
        transform, scale = _path_transform(el)
        attrs["d"] = to_path_string(el.path_data)
        sw = None
        if el.stroke_width is not None:
            sw = el.stroke_width / scale if scale > 0 else el.stroke_width
        _style_attrs(el, attrs, stroke_width=sw)
        attrs["stroke-linecap"] = "round"
        attrs["stroke-linejoin"] = "round"
        attrs["transform"] = transform
        return XmlElement("path", attrs)

    else:
        # rectangle / frame / image / text / group
        attrs.update(
            x=fmt_num(el.x),
            y=fmt_num(el.y),
            width=fmt_num(el.width),
            height=fmt_num(el.height),
            rx=str(CORNER_RADIUS),
            ry=str(CORNER_RADIUS),
        )
        if kind is ElementKind.GROUP:
            _style_attrs(el, attrs, fill="none")
            attrs["stroke-dasharray"] = GROUP_DASH
        else:
            _style_attrs(el, attrs)
        tag = "rect"

    rot = _rotation_attr(el)
    if rot:
        attrs["transform"] = rot
    return XmlElement(tag, attrs)


def element_to_svg_string(el: Element) -> str:
    node = element_to_svg(el)
    if node is None:
        return ""
    return tostring(node, encoding="unicode")


def elements_to_svg(
    elements: Sequence[Element],
    options: Optional[ExportOptions] = None,
    group_children: Optional[Mapping[str, tuple[Element, ...]]] = None,
) -> str:
    """Documento SVG completo para los elementos exportados.

    - Filtra por `selected_ids` (si viene) y por visibilidad.
    - Con `group_children`, cada grupo se emite seguido de sus hijos, ya en
      coordenadas absolutas y con la rotación del grupo aplicada.
    - La caja del documento cubre todo lo emitido, rotación incluida.
    """
    opts = options or ExportOptions()
    items = list(elements)
    if opts.selected_ids:
        items = [el for el in items if el.id in opts.selected_ids]
    emitted = flatten_groups(items, group_children or {}, include_hidden=opts.include_hidden)

    if not emitted:
        w = opts.width or EMPTY_SIZE
        h = opts.height or EMPTY_SIZE
        svg = _svg_root(w, h)
        return tostring(svg, encoding="unicode", short_empty_elements=False)

    bounds = union_of_boxes(rotated_bounding_box(el.bounds, el.rotation) for el in emitted)
    pad = opts.padding
    w = opts.width or (bounds.width + pad * 2)
    h = opts.height or (bounds.height + pad * 2)
    dx = -bounds.x + pad
    dy = -bounds.y + pad

    svg = _svg_root(w, h)
    if opts.background_color:
        SubElement(svg, "rect", {"width": "100%", "height": "100%", "fill": opts.background_color})

    for el in emitted:
        node = element_to_svg(el.translated(dx, dy))
        if node is not None:
            svg.append(node)

    log.debug("Export SVG: %d elementos, %sx%s", len(emitted), fmt_num(w), fmt_num(h))
    if len(svg) == 0:
        return tostring(svg, encoding="unicode", short_empty_elements=False)
    indent(svg, space="  ")
    return tostring(svg, encoding="unicode")


def _svg_root(w: float, h: float) -> XmlElement:
    return XmlElement(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": fmt_num(w),
            "height": fmt_num(h),
            "viewBox": f"0 0 {fmt_num(w)} {fmt_num(h)}",
        },
    )


def write_svg(svg_text: str, out_path: str | Path) -> Path:
    """Escribe el documento en UTF-8 (fuerza extensión .svg)."""
    p = Path(out_path)
    if p.suffix.lower() != ".svg":
        p = p.with_suffix(".svg")
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(svg_text, encoding="utf-8")
        return p
    except OSError as e:
        raise LienzoIOError(f"No se pudo exportar SVG: {p}") from e
