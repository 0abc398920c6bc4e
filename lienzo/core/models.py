# File: lienzo/core/models.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Modelos de datos de la escena (Element, Style, Scene).
# Notes: Todo es inmutable; las actualizaciones devuelven valores nuevos.
from __future__ import annotations

import uuid

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from lienzo.geom.path import PathData, bounding_box
from lienzo.geom.primitives import Bounds
from lienzo.geom.rotation import normalize_angle
from lienzo.geom.viewport import ViewportState
from lienzo.utils.errors import LienzoSchemaError

__all__ = [
    "ElementKind",
    "Style",
    "Element",
    "ViewportState",
    "Scene",
    "new_element_id",
]


class ElementKind(str, Enum):
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    TEXT = "text"
    IMAGE = "image"
    FRAME = "frame"
    GROUP = "group"
    PATH = "path"


def coerce_kind(v: object) -> ElementKind:
    if isinstance(v, ElementKind):
        return v
    s = str(v or "").strip().lower()
    for k in ElementKind:
        if k.value == s:
            return k
    raise LienzoSchemaError(f"Tipo de elemento inválido: {v!r}")


@dataclass(frozen=True)
class Style:
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.fill is not None:
            d["fill"] = str(self.fill)
        if self.stroke is not None:
            d["stroke"] = str(self.stroke)
        if self.stroke_width is not None:
            d["strokeWidth"] = float(self.stroke_width)
        return d

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Style":
        sw = d.get("strokeWidth")
        return Style(
            fill=(str(d["fill"]) if d.get("fill") is not None else None),
            stroke=(str(d["stroke"]) if d.get("stroke") is not None else None),
            stroke_width=(_as_float(sw, "strokeWidth") if sw is not None else None),
        )


_STYLE_FIELDS = ("fill", "stroke", "stroke_width")


@dataclass(frozen=True)
class Element:
    id: str
    kind: ElementKind
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    style: Style = field(default_factory=Style)
    name: str = ""
    locked: bool = False
    visible: bool = True
    # group: ids hijos en orden z (el último queda arriba)
    child_ids: tuple[str, ...] = ()
    # path: datos en el espacio de creación (ver svg.exporter)
    path_data: Optional[PathData] = None
    content: Optional[str] = None
    src: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", coerce_kind(self.kind))
        object.__setattr__(self, "width", max(0.0, float(self.width)))
        object.__setattr__(self, "height", max(0.0, float(self.height)))
        object.__setattr__(self, "rotation", normalize_angle(self.rotation))
        object.__setattr__(self, "child_ids", tuple(self.child_ids))

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.x, self.y, self.width, self.height)

    @property
    def is_group(self) -> bool:
        return self.kind is ElementKind.GROUP

    @property
    def fill(self) -> Optional[str]:
        return self.style.fill

    @property
    def stroke(self) -> Optional[str]:
        return self.style.stroke

    @property
    def stroke_width(self) -> Optional[float]:
        return self.style.stroke_width

    def updated(self, **changes: Any) -> "Element":
        """Merge superficial. Acepta fill/stroke/stroke_width sueltos."""
        style_changes = {k: changes.pop(k) for k in _STYLE_FIELDS if k in changes}
        if style_changes:
            base = changes.get("style", self.style)
            changes["style"] = replace(base, **style_changes)
        if "id" in changes and changes["id"] != self.id:
            raise LienzoSchemaError("No se puede cambiar el id de un elemento")
        return replace(self, **changes)

    def with_bounds(self, b: Bounds) -> "Element":
        return replace(self, x=b.x, y=b.y, width=b.width, height=b.height)

    def translated(self, dx: float, dy: float) -> "Element":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": str(self.id),
            "type": self.kind.value,
            "x": float(self.x),
            "y": float(self.y),
            "width": float(self.width),
            "height": float(self.height),
            "rotation": float(self.rotation),
            **self.style.to_dict(),
            "name": str(self.name),
            "locked": bool(self.locked),
            "visible": bool(self.visible),
        }
        # Limpieza: no escribir payloads de otros tipos
        if self.kind is ElementKind.GROUP:
            d["childIds"] = list(self.child_ids)
        if self.kind is ElementKind.PATH and self.path_data is not None:
            d["pathData"] = self.path_data.to_dict()
        if self.content is not None:
            d["content"] = str(self.content)
        if self.src is not None:
            d["src"] = str(self.src)
        return d

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Element":
        if not isinstance(d, Mapping):
            raise LienzoSchemaError("Elemento inválido: se esperaba dict")
        eid = str(d.get("id", "")).strip()
        if not eid:
            raise LienzoSchemaError("Elemento inválido: falta 'id'")

        kind = coerce_kind(d.get("type", d.get("kind")))

        child_raw = d.get("childIds") or []
        if not isinstance(child_raw, (list, tuple)):
            raise LienzoSchemaError(f"Elemento {eid!r}: childIds inválido")

        pd_raw = d.get("pathData")
        path_data = PathData.from_dict(pd_raw) if isinstance(pd_raw, dict) else None
        if kind is ElementKind.PATH and path_data is None:
            raise LienzoSchemaError(f"Elemento {eid!r}: path sin pathData")

        return Element(
            id=eid,
            kind=kind,
            x=_as_float(d.get("x", 0.0), f"{eid}.x"),
            y=_as_float(d.get("y", 0.0), f"{eid}.y"),
            width=_as_float(d.get("width", 0.0), f"{eid}.width"),
            height=_as_float(d.get("height", 0.0), f"{eid}.height"),
            rotation=_as_float(d.get("rotation", 0.0), f"{eid}.rotation"),
            style=Style.from_dict(d),
            name=str(d.get("name", "")),
            locked=bool(d.get("locked", False)),
            visible=bool(d.get("visible", True)),
            child_ids=tuple(str(c) for c in child_raw),
            path_data=path_data,
            content=(str(d["content"]) if d.get("content") is not None else None),
            src=(str(d["src"]) if d.get("src") is not None else None),
        )


@dataclass(frozen=True)
class Scene:
    elements: tuple[Element, ...] = ()
    selected_ids: frozenset[str] = frozenset()
    viewport: ViewportState = field(default_factory=ViewportState)
    # group id -> hijos con posición relativa al origen del grupo
    group_children: Mapping[str, tuple[Element, ...]] = field(default_factory=dict)

    def get(self, element_id: str) -> Optional[Element]:
        for el in self.elements:
            if el.id == element_id:
                return el
        return None

    def selected(self) -> list[Element]:
        return [el for el in self.elements if el.id in self.selected_ids]

    def to_dict(self) -> dict[str, Any]:
        return {
            "elements": [el.to_dict() for el in self.elements],
            "selectedIds": sorted(self.selected_ids),
            "viewport": self.viewport.to_dict(),
            "groupChildren": {
                gid: [c.to_dict() for c in children] for gid, children in self.group_children.items()
            },
        }

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Scene":
        if not isinstance(d, Mapping):
            raise LienzoSchemaError("Escena inválida: raíz no es objeto JSON")
        raw = d.get("elements", [])
        if not isinstance(raw, list):
            raise LienzoSchemaError("elements inválido: se espera lista")
        elements = tuple(Element.from_dict(x) for x in raw)
        _uniq_ids(elements)

        gc_raw = d.get("groupChildren") or {}
        if not isinstance(gc_raw, Mapping):
            raise LienzoSchemaError("groupChildren inválido: se espera objeto")
        group_children: dict[str, tuple[Element, ...]] = {}
        for gid, children in gc_raw.items():
            if not isinstance(children, list):
                raise LienzoSchemaError(f"groupChildren[{gid!r}] inválido: se espera lista")
            group_children[str(gid)] = tuple(Element.from_dict(c) for c in children)

        vp_raw = d.get("viewport")
        viewport = ViewportState.from_dict(vp_raw) if isinstance(vp_raw, Mapping) else ViewportState()

        ids = {el.id for el in elements}
        selected = frozenset(str(s) for s in (d.get("selectedIds") or []) if str(s) in ids)
        return Scene(elements=elements, selected_ids=selected, viewport=viewport, group_children=group_children)


def path_element_bounds(path_data: PathData) -> Bounds:
    """Caja inicial de un elemento path (mínimo 1x1 para no dividir por 0)."""
    b = bounding_box(path_data)
    return Bounds(b.x, b.y, max(1.0, b.width), max(1.0, b.height))


def _as_float(value: Any, field_name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise LienzoSchemaError(f"Campo {field_name} inválido (float): {value!r}") from e


def _uniq_ids(elements: Iterable[Element]) -> None:
    seen: set[str] = set()
    for el in elements:
        if el.id in seen:
            raise LienzoSchemaError(f"IDs duplicados en elements[]: {el.id!r}")
        seen.add(el.id)


def new_element_id(prefix: str = "el") -> str:
    """Id corto y único (UUID truncado, sin estado global)."""
    return f"{prefix}_{uuid.uuid4().hex[:8]}"
