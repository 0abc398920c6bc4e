"""Agrupar / desagrupar elementos con tabla lateral de hijos.

Los hijos de un grupo NO viven en la secuencia top-level: se guardan en
`group_children[group_id]` con posición relativa al origen del grupo, en el
mismo orden z que tenían. Grupos anidados: un hijo puede ser a su vez un
grupo, cuyos hijos son relativos a ese sub-grupo.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import AbstractSet, Callable, Iterable, Mapping, Optional, Sequence

from lienzo.core.models import Element, ElementKind, Style, new_element_id
from lienzo.geom.primitives import Bounds, union_of_boxes
from lienzo.geom.rotation import rotate_point
from lienzo.utils.log import get_logger

log = get_logger(__name__)

GroupTable = Mapping[str, tuple[Element, ...]]

GROUP_STYLE = Style(fill="transparent", stroke="transparent", stroke_width=0.0)
GROUP_NAME = "Group"


@dataclass(frozen=True)
class GroupResult:
    elements: tuple[Element, ...]
    group_children: dict[str, tuple[Element, ...]]
    selected_ids: frozenset[str]
    changed: bool = True


def union_bounds(elements: Iterable[Element]) -> Bounds:
    """Caja sin rotar que contiene a todos (vacío -> caja nula)."""
    return union_of_boxes(el.bounds for el in elements)


def make_positions_relative(elements: Iterable[Element], gx: float, gy: float) -> list[Element]:
    return [el.translated(-gx, -gy) for el in elements]


def make_positions_absolute(elements: Iterable[Element], gx: float, gy: float) -> list[Element]:
    return [el.translated(gx, gy) for el in elements]


def move_group_children(children: Iterable[Element], dx: float, dy: float) -> list[Element]:
    return [el.translated(dx, dy) for el in children]


def scale_group_children(
    children: Sequence[Element],
    old_width: float,
    old_height: float,
    new_width: float,
    new_height: float,
) -> list[Element]:
    """Escala posiciones relativas y tamaños de los hijos (caja vieja -> nueva)."""
    if old_width == 0 or old_height == 0:
        return list(children)
    sx = new_width / old_width
    sy = new_height / old_height
    return [
        c.updated(x=c.x * sx, y=c.y * sy, width=c.width * sx, height=c.height * sy)
        for c in children
    ]


def scale_group_in_table(group_children: GroupTable, group_id: str, sx: float, sy: float) -> dict[str, tuple[Element, ...]]:
    """Aplica la escala a los hijos de `group_id` y, recursivamente, a sub-grupos."""
    out = dict(group_children)

    def _scale(gid: str) -> None:
        children = out.get(gid)
        if not children:
            return
        out[gid] = tuple(
            c.updated(x=c.x * sx, y=c.y * sy, width=c.width * sx, height=c.height * sy)
            for c in children
        )
        for c in children:
            if c.is_group:
                _scale(c.id)

    _scale(group_id)
    return out


def group_subtree_ids(group_children: GroupTable, group_id: str) -> set[str]:
    """`group_id` + ids de todos sus sub-grupos (los que tienen entrada en la tabla)."""
    out: set[str] = set()
    stack = [group_id]
    while stack:
        gid = stack.pop()
        if gid in out:
            continue
        out.add(gid)
        stack.extend(c.id for c in group_children.get(gid, ()) if c.is_group)
    return out


def has_group_in_selection(elements: Iterable[Element], selected_ids: AbstractSet[str]) -> bool:
    return any(el.is_group and el.id in selected_ids for el in elements)


def _groupable(elements: Sequence[Element], selected_ids: AbstractSet[str]) -> list[Element]:
    return [el for el in elements if el.id in selected_ids and not el.locked]


def can_group(elements: Sequence[Element], selected_ids: AbstractSet[str]) -> bool:
    return len(_groupable(elements, selected_ids)) >= 2


def can_ungroup(elements: Sequence[Element], selected_ids: AbstractSet[str]) -> bool:
    return any(el.is_group and el.id in selected_ids and not el.locked for el in elements)


def group_elements(
    elements: Sequence[Element],
    selected_ids: AbstractSet[str],
    group_children: GroupTable,
    id_factory: Optional[Callable[[], str]] = None,
) -> GroupResult:
    """Agrupa los seleccionados (no bloqueados). Menos de 2 -> no-op."""
    members = _groupable(elements, selected_ids)
    if len(members) < 2:
        return GroupResult(tuple(elements), dict(group_children), frozenset(selected_ids), changed=False)

    member_ids = {el.id for el in members}
    indices = [i for i, el in enumerate(elements) if el.id in member_ids]
    max_idx = max(indices)

    bounds = union_bounds(members)
    gid = (id_factory or (lambda: new_element_id("group")))()
    group = Element(
        id=gid,
        kind=ElementKind.GROUP,
        x=bounds.x,
        y=bounds.y,
        width=bounds.width,
        height=bounds.height,
        rotation=0.0,
        style=GROUP_STYLE,
        name=GROUP_NAME,
        child_ids=tuple(el.id for el in members),
    )

    remaining = [el for el in elements if el.id not in member_ids]
    # Posición del miembro más alto, descontando los miembros removidos debajo de él.
    insert_at = min(max_idx - (len(members) - 1), len(remaining))
    new_elements = remaining[:insert_at] + [group] + remaining[insert_at:]

    table = dict(group_children)
    table[gid] = tuple(make_positions_relative(members, bounds.x, bounds.y))

    log.debug("Grupo %s creado con %d hijos", gid, len(members))
    return GroupResult(tuple(new_elements), table, frozenset({gid}))


def ungroup_elements(
    elements: Sequence[Element],
    selected_ids: AbstractSet[str],
    group_children: GroupTable,
) -> GroupResult:
    """Desarma cada grupo seleccionado (no bloqueado) en su posición z.

    Selección resultante: los hijos liberados + los ids no-grupo que ya
    estaban seleccionados.
    """
    targets = {el.id for el in elements if el.is_group and el.id in selected_ids and not el.locked}
    if not targets:
        return GroupResult(tuple(elements), dict(group_children), frozenset(selected_ids), changed=False)

    table = dict(group_children)
    new_elements: list[Element] = []
    released: list[str] = []
    for el in elements:
        if el.id not in targets:
            new_elements.append(el)
            continue
        children = table.pop(el.id, ())
        absolute = make_positions_absolute(children, el.x, el.y)
        new_elements.extend(absolute)
        released.extend(c.id for c in absolute)

    keep = {sid for sid in selected_ids if sid not in targets}
    log.debug("Desagrupados %d grupos (%d hijos)", len(targets), len(released))
    return GroupResult(tuple(new_elements), table, frozenset(keep) | frozenset(released))


def _place_in_group(child: Element, group: Element) -> Element:
    """Hijo relativo -> absoluto, girando con el grupo (ya ubicado) sobre su centro."""
    moved = child.translated(group.x, group.y)
    if not group.rotation:
        return moved
    c = rotate_point(moved.bounds.center, group.bounds.center, group.rotation)
    return replace(
        moved,
        x=c.x - moved.width / 2,
        y=c.y - moved.height / 2,
        rotation=moved.rotation + group.rotation,
    )


def flatten_groups(
    elements: Iterable[Element],
    group_children: GroupTable,
    *,
    include_hidden: bool = True,
) -> list[Element]:
    """Secuencia de dibujo: cada grupo seguido de sus hijos en coords absolutas.

    La rotación del grupo se compone en los hijos (centro girado + ángulo
    sumado), también en grupos anidados. Sin `include_hidden`, un elemento
    oculto se omite junto con todo su subárbol.
    """
    out: list[Element] = []

    def _walk(items: Iterable[Element], parent: Optional[Element]) -> None:
        for el in items:
            if not include_hidden and not el.visible:
                continue
            placed = el if parent is None else _place_in_group(el, parent)
            out.append(placed)
            if el.is_group:
                _walk(group_children.get(el.id, ()), placed)

    _walk(elements, None)
    return out


def prune_group_children(group_children: GroupTable, removed_ids: Iterable[str]) -> dict[str, tuple[Element, ...]]:
    """Quita de la tabla los grupos borrados y, en cascada, sus sub-grupos."""
    table = dict(group_children)
    stack = list(removed_ids)
    while stack:
        gid = stack.pop()
        children = table.pop(gid, None)
        if children:
            stack.extend(c.id for c in children if c.is_group)
    return table
