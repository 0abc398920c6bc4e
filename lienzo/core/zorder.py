"""Z-order por posición en la secuencia (el último se dibuja arriba).

Funciones puras: reciben elementos + ids seleccionados y devuelven una lista
nueva. Sin selección (o selección que no matchea nada) -> misma secuencia.
"""

from __future__ import annotations

from typing import AbstractSet, Sequence

from lienzo.core.models import Element


def _partition(elements: Sequence[Element], selected_ids: AbstractSet[str]) -> tuple[list[Element], list[Element]]:
    sel: list[Element] = []
    others: list[Element] = []
    for el in elements:
        (sel if el.id in selected_ids else others).append(el)
    return sel, others


def _selected_indices(elements: Sequence[Element], selected_ids: AbstractSet[str]) -> list[int]:
    return [i for i, el in enumerate(elements) if el.id in selected_ids]


def bring_to_front(elements: Sequence[Element], selected_ids: AbstractSet[str]) -> list[Element]:
    sel, others = _partition(elements, selected_ids)
    return others + sel


def send_to_back(elements: Sequence[Element], selected_ids: AbstractSet[str]) -> list[Element]:
    sel, others = _partition(elements, selected_ids)
    return sel + others


def bring_forward(elements: Sequence[Element], selected_ids: AbstractSet[str]) -> list[Element]:
    """Pasa el elemento inmediatamente arriba de la selección a debajo de ella."""
    result = list(elements)
    idx = _selected_indices(result, selected_ids)
    if not idx:
        return result
    hi = max(idx)
    lo = min(idx)
    if hi >= len(result) - 1:
        return result
    above = result.pop(hi + 1)
    result.insert(lo, above)
    return result


def send_backward(elements: Sequence[Element], selected_ids: AbstractSet[str]) -> list[Element]:
    """Pasa el elemento inmediatamente debajo de la selección a arriba de ella."""
    result = list(elements)
    idx = _selected_indices(result, selected_ids)
    if not idx:
        return result
    hi = max(idx)
    lo = min(idx)
    if lo <= 0:
        return result
    below = result.pop(lo - 1)
    result.insert(hi, below)
    return result


def z_index(elements: Sequence[Element], element_id: str) -> int:
    for i, el in enumerate(elements):
        if el.id == element_id:
            return i
    return -1


def can_bring_forward(elements: Sequence[Element], selected_ids: AbstractSet[str]) -> bool:
    idx = _selected_indices(elements, selected_ids)
    return bool(idx) and max(idx) < len(elements) - 1


def can_send_backward(elements: Sequence[Element], selected_ids: AbstractSet[str]) -> bool:
    idx = _selected_indices(elements, selected_ids)
    return bool(idx) and min(idx) > 0
