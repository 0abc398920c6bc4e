# File: lienzo/core/store.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Store de escena (composition root): elementos, selección, viewport, animación.
# Notes: Cada operación reemplaza la Scene completa (update-and-replace) y notifica.
from __future__ import annotations

import random
import time

from dataclasses import replace
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from lienzo.core import grouping, zorder
from lienzo.core.drop import AccentPicker, DropPayload, parse_drop_payload
from lienzo.core.models import Element, ElementKind, Scene, Style, new_element_id, path_element_bounds
from lienzo.core.settings import EngineSettings
from lienzo.core.tween import ViewportTween, zoom_animation_target
from lienzo.geom import viewport as vp
from lienzo.geom.path import PathData
from lienzo.geom.primitives import Bounds, Point, PointLike, as_point
from lienzo.geom.rotation import (
    RotationCorner,
    rotate_point,
    rotation_handle_at_point,
    rotation_handle_positions,
)
from lienzo.geom.snap import GridSettings
from lienzo.geom.viewport import ViewportState
from lienzo.svg.exporter import ExportOptions, elements_to_svg
from lienzo.utils.log import get_logger

log = get_logger(__name__)

Listener = Callable[[Scene], None]
Clock = Callable[[], float]


def _default_clock() -> float:
    return time.monotonic() * 1000.0


class SceneStore:
    """Dueño único de la Scene.

    Los colaboradores (UI, CLI, tests) leen `scene` y llaman operaciones; nunca
    mutan la escena directamente.
    """

    def __init__(
        self,
        scene: Optional[Scene] = None,
        *,
        settings: Optional[EngineSettings] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        id_factory: Optional[Callable[[str], str]] = None,
    ):
        self.settings = settings or EngineSettings()
        self._scene = scene or Scene()
        self._grid = GridSettings(enabled=self.settings.snap_enabled, grid_size=self.settings.grid_size)
        self._clock: Clock = clock or _default_clock
        self._accent = AccentPicker(rng)
        self._new_id = id_factory or new_element_id
        self._tween: Optional[ViewportTween] = None
        self._listeners: list[Listener] = []

    # ----------------------------
    # Estado / suscripción
    # ----------------------------
    @property
    def scene(self) -> Scene:
        return self._scene

    @property
    def elements(self) -> tuple[Element, ...]:
        return self._scene.elements

    @property
    def selected_ids(self) -> frozenset[str]:
        return self._scene.selected_ids

    @property
    def viewport(self) -> ViewportState:
        return self._scene.viewport

    @property
    def group_children(self) -> Mapping[str, tuple[Element, ...]]:
        return self._scene.group_children

    @property
    def grid(self) -> GridSettings:
        return self._grid

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registra un listener; devuelve la función para desuscribirlo."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _commit(self, scene: Scene, reason: str) -> None:
        if scene == self._scene:
            return
        self._scene = scene
        log.debug("commit: %s (%d elementos)", reason, len(scene.elements))
        for listener in list(self._listeners):
            listener(scene)

    def _set_viewport(self, viewport: ViewportState, reason: str) -> None:
        self._commit(replace(self._scene, viewport=viewport), reason)

    # ----------------------------
    # Viewport (toda acción manual cancela la animación en curso)
    # ----------------------------
    def _cancel_animation(self) -> None:
        if self._tween is not None:
            self._tween.cancel()
            self._tween = None

    def set_pan(self, pan_x: float, pan_y: float) -> None:
        self._cancel_animation()
        self._set_viewport(vp.set_pan(self.viewport, pan_x, pan_y), "set_pan")

    def adjust_pan(self, dx: float, dy: float) -> None:
        self._cancel_animation()
        self._set_viewport(vp.pan_by(self.viewport, dx, dy), "adjust_pan")

    def set_zoom(self, zoom: float) -> None:
        self._cancel_animation()
        self._set_viewport(vp.set_zoom(self.viewport, zoom), "set_zoom")

    def zoom_to(self, zoom: float, center: PointLike) -> None:
        self._cancel_animation()
        self._set_viewport(vp.zoom_to_point(self.viewport, zoom, center), "zoom_to")

    def zoom_in(self, center: Optional[PointLike] = None) -> None:
        target = vp.next_zoom_in(self.viewport.zoom)
        if center is None:
            self.set_zoom(target)
        else:
            self.zoom_to(target, center)

    def zoom_out(self, center: Optional[PointLike] = None) -> None:
        target = vp.next_zoom_out(self.viewport.zoom)
        if center is None:
            self.set_zoom(target)
        else:
            self.zoom_to(target, center)

    def reset_view(self) -> None:
        self._cancel_animation()
        self._set_viewport(vp.reset_viewport(), "reset_view")

    def apply_wheel(self, delta_x: float, delta_y: float, pointer: PointLike, **modifiers: Any) -> None:
        self._cancel_animation()
        self._set_viewport(vp.apply_wheel(self.viewport, delta_x, delta_y, pointer, **modifiers), "wheel")

    def screen_to_canvas(self, point: PointLike, origin: PointLike = (0.0, 0.0)) -> Point:
        return vp.screen_to_canvas(point, self.viewport, origin)

    def canvas_to_screen(self, point: PointLike, origin: PointLike = (0.0, 0.0)) -> Point:
        return vp.canvas_to_screen(point, self.viewport, origin)

    # ----------------------------
    # Animación
    # ----------------------------
    @property
    def is_animating(self) -> bool:
        return self._tween is not None and self._tween.active

    def _start_animation(self, end: ViewportState, duration_ms: float) -> None:
        self._cancel_animation()
        self._tween = ViewportTween(
            start=self.viewport,
            end=end,
            duration_ms=duration_ms,
            start_time=self._clock(),
        )
        log.debug("Animación %s -> %s (%.0f ms)", self.viewport, end, duration_ms)

    def animate_zoom_to(self, zoom: float, center: PointLike) -> None:
        target = zoom_animation_target(self.viewport, zoom, center)
        self._start_animation(target, self.settings.zoom_animation_ms)

    def animate_zoom_in(self, center: Optional[PointLike] = None) -> None:
        target = vp.next_zoom_in(self.viewport.zoom)
        if center is None:
            self._start_animation(vp.set_zoom(self.viewport, target), self.settings.zoom_animation_ms)
        else:
            self.animate_zoom_to(target, center)

    def animate_zoom_out(self, center: Optional[PointLike] = None) -> None:
        target = vp.next_zoom_out(self.viewport.zoom)
        if center is None:
            self._start_animation(vp.set_zoom(self.viewport, target), self.settings.zoom_animation_ms)
        else:
            self.animate_zoom_to(target, center)

    def animate_reset_view(self) -> None:
        self._start_animation(vp.reset_viewport(), self.settings.reset_view_animation_ms)

    def tick(self, now: Optional[float] = None) -> bool:
        """Avanza la animación. Devuelve True si sigue activa."""
        tween = self._tween
        if tween is None or not tween.active:
            return False
        state = tween.tick(self._clock() if now is None else now)
        self._set_viewport(state, "tick")
        if tween.complete:
            self._tween = None
            return False
        return True

    # ----------------------------
    # Elementos
    # ----------------------------
    def get_element(self, element_id: str) -> Optional[Element]:
        return self._scene.get(element_id)

    def get_selected_elements(self) -> list[Element]:
        return self._scene.selected()

    def add_element(self, kind: Union[ElementKind, str], **fields: Any) -> str:
        """Crea un elemento con id nuevo, lo agrega arriba de todo y lo selecciona."""
        eid = self._new_id("el")
        el = Element(id=eid, kind=kind, **fields)
        scene = replace(
            self._scene,
            elements=self._scene.elements + (el,),
            selected_ids=frozenset({eid}),
        )
        self._commit(scene, f"add {el.kind.value}")
        return eid

    def add_path(self, path_data: PathData, style: Optional[Style] = None, name: str = "Path") -> str:
        """Elemento path con la caja inicial del propio trazo."""
        b = path_element_bounds(path_data)
        if style is None:
            style = Style(fill=("none" if not path_data.closed else None), stroke="#000000", stroke_width=2.0)
        return self.add_element(
            ElementKind.PATH,
            x=b.x,
            y=b.y,
            width=b.width,
            height=b.height,
            style=style,
            name=name,
            path_data=path_data,
        )

    def add_dropped(
        self,
        payload: Union[DropPayload, str, bytes, dict, None],
        screen_point: PointLike,
        origin: PointLike = (0.0, 0.0),
    ) -> Optional[str]:
        """Crea el elemento soltado desde la paleta, centrado en el punto de drop."""
        if not isinstance(payload, DropPayload):
            payload = parse_drop_payload(payload)
            if payload is None:
                return None
        c = self.screen_to_canvas(screen_point, origin)
        return self.add_element(
            payload.kind,
            x=c.x - payload.default_width / 2,
            y=c.y - payload.default_height / 2,
            width=payload.default_width,
            height=payload.default_height,
            style=self._accent.pick(),
            name=payload.label,
        )

    def update_element(self, element_id: str, **changes: Any) -> bool:
        els = self._scene.elements
        for i, el in enumerate(els):
            if el.id == element_id:
                new_el = el.updated(**changes)
                scene = replace(self._scene, elements=els[:i] + (new_el,) + els[i + 1:])
                self._commit(scene, f"update {element_id}")
                return True
        return False

    def delete_elements(self, ids: Iterable[str]) -> None:
        drop = set(ids)
        if not drop:
            return
        scene = replace(
            self._scene,
            elements=tuple(el for el in self._scene.elements if el.id not in drop),
            selected_ids=frozenset(s for s in self._scene.selected_ids if s not in drop),
            group_children=grouping.prune_group_children(self._scene.group_children, drop),
        )
        self._commit(scene, f"delete {len(drop)}")

    def delete_selected(self) -> None:
        self.delete_elements(self._scene.selected_ids)

    def move_elements(self, ids: Iterable[str], dx: float, dy: float) -> None:
        """Desplazamiento incremental (teclado/nudge). Ignora bloqueados."""
        target = set(ids)
        scene = replace(
            self._scene,
            elements=tuple(
                el.translated(dx, dy) if (el.id in target and not el.locked) else el
                for el in self._scene.elements
            ),
        )
        self._commit(scene, "move")

    def set_positions(self, positions: Mapping[str, PointLike]) -> None:
        """Posiciones absolutas (drag de move). Ignora bloqueados."""
        out = []
        for el in self._scene.elements:
            p = positions.get(el.id)
            if p is not None and not el.locked:
                x, y = as_point(p)
                el = replace(el, x=x, y=y)
            out.append(el)
        self._commit(replace(self._scene, elements=tuple(out)), "set_positions")

    def commit_resize(
        self,
        element_id: str,
        bounds: Bounds,
        *,
        start_element: Optional[Element] = None,
        start_children: Optional[Mapping[str, tuple[Element, ...]]] = None,
    ) -> None:
        """Aplica una caja nueva. Para grupos, re-escala los hijos desde el inicio del drag."""
        el = self.get_element(element_id)
        if el is None or el.locked:
            return
        els = tuple(e.with_bounds(bounds) if e.id == element_id else e for e in self._scene.elements)
        table = self._scene.group_children
        if el.is_group:
            base_el = start_element or el
            base_table = start_children if start_children is not None else table
            if base_el.width > 0 and base_el.height > 0:
                sx = bounds.width / base_el.width
                sy = bounds.height / base_el.height
                scaled = grouping.scale_group_in_table(base_table, element_id, sx, sy)
                subtree = grouping.group_subtree_ids(base_table, element_id)
                table = {**table, **{k: scaled[k] for k in subtree if k in scaled}}
        self._commit(replace(self._scene, elements=els, group_children=table), f"resize {element_id}")

    # ----------------------------
    # Z-order
    # ----------------------------
    def _reorder(self, fn: Callable[..., list[Element]], reason: str) -> None:
        new = fn(self._scene.elements, self._scene.selected_ids)
        self._commit(replace(self._scene, elements=tuple(new)), reason)

    def bring_to_front(self) -> None:
        self._reorder(zorder.bring_to_front, "bring_to_front")

    def send_to_back(self) -> None:
        self._reorder(zorder.send_to_back, "send_to_back")

    def bring_forward(self) -> None:
        self._reorder(zorder.bring_forward, "bring_forward")

    def send_backward(self) -> None:
        self._reorder(zorder.send_backward, "send_backward")

    def can_bring_forward(self) -> bool:
        return zorder.can_bring_forward(self._scene.elements, self._scene.selected_ids)

    def can_send_backward(self) -> bool:
        return zorder.can_send_backward(self._scene.elements, self._scene.selected_ids)

    # ----------------------------
    # Grupos
    # ----------------------------
    def _apply_group_result(self, res: grouping.GroupResult, reason: str) -> bool:
        if not res.changed:
            return False
        scene = replace(
            self._scene,
            elements=res.elements,
            selected_ids=res.selected_ids,
            group_children=res.group_children,
        )
        self._commit(scene, reason)
        return True

    def group_selected(self) -> Optional[str]:
        """Agrupa la selección; devuelve el id del grupo (o None si no aplica)."""
        res = grouping.group_elements(
            self._scene.elements,
            self._scene.selected_ids,
            self._scene.group_children,
            id_factory=lambda: self._new_id("group"),
        )
        if not self._apply_group_result(res, "group"):
            return None
        return next(iter(res.selected_ids))

    def ungroup_selected(self) -> bool:
        res = grouping.ungroup_elements(self._scene.elements, self._scene.selected_ids, self._scene.group_children)
        return self._apply_group_result(res, "ungroup")

    def can_group_selection(self) -> bool:
        return grouping.can_group(self._scene.elements, self._scene.selected_ids)

    def can_ungroup_selection(self) -> bool:
        return grouping.can_ungroup(self._scene.elements, self._scene.selected_ids)

    # ----------------------------
    # Selección
    # ----------------------------
    def select_element(self, element_id: str, add_to_selection: bool = False) -> None:
        """Selecciona `element_id`; con add_to_selection alterna su pertenencia."""
        if self.get_element(element_id) is None:
            return
        sel = self._scene.selected_ids
        if add_to_selection:
            new = sel - {element_id} if element_id in sel else sel | {element_id}
        else:
            new = frozenset({element_id})
        self._commit(replace(self._scene, selected_ids=frozenset(new)), "select")

    def deselect_all(self) -> None:
        self._commit(replace(self._scene, selected_ids=frozenset()), "deselect_all")

    def select_all(self) -> None:
        ids = frozenset(el.id for el in self._scene.elements if not el.locked)
        self._commit(replace(self._scene, selected_ids=ids), "select_all")

    # ----------------------------
    # Grilla / snap
    # ----------------------------
    def set_snap_to_grid(self, enabled: bool) -> None:
        self._grid = replace(self._grid, enabled=bool(enabled))

    def toggle_snap_to_grid(self) -> None:
        self.set_snap_to_grid(not self._grid.enabled)

    def set_grid_size(self, size: float) -> None:
        self._grid = replace(self._grid, grid_size=max(1.0, float(size)))

    # ----------------------------
    # Handles de rotación
    # ----------------------------
    def rotation_handles(self, element_id: str) -> dict[RotationCorner, Point]:
        """Posiciones (canvas) de los handles, girados junto con el elemento."""
        el = self.get_element(element_id)
        if el is None:
            return {}
        handles = rotation_handle_positions(el.bounds, self.settings.rotation_handle_offset)
        if not el.rotation:
            return handles
        c = el.bounds.center
        return {corner: rotate_point(p, c, el.rotation) for corner, p in handles.items()}

    def rotation_handle_at(self, point: PointLike, element_id: str) -> Optional[RotationCorner]:
        """Esquina de rotación bajo `point` (canvas), o None. Bloqueados no rotan."""
        el = self.get_element(element_id)
        if el is None or el.locked:
            return None
        local = rotate_point(point, el.bounds.center, -el.rotation) if el.rotation else as_point(point)
        return rotation_handle_at_point(local, el.bounds, self.settings.rotation_handle_offset)

    # ----------------------------
    # Export
    # ----------------------------
    def export_svg(self, options: Optional[ExportOptions] = None) -> str:
        opts = options or ExportOptions(padding=self.settings.export_padding)
        return elements_to_svg(self._scene.elements, opts, group_children=self._scene.group_children)
