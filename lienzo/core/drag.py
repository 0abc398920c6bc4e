# File: lienzo/core/drag.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Máquina de estados de drag (pan / move / resize / rotate) sobre un SceneStore.
# Notes: update() recalcula SIEMPRE desde el estado capturado en begin_*; no acumula deltas.
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from lienzo.core.drag_mode import DragMode
from lienzo.core.models import Element
from lienzo.core.store import SceneStore
from lienzo.core.transform_ops import move_positions, resize_bounds, rotation_for_drag
from lienzo.geom.primitives import Point, PointLike, as_point
from lienzo.geom.resize import HandleLike, ResizeHandle, coerce_handle
from lienzo.geom.viewport import ViewportState, pan_from_drag, screen_delta_to_canvas, screen_to_canvas
from lienzo.utils.errors import LienzoStateError
from lienzo.utils.log import get_logger

log = get_logger(__name__)


@dataclass
class DragContext:
    """Estado capturado al iniciar un drag (puntero en pantalla)."""

    start_pointer: Point
    viewport: ViewportState
    start_positions: dict[str, Point] = field(default_factory=dict)
    element: Optional[Element] = None
    handle: Optional[ResizeHandle] = None
    group_children: Mapping[str, tuple[Element, ...]] = field(default_factory=dict)


class DragController:
    """Traduce punteros de pantalla a operaciones del store.

    Uso típico (desde la UI):
        drag.begin_move(pointer)
        drag.update(pointer)   # en cada mouse-move
        drag.end()
    """

    def __init__(self, store: SceneStore):
        self.store = store
        self._mode = DragMode.IDLE
        self._ctx: Optional[DragContext] = None

    @property
    def mode(self) -> DragMode:
        return self._mode

    @property
    def active(self) -> bool:
        return self._mode is not DragMode.IDLE

    def _ensure_idle(self, wanted: DragMode) -> None:
        if self.active:
            raise LienzoStateError(f"No se puede iniciar {wanted.value}: drag {self._mode.value} en curso")

    def _begin(self, mode: DragMode, ctx: DragContext) -> None:
        self._mode = mode
        self._ctx = ctx
        log.debug("drag begin: %s", mode.value)

    def _context(self, pointer: PointLike) -> DragContext:
        return DragContext(start_pointer=as_point(pointer), viewport=self.store.viewport)

    # ----------------------------
    # begin_*
    # ----------------------------
    def begin_pan(self, pointer: PointLike) -> bool:
        self._ensure_idle(DragMode.PANNING)
        self._begin(DragMode.PANNING, self._context(pointer))
        return True

    def begin_move(self, pointer: PointLike, ids: Optional[Iterable[str]] = None) -> bool:
        """Mueve `ids` (default: la selección). Sin elementos movibles -> no arranca."""
        self._ensure_idle(DragMode.MOVING)
        wanted = set(ids) if ids is not None else set(self.store.selected_ids)
        ctx = self._context(pointer)
        ctx.start_positions = {
            el.id: Point(el.x, el.y)
            for el in self.store.elements
            if el.id in wanted and not el.locked
        }
        if not ctx.start_positions:
            return False
        self._begin(DragMode.MOVING, ctx)
        return True

    def begin_resize(self, element_id: str, handle: HandleLike, pointer: PointLike) -> bool:
        self._ensure_idle(DragMode.RESIZING)
        el = self.store.get_element(element_id)
        if el is None or el.locked:
            return False
        ctx = self._context(pointer)
        ctx.element = el
        ctx.handle = coerce_handle(handle)
        ctx.group_children = dict(self.store.group_children)
        self._begin(DragMode.RESIZING, ctx)
        return True

    def begin_rotate(self, element_id: str, pointer: PointLike) -> bool:
        self._ensure_idle(DragMode.ROTATING)
        el = self.store.get_element(element_id)
        if el is None or el.locked:
            return False
        ctx = self._context(pointer)
        ctx.element = el
        self._begin(DragMode.ROTATING, ctx)
        return True

    # ----------------------------
    # update / end
    # ----------------------------
    def update(self, pointer: PointLike, *, shift: bool = False) -> None:
        """Recalcula desde el inicio del drag.

        shift: bloquea aspecto (resize) o snapea el ángulo (rotate).
        """
        ctx = self._ctx
        if ctx is None or not self.active:
            return
        p = as_point(pointer)
        delta = screen_delta_to_canvas(p.x - ctx.start_pointer.x, p.y - ctx.start_pointer.y, ctx.viewport)

        if self._mode is DragMode.PANNING:
            pan = pan_from_drag(ctx.start_pointer, p, ctx.viewport.pan)
            self.store.set_pan(pan.x, pan.y)

        elif self._mode is DragMode.MOVING:
            self.store.set_positions(move_positions(ctx.start_positions, delta, self.store.grid))

        elif self._mode is DragMode.RESIZING and ctx.element is not None and ctx.handle is not None:
            s = self.store.settings
            bounds = resize_bounds(
                ctx.element,
                ctx.handle,
                delta,
                lock_aspect=shift,
                grid=self.store.grid,
                min_width=s.min_size,
                min_height=s.min_size,
            )
            self.store.commit_resize(
                ctx.element.id,
                bounds,
                start_element=ctx.element,
                start_children=ctx.group_children,
            )

        elif self._mode is DragMode.ROTATING and ctx.element is not None:
            # Centro y punteros en canvas, con el viewport del inicio.
            start_c = screen_to_canvas(ctx.start_pointer, ctx.viewport)
            cur_c = screen_to_canvas(p, ctx.viewport)
            rot = rotation_for_drag(
                ctx.element,
                start_c,
                cur_c,
                snap=shift,
                increment=self.store.settings.rotation_snap_deg,
            )
            self.store.update_element(ctx.element.id, rotation=rot)

    def end(self) -> None:
        if self.active:
            log.debug("drag end: %s", self._mode.value)
        self._mode = DragMode.IDLE
        self._ctx = None

    def cancel(self) -> None:
        """Vuelve al estado del inicio y termina el drag."""
        ctx = self._ctx
        if ctx is not None:
            if self._mode is DragMode.PANNING:
                self.store.set_pan(ctx.viewport.pan_x, ctx.viewport.pan_y)
            elif self._mode is DragMode.MOVING:
                self.store.set_positions(ctx.start_positions)
            elif self._mode is DragMode.RESIZING and ctx.element is not None:
                self.store.commit_resize(
                    ctx.element.id,
                    ctx.element.bounds,
                    start_element=ctx.element,
                    start_children=ctx.group_children,
                )
            elif self._mode is DragMode.ROTATING and ctx.element is not None:
                self.store.update_element(ctx.element.id, rotation=ctx.element.rotation)
        self.end()

