# File: lienzo/core/drag_mode.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Modos de la máquina de estados de drag (idle/pan/move/resize/rotate).
# Notes: Un solo modo activo a la vez; ver core/drag.py.

from __future__ import annotations

from enum import Enum


class DragMode(str, Enum):
    """Modo activo del drag.

    - idle: sin interacción en curso
    - panning: mueve la vista (pan absoluto desde el inicio)
    - moving: mueve elementos seleccionados
    - resizing: un handle de resize sobre un elemento
    - rotating: un handle de rotación sobre un elemento
    """

    IDLE = "idle"
    PANNING = "panning"
    MOVING = "moving"
    RESIZING = "resizing"
    ROTATING = "rotating"


def coerce_drag_mode(v: object, default: DragMode = DragMode.IDLE) -> DragMode:
    if isinstance(v, DragMode):
        return v
    s = str(v or "").strip().lower()
    for m in DragMode:
        if m.value == s:
            return m
    return default
