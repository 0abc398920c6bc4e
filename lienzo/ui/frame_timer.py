# File: lienzo/ui/frame_timer.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Reloj de frames (QTimer) que avanza las animaciones de viewport del store.
# Notes: Solo QtCore; se detiene solo cuando el store deja de animar.
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from lienzo.core.store import SceneStore
from lienzo.utils.log import get_logger

log = get_logger(__name__)

FRAME_INTERVAL_MS = 16


class FrameTimer(QObject):
    """Llama `store.tick()` cada frame mientras haya una animación activa."""

    finished = Signal()

    def __init__(self, store: SceneStore, interval_ms: int = FRAME_INTERVAL_MS, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.store = store
        self._timer = QTimer(self)
        self._timer.setInterval(max(1, int(interval_ms)))
        self._timer.timeout.connect(self._on_timeout)

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        if not self.store.is_animating:
            return
        if not self._timer.isActive():
            self._timer.start()
            log.debug("FrameTimer: start (%d ms)", self._timer.interval())

    def stop(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
            log.debug("FrameTimer: stop")

    def _on_timeout(self) -> None:
        if not self.store.tick():
            self.stop()
            self.finished.emit()
