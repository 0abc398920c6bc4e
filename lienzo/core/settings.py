# File: lienzo/core/settings.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Configuración del motor (grilla, tamaños mínimos, rotación, export, animación).
# Notes: No depende de Qt. Orden: defaults -> lienzo_settings.json -> env LIENZO_*.
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from lienzo.core.version import (
    DEFAULT_EXPORT_PADDING,
    DEFAULT_GRID_SIZE,
    DEFAULT_MIN_SIZE,
    DEFAULT_ROTATION_HANDLE_OFFSET,
    DEFAULT_ROTATION_SNAP_DEG,
    RESET_VIEW_ANIMATION_MS,
    ZOOM_ANIMATION_MS,
)

log = logging.getLogger(__name__)

# Archivo esperado en la raíz del proyecto (o en un padre del CWD).
PROJECT_SETTINGS_FILENAME = "lienzo_settings.json"

# campo -> (clave JSON "a.b", env var, min, max)
_FLOAT_FIELDS: dict[str, tuple[str, str, float, float]] = {
    "grid_size": ("grid.size", "LIENZO_GRID_SIZE", 1.0, 500.0),
    "min_size": ("resize.min_size", "LIENZO_MIN_SIZE", 1.0, 1000.0),
    "rotation_snap_deg": ("rotation.snap_deg", "LIENZO_ROTATION_SNAP", 1.0, 90.0),
    "rotation_handle_offset": ("rotation.handle_offset", "LIENZO_ROTATION_HANDLE_OFFSET", 0.0, 200.0),
    "export_padding": ("export.padding", "LIENZO_EXPORT_PADDING", 0.0, 1000.0),
    "zoom_animation_ms": ("animation.zoom_ms", "LIENZO_ZOOM_ANIMATION_MS", 0.0, 5000.0),
    "reset_view_animation_ms": ("animation.reset_view_ms", "LIENZO_RESET_VIEW_ANIMATION_MS", 0.0, 5000.0),
}
_BOOL_FIELDS: dict[str, tuple[str, str]] = {
    "snap_enabled": ("grid.snap", "LIENZO_SNAP"),
}


def find_project_settings_path(start: Path | None = None) -> Path | None:
    """Busca lienzo_settings.json subiendo desde start (o CWD)."""
    start = (start or Path.cwd()).resolve()
    for p in (start, *start.parents):
        candidate = p / PROJECT_SETTINGS_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_project_settings(start: Path | None = None, *, logger: logging.Logger | None = None) -> Dict[str, Any]:
    """Carga el JSON de project settings. Devuelve {} si no existe o es inválido."""
    _log = logger or log
    p = find_project_settings_path(start)
    if not p:
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        _log.warning("No se pudo leer %s: %s", p, e)
        return {}
    if not isinstance(data, dict):
        _log.warning("%s ignorado: la raíz no es objeto JSON", p)
        return {}
    return data


def save_project_settings(data: Mapping[str, Any], start: Path | None = None, *, logger: logging.Logger | None = None) -> Path | None:
    """Guarda project settings en lienzo_settings.json.

    - Si se encuentra un archivo existente, lo pisa.
    - Si no existe, lo crea en `start` (o el CWD).

    Devuelve el Path guardado o None si falla.
    """
    _log = logger or log
    p = find_project_settings_path(start)
    if not p:
        p = (start or Path.cwd()).resolve() / PROJECT_SETTINGS_FILENAME
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(dict(data), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        return p
    except OSError as e:
        _log.warning("No se pudo guardar %s: %s", p, e)
        return None


def _deep_get(d: Mapping[str, Any], path: str, default: Any = None) -> Any:
    cur: Any = d
    for part in path.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _deep_set(d: Dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    cur = d
    for part in parts[:-1]:
        cur = cur.setdefault(part, {})
    cur[parts[-1]] = value


@dataclass
class EngineSettings:
    """Parámetros del motor. Todos los valores quedan en rango tras `load()`."""

    grid_size: float = DEFAULT_GRID_SIZE
    snap_enabled: bool = False
    min_size: float = DEFAULT_MIN_SIZE
    rotation_snap_deg: float = DEFAULT_ROTATION_SNAP_DEG
    rotation_handle_offset: float = DEFAULT_ROTATION_HANDLE_OFFSET
    export_padding: float = DEFAULT_EXPORT_PADDING
    zoom_animation_ms: float = ZOOM_ANIMATION_MS
    reset_view_animation_ms: float = RESET_VIEW_ANIMATION_MS

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        env: Optional[Mapping[str, str]] = None,
    ) -> "EngineSettings":
        """Defaults <- JSON anidado <- env vars (gana env)."""
        out = cls()
        env = env if env is not None else os.environ
        for name, (key, env_key, lo, hi) in _FLOAT_FIELDS.items():
            default = getattr(out, name)
            value = _deep_get(data, key, default)
            if env.get(env_key):
                value = env[env_key]
            setattr(out, name, _coerce_float(value, lo, hi, default, key))
        for name, (key, env_key) in _BOOL_FIELDS.items():
            default = getattr(out, name)
            value = _deep_get(data, key, default)
            if env.get(env_key):
                value = env[env_key]
            setattr(out, name, _coerce_bool(value, default, key))
        return out

    @classmethod
    def load(cls, start: Path | None = None, env: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        data = load_project_settings(start)
        out = cls.from_mapping(data, env)
        log.debug("EngineSettings: %s", out)
        return out

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        for name, (key, _env, _lo, _hi) in _FLOAT_FIELDS.items():
            _deep_set(d, key, float(getattr(self, name)))
        for name, (key, _env) in _BOOL_FIELDS.items():
            _deep_set(d, key, bool(getattr(self, name)))
        return d

    def save(self, start: Path | None = None) -> Path | None:
        return save_project_settings(self.to_dict(), start)


def _coerce_float(v: Any, min_v: float, max_v: float, default: float, key: str) -> float:
    try:
        n = float(v)
    except (TypeError, ValueError):
        log.warning("Setting %s inválido (%r); se usa %s", key, v, default)
        return float(default)
    if n != n:  # NaN
        log.warning("Setting %s inválido (NaN); se usa %s", key, default)
        return float(default)
    if n < min_v:
        return min_v
    if n > max_v:
        return max_v
    return n


def _coerce_bool(v: Any, default: bool, key: str) -> bool:
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    log.warning("Setting %s inválido (%r); se usa %s", key, v, default)
    return bool(default)
