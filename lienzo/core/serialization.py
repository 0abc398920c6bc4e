# File: lienzo/core/serialization.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Carga/guardado de escenas en JSON de intercambio (elementos + tabla de grupos).
# Notes: Acepta {"elements": [...], ...} o una lista pelada de elementos.
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from lienzo.core.models import Scene
from lienzo.core.version import SCHEMA_VERSION
from lienzo.utils.errors import LienzoIOError, LienzoValidationError


def scene_to_dict(scene: Scene) -> dict[str, Any]:
    return {"schemaVersion": SCHEMA_VERSION, **scene.to_dict()}


def scene_from_data(data: Any) -> Scene:
    """Scene desde JSON ya parseado (dict de escena o lista de elementos)."""
    if isinstance(data, list):
        data = {"elements": data}
    if not isinstance(data, dict):
        raise LienzoValidationError("Escena inválida: raíz no es objeto ni lista JSON")
    version = data.get("schemaVersion", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise LienzoValidationError(
            f"Escena incompatible: schemaVersion={version!r} (se espera {SCHEMA_VERSION})"
        )
    return Scene.from_dict(data)


def dumps_scene(scene: Scene) -> str:
    return json.dumps(scene_to_dict(scene), ensure_ascii=False, indent=2)


def loads_scene(text: str) -> Scene:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LienzoValidationError(
            "Escena inválida (JSON malformado): línea {}, columna {}".format(e.lineno, e.colno)
        ) from e
    return scene_from_data(data)


def save_scene(scene: Scene, path: str | Path) -> Path:
    """Guarda la escena de forma atómica (tmp + replace)."""
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp = p.with_suffix(p.suffix + ".tmp")
        tmp.write_text(dumps_scene(scene), encoding="utf-8")
        tmp.replace(p)
        return p
    except OSError as e:
        raise LienzoIOError("No se pudo guardar escena: {}".format(p)) from e


def load_scene(path: str | Path) -> Scene:
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except OSError as e:
        raise LienzoIOError("No se pudo leer escena: {}".format(p)) from e
    return loads_scene(raw)
