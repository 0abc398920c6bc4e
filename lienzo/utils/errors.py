# File: lienzo/utils/errors.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Errores tipados del motor.
# Notes: El núcleo no lanza en operaciones geométricas (clamp / no-op); estos errores son de borde.
from __future__ import annotations


class LienzoError(Exception):
    """Error base del proyecto."""


class LienzoValidationError(LienzoError):
    """Error de validación (input externo / archivo / estructura)."""


class LienzoSchemaError(LienzoValidationError):
    """Registro de intercambio mal formado (elemento, path, viewport)."""


class LienzoIOError(LienzoError):
    """Error de E/S (lectura/escritura)."""


class LienzoStateError(LienzoError):
    """Uso inválido de una máquina de estados (p.ej. drag ya activo)."""
