"""Geometry helpers.

Plain floats, tuples and frozen dataclasses; no dependencies beyond the
stdlib. Nothing here knows about elements, the store or Qt: `lienzo.core`
composes these functions into element operations.
"""

from __future__ import annotations
