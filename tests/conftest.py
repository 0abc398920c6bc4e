from __future__ import annotations

import itertools

import pytest

from lienzo.core.models import Element, ElementKind, Style


def make_rect(eid: str, x: float = 0, y: float = 0, w: float = 10, h: float = 10, **kw) -> Element:
    return Element(id=eid, kind=kw.pop("kind", ElementKind.RECTANGLE), x=x, y=y, width=w, height=h, **kw)


@pytest.fixture
def rect():
    return make_rect


@pytest.fixture
def id_factory():
    """Ids deterministas: prefix_1, prefix_2, ..."""
    counter = itertools.count(1)

    def _make(prefix: str = "el") -> str:
        return f"{prefix}_{next(counter)}"

    return _make


@pytest.fixture
def red_style():
    return Style(fill="#ff0000", stroke="#000000", stroke_width=2.0)
