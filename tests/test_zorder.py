"""Orden z: frente/fondo y un paso."""
from __future__ import annotations

import pytest

from lienzo.core.zorder import (
    bring_forward,
    bring_to_front,
    can_bring_forward,
    can_send_backward,
    send_backward,
    send_to_back,
    z_index,
)


@pytest.fixture
def abcd(rect):
    return [rect("A"), rect("B"), rect("C"), rect("D")]


def ids(elements):
    return [el.id for el in elements]


class TestFrontBack:
    def test_bring_to_front_partition(self, rect):
        els = [rect("A"), rect("B"), rect("C")]
        assert ids(bring_to_front(els, {"A", "C"})) == ["B", "A", "C"]

    def test_send_to_back_partition(self, abcd):
        assert ids(send_to_back(abcd, {"C", "B"})) == ["B", "C", "A", "D"]

    def test_empty_selection_is_noop(self, abcd):
        assert ids(bring_to_front(abcd, set())) == ["A", "B", "C", "D"]
        assert ids(send_to_back(abcd, {"ghost"})) == ["A", "B", "C", "D"]


class TestStep:
    def test_bring_forward(self, abcd):
        assert ids(bring_forward(abcd, {"B"})) == ["A", "C", "B", "D"]

    def test_bring_forward_at_top(self, abcd):
        assert ids(bring_forward(abcd, {"D"})) == ["A", "B", "C", "D"]

    def test_send_backward(self, abcd):
        assert ids(send_backward(abcd, {"C"})) == ["A", "C", "B", "D"]

    def test_send_backward_at_bottom(self, abcd):
        assert ids(send_backward(abcd, {"A"})) == ["A", "B", "C", "D"]

    def test_multi_selection_moves_block(self, abcd):
        assert ids(bring_forward(abcd, {"A", "B"})) == ["C", "A", "B", "D"]
        assert ids(send_backward(abcd, {"C", "D"})) == ["A", "C", "D", "B"]

    def test_input_not_mutated(self, abcd):
        before = list(abcd)
        bring_forward(abcd, {"A"})
        assert abcd == before


class TestQueries:
    def test_can_flags(self, abcd):
        assert can_bring_forward(abcd, {"A"})
        assert not can_bring_forward(abcd, {"D"})
        assert can_send_backward(abcd, {"D"})
        assert not can_send_backward(abcd, {"A"})
        assert not can_bring_forward(abcd, set())

    def test_z_index(self, abcd):
        assert z_index(abcd, "C") == 2
        assert z_index(abcd, "zz") == -1
