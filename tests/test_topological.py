"""Tests for topological ordering of diagram items."""

import pytest

from stagegraph.dag.topological import (
    CircularConnectionError,
    find_initial_items,
    find_terminal_items,
    get_item_layers,
    topological_sort,
)
from stagegraph.errors import InvariantViolationError
from stagegraph.models import Connector, Item
from stagegraph.workflow import Workflow
from tests.conftest import build, label


def link(*pairs: tuple[Item, Item]) -> list[Connector]:
    return [Connector(source, target) for source, target in pairs]


def test_linear_chain() -> None:
    """Test linear chain: A -> B -> C"""
    a, b, c = Item.step("a"), Item.step("b"), Item.step("c")

    sorted_items = topological_sort([c, b, a], link((a, b), (b, c)))

    assert [item.id for item in sorted_items] == ["a", "b", "c"]


def test_parallel_branches() -> None:
    """Test parallel branches: A -> [B, C] -> D"""
    a, b, c, d = (Item.step(name) for name in "abcd")

    sorted_items = topological_sort([d, c, b, a], link((a, b), (a, c), (b, d), (c, d)))

    ids = [item.id for item in sorted_items]
    assert ids[0] == "a"
    assert ids[-1] == "d"
    # Independent items keep their relative input order
    assert ids[1:3] == ["c", "b"]


def test_connectors_to_unknown_items_are_ignored() -> None:
    a, b = Item.step("a"), Item.step("b")

    sorted_items = topological_sort([a, b], link((a, b), (Item.step("x"), a)))

    assert [item.id for item in sorted_items] == ["a", "b"]


def test_cycle_is_detected() -> None:
    """Test cycle: A -> B -> C -> A"""
    a, b, c = Item.step("a"), Item.step("b"), Item.step("c")

    with pytest.raises(CircularConnectionError) as exc_info:
        topological_sort([a, b, c], link((a, b), (b, c), (c, a)))

    assert {item.id for item in exc_info.value.items} == {"a", "b", "c"}
    assert isinstance(exc_info.value, InvariantViolationError)


def test_self_loop_is_a_cycle() -> None:
    a = Item.step("a")

    with pytest.raises(CircularConnectionError):
        topological_sort([a], link((a, a)))


def test_initial_and_terminal_items() -> None:
    a, b, c, d = (Item.step(name) for name in "abcd")
    connectors = link((a, c), (b, c))

    assert find_initial_items([a, b, c, d], connectors) == [a, b, d]
    assert find_terminal_items([a, b, c, d], connectors) == [c, d]


def test_workflow_layers(workflow: Workflow) -> None:
    """Junctions get a layer of their own between the stages they join."""
    build(workflow, ["a1", "a2"], ["b1", "b2"])

    layers = get_item_layers(workflow.get_all_items(), workflow.get_connectors())

    assert [[label(item) for item in layer] for layer in layers] == [
        ["start"],
        ["a1", "a2"],
        ["J"],
        ["b1", "b2"],
        ["end"],
    ]


def test_layers_stop_at_cycle() -> None:
    a, b, c = Item.step("a"), Item.step("b"), Item.step("c")

    layers = get_item_layers([a, b, c], link((b, c), (c, b)))

    assert layers == [[a]]
