"""
Topological ordering of diagram items.

Connectors are the DAG edges. Layout collaborators use the ordering and the
layering to place items; the invariant checker uses it to prove the connector
graph is acyclic.
"""

from __future__ import annotations

from collections.abc import Iterable

from stagegraph.errors import InvariantViolationError
from stagegraph.models.connector import Connector
from stagegraph.models.item import Item


class CircularConnectionError(InvariantViolationError):
    """
    Raised when the connectors form a cycle.

    The engine only ever links an item to a later stage, so a cycle means
    the connector set was corrupted.
    """

    def __init__(self, message: str, items: list[Item] | None = None):
        super().__init__(message, violations=[message])
        self.items = items or []


def _predecessors(items: Iterable[Item], connectors: Iterable[Connector]) -> dict[str, set[str]]:
    requisites: dict[str, set[str]] = {item.id: set() for item in items}
    for connector in connectors:
        if connector.target.id in requisites and connector.source.id in requisites:
            requisites[connector.target.id].add(connector.source.id)
    return requisites


def topological_sort(items: list[Item], connectors: list[Connector]) -> list[Item]:
    """
    Sort items so that every connector points forward.

    The algorithm:

    1. Starts with all items unsorted
    2. Finds items whose predecessors are all in the "processed" set
    3. Adds those items to the result, in their original relative order
    4. Repeats until all items are sorted
    5. Raises CircularConnectionError if no progress can be made

    Connectors with an endpoint outside ``items`` are ignored.

    Raises:
        CircularConnectionError: If the connectors form a cycle
    """
    requisites = _predecessors(items, connectors)
    unsorted: list[Item] = list(items)
    sorted_items: list[Item] = []
    processed: set[str] = set()

    while unsorted:
        sortable = [item for item in unsorted if processed.issuperset(requisites[item.id])]

        if not sortable:
            relationships = ", ".join(f"{sorted(requisites[item.id])}->{item.id}" for item in unsorted)
            raise CircularConnectionError(
                f"Circular connectors found: {relationships}",
                items=unsorted,
            )

        for item in sortable:
            unsorted.remove(item)
            processed.add(item.id)
            sorted_items.append(item)

    return sorted_items


def find_initial_items(items: list[Item], connectors: list[Connector]) -> list[Item]:
    """Items with no incoming connector."""
    targets = {connector.target.id for connector in connectors}
    return [item for item in items if item.id not in targets]


def find_terminal_items(items: list[Item], connectors: list[Connector]) -> list[Item]:
    """Items with no outgoing connector."""
    sources = {connector.source.id for connector in connectors}
    return [item for item in items if item.id not in sources]


def get_item_layers(items: list[Item], connectors: list[Connector]) -> list[list[Item]]:
    """
    Group items into layers.

    Each layer depends only on items in previous layers. Junction items get
    a layer of their own between the stages they join.

    Example:
        # start -> [a1, a2] -> J -> [b1, b2] -> end
        # Layer 0: [start]
        # Layer 1: [a1, a2]
        # Layer 2: [J]
        # Layer 3: [b1, b2]
        # Layer 4: [end]
    """
    requisites = _predecessors(items, connectors)
    unsorted: list[Item] = list(items)
    layers: list[list[Item]] = []
    processed: set[str] = set()

    while unsorted:
        layer = [item for item in unsorted if processed.issuperset(requisites[item.id])]

        if not layer:
            # Only reachable with a cycle; topological_sort reports it
            break

        layers.append(layer)

        for item in layer:
            unsorted.remove(item)
            processed.add(item.id)

    return layers
