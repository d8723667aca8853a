"""Connector model: a directed edge between two items."""

from __future__ import annotations

from dataclasses import dataclass

from stagegraph.models.item import Item


@dataclass(frozen=True, eq=False)
class Connector:
    """
    Directed edge from source to target.

    A connector owns neither endpoint. Equality uses the endpoint ids, so a
    connector re-created between the same two items equals the original.
    """

    source: Item
    target: Item

    @property
    def key(self) -> tuple[str, str]:
        """(source id, target id) pair identifying this edge."""
        return (self.source.id, self.target.id)

    def touches(self, item_id: str) -> bool:
        """Check whether either endpoint is the given item."""
        return self.source.id == item_id or self.target.id == item_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Connector):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"Connector({self.source.id!r} -> {self.target.id!r})"
