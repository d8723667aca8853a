"""
Item model.

An item is a node of the flow diagram. It carries an opaque identifier and a
role tag; the stage that holds it is tracked by the stage sequence's owner
index, never by the item itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


def _generate_item_id() -> str:
    """Generate a unique item ID using ULID."""
    from ulid import ULID

    return str(ULID())


class ItemRole(Enum):
    """
    Role of an item within the diagram.

    START: The single entry item, held by the Start stage
    END: The single exit item, held by the End stage
    JUNCTION: Aggregation point held by a separator stage
    STAGE: User-visible step held by a workflow stage
    """

    START = "START"
    END = "END"
    JUNCTION = "JUNCTION"
    STAGE = "STAGE"


@dataclass(frozen=True, eq=False)
class Item:
    """
    A node in the workflow diagram.

    Items compare and hash by id only; two items with the same id are the
    same item regardless of role.

    Attributes:
        role: START, END, JUNCTION or STAGE
        id: Unique identifier (ULID unless supplied by the caller)
    """

    role: ItemRole
    id: str = field(default_factory=_generate_item_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Item({self.role.value}, {self.id!r})"

    @property
    def is_junction(self) -> bool:
        return self.role is ItemRole.JUNCTION

    # ========== Factory Methods ==========

    @classmethod
    def create(cls, role: ItemRole, id: str | None = None) -> Item:
        """Create an item, generating an id when none is given."""
        if id is None:
            return cls(role=role)
        return cls(role=role, id=id)

    @classmethod
    def step(cls, id: str | None = None) -> Item:
        """Create a user-visible step item for a workflow stage."""
        return cls.create(ItemRole.STAGE, id)

    @classmethod
    def junction(cls) -> Item:
        """Create a junction item. Only the rewiring engine does this."""
        return cls(role=ItemRole.JUNCTION)

    @classmethod
    def start(cls) -> Item:
        return cls(role=ItemRole.START)

    @classmethod
    def end(cls) -> Item:
        return cls(role=ItemRole.END)
