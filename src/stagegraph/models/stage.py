"""
Stage model.

A stage (level) is an ordered holder of items. Its role decides which items
it may hold and how many:

- START: exactly one START item
- END: exactly one END item
- SEPARATOR: zero or one JUNCTION item
- WORKFLOW: one or more STAGE items
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from stagegraph.errors import InvalidTransitionError, NotFoundError
from stagegraph.models.item import Item, ItemRole


def _generate_stage_id() -> str:
    """Generate a unique stage ID using ULID."""
    from ulid import ULID

    return str(ULID())


class StageRole(Enum):
    """
    Role of a stage in the internal sequence.

    START: First stage, holds the Start item
    END: Last stage, holds the End item
    SEPARATOR: Sits between two substantive stages, may hold a Junction
    WORKFLOW: User-visible stage holding step items
    """

    START = "START"
    END = "END"
    SEPARATOR = "SEPARATOR"
    WORKFLOW = "WORKFLOW"


# Item role accepted by each stage role
_ACCEPTED_ITEM_ROLE: dict[StageRole, ItemRole] = {
    StageRole.START: ItemRole.START,
    StageRole.END: ItemRole.END,
    StageRole.SEPARATOR: ItemRole.JUNCTION,
    StageRole.WORKFLOW: ItemRole.STAGE,
}

# Capacity per stage role; None means unbounded
_CAPACITY: dict[StageRole, int | None] = {
    StageRole.START: 1,
    StageRole.END: 1,
    StageRole.SEPARATOR: 1,
    StageRole.WORKFLOW: None,
}


@dataclass(eq=False)
class Stage:
    """
    An ordered, role-constrained holder of items.

    Stages compare by identity. Mutating methods validate before changing
    anything, so a rejected call leaves the stage as it was.

    Attributes:
        role: START, END, SEPARATOR or WORKFLOW
        id: Unique identifier (ULID)
    """

    role: StageRole
    id: str = field(default_factory=_generate_stage_id)
    _items: list[Item] = field(default_factory=list, repr=False)

    def __repr__(self) -> str:
        return f"Stage({self.role.value}, items={[i.id for i in self._items]})"

    # ========== Queries ==========

    @property
    def items(self) -> tuple[Item, ...]:
        """Items in stage order."""
        return tuple(self._items)

    @property
    def item_count(self) -> int:
        return len(self._items)

    @property
    def has_items(self) -> bool:
        return bool(self._items)

    @property
    def is_separator(self) -> bool:
        return self.role is StageRole.SEPARATOR

    @property
    def is_terminal(self) -> bool:
        """Check if this is the Start or End stage."""
        return self.role in (StageRole.START, StageRole.END)

    @property
    def junction(self) -> Item | None:
        """The junction item of a separator stage, if any."""
        if self.is_separator and self._items:
            return self._items[0]
        return None

    def contains(self, item_id: str) -> bool:
        return any(item.id == item_id for item in self._items)

    # ========== Mutation ==========

    def check_can_add(self, item: Item) -> None:
        """
        Validate that item may be added to this stage.

        Raises:
            InvalidTransitionError: If the role does not fit or the stage is full
        """
        expected = _ACCEPTED_ITEM_ROLE[self.role]
        if item.role is not expected:
            raise InvalidTransitionError(
                f"{self.role.value} stage only accepts {expected.value} items, got {item.role.value}"
            )

        capacity = _CAPACITY[self.role]
        if capacity is not None and len(self._items) >= capacity:
            raise InvalidTransitionError(f"{self.role.value} stage cannot hold more than {capacity} item(s)")

        if self.contains(item.id):
            raise InvalidTransitionError(f"Item {item.id} is already in this stage")

    def add_item(self, item: Item) -> None:
        """Append item to the stage."""
        self.check_can_add(item)
        self._items.append(item)

    def remove_item(self, item: Item) -> None:
        """
        Remove item from the stage.

        Raises:
            NotFoundError: If the item is not held by this stage
        """
        for index, existing in enumerate(self._items):
            if existing.id == item.id:
                del self._items[index]
                return
        raise NotFoundError(f"Item {item.id} is not in this {self.role.value} stage")

    # ========== Factory Methods ==========

    @classmethod
    def start(cls, item: Item | None = None) -> Stage:
        stage = cls(role=StageRole.START)
        stage.add_item(item or Item.start())
        return stage

    @classmethod
    def end(cls, item: Item | None = None) -> Stage:
        stage = cls(role=StageRole.END)
        stage.add_item(item or Item.end())
        return stage

    @classmethod
    def separator(cls) -> Stage:
        return cls(role=StageRole.SEPARATOR)

    @classmethod
    def workflow(cls) -> Stage:
        """Create an empty workflow stage. The caller seeds it with its first item."""
        return cls(role=StageRole.WORKFLOW)
