"""
Stage sequence management.

The internal sequence always alternates substantive stages (Start, Workflow,
End) with separator stages:

    Start, Sep, Workflow, Sep, ..., Workflow, Sep, End

so for k substantive stages it holds 2k - 1 stages. Callers address stages by
observable index, which skips separators; observable index n lives at
internal position 2n. Every insert and delete keeps this alternation.

The sequence also keeps the owner index (item id -> stage id) that the
rewiring engine uses to tell which stage an item belongs to.
"""

from __future__ import annotations

from stagegraph.errors import InvalidTransitionError, NotFoundError, OutOfRangeError
from stagegraph.models.item import Item
from stagegraph.models.stage import Stage, StageRole


def internal_index(observable_index: int) -> int:
    """Map an observable stage index to its internal sequence position.

    Separators occupy every odd internal position, so the substantive stage
    with observable index n sits at 2n.
    """
    return observable_index * 2


def observable_index(internal_position: int) -> int:
    """Inverse of internal_index() for substantive stage positions."""
    if internal_position % 2:
        raise ValueError(f"Internal position {internal_position} holds a separator")
    return internal_position // 2


class StageSequence:
    """
    Ordered stages of one workflow, with navigation and an owner index.

    Structural methods here only move stages around; restoring connectors
    afterwards is the rewiring engine's job.
    """

    def __init__(self, start: Stage, end: Stage) -> None:
        self._stages: list[Stage] = [start, Stage.separator(), end]
        self._owners: dict[str, str] = {}
        for stage in self._stages:
            for item in stage.items:
                self._owners[item.id] = stage.id

    def __len__(self) -> int:
        return len(self._stages)

    # ========== Queries ==========

    @property
    def start(self) -> Stage:
        return self._stages[0]

    @property
    def end(self) -> Stage:
        return self._stages[-1]

    def all_stages(self) -> list[Stage]:
        """All stages including separators, in order."""
        return list(self._stages)

    def observable_stages(self) -> list[Stage]:
        """Stages visible to callers, separators excluded."""
        return [stage for stage in self._stages if not stage.is_separator]

    def substantive_count(self) -> int:
        return (len(self._stages) + 1) // 2

    def stage_at(self, index: int) -> Stage:
        """
        Get the stage at an observable index.

        Raises:
            NotFoundError: If no stage corresponds to the index
        """
        if index < 0 or index >= self.substantive_count():
            raise NotFoundError(f"Stage {index} does not exist")
        return self._stages[internal_index(index)]

    def at_position(self, position: int) -> Stage:
        """Get the stage at an internal position (separators included)."""
        return self._stages[position]

    def position_of(self, stage: Stage) -> int:
        """
        Internal position of a stage, compared by identity.

        Raises:
            NotFoundError: If the stage is not part of this sequence
        """
        for position, candidate in enumerate(self._stages):
            if candidate is stage:
                return position
        raise NotFoundError(f"Stage {stage.id} is not part of the workflow")

    def contains(self, stage: Stage) -> bool:
        return any(candidate is stage for candidate in self._stages)

    def widest_stage(self) -> Stage:
        """The stage with the most items; ties go to the first occurrence."""
        return max(self._stages, key=lambda stage: stage.item_count)

    def all_items(self) -> list[Item]:
        """Every item, in stage order then stage-internal order."""
        return [item for stage in self._stages for item in stage.items]

    # ========== Navigation ==========

    def previous_stage(self, stage: Stage, distance: int = 1) -> Stage:
        """
        Walk backwards through the internal sequence.

        Distance 1 lands on the adjacent separator, distance 2 on the previous
        substantive stage.

        Raises:
            NotFoundError: If the stage is not part of the sequence
            OutOfRangeError: If the walk would leave the sequence
        """
        position = self.position_of(stage)
        if distance < 0 or position - distance < 0:
            raise OutOfRangeError(f"No stage {distance} position(s) before stage {stage.id}")
        return self._stages[position - distance]

    def next_stage(self, stage: Stage, distance: int = 1) -> Stage:
        """
        Walk forwards through the internal sequence.

        Raises:
            NotFoundError: If the stage is not part of the sequence
            OutOfRangeError: If the walk would leave the sequence
        """
        position = self.position_of(stage)
        if distance < 0 or position + distance > len(self._stages) - 1:
            raise OutOfRangeError(f"No stage {distance} position(s) after stage {stage.id}")
        return self._stages[position + distance]

    # ========== Owner Index ==========

    def register_item(self, item: Item, stage: Stage) -> None:
        self._owners[item.id] = stage.id

    def unregister_item(self, item: Item) -> None:
        self._owners.pop(item.id, None)

    def owner_id(self, item_id: str) -> str | None:
        """ID of the stage holding the item, or None if no stage holds it."""
        return self._owners.get(item_id)

    def stage_of(self, item_id: str) -> Stage:
        """
        The stage holding an item.

        Raises:
            NotFoundError: If no stage holds the item
        """
        owner = self._owners.get(item_id)
        if owner is not None:
            for stage in self._stages:
                if stage.id == owner:
                    return stage
        raise NotFoundError(f"Item {item_id} is not part of the workflow")

    def is_owned(self, item_id: str) -> bool:
        return item_id in self._owners

    # ========== Structural Changes ==========

    def check_can_insert_after(self, stage: Stage) -> int:
        """
        Validate an insertion point and return its internal position.

        Raises:
            NotFoundError: If the stage is not part of the sequence
            InvalidTransitionError: If the stage is End or a separator
        """
        position = self.position_of(stage)
        if stage.role is StageRole.END:
            raise InvalidTransitionError("Cannot insert a stage after the end stage")
        if stage.is_separator:
            raise InvalidTransitionError("Cannot insert a stage after a separator stage")
        return position

    def insert_workflow_stage_after(self, stage: Stage) -> Stage:
        """
        Insert a separator and then an empty workflow stage right after stage.

        The separator goes in first so the alternation holds: the reference
        stage keeps its old trailing separator on the far side of the new
        stage.

        Returns:
            The new, empty workflow stage
        """
        position = self.check_can_insert_after(stage)
        workflow_stage = Stage.workflow()
        self._stages[position + 1 : position + 1] = [Stage.separator(), workflow_stage]
        return workflow_stage

    def check_can_delete(self, stage: Stage) -> int:
        """
        Validate a stage deletion and return the stage's internal position.

        Raises:
            NotFoundError: If the stage is not part of the sequence
            InvalidTransitionError: If the stage is Start, End or a separator
        """
        position = self.position_of(stage)
        if stage.is_terminal:
            raise InvalidTransitionError("Cannot remove the start or end stage")
        if stage.is_separator:
            raise InvalidTransitionError("Cannot remove a separator stage directly")
        return position

    def delete_workflow_stage(self, stage: Stage) -> tuple[Stage, Stage]:
        """
        Remove a workflow stage together with its trailing separator.

        Any items still held by either stage are dropped from the owner index.

        Returns:
            (removed stage, removed trailing separator)
        """
        position = self.check_can_delete(stage)
        removed, trailing = self._stages[position], self._stages[position + 1]
        del self._stages[position : position + 2]
        for item in (*removed.items, *trailing.items):
            self.unregister_item(item)
        return removed, trailing
