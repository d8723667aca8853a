"""
Workflow model.

A workflow is the aggregate behind one flow diagram. It owns the stage
sequence and the connector set and is the only entry point for mutations:

- add_item: add a step to an existing workflow stage
- insert_stage_after: open a new workflow stage seeded with one step
- remove_item: remove a step, deleting its stage when it was the last one

Each mutation validates the request first, so a rejected request raises
without touching the diagram. It then changes the structure and hands over
to the rewiring engine to restore the connectors.

Workflows are not thread-safe. A host that shares one between threads must
serialize mutations.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from stagegraph.config import WorkflowConfig
from stagegraph.dag.invariants import verify_invariants
from stagegraph.dag.rewiring import ConnectorRewirer
from stagegraph.dag.sequence import StageSequence
from stagegraph.errors import InvalidTransitionError, NotFoundError, WorkflowError
from stagegraph.logging import workflow_logger
from stagegraph.models.connector import Connector
from stagegraph.models.item import Item, ItemRole
from stagegraph.models.stage import Stage


def _generate_workflow_id() -> str:
    """Generate a unique workflow ID using ULID."""
    from ulid import ULID

    return str(ULID())


@dataclass(eq=False)
class Workflow:
    """
    A directed flow diagram organized into stages.

    A new workflow holds a Start stage, an empty separator and an End stage,
    joined by a single Start -> End connector.

    Attributes:
        id: Unique identifier (ULID), bound into every log line
        config: Runtime settings
    """

    id: str = field(default_factory=_generate_workflow_id)
    config: WorkflowConfig = field(default_factory=WorkflowConfig)
    _sequence: StageSequence = field(init=False, repr=False)
    _rewirer: ConnectorRewirer = field(init=False, repr=False)
    _log: Any = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._sequence = StageSequence(Stage.start(), Stage.end())
        self._rewirer = ConnectorRewirer(self._sequence, self.id)
        self._log = workflow_logger(self.id)
        self._rewirer.restore_around(self._sequence.start)
        self._verify()

    # ========== Queries ==========

    def get_observable_stages(self) -> list[Stage]:
        """Stages in order, separators excluded."""
        return self._sequence.observable_stages()

    def get_all_stages(self) -> list[Stage]:
        """The full internal sequence, separators included."""
        return self._sequence.all_stages()

    def get_widest_stage(self) -> Stage:
        """The stage with the most items, first one on ties."""
        return self._sequence.widest_stage()

    def get_all_items(self) -> list[Item]:
        """Every item in stage order, then in stage-internal order."""
        return self._sequence.all_items()

    def get_connectors(self) -> list[Connector]:
        return self._rewirer.connectors

    def get_previous_stage(self, stage: Stage, distance: int = 1) -> Stage:
        """
        Walk back through the internal sequence.

        Distance 1 reaches the separator before the stage, distance 2 the
        previous substantive stage.

        Raises:
            NotFoundError: If the stage is not part of this workflow
            OutOfRangeError: If the walk leaves the sequence
        """
        with self._request("get_previous_stage", distance=distance):
            return self._sequence.previous_stage(stage, distance)

    def get_next_stage(self, stage: Stage, distance: int = 1) -> Stage:
        """
        Walk forward through the internal sequence.

        Raises:
            NotFoundError: If the stage is not part of this workflow
            OutOfRangeError: If the walk leaves the sequence
        """
        with self._request("get_next_stage", distance=distance):
            return self._sequence.next_stage(stage, distance)

    def get_stage(self, index: int) -> Stage:
        """
        The stage at an observable index (Start is 0, End is last).

        Raises:
            NotFoundError: If no stage has that index
        """
        with self._request("get_stage", stage_index=index):
            return self._sequence.stage_at(index)

    def find_item(self, item_id: str) -> Item:
        """
        Look up an item by id.

        Raises:
            NotFoundError: If no stage holds the item
        """
        with self._request("find_item", item_id=item_id):
            stage = self._sequence.stage_of(item_id)
            return next(item for item in stage.items if item.id == item_id)

    def stage_of(self, item: Item) -> Stage:
        """
        The stage holding an item.

        Raises:
            NotFoundError: If no stage holds the item
        """
        with self._request("stage_of", item_id=item.id):
            return self._sequence.stage_of(item.id)

    @property
    def start_item(self) -> Item:
        return self._sequence.start.items[0]

    @property
    def end_item(self) -> Item:
        return self._sequence.end.items[0]

    # ========== Mutations ==========

    def add_item(self, index: int, item: Item) -> None:
        """
        Add a step to the workflow stage at an observable index.

        Raises:
            NotFoundError: If no stage has that index
            InvalidTransitionError: If the stage is Start or End, or the item
                is not a new step item
        """
        with self._request("add_item", stage_index=index, item_id=item.id):
            stage = self._sequence.stage_at(index)
        self.add_item_to_stage(stage, item)

    def add_item_to_stage(self, stage: Stage, item: Item) -> None:
        """Add a step to a workflow stage given by reference."""
        with self._request("add_item", stage_id=stage.id, item_id=item.id):
            self._sequence.position_of(stage)
            if stage.is_terminal:
                raise InvalidTransitionError("Cannot add items to the start or end stage")
            if stage.is_separator:
                raise InvalidTransitionError("Junction items are managed by the workflow")
            self._check_new_step(item)
            stage.check_can_add(item)

        stage.add_item(item)
        self._sequence.register_item(item, stage)
        self._rewirer.after_item_added(stage, item)

        self._log.info("item_added", stage_id=stage.id, item_id=item.id, stage_items=stage.item_count)
        self._verify()

    def insert_stage_after(self, index: int, item: Item) -> Stage:
        """
        Insert a new workflow stage after the stage at an observable index.

        The new stage takes observable index ``index + 1`` and starts with
        ``item`` as its only step.

        Returns:
            The new workflow stage

        Raises:
            NotFoundError: If no stage has that index
            InvalidTransitionError: If the stage is End, or the item is not a
                new step item
        """
        with self._request("insert_stage_after", stage_index=index, item_id=item.id):
            stage = self._sequence.stage_at(index)
        return self.insert_stage_after_stage(stage, item)

    def insert_stage_after_stage(self, stage: Stage, item: Item) -> Stage:
        """Insert a new workflow stage after a stage given by reference."""
        with self._request("insert_stage_after", stage_id=stage.id, item_id=item.id):
            self._sequence.check_can_insert_after(stage)
            self._check_new_step(item)

        new_stage = self._sequence.insert_workflow_stage_after(stage)
        new_stage.add_item(item)
        self._sequence.register_item(item, new_stage)
        self._rewirer.after_stage_inserted(new_stage)

        self._log.info(
            "stage_inserted",
            after_stage_id=stage.id,
            stage_id=new_stage.id,
            item_id=item.id,
            stages=self._sequence.substantive_count(),
        )
        self._verify()
        return new_stage

    def remove_item(self, index: int, item: Item) -> None:
        """
        Remove a step from the workflow stage at an observable index.

        Removing the last step deletes the stage and its trailing separator.

        Raises:
            NotFoundError: If no stage has that index, or the item is not in it
            InvalidTransitionError: If the stage is Start or End
        """
        with self._request("remove_item", stage_index=index, item_id=item.id):
            stage = self._sequence.stage_at(index)
        self.remove_item_from_stage(stage, item)

    def remove_item_from_stage(self, stage: Stage, item: Item) -> None:
        """Remove a step from a workflow stage given by reference."""
        with self._request("remove_item", stage_id=stage.id, item_id=item.id):
            self._sequence.position_of(stage)
            if stage.is_terminal:
                raise InvalidTransitionError("Cannot remove the start or end item")
            if stage.is_separator:
                raise InvalidTransitionError("Junction items are managed by the workflow")
            if not stage.contains(item.id):
                raise NotFoundError(f"Item {item.id} is not in stage {stage.id}")

            last_item = stage.item_count == 1

        if last_item:
            self._remove_stage(stage, item)
            return

        stage.remove_item(item)
        self._sequence.unregister_item(item)
        self._rewirer.after_item_removed(stage, item)

        self._log.info("item_removed", stage_id=stage.id, item_id=item.id, stage_items=stage.item_count)
        self._verify()

    def _remove_stage(self, stage: Stage, item: Item) -> None:
        """Delete a stage whose last item is being removed, with its trailing separator."""
        previous = self._sequence.previous_stage(stage, 2)
        stage.remove_item(item)
        self._sequence.unregister_item(item)
        _, trailing = self._sequence.delete_workflow_stage(stage)
        self._rewirer.after_stage_deleted(previous, [item, *trailing.items])

        self._log.info(
            "stage_removed",
            stage_id=stage.id,
            item_id=item.id,
            stages=self._sequence.substantive_count(),
        )
        self._verify()

    # ========== Helpers ==========

    def _check_new_step(self, item: Item) -> None:
        if item.role is not ItemRole.STAGE:
            raise InvalidTransitionError(f"Only {ItemRole.STAGE.value} items can be added, got {item.role.value}")
        if self._sequence.is_owned(item.id):
            raise InvalidTransitionError(f"Item {item.id} is already part of the workflow")

    @contextmanager
    def _request(self, operation: str, **fields: Any) -> Iterator[None]:
        """Tag rejected requests with this workflow and log them."""
        try:
            yield
        except WorkflowError as e:
            if e.workflow_id is None:
                e.workflow_id = self.id
            self._log.warning(
                "request_rejected",
                operation=operation,
                error=type(e).__name__,
                reason=str(e),
                **fields,
            )
            raise

    def _verify(self) -> None:
        if self.config.verify_invariants:
            verify_invariants(self._sequence.all_stages(), self._rewirer.connectors, self.id)
