"""
Connector rewiring.

After every structural change the engine restores the junction invariant on
the boundaries next to the changed stage. For substantive stages A and B with
separator S between them:

- S holds a junction J iff |A| > 1 and |B| > 1
- with J, only A -> J and J -> B connectors cross the boundary
- without J, connectors run directly: 1:1, 1:n fan-out or n:1 fan-in

Each boundary is reconciled against the connector set it should have.
Connectors that already match stay where they are. Stale ones are redirected
in place onto a missing edge, preferring one that shares an endpoint, so a
connector re-anchored onto a new junction keeps its position in the list.
Stale connectors left over are dropped, missing edges left over are appended.
"""

from __future__ import annotations

from typing import Any

from stagegraph.dag.sequence import StageSequence
from stagegraph.logging import rewiring_logger
from stagegraph.models.connector import Connector
from stagegraph.models.item import Item
from stagegraph.models.stage import Stage


class ConnectorRewirer:
    """
    Owns the connector set of one workflow and keeps it consistent.

    Only this class creates or deletes connectors and junction items.
    """

    def __init__(self, sequence: StageSequence, workflow_id: str) -> None:
        self._sequence = sequence
        self._connectors: list[Connector] = []
        self._log: Any = rewiring_logger(workflow_id)

    @property
    def connectors(self) -> list[Connector]:
        return list(self._connectors)

    # ========== Entry Points ==========

    def after_item_added(self, stage: Stage, item: Item) -> None:
        """Restore both boundaries of a stage that gained an item."""
        self.restore_around(stage)

    def after_stage_inserted(self, stage: Stage) -> None:
        """
        Splice a freshly inserted single-item stage into its adjacency.

        Connectors that ran from the previous neighbor straight to the next one
        are redirected onto the new item; the next neighbor's side is relinked
        and its junction, if any, rechecked.
        """
        self.restore_around(stage)

    def after_item_removed(self, stage: Stage, item: Item) -> None:
        """Drop the removed item's own connectors, then restore the stage's boundaries."""
        self._drop_touching(item.id)
        self.restore_around(stage)

    def after_stage_deleted(self, previous: Stage, removed_items: list[Item]) -> None:
        """
        Relink the two stages made adjacent by a deletion.

        Args:
            previous: Substantive stage right before the deleted one
            removed_items: Items of the deleted stage and of its trailing separator
        """
        for item in removed_items:
            self._drop_touching(item.id)
        self._reconcile_boundary(previous)
        self._prune()

    def restore_around(self, stage: Stage) -> None:
        """Reconcile the boundary before and the boundary after a substantive stage."""
        position = self._sequence.position_of(stage)
        if position >= 2:
            self._reconcile_boundary(self._sequence.at_position(position - 2))
        if position <= len(self._sequence) - 3:
            self._reconcile_boundary(stage)
        self._prune()

    # ========== Boundary Reconciliation ==========

    def _reconcile_boundary(self, left: Stage) -> None:
        separator = self._sequence.next_stage(left)
        right = self._sequence.next_stage(left, 2)
        junction = self._sync_junction(left, separator, right)
        desired = self._desired_edges(left, junction, right)

        positions = {stage.id: position for position, stage in enumerate(self._sequence.all_stages())}
        left_position = positions[left.id]
        desired_keys = {connector.key for connector in desired}

        kept: set[tuple[str, str]] = set()
        stale: list[int] = []
        for index, connector in enumerate(self._connectors):
            source_position = self._position(connector.source, positions)
            target_position = self._position(connector.target, positions)
            if source_position not in (left_position, left_position + 1):
                continue
            if target_position is None or target_position <= source_position:
                continue
            # Every connector leaving this side belongs to this boundary, even
            # one that used to skip over a stage inserted since.
            if connector.key in desired_keys and connector.key not in kept:
                kept.add(connector.key)
            else:
                stale.append(index)

        missing = [connector for connector in desired if connector.key not in kept]
        if not stale and not missing:
            return

        redirects = self._pair_redirects([self._connectors[index] for index in stale], missing)
        replaced = dict(zip(stale, redirects))
        rebuilt: list[Connector] = []
        for index, connector in enumerate(self._connectors):
            replacement = replaced[index] if index in replaced else connector
            if replacement is not None:
                rebuilt.append(replacement)
        used = {connector.key for connector in redirects if connector is not None}
        appended = [connector for connector in missing if connector.key not in used]
        rebuilt.extend(appended)
        self._connectors = rebuilt

        redirected = len(used)
        self._log.debug(
            "connectors_rewired",
            left_stage=left.id,
            right_stage=right.id,
            junction=junction.id if junction else None,
            redirected=redirected,
            removed=len(stale) - redirected,
            added=len(appended),
        )

    def _sync_junction(self, left: Stage, separator: Stage, right: Stage) -> Item | None:
        """Create or delete the separator's junction so it matches both neighbors' widths."""
        needs_junction = left.item_count > 1 and right.item_count > 1
        junction = separator.junction

        if needs_junction and junction is None:
            junction = Item.junction()
            separator.add_item(junction)
            self._sequence.register_item(junction, separator)
            self._log.debug("junction_created", separator_stage=separator.id, junction=junction.id)
        elif not needs_junction and junction is not None:
            separator.remove_item(junction)
            self._sequence.unregister_item(junction)
            self._drop_touching(junction.id)
            self._log.debug("junction_removed", separator_stage=separator.id, junction=junction.id)
            junction = None

        return junction

    @staticmethod
    def _desired_edges(left: Stage, junction: Item | None, right: Stage) -> list[Connector]:
        if junction is not None:
            return [Connector(item, junction) for item in left.items] + [
                Connector(junction, item) for item in right.items
            ]
        return [Connector(source, target) for source in left.items for target in right.items]

    @staticmethod
    def _pair_redirects(stale: list[Connector], missing: list[Connector]) -> list[Connector | None]:
        """
        Choose, for each stale connector, the missing edge it is redirected to.

        An edge sharing the stale connector's source or target is preferred.
        None means the stale connector is dropped.
        """
        available = list(missing)
        result: list[Connector | None] = []
        for connector in stale:
            if not available:
                result.append(None)
                continue
            choice = next(
                (
                    candidate
                    for candidate in available
                    if candidate.source.id == connector.source.id or candidate.target.id == connector.target.id
                ),
                available[0],
            )
            available.remove(choice)
            result.append(choice)
        return result

    # ========== Cleanup ==========

    def _position(self, item: Item, positions: dict[str, int]) -> int | None:
        owner = self._sequence.owner_id(item.id)
        if owner is None:
            return None
        return positions.get(owner)

    def _drop_touching(self, item_id: str) -> None:
        """Remove every connector with the item at either end."""
        before = len(self._connectors)
        self._connectors = [connector for connector in self._connectors if not connector.touches(item_id)]
        if len(self._connectors) != before:
            self._log.debug("connectors_dropped", item=item_id, count=before - len(self._connectors))

    def _prune(self) -> None:
        """
        Drop connectors that cannot be part of a consistent graph.

        A connector must join owned items at legal hops: substantive stage to
        its trailing separator or to the next substantive stage, or separator
        to the next substantive stage. Duplicates of an earlier connector are
        dropped as well.
        """
        positions = {stage.id: position for position, stage in enumerate(self._sequence.all_stages())}
        seen: set[tuple[str, str]] = set()
        survivors: list[Connector] = []
        for connector in self._connectors:
            source = self._position(connector.source, positions)
            target = self._position(connector.target, positions)
            if source is None or target is None or connector.key in seen:
                continue
            hop = target - source
            if (source % 2 == 0 and hop in (1, 2)) or (source % 2 == 1 and hop == 1):
                seen.add(connector.key)
                survivors.append(connector)

        if len(survivors) != len(self._connectors):
            self._log.debug("stale_connectors_pruned", count=len(self._connectors) - len(survivors))
            self._connectors = survivors
