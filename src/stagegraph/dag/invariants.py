"""
Structural invariant checks.

check_invariants() describes every inconsistency it finds; verify_invariants()
raises InvariantViolationError when there is any. Workflows run the latter
after each mutation when WorkflowConfig.verify_invariants is set, and the
test suite runs it everywhere.
"""

from __future__ import annotations

from collections import Counter

from stagegraph.dag.topological import (
    CircularConnectionError,
    find_initial_items,
    find_terminal_items,
    topological_sort,
)
from stagegraph.errors import InvariantViolationError
from stagegraph.models.connector import Connector
from stagegraph.models.item import ItemRole
from stagegraph.models.stage import Stage, StageRole


def _expected_role(position: int, length: int) -> StageRole:
    if position == 0:
        return StageRole.START
    if position == length - 1:
        return StageRole.END
    if position % 2:
        return StageRole.SEPARATOR
    return StageRole.WORKFLOW


def _check_layout(stages: list[Stage]) -> list[str]:
    violations: list[str] = []
    if len(stages) < 3 or len(stages) % 2 == 0:
        violations.append(f"stage sequence has length {len(stages)}, expected an odd length of at least 3")

    for position, stage in enumerate(stages):
        expected = _expected_role(position, len(stages))
        if stage.role is not expected:
            violations.append(f"stage {position} is {stage.role.value}, expected {expected.value}")

        roles = {item.role for item in stage.items}
        if stage.is_terminal and stage.item_count != 1:
            violations.append(f"{stage.role.value} stage holds {stage.item_count} items")
        elif stage.is_separator and stage.item_count > 1:
            violations.append(f"separator stage {position} holds {stage.item_count} items")
        elif stage.role is StageRole.WORKFLOW and stage.item_count == 0:
            violations.append(f"workflow stage {position} is empty")

        allowed = {
            StageRole.START: ItemRole.START,
            StageRole.END: ItemRole.END,
            StageRole.SEPARATOR: ItemRole.JUNCTION,
            StageRole.WORKFLOW: ItemRole.STAGE,
        }[stage.role]
        if roles - {allowed}:
            violations.append(f"stage {position} holds items of role(s) {sorted(r.value for r in roles - {allowed})}")

    return violations


def _check_items(stages: list[Stage]) -> list[str]:
    violations: list[str] = []
    items = [item for stage in stages for item in stage.items]
    counts = Counter(item.id for item in items)
    duplicates = sorted(item_id for item_id, count in counts.items() if count > 1)
    if duplicates:
        violations.append(f"items held by more than one stage: {duplicates}")

    roles = Counter(item.role for item in items)
    if roles[ItemRole.START] != 1:
        violations.append(f"workflow has {roles[ItemRole.START]} start items")
    if roles[ItemRole.END] != 1:
        violations.append(f"workflow has {roles[ItemRole.END]} end items")
    return violations


def _check_connectors(stages: list[Stage], connectors: list[Connector]) -> list[str]:
    violations: list[str] = []
    keys = Counter(connector.key for connector in connectors)
    duplicates = sorted(key for key, count in keys.items() if count > 1)
    if duplicates:
        violations.append(f"duplicate connectors: {duplicates}")

    known = {item.id for stage in stages for item in stage.items}
    dangling = sorted(
        connector.key for connector in connectors if connector.source.id not in known or connector.target.id not in known
    )
    if dangling:
        violations.append(f"connectors with endpoints outside the workflow: {dangling}")

    expected: set[tuple[str, str]] = set()
    for position in range(0, len(stages) - 2, 2):
        left, separator, right = stages[position], stages[position + 1], stages[position + 2]
        needs_junction = left.item_count > 1 and right.item_count > 1
        junction = separator.items[0] if separator.items else None

        if needs_junction and junction is None:
            violations.append(
                f"stages {position} and {position + 2} have {left.item_count} and {right.item_count} items "
                "but no junction between them"
            )
        elif not needs_junction and junction is not None:
            violations.append(f"separator {position + 1} holds junction {junction.id} it does not need")

        if junction is not None:
            expected.update((item.id, junction.id) for item in left.items)
            expected.update((junction.id, item.id) for item in right.items)
        else:
            expected.update((source.id, target.id) for source in left.items for target in right.items)

    actual = set(keys)
    missing = sorted(expected - actual)
    unexpected = sorted(actual - expected)
    if missing:
        violations.append(f"missing connectors: {missing}")
    if unexpected:
        violations.append(f"unexpected connectors: {unexpected}")

    return violations


def _check_flow(stages: list[Stage], connectors: list[Connector]) -> list[str]:
    items = [item for stage in stages for item in stage.items]
    try:
        topological_sort(items, connectors)
    except CircularConnectionError as e:
        return [str(e)]

    violations: list[str] = []
    initial = [item.role for item in find_initial_items(items, connectors)]
    terminal = [item.role for item in find_terminal_items(items, connectors)]
    if initial != [ItemRole.START]:
        violations.append(f"items without incoming connectors: {[role.value for role in initial]}")
    if terminal != [ItemRole.END]:
        violations.append(f"items without outgoing connectors: {[role.value for role in terminal]}")
    return violations


def check_invariants(stages: list[Stage], connectors: list[Connector]) -> list[str]:
    """
    Check the stage sequence and connector set for consistency.

    Returns:
        One message per violation; empty when the graph is consistent
    """
    violations = _check_layout(stages) + _check_items(stages)
    if violations:
        # Connector checks assume a well-formed sequence
        return violations
    violations = _check_connectors(stages, connectors)
    if violations:
        return violations
    return _check_flow(stages, connectors)


def verify_invariants(stages: list[Stage], connectors: list[Connector], workflow_id: str | None = None) -> None:
    """
    Raise if the graph is inconsistent.

    Raises:
        InvariantViolationError: With every violation found
    """
    violations = check_invariants(stages, connectors)
    if violations:
        label = f"Workflow {workflow_id}" if workflow_id else "Workflow"
        raise InvariantViolationError(
            f"{label} violates {len(violations)} invariant(s): {'; '.join(violations)}",
            violations=violations,
        )
