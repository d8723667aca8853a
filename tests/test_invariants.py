"""Tests for the structural invariant checker."""

import pytest

from stagegraph.dag.invariants import check_invariants, verify_invariants
from stagegraph.errors import InvariantViolationError, StagegraphError
from stagegraph.models import Connector, Item, Stage
from stagegraph.workflow import Workflow
from tests.conftest import build, junctions


def test_consistent_workflow_has_no_violations(workflow: Workflow) -> None:
    build(workflow, ["a1", "a2"], ["b1"], ["c1", "c2", "c3"])

    assert check_invariants(workflow.get_all_stages(), workflow.get_connectors()) == []
    verify_invariants(workflow.get_all_stages(), workflow.get_connectors())


def test_missing_connector(workflow: Workflow) -> None:
    build(workflow, ["a1"])
    connectors = workflow.get_connectors()[1:]

    violations = check_invariants(workflow.get_all_stages(), connectors)

    assert any(v.startswith("missing connectors") for v in violations)


def test_duplicate_connector(workflow: Workflow) -> None:
    connectors = workflow.get_connectors()
    connectors.append(connectors[0])

    violations = check_invariants(workflow.get_all_stages(), connectors)

    assert any(v.startswith("duplicate connectors") for v in violations)


def test_dangling_connector(workflow: Workflow) -> None:
    connectors = workflow.get_connectors()
    connectors.append(Connector(workflow.start_item, Item.step("ghost")))

    violations = check_invariants(workflow.get_all_stages(), connectors)

    assert any("outside the workflow" in v for v in violations)


def test_fan_edge_where_junction_is_required(workflow: Workflow) -> None:
    build(workflow, ["a1", "a2"], ["b1", "b2"])
    stages = workflow.get_all_stages()
    junction = junctions(workflow)[0]
    stages[3].remove_item(junction)

    violations = check_invariants(stages, workflow.get_connectors())

    assert any("no junction between them" in v for v in violations)


def test_unneeded_junction(workflow: Workflow) -> None:
    build(workflow, ["a1"])
    stages = workflow.get_all_stages()
    stages[1].add_item(Item.junction())

    violations = check_invariants(stages, workflow.get_connectors())

    assert any("does not need" in v for v in violations)


def test_sequence_layout() -> None:
    violations = check_invariants([Stage.start(), Stage.end()], [])

    assert any("length 2" in v for v in violations)


def test_empty_workflow_stage() -> None:
    stages = [Stage.start(), Stage.separator(), Stage.workflow(), Stage.separator(), Stage.end()]

    violations = check_invariants(stages, [])

    assert "workflow stage 2 is empty" in violations


def test_separator_in_wrong_position() -> None:
    stages = [Stage.start(), Stage.workflow(), Stage.end()]

    violations = check_invariants(stages, [])

    assert "stage 1 is WORKFLOW, expected SEPARATOR" in violations


def test_item_in_two_stages() -> None:
    shared = Item.step("a")
    first, second = Stage.workflow(), Stage.workflow()
    first.add_item(shared)
    second.add_item(shared)
    stages = [Stage.start(), Stage.separator(), first, Stage.separator(), second, Stage.separator(), Stage.end()]

    violations = check_invariants(stages, [])

    assert "items held by more than one stage: ['a']" in violations


def test_verify_raises_with_every_violation(workflow: Workflow) -> None:
    with pytest.raises(InvariantViolationError) as exc_info:
        verify_invariants(workflow.get_all_stages(), [], workflow_id=workflow.id)

    error = exc_info.value
    assert error.violations
    assert workflow.id in str(error)
    assert not isinstance(error, StagegraphError)
