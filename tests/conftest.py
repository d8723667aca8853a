"""Shared pytest fixtures and graph helpers."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest
import structlog

from stagegraph.config import WorkflowConfig
from stagegraph.logging import configure_logging
from stagegraph.models.item import Item, ItemRole
from stagegraph.workflow import Workflow


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[None, None, None]:
    """Run every log call through the processors but print nothing.

    Reconfigured per test so a test that configures console logging
    does not leak its output stream into the next one.
    """
    configure_logging(level=logging.DEBUG, logger_factory=structlog.ReturnLoggerFactory())
    yield


@pytest.fixture
def config() -> WorkflowConfig:
    """Config that checks every invariant after every mutation."""
    return WorkflowConfig(verify_invariants=True)


@pytest.fixture
def workflow(config: WorkflowConfig) -> Workflow:
    return Workflow(config=config)


# =============================================================================
# Graph helpers
# =============================================================================


def step(item_id: str) -> Item:
    return Item.step(item_id)


def label(item: Item) -> str:
    """Readable name: step ids as-is, fixed names for the rest."""
    if item.role is ItemRole.START:
        return "start"
    if item.role is ItemRole.END:
        return "end"
    if item.role is ItemRole.JUNCTION:
        return "J"
    return item.id


def edges(workflow: Workflow) -> set[tuple[str, str]]:
    """Connectors as (source, target) labels.

    Every junction is labelled "J", so use this only when at most one
    junction exists or when the caller does not need to tell them apart.
    """
    return {(label(c.source), label(c.target)) for c in workflow.get_connectors()}


def stage_ids(workflow: Workflow) -> list[list[str]]:
    """Item labels of every observable stage."""
    return [[label(item) for item in stage.items] for stage in workflow.get_observable_stages()]


def junctions(workflow: Workflow) -> list[Item]:
    return [item for item in workflow.get_all_items() if item.role is ItemRole.JUNCTION]


def build(workflow: Workflow, *stages: list[str]) -> Workflow:
    """Fill a fresh workflow with workflow stages holding the given step ids."""
    for index, ids in enumerate(stages):
        workflow.insert_stage_after(index, step(ids[0]))
        for item_id in ids[1:]:
            workflow.add_item(index + 1, step(item_id))
    return workflow
