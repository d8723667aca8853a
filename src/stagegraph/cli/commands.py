"""CLI command implementations for Stagegraph."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from stagegraph.config import WorkflowConfig
from stagegraph.dag.topological import get_item_layers
from stagegraph.errors import StagegraphBaseException
from stagegraph.logging import configure_logging
from stagegraph.models.item import Item, ItemRole
from stagegraph.workflow import Workflow

OPERATIONS = ("add_item", "insert_stage_after", "remove_item")


def load_operations(path: str) -> list[tuple[str, int, str]]:
    """
    Read a replay script.

    Format:
        operations:
          - insert_stage_after: {stage: 0, item: a1}
          - add_item: {stage: 1, item: a2}
          - remove_item: {stage: 1, item: a1}

    Returns:
        (operation, observable stage index, item id) triples

    Raises:
        ValueError: If the document does not follow the format
    """
    with open(Path(path)) as f:
        document = yaml.safe_load(f)

    if not isinstance(document, dict) or not isinstance(document.get("operations"), list):
        raise ValueError("Replay file must be a mapping with an 'operations' list")

    operations: list[tuple[str, int, str]] = []
    for number, entry in enumerate(document["operations"], start=1):
        if not isinstance(entry, dict) or len(entry) != 1:
            raise ValueError(f"Operation {number} must be a single-key mapping")
        name, params = next(iter(entry.items()))
        if name not in OPERATIONS:
            raise ValueError(f"Operation {number}: unknown operation {name!r}, expected one of {OPERATIONS}")
        if not isinstance(params, dict) or "stage" not in params or "item" not in params:
            raise ValueError(f"Operation {number}: {name} needs 'stage' and 'item'")
        stage = params["stage"]
        if not isinstance(stage, int) or isinstance(stage, bool):
            raise ValueError(f"Operation {number}: 'stage' must be an integer")
        operations.append((name, stage, str(params["item"])))
    return operations


def apply_operation(workflow: Workflow, name: str, stage: int, item_id: str) -> None:
    """Apply one replay operation. Removals refer to items already in the workflow."""
    if name == "add_item":
        workflow.add_item(stage, Item.step(item_id))
    elif name == "insert_stage_after":
        workflow.insert_stage_after(stage, Item.step(item_id))
    else:
        workflow.remove_item(stage, workflow.find_item(item_id))


def label(item: Item) -> str:
    if item.role is ItemRole.START:
        return "start"
    if item.role is ItemRole.END:
        return "end"
    if item.role is ItemRole.JUNCTION:
        return f"junction:{item.id}"
    return item.id


def render(workflow: Workflow, layers: bool = False) -> str:
    """Plain-text listing of stages and connectors."""
    lines = ["Stages:"]
    observable = 0
    for stage in workflow.get_all_stages():
        index = "-" if stage.is_separator else str(observable)
        if not stage.is_separator:
            observable += 1
        items = ", ".join(label(item) for item in stage.items)
        lines.append(f"  [{index}] {stage.role.value:<10} {items}".rstrip())

    lines.append("Connectors:")
    for connector in workflow.get_connectors():
        lines.append(f"  {label(connector.source)} -> {label(connector.target)}")

    if layers:
        lines.append("Layers:")
        for number, layer in enumerate(get_item_layers(workflow.get_all_items(), workflow.get_connectors())):
            lines.append(f"  {number}: {', '.join(label(item) for item in layer)}")

    return "\n".join(lines)


def replay(
    path: str,
    check: bool = False,
    layers: bool = False,
    json_logs: bool = False,
    log_level: str | None = None,
) -> None:
    """Replay a script of operations and print the resulting diagram."""
    config = WorkflowConfig.from_env()
    if check:
        config.verify_invariants = True
    if json_logs:
        config.log_json = True
    if log_level:
        level: Any = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            print(f"Error: Unknown log level: {log_level}")
            sys.exit(1)
        config.log_level = level

    configure_logging(json_format=config.log_json, level=config.log_level)

    try:
        operations = load_operations(path)
    except OSError as e:
        print(f"Error: Cannot read {path}: {e}")
        sys.exit(1)
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    workflow = Workflow(config=config)
    for number, (name, stage, item_id) in enumerate(operations, start=1):
        try:
            apply_operation(workflow, name, stage, item_id)
        except StagegraphBaseException as e:
            print(f"Error: Operation {number} ({name} {item_id} at stage {stage}) failed: {e}")
            sys.exit(1)

    print(render(workflow, layers=layers))
