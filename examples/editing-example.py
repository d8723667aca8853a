#!/usr/bin/env python3
"""
Editing Example - Demonstrates how Stagegraph keeps a diagram wired.

This example shows how to:
1. Build a workflow stage by stage
2. Watch a junction appear when two adjacent stages both fan out
3. Remove a stage and see its neighbors relinked

Run with:
    python examples/editing-example.py
"""

import logging

from stagegraph import Item, Workflow, WorkflowConfig, configure_logging
from stagegraph.cli.commands import render

# =============================================================================
# Helpers
# =============================================================================


def show(title: str, workflow: Workflow) -> None:
    print(f"\n--- {title} ---")
    print(render(workflow, layers=True))


# =============================================================================
# Main
# =============================================================================


def main() -> None:
    configure_logging(level=logging.WARNING)
    workflow = Workflow(config=WorkflowConfig(verify_invariants=True))

    # Start -> build -> End
    workflow.insert_stage_after(0, Item.step("build"))
    show("single stage", workflow)

    # Fan out the tests: build -> [unit, integration]
    workflow.insert_stage_after(1, Item.step("unit"))
    workflow.add_item(2, Item.step("integration"))
    show("fan-out", workflow)

    # Two builds feeding two test suites need a junction in between
    workflow.add_item(1, Item.step("build-arm"))
    show("junction between builds and tests", workflow)

    # Dropping a test suite collapses the junction again
    workflow.remove_item(2, workflow.find_item("integration"))
    show("junction removed", workflow)

    # Removing the last test suite deletes its stage
    workflow.remove_item(2, workflow.find_item("unit"))
    show("stage deleted", workflow)


if __name__ == "__main__":
    main()
