"""
Stagegraph - staged flow diagram model.

This package keeps a directed flow diagram organized into ordered stages
consistent across edits:
- Start, workflow and End stages with separators between them
- Junction items that replace many-to-many connector fans
- Connector rewiring after every add, insert and remove
- Invariant checks for development and testing
"""

__version__ = "0.3.0"

from stagegraph.config import WorkflowConfig
from stagegraph.dag.invariants import check_invariants, verify_invariants
from stagegraph.dag.topological import (
    CircularConnectionError,
    find_initial_items,
    find_terminal_items,
    get_item_layers,
    topological_sort,
)
from stagegraph.error_codes import ErrorCode, classify_error
from stagegraph.errors import (
    InvalidTransitionError,
    InvariantViolationError,
    NotFoundError,
    OutOfRangeError,
    StagegraphBaseException,
    StagegraphError,
    WorkflowError,
)
from stagegraph.logging import configure_logging, get_logger
from stagegraph.models.connector import Connector
from stagegraph.models.item import Item, ItemRole
from stagegraph.models.stage import Stage, StageRole
from stagegraph.workflow import Workflow

__all__ = [
    # Core models
    "Workflow",
    "Stage",
    "StageRole",
    "Item",
    "ItemRole",
    "Connector",
    # Configuration
    "WorkflowConfig",
    # Graph checks
    "check_invariants",
    "verify_invariants",
    "topological_sort",
    "find_initial_items",
    "find_terminal_items",
    "get_item_layers",
    # Errors
    "StagegraphBaseException",
    "StagegraphError",
    "WorkflowError",
    "NotFoundError",
    "OutOfRangeError",
    "InvalidTransitionError",
    "InvariantViolationError",
    "CircularConnectionError",
    "ErrorCode",
    "classify_error",
    # Logging
    "configure_logging",
    "get_logger",
]
