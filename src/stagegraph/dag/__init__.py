"""Stage sequence, connector rewiring and graph checks."""

from stagegraph.dag.invariants import check_invariants, verify_invariants
from stagegraph.dag.rewiring import ConnectorRewirer
from stagegraph.dag.sequence import StageSequence, internal_index, observable_index
from stagegraph.dag.topological import (
    CircularConnectionError,
    find_initial_items,
    find_terminal_items,
    get_item_layers,
    topological_sort,
)

__all__ = [
    "CircularConnectionError",
    "ConnectorRewirer",
    "StageSequence",
    "check_invariants",
    "find_initial_items",
    "find_terminal_items",
    "get_item_layers",
    "internal_index",
    "observable_index",
    "topological_sort",
    "verify_invariants",
]
