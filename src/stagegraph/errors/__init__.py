"""Stagegraph error hierarchy."""

from stagegraph.errors.base import StagegraphBaseException, StagegraphError
from stagegraph.errors.invariant import InvariantViolationError
from stagegraph.errors.workflow import (
    InvalidTransitionError,
    NotFoundError,
    OutOfRangeError,
    WorkflowError,
)

__all__ = [
    "InvalidTransitionError",
    "InvariantViolationError",
    "NotFoundError",
    "OutOfRangeError",
    "StagegraphBaseException",
    "StagegraphError",
    "WorkflowError",
]
