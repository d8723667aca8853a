"""
Structured error codes for Stagegraph.

Provides semantic error classification and exception chain traversal so
that an editor layer can map failures to user feedback without matching on
exception classes.

Usage:
    from stagegraph.error_codes import ErrorCode, classify_error

    try:
        workflow.remove_item(0, item)
    except Exception as e:
        if classify_error(e) == ErrorCode.INVALID_TRANSITION:
            show_warning("The start stage cannot be edited")
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Semantic error codes for categorizing exceptions."""

    # General errors
    UNKNOWN = "UNKNOWN"
    SYSTEM_ERROR = "SYSTEM_ERROR"

    # Rejected requests
    NOT_FOUND = "NOT_FOUND"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    INVALID_TRANSITION = "INVALID_TRANSITION"

    # Configuration errors
    CONFIGURATION_INVALID = "CONFIGURATION_INVALID"

    # Programming faults
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"


def error_chain(error: Exception) -> list[Exception]:
    """Traverse __cause__ chain, return list from root to leaf.

    Args:
        error: The exception to traverse

    Returns:
        List of exceptions from root cause to the provided exception.
        If no cause chain exists, returns a list with just the error.
    """
    chain: list[Exception] = []
    current: Exception | None = error

    while current is not None:
        chain.append(current)
        cause = getattr(current, "__cause__", None)
        if cause is current:
            # Self-referential cause
            break
        current = cause

    chain.reverse()
    return chain


def find_in_chain(error: Exception, error_type: type) -> Exception | None:
    """Find first error of given type in cause chain."""
    for exc in error_chain(error):
        if isinstance(exc, error_type):
            return exc
    return None


def classify_error(error: Exception) -> ErrorCode:
    """Map any exception to an ErrorCode.

    Uses the explicit error_code of Stagegraph exceptions first, then the
    cause chain, then a few type-based fallbacks.
    """
    if hasattr(error, "error_code"):
        return error.error_code  # type: ignore[no-any-return]

    for exc in error_chain(error):
        if hasattr(exc, "error_code"):
            return exc.error_code  # type: ignore[no-any-return]

    if isinstance(error, (KeyError, LookupError)) and not isinstance(error, IndexError):
        return ErrorCode.NOT_FOUND
    if isinstance(error, IndexError):
        return ErrorCode.OUT_OF_RANGE

    error_type = type(error).__name__.lower()
    if any(pattern in error_type for pattern in ["config", "setting", "environment"]):
        return ErrorCode.CONFIGURATION_INVALID
    if "notfound" in error_type or "not_found" in error_type:
        return ErrorCode.NOT_FOUND

    return ErrorCode.UNKNOWN
