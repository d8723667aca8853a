"""Structural invariant faults.

These are programming errors inside the rewiring engine, not rejected
requests. They derive from StagegraphBaseException so that an editor's
handler for StagegraphError never hides them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stagegraph.errors.base import StagegraphBaseException

if TYPE_CHECKING:
    from stagegraph.error_codes import ErrorCode


class InvariantViolationError(StagegraphBaseException):
    """The workflow graph is structurally inconsistent.

    Attributes:
        violations: Human-readable description of every broken invariant
    """

    code: int = 900

    def __init__(
        self,
        message: str,
        *,
        violations: list[str] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.violations = violations or []

    @property
    def error_code(self) -> ErrorCode:
        if self._error_code is not None:
            return self._error_code
        from stagegraph.error_codes import ErrorCode

        return ErrorCode.INVARIANT_VIOLATION
