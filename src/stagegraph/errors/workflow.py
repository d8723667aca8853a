"""Errors raised by workflow mutations and stage navigation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stagegraph.errors.base import StagegraphError

if TYPE_CHECKING:
    from stagegraph.error_codes import ErrorCode


class WorkflowError(StagegraphError):
    """Workflow-level error.

    Contains the workflow ID for troubleshooting.
    """

    code: int = 300

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        cause: Exception | None = None,
        error_code: ErrorCode | None = None,
        workflow_id: str | None = None,
    ) -> None:
        super().__init__(message, code=code, cause=cause, error_code=error_code)
        self.workflow_id = workflow_id


class NotFoundError(WorkflowError):
    """A referenced stage or item is absent from the workflow."""

    code: int = 301

    @property
    def error_code(self) -> ErrorCode:
        if self._error_code is not None:
            return self._error_code
        from stagegraph.error_codes import ErrorCode

        return ErrorCode.NOT_FOUND


class OutOfRangeError(WorkflowError):
    """Stage navigation would leave the bounds of the stage sequence."""

    code: int = 302

    @property
    def error_code(self) -> ErrorCode:
        if self._error_code is not None:
            return self._error_code
        from stagegraph.error_codes import ErrorCode

        return ErrorCode.OUT_OF_RANGE


class InvalidTransitionError(WorkflowError):
    """Disallowed structural change.

    Raised for:
    - Inserting a stage after the End stage or after a separator
    - Removing items from the Start or End stage
    - Adding an item of the wrong role, or one already in the workflow
    """

    code: int = 303

    @property
    def error_code(self) -> ErrorCode:
        if self._error_code is not None:
            return self._error_code
        from stagegraph.error_codes import ErrorCode

        return ErrorCode.INVALID_TRANSITION
