"""Base exception hierarchy for Stagegraph.

Two-tier exception hierarchy:

1. StagegraphBaseException - Base for all errors, not caught by default handlers
2. StagegraphError - Standard errors that callers are expected to catch
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stagegraph.error_codes import ErrorCode


class StagegraphBaseException(Exception):  # noqa: N818 - intentional base exception name
    """Base exception for all Stagegraph errors.

    Use this directly only for faults that must not be swallowed by an
    editor's generic error handling, such as broken structural invariants.

    Attributes:
        code: Numeric error code for programmatic handling
        error_code: Semantic ErrorCode for categorization
        cause: Optional original exception that caused this error
    """

    code: int = 0
    _error_code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        cause: Exception | None = None,
        error_code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.cause = cause
        if error_code is not None:
            self._error_code = error_code

    @property
    def error_code(self) -> ErrorCode:
        """Get the semantic error code for this exception."""
        if self._error_code is not None:
            return self._error_code
        from stagegraph.error_codes import ErrorCode

        return ErrorCode.UNKNOWN

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.code:
            parts.append(f"(code={self.code})")
        if self.cause:
            parts.append(f"caused by: {self.cause}")
        return " ".join(parts)


class StagegraphError(StagegraphBaseException):
    """Standard Stagegraph error.

    Raised synchronously by a rejected request. The request is aborted
    without touching the workflow, so callers can correct it and try again.
    """

    code: int = 100

    @property
    def error_code(self) -> ErrorCode:
        if self._error_code is not None:
            return self._error_code
        from stagegraph.error_codes import ErrorCode

        return ErrorCode.SYSTEM_ERROR
