"""Configuration for Stagegraph workflows.

Environment Variables:
    STAGEGRAPH_VERIFY_INVARIANTS: Check the full graph after every mutation (default: false)
    STAGEGRAPH_LOG_LEVEL: Minimum log level name (default: INFO)
    STAGEGRAPH_LOG_JSON: Emit JSON logs instead of console logs (default: false)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class WorkflowConfig:
    """Runtime settings for a Workflow.

    Attributes:
        verify_invariants: Run the invariant checker after every mutation and
            raise InvariantViolationError on the first inconsistency. Meant
            for development and tests; each check walks the whole graph.
        log_level: Minimum log level passed to configure_logging()
        log_json: Emit JSON logs
    """

    verify_invariants: bool = False
    log_level: int = logging.INFO
    log_json: bool = False

    @classmethod
    def from_env(cls) -> WorkflowConfig:
        """Load configuration from environment variables.

        Unparseable values fall back to the defaults.
        """
        return cls(
            verify_invariants=_parse_bool_env("STAGEGRAPH_VERIFY_INVARIANTS", False),
            log_level=_parse_level_env("STAGEGRAPH_LOG_LEVEL", logging.INFO),
            log_json=_parse_bool_env("STAGEGRAPH_LOG_JSON", False),
        )


def _parse_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def _parse_level_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else default
