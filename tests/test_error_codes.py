"""Tests for error codes and error chain traversal."""

from stagegraph.error_codes import (
    ErrorCode,
    classify_error,
    error_chain,
    find_in_chain,
)
from stagegraph.errors import (
    InvalidTransitionError,
    InvariantViolationError,
    NotFoundError,
    OutOfRangeError,
    StagegraphError,
    WorkflowError,
)


class TestErrorChain:
    """Tests for error_chain() function."""

    def test_single_error_returns_list_with_one_item(self) -> None:
        """Single error with no cause returns list with just that error."""
        error = ValueError("test")
        chain = error_chain(error)
        assert len(chain) == 1
        assert chain[0] is error

    def test_chained_errors_returns_root_to_leaf(self) -> None:
        """Chained errors return list from root cause to leaf."""
        root = ValueError("root")
        middle = RuntimeError("middle")
        middle.__cause__ = root
        leaf = TypeError("leaf")
        leaf.__cause__ = middle

        chain = error_chain(leaf)
        assert chain == [root, middle, leaf]

    def test_none_cause_terminates_chain(self) -> None:
        """Explicit None cause terminates chain traversal."""
        try:
            raise ValueError("root") from None
        except ValueError as e:
            chain = error_chain(e)
            assert len(chain) == 1


class TestFindInChain:
    """Tests for find_in_chain() function."""

    def test_finds_matching_type_in_chain(self) -> None:
        root = NotFoundError("missing stage")
        leaf = RuntimeError("editor failed")
        leaf.__cause__ = root

        assert find_in_chain(leaf, WorkflowError) is root

    def test_returns_none_when_not_found(self) -> None:
        assert find_in_chain(ValueError("test"), TypeError) is None


class TestClassifyError:
    """Tests for classify_error() function."""

    def test_workflow_errors_use_error_code_property(self) -> None:
        assert classify_error(NotFoundError("x")) == ErrorCode.NOT_FOUND
        assert classify_error(OutOfRangeError("x")) == ErrorCode.OUT_OF_RANGE
        assert classify_error(InvalidTransitionError("x")) == ErrorCode.INVALID_TRANSITION
        assert classify_error(StagegraphError("x")) == ErrorCode.SYSTEM_ERROR

    def test_invariant_violation(self) -> None:
        assert classify_error(InvariantViolationError("broken")) == ErrorCode.INVARIANT_VIOLATION

    def test_builtin_lookup_errors(self) -> None:
        assert classify_error(KeyError("x")) == ErrorCode.NOT_FOUND
        assert classify_error(IndexError("x")) == ErrorCode.OUT_OF_RANGE

    def test_unknown_errors_return_unknown(self) -> None:
        assert classify_error(ValueError("x")) == ErrorCode.UNKNOWN

    def test_configuration_error_by_name(self) -> None:
        class SettingsMissing(Exception):
            pass

        assert classify_error(SettingsMissing()) == ErrorCode.CONFIGURATION_INVALID

    def test_cause_chain_checked_for_error_code(self) -> None:
        root = OutOfRangeError("past the end")
        leaf = RuntimeError("wrapper")
        leaf.__cause__ = root

        assert classify_error(leaf) == ErrorCode.OUT_OF_RANGE

    def test_explicit_error_code_respected(self) -> None:
        error = WorkflowError("custom", error_code=ErrorCode.NOT_FOUND)
        assert classify_error(error) == ErrorCode.NOT_FOUND


class TestErrorAttributes:
    """Tests for numeric codes and message formatting."""

    def test_numeric_codes(self) -> None:
        assert WorkflowError("x").code == 300
        assert NotFoundError("x").code == 301
        assert OutOfRangeError("x").code == 302
        assert InvalidTransitionError("x").code == 303
        assert InvariantViolationError("x").code == 900

    def test_str_includes_code_and_cause(self) -> None:
        error = NotFoundError("stage missing", cause=KeyError("s1"))

        assert str(error) == "stage missing (code=301) caused by: 's1'"

    def test_workflow_id(self) -> None:
        assert NotFoundError("x", workflow_id="wf-1").workflow_id == "wf-1"
        assert NotFoundError("x").workflow_id is None


class TestErrorCodeEnum:
    """Tests for ErrorCode enum."""

    def test_all_codes_have_string_values(self) -> None:
        for code in ErrorCode:
            assert isinstance(code.value, str)

    def test_codes_are_unique(self) -> None:
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))
