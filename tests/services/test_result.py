"""Tests for OperationResult and OperationError."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from repokit.domain.codes import RepositoryErrorCode as Code
from repokit.services.result import OperationError, OperationFailedError, OperationResult


class TestFactories:
    def test_success_carries_data(self) -> None:
        result = OperationResult.success({"id": "ORD1"})
        assert result.is_success
        assert result.data == {"id": "ORD1"}
        assert result.error_stack == []
        assert result.error is None
        assert bool(result) is True

    def test_success_with_none_data(self) -> None:
        result = OperationResult.success(None)
        assert result.is_success
        assert result.data is None

    def test_failure_has_single_depth_one_error(self) -> None:
        result = OperationResult.failure("Entity not found.", Code.ENTITY_NOT_FOUND)
        assert not result.is_success
        assert result.data is None
        assert len(result.error_stack) == 1
        assert result.error is not None
        assert result.error.message == "Entity not found."
        assert result.error.code == "entity_not_found"
        assert result.error.depth == 1
        assert bool(result) is False

    def test_failure_metadata_is_copied(self) -> None:
        meta = {"timed_out": True}
        result = OperationResult.failure("boom", "x", metadata=meta)
        meta["timed_out"] = False
        assert result.metadata == {"timed_out": True}

    def test_from_exception_uses_message(self) -> None:
        exc = RuntimeError("disk full")
        result = OperationResult.from_exception(exc, Code.ADD_ENTITY_FAILURE)
        assert result.error is not None
        assert result.error.message == "disk full"
        assert result.error.exception is exc
        assert result.error.exception_type == "RuntimeError"

    def test_from_exception_without_message_uses_type_name(self) -> None:
        result = OperationResult.from_exception(KeyError(), "lookup_failed")
        assert result.error is not None
        assert result.error.message == "KeyError"


class TestExclusivity:
    def test_failure_without_errors_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OperationResult(is_success=False)

    def test_success_with_errors_rejected(self) -> None:
        error = OperationError(message="m", code="c")
        with pytest.raises(ValidationError):
            OperationResult(is_success=True, error_stack=[error])

    def test_failure_with_data_rejected(self) -> None:
        error = OperationError(message="m", code="c")
        with pytest.raises(ValidationError):
            OperationResult(is_success=False, data=1, error_stack=[error])

    def test_depth_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            OperationError(message="m", code="c", depth=0)


class TestPropagation:
    def test_from_result_increments_every_depth(self) -> None:
        inner: OperationResult[int] = OperationResult.failure("low", "a")
        inner.add_error("mid", "b")
        outer: OperationResult[str] = OperationResult.from_result(inner)
        assert [e.depth for e in outer.error_stack] == [2, 3]
        assert outer.error_codes == ["a", "b"]

    def test_from_result_leaves_source_untouched(self) -> None:
        inner: OperationResult[int] = OperationResult.failure("low", "a")
        OperationResult.from_result(inner)
        assert inner.error is not None
        assert inner.error.depth == 1

    def test_from_result_keeps_exception_and_metadata(self) -> None:
        exc = ValueError("bad")
        inner: OperationResult[int] = OperationResult.failure(
            "low", "a", exception=exc, metadata={"k": 1}
        )
        outer: OperationResult[str] = OperationResult.from_result(inner)
        assert outer.error is not None
        assert outer.error.exception is exc
        assert outer.metadata == {"k": 1}

    def test_from_result_on_success_raises(self) -> None:
        with pytest.raises(ValueError, match="failed result"):
            OperationResult.from_result(OperationResult.success(1))

    def test_add_error_appends_one_level_deeper(self) -> None:
        result: OperationResult[int] = OperationResult.failure("first", "a")
        result.add_error("second", "b")
        result.add_error("third", "c")
        assert [e.depth for e in result.error_stack] == [1, 2, 3]
        assert result.max_depth == 3
        assert result.error is not None
        assert result.error.message == "first"

    def test_add_error_on_success_turns_into_failure(self) -> None:
        result = OperationResult.success(5)
        result.add_error("late", "z")
        assert not result.is_success
        assert result.data is None
        assert result.error is not None
        assert result.error.depth == 1

    def test_incremented_returns_copy(self) -> None:
        error = OperationError(message="m", code="c")
        deeper = error.incremented()
        assert deeper.depth == 2
        assert error.depth == 1


class TestAccessors:
    def test_has_code(self) -> None:
        result: OperationResult[int] = OperationResult.failure("x", Code.ENTITY_NOT_FOUND)
        result.add_error("y", Code.FETCH_ENTITY_FAILURE)
        assert result.has_code(Code.ENTITY_NOT_FOUND)
        assert result.has_code("entity_fetch_failed")
        assert not result.has_code(Code.COUNT_ENTITIES_FAILURE)

    def test_max_depth_on_success_is_zero(self) -> None:
        assert OperationResult.success(1).max_depth == 0

    def test_unwrap_success(self) -> None:
        assert OperationResult.success([1, 2]).unwrap() == [1, 2]

    def test_unwrap_failure_raises(self) -> None:
        result: OperationResult[int] = OperationResult.failure("nope", "missing")
        with pytest.raises(OperationFailedError, match=r"\[missing\] nope") as info:
            result.unwrap()
        assert info.value.result is result

    def test_exception_excluded_from_dump(self) -> None:
        result: OperationResult[int] = OperationResult.failure(
            "x", "c", exception=RuntimeError("r")
        )
        dumped = result.model_dump()
        error = dumped["error_stack"][0]
        assert "exception" not in error
        assert error["exception_type"] == "RuntimeError"
