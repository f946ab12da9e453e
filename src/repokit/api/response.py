"""ApiResponse: the JSON envelope an HTTP layer returns to clients.

:meth:`ApiResponse.from_result` maps an :class:`OperationResult` onto the
envelope: the leading error decides the message and status code, and every
stacked error becomes one entry in ``errors``.
"""

from __future__ import annotations

import traceback
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from repokit.api.catalog import ApiError, ErrorCatalog
from repokit.domain.codes import NOT_FOUND_CODES, TokenErrorCode
from repokit.domain.codes import RepositoryErrorCode as Code
from repokit.services.result import OperationError, OperationResult

_STATUS_BY_CODE: dict[str, int] = {
    **dict.fromkeys(NOT_FOUND_CODES, 404),
    Code.SOFT_DELETE_NOT_SUPPORTED: 400,
    Code.CONNECTION_TIMEOUT: 504,
    **dict.fromkeys(TokenErrorCode, 401),
}


def status_code_for(code: str) -> int:
    """HTTP status for an error code (500 unless the code is a known client error)."""
    return _STATUS_BY_CODE.get(code, 500)


class ResponseStatus(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"


class ApiExceptionDetails(BaseModel):
    """Serializable view of an exception and its cause chain."""

    type: str
    message: str
    stack_trace: list[str] | None = None
    inner_exception: ApiExceptionDetails | None = None

    @classmethod
    def from_exception(
        cls, exc: BaseException, *, include_stack: bool = False
    ) -> ApiExceptionDetails:
        stack = None
        if include_stack and exc.__traceback__ is not None:
            stack = [line.rstrip("\n") for line in traceback.format_tb(exc.__traceback__)]
        inner = exc.__cause__ or exc.__context__
        return cls(
            type=type(exc).__name__,
            message=str(exc),
            stack_trace=stack,
            inner_exception=(
                cls.from_exception(inner, include_stack=include_stack) if inner else None
            ),
        )


class ApiResponse(BaseModel):
    """Standard response body.

    Attributes:
        status: ``success`` or ``failure``.
        message: Human-readable summary.
        status_code: HTTP status code.
        data: Payload on success.
        errors: Error descriptors on failure.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: ResponseStatus = ResponseStatus.FAILURE
    message: str = "No message"
    status_code: int
    data: Any = None
    errors: list[ApiError] | None = None

    @classmethod
    def success(
        cls,
        data: Any,
        status_code: int = 200,
        message: str = "Request was successful.",
    ) -> ApiResponse:
        return cls(
            status=ResponseStatus.SUCCESS,
            message=message,
            status_code=status_code,
            data=data,
        )

    @classmethod
    def failure(
        cls,
        message: str,
        status_code: int,
        errors: list[ApiError] | None = None,
    ) -> ApiResponse:
        return cls(
            status=ResponseStatus.FAILURE,
            message=message,
            status_code=status_code,
            errors=errors,
        )

    @classmethod
    def failure_for_keys(
        cls,
        keys: list[str],
        message: str,
        catalog: ErrorCatalog,
        status_code: int = 500,
    ) -> ApiResponse:
        """Failure whose errors are looked up in *catalog* by key."""
        return cls.failure(message, status_code, catalog.get_many(keys))

    @classmethod
    def from_result(
        cls,
        result: OperationResult[Any],
        catalog: ErrorCatalog | None = None,
        *,
        success_status: int = 200,
    ) -> ApiResponse:
        """Envelope for *result*.

        Failed results use the leading error's message and the status mapped
        from its code. With a *catalog*, descriptors for codes it knows
        replace the raw error text.
        """
        if result.is_success:
            return cls.success(result.data, status_code=success_status)
        lead = result.error
        assert lead is not None
        errors = [_describe(error, catalog) for error in result.error_stack]
        return cls.failure(lead.message, status_code_for(lead.code), errors)

    def to_json(self, *, indent: int | None = 2) -> str:
        return self.model_dump_json(indent=indent, exclude_none=True)


def _describe(error: OperationError, catalog: ErrorCatalog | None) -> ApiError:
    if catalog is not None and error.code in catalog:
        return catalog.get(error.code)
    return ApiError(code=error.code, message=error.message, status_code=status_code_for(error.code))
