"""OperationResult and OperationError: the universal operation contract.

INVARIANT: A result is either a success carrying data, or a failure carrying
an ordered stack of at least one OperationError. Never both, never neither.

Errors record how many layers they have crossed in ``depth``. A layer that
receives a failed result and must return its own result type re-wraps it with
:meth:`OperationResult.from_result`, which copies the stack with every depth
raised by one.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

T = TypeVar("T")
U = TypeVar("U")


class OperationFailedError(Exception):
    """Raised by :meth:`OperationResult.unwrap` on a failed result."""

    def __init__(self, result: OperationResult[Any]) -> None:
        self.result = result
        error = result.error
        super().__init__(f"[{error.code}] {error.message}" if error else "operation failed")


class OperationError(BaseModel):
    """One failure in an error stack."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    message: str
    code: str
    exception: BaseException | None = Field(default=None, exclude=True, repr=False)
    depth: int = Field(default=1, ge=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def exception_type(self) -> str | None:
        if self.exception is None:
            return None
        return type(self.exception).__name__

    def incremented(self) -> OperationError:
        """Copy of this error one propagation layer deeper."""
        return self.model_copy(update={"depth": self.depth + 1})


class OperationResult(BaseModel, Generic[T]):
    """Success/failure container returned by repository and service operations.

    Attributes:
        is_success: Whether the operation succeeded.
        data: Operation payload; present only on success.
        error_stack: Failures, oldest-originating first; non-empty only on failure.
        metadata: Free-form context attached by the producer.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    is_success: bool
    data: T | None = None
    error_stack: list[OperationError] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_exclusive(self) -> OperationResult[T]:
        if self.is_success and self.error_stack:
            raise ValueError("a successful result cannot carry errors")
        if not self.is_success:
            if not self.error_stack:
                raise ValueError("a failed result needs at least one error")
            if self.data is not None:
                raise ValueError("a failed result cannot carry data")
        return self

    # --- factories ---

    @classmethod
    def success(cls, data: T) -> OperationResult[T]:
        return cls(is_success=True, data=data)

    @classmethod
    def failure(
        cls,
        message: str,
        code: str,
        *,
        exception: BaseException | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> OperationResult[T]:
        """Failed result with a single depth-1 error."""
        error = OperationError(message=message, code=code, exception=exception)
        return cls(is_success=False, error_stack=[error], metadata=dict(metadata or {}))

    @classmethod
    def from_exception(cls, exception: BaseException, code: str) -> OperationResult[T]:
        """Failed result whose message is taken from *exception*."""
        message = str(exception) or type(exception).__name__
        return cls.failure(message, code, exception=exception)

    @classmethod
    def from_result(cls, other: OperationResult[U]) -> OperationResult[T]:
        """Re-type a failed *other* without losing its error trail.

        Raises:
            ValueError: *other* succeeded, so there is no trail to carry.
        """
        if other.is_success:
            raise ValueError("from_result() needs a failed result; got a success")
        return cls(
            is_success=False,
            error_stack=[error.incremented() for error in other.error_stack],
            metadata=dict(other.metadata),
        )

    # --- mutation ---

    def add_error(
        self,
        message: str,
        code: str,
        exception: BaseException | None = None,
    ) -> None:
        """Append an error one level deeper than the last one in the stack.

        Adding an error to a successful result turns it into a failure.
        """
        depth = self.error_stack[-1].depth + 1 if self.error_stack else 1
        self.error_stack.append(
            OperationError(message=message, code=code, exception=exception, depth=depth)
        )
        self.is_success = False
        self.data = None

    # --- accessors ---

    @property
    def error(self) -> OperationError | None:
        """Leading error, or None on success."""
        return self.error_stack[0] if self.error_stack else None

    @property
    def error_codes(self) -> list[str]:
        return [error.code for error in self.error_stack]

    @property
    def max_depth(self) -> int:
        return max((error.depth for error in self.error_stack), default=0)

    def has_code(self, code: str) -> bool:
        return any(error.code == code for error in self.error_stack)

    def unwrap(self) -> T:
        """Return the data, raising :class:`OperationFailedError` on failure.

        To pass a failure up a layer instead, use :meth:`from_result`, which
        raises ``ValueError`` when given a successful result. Check
        ``is_success`` first.
        """
        if not self.is_success:
            raise OperationFailedError(self)
        return self.data  # type: ignore[return-value]

    def __bool__(self) -> bool:
        return self.is_success
