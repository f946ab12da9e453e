"""Service layer contract: every operation returns an OperationResult."""

from repokit.services.result import OperationError, OperationFailedError, OperationResult

__all__ = ["OperationError", "OperationFailedError", "OperationResult"]
