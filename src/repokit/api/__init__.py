"""API-facing helpers: error descriptor catalog and response envelope."""

from repokit.api.catalog import UNKNOWN_ERROR, ApiError, ErrorCatalog, ErrorCatalogError
from repokit.api.response import ApiExceptionDetails, ApiResponse, ResponseStatus, status_code_for

__all__ = [
    "UNKNOWN_ERROR",
    "ApiError",
    "ApiExceptionDetails",
    "ApiResponse",
    "ErrorCatalog",
    "ErrorCatalogError",
    "ResponseStatus",
    "status_code_for",
]
