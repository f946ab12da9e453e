"""Error code taxonomies for repository and token failures.

Every repository failure carries exactly one repository code; every rejected
token carries one token code. Members are ``StrEnum`` values, so callers can
match on the plain strings as well.
"""

from __future__ import annotations

from enum import StrEnum


class RepositoryErrorCode(StrEnum):
    """Fixed discriminators attached to repository failures."""

    # Reserved; not produced by any repository path.
    CONNECTION_TIMEOUT = "connection_timeout"
    SOFT_DELETE_NOT_SUPPORTED = "soft_delete_not_supported"

    ENTITY_NOT_FOUND = "entity_not_found"
    ADD_ENTITY_FAILURE = "entity_add_failed"
    DELETE_ENTITY_FAILURE = "entity_delete_failed"
    SOFT_DELETE_ENTITY_FAILURE = "entity_soft_delete_failed"
    CHECK_ENTITY_EXISTS_FAILURE = "entity_existance_check_failed"
    FETCH_ENTITY_FAILURE = "entity_fetch_failed"
    UPDATE_ENTITY_FAILURE = "entity_update_failed"

    ENTITIES_NOT_FOUND = "entities_not_found"
    ADD_ENTITIES_FAILURE = "entities_add_failed"
    DELETE_ENTITIES_FAILURE = "entities_delete_failed"
    COUNT_ENTITIES_FAILURE = "entities_count_failed"
    FIND_ENTITIES_FAILURE = "entities_find_failed"
    FETCH_ALL_ENTITIES_FAILURE = "entities_fetch_all_failed"
    UPDATE_ENTITIES_FAILURE = "entities_update_failed"


NOT_FOUND_CODES: frozenset[str] = frozenset(
    {RepositoryErrorCode.ENTITY_NOT_FOUND, RepositoryErrorCode.ENTITIES_NOT_FOUND}
)


class TokenErrorCode(StrEnum):
    TOKEN_EXPIRED = "token_expired"
    TOKEN_INVALID_ISSUER = "token_invalid_issuer"
    TOKEN_INVALID_AUDIENCE = "token_invalid_audience"
    TOKEN_INVALID_SIGNATURE = "token_invalid_signature"
    TOKEN_INVALID = "token_invalid"
