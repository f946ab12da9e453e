"""Auto-generated entity ids.

Format: ``{PREFIX}{yyMMddHHmmss}{ff}[{xxxx}]``

- PREFIX: caller-supplied, else the first three characters of the entity
  type name, upper-cased (``Order`` -> ``ORD``).
- Timestamp: UTC, second precision plus two centisecond digits. Fixed width,
  so ids sort lexically by creation time within one prefix.
- Suffix: four random hex characters (optional). Without it, two ids minted
  in the same centisecond for the same prefix collide.
"""

from __future__ import annotations

import re
import secrets
from datetime import datetime

from repokit.domain.entity import utc_now

TIMESTAMP_FORMAT = "%y%m%d%H%M%S"
TIMESTAMP_WIDTH = 14
ENTROPY_WIDTH = 4

ID_BODY_PATTERN: re.Pattern[str] = re.compile(
    rf"^(?P<stamp>\d{{{TIMESTAMP_WIDTH}}})(?P<suffix>[0-9a-f]{{{ENTROPY_WIDTH}}})?$"
)


def prefix_for(type_name: str) -> str:
    """First three characters of *type_name*, upper-cased."""
    return type_name[:3].upper()


def format_timestamp(moment: datetime) -> str:
    """Render *moment* as ``yyMMddHHmmssff``."""
    centis = moment.microsecond // 10_000
    return f"{moment.strftime(TIMESTAMP_FORMAT)}{centis:02d}"


def generate_id(
    entity_type: type | str,
    custom_prefix: str | None = None,
    *,
    now: datetime | None = None,
    entropy: bool = True,
) -> str:
    """Generate a sortable id for *entity_type*.

    Args:
        entity_type: Entity class, or its name.
        custom_prefix: Overrides the type-derived prefix (may be empty).
        now: Timestamp to encode; defaults to the current UTC time.
        entropy: Append a random hex suffix.
    """
    if custom_prefix is not None:
        prefix = custom_prefix
    else:
        name = entity_type if isinstance(entity_type, str) else entity_type.__name__
        prefix = prefix_for(name)
    stamp = format_timestamp(now or utc_now())
    suffix = secrets.token_hex(ENTROPY_WIDTH // 2) if entropy else ""
    return f"{prefix}{stamp}{suffix}"


def assign_id(
    entity: object,
    custom_prefix: str | None = None,
    *,
    now: datetime | None = None,
    entropy: bool = True,
) -> str:
    """Generate an id for *entity*'s type and write it to ``entity.id``."""
    new_id = generate_id(type(entity), custom_prefix, now=now, entropy=entropy)
    entity.id = new_id  # type: ignore[attr-defined]
    return new_id


def validate_generated_id(value: str, prefix: str) -> bool:
    """Check whether *value* looks like an id generated with *prefix*."""
    if not value.startswith(prefix):
        return False
    return ID_BODY_PATTERN.match(value[len(prefix) :]) is not None
