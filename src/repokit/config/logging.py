"""Logging setup and timing helper.

structlog events and plain stdlib records share one handler and one
rendering chain, so library loggers (``repokit.api.catalog`` logs through
stdlib) come out in the same format as structlog ones: colored key/value
lines by default, or JSON lines with ``--log-json``.
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import IO, Any

import structlog

# Held at WARNING even with --verbose.
QUIET_LOGGERS = ("sqlalchemy", "aiosqlite", "asyncio")

_SHARED: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _render_chain(log_json: bool, stream: IO[str]) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if log_json:
        chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))
    return chain


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """Route structlog and stdlib logging through a single handler.

    Safe to call repeatedly; each call replaces the root handler.

    Args:
        verbose: ``repokit.*`` loggers at DEBUG instead of WARNING.
        log_json: Render JSON lines instead of console output.
        stream: Destination; defaults to the current ``sys.stderr``.
    """
    target = stream if stream is not None else sys.stderr

    structlog.configure(
        processors=[*_SHARED, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(target)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED,
            processors=_render_chain(log_json, target),
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("repokit").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def log_timer(
    logger: Any,
    event: str,
    *,
    level: int = logging.DEBUG,
    **fields: Any,
) -> Generator[dict[str, Any]]:
    """Log ``{event} started`` on entry and ``{event} finished`` on exit.

    The end event carries ``elapsed_ms`` and any keys the block added to the
    yielded dict. A block that raises logs ``{event} failed`` instead and the
    exception propagates.

    Usage::

        with log_timer(log, "import orders", source=path) as extra:
            extra["rows"] = load(path)
    """
    bound = logger.bind(**fields) if fields else logger
    extra: dict[str, Any] = {}
    bound.log(level, f"{event} started")
    start = time.perf_counter()
    outcome = "failed"
    try:
        yield extra
        outcome = "finished"
    finally:
        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
        bound.log(level, f"{event} {outcome}", elapsed_ms=elapsed_ms, **extra)
