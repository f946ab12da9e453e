"""Rich/JSON output helpers.

The CLI renders OperationResult for humans (Rich markup) or machines
(``--json``, the :class:`ApiResponse` envelope).
"""

from __future__ import annotations

import json as _json
from io import StringIO
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from repokit.api.response import ApiExceptionDetails, ApiResponse

if TYPE_CHECKING:
    from repokit.services.result import OperationResult

THEME = Theme(
    {
        "rk.ok": "bold green",
        "rk.error": "bold red",
        "rk.op": "bold cyan",
        "rk.key": "dim",
        "rk.code": "bold yellow",
        "rk.depth": "magenta",
    }
)


def _console() -> Console:
    """Plain-text console recording into memory; markup styles are stripped on export."""
    return Console(file=StringIO(), theme=THEME, record=True, highlight=False, width=120)


def _text(console: Console) -> str:
    return console.export_text(styles=False).rstrip("\n")


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def format_result(
    result: OperationResult[Any],
    op: str,
    *,
    json_output: bool = False,
    verbose: bool = False,
) -> str:
    """Format an OperationResult for display.

    Args:
        result: The result to format.
        op: Operation name shown in the header line.
        json_output: Return the JSON response envelope instead of text.
        verbose: Include exception details for failures.
    """
    if json_output:
        return ApiResponse.from_result(result).to_json()

    console = _console()
    if result.is_success:
        console.print(f"[rk.ok]OK[/]: [rk.op]{escape(op)}[/]")
        data = result.data
        if isinstance(data, dict):
            for key, value in data.items():
                console.print(f"  [rk.key]{escape(str(key))}[/]: {escape(_format_value(value))}")
        elif data is not None:
            console.print(f"  {escape(_format_value(data))}")
        return _text(console)

    lead = result.error
    message = lead.message if lead else "Unknown error"
    console.print(f"[rk.error]ERROR[/]: [rk.op]{escape(op)}[/] - {escape(message)}")
    for error in result.error_stack:
        console.print(
            f"  [rk.depth]\\[depth {error.depth}][/] [rk.code]{escape(error.code)}[/]: "
            f"{escape(error.message)}"
        )
        if verbose and error.exception is not None:
            details = ApiExceptionDetails.from_exception(error.exception)
            console.print(f"    {escape(details.type)}: {escape(details.message)}")
    return _text(console)
