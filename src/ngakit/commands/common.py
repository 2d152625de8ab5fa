"""Glue shared by the forum command groups.

Every command resolves the client configuration, opens one
:class:`~ngakit.client.NGAClient` for the duration of the command, runs a
single coroutine against it and renders the decoded records. Library
errors become a clean message on stderr and the error's exit code.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer
from pydantic import BaseModel

from ngakit.client import NGAClient
from ngakit.config import load_global_config, make_cache, resolve_client_config
from ngakit.exceptions import ApiError, AuthRequiredError, NgaError
from ngakit.output import OutputFormat, error, format_response, get_output, print_table, suggest

T = TypeVar("T")


def run(ctx: typer.Context, operation: Callable[[NGAClient], Awaitable[T]]) -> T:
    """Run *operation* with a configured client and map library errors to exit codes.

    Args:
        ctx: Typer context carrying the ``no_cache`` flag in ``ctx.obj``.
        operation: Coroutine function receiving the open client.

    Raises:
        typer.Exit: With the error's exit code on any
            :class:`~ngakit.exceptions.NgaError`.
    """
    no_cache = bool(ctx.obj.get("no_cache", False)) if ctx.obj else False
    try:
        config = resolve_client_config(load_global_config(), no_cache=no_cache)
        cache = make_cache(config.cache)
        try:
            return asyncio.run(_call(config, cache, operation))
        finally:
            close = getattr(cache, "close", None)
            if close is not None:
                close()
    except NgaError as exc:
        error(str(exc))
        if isinstance(exc, AuthRequiredError) or (isinstance(exc, ApiError) and exc.is_auth_error):
            suggest("Run 'ngakit auth login' or set NGAKIT_TOKEN and NGAKIT_UID.")
        elif exc.retryable:
            suggest("The request can be retried.")
        raise typer.Exit(code=exc.exit_code) from None


async def _call(config: Any, cache: Any, operation: Callable[[NGAClient], Awaitable[T]]) -> T:
    async with NGAClient(config, cache=cache) as client:
        return await operation(client)


def render(
    data: Any,
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    """Print *data* as JSON in ``--json`` mode, otherwise print the table rows."""
    if get_output().format == OutputFormat.JSON:
        format_response(to_jsonable(data))
    else:
        print_table(headers, rows, title)


def to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [to_jsonable(item) for item in data]
    return data


def fmt_time(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value is not None else ""


def fmt(value: Any) -> str:
    return "" if value is None else str(value)


def page_footer(page: int, total_pages: int) -> str:
    return f"Page {page} of {max(total_pages, page)}"
