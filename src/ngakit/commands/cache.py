"""Cache commands -- inspect and clear the response cache."""

from __future__ import annotations

import asyncio

import typer

from ngakit.output import format_response, info, success

cache_app = typer.Typer(no_args_is_help=True)


@cache_app.command("stats")
def cache_stats() -> None:
    """Show the cache backend, location and entry count.

    Example::

        ngakit cache stats --json
    """
    from ngakit.config import load_global_config, make_cache

    config = load_global_config()
    cache = make_cache(config.cache)
    if cache is None:
        info("Caching is disabled.")
        format_response({"enabled": False})
        return
    try:
        stats = {"enabled": True, **cache.stats()}
    finally:
        close = getattr(cache, "close", None)
        if close is not None:
            close()
    format_response(stats)


@cache_app.command("clear")
def cache_clear() -> None:
    """Delete every cached response."""
    from ngakit.config import load_global_config, make_cache

    cache = make_cache(load_global_config().cache)
    if cache is None:
        info("Caching is disabled; nothing to clear.")
        return
    try:
        asyncio.run(cache.clear())
    finally:
        close = getattr(cache, "close", None)
        if close is not None:
            close()
    success("Cache cleared.")
