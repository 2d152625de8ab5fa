"""Typer application and CLI entry point for ngakit.

This module wires together the top-level Typer application and registers
the command groups (``forum``, ``topic``, ``post``, ``user``,
``notification``, ``message``, ``auth``, ``cache``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`ngakit.config`: Configuration resolution.
    :mod:`ngakit.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from ngakit import __version__
from ngakit.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="ngakit",
    help="Browse and post on the NGA forum from the terminal.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Command groups
# ------------------------------------------------------------------ #

from ngakit.commands.auth import auth_app  # noqa: E402
from ngakit.commands.cache import cache_app  # noqa: E402
from ngakit.commands.config import config_app  # noqa: E402
from ngakit.commands.forum import forum_app  # noqa: E402
from ngakit.commands.message import message_app  # noqa: E402
from ngakit.commands.notification import notification_app  # noqa: E402
from ngakit.commands.post import post_app  # noqa: E402
from ngakit.commands.topic import topic_app  # noqa: E402
from ngakit.commands.user import user_app  # noqa: E402

app.add_typer(forum_app, name="forum", help="Forum directory and forum favorites.")
app.add_typer(topic_app, name="topic", help="Topic listings, pages and favorites.")
app.add_typer(post_app, name="post", help="Replies, comments and votes.")
app.add_typer(user_app, name="user", help="User profiles.")
app.add_typer(notification_app, name="notification", help="Notifications.")
app.add_typer(message_app, name="message", help="Private messages.")
app.add_typer(auth_app, name="auth", help="Credential management.")
app.add_typer(cache_app, name="cache", help="Response cache management.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"ngakit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output, including library logs."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Bypass the response cache."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~ngakit.output.OutputManager` from CLI
    flags, routes the library's log records to stderr, and stores shared
    options in ``ctx.obj`` for the sub-commands.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        no_cache: Run without reading or writing the response cache.
    """
    from ngakit.output import OutputFormat, OutputManager, install_log_handler, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    install_log_handler(verbose)

    ctx.ensure_object(dict)
    ctx.obj["no_cache"] = no_cache
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from ngakit.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``ngakit`` console script.

    Unhandled :class:`~ngakit.exceptions.NgaError` instances cause a clean
    exit with the error's ``exit_code``. All other exceptions produce a
    crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from ngakit.exceptions import NgaError
        from ngakit.output import error

        if isinstance(exc, NgaError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
