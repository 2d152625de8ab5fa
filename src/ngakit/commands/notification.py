"""Notification commands. All of them require login."""

from __future__ import annotations

import typer

from ngakit.commands.common import fmt, fmt_time, page_footer, render, run
from ngakit.output import info, success

notification_app = typer.Typer(no_args_is_help=True)


@notification_app.command("counts")
def notification_counts(ctx: typer.Context) -> None:
    """Show unread notification counters."""
    counts = run(ctx, lambda client: client.notifications.counts())
    rows = [
        ["reply", str(counts.reply)],
        ["quote", str(counts.quote)],
        ["at", str(counts.at)],
        ["comment", str(counts.comment)],
        ["system", str(counts.system)],
        ["message", str(counts.message)],
        ["total", str(counts.total)],
    ]
    render(counts, ["Type", "Unread"], rows)


@notification_app.command("list")
def notification_list(
    ctx: typer.Context,
    kind: str = typer.Argument("reply", help="reply, quote, at, comment, system, punishment or message."),
    page: int = typer.Option(1, "--page", "-p", help="Page number."),
) -> None:
    """List notifications of one type."""
    result = run(ctx, lambda client: client.notifications.list(kind).page(page).send())
    rows = [
        [n.id, fmt_time(n.time), n.from_username.display if n.from_username else "", fmt(n.topic_id), n.content]
        for n in result.notifications
    ]
    render(result, ["ID", "Time", "From", "Topic", "Content"], rows)
    info(page_footer(result.page, result.total_pages))


@notification_app.command("read")
def notification_read(
    ctx: typer.Context,
    notification_id: str = typer.Argument(help="Notification id."),
) -> None:
    """Mark one notification as read."""
    ack = run(ctx, lambda client: client.notifications.mark_read(notification_id))
    success(ack.message or "Marked as read.")


@notification_app.command("read-all")
def notification_read_all(
    ctx: typer.Context,
    kind: str = typer.Argument(help="Notification type to clear."),
) -> None:
    """Mark every notification of one type as read."""
    ack = run(ctx, lambda client: client.notifications.mark_all_read(kind))
    success(ack.message or "All marked as read.")
