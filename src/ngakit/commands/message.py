"""Private message commands. All of them require login."""

from __future__ import annotations

from typing import Optional

import typer

from ngakit.commands.common import fmt_time, page_footer, render, run
from ngakit.output import info, success

message_app = typer.Typer(no_args_is_help=True)


@message_app.command("list")
def message_list(
    ctx: typer.Context,
    page: int = typer.Option(1, "--page", "-p", help="Page number."),
) -> None:
    """List your conversations."""
    result = run(ctx, lambda client: client.messages.list().page(page).send())
    rows = [
        [
            c.id,
            ("* " if c.is_unread else "") + c.subject,
            c.other_username.display if c.other_username else "",
            str(c.message_count),
            fmt_time(c.last_time),
        ]
        for c in result.conversations
    ]
    render(result, ["ID", "Subject", "With", "Messages", "Last"], rows)
    info(page_footer(result.page, result.total_pages))


@message_app.command("show")
def message_show(
    ctx: typer.Context,
    conversation_id: str = typer.Argument(help="Conversation id."),
    page: int = typer.Option(1, "--page", "-p", help="Page number."),
) -> None:
    """Read one page of a conversation."""
    result = run(ctx, lambda client: client.messages.conversation(conversation_id).page(page).send())
    rows = [
        [
            fmt_time(m.time),
            "me" if m.is_mine else (m.from_username.display if m.from_username else m.from_user_id),
            m.content.plain_text,
        ]
        for m in result.messages
    ]
    render(result, ["Time", "From", "Content"], rows)
    info(page_footer(result.page, result.total_pages))


@message_app.command("send")
def message_send(
    ctx: typer.Context,
    to: str = typer.Option(..., "--to", help="Recipient username."),
    content: str = typer.Option(..., "--content", "-c", help="Message body."),
    subject: str = typer.Option("", "--subject", "-s", help="Conversation subject."),
) -> None:
    """Start a new conversation."""
    ack = run(ctx, lambda client: client.messages.send_new().to(to).subject(subject).content(content).send())
    success(ack.message or "Message sent.")


@message_app.command("reply")
def message_reply(
    ctx: typer.Context,
    conversation_id: str = typer.Argument(help="Conversation id."),
    content: str = typer.Option(..., "--content", "-c", help="Message body."),
    subject: Optional[str] = typer.Option(None, "--subject", "-s", help="Subject line."),
) -> None:
    """Reply in an existing conversation."""

    def build(client):
        builder = client.messages.reply(conversation_id).content(content)
        if subject:
            builder = builder.subject(subject)
        return builder.send()

    ack = run(ctx, build)
    success(ack.message or "Reply sent.")
