"""Post commands -- reply, comment, vote and read per-post extras."""

from __future__ import annotations

from typing import Optional

import typer

from ngakit.commands.common import fmt_time, page_footer, render, run
from ngakit.output import info, print_data, success

post_app = typer.Typer(no_args_is_help=True)


def _light_rows(posts) -> list[list[str]]:
    return [[p.id, p.author.name.display, str(p.score), p.content.plain_text] for p in posts]


@post_app.command("reply")
def post_reply(
    ctx: typer.Context,
    topic_id: str = typer.Argument(help="Topic to reply to."),
    content: str = typer.Option(..., "--content", "-c", help="Reply body (BBCode)."),
    quote: Optional[str] = typer.Option(None, "--quote", help="Post id to quote."),
    attachment: Optional[list[str]] = typer.Option(None, "--attachment", help="Uploaded attachment id."),
    anonymous: bool = typer.Option(False, "--anonymous", help="Post anonymously."),
) -> None:
    """Reply to a topic. Requires login.

    Example::

        ngakit post reply 27455825 -c "[b]hello[/b]" --quote 612345678
    """

    def build(client):
        builder = client.posts.reply(topic_id).content(content).anonymous(anonymous)
        if quote:
            builder = builder.quote(quote)
        for item in attachment or []:
            builder = builder.attachment(item)
        return builder.send()

    result = run(ctx, build)
    render(result, ["Topic ID", "Post ID"], [[result.topic_id, result.post_id]])
    success("Reply posted.")


@post_app.command("comment")
def post_comment(
    ctx: typer.Context,
    topic_id: str = typer.Argument(help="Topic id."),
    post_id: str = typer.Argument(help="Post to comment on."),
    content: str = typer.Option(..., "--content", "-c", help="Comment body."),
) -> None:
    """Comment on a post. Requires login."""
    ack = run(ctx, lambda client: client.posts.comment(topic_id, post_id).content(content).send())
    success(ack.message or "Comment posted.")


@post_app.command("vote")
def post_vote(
    ctx: typer.Context,
    topic_id: str = typer.Argument(help="Topic id."),
    post_id: str = typer.Argument(help="Post id."),
    direction: str = typer.Argument(help="up or down."),
) -> None:
    """Vote a post up or down. Requires login."""
    result = run(ctx, lambda client: client.posts.vote(topic_id, post_id, direction))
    state = result.state
    render(
        result,
        ["Up", "Down", "Score", "Your vote"],
        [[str(state.up), str(state.down), str(state.score), state.user_vote.name.lower() if state.user_vote else ""]],
    )


@post_app.command("hot")
def post_hot(
    ctx: typer.Context,
    topic_id: str = typer.Argument(help="Topic id."),
    post_id: str = typer.Argument(help="Post id."),
) -> None:
    """Show the hot replies of a post."""
    posts = run(ctx, lambda client: client.posts.hot_replies(topic_id, post_id))
    render(posts, ["Post ID", "Author", "Score", "Content"], _light_rows(posts))


@post_app.command("comments")
def post_comments(
    ctx: typer.Context,
    topic_id: str = typer.Argument(help="Topic id."),
    post_id: str = typer.Argument(help="Post id."),
    page: int = typer.Option(1, "--page", "-p", help="Page number."),
) -> None:
    """Show the comments under a post."""
    result = run(ctx, lambda client: client.posts.comments(topic_id, post_id).page(page).send())
    render(result, ["Post ID", "Author", "Score", "Content"], _light_rows(result.comments))
    info(page_footer(result.page, result.total_pages))


@post_app.command("quote")
def post_quote(
    ctx: typer.Context,
    topic_id: str = typer.Argument(help="Topic id."),
    post_id: str = typer.Argument(help="Post id."),
) -> None:
    """Print the BBCode the forum uses to quote a post. Requires login."""
    print_data(run(ctx, lambda client: client.posts.quote_content(topic_id, post_id)))


@post_app.command("by-user")
def post_by_user(
    ctx: typer.Context,
    user_id: str = typer.Argument(help="User id."),
    page: int = typer.Option(1, "--page", "-p", help="Page number."),
) -> None:
    """List replies written by a user."""
    result = run(ctx, lambda client: client.posts.by_user(user_id).page(page).send())
    rows = [
        [p.topic_id, p.id, p.subject.full_text, fmt_time(p.posted_at), p.content.plain_text]
        for p in result.posts
    ]
    render(result, ["Topic ID", "Post ID", "Subject", "Posted", "Content"], rows)
    info(page_footer(result.page, result.total_pages))
