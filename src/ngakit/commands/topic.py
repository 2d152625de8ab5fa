"""Topic commands -- list, read, search and favorite topics.

Typical workflow::

    ngakit topic list fid:-7 --order postdate
    ngakit topic show 27455825 --page 2
    ngakit topic search fid:-7 "关键词" --content --range week
"""

from __future__ import annotations

from typing import Optional

import typer

from ngakit.commands.common import fmt, fmt_time, page_footer, render, run
from ngakit.models import FavoriteOp, ForumId
from ngakit.output import info, success

topic_app = typer.Typer(no_args_is_help=True)

_TOPIC_HEADERS = ["Topic ID", "Subject", "Author", "Replies", "Last post"]


def _render_topics(result, title: Optional[str] = None) -> None:
    rows = [
        [
            topic.id,
            topic.subject.full_text,
            topic.author.name.display,
            str(topic.replies),
            fmt_time(topic.last_posted_at),
        ]
        for topic in result.topics
    ]
    render(result, _TOPIC_HEADERS, rows, title=title)
    info(page_footer(result.page, result.total_pages))


@topic_app.command("list")
def topic_list(
    ctx: typer.Context,
    forum_id: str = typer.Argument(help="Forum id: a fid, or fid:N / stid:N. Negative fids need the prefix."),
    page: int = typer.Option(1, "--page", "-p", help="Page number."),
    order: str = typer.Option("lastpost", "--order", help="lastpost, postdate or recommend."),
    recommended: bool = typer.Option(False, "--recommended", help="Recommended topics only."),
) -> None:
    """List the topics of a forum."""
    fid = ForumId.parse(forum_id)
    result = run(
        ctx,
        lambda client: client.topics.list(fid).page(page).order(order).recommended_only(recommended).send(),
    )
    _render_topics(result, title=result.forum.name if result.forum else None)
    for sub in result.subforums:
        state = "shown" if sub.selected else "hidden"
        info(f"  subforum {sub.forum.name} [{fmt(sub.filter_id)}] {state}")


@topic_app.command("show")
def topic_show(
    ctx: typer.Context,
    topic_id: str = typer.Argument(help="Topic id."),
    page: int = typer.Option(1, "--page", "-p", help="Page number."),
    author: Optional[str] = typer.Option(None, "--author", help="Only posts by this user id."),
    post: Optional[str] = typer.Option(None, "--post", help="Jump to the page holding this post id."),
    anonymous_only: bool = typer.Option(False, "--anonymous-only", help="Only anonymous posts."),
) -> None:
    """Read one page of a topic."""

    def build(client):
        builder = client.topics.details(topic_id).page(page).anonymous_only(anonymous_only)
        if author:
            builder = builder.author(author)
        if post:
            builder = builder.post(post)
        return builder.send()

    result = run(ctx, build)
    rows = [
        [str(p.floor), p.author.name.display, fmt_time(p.posted_at), p.content.plain_text]
        for p in result.posts
    ]
    render(result, ["Floor", "Author", "Posted", "Content"], rows, title=result.topic.subject.full_text)
    info(page_footer(result.page, result.total_pages))


@topic_app.command("search")
def topic_search(
    ctx: typer.Context,
    forum_id: str = typer.Argument(help="Forum id to search in."),
    keyword: str = typer.Argument(help="Search keyword."),
    page: int = typer.Option(1, "--page", "-p", help="Page number."),
    content: bool = typer.Option(False, "--content", help="Search post bodies, not only titles."),
    recommended: bool = typer.Option(False, "--recommended", help="Recommended topics only."),
    time_range: str = typer.Option("all", "--range", help="all, day, week, month or year."),
) -> None:
    """Search topics in a forum."""
    fid = ForumId.parse(forum_id)
    result = run(
        ctx,
        lambda client: client.topics.search(fid, keyword)
        .page(page)
        .search_content(content)
        .recommended_only(recommended)
        .time_range(time_range)
        .send(),
    )
    _render_topics(result)


@topic_app.command("favorites")
def topic_favorites(
    ctx: typer.Context,
    folder: Optional[str] = typer.Option(None, "--folder", help="Favorites folder id."),
    page: int = typer.Option(1, "--page", "-p", help="Page number."),
) -> None:
    """List your favorite topics. Requires login."""

    def build(client):
        builder = client.topics.favorites().page(page)
        if folder:
            builder = builder.folder(folder)
        return builder.send()

    _render_topics(run(ctx, build), title="Favorite topics")


@topic_app.command("folders")
def topic_folders(ctx: typer.Context) -> None:
    """List your favorites folders. Requires login."""
    folders = run(ctx, lambda client: client.topics.favorite_folders())
    render(folders, ["Folder ID", "Name", "Topics"], [[f.id, f.name, fmt(f.count)] for f in folders])


@topic_app.command("favorite")
def topic_favorite(
    ctx: typer.Context,
    topic_id: str = typer.Argument(help="Topic id."),
    remove: bool = typer.Option(False, "--remove", help="Remove instead of add."),
    folder: Optional[str] = typer.Option(None, "--folder", help="Favorites folder id."),
) -> None:
    """Add a topic to, or remove it from, your favorites."""
    op = FavoriteOp.REMOVE if remove else FavoriteOp.ADD
    ack = run(ctx, lambda client: client.topics.modify_favorite(topic_id, op, folder))
    success(ack.message or ("Removed from favorites." if remove else "Added to favorites."))


@topic_app.command("by-user")
def topic_by_user(
    ctx: typer.Context,
    user_id: str = typer.Argument(help="User id."),
    page: int = typer.Option(1, "--page", "-p", help="Page number."),
) -> None:
    """List topics started by a user."""
    _render_topics(run(ctx, lambda client: client.topics.by_user(user_id).page(page).send()))
