"""Forum commands -- browse the forum directory and manage forum favorites.

Typical workflow::

    ngakit forum list
    ngakit forum search 网事杂谈
    ngakit forum favorite fid:-7
"""

from __future__ import annotations

import typer

from ngakit.commands.common import fmt, render, run
from ngakit.models import FavoriteOp, ForumId, SubforumFilterOp
from ngakit.output import info, success

forum_app = typer.Typer(no_args_is_help=True)


def _forum_rows(forums) -> list[list[str]]:
    return [[fmt(forum.id), forum.name, fmt(forum.info)] for forum in forums]


@forum_app.command("list")
def forum_list(ctx: typer.Context) -> None:
    """List every forum, grouped by category.

    Example::

        ngakit forum list
        ngakit --json forum list
    """
    categories = run(ctx, lambda client: client.forums.list())
    rows = [
        [category.name, fmt(forum.id), forum.name, fmt(forum.info)]
        for category in categories
        for forum in category.forums
    ]
    render(categories, ["Category", "Forum ID", "Name", "Info"], rows, title="Forums")


@forum_app.command("search")
def forum_search(
    ctx: typer.Context,
    keyword: str = typer.Argument(help="Forum name to search for."),
) -> None:
    """Search forums by name."""
    forums = run(ctx, lambda client: client.forums.search(keyword))
    if not forums:
        info("No forums found.")
    render(forums, ["Forum ID", "Name", "Info"], _forum_rows(forums))


@forum_app.command("favorites")
def forum_favorites(ctx: typer.Context) -> None:
    """List your favorite forums. Requires login."""
    forums = run(ctx, lambda client: client.forums.favorites())
    render(forums, ["Forum ID", "Name", "Info"], _forum_rows(forums), title="Favorite forums")


@forum_app.command("favorite")
def forum_favorite(
    ctx: typer.Context,
    forum_id: str = typer.Argument(help="Forum id: a fid, or fid:N / stid:N. Negative fids need the prefix."),
    remove: bool = typer.Option(False, "--remove", help="Remove instead of add."),
) -> None:
    """Add a forum to, or remove it from, your favorites."""
    fid = ForumId.parse(forum_id)
    op = FavoriteOp.REMOVE if remove else FavoriteOp.ADD
    ack = run(ctx, lambda client: client.forums.modify_favorite(fid, op))
    success(ack.message or ("Removed from favorites." if remove else "Added to favorites."))


@forum_app.command("filter")
def forum_filter(
    ctx: typer.Context,
    forum_id: str = typer.Argument(help="Parent forum id."),
    filter_id: str = typer.Argument(help="Subforum filter id, as shown by 'topic list'."),
    hide: bool = typer.Option(False, "--hide", help="Hide the subforum instead of showing it."),
) -> None:
    """Show or hide a subforum's topics in its parent listing."""
    fid = ForumId.parse(forum_id)
    op = SubforumFilterOp.HIDE if hide else SubforumFilterOp.SHOW
    ack = run(ctx, lambda client: client.forums.set_subforum_filter(fid, filter_id, op))
    success(ack.message or ("Subforum hidden." if hide else "Subforum shown."))
