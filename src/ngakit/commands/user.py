"""User commands -- look up profiles."""

from __future__ import annotations

import typer

from ngakit.commands.common import fmt, fmt_time, render, run
from ngakit.output import info

user_app = typer.Typer(no_args_is_help=True)


def _render_user(user) -> None:
    rows = [
        ["ID", user.id],
        ["Name", user.name.display],
        ["Reputation", fmt(user.reputation)],
        ["Posts", fmt(user.post_count)],
        ["Registered", fmt_time(user.registered_at)],
        ["Honor", fmt(user.honor)],
    ]
    render(user, ["Field", "Value"], rows)


@user_app.command("show")
def user_show(
    ctx: typer.Context,
    user_id: str = typer.Argument(help="User id."),
) -> None:
    """Show a user's profile."""
    _render_user(run(ctx, lambda client: client.users.get(user_id)))


@user_app.command("by-name")
def user_by_name(
    ctx: typer.Context,
    username: str = typer.Argument(help="Exact username."),
) -> None:
    """Show a user's profile by username."""
    _render_user(run(ctx, lambda client: client.users.get_by_name(username)))


@user_app.command("me")
def user_me(ctx: typer.Context) -> None:
    """Show your own profile. Requires login."""
    _render_user(run(ctx, lambda client: client.users.me()))


@user_app.command("search")
def user_search(
    ctx: typer.Context,
    keyword: str = typer.Argument(help="Part of a username."),
) -> None:
    """Search users by name."""
    users = run(ctx, lambda client: client.users.search(keyword))
    if not users:
        info("No users found.")
    render(users, ["User ID", "Name"], [[u.id, u.name.display] for u in users])
