"""Auth commands -- store, inspect and forget the forum credential.

The credential is the ``ngaPassportCid`` token and the numeric
``ngaPassportUid`` of a signed-in browser or app session. It is kept in
the global config file; ``NGAKIT_TOKEN`` and ``NGAKIT_UID`` override it.

Typical workflow::

    ngakit auth login --uid 42 --token ...
    ngakit auth status
    ngakit auth logout
"""

from __future__ import annotations

import os
from typing import Optional

import typer

from ngakit.output import error, format_response, info, success, suggest

auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("login")
def auth_login(
    uid: Optional[int] = typer.Option(None, "--uid", help="Numeric user id (ngaPassportUid)."),
    token: Optional[str] = typer.Option(None, "--token", help="Access token (ngaPassportCid)."),
) -> None:
    """Save a credential to the global config.

    Missing values are prompted for; the token prompt hides input.

    Raises:
        typer.Exit: With code 2 if the credential is invalid.
    """
    from pydantic import ValidationError

    from ngakit.config import load_global_config, save_global_config
    from ngakit.models import AuthConfig

    if uid is None:
        uid = typer.prompt("User id", type=int)
    if token is None:
        token = typer.prompt("Token", hide_input=True)

    try:
        auth = AuthConfig(token=token, uid=uid)
        auth.to_credential()
    except ValidationError as exc:
        error(f"Invalid credential: {exc.errors()[0]['msg']}")
        raise typer.Exit(code=2) from None

    config = load_global_config()
    save_global_config(config.model_copy(update={"auth": auth}))
    success(f"Logged in as uid {uid}.")
    suggest("Check it with 'ngakit user me'.")


@auth_app.command("logout")
def auth_logout() -> None:
    """Remove the stored credential."""
    from ngakit.config import load_global_config, save_global_config

    config = load_global_config()
    if config.auth is None:
        info("No credential stored.")
        return
    save_global_config(config.model_copy(update={"auth": None}))
    success("Credential removed.")


@auth_app.command("status")
def auth_status() -> None:
    """Show where the active credential comes from. Never prints the token."""
    from ngakit.config import ENV_TOKEN, ENV_UID, load_global_config

    config = load_global_config()
    if os.environ.get(ENV_TOKEN) and os.environ.get(ENV_UID):
        source, uid = "environment", os.environ[ENV_UID]
    elif config.auth is not None:
        source, uid = "config", str(config.auth.uid)
    else:
        source, uid = None, None

    format_response({"authenticated": uid is not None, "uid": uid, "source": source})
    if uid is None:
        suggest("Run 'ngakit auth login' to store a credential.")
