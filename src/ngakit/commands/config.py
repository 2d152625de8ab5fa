"""Config commands -- view and modify the global configuration.

Provides the ``ngakit config`` sub-command group for reading, updating,
and resetting :class:`~ngakit.models.GlobalConfig`. Settings control the
base URL, cache backend and TTL bands, transport timeouts and the default
output format.
"""

from __future__ import annotations

import typer

from ngakit.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the current configuration. The token is masked.

    Example::

        ngakit config show --json
    """
    from ngakit.config import get_config_dir, load_global_config

    data = load_global_config().model_dump(mode="json")
    if data.get("auth"):
        data["auth"]["token"] = "********"
    info(f"Config directory: {get_config_dir()}")
    format_response(data)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g. 'cache.ttl_recent_seconds')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the existing field (bool, int,
    float or str) and the result is validated before saving. Use
    ``ngakit auth login`` for the credential.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        ngakit config set cache.backend memory
        ngakit config set request.device android
    """
    from pydantic import ValidationError

    from ngakit.config import load_global_config, save_global_config
    from ngakit.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    if keys[0] == "auth":
        error("Use 'ngakit auth login' to change the credential.")
        raise typer.Exit(code=2)
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object = value
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, (int, float)):
        try:
            coerced = type(current)(value)
        except ValueError:
            error(f"Expected a number for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc.errors()[0]['msg']}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip the confirmation."),
) -> None:
    """Reset configuration to defaults, keeping the stored credential."""
    from ngakit.config import load_global_config, save_global_config
    from ngakit.models import GlobalConfig

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig(auth=load_global_config().auth))
    success("Configuration reset to defaults.")
