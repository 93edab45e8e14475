"""Config commands -- view and modify global configuration.

Provides the ``ctatracker config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~ctatracker.models.GlobalConfig`).
"""

from __future__ import annotations

import typer

from ctatracker.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the stored global configuration.

    Example::

        ctatracker config show
    """
    import json

    from ctatracker.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(json.dumps(config.model_dump(mode="json")))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'request.timeout')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the existing field's type and the result is
    validated against :class:`~ctatracker.models.GlobalConfig` before saving.

    Example::

        ctatracker config set mode live-save
        ctatracker config set api_key 89dj2he89d8j3j3ksjhdue93j
        ctatracker config set replay.directory ~/cta-replays
    """
    from ctatracker.config import load_global_config, save_global_config
    from ctatracker.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, (int, float)):
        try:
            coerced = float(value)
        except ValueError:
            error(f"Expected a number for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults."""
    from ctatracker.config import reset_global_config

    if not yes:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    reset_global_config()
    success("Configuration reset to defaults.")
