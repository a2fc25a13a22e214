"""Config commands -- view and modify the user configuration.

Provides the ``specdoc config`` sub-command group for reading, updating,
and resetting :class:`~specdoc.models.SpecdocConfig`, persisted in the
specdoc config directory.
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from specdoc.exit_codes import EXIT_INVALID_USAGE
from specdoc.output import error, info, print_json, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False,
        "--effective",
        help="Show the resolved configuration (project file and environment applied).",
    ),
) -> None:
    """Show the current configuration.

    Example::

        specdoc config show
        specdoc config show --effective
    """
    from specdoc.commands import exit_on_error
    from specdoc.config import global_config_path, load_global_config, resolve_config

    with exit_on_error():
        config = resolve_config() if effective else load_global_config()
    info(f"Config file: {global_config_path()}")
    print_json(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g., 'render.templates')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the existing field (bool or int;
    anything else is stored as a string) and the result is validated
    before saving.

    Raises:
        typer.Exit: With code 2 if the key is unknown, the value cannot be
            coerced, or validation fails.

    Example::

        specdoc config set transform.strict_refs true
        specdoc config set render.templates html
        specdoc config set output.indent 4
    """
    from specdoc.commands import exit_on_error
    from specdoc.config import load_global_config, save_global_config
    from specdoc.models import SpecdocConfig

    with exit_on_error():
        config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if not isinstance(target.get(k), dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    coerced = _coerce(target[final_key], value, key)
    target[final_key] = coerced

    try:
        new_config = SpecdocConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


def _coerce(current: Any, value: str, key: str) -> Any:
    if isinstance(current, bool):
        lowered = value.lower()
        if lowered not in ("true", "1", "yes", "false", "0", "no"):
            error(f"Expected true/false for {key}, got: {value}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        return lowered in ("true", "1", "yes")
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=EXIT_INVALID_USAGE) from None
    return value


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the configuration to defaults.

    Example::

        specdoc config reset --force
    """
    from specdoc.config import save_global_config
    from specdoc.models import SpecdocConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(SpecdocConfig())
    success("Configuration reset to defaults.")
