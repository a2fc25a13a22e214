"""Typer application and CLI entry point for specdoc.

This module wires together the top-level Typer application and registers the
built-in commands (``build``, ``render``, ``docs``, ``templates``,
``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.  It installs a signal handler and invokes the Typer app.
:class:`~specdoc.exceptions.SpecdocError` exits with the error's code;
any other exception is written to a crash log under the data directory.

See Also:
    :mod:`specdoc.config`: Configuration resolution.
    :mod:`specdoc.output`: Output and logging initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from specdoc import __version__
from specdoc.commands.build import build_command, docs_command
from specdoc.commands.config import config_app
from specdoc.commands.render import render_command, templates_command
from specdoc.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="specdoc",
    help="Turn OpenAPI descriptions into renderable documentation.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("build")(build_command)
app.command("render")(render_command)
app.command("docs")(docs_command)
app.command("templates")(templates_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specdoc {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every command.

    Installs the global :class:`~specdoc.output.OutputManager`, routes the
    ``specdoc`` logger to stderr, and stores the shared flags in ``ctx.obj``.
    """
    from specdoc.output import OutputManager, configure_logging, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))
    configure_logging(verbose=verbose, quiet=quiet, no_color=no_color)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to a crash log and return its path."""
    from specdoc.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(f"{type(exc).__name__}: {exc}\n\n{traceback.format_exc()}")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specdoc`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specdoc.exceptions import SpecdocError
        from specdoc.output import error

        if isinstance(exc, SpecdocError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
