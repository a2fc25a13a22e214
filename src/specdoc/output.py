"""Output formatting with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only: page-container JSON and rendered
  documents.  This is what ``specdoc build | specdoc render`` pipes.
* **stderr** -- all diagnostics (status, warnings, errors, debug traces).
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.  JSON is syntax-highlighted only when stdout is an
  interactive terminal.

Library modules never print; they log through :mod:`logging`.  The CLI
routes those records to stderr with :func:`configure_logging`, and reports
its own status lines through the module-level helpers (:func:`info`,
:func:`error`, ...), which delegate to the global :class:`OutputManager`.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

LOGGER_NAME = "specdoc"


class OutputManager:
    """Central manager for CLI output.

    Holds two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics).  Created once in
    :func:`~specdoc.app.main_callback` and installed with :func:`set_output`.

    Args:
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational and success messages.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._stdout = Console(file=sys.stdout, no_color=self._no_color)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def no_color(self) -> bool:
        return self._no_color

    @property
    def is_quiet(self) -> bool:
        """Whether quiet mode is enabled."""
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout or file)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str, output_file: Optional[str] = None) -> None:
        """Write *text* to stdout, or to *output_file* when given.

        A trailing newline is appended if missing.  Files are overwritten
        and written as UTF-8.
        """
        if not text.endswith("\n"):
            text += "\n"
        if output_file:
            path = Path(output_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        else:
            sys.stdout.write(text)
            sys.stdout.flush()

    def print_json(
        self,
        data: Any,
        indent: Optional[int] = 2,
        output_file: Optional[str] = None,
    ) -> None:
        """Serialise *data* as JSON and write it as data output.

        Highlighted with Rich only for an interactive, colour-enabled
        stdout; files and pipes always receive plain JSON.

        Args:
            data: JSON-compatible value.
            indent: Indent width; ``None`` or ``0`` gives compact output.
            output_file: Write here instead of stdout.
        """
        if indent:
            text = json.dumps(data, indent=indent, ensure_ascii=False, default=str)
        else:
            text = json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)

        if output_file or self._no_color or not _is_tty():
            self.print_data(text, output_file)
        else:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print a table: Rich when interactive, tab-separated otherwise."""
        if self._no_color or not _is_tty():
            self.print_data("\t".join(headers))
            for row in rows:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, "")

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, "green")

    def warning(self, message: str) -> None:
        """Print a warning to stderr. NOT suppressed by ``--quiet``."""
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {escape(message)}", markup=True)

    def error(self, message: str) -> None:
        """Print an error to stderr. Never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}", markup=True)

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown with ``--verbose``."""
        if self._verbose:
            self._emit(f"[debug] {message}", "dim")

    def _emit(self, message: str, style: str) -> None:
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(message, style=style or None, markup=False, highlight=False)


# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #


def configure_logging(
    verbose: bool = False, quiet: bool = False, no_color: bool = False
) -> logging.Logger:
    """Route ``specdoc.*`` log records to stderr through Rich.

    Level is ``WARNING`` by default, ``DEBUG`` with *verbose* and ``ERROR``
    with *quiet*.  Calling this again replaces the previously installed
    handler.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_specdoc_handler", False):
            logger.removeHandler(handler)

    no_color = no_color or _should_disable_color()
    handler = RichHandler(
        console=Console(file=sys.stderr, stderr=True, no_color=no_color),
        show_time=False,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler._specdoc_handler = True  # type: ignore[attr-defined]
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    if verbose:
        logger.setLevel(logging.DEBUG)
    elif quiet:
        logger.setLevel(logging.ERROR)
    else:
        logger.setLevel(logging.WARNING)
    return logger


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager`."""
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global :class:`OutputManager`. Used by the test suite."""
    global _output
    _output = None


def print_data(text: str, output_file: Optional[str] = None) -> None:
    """Write raw data via the global OutputManager."""
    get_output().print_data(text, output_file)


def print_json(data: Any, indent: Optional[int] = 2, output_file: Optional[str] = None) -> None:
    """Write JSON data via the global OutputManager."""
    get_output().print_json(data, indent, output_file)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    """Print a table via the global OutputManager."""
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    """Print info message to stderr via the global OutputManager."""
    get_output().info(message)


def success(message: str) -> None:
    """Print success message to stderr via the global OutputManager."""
    get_output().success(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global OutputManager."""
    get_output().warning(message)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)
