"""Built-in CLI commands for specdoc.

Each sub-module defines one command (or command group) that is registered
on the root Typer application by :mod:`specdoc.app`:

* :mod:`~specdoc.commands.build` -- ``specdoc build`` and ``specdoc docs``.
* :mod:`~specdoc.commands.render` -- ``specdoc render`` and
  ``specdoc templates``.
* :mod:`~specdoc.commands.config` -- ``specdoc config show|set|reset``.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from specdoc.exceptions import SpecdocError
from specdoc.output import error


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report a :class:`~specdoc.exceptions.SpecdocError` and exit with its code.

    Example::

        with exit_on_error():
            container = build_container(source, config)
    """
    try:
        yield
    except SpecdocError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
