"""Render commands -- page-container JSON to a document.

``specdoc render`` is the second half of ``specdoc build | specdoc render``:
it reads the JSON produced by ``specdoc build`` and feeds it through a
template set.  ``specdoc templates`` lists the built-in sets.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from specdoc.commands import exit_on_error
from specdoc.config import resolve_config
from specdoc.exceptions import InputNotFoundError, SpecParseError
from specdoc.output import print_data, print_table, success
from specdoc.render import TemplateRenderer, available_template_sets
from specdoc.render.renderer import BUILTIN_TEMPLATES_DIR


def read_container_json(source: str) -> dict[str, Any]:
    """Read page-container JSON from a file or from stdin (``-``).

    Raises:
        InputNotFoundError: If the file does not exist.
        SpecParseError: If the input is empty or not a JSON object.
    """
    if source == "-":
        content = sys.stdin.read()
        label = "stdin"
    else:
        path = Path(source)
        if not path.is_file():
            raise InputNotFoundError(f"Input file not found: {source}")
        content = path.read_text(encoding="utf-8")
        label = source

    if not content.strip():
        raise SpecParseError(f"No page container received from {label}")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise SpecParseError(f"Invalid page container JSON in {label}: {exc}") from exc
    if not isinstance(data, dict):
        raise SpecParseError(f"Page container in {label} must be a JSON object")
    return data


def render_command(
    templates: Optional[str] = typer.Argument(
        None, help="Template directory or built-in set (markdown, html)."
    ),
    input_file: str = typer.Option(
        "-", "--input", "-i", help="Page-container JSON file, or '-' for stdin."
    ),
    output_file: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the document to this file instead of stdout."
    ),
) -> None:
    """Render page-container JSON through a template set.

    Example::

        specdoc build petstore.json | specdoc render
        specdoc render ./my-templates -i petstore.page.json -o petstore.md
    """
    with exit_on_error():
        config = resolve_config(cli_templates=templates)
        data = read_container_json(input_file)
        rendered = TemplateRenderer(config.render.templates).render(data)

    print_data(rendered, output_file)
    if output_file:
        success(f"Wrote {output_file}")


def templates_command() -> None:
    """List the built-in template sets."""
    rows = [
        [name, str(BUILTIN_TEMPLATES_DIR / name)] for name in available_template_sets()
    ]
    print_table(["Name", "Path"], rows, title="Built-in template sets")
