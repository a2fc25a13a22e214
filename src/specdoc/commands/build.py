"""Build commands -- API description to page container, and straight to docs.

``specdoc build`` writes the :class:`~specdoc.models.PageContainer` JSON so
that it can be inspected, stored, or piped into ``specdoc render``.
``specdoc docs`` runs both stages in one process.

Nothing is written when loading, transforming, or rendering fails.
"""

from __future__ import annotations

from typing import Optional

import typer

from specdoc.builder import transform
from specdoc.commands import exit_on_error
from specdoc.config import resolve_config
from specdoc.models import PageContainer, SpecdocConfig, TransformOptions
from specdoc.output import debug, print_data, print_json, success
from specdoc.parser import dereference, load_document
from specdoc.render import TemplateRenderer


def build_container(source: str, config: SpecdocConfig) -> PageContainer:
    """Load *source* and transform it according to *config*.

    Args:
        source: File path, URL, or ``-`` for stdin.
        config: Effective configuration (see
            :func:`~specdoc.config.resolve_config`).

    Raises:
        InputNotFoundError: If *source* does not exist.
        SpecParseError: If *source* cannot be parsed, or a ``$ref`` fails
            to resolve with ``strict_refs`` enabled.
    """
    document = load_document(source)
    if config.transform.dereference:
        debug("Dereferencing internal $ref pointers")
        document = dereference(document)

    options = TransformOptions(strict_refs=config.transform.strict_refs)
    container = transform(document, options)
    debug(
        f"Built {container.page.kind.value} page '{container.page.slug}' "
        f"with {len(container.blocks)} top-level block(s)"
    )
    return container


def build_command(
    source: str = typer.Argument(help="API description: file path, URL, or '-' for stdin."),
    output_file: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the JSON to this file instead of stdout."
    ),
    strict_refs: Optional[bool] = typer.Option(
        None,
        "--strict-refs/--lenient-refs",
        help="Fail when a request-body $ref cannot be resolved.",
    ),
    deref: Optional[bool] = typer.Option(
        None,
        "--dereference/--no-dereference",
        help="Inline every internal $ref before transforming.",
    ),
    compact: bool = typer.Option(False, "--compact", help="Emit compact JSON."),
) -> None:
    """Transform an API description into page-container JSON.

    Example::

        specdoc build petstore.yaml -o petstore.page.json
        specdoc build op.json --compact | specdoc render html
    """
    with exit_on_error():
        config = resolve_config(cli_strict_refs=strict_refs, cli_dereference=deref)
        container = build_container(source, config)

    indent = None if compact else config.output.indent
    print_json(container.to_dict(), indent=indent, output_file=output_file)
    if output_file:
        success(f"Wrote {container.page.kind.value} page '{container.page.slug}' to {output_file}")


def docs_command(
    source: str = typer.Argument(help="API description: file path, URL, or '-' for stdin."),
    templates: Optional[str] = typer.Option(
        None,
        "--templates",
        "-t",
        help="Template directory or built-in set (markdown, html).",
    ),
    output_file: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the document to this file instead of stdout."
    ),
    strict_refs: Optional[bool] = typer.Option(
        None,
        "--strict-refs/--lenient-refs",
        help="Fail when a request-body $ref cannot be resolved.",
    ),
    deref: Optional[bool] = typer.Option(
        None,
        "--dereference/--no-dereference",
        help="Inline every internal $ref before transforming.",
    ),
) -> None:
    """Build and render documentation in one step.

    Example::

        specdoc docs petstore.yaml -t html -o petstore.html
    """
    with exit_on_error():
        config = resolve_config(
            cli_strict_refs=strict_refs, cli_dereference=deref, cli_templates=templates
        )
        container = build_container(source, config)
        rendered = TemplateRenderer(config.render.templates).render(container)

    print_data(rendered, output_file)
    if output_file:
        success(f"Wrote '{container.page.slug}' documentation to {output_file}")
