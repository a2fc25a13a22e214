"""Render a :class:`~specdoc.models.PageContainer` through Jinja2 templates.

A template set is a directory holding ``index.j2`` -- the entry template --
and one partial per block type, named after the block's ``type`` tag
(``section.j2``, ``op.header.j2``, ``op.parameters.j2``, ...).  Every other
``*.j2`` file in the directory is addressable as a partial by its stem.

Templates receive ``page`` and ``blocks`` from the container (as plain
JSON-shaped dicts, with the same keys as ``specdoc build`` output) plus
these helpers:

* ``render_block(block)`` / ``render_blocks(blocks)`` -- render through the
  partial matching ``block.type``;
* ``partial(name, **context)`` -- render any partial by name;
* ``eq(a, b)``, ``includes(list, value)`` -- predicates;
* ``uppercase``, ``lowercase``, ``json`` -- also available as filters;
* ``schema_type(schema)`` -- a short type label for a schema node.

Block dicts must be indexed as ``group['items']`` and ``group['in']``:
``items`` is a ``dict`` method and ``in`` is a Jinja keyword.
"""

from __future__ import annotations

import json as _json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from jinja2 import (
    Environment,
    FileSystemLoader,
    TemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
)
from markupsafe import Markup
from pydantic import ValidationError

from specdoc.exceptions import InputNotFoundError, RenderError
from specdoc.models import PageContainer

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATES_DIR = Path(__file__).parent / "templates"
"""Directory holding the built-in template sets (``markdown``, ``html``)."""

DEFAULT_TEMPLATE_SET = "markdown"
INDEX_TEMPLATE = "index.j2"
TEMPLATE_SUFFIX = ".j2"

_AUTOESCAPED_SETS = frozenset({"html"})


def available_template_sets() -> list[str]:
    """Return the names of the built-in template sets, sorted."""
    return sorted(
        path.name
        for path in BUILTIN_TEMPLATES_DIR.iterdir()
        if (path / INDEX_TEMPLATE).is_file()
    )


def resolve_templates_dir(templates: Union[str, Path, None] = None) -> Path:
    """Map a template-set name or directory path to a directory.

    An existing directory always wins; otherwise *templates* is looked up
    among the built-in sets.  ``None`` selects the default Markdown set.

    Raises:
        InputNotFoundError: If *templates* is neither a directory nor a
            built-in set name.
    """
    if templates is None:
        templates = DEFAULT_TEMPLATE_SET

    path = Path(templates)
    if path.is_dir():
        return path

    builtin = BUILTIN_TEMPLATES_DIR / str(templates)
    if builtin.is_dir() and (builtin / INDEX_TEMPLATE).is_file():
        return builtin

    raise InputNotFoundError(
        f"Templates directory not found: {templates} "
        f"(built-in sets: {', '.join(available_template_sets())})"
    )


class TemplateRenderer:
    """Render page containers with one template set.

    Args:
        templates: Template directory or built-in set name.  Defaults to
            the built-in Markdown set.
        autoescape: Enable HTML autoescaping.  ``None`` enables it only for
            the built-in ``html`` set.

    Raises:
        InputNotFoundError: If the template directory does not exist.
        RenderError: If the directory has no ``index.j2``.

    Example::

        renderer = TemplateRenderer("html")
        html = renderer.render(container)
    """

    def __init__(
        self,
        templates: Union[str, Path, None] = None,
        autoescape: Optional[bool] = None,
    ) -> None:
        self.templates_dir = resolve_templates_dir(templates)
        if not (self.templates_dir / INDEX_TEMPLATE).is_file():
            raise RenderError(f"{INDEX_TEMPLATE} not found in {self.templates_dir}")

        if autoescape is None:
            autoescape = (
                self.templates_dir.parent == BUILTIN_TEMPLATES_DIR
                and self.templates_dir.name in _AUTOESCAPED_SETS
            )
        self.autoescape = autoescape
        self.partials = sorted(
            path.name[: -len(TEMPLATE_SUFFIX)]
            for path in self.templates_dir.glob(f"*{TEMPLATE_SUFFIX}")
            if path.name != INDEX_TEMPLATE
        )
        self.env = self._create_env()
        logger.debug(
            "Loaded %d partial(s) from %s", len(self.partials), self.templates_dir
        )

    def _create_env(self) -> Environment:
        env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=self.autoescape,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.globals.update(
            eq=eq,
            includes=includes,
            uppercase=uppercase,
            lowercase=lowercase,
            json=to_json,
            schema_type=schema_type,
            partial=self.partial,
            render_block=self.render_block,
            render_blocks=self.render_blocks,
        )
        env.filters.update(uppercase=uppercase, lowercase=lowercase, json=to_json)
        return env

    def render(self, container: Union[PageContainer, dict[str, Any]]) -> str:
        """Render *container* through ``index.j2``.

        Args:
            container: A :class:`~specdoc.models.PageContainer` or its JSON
                form (as produced by ``specdoc build``).

        Returns:
            The rendered document text.

        Raises:
            RenderError: If *container* is not a valid page container, a
                partial is missing, or a template fails to compile or render.
        """
        data = _container_data(container)
        try:
            return self.env.get_template(INDEX_TEMPLATE).render(**data)
        except TemplateSyntaxError as exc:
            raise RenderError(
                f"Template syntax error in {exc.name or exc.filename}:{exc.lineno}: {exc.message}"
            ) from exc
        except TemplateNotFound as exc:
            raise RenderError(f"Template not found: {exc.name}") from exc
        except TemplateError as exc:
            raise RenderError(f"Template error: {exc}") from exc

    def partial(self, name: str, **context: Any) -> Markup:
        """Render the partial ``<name>.j2`` with *context*."""
        if name not in self.partials:
            raise RenderError(
                f"No partial template '{name}{TEMPLATE_SUFFIX}' in {self.templates_dir}"
            )
        rendered = self.env.get_template(f"{name}{TEMPLATE_SUFFIX}").render(**context)
        return Markup(rendered)

    def render_block(self, block: dict[str, Any]) -> Markup:
        """Render one block through the partial named after its ``type``."""
        return self.partial(str(block.get("type", "")), block=block)

    def render_blocks(self, blocks: Iterable[dict[str, Any]]) -> Markup:
        """Render *blocks* in order and concatenate the results."""
        return Markup("").join(self.render_block(block) for block in blocks)


def render_page(
    container: Union[PageContainer, dict[str, Any]],
    templates: Union[str, Path, None] = None,
) -> str:
    """Render *container* with a one-off :class:`TemplateRenderer`."""
    return TemplateRenderer(templates).render(container)


def _container_data(container: Union[PageContainer, dict[str, Any]]) -> dict[str, Any]:
    if isinstance(container, PageContainer):
        return container.to_dict()
    try:
        return PageContainer.model_validate(container).to_dict()
    except ValidationError as exc:
        raise RenderError(f"Invalid page container: {exc}") from exc


# --- Template helpers ---


def eq(left: Any, right: Any) -> bool:
    return left == right


def includes(values: Any, value: Any) -> bool:
    """True when *values* is a list containing *value*."""
    return isinstance(values, (list, tuple)) and value in values


def uppercase(value: Any) -> str:
    return str(value).upper()


def lowercase(value: Any) -> str:
    return str(value).lower()


def to_json(value: Any) -> str:
    """Pretty-print *value* as JSON with a two-space indent."""
    return _json.dumps(value, indent=2, ensure_ascii=False, default=str)


def schema_type(schema: Any) -> str:
    """Summarise a schema node as a short label.

    ``{"type": "string"}`` -> ``string``; ``{"$ref": "#/components/schemas/Pet"}``
    -> ``Pet``; ``{"type": "array", "items": {"$ref": ".../Tag"}}`` ->
    ``array<Tag>``.  Swagger 2 style plain strings pass through.
    """
    if isinstance(schema, str):
        return schema
    if not isinstance(schema, dict) or not schema:
        return "any"
    if "$ref" in schema:
        return str(schema["$ref"]).split("/")[-1]

    kind = schema.get("type")
    if isinstance(kind, list):
        kind = " | ".join(str(k) for k in kind)
    if kind == "array":
        return f"array<{schema_type(schema.get('items'))}>"
    if kind:
        label = str(kind)
        if schema.get("format"):
            label += f" ({schema['format']})"
        return label
    for combinator in ("oneOf", "anyOf", "allOf"):
        if isinstance(schema.get(combinator), list):
            joiner = " & " if combinator == "allOf" else " | "
            return joiner.join(schema_type(s) for s in schema[combinator])
    if "properties" in schema:
        return "object"
    return "any"
