"""Top-level transform from an API description to a :class:`PageContainer`.

Input documents come in two shapes, modelled as the :data:`Source` union:

* :class:`ApiDocumentSource` -- a full OpenAPI document (truthy ``openapi``
  and ``info``).  Produces an *overview* page: one root section holding the
  API metadata and one section per declared tag, each listing the
  operations carrying that tag.
* :class:`OperationSource` -- anything else, treated as a single bare
  Operation Object.  Produces an *operation* page.

:func:`classify_source` performs the structural sniff; :func:`transform`
dispatches on the result.  Neither inspects the OpenAPI version.

The transform is pure: it never mutates the input, keeps no state between
calls, and returns structurally identical output for identical input.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from specdoc.builder._coerce import as_dict, as_list, text
from specdoc.builder.operations import (
    build_operation_section,
    build_response_entries,
    build_security_block,
)
from specdoc.builder.parameters import group_parameters
from specdoc.builder.sections import BuildContext, nested_section
from specdoc.models import (
    Block,
    LicenseInfo,
    OpDescriptionBlock,
    OpHeaderBlock,
    OverviewDescriptionBlock,
    OverviewMetaBlock,
    Page,
    PageContainer,
    PageKind,
    ResponseBlock,
    SectionBlock,
    ServerBlock,
    ServerEntry,
    TransformOptions,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = frozenset(
    {"get", "put", "post", "delete", "options", "head", "patch", "trace"}
)


@dataclass(frozen=True)
class ApiDocumentSource:
    """A full OpenAPI document."""

    document: dict[str, Any]


@dataclass(frozen=True)
class OperationSource:
    """A single bare Operation Object (optionally carrying ``method``/``path``)."""

    operation: dict[str, Any]


Source = Union[ApiDocumentSource, OperationSource]


def classify_source(data: dict[str, Any]) -> Source:
    """Decide whether *data* is a full API document or a bare operation."""
    if data.get("openapi") and data.get("info"):
        return ApiDocumentSource(data)
    return OperationSource(data)


def transform(data: dict[str, Any], options: Optional[TransformOptions] = None) -> PageContainer:
    """Transform an API description into a :class:`~specdoc.models.PageContainer`.

    Args:
        data: A parsed JSON/YAML document, either a full OpenAPI document or
            a bare operation object.
        options: Transform switches; defaults to lenient ``$ref`` handling.

    Returns:
        The page metadata and its block tree.

    Raises:
        RefResolutionError: Only when ``options.strict_refs`` is set and a
            request-body schema reference cannot be resolved.

    Example::

        container = transform(load_document("petstore.json"))
        container.page.slug  # 'swagger-petstore'
    """
    options = options or TransformOptions()
    source = classify_source(data)
    if isinstance(source, ApiDocumentSource):
        return build_overview_page(source.document, options)
    if isinstance(source, OperationSource):
        return build_operation_page(source.operation)
    raise TypeError(f"Unhandled source type: {type(source).__name__}")


def slugify(title: str) -> str:
    """Lowercase *title*, collapse non-alphanumeric runs to ``-``, and trim ``-``.

    >>> slugify("Swagger Petstore")
    'swagger-petstore'
    """
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


# --- Overview pages ---


def build_overview_page(
    document: dict[str, Any], options: Optional[TransformOptions] = None
) -> PageContainer:
    """Build the overview page of a full API document."""
    info = as_dict(document.get("info"))
    title = text(info.get("title"), "Untitled API")
    page = Page(kind=PageKind.OVERVIEW, id="unknown", title=title, slug=slugify(title))

    version = text(info.get("version"))
    root_title = f"{title} ({version})" if version else title
    context = BuildContext(document=document, options=options or TransformOptions())

    tags = [tag for tag in as_list(document.get("tags")) if isinstance(tag, dict)]
    logger.debug("Building overview page %r with %d tag(s)", title, len(tags))

    def root_children(ctx: BuildContext) -> list[Block]:
        blocks: list[Block] = [*_overview_blocks(document, info)]
        blocks.extend(_tag_section(ctx, tag) for tag in tags)
        return blocks

    return PageContainer(page=page, blocks=[nested_section(context, root_title, root_children)])


def _overview_blocks(document: dict[str, Any], info: dict[str, Any]) -> Iterator[Block]:
    meta = _overview_meta(info)
    if meta is not None:
        yield meta

    if info.get("description"):
        yield OverviewDescriptionBlock(body=text(info["description"]))

    servers = [server for server in as_list(document.get("servers")) if isinstance(server, dict)]
    if servers:
        yield ServerBlock(
            servers=[
                ServerEntry(
                    url=text(server.get("url")),
                    description=text(server.get("description")) or None,
                )
                for server in servers
            ]
        )

    link = _external_docs_link(document.get("externalDocs"))
    if link is not None:
        yield link


def _overview_meta(info: dict[str, Any]) -> Optional[OverviewMetaBlock]:
    email = as_dict(info.get("contact")).get("email")
    license_ = info.get("license")
    terms = info.get("termsOfService")
    if not (email or license_ or terms):
        return None

    return OverviewMetaBlock(
        email=text(email) or None,
        license=_license_info(license_),
        terms_of_service=text(terms) or None,
    )


def _license_info(license_: Any) -> Optional[LicenseInfo]:
    if not license_:
        return None
    if not isinstance(license_, dict):
        return LicenseInfo(name=text(license_))
    return LicenseInfo(
        name=text(license_.get("name")) or None,
        url=text(license_.get("url")) or None,
    )


def _external_docs_link(external_docs: Any) -> Optional[OverviewDescriptionBlock]:
    """Render an External Documentation Object as ``"description ([link](url))"``."""
    external_docs = as_dict(external_docs)
    if not external_docs.get("description"):
        return None
    body = f"{text(external_docs['description'])} ([link]({text(external_docs.get('url'))}))"
    return OverviewDescriptionBlock(body=body)


def _tag_section(context: BuildContext, tag: dict[str, Any]) -> SectionBlock:
    name = text(tag.get("name"))

    def children(ctx: BuildContext) -> list[Block]:
        blocks: list[Block] = []
        if tag.get("description"):
            blocks.append(OverviewDescriptionBlock(body=text(tag["description"])))
        link = _external_docs_link(tag.get("externalDocs"))
        if link is not None:
            blocks.append(link)
        for path, method, operation in iter_tagged_operations(context.document, name):
            blocks.append(build_operation_section(operation, method, path, ctx.document, ctx))
        return blocks

    return nested_section(context, name, children)


def iter_tagged_operations(
    document: dict[str, Any], tag: str
) -> Iterator[tuple[str, str, dict[str, Any]]]:
    """Yield ``(path, method, operation)`` for operations tagged *tag*.

    Paths and methods are visited in declaration order.  Path-item entries
    that are not HTTP methods (``parameters``, ``summary``, extensions) and
    operations without a ``tags`` list are skipped.
    """
    for path, path_item in as_dict(document.get("paths")).items():
        for method, operation in as_dict(path_item).items():
            if str(method).lower() not in HTTP_METHODS or not isinstance(operation, dict):
                continue
            if tag in as_list(operation.get("tags")):
                yield str(path), str(method), operation


# --- Operation pages ---


def build_operation_page(operation: dict[str, Any]) -> PageContainer:
    """Build a stand-alone page for a bare operation object.

    Unlike operation sections on overview pages, this page has no
    request-body or example blocks.
    """
    summary = text(operation.get("summary"))
    operation_id = text(operation.get("operationId"))
    page = Page(
        kind=PageKind.OPERATION,
        id=operation_id or summary or "unknown",
        title=summary or "Untitled Operation",
        slug=operation_id or "unknown-operation",
    )

    blocks: list[Block] = [
        OpHeaderBlock(
            title=summary,
            method=text(operation.get("method"), "GET").upper(),
            path=text(operation.get("path"), "/"),
            operation_id=operation_id,
        )
    ]

    if operation.get("description"):
        blocks.append(OpDescriptionBlock(body=text(operation["description"])))

    parameters = as_list(operation.get("parameters"))
    if parameters:
        blocks.append(group_parameters(parameters))

    responses = build_response_entries(as_dict(operation.get("responses")))
    if responses:
        blocks.append(ResponseBlock(responses=responses))

    security = build_security_block(as_list(operation.get("security")))
    if security is not None:
        blocks.append(security)

    logger.debug("Built operation page %r with %d block(s)", page.id, len(blocks))
    return PageContainer(page=page, blocks=blocks)
