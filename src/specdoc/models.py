"""Canonical Pydantic models shared across all specdoc modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Document model (IR)** -- produced by :mod:`specdoc.builder` and consumed by
:mod:`specdoc.render`:
    :class:`Page`, the block variants (:class:`SectionBlock`,
    :class:`OverviewMetaBlock`, :class:`OverviewDescriptionBlock`,
    :class:`ServerBlock`, :class:`OpHeaderBlock`, :class:`OpDescriptionBlock`,
    :class:`ParameterBlock`, :class:`RequestBodyBlock`, :class:`ExampleBlock`,
    :class:`ResponseBlock`, :class:`SecurityBlock`), the :data:`Block` union,
    and :class:`PageContainer`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`TransformConfig`, :class:`RenderConfig`, :class:`OutputConfig`,
    and :class:`SpecdocConfig`, plus the per-call :class:`TransformOptions`.

Block variants are discriminated by their ``type`` field. Attribute names are
snake_case; the JSON keys (``operationId``, ``mediaTypes``, ``in``, ...) are
field aliases, so always serialise with :meth:`PageContainer.to_dict` rather
than a bare ``model_dump()``. Optional fields left at ``None`` are omitted
from the output entirely.
"""

from __future__ import annotations

import enum
import json
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer


class _IRModel(BaseModel):
    """Base for immutable IR nodes that accept both aliases and field names."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # Only the node's own unset optionals are dropped; opaque payloads keep nulls.
        return {key: value for key, value in handler(self).items() if value is not None}


# --- Page ---


class PageKind(str, enum.Enum):
    """Kind of documentation page a :class:`PageContainer` describes."""

    OVERVIEW = "overview"
    OPERATION = "operation"
    SCHEMA = "schema"


class Page(_IRModel):
    """Identity and metadata for one rendered document."""

    kind: PageKind
    id: str = "unknown"
    title: str
    slug: str


# --- Blocks ---


class SectionBlock(_IRModel):
    """Structural grouping; the only block that nests other blocks.

    ``level`` is the 1-based nesting depth. On overview pages the document
    root is level 1, tag sections level 2, and operation sections level 3.
    """

    type: Literal["section"] = "section"
    title: str
    level: int
    children: list[Block] = Field(default_factory=list)


class LicenseInfo(_IRModel):
    name: Optional[str] = None
    url: Optional[str] = None


class OverviewMetaBlock(_IRModel):
    """Contact, license, and terms-of-service metadata of an API.

    Never emitted when all three fields would be empty.
    """

    type: Literal["overview.meta"] = "overview.meta"
    email: Optional[str] = None
    license: Optional[LicenseInfo] = None
    terms_of_service: Optional[str] = Field(default=None, alias="termsOfService")


class OverviewDescriptionBlock(_IRModel):
    """Free-text narrative: API, tag, and operation descriptions and external-docs links."""

    type: Literal["overview.description"] = "overview.description"
    body: str


class ServerEntry(_IRModel):
    url: str
    description: Optional[str] = None


class ServerBlock(_IRModel):
    type: Literal["overview.servers"] = "overview.servers"
    servers: list[ServerEntry] = Field(default_factory=list)


class OpHeaderBlock(_IRModel):
    """Heading of a stand-alone operation page."""

    type: Literal["op.header"] = "op.header"
    title: str = ""
    method: str = "GET"
    path: str = "/"
    operation_id: str = Field(default="", alias="operationId")


class OpDescriptionBlock(_IRModel):
    type: Literal["op.description"] = "op.description"
    body: str


class ParamItem(_IRModel):
    """One parameter, or one property of a resolved request-body schema.

    ``type`` is the parameter's schema node, carried through untouched.
    ``examples`` is always a list, possibly empty.
    """

    kind: Literal["param"] = "param"
    name: str = ""
    in_: str = Field(alias="in")
    required: bool = False
    description: str = ""
    type: Any = Field(default_factory=dict)
    examples: list[Any] = Field(default_factory=list)


class ParameterGroup(_IRModel):
    in_: str = Field(alias="in")
    title: str
    items: list[ParamItem] = Field(default_factory=list)


class ParameterBlock(_IRModel):
    """Parameters grouped by location, groups in first-seen order."""

    type: Literal["op.parameters"] = "op.parameters"
    groups: list[ParameterGroup] = Field(default_factory=list)


class MediaTypeEntry(_IRModel):
    """A media type paired with its (opaque) schema node."""

    media_type: str = Field(alias="mediaType")
    schema_: Any = Field(default_factory=dict, alias="schema")


class RequestBodyBlock(_IRModel):
    type: Literal["op.requestBody"] = "op.requestBody"
    description: Optional[str] = None
    required: Optional[bool] = None
    media_types: list[MediaTypeEntry] = Field(default_factory=list, alias="mediaTypes")


class ExampleBlock(_IRModel):
    type: Literal["op.example"] = "op.example"
    media_type: str = Field(alias="mediaType")
    examples: list[Any] = Field(default_factory=list)


class ResponseEntry(_IRModel):
    """One status code of an operation.

    ``primary`` is the first declared media type and is left unset (and so
    omitted from JSON) when the response has no content; ``alternates``
    holds the remaining media types in declaration order.
    """

    status: str
    description: str = ""
    primary: Optional[MediaTypeEntry] = None
    alternates: list[MediaTypeEntry] = Field(default_factory=list)


class ResponseBlock(_IRModel):
    type: Literal["op.responses"] = "op.responses"
    responses: list[ResponseEntry] = Field(default_factory=list)


class SecurityRequirement(_IRModel):
    name: str
    scopes: list[Any] = Field(default_factory=list)


class SecurityBlock(_IRModel):
    type: Literal["op.security"] = "op.security"
    requirements: list[SecurityRequirement] = Field(default_factory=list)


Block = Annotated[
    Union[
        SectionBlock,
        OverviewMetaBlock,
        OverviewDescriptionBlock,
        ServerBlock,
        OpHeaderBlock,
        OpDescriptionBlock,
        ParameterBlock,
        RequestBodyBlock,
        ExampleBlock,
        ResponseBlock,
        SecurityBlock,
    ],
    Field(discriminator="type"),
]
"""Tagged union of every block variant, discriminated by ``type``."""

SectionBlock.model_rebuild()


class PageContainer(_IRModel):
    """Root of the IR: page metadata plus the ordered block tree.

    This is the sole contract between the transform and the renderer.

    Example::

        container = transform(document)
        print(container.to_json())
    """

    page: Page
    blocks: list[Block] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible form: aliased keys, absent fields omitted."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialise to a JSON document string.

        Args:
            indent: Indentation width, or ``None`` for compact output.
        """
        separators = (",", ":") if indent is None else None
        return json.dumps(
            self.to_dict(), indent=indent, separators=separators, ensure_ascii=False
        )


# --- Transform options ---


class TransformOptions(BaseModel):
    """Per-call switches for :func:`~specdoc.builder.transform`.

    ``strict_refs`` turns an unresolvable request-body ``$ref`` into a
    :class:`~specdoc.exceptions.RefResolutionError`. When ``False`` (the
    default) the reference is logged as a warning and the operation simply
    gets no body-derived parameters.
    """

    strict_refs: bool = False


# --- Configuration ---


class TransformConfig(BaseModel):
    """Defaults for the build stage."""

    strict_refs: bool = Field(
        default=False, description="Fail on unresolvable request-body $ref"
    )
    dereference: bool = Field(
        default=False, description="Inline all internal $ref pointers before transforming"
    )


class RenderConfig(BaseModel):
    """Defaults for the render stage."""

    templates: str = Field(
        default="markdown",
        description="Built-in template set name or path to a template directory",
    )


class OutputConfig(BaseModel):
    """Formatting of the PageContainer JSON written by ``specdoc build``."""

    indent: int = Field(default=2, description="JSON indent width (0 for compact)")


class SpecdocConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specdoc/config.json``.

    Loaded and saved by :func:`~specdoc.config.load_global_config` and
    :func:`~specdoc.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specdoc.config.resolve_config`
    for the full precedence chain.
    """

    transform: TransformConfig = Field(default_factory=TransformConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
