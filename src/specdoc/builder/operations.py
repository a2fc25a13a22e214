"""Convert one OpenAPI operation into a documentation section.

The children of an operation section always come in the same order:

1. the operation description,
2. the grouped parameters,
3. the request body, its body-derived parameters, and its examples,
4. response examples followed by one aggregate responses block,
5. the flattened security requirements.

Any of these is left out when the operation has nothing to say about it.
Response and security flattening are shared with the stand-alone operation
page built by :mod:`specdoc.builder.document`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specdoc.builder._coerce import as_dict, as_list, text
from specdoc.builder.parameters import body_parameter_block, group_parameters
from specdoc.builder.sections import BuildContext, nested_section
from specdoc.exceptions import RefResolutionError
from specdoc.models import (
    Block,
    ExampleBlock,
    MediaTypeEntry,
    OverviewDescriptionBlock,
    RequestBodyBlock,
    ResponseBlock,
    ResponseEntry,
    SectionBlock,
    SecurityBlock,
    SecurityRequirement,
)
from specdoc.parser.resolver import lookup_component_schema

logger = logging.getLogger(__name__)

OPERATION_SECTION_DEPTH = 3


def build_operation_section(
    operation: dict[str, Any],
    method: str,
    path: str,
    document: dict[str, Any],
    context: Optional[BuildContext] = None,
) -> SectionBlock:
    """Build the section documenting one operation.

    Args:
        operation: The Operation Object.
        method: HTTP method key it was found under (any case).
        path: The path template it was found under.
        document: The full API description, used to resolve request-body
            ``$ref`` pointers.
        context: Build context supplying the section level.  Defaults to a
            fresh context at operation depth (level 3).

    Returns:
        A :class:`~specdoc.models.SectionBlock` titled by the operation's
        summary, falling back to its operationId and then ``"METHOD /path"``.
    """
    if context is None:
        context = BuildContext(document=document, depth=OPERATION_SECTION_DEPTH)

    title = (
        text(operation.get("summary"))
        or text(operation.get("operationId"))
        or f"{method.upper()} {path}"
    )

    def children(_: BuildContext) -> list[Block]:
        blocks: list[Block] = []
        if operation.get("description"):
            blocks.append(OverviewDescriptionBlock(body=text(operation["description"])))

        parameters = as_list(operation.get("parameters"))
        if parameters:
            blocks.append(group_parameters(parameters))

        request_body = operation.get("requestBody")
        if request_body:
            blocks.extend(
                build_request_body_blocks(
                    as_dict(request_body), context, f"{method.upper()} {path}"
                )
            )

        responses = operation.get("responses")
        if responses:
            blocks.extend(build_response_blocks(as_dict(responses)))

        security = build_security_block(as_list(operation.get("security")))
        if security is not None:
            blocks.append(security)
        return blocks

    return nested_section(context, title, children)


def build_request_body_blocks(
    request_body: dict[str, Any],
    context: BuildContext,
    label: str = "",
) -> list[Block]:
    """Build the request-body block, body parameters, and request examples.

    The first declared media type's schema is resolved (following a
    ``$ref`` into ``components.schemas`` by its final path segment) and, if
    it is an object schema, its properties become a ``Body`` parameter
    group.

    Args:
        request_body: The Request Body Object.
        context: Build context holding the document and transform options.
        label: ``"METHOD /path"`` of the owning operation, for diagnostics.

    Returns:
        ``[RequestBodyBlock, ParameterBlock?, ExampleBlock*]``.

    Raises:
        RefResolutionError: If the schema reference cannot be resolved and
            ``context.options.strict_refs`` is set.
    """
    content = as_dict(request_body.get("content"))
    required = request_body.get("required")
    description = request_body.get("description")

    blocks: list[Block] = [
        RequestBodyBlock(
            description=None if description is None else text(description),
            required=None if required is None else bool(required),
            media_types=[_media_type_entry(mt, media) for mt, media in content.items()],
        )
    ]

    first_media = as_dict(next(iter(content.values()), None))
    schema = first_media.get("schema")
    if schema:
        resolved = _resolve_body_schema(schema, context, label)
        body_params = body_parameter_block(resolved)
        if body_params is not None:
            blocks.append(body_params)

    for media_type, media in content.items():
        examples = as_dict(media).get("examples")
        if isinstance(examples, dict) and examples:
            blocks.append(ExampleBlock(media_type=media_type, examples=list(examples.values())))

    return blocks


def _resolve_body_schema(schema: Any, context: BuildContext, label: str) -> Any:
    ref = schema.get("$ref") if isinstance(schema, dict) else None
    if ref is None:
        return schema

    resolved = lookup_component_schema(context.document, ref)
    if resolved is None:
        message = f"Cannot resolve request body schema {ref!r}"
        if label:
            message += f" of {label}"
        if context.options.strict_refs:
            raise RefResolutionError(message, ref=str(ref))
        logger.warning("%s; no body parameters derived", message)
    return resolved


def build_response_entries(responses: dict[str, Any]) -> list[ResponseEntry]:
    """Flatten a Responses Object into one entry per status code, in key order."""
    entries = []
    for status, response in responses.items():
        response = as_dict(response)
        content = as_dict(response.get("content"))
        media = [_media_type_entry(mt, body) for mt, body in content.items()]
        entries.append(
            ResponseEntry(
                status=str(status),
                description=text(response.get("description")),
                primary=media[0] if media else None,
                alternates=media[1:],
            )
        )
    return entries


def build_response_blocks(responses: dict[str, Any]) -> list[Block]:
    """Build response examples followed by the aggregate responses block.

    Examples are collected across every status code and media type: a
    non-empty ``examples`` map contributes its values, otherwise a singular
    ``example`` contributes a one-element list.
    """
    examples: list[Block] = []
    for response in responses.values():
        for media_type, media in as_dict(as_dict(response).get("content")).items():
            media = as_dict(media)
            named = media.get("examples")
            if isinstance(named, dict) and named:
                examples.append(ExampleBlock(media_type=media_type, examples=list(named.values())))
            elif media.get("example") is not None:
                examples.append(ExampleBlock(media_type=media_type, examples=[media["example"]]))

    entries = build_response_entries(responses)
    if not entries:
        return examples
    return [*examples, ResponseBlock(responses=entries)]


def build_security_block(security: list[Any]) -> Optional[SecurityBlock]:
    """Flatten security requirement objects into ``{name, scopes}`` pairs.

    Order is preserved: requirement objects in list order, then scheme names
    in key order.  An empty requirement object (anonymous access) adds
    nothing.

    Returns:
        The block, or ``None`` when no requirement remains.
    """
    requirements = [
        SecurityRequirement(name=str(name), scopes=as_list(scopes))
        for requirement in security
        for name, scopes in as_dict(requirement).items()
    ]
    if not requirements:
        return None
    return SecurityBlock(requirements=requirements)


def _media_type_entry(media_type: str, media: Any) -> MediaTypeEntry:
    return MediaTypeEntry(media_type=str(media_type), schema_=as_dict(media).get("schema") or {})
