"""Group an operation's parameters by location.

Groups appear in the order their location is first seen during a single
left-to-right scan of the parameter list -- not alphabetically and not in a
fixed ``path``/``query``/``header``/``cookie`` order.  Two documents that
declare the same parameters in a different order therefore produce different
group orders.
"""

from __future__ import annotations

from typing import Any

from specdoc.builder._coerce import as_dict, as_list, text
from specdoc.models import ParamItem, ParameterBlock, ParameterGroup

DEFAULT_LOCATION = "query"


def group_parameters(parameters: list[Any]) -> ParameterBlock:
    """Convert raw OpenAPI parameter objects into a grouped :class:`ParameterBlock`.

    Args:
        parameters: The ``parameters`` array of an operation.  Entries that
            are not objects are skipped.

    Returns:
        A block with one group per distinct ``in`` value.

    Example::

        >>> block = group_parameters([
        ...     {"name": "a", "in": "query"},
        ...     {"name": "id", "in": "path"},
        ...     {"name": "b", "in": "query"},
        ... ])
        >>> [g.in_ for g in block.groups]
        ['query', 'path']
    """
    grouped: dict[str, list[ParamItem]] = {}
    for param in parameters:
        if not isinstance(param, dict):
            continue
        location = text(param.get("in"), DEFAULT_LOCATION)
        grouped.setdefault(location, []).append(parameter_item(param, location))

    return ParameterBlock(
        groups=[
            ParameterGroup(in_=location, title=location_title(location), items=items)
            for location, items in grouped.items()
        ]
    )


def parameter_item(param: dict[str, Any], location: str) -> ParamItem:
    """Build one :class:`ParamItem` from a Parameter Object."""
    return ParamItem(
        name=text(param.get("name")),
        in_=location,
        required=bool(param.get("required", False)),
        description=text(param.get("description")),
        type=param.get("schema") or param.get("type") or {},
        examples=normalize_examples(param),
    )


def normalize_examples(node: dict[str, Any]) -> list[Any]:
    """Return a node's examples as a list.

    A plural ``examples`` map yields its values in key order, a singular
    ``example`` yields a one-element list, and neither yields ``[]``.
    """
    examples = node.get("examples")
    if isinstance(examples, dict):
        return list(examples.values())
    if isinstance(examples, list):
        return list(examples)
    if node.get("example") is not None:
        return [node["example"]]
    return []


def location_title(location: str) -> str:
    """``"query"`` -> ``"Query"``; only the first character changes."""
    return location[:1].upper() + location[1:]


def body_parameter_block(schema: Any) -> ParameterBlock | None:
    """Expand an object schema's properties into a ``Body`` parameter group.

    Args:
        schema: A resolved request-body schema.

    Returns:
        A block with a single ``in: "body"`` group, or ``None`` when the
        schema declares no properties.
    """
    properties = as_dict(as_dict(schema).get("properties"))
    if not properties:
        return None

    required = as_list(as_dict(schema).get("required"))
    items = []
    for name, prop in properties.items():
        prop = as_dict(prop)
        items.append(
            ParamItem(
                name=str(name),
                in_="body",
                required=name in required,
                description=text(prop.get("description")),
                type=prop,
                examples=[prop["example"]] if prop.get("example") is not None else [],
            )
        )
    return ParameterBlock(groups=[ParameterGroup(in_="body", title="Body", items=items)])
