"""Resolve ``$ref`` JSON Reference pointers in API descriptions.

Three entry points, from narrowest to widest:

* :func:`lookup_component_schema` -- the transform's lookup rule for request
  bodies: take the final path segment of the reference and look it up in
  ``components.schemas``.  Returns ``None`` when the name is unknown.
* :func:`resolve_pointer` -- navigate a full internal JSON Pointer
  (``#/components/schemas/Pet``), raising
  :class:`~specdoc.exceptions.RefResolutionError` when it leads nowhere.
* :func:`dereference` -- deep-copy a whole document, inlining every internal
  reference.  Circular references are left unresolved at the cycle point.

Only **internal** references (those starting with ``#/``) are supported.
"""

from __future__ import annotations

import copy
from typing import Any, Optional

from specdoc.exceptions import RefResolutionError


def lookup_component_schema(document: dict[str, Any], ref: str) -> Optional[Any]:
    """Look up a component schema by the last segment of *ref*.

    ``"#/components/schemas/Pet"`` and ``"Pet"`` both resolve to
    ``document["components"]["schemas"]["Pet"]``.

    Args:
        document: The API description the reference belongs to.
        ref: The ``$ref`` string.

    Returns:
        The schema node, or ``None`` if the document declares no such
        component schema.
    """
    components = document.get("components")
    if not isinstance(components, dict):
        return None
    schemas = components.get("schemas")
    if not isinstance(schemas, dict):
        return None
    name = str(ref).split("/")[-1]
    return schemas.get(name)


def resolve_pointer(document: dict[str, Any], ref: str) -> Any:
    """Resolve a single ``$ref`` string against *document*.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``) and
    list indices.

    Args:
        document: The root document to resolve against.
        ref: The ``$ref`` string (e.g., ``"#/components/schemas/Pet"``).

    Returns:
        The value found at the referenced path.

    Raises:
        RefResolutionError: If the reference is external (does not start
            with ``#/``) or any segment of the pointer does not exist.
    """
    if not isinstance(ref, str) or not ref.startswith("#/"):
        raise RefResolutionError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled.",
            ref=str(ref),
        )

    current: Any = document
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise RefResolutionError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found",
                    ref=ref,
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise RefResolutionError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'",
                    ref=ref,
                ) from exc
        else:
            raise RefResolutionError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}",
                ref=ref,
            )

    return current


def dereference(document: dict[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *document* with internal ``$ref`` pointers inlined.

    The input is never mutated.  A reference that is already being resolved
    further up the current branch is a cycle; it is kept as its ``$ref``
    dict so that recursive schemas stay finite.

    Args:
        document: The raw API description.

    Returns:
        A **new** dictionary with every resolvable reference replaced by
        its target.

    Raises:
        RefResolutionError: If a reference is external or points nowhere.

    Example::

        raw = load_document("petstore.yaml")
        inlined = dereference(raw)
    """
    root = copy.deepcopy(document)
    return _inline(root, root, frozenset())


def _inline(node: Any, root: dict[str, Any], active: frozenset[str]) -> Any:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            if ref in active:
                return node
            target = resolve_pointer(root, ref)
            # ``active`` only tracks the current branch; siblings may reuse a ref.
            return _inline(target, root, active | {ref})
        return {key: _inline(value, root, active) for key, value in node.items()}

    if isinstance(node, list):
        return [_inline(item, root, active) for item in node]

    return node
