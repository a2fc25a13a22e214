"""Input collaborators -- load API descriptions and resolve ``$ref`` pointers.

This sub-package is the I/O edge of the specdoc pipeline: it turns a raw
JSON or YAML document (local file, URL, or stdin) into a plain dictionary
that :mod:`specdoc.builder` can transform.

Typical usage::

    from specdoc.parser import load_document, dereference

    raw = load_document("petstore.yaml")
    raw = dereference(raw)  # optional: inline every internal $ref

Sub-modules:

* :mod:`~specdoc.parser.loader` -- URL, file, and stdin loading plus
  JSON/YAML format detection.
* :mod:`~specdoc.parser.resolver` -- ``$ref`` lookup and full
  dereferencing with circular-reference detection.
"""

from specdoc.parser.loader import load_document
from specdoc.parser.resolver import dereference, lookup_component_schema, resolve_pointer

__all__ = ["load_document", "dereference", "lookup_component_schema", "resolve_pointer"]
