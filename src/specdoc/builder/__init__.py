"""Build the document model (IR) from an API description.

This sub-package is the heart of specdoc: it maps heterogeneous, partially
optional OpenAPI structures onto the ordered block tree defined in
:mod:`specdoc.models`, which renderers walk without any OpenAPI knowledge.

Typical usage::

    from specdoc.builder import transform

    container = transform(raw_document)
    print(container.to_json())

Sub-modules:

* :mod:`~specdoc.builder.document` -- input classification, overview and
  operation pages, slug derivation.
* :mod:`~specdoc.builder.operations` -- one operation to one section:
  request bodies, responses, examples, security.
* :mod:`~specdoc.builder.parameters` -- parameter grouping by location and
  example normalisation.
* :mod:`~specdoc.builder.sections` -- section construction and the depth
  counter that assigns section levels.
"""

from specdoc.builder.document import classify_source, slugify, transform
from specdoc.builder.operations import build_operation_section
from specdoc.builder.parameters import group_parameters
from specdoc.builder.sections import BuildContext, section

__all__ = [
    "transform",
    "classify_source",
    "slugify",
    "build_operation_section",
    "group_parameters",
    "section",
    "BuildContext",
]
