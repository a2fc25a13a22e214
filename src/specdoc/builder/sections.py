"""Section construction and the depth counter that assigns section levels.

:func:`section` is purely structural: it wraps children with a title and a
level and performs no validation.  Callers that build nested documents use
:func:`nested_section` instead, which reads the level from a
:class:`BuildContext` and hands the children a context one level deeper.
Starting the counter at 1 gives overview pages their root/tag/operation
levels of 1/2/3 without any literal levels at the call sites.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable

from specdoc.models import Block, SectionBlock, TransformOptions


@dataclass(frozen=True)
class BuildContext:
    """State threaded through one transform call.

    Attributes:
        document: The full source document, used for ``$ref`` lookups.
        options: Per-call transform switches.
        depth: Level assigned to the next section built in this context.
    """

    document: dict[str, Any]
    options: TransformOptions = field(default_factory=TransformOptions)
    depth: int = 1

    def nested(self) -> BuildContext:
        """Return a copy of this context one nesting level deeper."""
        return replace(self, depth=self.depth + 1)


def section(title: str, level: int, children: Iterable[Block]) -> SectionBlock:
    """Wrap *children* in a :class:`~specdoc.models.SectionBlock`."""
    return SectionBlock(title=title, level=level, children=list(children))


def nested_section(
    context: BuildContext,
    title: str,
    build_children: Callable[[BuildContext], Iterable[Block]],
) -> SectionBlock:
    """Build a section at ``context.depth`` whose children sit one level deeper.

    Args:
        context: Context whose depth becomes the section's level.
        title: Section title.
        build_children: Called with the nested context; returns the
            section's children in order.

    Returns:
        The assembled section.
    """
    return section(title, context.depth, build_children(context.nested()))
