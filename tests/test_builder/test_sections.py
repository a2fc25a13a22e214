"""Tests for specdoc.builder.sections."""

from __future__ import annotations

from specdoc.builder import BuildContext, section
from specdoc.builder.sections import nested_section
from specdoc.models import OverviewDescriptionBlock, SectionBlock, TransformOptions


class TestSection:
    def test_wraps_children(self) -> None:
        child = OverviewDescriptionBlock(body="hi")
        result = section("Title", 2, [child])
        assert result == SectionBlock(title="Title", level=2, children=[child])

    def test_no_validation(self) -> None:
        result = section("", 0, [])
        assert (result.title, result.level, result.children) == ("", 0, [])

    def test_accepts_any_iterable(self) -> None:
        result = section("T", 1, (OverviewDescriptionBlock(body=str(i)) for i in range(3)))
        assert [child.body for child in result.children] == ["0", "1", "2"]


class TestBuildContext:
    def test_defaults(self) -> None:
        context = BuildContext(document={})
        assert context.depth == 1
        assert context.options == TransformOptions()

    def test_nested_increments_depth_only(self) -> None:
        options = TransformOptions(strict_refs=True)
        context = BuildContext(document={"a": 1}, options=options, depth=2)
        inner = context.nested()
        assert inner.depth == 3
        assert inner.document is context.document
        assert inner.options is options
        assert context.depth == 2


class TestNestedSection:
    def test_children_are_one_level_deeper(self) -> None:
        seen: list[int] = []

        def children(ctx: BuildContext) -> list[SectionBlock]:
            seen.append(ctx.depth)
            return [nested_section(ctx, "inner", lambda _: [])]

        outer = nested_section(BuildContext(document={}), "outer", children)
        assert outer.level == 1
        assert seen == [2]
        assert outer.children[0].level == 2
