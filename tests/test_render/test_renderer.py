"""Tests for specdoc.render -- Jinja2 template rendering of page containers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from specdoc.builder import transform
from specdoc.exceptions import InputNotFoundError, RenderError
from specdoc.render import (
    TemplateRenderer,
    available_template_sets,
    render_page,
    resolve_templates_dir,
)
from specdoc.render.renderer import (
    BUILTIN_TEMPLATES_DIR,
    eq,
    includes,
    lowercase,
    schema_type,
    to_json,
    uppercase,
)

BLOCK_TYPES = [
    "section",
    "overview.meta",
    "overview.description",
    "overview.servers",
    "op.header",
    "op.description",
    "op.parameters",
    "op.requestBody",
    "op.example",
    "op.responses",
    "op.security",
]


def _write_templates(directory: Path, **templates: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, body in templates.items():
        (directory / f"{name}.j2").write_text(body, encoding="utf-8")
    return directory


def _container(*blocks: dict[str, Any]) -> dict[str, Any]:
    return {
        "page": {"kind": "operation", "id": "x", "title": "X", "slug": "x"},
        "blocks": list(blocks),
    }


# ---------------------------------------------------------------------------
# Template set discovery
# ---------------------------------------------------------------------------


class TestTemplateSets:
    def test_builtin_sets(self) -> None:
        assert available_template_sets() == ["html", "markdown"]

    @pytest.mark.parametrize("name", ["markdown", "html"])
    def test_builtin_sets_cover_every_block_type(self, name: str) -> None:
        renderer = TemplateRenderer(name)
        assert set(BLOCK_TYPES) <= set(renderer.partials)

    def test_default_is_markdown(self) -> None:
        assert resolve_templates_dir(None) == BUILTIN_TEMPLATES_DIR / "markdown"

    def test_directory_wins_over_builtin_name(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_templates(tmp_path / "html", index="custom")
        monkeypatch.chdir(tmp_path)
        assert resolve_templates_dir("html") == Path("html")

    def test_unknown_set(self) -> None:
        with pytest.raises(InputNotFoundError, match="built-in sets: html, markdown"):
            resolve_templates_dir("/no/such/templates")

    def test_directory_without_index(self, tmp_path: Path) -> None:
        _write_templates(tmp_path, section="x")
        with pytest.raises(RenderError, match="index.j2"):
            TemplateRenderer(tmp_path)

    def test_autoescape_only_for_builtin_html(self, tmp_path: Path) -> None:
        _write_templates(tmp_path / "html", index="{{ page.title }}")
        assert TemplateRenderer("html").autoescape is True
        assert TemplateRenderer("markdown").autoescape is False
        assert TemplateRenderer(tmp_path / "html").autoescape is False
        assert TemplateRenderer(tmp_path / "html", autoescape=True).autoescape is True


# ---------------------------------------------------------------------------
# Custom templates
# ---------------------------------------------------------------------------


class TestCustomTemplates:
    """Partial dispatch and helpers with a hand-written template set."""

    def test_dispatches_on_block_type(self, tmp_path: Path) -> None:
        _write_templates(
            tmp_path,
            index="{{ page.title }}|{{ render_blocks(blocks) }}",
            **{
                "op.header": "H:{{ block.method }} {{ block.path }};",
                "op.description": "D:{{ block.body }};",
            },
        )
        container = _container(
            {"type": "op.header", "method": "GET", "path": "/a"},
            {"type": "op.description", "body": "text"},
        )
        assert TemplateRenderer(tmp_path).render(container) == "X|H:GET /a;D:text;"

    def test_sections_render_children(self, tmp_path: Path) -> None:
        _write_templates(
            tmp_path,
            index="{{ render_blocks(blocks) }}",
            section="[{{ block.level }}:{{ block.title }} {{ render_blocks(block.children) }}]",
            **{"overview.description": "{{ block.body }}"},
        )
        container = _container(
            {
                "type": "section",
                "title": "outer",
                "level": 1,
                "children": [
                    {"type": "overview.description", "body": "a"},
                    {"type": "section", "title": "inner", "level": 2, "children": []},
                ],
            }
        )
        assert TemplateRenderer(tmp_path).render(container) == "[1:outer a[2:inner ]]"

    def test_partial_by_name(self, tmp_path: Path) -> None:
        _write_templates(
            tmp_path,
            index="{{ partial('banner', text=page.title) }}",
            banner="** {{ text }} **",
        )
        assert TemplateRenderer(tmp_path).render(_container()) == "** X **"

    def test_missing_partial(self, tmp_path: Path) -> None:
        _write_templates(tmp_path, index="{{ render_blocks(blocks) }}")
        container = _container({"type": "op.description", "body": "x"})
        with pytest.raises(RenderError, match="op.description.j2"):
            TemplateRenderer(tmp_path).render(container)

    def test_syntax_error(self, tmp_path: Path) -> None:
        _write_templates(tmp_path, index="{% if %}")
        with pytest.raises(RenderError, match="syntax error"):
            TemplateRenderer(tmp_path).render(_container())

    def test_runtime_error(self, tmp_path: Path) -> None:
        _write_templates(tmp_path, index="{{ page.title | no_such_filter }}")
        with pytest.raises(RenderError):
            TemplateRenderer(tmp_path).render(_container())

    def test_invalid_container(self, tmp_path: Path) -> None:
        _write_templates(tmp_path, index="x")
        with pytest.raises(RenderError, match="Invalid page container"):
            TemplateRenderer(tmp_path).render({"blocks": [{"type": "mystery"}]})

    def test_accepts_model_instance(self, tmp_path: Path, minimal_document: dict[str, Any]) -> None:
        _write_templates(tmp_path, index="{{ page.slug }}:{{ blocks | length }}")
        assert TemplateRenderer(tmp_path).render(transform(minimal_document)) == "todo-api:1"

    def test_aliased_keys_are_exposed(self, tmp_path: Path) -> None:
        _write_templates(
            tmp_path,
            index="{{ render_blocks(blocks) }}",
            **{
                "op.parameters": (
                    "{% for g in block.groups %}{{ g['in'] }}={{ g['items'] | length }}{% endfor %}"
                )
            },
        )
        container = _container(
            {
                "type": "op.parameters",
                "groups": [
                    {"in": "path", "title": "Path", "items": [{"name": "id", "in": "path"}]}
                ],
            }
        )
        assert TemplateRenderer(tmp_path).render(container) == "path=1"

    def test_helpers_available_as_filters(self, tmp_path: Path) -> None:
        _write_templates(tmp_path, index="{{ page.title | lowercase }}{{ page.slug | uppercase }}")
        assert TemplateRenderer(tmp_path).render(_container()) == "xX"

    def test_autoescape_does_not_escape_partials(self, tmp_path: Path) -> None:
        _write_templates(
            tmp_path,
            index="<main>{{ render_blocks(blocks) }}</main>",
            **{"op.description": "<p>{{ block.body }}</p>"},
        )
        container = _container({"type": "op.description", "body": "a < b"})
        rendered = TemplateRenderer(tmp_path, autoescape=True).render(container)
        assert rendered == "<main><p>a &lt; b</p></main>"


# ---------------------------------------------------------------------------
# Built-in template sets
# ---------------------------------------------------------------------------


class TestBuiltinMarkdown:
    def test_petstore(self, petstore_raw: dict[str, Any]) -> None:
        text = render_page(transform(petstore_raw))
        assert text.startswith("<!-- overview: swagger-petstore -->\n")
        assert "# Swagger Petstore (1.0.0)" in text
        assert "## pet" in text
        assert "### Add a new pet to the store" in text
        assert "- **Contact:** <apiteam@swagger.io>" in text
        assert "[Apache 2.0](http://www.apache.org/licenses/LICENSE-2.0.html)" in text
        assert "- `http://petstore.swagger.io/v2`" in text
        assert "| `status` | array<string> | yes |" in text
        assert "| `name` | string | yes |" in text
        assert "| 200 | successful operation | `application/json` | array<Pet> |" in text
        assert "- `petstore_auth`: write:pets, read:pets" in text
        assert "```xml" in text

    def test_operation_page(self, bare_operation: dict[str, Any]) -> None:
        text = render_page(transform(bare_operation), "markdown")
        assert "# Get Cloud Accounts" in text
        assert "`GET /v4/organizations/{organizationId}/cloudAccounts`" in text
        assert "Operation ID: `getCloudAccounts`" in text
        assert "| `organizationId` | string (uuid) | yes | The GUID4 ID of the organization. |" in text
        assert "| 404 |  |  |  |" in text


class TestBuiltinHtml:
    def test_petstore(self, petstore_raw: dict[str, Any]) -> None:
        html = render_page(transform(petstore_raw), "html")
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Swagger Petstore</title>" in html
        assert "<h1>Swagger Petstore (1.0.0)</h1>" in html
        assert "<h3>Add a new pet to the store</h3>" in html
        assert '<a href="mailto:apiteam@swagger.io">' in html

    def test_content_is_escaped(self) -> None:
        op = {"summary": "<script>alert(1)</script>", "description": "a & b"}
        html = render_page(transform(op), "html")
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "a &amp; b" in html

    def test_deep_sections_cap_at_h6(self, tmp_path: Path) -> None:
        container = {
            "page": {"kind": "overview", "title": "T", "slug": "t"},
            "blocks": [{"type": "section", "title": "Deep", "level": 9, "children": []}],
        }
        assert "<h6>Deep</h6>" in render_page(container, "html")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_eq(self) -> None:
        assert eq("a", "a") is True
        assert eq(1, "1") is False

    def test_includes(self) -> None:
        assert includes(["a", "b"], "b") is True
        assert includes(["a"], "c") is False
        assert includes("abc", "a") is False

    def test_case(self) -> None:
        assert uppercase("get") == "GET"
        assert lowercase("Query") == "query"

    def test_json(self) -> None:
        assert to_json({"a": [1]}) == '{\n  "a": [\n    1\n  ]\n}'
        assert to_json("ü") == '"ü"'

    @pytest.mark.parametrize(
        ("schema", "expected"),
        [
            ({"type": "string"}, "string"),
            ({"type": "integer", "format": "int64"}, "integer (int64)"),
            ({"$ref": "#/components/schemas/Pet"}, "Pet"),
            ({"type": "array", "items": {"$ref": "#/components/schemas/Tag"}}, "array<Tag>"),
            ({"type": "array"}, "array<any>"),
            ({"type": ["string", "null"]}, "string | null"),
            ({"oneOf": [{"type": "string"}, {"type": "integer"}]}, "string | integer"),
            ({"allOf": [{"$ref": "#/x/A"}, {"$ref": "#/x/B"}]}, "A & B"),
            ({"properties": {"a": {}}}, "object"),
            ("string", "string"),
            ({}, "any"),
            (None, "any"),
        ],
    )
    def test_schema_type(self, schema: Any, expected: str) -> None:
        assert schema_type(schema) == expected
