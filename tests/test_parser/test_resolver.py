"""Tests for specdoc.parser.resolver."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from specdoc.exceptions import RefResolutionError
from specdoc.parser.resolver import dereference, lookup_component_schema, resolve_pointer


def _doc() -> dict[str, Any]:
    return {
        "paths": {
            "/pets": {
                "get": {
                    "responses": {
                        "200": {
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "array",
                                        "items": {"$ref": "#/components/schemas/Pet"},
                                    }
                                }
                            }
                        }
                    }
                }
            }
        },
        "components": {
            "schemas": {
                "Pet": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string"},
                        "category": {"$ref": "#/components/schemas/Category"},
                    },
                },
                "Category": {"type": "object", "properties": {"id": {"type": "integer"}}},
                "a/b": {"type": "string"},
                "Node": {
                    "type": "object",
                    "properties": {"next": {"$ref": "#/components/schemas/Node"}},
                },
            }
        },
        "servers": [{"url": "https://a"}, {"url": "https://b"}],
    }


class TestLookupComponentSchema:
    """Last-segment lookup in components.schemas."""

    def test_full_ref(self) -> None:
        assert lookup_component_schema(_doc(), "#/components/schemas/Category") == {
            "type": "object",
            "properties": {"id": {"type": "integer"}},
        }

    def test_bare_name(self) -> None:
        assert lookup_component_schema(_doc(), "Category")["type"] == "object"

    def test_only_last_segment_matters(self) -> None:
        assert lookup_component_schema(_doc(), "#/definitions/Category") is not None

    def test_unknown_name(self) -> None:
        assert lookup_component_schema(_doc(), "#/components/schemas/Missing") is None

    @pytest.mark.parametrize(
        "document",
        [{}, {"components": None}, {"components": {}}, {"components": {"schemas": []}}],
    )
    def test_missing_components(self, document: dict[str, Any]) -> None:
        assert lookup_component_schema(document, "#/components/schemas/Pet") is None


class TestResolvePointer:
    """RFC 6901 navigation."""

    def test_nested_object(self) -> None:
        assert resolve_pointer(_doc(), "#/components/schemas/Pet/properties/name") == {
            "type": "string"
        }

    def test_list_index(self) -> None:
        assert resolve_pointer(_doc(), "#/servers/1/url") == "https://b"

    def test_escaped_slash(self) -> None:
        assert resolve_pointer(_doc(), "#/components/schemas/a~1b") == {"type": "string"}

    def test_escaped_tilde(self) -> None:
        assert resolve_pointer({"x~y": 1}, "#/x~0y") == 1

    def test_external_ref(self) -> None:
        with pytest.raises(RefResolutionError, match="External") as exc_info:
            resolve_pointer(_doc(), "other.yaml#/components/schemas/Pet")
        assert exc_info.value.ref == "other.yaml#/components/schemas/Pet"

    def test_missing_key(self) -> None:
        with pytest.raises(RefResolutionError, match="'Nope' not found"):
            resolve_pointer(_doc(), "#/components/schemas/Nope")

    def test_bad_index(self) -> None:
        with pytest.raises(RefResolutionError, match="invalid array index"):
            resolve_pointer(_doc(), "#/servers/7")

    def test_navigate_into_scalar(self) -> None:
        with pytest.raises(RefResolutionError, match="cannot navigate into str"):
            resolve_pointer(_doc(), "#/servers/0/url/deeper")


class TestDereference:
    """Full inlining with cycle detection."""

    def test_inlines_nested_refs(self) -> None:
        result = dereference(_doc())
        items = result["paths"]["/pets"]["get"]["responses"]["200"]["content"][
            "application/json"
        ]["schema"]["items"]
        assert items["type"] == "object"
        assert items["properties"]["category"]["properties"]["id"] == {"type": "integer"}

    def test_does_not_mutate_input(self) -> None:
        doc = _doc()
        snapshot = copy.deepcopy(doc)
        dereference(doc)
        assert doc == snapshot

    def test_cycle_keeps_ref(self) -> None:
        node = dereference(_doc())["components"]["schemas"]["Node"]
        assert node["properties"]["next"]["properties"]["next"] == {
            "$ref": "#/components/schemas/Node"
        }

    def test_sibling_reuse_is_not_a_cycle(self) -> None:
        doc = {
            "a": {"$ref": "#/defs/X"},
            "b": {"$ref": "#/defs/X"},
            "defs": {"X": {"type": "string"}},
        }
        result = dereference(doc)
        assert result["a"] == {"type": "string"}
        assert result["b"] == {"type": "string"}

    def test_unresolvable_ref_raises(self) -> None:
        with pytest.raises(RefResolutionError):
            dereference({"a": {"$ref": "#/nowhere"}})
