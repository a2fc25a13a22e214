"""Shared test fixtures for specdoc.

Provides the API description fixtures and per-test isolation of
configuration and output state.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from specdoc.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test, the cached references go stale once the test finishes.  The
    Rich log handler installed by the CLI holds the same kind of reference.
    """
    yield
    reset_output()
    logger = logging.getLogger("specdoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Swagger Petstore (OpenAPI 3.0) with request-body and response examples."""
    with open(FIXTURES_DIR / "petstore_oas3_requestBody_example.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def petstore_expected() -> dict[str, Any]:
    """The page container the Petstore fixture transforms into."""
    with open(
        FIXTURES_DIR / "petstore_oas3_requestBody_example.expected.json", encoding="utf-8"
    ) as f:
        return json.load(f)


@pytest.fixture
def minimal_document() -> dict[str, Any]:
    """A small API document with one tag and one operation."""
    return {
        "openapi": "3.1.0",
        "info": {"title": "Todo API", "version": "2.0"},
        "tags": [{"name": "todos"}],
        "paths": {
            "/todos/{id}": {
                "get": {
                    "tags": ["todos"],
                    "summary": "Get a todo",
                    "operationId": "getTodo",
                    "parameters": [
                        {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}
                    ],
                    "responses": {"200": {"description": "The todo"}},
                }
            }
        },
    }


@pytest.fixture
def bare_operation() -> dict[str, Any]:
    """A stand-alone operation object with method and path attached."""
    return {
        "operationId": "getCloudAccounts",
        "summary": "Get Cloud Accounts",
        "description": "Fetches the cloud account ID associated with the organization.",
        "method": "get",
        "path": "/v4/organizations/{organizationId}/cloudAccounts",
        "parameters": [
            {
                "name": "organizationId",
                "in": "path",
                "required": True,
                "description": "The GUID4 ID of the organization.",
                "schema": {"type": "string", "format": "uuid"},
            }
        ],
        "responses": {
            "200": {
                "description": "Successfully fetched the cloud account ID.",
                "content": {
                    "application/json": {"schema": {"$ref": "#/components/schemas/CloudAccounts"}}
                },
            },
            "404": {"description": ""},
        },
        "security": [{"apiKey": []}],
    }


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of ``tmp_path``, clears the
    ``SPECDOC_*`` environment variables, and changes the working directory
    to ``tmp_path`` so no project config leaks in.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("specdoc.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["SPECDOC_STRICT_REFS", "SPECDOC_DEREFERENCE", "SPECDOC_TEMPLATES"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path

