"""Shared fixtures for postman-sync tests."""

import json

import pytest

from postman_sync.config import Config


def make_query(name, method="GET", url="{{BaseURL}}/", body="", auth_type=None, description=None):
    """Build a Postman request item as it appears in an exported collection."""
    request = {"method": method, "url": url, "body": {"mode": "raw", "raw": body}, "header": []}
    if auth_type:
        request["auth"] = {"type": auth_type}
    if description:
        request["description"] = description
    return {"name": name, "request": request, "response": []}


def make_folder(name, items, description=None):
    folder = {"name": name, "item": items}
    if description:
        folder["description"] = description
    return folder


@pytest.fixture
def sample_collection():
    """A collection with a flat folder, a nested folder and a root query."""
    return {
        "info": {"name": "Sample API", "schema": "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"},
        "item": [
            make_folder("Auth", [
                make_query("Login", "POST", "{{BaseURL}}/login", '{"user": "me"}', auth_type="noauth"),
                make_query("Logout", "POST", "{{BaseURL}}/logout"),
            ], description="Session handling"),
            make_folder("Admin", [
                make_query("Ping", "GET", "{{BaseURL}}/admin/ping"),
                make_folder("Roles", [
                    make_query("List roles", "GET", "{{BaseURL}}/roles"),
                ]),
            ]),
            make_query("Health", "GET", "{{BaseURL}}/health"),
        ],
    }


@pytest.fixture
def collection_file(tmp_path, sample_collection):
    path = tmp_path / "collection.json"
    path.write_text(json.dumps(sample_collection), encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path, collection_file):
    """Config with every publish setting filled in."""
    return Config(
        source_file=collection_file,
        markdown_folder=tmp_path / "docs",
        pages_slug="docs",
        prefix="api",
        base_url="https://x.io",
        endpoint="https://readme.test/api/v1",
        api_key="secret",
        category_slug="api-reference",
        version="1.0",
        pages_file=tmp_path / "pages.txt",
    )
