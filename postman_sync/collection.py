"""
Postman collection model.

Turns the parsed JSON of a Postman collection into typed items:
- Folders and requests (``CollectionItem``)
- Request definitions with a string-or-object URL
- Saved response examples
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .errors import CollectionParseError


@dataclass(frozen=True)
class StringURL:
    """Request URL given as a plain string."""

    value: str

    @property
    def raw(self) -> str:
        return self.value


@dataclass(frozen=True)
class ObjectURL:
    """Request URL given as an object with a ``raw`` field."""

    raw: str


RequestURL = Union[StringURL, ObjectURL]


def parse_url(value: Any) -> RequestURL:
    """
    Build the URL variant matching the shape of a parsed JSON value.

    Raises:
        CollectionParseError: If the value is neither a string nor an object.
    """
    if value is None:
        return StringURL("")
    if isinstance(value, str):
        return StringURL(value)
    if isinstance(value, dict):
        raw = value.get("raw", "")
        return ObjectURL(raw if isinstance(raw, str) else "")
    raise CollectionParseError("url field is neither a string nor a recognized object")


def _text(value: Any) -> str:
    """Postman descriptions are either strings or ``{"content": ...}`` objects."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        content = value.get("content", "")
        return content if isinstance(content, str) else ""
    return ""


@dataclass(frozen=True)
class Header:
    key: str
    value: str


@dataclass
class Request:
    """A Postman request definition."""

    method: str = ""
    url: RequestURL = field(default_factory=lambda: StringURL(""))
    body: str = ""
    headers: list[Header] = field(default_factory=list)
    description: str = ""
    auth_type: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Request":
        """Create a Request from the ``request`` object of an item."""
        if not data:
            return cls()
        if isinstance(data, str):
            # Postman allows a bare URL string as the whole request
            return cls(method="GET", url=StringURL(data))
        if not isinstance(data, dict):
            raise CollectionParseError("request must be an object")

        body = data.get("body") or {}
        auth = data.get("auth") or {}

        headers = []
        for header in data.get("header") or []:
            if isinstance(header, dict):
                headers.append(Header(
                    key=str(header.get("key", "")),
                    value=str(header.get("value", "")),
                ))

        return cls(
            method=data.get("method", "") or "",
            url=parse_url(data.get("url")),
            body=_text(body.get("raw", "")) if isinstance(body, dict) else "",
            headers=headers,
            description=_text(data.get("description")),
            auth_type=auth.get("type", "") if isinstance(auth, dict) else "",
        )

    @property
    def raw_url(self) -> str:
        return self.url.raw

    @property
    def is_empty(self) -> bool:
        """True when the item carries no request information at all."""
        return (
            not self.method
            and not self.raw_url
            and not self.body
            and not self.headers
            and not self.description
            and not self.auth_type
        )


@dataclass
class Response:
    """A saved response example."""

    name: str
    body: str
    request: Request

    @classmethod
    def from_dict(cls, data: dict) -> "Response":
        return cls(
            name=data.get("name", "") or "",
            body=_text(data.get("body", "")),
            request=Request.from_dict(data.get("originalRequest")),
        )


@dataclass
class CollectionItem:
    """A folder or a request in a Postman collection."""

    name: str
    description: str = ""
    items: list["CollectionItem"] = field(default_factory=list)
    request: Request = field(default_factory=Request)
    responses: list[Response] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "CollectionItem":
        """Create a CollectionItem (and its children) from parsed JSON."""
        if not isinstance(data, dict):
            raise CollectionParseError("collection item must be an object")

        return cls(
            name=data.get("name", "") or "",
            description=_text(data.get("description")),
            items=[cls.from_dict(child) for child in data.get("item") or []],
            request=Request.from_dict(data.get("request")),
            responses=[
                Response.from_dict(response)
                for response in data.get("response") or []
                if isinstance(response, dict)
            ],
        )

    @property
    def is_query(self) -> bool:
        """A query is a leaf item with a request; anything else is a folder."""
        return not self.items and not self.request.is_empty


def parse_collection(data: Any) -> list[CollectionItem]:
    """
    Build the top-level items of an already parsed collection.

    Raises:
        CollectionParseError: If the document has no ``item`` array.
    """
    if not isinstance(data, dict) or not isinstance(data.get("item"), list):
        raise CollectionParseError("collection has no top-level 'item' array")

    return [CollectionItem.from_dict(item) for item in data["item"]]


def load_collection(path: Path) -> list[CollectionItem]:
    """
    Load a Postman collection file.

    Args:
        path: Path to the exported collection JSON.

    Returns:
        The top-level collection items, in file order.

    Raises:
        CollectionParseError: If the file is missing, is not JSON, or is not
            shaped like a Postman collection.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise CollectionParseError(f"cannot read collection: {e}", source=str(path)) from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CollectionParseError(f"invalid JSON: {e}", source=str(path)) from e

    try:
        return parse_collection(data)
    except CollectionParseError as e:
        raise CollectionParseError(str(e), source=str(path)) from e
