"""
Postman collection to Markdown generator.

Walks the collection tree depth-first and produces one page per
top-level item and per non-query child, down to a configurable page
depth. Below that depth, folders are inlined with headings.

Rendering for a query:
- Bold label, optional description
- Pseudo-request code block (method, URL, auth hint, raw body)
- Saved response examples
"""

import re
from dataclasses import dataclass

from .collection import CollectionItem, Request
from .config import DEFAULT_PAGE_DEPTH, Config


BASE_URL_PLACEHOLDER = "{{BaseURL}}"
NO_AUTH = "noauth"
AUTH_PLACEHOLDER = "Authorization: Bearer <token>"

_NON_ALPHA = re.compile(r"[^a-zA-Z]+")


def generate_slug(text: str) -> str:
    """
    Generate a URL-safe slug from a display name.

    Examples:
        "Login" -> "login"
        "Users & Roles (v2)" -> "users-roles-v"
        "  _Get item 42_ " -> "get-item"
    """
    return _NON_ALPHA.sub("-", text).lower().strip("-_ ")


def child_slug(parent: str, name: str) -> str:
    """
    Join a parent slug and a name's slug.

    A name without letters adds nothing, so the result never ends in a hyphen:
        child_slug("api", "42") -> "api"
    """
    slug = generate_slug(name)
    return f"{parent}-{slug}" if slug else parent


def clean_string(text: str) -> str:
    return text.strip(" \n\t")


@dataclass(frozen=True)
class GeneratedPage:
    """A rendered documentation page."""

    parent_slug: str
    slug: str
    title: str
    content: str

    @property
    def filename(self) -> str:
        return f"{self.slug}.md"


class MarkdownGenerator:
    """
    Render Postman collection items into Markdown pages.

    Pages are returned in pre-order: a page always comes before its
    sub-pages, and top-level pages keep the collection order.
    """

    def __init__(
        self,
        prefix: str,
        pages_slug: str,
        base_url: str = "",
        max_page_depth: int = DEFAULT_PAGE_DEPTH,
    ):
        """
        Initialize the generator.

        Args:
            prefix: Namespace prepended to every top-level slug.
            pages_slug: Docs path used when linking to sub-pages.
            base_url: Replacement for the ``{{BaseURL}}`` placeholder.
            max_page_depth: Depth at which folders stop being split into
                separate pages. Top-level pages have depth 1.
        """
        self.prefix = prefix
        self.pages_slug = pages_slug
        self.base_url = base_url
        self.max_page_depth = max_page_depth

    @classmethod
    def from_config(cls, config: Config) -> "MarkdownGenerator":
        return cls(
            prefix=config.prefix,
            pages_slug=config.pages_slug,
            base_url=config.base_url,
            max_page_depth=config.max_page_depth,
        )

    def generate(self, items: list[CollectionItem]) -> list[GeneratedPage]:
        """
        Generate pages for all top-level collection items.

        Args:
            items: Top-level items of the collection.

        Returns:
            Flat list of pages, parents before children.
        """
        pages = []
        for item in items:
            slug = child_slug(self.prefix, item.name)
            pages.extend(self._render_page(item, slug, parent_slug="", depth=1))
        return pages

    def _render_page(
        self,
        item: CollectionItem,
        slug: str,
        parent_slug: str,
        depth: int,
    ) -> list[GeneratedPage]:
        """Render a page and, recursively, its sub-pages."""
        if depth < self.max_page_depth:
            content, sub_pages = self._render_split(item, slug, depth)
        else:
            content, sub_pages = self._render_inline(item, level=0), []

        page = GeneratedPage(
            parent_slug=parent_slug,
            slug=slug,
            title=clean_string(item.name),
            content=content,
        )
        return [page] + sub_pages

    def _render_split(
        self,
        item: CollectionItem,
        slug: str,
        depth: int,
    ) -> tuple[str, list[GeneratedPage]]:
        """Inline query children and turn every other child into a sub-page."""
        content = ""
        has_content = False

        if item.description:
            content += f"\n{clean_string(item.description)}\n\n"
            has_content = True
        content += "\n"

        if item.is_query:
            content += self.render_query(item)
            has_content = True

        links = []
        sub_pages = []
        for child in item.items:
            if child.is_query:
                content += f"\n{self.render_query(child)}"
                has_content = True
            else:
                sub_slug = child_slug(slug, child.name)
                links.append(f"- [{child.name}](/{self.pages_slug}/{sub_slug})\n")
                sub_pages.extend(
                    self._render_page(child, sub_slug, parent_slug=slug, depth=depth + 1)
                )

        if links:
            if has_content:
                content += "\n***\n"
            content += "\n# Subsections\n"
            content += "".join(links)

        return content, sub_pages

    def _render_inline(self, item: CollectionItem, level: int) -> str:
        """Render a whole subtree into one page; folders become headings."""
        if item.is_query:
            return f"\n{self.render_query(item)}"

        if not item.items:
            return f"\n{clean_string(item.description)}"

        content = ""
        if level > 0:
            content += f"{'#' * level} {clean_string(item.name)}\n"
        if item.description:
            content += f"\n{clean_string(item.description)}\n"
        for child in item.items:
            content += self._render_inline(child, level + 1)
        return content

    # =========================================================================
    # Query rendering
    # =========================================================================

    def render_query(self, item: CollectionItem) -> str:
        """Render a query item with its request and response examples."""
        request = item.request
        content = f"**{clean_string(item.name)}**\n"
        if request.description:
            content += f"\n{clean_string(request.description)}\n"

        content += (
            f"\n```json js{self._request_line(request)}{self._auth_line(request)}\n"
            f"{clean_string(request.body)}\n```\n\n"
        )

        for response in item.responses:
            original = response.request
            content += f"\n**Example: {clean_string(response.name)}**\n"
            content += (
                f"\n```json js\n// Request →{self._request_line(original)}{self._auth_line(original)}\n"
                f"{clean_string(original.body)}\n```\n"
            )
            content += f"\n```json js\n// Response ←\n{clean_string(response.body)}\n```\n\n"

        return content

    def resolve_url(self, request: Request) -> str:
        return clean_string(request.raw_url.replace(BASE_URL_PLACEHOLDER, self.base_url))

    def _request_line(self, request: Request) -> str:
        return f"\n// {request.method} {self.resolve_url(request)}"

    def _auth_line(self, request: Request) -> str:
        if request.auth_type == NO_AUTH:
            return ""
        return f"\n// {AUTH_PLACEHOLDER}"
