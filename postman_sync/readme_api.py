"""
Readme docs API wrapper for the sync system.

Provides a clean interface to Readme's ``/docs`` resource with:
- Rate limiting compliance
- Create-then-reveal page creation
- Status checking and error handling
"""

from typing import Any, Optional

import requests
from ratelimit import limits, sleep_and_retry
from rich.console import Console

from .config import Config
from .errors import ReadmeAPIError

console = Console()

RATE_LIMIT_CALLS = 10
RATE_LIMIT_PERIOD = 1  # second
REQUEST_TIMEOUT = 30  # seconds

PAGE_TYPE = "basic"


def _payload(**fields: Any) -> dict:
    """Drop empty string fields, the way Readme expects omitted values."""
    return {key: value for key, value in fields.items() if value != ""}


class ReadmeAPI:
    """
    Wrapper around the Readme docs API.

    Handles:
    - Authentication and version headers
    - Rate limiting
    - Existence checks, create, update and delete by slug
    """

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        """
        Initialize the Readme API client.

        Args:
            config: Configuration instance with endpoint, key and version.
            session: Optional preconfigured session.
        """
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({
            "authorization": f"Basic {config.api_key}",
            "content-type": "application/json",
            "x-readme-version": config.version,
        })
        self._request_count = 0

    def _url(self, slug: str = "") -> str:
        base = f"{self.config.endpoint}/docs"
        return f"{base}/{slug}" if slug else base

    @sleep_and_retry
    @limits(calls=RATE_LIMIT_CALLS, period=RATE_LIMIT_PERIOD)
    def _request(self, method: str, slug: str = "", payload: Optional[dict] = None) -> requests.Response:
        """Execute a rate-limited API call."""
        self._request_count += 1
        if self.config.debug:
            console.print(f"[dim]{method} {self._url(slug)}[/dim]")

        try:
            return self.session.request(
                method,
                self._url(slug),
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise ReadmeAPIError(method, slug, reason=str(e)) from e

    def _expect(self, response: requests.Response, status: int, method: str, slug: str) -> None:
        if response.status_code != status:
            raise ReadmeAPIError(method, slug, response.status_code, response.reason)

    def page_exists(self, slug: str) -> bool:
        """
        Check whether a page exists.

        Args:
            slug: Page slug.

        Returns:
            True if Readme answers the fetch with 200.
        """
        response = self._request("GET", slug)
        return response.status_code == requests.codes.ok

    def create_page(self, slug: str, title: str, body: str, parent_slug: str = "") -> None:
        """
        Create a page.

        The page is first created hidden, titled with its slug so Readme
        derives the same slug, then revealed with its real title.

        Raises:
            ReadmeAPIError: If either call does not succeed.
        """
        created = _payload(
            type=PAGE_TYPE,
            title=slug,
            body=body,
            hidden=True,
            categorySlug=self.config.category_slug,
            parentDocSlug=parent_slug,
        )
        response = self._request("POST", payload=created)
        self._expect(response, requests.codes.created, "POST", slug)

        revealed = _payload(title=title, body=body, hidden=False)
        response = self._request("PUT", slug, revealed)
        self._expect(response, requests.codes.ok, "PUT", slug)

    def update_page(self, slug: str, title: str, body: str, parent_slug: str = "") -> None:
        """
        Update an existing page.

        Raises:
            ReadmeAPIError: If Readme does not answer with 200.
        """
        updated = _payload(
            title=title,
            body=body,
            categorySlug=self.config.category_slug,
            parentDocSlug=parent_slug,
        )
        response = self._request("PUT", slug, updated)
        self._expect(response, requests.codes.ok, "PUT", slug)

    def delete_page(self, slug: str) -> None:
        """
        Delete a page.

        Raises:
            ReadmeAPIError: If Readme does not answer with 204.
        """
        response = self._request("DELETE", slug)
        self._expect(response, requests.codes.no_content, "DELETE", slug)

    @property
    def request_count(self) -> int:
        """Number of API requests made."""
        return self._request_count
