"""Typed exception hierarchy for the Postman → Readme sync.

Configuration problems are reported as plain ``ValueError`` by
:meth:`Config.from_env`; everything raised by the collection loader and
the Readme client inherits from :class:`PostmanSyncError`.
"""

from typing import Optional


class PostmanSyncError(Exception):
    """Base exception for all postman-sync errors."""
    pass


class CollectionParseError(PostmanSyncError):
    """Raised when the Postman collection cannot be read or understood."""

    def __init__(self, message: str, source: Optional[str] = None):
        if source:
            message = f"{source}: {message}"
        super().__init__(message)
        self.source = source


class ReadmeAPIError(PostmanSyncError):
    """Raised when a Readme docs call fails or returns an unexpected status."""

    def __init__(
        self,
        method: str,
        slug: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        target = slug or "(new page)"
        message = f"{method} {target} failed"
        if status_code is not None:
            message += f" with status {status_code}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.method = method
        self.slug = slug
        self.status_code = status_code
        self.reason = reason
