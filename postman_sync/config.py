"""
Configuration management for Postman → Readme sync.

Loads settings from environment variables and provides
structured configuration for all sync components.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_PAGE_DEPTH = 2

# Publish settings, in the order they are checked
PUBLISH_VARIABLES = (
    ("README_API_ENDPOINT", "endpoint"),
    ("README_API_KEY", "api_key"),
    ("README_API_CATEGORY_SLUG", "category_slug"),
    ("README_API_VERSION", "version"),
    ("README_API_CREATED_PAGES_FILE", "pages_file"),
)


def _require(name: str, hint: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ValueError(f"{name} environment variable is required.\n{hint}")
    return value


@dataclass
class Config:
    """
    Central configuration for the sync system.

    Loads from environment variables and provides defaults.
    All secrets are loaded from env vars - never hardcoded.
    """

    # Markdown generation
    source_file: Path
    markdown_folder: Path
    pages_slug: str
    prefix: str
    base_url: str = ""
    max_page_depth: int = DEFAULT_PAGE_DEPTH

    # Readme publishing (all optional, publishing is skipped if one is empty)
    endpoint: str = ""
    api_key: str = ""
    category_slug: str = ""
    version: str = ""
    pages_file: Optional[Path] = None

    # Sync behavior
    debug: bool = False
    dry_run: bool = False

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Config":
        """
        Load configuration from environment variables.

        Args:
            env_file: Optional path to .env file. If not provided,
                     looks for .env in current directory.

        Returns:
            Configured Config instance.

        Raises:
            ValueError: If required environment variables are missing.
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        source_file = _require(
            "COLLECTION_SOURCE_FILE",
            "Set this to the exported Postman collection JSON file.",
        )
        markdown_folder = _require(
            "MARKDOWN_FOLDER",
            "Set this to the directory where markdown pages are written.",
        )
        pages_slug = _require(
            "README_API_PAGES_SLUG",
            "Set this to the docs path used in subsection links (e.g. 'docs').",
        )
        prefix = _require(
            "README_API_PREFIX",
            "Set this to the slug prefix shared by all generated pages.",
        )

        depth_str = os.getenv("README_API_PAGE_DEPTH", "")
        try:
            max_page_depth = int(depth_str) if depth_str else DEFAULT_PAGE_DEPTH
        except ValueError:
            raise ValueError(
                f"README_API_PAGE_DEPTH must be an integer, got '{depth_str}'."
            ) from None

        pages_file = os.getenv("README_API_CREATED_PAGES_FILE", "")

        return cls(
            source_file=Path(source_file),
            markdown_folder=Path(markdown_folder),
            pages_slug=pages_slug,
            prefix=prefix,
            base_url=os.getenv("COLLECTION_BASE_URL", ""),
            max_page_depth=max_page_depth,
            endpoint=os.getenv("README_API_ENDPOINT", ""),
            api_key=os.getenv("README_API_KEY", ""),
            category_slug=os.getenv("README_API_CATEGORY_SLUG", ""),
            version=os.getenv("README_API_VERSION", ""),
            pages_file=Path(pages_file) if pages_file else None,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            dry_run=os.getenv("DRY_RUN", "false").lower() == "true",
        )

    @property
    def missing_publish_setting(self) -> Optional[str]:
        """Name of the first empty publish variable, or None if publishing is configured."""
        for env_name, attr in PUBLISH_VARIABLES:
            if not getattr(self, attr):
                return env_name
        return None

    @property
    def can_publish(self) -> bool:
        return self.missing_publish_setting is None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.source_file, str):
            self.source_file = Path(self.source_file)
        if isinstance(self.markdown_folder, str):
            self.markdown_folder = Path(self.markdown_folder)
        if isinstance(self.pages_file, str):
            self.pages_file = Path(self.pages_file) if self.pages_file else None

        if self.max_page_depth < 1:
            raise ValueError("max_page_depth must be at least 1")

        self.endpoint = self.endpoint.rstrip("/")
