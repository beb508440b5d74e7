"""
Main sync engine for Postman → Readme synchronization.

Orchestrates:
- Collection loading
- Markdown generation and file writing
- Page upserts on Readme
- Removal of pages that disappeared from the collection
- Manifest management
"""

from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .collection import CollectionItem, load_collection
from .config import Config
from .errors import ReadmeAPIError
from .manifest import load_manifest, save_manifest, stale_slugs
from .markdown_generator import GeneratedPage, MarkdownGenerator
from .readme_api import ReadmeAPI

console = Console()


@dataclass
class SyncResult:
    """Result of a sync operation."""

    pages_generated: list[str] = field(default_factory=list)
    files_failed: list[str] = field(default_factory=list)
    pages_created: list[str] = field(default_factory=list)
    pages_updated: list[str] = field(default_factory=list)
    pages_deleted: list[str] = field(default_factory=list)
    pages_failed: list[str] = field(default_factory=list)
    deletes_failed: list[str] = field(default_factory=list)
    pages_stale: list[str] = field(default_factory=list)
    published: bool = False

    @property
    def success(self) -> bool:
        """Check if every remote operation succeeded."""
        return not self.pages_failed and not self.deletes_failed


class SyncEngine:
    """
    Main orchestrator for Postman → Readme synchronization.

    Coordinates all components to perform the sync:
    1. Load the Postman collection
    2. Render Markdown pages and write them to disk
    3. Upsert pages on Readme, parents first
    4. Delete pages whose slugs are gone, children first
    5. Save the new manifest
    """

    def __init__(self, config: Config, api: Optional[ReadmeAPI] = None):
        """
        Initialize sync engine.

        Args:
            config: Configuration instance.
            api: Optional Readme client; created on first use otherwise.
        """
        self.config = config
        self.generator = MarkdownGenerator.from_config(config)
        self._api = api

    @property
    def api(self) -> ReadmeAPI:
        if self._api is None:
            self._api = ReadmeAPI(self.config)
        return self._api

    def sync(self, publish: bool = True) -> SyncResult:
        """
        Perform full synchronization.

        Args:
            publish: Whether to push the generated pages to Readme.

        Returns:
            SyncResult with details of the operation.

        Raises:
            CollectionParseError: If the collection cannot be loaded.
        """
        result = SyncResult()

        console.print("\n[bold blue]🔄 Starting Postman → Readme Sync[/bold blue]\n")

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Loading Postman collection...", total=None)
            items = load_collection(self.config.source_file)
            progress.update(task, description=f"Found {len(items)} top-level items")

        pages = self.generate(items, result)

        if not publish:
            console.print("[dim]Publishing skipped[/dim]")
            self._print_summary(result)
            return result

        missing = self.config.missing_publish_setting
        if missing:
            console.print(f"[yellow]Markdown generated. Publish process stopped: {missing} is empty[/yellow]")
            self._print_summary(result)
            return result

        previous = load_manifest(self.config.pages_file)

        if self.config.dry_run:
            result.pages_stale = stale_slugs(previous, [page.slug for page in pages])
            self._print_plan(pages, result.pages_stale)
            return result

        new_slugs = self.publish(pages, result)
        self.reconcile(previous, new_slugs, result)

        save_manifest(self.config.pages_file, new_slugs)
        result.published = True

        self._print_summary(result)

        return result

    def generate(self, items: list[CollectionItem], result: SyncResult) -> list[GeneratedPage]:
        """Render pages for the collection and write them to the markdown folder."""
        pages = self.generator.generate(items)
        self.write_pages(pages, result)
        return pages

    def write_pages(self, pages: list[GeneratedPage], result: SyncResult) -> None:
        """
        Write every page to ``<markdown folder>/<slug>.md``.

        A page that cannot be written is reported and skipped.
        """
        folder = self.config.markdown_folder
        folder.mkdir(parents=True, exist_ok=True)

        for page in pages:
            path = folder / page.filename
            try:
                with open(path, "w", encoding="utf-8") as f:
                    f.write(page.content)
            except OSError as e:
                console.print(f"[red]Error writing file {path}: {e}[/red]")
                result.files_failed.append(page.slug)
                continue

            result.pages_generated.append(page.slug)
            if self.config.debug:
                console.print(f"[dim]Wrote {path}[/dim]")

    def publish(self, pages: list[GeneratedPage], result: SyncResult) -> list[str]:
        """
        Upsert pages on Readme, top-level pages first.

        Every processed slug is returned, whether or not its upsert
        succeeded; failures are recorded in ``result``.

        Returns:
            Slugs in the order they were processed.
        """
        top_level = [page for page in pages if not page.parent_slug]
        children = [page for page in pages if page.parent_slug]

        new_slugs = []
        for page in top_level + children:
            new_slugs.append(page.slug)
            try:
                self._upsert_page(page, result)
            except ReadmeAPIError as e:
                console.print(f"[red]Failed to sync '{page.slug}': {e}[/red]")
                result.pages_failed.append(page.slug)

        return new_slugs

    def _upsert_page(self, page: GeneratedPage, result: SyncResult) -> None:
        if self.api.page_exists(page.slug):
            console.print(f"[cyan]Update the page[/cyan] {page.slug}")
            self.api.update_page(page.slug, page.title, page.content, page.parent_slug)
            result.pages_updated.append(page.slug)
        else:
            console.print(f"[green]Create the page[/green] {page.slug}")
            self.api.create_page(page.slug, page.title, page.content, page.parent_slug)
            result.pages_created.append(page.slug)

    def reconcile(self, previous: list[str], new_slugs: list[str], result: SyncResult) -> list[str]:
        """
        Delete pages listed in the previous manifest but not generated now.

        Every stale slug is attempted even if an earlier deletion failed.

        Returns:
            The stale slugs, in deletion order.
        """
        stale = stale_slugs(previous, new_slugs)
        result.pages_stale = stale

        for slug in stale:
            try:
                self.api.delete_page(slug)
            except ReadmeAPIError as e:
                console.print(f"[red]Failed to delete '{slug}': {e}[/red]")
                result.deletes_failed.append(slug)
                continue

            console.print(f"[magenta]Delete the page[/magenta] {slug}")
            result.pages_deleted.append(slug)

        return stale

    def _print_plan(self, pages: list[GeneratedPage], stale: list[str]) -> None:
        """Print what a real run would send to Readme."""
        console.print("\n[bold]Dry run - no changes sent to Readme[/bold]\n")

        table = Table(title="Pages to upsert")
        table.add_column("Slug", style="cyan")
        table.add_column("Parent", style="green")
        table.add_column("Title", style="white")

        for page in pages:
            table.add_row(page.slug, page.parent_slug or "-", page.title)

        console.print(table)

        if stale:
            console.print(f"\n[red]Would delete:[/red] {', '.join(stale)}")
        else:
            console.print("\n[dim]No pages to delete[/dim]")
        console.print("")

    def _print_summary(self, result: SyncResult) -> None:
        """Print sync summary."""
        console.print("\n" + "=" * 50)
        console.print("[bold]Sync Summary[/bold]")
        console.print("=" * 50)

        table = Table(show_header=False, box=None)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")

        table.add_row("Pages generated", str(len(result.pages_generated)))
        table.add_row("Files failed", str(len(result.files_failed)))
        table.add_row("Pages created", str(len(result.pages_created)))
        table.add_row("Pages updated", str(len(result.pages_updated)))
        table.add_row("Pages stale", str(len(result.pages_stale)))
        table.add_row("Pages deleted", str(len(result.pages_deleted)))
        table.add_row("Pages failed", str(len(result.pages_failed) + len(result.deletes_failed)))
        table.add_row("Published", "✓" if result.published else "✗")
        if self._api is not None:
            table.add_row("API requests", str(self._api.request_count))

        console.print(table)

        if result.pages_failed:
            console.print(f"\n[red]Failed:[/red] {', '.join(result.pages_failed)}")

        if result.deletes_failed:
            console.print(f"\n[red]Not deleted:[/red] {', '.join(result.deletes_failed)}")

        console.print("")

    def status(self) -> None:
        """Print current sync status."""
        console.print("\n[bold]Sync Status[/bold]\n")

        if self.config.pages_file is None:
            console.print("[yellow]README_API_CREATED_PAGES_FILE is not set.[/yellow]")
        else:
            slugs = load_manifest(self.config.pages_file)
            if not slugs:
                console.print("[yellow]No pages have been published yet.[/yellow]")
                console.print("Run 'postman-sync' to perform initial sync.")
            else:
                table = Table(title="Published Pages")
                table.add_column("Slug", style="cyan")
                table.add_column("Markdown file", style="green")

                for slug in slugs:
                    path = self.config.markdown_folder / f"{slug}.md"
                    table.add_row(slug, str(path) if path.exists() else "[dim]missing[/dim]")

                console.print(table)

        folder = self.config.markdown_folder
        count = len(list(folder.glob("*.md"))) if folder.exists() else 0
        console.print(f"\nMarkdown files in {folder}: {count}")

    def clean(self, confirm: bool = False) -> None:
        """
        Remove generated Markdown files.

        Args:
            confirm: Whether to proceed without confirmation.
        """
        if not confirm:
            console.print("[yellow]This will delete all generated Markdown files.[/yellow]")
            response = input("Are you sure? (yes/no): ")
            if response.lower() != "yes":
                console.print("Aborted.")
                return

        folder = self.config.markdown_folder
        if folder.exists():
            for path in sorted(folder.glob("*.md")):
                path.unlink()
                console.print(f"Removed: {path}")

        console.print("[green]Clean complete.[/green]")
