"""
Slug manifest persistence.

The manifest is a plain text file with one slug per line, listing the
pages created on Readme by the previous run, in creation order.
"""

from pathlib import Path

from rich.console import Console

console = Console()


def load_manifest(path: Path) -> list[str]:
    """
    Load previously created page slugs.

    A missing file is treated as a first run and yields an empty list.

    Args:
        path: Path to the manifest file.

    Returns:
        Slugs in the order they were written.
    """
    path = Path(path)
    if not path.exists():
        console.print(f"[yellow]Warning: manifest {path} not found, treating as first run[/yellow]")
        return []

    slugs = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            slug = line.strip(" \n\t\r")
            if slug:
                slugs.append(slug)
    return slugs


def save_manifest(path: Path, slugs: list[str]) -> None:
    """Write slugs to the manifest file, one per line."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        for slug in slugs:
            f.write(f"{slug}\n")


def stale_slugs(previous: list[str], current: list[str]) -> list[str]:
    """
    Slugs present in the previous manifest but not in the current run.

    The result is in reverse manifest order. The manifest records pages in
    creation order (parents first), so deleting in this order removes
    children before their parents.

    Examples:
        stale_slugs(["a", "a-b", "c"], ["a", "a-b"]) -> ["c"]
        stale_slugs(["a", "a-b", "a-b-c"], []) -> ["a-b-c", "a-b", "a"]
    """
    keep = set(current)
    stale = []
    seen = set()
    for slug in reversed(previous):
        if slug not in keep and slug not in seen:
            stale.append(slug)
            seen.add(slug)
    return stale
