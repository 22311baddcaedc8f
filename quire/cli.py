"""Command-line interface for Quire.

This module defines the CLI commands using Click framework.

Commands:
- check: Load and validate the whole site.
- list: Print one page of a listing.
- tags: Print tags with item counts.
- menu: Print the main menu in display order.
- new: Create a new content file with a front matter header.
"""

from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path

import click
import questionary

from . import __version__
from .content import ContentItem, dump_item
from .errors import QuireError
from .site import CONTENT_DIR, Site, load_site
from .utils import is_markdown, normalize_tags, titleize


def setup_logging(verbose: bool) -> None:
    """Configure logging for CLI runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="quire")
@click.option("-v", "--verbose", is_flag=True, help="Log each file as it is loaded")
def cli(verbose: bool):
    """Quire site content checker."""
    setup_logging(verbose)


root_option = click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project root holding the configuration file",
)
drafts_option = click.option("--drafts", is_flag=True, help="Include draft content")


def _load(root: Path, drafts: bool) -> Site:
    """Load the site, reporting failures the way `check` does."""
    project_root = root.resolve()
    try:
        return load_site(project_root, include_drafts=drafts)
    except QuireError as exc:
        click.echo(click.style("Load failed:", fg="red", bold=True), err=True)
        if exc.source is not None:
            click.echo(click.style(f"  File: {_relative(exc.source, project_root)}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None


def _relative(source: Path | str, root: Path) -> str:
    path = Path(source)
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


@cli.command()
@root_option
@drafts_option
def check(root: Path, drafts: bool):
    """Load and validate configuration and content."""
    site = _load(root, drafts)
    for url, paths in site.duplicate_permalinks().items():
        files = ", ".join(_relative(p, site.content_dir) for p in paths)
        click.echo(click.style(f"Warning: {url} is claimed by {files}", fg="yellow"), err=True)
    click.echo(
        f"Checked {len(site.items)} items, {len(site.tags)} tags, "
        f"{len(site.listing())} listing pages for {site.config.title}"
    )


@cli.command(name="list")
@root_option
@drafts_option
@click.option("--section", help="Only list items of this section (e.g. posts)")
@click.option("--page", "number", type=int, default=1, show_default=True, help="Listing page to show")
def list_items(root: Path, drafts: bool, section: str | None, number: int):
    """Print one listing page, newest first."""
    site = _load(root, drafts)
    pagers = site.listing(section, include_drafts=drafts)
    if not pagers:
        click.echo("No items.")
        return
    if not 1 <= number <= len(pagers):
        raise click.ClickException(f"Page {number} out of range (1-{len(pagers)})")
    pager = pagers[number - 1]
    click.echo(f"{pager.url} (page {pager.number} of {pager.total_pages})")
    for item in pager.items:
        marker = click.style(" [draft]", fg="yellow") if item.draft else ""
        click.echo(f"  {item.date.isoformat()}  {item.title}{marker}  {item.url}")


@cli.command()
@root_option
def tags(root: Path):
    """Print tags with the number of items carrying each."""
    site = _load(root, False)
    for tag, count in site.tags.counts():
        click.echo(f"{tag}\t{count}")


@cli.command()
@root_option
def menu(root: Path):
    """Print the main menu in display order."""
    site = _load(root, False)
    for entry in site.config.menu_entries:
        click.echo(f"{entry.weight}\t{entry.name}\t{entry.url}")


@cli.command()
@click.argument("path")
@root_option
@click.option("--title", help="Title of the new item (prompted when omitted)")
@click.option("--tag", "tag_names", multiple=True, help="Tag to add; repeatable")
@click.option("--draft", is_flag=True, help="Mark the new item as a draft")
def new(path: str, root: Path, title: str | None, tag_names: tuple[str, ...], draft: bool):
    """Create a new content file under content/."""
    target = root / CONTENT_DIR / path
    if not is_markdown(target):
        target = target.with_name(f"{target.name}.md")
    if target.exists():
        raise click.ClickException(f"File already exists: {target}")

    if title is None:
        title = questionary.text(
            "Title:",
            default=titleize(target.name),
            validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
            style=_questionary_style(),
        ).ask()
        if title is None:
            raise click.Abort()
    if not title.strip():
        raise click.ClickException("Title cannot be empty")

    item = ContentItem(
        title=title.strip(),
        date=date.today(),
        body="\n",
        tags=tuple(normalize_tags(tag_names)),
        draft=draft,
    )
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dump_item(item), encoding="utf-8")
    click.echo(f"Created {target}")


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
