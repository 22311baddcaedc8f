"""Content processing for Quire.

This module handles loading and parsing of markdown content files. It splits
the front matter from the body, validates the recognized fields, and creates
ContentItem objects representing the site's pages.

Key classes:
- ContentItem: Immutable record of one content file.
- FileContentLoader: Implementation of ContentLoader protocol for a content directory.
- UrlDeriver: Derives an item's output URL.
- ContentParser: Implementation of ItemParser protocol.
- ContentProcessor: Facade that discovers and parses every content file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from .errors import ParseError, QuireError
from .extractors import (
    CompositeMetadataExtractor,
    default_metadata_extractor,
    extract_frontmatter,
    serialize_header,
)
from .protocols import ContentLoader, ItemParser
from .utils import (
    first_paragraph,
    is_internal_path,
    is_markdown,
    reading_time,
    slugify,
    word_count,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentItem:
    """Represents one content file with its validated front matter.

    Attributes:
        title: Non-empty title.
        date: Publication date.
        body: Markdown body, exactly as it follows the header block.
        description: Optional short description.
        permalink: Optional explicit output path.
        tags: Lowercase, de-duplicated tag names in source order.
        draft: Whether the item is a draft.
        path: Path to the source file, if loaded from disk.
        section: First directory under the content root (e.g. 'posts').
        slug: URL-friendly slug.
        url: Output URL (the permalink when one is set).
        frontmatter: The full decoded header, unrecognized keys included.
    """

    title: str
    date: date
    body: str
    description: str | None = None
    permalink: str | None = None
    tags: tuple[str, ...] = ()
    draft: bool = False
    path: Path | None = None
    section: str = ""
    slug: str = ""
    url: str = ""
    frontmatter: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def summary(self) -> str:
        """Description if set, otherwise the body's first paragraph."""
        return self.description or first_paragraph(self.body)

    @property
    def word_count(self) -> int:
        return word_count(self.body)

    @property
    def reading_time(self) -> int:
        return reading_time(self.word_count)

    def header(self) -> dict[str, Any]:
        """Recognized front matter fields as a plain mapping."""
        return {
            "title": self.title,
            "date": self.date,
            "description": self.description,
            "permalink": self.permalink,
            "tags": list(self.tags) or None,
            "draft": self.draft,
        }


class FileContentLoader:
    """Discovers markdown files under a content directory.

    Paths containing a component that starts with an underscore are skipped,
    which covers section index pages such as ``_index.md``.

    Attributes:
        content_dir: Root directory of the site content.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def iter_files(self) -> list[Path]:
        """Return all content files, sorted by path."""
        files: list[Path] = []
        for path in sorted(self.content_dir.rglob("*")):
            if path.is_dir() or not is_markdown(path):
                continue
            rel = path.relative_to(self.content_dir)
            if is_internal_path(rel):
                logger.debug("Skipping internal file %s", rel)
                continue
            files.append(path)
        return files


class UrlDeriver:
    """Derives URLs for content items.

    A permalink wins; otherwise the URL follows the file's location, with
    ``index.md`` standing for its folder (page bundles).
    """

    def derive(self, rel: Path, slug: str, permalink: str | None = None) -> str:
        """Derive the URL for an item.

        Args:
            rel: Path relative to the content directory.
            slug: URL-friendly slug.
            permalink: Explicit permalink from the front matter.

        Returns:
            URL path for the item.
        """
        if permalink:
            return permalink if permalink.startswith("/") else f"/{permalink}"
        segments = [p for p in rel.parent.parts if p]
        if rel.stem != "index":
            segments.append(slug)
        path = "/".join(segments)
        return f"/{path}/" if path else "/"


class ContentParser:
    """Parses raw content text into ContentItem objects.

    Attributes:
        content_dir: Content root used to derive section, slug and URL.
        metadata_extractor: Composite field extractor.
        url_deriver: URL deriver instance.
    """

    def __init__(
        self,
        content_dir: Path | None = None,
        metadata_extractor: CompositeMetadataExtractor | None = None,
    ):
        self.content_dir = content_dir
        self.metadata_extractor = metadata_extractor or default_metadata_extractor
        self.url_deriver = UrlDeriver()

    def parse(self, text: str, path: Path | None = None) -> ContentItem:
        """Parse raw content into a ContentItem.

        Args:
            text: Raw file contents.
            path: Source path, used for derived fields and error context.

        Returns:
            Parsed ContentItem.

        Raises:
            ParseError: If the header block is malformed.
            ValidationError: If a recognized field is invalid.
        """
        try:
            frontmatter, body = extract_frontmatter(text)
            fields = self.metadata_extractor.extract(frontmatter, body, path)
        except QuireError as exc:
            if path is not None:
                exc.with_source(path)
            raise

        rel = self._relative(path)
        section = rel.parts[0] if rel is not None and len(rel.parts) > 1 else ""
        if rel is None:
            slug = slugify(fields["title"])
        elif rel.stem == "index" and len(rel.parts) > 1:
            slug = slugify(rel.parent.name)
        else:
            slug = slugify(rel.stem)
        url = self.url_deriver.derive(rel or Path(f"{slug}.md"), slug, fields.get("permalink"))

        return ContentItem(
            title=fields["title"],
            date=fields["date"],
            body=body,
            description=fields.get("description"),
            permalink=fields.get("permalink"),
            tags=fields.get("tags", ()),
            draft=fields.get("draft", False),
            path=path,
            section=section,
            slug=slug,
            url=url,
            frontmatter=frontmatter,
        )

    def _relative(self, path: Path | None) -> Path | None:
        if path is None:
            return None
        if self.content_dir is not None:
            try:
                return path.relative_to(self.content_dir)
            except ValueError:
                pass
        return Path(path.name)


class ContentProcessor:
    """Facade for discovering and parsing all content files.

    Attributes:
        content_dir: Directory containing site content.
    """

    def __init__(
        self,
        content_dir: Path,
        content_loader: ContentLoader | None = None,
        parser: ItemParser | None = None,
    ):
        self.content_dir = content_dir
        self._content_loader = content_loader or FileContentLoader(content_dir)
        self._parser = parser or ContentParser(content_dir)

    def load(self, include_drafts: bool = False) -> list[ContentItem]:
        """Load all content files.

        Loading stops at the first file that fails to parse; the raised
        error carries that file's path.

        Args:
            include_drafts: Whether to keep items marked ``draft: true``.

        Returns:
            List of ContentItem objects in path order.
        """
        items: list[ContentItem] = []
        for path in self._content_loader.iter_files():
            try:
                text = path.read_text(encoding="utf-8")
            except UnicodeDecodeError as exc:
                raise ParseError(f"not valid UTF-8: {exc.reason}", path) from exc
            item = self._parser.parse(text, path)
            if item.draft and not include_drafts:
                logger.debug("Skipping draft %s", path)
                continue
            items.append(item)
        logger.debug("Loaded %d items from %s", len(items), self.content_dir)
        return items


def parse_content(text: str, path: Path | None = None) -> ContentItem:
    """Parse raw content text with the default parser."""
    return ContentParser().parse(text, path)


def dump_item(item: ContentItem) -> str:
    """Serialize an item back to file text: YAML header followed by the body."""
    return serialize_header(item.header()) + item.body
