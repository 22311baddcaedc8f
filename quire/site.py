"""Site loading for Quire.

This module ties configuration and content together. It loads the
configuration document once, parses every content file, and exposes the
listing model: chronological listings, tag taxonomy and pagination.

Key functions:
- load_site: Load a whole project from its root directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .collections import ItemCollection, TagCollection
from .config import SiteConfig, find_config, load_config
from .content import ContentProcessor
from .errors import ConfigError
from .pagination import Pager, paginate
from .utils import normalize_tags, tag_slug

logger = logging.getLogger(__name__)

CONTENT_DIR = "content"


@dataclass
class Site:
    """A loaded site: configuration plus parsed content.

    Attributes:
        config: Site configuration.
        items: All loaded content items, in path order.
        content_dir: Directory the items were loaded from.
    """

    config: SiteConfig
    items: ItemCollection
    content_dir: Path
    tags: TagCollection = field(init=False)

    def __post_init__(self) -> None:
        self.tags = TagCollection.from_items(self.items.published())

    @property
    def sections(self) -> list[str]:
        """Names of the sections that hold at least one item."""
        return sorted({item.section for item in self.items if item.section})

    def listing(self, section: str | None = None, include_drafts: bool = False) -> list[Pager]:
        """Paginate items newest first.

        Args:
            section: Restrict to one section; None lists every item.
            include_drafts: Keep loaded drafts in the listing.
        """
        items = self.items if include_drafts else self.items.published()
        base_url = "/"
        if section:
            items = items.section(section)
            base_url = f"/{section}/"
        return paginate(items.sorted(), self.config.paginate, base_url)

    def tag_listing(self, tag: str) -> list[Pager]:
        """Paginate the items carrying ``tag``, newest first.

        Raises:
            KeyError: If no published item has the tag.
        """
        names = normalize_tags([tag])
        if not names:
            raise KeyError(tag)
        name = names[0]
        items = self.tags[name]
        return paginate(items.sorted(), self.config.paginate, f"/tags/{tag_slug(name)}/")

    def duplicate_permalinks(self) -> dict[str, list[Path]]:
        """URLs claimed by more than one item, with the claiming files."""
        claims: dict[str, list[Path]] = {}
        for item in self.items:
            claims.setdefault(item.url, []).append(item.path)
        return {url: paths for url, paths in claims.items() if len(paths) > 1}


def load_site(project_root: Path, include_drafts: bool = False) -> Site:
    """Load configuration and content from a project root.

    Loading fails fast: the first invalid file aborts with an error naming it.

    Args:
        project_root: Directory holding the configuration file and ``content/``.
        include_drafts: Whether to keep items marked as drafts.

    Returns:
        The loaded Site.

    Raises:
        ConfigError: If the configuration is missing or invalid, or there is
            no content directory.
        ParseError: If a content file has a malformed header.
        ValidationError: If a content file has an invalid field.
    """
    config = load_config(find_config(project_root))
    content_dir = project_root / CONTENT_DIR
    if not content_dir.is_dir():
        raise ConfigError(f"expected content directory at {content_dir}", project_root)
    items = ContentProcessor(content_dir).load(include_drafts=include_drafts)
    logger.info("Loaded %d items for %s", len(items), config.title)
    return Site(config=config, items=ItemCollection(items), content_dir=content_dir)
