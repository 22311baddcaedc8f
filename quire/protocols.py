"""Protocol definitions for Quire.

This module defines the interfaces used between Quire's loading components,
so that file discovery, field extraction and item parsing can be swapped
independently (for tests, or for content that lives somewhere other than a
directory tree).
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .content import ContentItem


@runtime_checkable
class MetadataExtractor(Protocol):
    """Protocol for extracting one field from a decoded header.

    Implementations validate a specific recognized key (title, date, tags...)
    and raise ValidationError when its value is unusable.
    """

    @abstractmethod
    def extract(self, header: Mapping[str, Any], body: str, path: Path | None) -> dict[str, Any]:
        """Extract fields from a decoded header.

        Args:
            header: Decoded front matter mapping.
            body: Content body.
            path: Path to the source file, if known.

        Returns:
            Dictionary of extracted fields.
        """
        ...


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering content files.

    This separates file discovery from parsing.
    """

    @abstractmethod
    def iter_files(self) -> list[Path]:
        """Return all content files, in a stable order."""
        ...


@runtime_checkable
class ItemParser(Protocol):
    """Protocol for turning raw text into a ContentItem."""

    @abstractmethod
    def parse(self, text: str, path: Path | None = None) -> ContentItem:
        """Parse raw content text.

        Args:
            text: Raw file contents.
            path: Source path, used for derived fields and error context.

        Returns:
            Parsed ContentItem.
        """
        ...
