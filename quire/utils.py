"""Utility functions for Quire.

This module contains small string and path helpers used throughout the Quire
codebase.

Key functions:
    slugify: Convert filenames to URL slugs.
    titleize: Convert filenames to human-readable titles.
    normalize_tags: Lowercase and de-duplicate tag names.
    tag_slug: URL path segment for a tag.
    extract_date_from_name: Extract date from filename prefix.
    first_paragraph: Plain-text first paragraph of a markdown body.
    word_count: Count words in a markdown body.
    is_markdown: Check if a path is a Markdown file.
    is_internal_path: Check if a path is hidden from the content scan.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from urllib.parse import quote

WORDS_PER_MINUTE = 213

_CODE_FENCE_RE = re.compile(r"^(```|~~~).*?^\1\s*$", re.DOTALL | re.MULTILINE)
_SHORTCODE_RE = re.compile(r"\{\{[<%].*?[>%]\}\}", re.DOTALL)


def _strip_date_prefix(name: str) -> str:
    parts = name.split("-")
    if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
        return "-".join(parts[3:])
    return name


def slugify(name: str) -> str:
    """Convert filename (without extension) to slug, dropping date prefix.

    Args:
        name: Filename stem.

    Returns:
        URL-friendly slug.
    """
    cleaned = _strip_date_prefix(name)
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Removes date prefixes (YYYY-MM-DD), replaces hyphens and underscores
    with spaces, and capitalizes each word.

    Examples:
        >>> titleize("2024-01-15-hello-world.md")
        'Hello World'
    """
    base = _strip_date_prefix(Path(filename).stem)
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def extract_date_from_name(name: str) -> date | None:
    """Extract a date from a filename with YYYY-MM-DD prefix.

    Args:
        name: Filename stem (without extension).

    Returns:
        date object if a valid date prefix is found, None otherwise.

    Examples:
        >>> extract_date_from_name("2024-01-15-hello-world")
        datetime.date(2024, 1, 15)
    """
    parts = name.split("-")
    if len(parts) >= 3 and all(p.isdigit() for p in parts[:3]):
        try:
            return date(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            return None
    return None


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Lowercase, strip and de-duplicate tags, keeping first-seen order.

    Blank tags are dropped.
    """
    seen: list[str] = []
    for tag in tags:
        cleaned = " ".join(tag.split()).lower()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def tag_slug(tag: str) -> str:
    """URL path segment for a normalized tag.

    Spaces become hyphens and other reserved characters are percent-encoded,
    so "c++" and "c#" map to distinct segments ("c++" and "c%23").
    """
    return quote(tag.replace(" ", "-"), safe="+")


def _plain_text(text: str) -> str:
    text = _CODE_FENCE_RE.sub("", text)
    text = _SHORTCODE_RE.sub("", text)
    return re.sub(r"<[^>]+>", "", text)


def first_paragraph(text: str, limit: int = 160) -> str:
    """Extract and clean the first prose paragraph from markdown.

    Skips headings, images, code fences and shortcodes, strips HTML tags,
    collapses whitespace and truncates to the specified limit.

    Args:
        text: Markdown body to extract from.
        limit: Maximum character length of result.

    Returns:
        Cleaned first paragraph, truncated to limit characters.
    """
    paragraphs = [p.strip() for p in _plain_text(text).split("\n\n") if p.strip()]
    for para in paragraphs:
        if para.startswith(("#", "![", "---")):
            continue
        collapsed = " ".join(para.split())
        if collapsed:
            return collapsed[:limit]
    return ""


def word_count(text: str) -> int:
    """Count the words of a markdown body, ignoring code fences and markup."""
    return len(re.findall(r"\w+(?:['’-]\w+)*", _plain_text(text)))


def reading_time(words: int) -> int:
    """Estimated reading time in whole minutes, never less than one."""
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def is_internal_path(path: Path) -> bool:
    """Check if a path is internal (contains components starting with _).

    Internal paths include section index pages and drafts-in-progress.

    Args:
        path: Path to check, relative to the content root.

    Returns:
        True if any path component starts with underscore.
    """
    return any(part.startswith("_") for part in path.parts)


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md or .markdown extension (case-insensitive).
    """
    return path.suffix.lower() in (".md", ".markdown")


def extract_number_from_name(name: str) -> int | None:
    """Extract a leading number from a filename for sorting.

    Handles filenames like "01-intro.md", "2-getting-started.md", etc.
    If the filename has a date prefix, extracts number after the date.

    Args:
        name: Filename stem (without extension).

    Returns:
        The extracted number, or None if no number found.
    """
    parts = name.split("-")

    if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
        if parts[3].isdigit():
            return int(parts[3])
        return None

    if parts and parts[0].isdigit():
        return int(parts[0])

    return None


def strip_number_prefix(name: str) -> str:
    """Strip date and number prefixes from filename for sorting comparison.

    Args:
        name: Filename stem (without extension).

    Returns:
        Filename with date and number prefixes removed.
    """
    parts = name.split("-")

    if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
        parts = parts[3:]
        if parts and parts[0].isdigit():
            parts = parts[1:]
    elif parts and parts[0].isdigit():
        parts = parts[1:]

    return "-".join(parts) if parts else name
