"""Front matter handling and field extractors for Quire.

This module splits a content file into its header block and body, decodes
the header, and validates each recognized field. Each extractor handles a
single field, and the composite extractor merges their results.

Key functions and classes:
- split_frontmatter: Split raw text into header format, header text and body.
- extract_frontmatter: Split and decode the header into a mapping.
- serialize_header: Emit a YAML header block for recognized fields.
- TitleExtractor, DateExtractor, DescriptionExtractor, PermalinkExtractor,
  TagExtractor, DraftExtractor: Per-field validation.
- CompositeMetadataExtractor: Runs all field extractors.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from .errors import ParseError, ValidationError
from .utils import extract_date_from_name, normalize_tags

logger = logging.getLogger(__name__)

DELIMITERS = {"---": "yaml", "+++": "toml"}

RECOGNIZED_KEYS = ("title", "date", "description", "permalink", "tags", "draft")

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _HeaderLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as strings.

    Dates are validated by DateExtractor, so an impossible date such as
    2023-02-30 surfaces as a ValidationError instead of a loader crash.
    """


_HeaderLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def split_frontmatter(text: str) -> tuple[str | None, str, str]:
    """Split raw content into its header block and body.

    The header must open on the very first line with ``---`` (YAML) or
    ``+++`` (TOML) and close with the same delimiter on its own line.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (header format or None, header text, body). The body is
        returned exactly as it appears after the closing delimiter line.

    Raises:
        ParseError: If the opening delimiter is never closed.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.splitlines(keepends=True)
    if not lines:
        return None, "", text
    delimiter = lines[0].rstrip()
    if delimiter not in DELIMITERS:
        return None, "", text
    for index in range(1, len(lines)):
        if lines[index].rstrip() == delimiter:
            header = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            return DELIMITERS[delimiter], header, body
    raise ParseError(f"unterminated front matter: missing closing '{delimiter}' line")


def decode_header(header: str, fmt: str) -> dict[str, Any]:
    """Decode header text in the given format into a mapping.

    Raises:
        ParseError: If the header does not decode to a mapping.
    """
    try:
        if fmt == "toml":
            data = tomllib.loads(header)
        else:
            data = yaml.load(header, Loader=_HeaderLoader)  # noqa: S506
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ParseError(f"invalid {fmt.upper()} front matter: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError(
            f"front matter must be a mapping, got {type(data).__name__}"
        )
    return data


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract and decode front matter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (front matter dict, body). Text without a header block
        yields an empty mapping and the text unchanged.
    """
    fmt, header, body = split_frontmatter(text)
    if fmt is None:
        return {}, body
    return decode_header(header, fmt), body


def serialize_header(fields: Mapping[str, Any]) -> str:
    """Serialize recognized fields as a YAML front matter block.

    Keys are written in canonical order; absent, None and false-draft values
    are omitted.

    Args:
        fields: Mapping of recognized keys (e.g. from ContentItem.header()).

    Returns:
        Header text including both ``---`` delimiter lines.
    """
    ordered: dict[str, Any] = {}
    for key in RECOGNIZED_KEYS:
        value = fields.get(key)
        if value is None or (key == "draft" and not value):
            continue
        ordered[key] = list(value) if key == "tags" else value
    dumped = yaml.safe_dump(
        ordered, sort_keys=False, allow_unicode=True, default_flow_style=False
    )
    return f"---\n{dumped}---\n"


def parse_date(value: Any) -> date:
    """Coerce a decoded header value into a calendar date.

    Accepts native dates and datetimes and ISO-8601 strings.

    Raises:
        ValueError: If the value is not a recognizable date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return date.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text).date()
    raise ValueError(f"expected a date, got {type(value).__name__}")


class TitleExtractor:
    """Validates the required, non-empty title."""

    def extract(self, header: Mapping[str, Any], body: str, path: Path | None) -> dict[str, Any]:
        """Extract the title.

        Raises:
            ValidationError: If the title is missing, not a string or blank.
        """
        title = header.get("title")
        if title is None:
            raise ValidationError("title", "is required")
        if not isinstance(title, str):
            raise ValidationError("title", f"must be a string, got {type(title).__name__}")
        if not title.strip():
            raise ValidationError("title", "must not be empty")
        return {"title": title.strip()}


class DateExtractor:
    """Validates the date, falling back to a YYYY-MM-DD filename prefix."""

    def extract(self, header: Mapping[str, Any], body: str, path: Path | None) -> dict[str, Any]:
        """Extract the date.

        Raises:
            ValidationError: If the date is unparseable, or absent from both
                the header and the filename.
        """
        value = header.get("date")
        if value is None:
            fallback = extract_date_from_name(path.stem) if path is not None else None
            if fallback is None:
                raise ValidationError("date", "is required")
            logger.debug("Using filename date %s for %s", fallback, path)
            return {"date": fallback}
        try:
            return {"date": parse_date(value)}
        except ValueError as exc:
            raise ValidationError("date", f"invalid date {value!r}") from exc


class DescriptionExtractor:
    """Validates the optional description."""

    def extract(self, header: Mapping[str, Any], body: str, path: Path | None) -> dict[str, Any]:
        description = header.get("description")
        if description is None:
            return {"description": None}
        if not isinstance(description, str):
            raise ValidationError(
                "description", f"must be a string, got {type(description).__name__}"
            )
        return {"description": description}


class PermalinkExtractor:
    """Validates the optional permalink path."""

    def extract(self, header: Mapping[str, Any], body: str, path: Path | None) -> dict[str, Any]:
        permalink = header.get("permalink")
        if permalink is None:
            return {"permalink": None}
        if not isinstance(permalink, str) or not permalink.strip():
            raise ValidationError("permalink", "must be a non-empty path string")
        return {"permalink": permalink.strip()}


class TagExtractor:
    """Validates and normalizes tags.

    A single string is treated as a one-element list. Numbers are accepted
    and converted to strings. When present, the normalized list must not be
    empty.
    """

    def extract(self, header: Mapping[str, Any], body: str, path: Path | None) -> dict[str, Any]:
        raw = header.get("tags")
        if raw is None:
            return {"tags": ()}
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, (list, tuple)):
            raise ValidationError("tags", f"must be a list, got {type(raw).__name__}")
        names: list[str] = []
        for tag in raw:
            if isinstance(tag, bool) or not isinstance(tag, (str, int)):
                raise ValidationError("tags", f"invalid tag {tag!r}")
            names.append(str(tag))
        tags = normalize_tags(names)
        if not tags:
            raise ValidationError("tags", "must not be empty when present")
        return {"tags": tuple(tags)}


class DraftExtractor:
    """Validates the draft flag."""

    def extract(self, header: Mapping[str, Any], body: str, path: Path | None) -> dict[str, Any]:
        draft = header.get("draft", False)
        if not isinstance(draft, bool):
            raise ValidationError("draft", f"must be true or false, got {draft!r}")
        return {"draft": draft}


class CompositeMetadataExtractor:
    """Combines multiple field extractors.

    This class aggregates extractors and runs them all on a decoded header,
    merging their results. Later extractors can override earlier ones.
    """

    def __init__(self, extractors: list | None = None):
        """Initialize with a list of extractors.

        Args:
            extractors: List of MetadataExtractor implementations.
                       If None, uses the default field extractors.
        """
        if extractors is None:
            self._extractors = [
                TitleExtractor(),
                DateExtractor(),
                DescriptionExtractor(),
                PermalinkExtractor(),
                TagExtractor(),
                DraftExtractor(),
            ]
        else:
            self._extractors = list(extractors)

    def add_extractor(self, extractor) -> None:
        """Add an extractor to the composite."""
        self._extractors.append(extractor)

    def extract(self, header: Mapping[str, Any], body: str, path: Path | None = None) -> dict[str, Any]:
        """Extract all fields from a decoded header.

        Args:
            header: Decoded front matter mapping.
            body: Content body.
            path: Path to the source file, if any.

        Returns:
            Dictionary with all extracted fields.
        """
        result: dict[str, Any] = {}
        for extractor in self._extractors:
            result.update(extractor.extract(header, body, path))
        return result


# Default composite extractor instance
default_metadata_extractor = CompositeMetadataExtractor()
