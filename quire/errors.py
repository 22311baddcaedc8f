"""Error types raised while loading site content and configuration.

All errors are detected at load time, before anything consumes the site.
Each carries the identifier of the file it came from when one is known, so
a failing build can point at the offending source.
"""

from __future__ import annotations

from pathlib import Path


class QuireError(Exception):
    """Base error with optional source context.

    Attributes:
        message: Human-readable error message.
        source: Path or identifier of the file that caused the error.
    """

    def __init__(self, message: str, source: Path | str | None = None):
        self.message = message
        self.source = source
        super().__init__(message)

    def with_source(self, source: Path | str) -> QuireError:
        """Attach a source identifier if none is set yet and return self."""
        if self.source is None:
            self.source = source
        return self

    def __str__(self) -> str:
        if self.source is None:
            return self.message
        return f"{self.source}: {self.message}"


class ParseError(QuireError):
    """The front matter block is malformed or cannot be decoded."""


class ValidationError(QuireError):
    """A recognized front matter field has an invalid value.

    Attributes:
        field: Name of the offending field.
    """

    def __init__(self, field: str, message: str, source: Path | str | None = None):
        self.field = field
        super().__init__(f"{field}: {message}", source)


class ConfigError(QuireError):
    """The site configuration is missing required keys or is ambiguous."""
