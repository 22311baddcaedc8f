from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from .content import ContentItem
from .utils import extract_number_from_name, normalize_tags, strip_number_prefix


def _sort_key(item: ContentItem, reverse: bool):
    stem = item.path.stem if item.path is not None else item.slug
    number = extract_number_from_name(stem)
    # Unnumbered items sort before numbered ones in both directions
    num_key = number if number is not None else (0 if not reverse else float("inf"))
    return (item.date, num_key, strip_number_prefix(stem).lower())


class ItemCollection(Sequence[ContentItem]):
    """Lightweight helper for working with lists of ContentItems."""

    def __init__(self, items: Iterable[ContentItem]):
        self._items = list(items)
        self._sorted_cache: ItemCollection | None = None

    def __iter__(self) -> Iterator[ContentItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, item):
        return self._items[item]

    def section(self, name: str) -> ItemCollection:
        return ItemCollection(i for i in self._items if i.section == name)

    def with_tag(self, tag: str) -> ItemCollection:
        names = normalize_tags([tag])
        return ItemCollection(i for i in self._items if names and names[0] in i.tags)

    def drafts(self) -> ItemCollection:
        return ItemCollection(i for i in self._items if i.draft)

    def published(self) -> ItemCollection:
        return ItemCollection(i for i in self._items if not i.draft)

    def sorted(self, reverse: bool = True) -> ItemCollection:
        """Sort items by date, then by number prefix, then by filename.

        Sorting order (when reverse=True, the default):
        1. Date: newest first
        2. Number: if dates are equal, by number prefix (e.g., 01-intro.md)
        3. Filename: if dates and numbers are equal, by filename
           (excluding date and number prefixes)

        Args:
            reverse: If True (default), newest first. If False, oldest first.

        Returns:
            A new ItemCollection with sorted items.
        """
        if reverse and self._sorted_cache is not None:
            return self._sorted_cache
        ordered = ItemCollection(
            sorted(self._items, key=lambda i: _sort_key(i, reverse), reverse=reverse)
        )
        if reverse:
            self._sorted_cache = ordered
        return ordered

    def latest(self, count: int = 5) -> ItemCollection:
        return ItemCollection(self.sorted()[:count])

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"ItemCollection({len(self._items)} items)"


class TagCollection(Mapping[str, ItemCollection]):
    """Mapping of tag name to ItemCollection with convenience helpers."""

    def __init__(self, mapping: Mapping[str, Iterable[ContentItem]]):
        self._mapping = {k: ItemCollection(v) for k, v in mapping.items()}

    @classmethod
    def from_items(cls, items: Iterable[ContentItem]) -> TagCollection:
        """Group items by each of their tags, keeping first-seen tag order."""
        index: dict[str, list[ContentItem]] = {}
        for item in items:
            for tag in item.tags:
                index.setdefault(tag, []).append(item)
        return cls(index)

    def __getitem__(self, key: str) -> ItemCollection:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def counts(self) -> list[tuple[str, int]]:
        """Tag names with item counts, most used first, then by name."""
        return sorted(
            ((tag, len(items)) for tag, items in self._mapping.items()),
            key=lambda pair: (-pair[1], pair[0]),
        )

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TagCollection({len(self._mapping)} tags)"
