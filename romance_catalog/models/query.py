"""
Catalog filter shared by every CatalogStore implementation.
"""

from dataclasses import dataclass
from typing import List, Optional

from .book import BookRecord


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle.lower() in value.lower()


@dataclass
class BookQuery:
    """
    Filter over the books table.

    `*_contains` filters are case-insensitive substring matches, `genre` and
    `heat_levels` are exact. With `match_any` the attribute filters are OR-ed
    instead of AND-ed; `exclude_id` and `book_ids` always apply.
    """
    trope_contains: Optional[str] = None
    mood_contains: Optional[str] = None
    genre: Optional[str] = None
    heat_levels: Optional[List[str]] = None
    title_equals: Optional[str] = None
    author_equals: Optional[str] = None
    has_summary: bool = False
    has_source: bool = False
    exclude_id: Optional[str] = None
    book_ids: Optional[List[str]] = None
    match_any: bool = False
    offset: int = 0
    limit: Optional[int] = None

    def matches(self, book: BookRecord) -> bool:
        if self.exclude_id is not None and book.id == self.exclude_id:
            return False
        if self.book_ids is not None and book.id not in self.book_ids:
            return False
        if self.has_summary and not book.summary:
            return False
        if self.has_source and not book.source:
            return False

        checks = []
        if self.trope_contains:
            checks.append(_contains(book.trope, self.trope_contains))
        if self.mood_contains:
            checks.append(_contains(book.mood, self.mood_contains))
        if self.genre:
            checks.append(book.genre == self.genre)
        if self.heat_levels:
            checks.append(book.heat_level in self.heat_levels)
        if self.title_equals:
            checks.append((book.title or "").lower() == self.title_equals.lower())
        if self.author_equals:
            checks.append((book.author or "").lower() == self.author_equals.lower())

        if not checks:
            return not self.match_any
        return any(checks) if self.match_any else all(checks)

    def paginate(self, books: List[BookRecord]) -> List[BookRecord]:
        ordered = sorted(books, key=lambda book: book.created_at or "")
        end = None if self.limit is None else self.offset + self.limit
        return ordered[self.offset:end]
