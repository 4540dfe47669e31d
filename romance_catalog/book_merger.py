"""
Merge & precedence rules for combining adapter results.
"""

from typing import Dict, Optional

from .models import (
    BookRecord,
    MergedBook,
    SourceResult,
    ENRICHABLE_FIELDS,
    SOURCE_HYBRID,
)
from .utils.text import is_blank


BASE_FIELDS = ("title", "author", "publication_year", "publisher", "page_count", "isbn13", "isbn10")
BACKFILL_FIELDS = ("publisher", "page_count", "isbn13", "isbn10")


def _usable(result: Optional[SourceResult]) -> Optional[SourceResult]:
    if result is None or result.is_empty():
        return None
    return result


def merge_sources(
    primary: Optional[SourceResult],
    secondary: Optional[SourceResult],
    title: str,
    author: Optional[str] = None,
) -> MergedBook:
    """
    Combine adapter A (primary) and adapter B (secondary) results.

    Rules, applied in order:
    1. Neither adapter matched -> source = not_found, title/author echo the input
    2. Base fields come from the first adapter that matched (A before B)
    3. Summary always comes from B when B has one
    4. B's cover replaces a missing cover or one supplied by A
    5. Base fields still missing are back-filled from B
    6. Quotes come from the first adapter that has any; they never affect `source`

    If the result mixes fields from both adapters, source becomes hybrid.
    This function has no side effects.
    """
    a = _usable(primary)
    b = _usable(secondary)

    merged = MergedBook(title=title, author=author or "")
    if a is None and b is None:
        return merged

    base = a or b
    sources: Dict[str, str] = {}

    def take(field_name: str, result: SourceResult) -> None:
        value = getattr(result, field_name)
        if not is_blank(value):
            setattr(merged, field_name, value)
            sources[field_name] = result.source_tag

    for field_name in BASE_FIELDS:
        take(field_name, base)
    merged.source = base.source_tag

    if b is not None and not is_blank(b.summary):
        take("summary", b)
    else:
        take("summary", base)

    take("cover_url", base)
    if b is not None and not is_blank(b.cover_url):
        if is_blank(merged.cover_url) or sources.get("cover_url") != b.source_tag:
            take("cover_url", b)

    if b is not None and b is not base:
        for field_name in BACKFILL_FIELDS:
            if is_blank(getattr(merged, field_name)):
                take(field_name, b)

    for result in (a, b):
        if result is not None and result.quotes:
            merged.quotes = list(result.quotes)
            break

    merged.field_sources = sources
    contributors = set(sources.values())
    if len(contributors) > 1:
        merged.source = SOURCE_HYBRID
    elif contributors:
        merged.source = contributors.pop()
    return merged


def plan_field_updates(existing: BookRecord, merged: MergedBook, force: bool = False) -> Dict:
    """
    Decide which catalog fields to write for an enrichment result.

    `source` is always written so the record is marked as attempted.
    Other fields are only set when the catalog lacks them, unless the
    existing summary is the generic placeholder or `force` is set.
    """
    updates = {"source": merged.source}

    for field_name in ENRICHABLE_FIELDS:
        new_value = getattr(merged, field_name)
        if is_blank(new_value):
            continue

        old_value = getattr(existing, field_name)
        replaceable = (
            force
            or is_blank(old_value)
            or (field_name == "summary" and existing.has_placeholder_summary)
        )
        if replaceable and new_value != old_value:
            updates[field_name] = new_value

    return updates
