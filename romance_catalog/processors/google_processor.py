"""
Google Books volume processor.
"""

import logging
from typing import Dict, Optional

from ..models import BookRecord, SourceResult, SOURCE_GOOGLE_BOOKS
from ..utils.text import is_english_text, is_valid_cover_url, normalize_cover_url


# Highest quality first
IMAGE_LINK_PREFERENCE = ("extraLarge", "large", "medium", "thumbnail", "smallThumbnail")

logger = logging.getLogger(__name__)


def select_cover_url(image_links: Optional[Dict]) -> Optional[str]:
    """Pick the best available cover and normalize it to https"""
    if not image_links:
        return None

    for size in IMAGE_LINK_PREFERENCE:
        url = image_links.get(size)
        if url:
            normalized = normalize_cover_url(url)
            return normalized if is_valid_cover_url(normalized) else None
    return None


def parse_published_year(published_date: Optional[str]) -> Optional[int]:
    if not published_date or len(published_date) < 4:
        return None
    try:
        return int(published_date[:4])
    except ValueError:
        return None


def _industry_identifiers(volume_info: Dict):
    isbn13 = isbn10 = None
    for identifier in volume_info.get("industryIdentifiers") or []:
        if identifier.get("type") == "ISBN_13":
            isbn13 = identifier.get("identifier")
        elif identifier.get("type") == "ISBN_10":
            isbn10 = identifier.get("identifier")
    return isbn13, isbn10


def process_google_response(item: Optional[Dict]) -> Optional[SourceResult]:
    """
    Normalize a Google Books volume item.

    Non-English descriptions are dropped so they never reach the catalog.
    """
    if not item:
        return None

    volume_info = item.get("volumeInfo") or {}
    title = volume_info.get("title")

    description = volume_info.get("description")
    if description and not is_english_text(description):
        logger.info(f"[{title}] Google Books: rejected non-English description")
        description = None

    authors = volume_info.get("authors") or []
    isbn13, isbn10 = _industry_identifiers(volume_info)
    result = SourceResult(
        source_tag=SOURCE_GOOGLE_BOOKS,
        title=title,
        author=authors[0] if authors else None,
        summary=description,
        cover_url=select_cover_url(volume_info.get("imageLinks")),
        publication_year=parse_published_year(volume_info.get("publishedDate")),
        publisher=volume_info.get("publisher"),
        page_count=volume_info.get("pageCount"),
        isbn13=isbn13,
        isbn10=isbn10,
    )
    return None if result.is_empty() else result


def google_item_to_book(item: Dict, mood: Optional[str] = None, trope: Optional[str] = None) -> BookRecord:
    """Shape a keyword-search volume as a catalog-like record for recommendations"""
    volume_info = item.get("volumeInfo") or {}
    authors = volume_info.get("authors") or []
    return BookRecord(
        id=f"gb-{item.get('id', '')}",
        title=volume_info.get("title") or "Untitled",
        author=authors[0] if authors else "Unknown Author",
        summary=volume_info.get("description"),
        cover_url=select_cover_url(volume_info.get("imageLinks")),
        genre="Romance",
        mood=mood,
        trope=trope,
        heat_level=None,
        source=SOURCE_GOOGLE_BOOKS,
        publication_year=parse_published_year(volume_info.get("publishedDate")),
        publisher=volume_info.get("publisher"),
        page_count=volume_info.get("pageCount"),
        rating=None,
    )
