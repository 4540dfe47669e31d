"""
Open Library search document processor.
"""

import logging
from typing import Dict, Optional, Tuple

from ..models import BookRecord, SourceResult, SOURCE_OPEN_LIBRARY
from ..utils.text import is_valid_cover_url


COVER_URL_TEMPLATE = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"

logger = logging.getLogger(__name__)


def _first(values) -> Optional[str]:
    if isinstance(values, list) and values:
        return values[0]
    return None


def build_cover_url(doc: Dict) -> Optional[str]:
    cover_id = doc.get("cover_i")
    if not cover_id:
        return None
    url = COVER_URL_TEMPLATE.format(cover_id=cover_id)
    return url if is_valid_cover_url(url) else None


def _split_isbns(doc: Dict):
    isbn13 = isbn10 = None
    for isbn in doc.get("isbn") or []:
        if len(isbn) == 13 and isbn13 is None:
            isbn13 = isbn
        elif len(isbn) == 10 and isbn10 is None:
            isbn10 = isbn
    return isbn13, isbn10


def _quotes(doc: Dict) -> Tuple[str, ...]:
    sentences = doc.get("first_sentence") or []
    if isinstance(sentences, str):
        sentences = [sentences]
    return tuple(s.strip() for s in sentences if isinstance(s, str) and s.strip())


def process_open_library_response(doc: Optional[Dict]) -> Optional[SourceResult]:
    """
    Normalize an Open Library search document.

    Consumes title, author_name, first_publish_year, publisher,
    number_of_pages_median, cover_i, isbn and first_sentence (kept as
    quotes). Search documents carry no description, so `summary` stays empty.
    """
    if not doc:
        return None

    isbn13, isbn10 = _split_isbns(doc)
    result = SourceResult(
        source_tag=SOURCE_OPEN_LIBRARY,
        title=doc.get("title"),
        author=_first(doc.get("author_name")),
        cover_url=build_cover_url(doc),
        publication_year=doc.get("first_publish_year"),
        publisher=_first(doc.get("publisher")),
        page_count=doc.get("number_of_pages_median"),
        isbn13=isbn13,
        isbn10=isbn10,
        quotes=_quotes(doc),
    )
    return None if result.is_empty() else result


def open_library_doc_to_book(doc: Dict, mood: Optional[str] = None, trope: Optional[str] = None) -> BookRecord:
    """Shape a keyword-search document as a catalog-like record for recommendations"""
    work_key = (doc.get("key") or "").replace("/works/", "")
    return BookRecord(
        id=f"ol-{work_key}",
        title=doc.get("title") or "Untitled",
        author=_first(doc.get("author_name")) or "Unknown Author",
        summary=_first(doc.get("first_sentence")),
        cover_url=build_cover_url(doc),
        genre="Romance",
        mood=mood,
        trope=trope,
        heat_level=None,
        source=SOURCE_OPEN_LIBRARY,
        publication_year=doc.get("first_publish_year"),
        rating=None,
    )
