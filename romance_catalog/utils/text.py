"""
Text helpers shared by the adapters, merger and review service.
"""

import re
from typing import Optional

from rapidfuzz.distance import Levenshtein


VALID_COVER_DOMAINS = (
    "covers.openlibrary.org",
    "books.google.com",
    "googleapis.com",
    "googleusercontent.com",
)

_NON_ENGLISH_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\bà\b", r"\bde la\b", r"\beste\b", r"\baprès\b",
        r"\bétudiant", r"\buniversité\b", r"\bloin\b",
        r"\bchez\b", r"\bquand\b", r"\bsans\b",
    )
]


def is_blank(value) -> bool:
    """None and empty/whitespace strings are both treated as absent"""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def clean_title_for_search(title: str) -> str:
    """
    Strip series markers that confuse the search APIs.

    "Icebreaker (Maple Hills, #1)" -> "Icebreaker"
    """
    cleaned = re.sub(r"\s*\([^)]*#\d+[^)]*\)\s*", " ", title)
    cleaned = re.sub(r"\s*\[[^\]]*#\d+[^\]]*\]\s*", " ", cleaned)
    cleaned = re.sub(r"\s*#\d+\s*", " ", cleaned)
    return re.sub(r"\s+", " ", cleaned).strip()


def is_english_text(text: Optional[str]) -> bool:
    if not text:
        return False
    return not any(pattern.search(text) for pattern in _NON_ENGLISH_PATTERNS)


def is_valid_cover_url(url: Optional[str]) -> bool:
    if not url:
        return False
    if not url.startswith(("http://", "https://")):
        return False
    return any(domain in url for domain in VALID_COVER_DOMAINS)


def normalize_cover_url(url: str) -> str:
    """Force secure transport and drop the page-curl effect Google adds"""
    return url.replace("http:", "https:", 1).replace("&edge=curl", "")


def normalize_for_comparison(value: str) -> str:
    value = re.sub(r"[^\w\s]", "", value.lower())
    return re.sub(r"\s+", " ", value).strip()


def similarity_score(a: str, b: str) -> float:
    """Edit-distance similarity in [0, 1], relative to the longer string"""
    return Levenshtein.normalized_similarity(a, b)


def _loosely_equal(requested: str, fetched: str) -> bool:
    return (
        requested in fetched
        or fetched in requested
        or similarity_score(requested, fetched) > 0.7
    )


def validate_book_match(
    requested_title: str,
    requested_author: Optional[str],
    fetched_title: Optional[str],
    fetched_author: Optional[str],
) -> bool:
    """
    Check that fetched data describes the book that was asked for.

    An author mismatch is tolerated only when the titles are identical.
    """
    if not fetched_title:
        return False

    req_title = normalize_for_comparison(requested_title)
    fet_title = normalize_for_comparison(fetched_title)
    if not _loosely_equal(req_title, fet_title):
        return False

    if fetched_author and requested_author:
        req_author = normalize_for_comparison(requested_author)
        fet_author = normalize_for_comparison(fetched_author)
        if not _loosely_equal(req_author, fet_author):
            return req_title == fet_title

    return True


def strip_html(text: str) -> str:
    """Remove tags and stray angle brackets from user-supplied text"""
    text = re.sub(r"<[^>]*>", "", text)
    return re.sub(r"[<>]", "", text).strip()


def clean_html_entities(text: str) -> str:
    text = re.sub(r"<[^>]*>", "", text)
    for entity, char in (("&nbsp;", " "), ("&amp;", "&"), ("&quot;", '"'), ("&#39;", "'")):
        text = text.replace(entity, char)
    return text.strip()
