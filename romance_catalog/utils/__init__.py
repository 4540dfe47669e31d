"""
Utility functions for the romance catalog pipeline.
"""

from .text import (
    clean_html_entities,
    clean_title_for_search,
    is_blank,
    is_english_text,
    is_valid_cover_url,
    normalize_cover_url,
    similarity_score,
    strip_html,
    validate_book_match,
)

__all__ = [
    "clean_html_entities",
    "clean_title_for_search",
    "is_blank",
    "is_english_text",
    "is_valid_cover_url",
    "normalize_cover_url",
    "similarity_score",
    "strip_html",
    "validate_book_match",
]
