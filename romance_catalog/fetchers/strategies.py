"""
Query strategies shared by the bibliographic fetchers.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..utils.text import clean_title_for_search, is_blank


@dataclass(frozen=True)
class SearchStrategy:
    title: str
    author: Optional[str]
    label: str


def build_search_strategies(title: str, author: Optional[str] = None) -> List[SearchStrategy]:
    """
    Build the ordered list of queries to try for a book.

    1. Full title + author
    2. Series-stripped title + author
    3. Series-stripped title only

    Duplicate queries (e.g. a title with no series marker) are dropped.
    """
    author = None if is_blank(author) else author.strip()
    title = title.strip()
    cleaned = clean_title_for_search(title) or title

    candidates = [
        SearchStrategy(title, author, "Full title + author"),
        SearchStrategy(cleaned, author, "Clean title + author"),
        SearchStrategy(cleaned, None, "Clean title only"),
    ]

    strategies = []
    seen = set()
    for strategy in candidates:
        key = (strategy.title, strategy.author)
        if key in seen:
            continue
        seen.add(key)
        strategies.append(strategy)
    return strategies
