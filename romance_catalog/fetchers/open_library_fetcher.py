"""
Open Library search fetcher (adapter A).
"""

import logging
from typing import Dict, List, Optional

from ..api_caller import APICaller
from .strategies import build_search_strategies


OPEN_LIBRARY_SEARCH_URL = "https://openlibrary.org/search.json"

logger = logging.getLogger(__name__)


def fetch_open_library_data(title: str, author: Optional[str], api_caller: APICaller) -> Optional[Dict]:
    """
    Fetch the best matching search document from Open Library.

    Strategies are tried in order until one returns documents. The
    title-only query is skipped when an author is known, since Open Library
    title-only matches are too loose to trust.

    Returns:
        First search document, or None if nothing matched or every call failed
    """
    for strategy in build_search_strategies(title, author):
        if strategy.author is None and author:
            continue

        params = {"title": strategy.title, "limit": 5}
        if strategy.author:
            params["author"] = strategy.author

        success, status_code, data = api_caller.get(OPEN_LIBRARY_SEARCH_URL, params)
        docs = (data or {}).get("docs") or []
        if success and docs:
            logger.info(f"[{title}] Open Library success with {strategy.label}: {len(docs)} results")
            return docs[0]

        logger.debug(f"[{title}] Open Library miss with {strategy.label} (status {status_code})")

    logger.info(f"[{title}] Open Library: no results found after all attempts")
    return None


def search_open_library(keyword: str, limit: int, api_caller: APICaller) -> List[Dict]:
    """Free-text search used to pad thin recommendation lists"""
    if limit <= 0:
        return []

    success, _, data = api_caller.get(OPEN_LIBRARY_SEARCH_URL, {"q": keyword, "limit": limit})
    if not success or not data:
        return []
    return (data.get("docs") or [])[:limit]
