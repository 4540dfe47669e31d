"""
Google Books API fetcher (adapter B).
"""

import logging
from typing import Dict, List, Optional

from ..api_caller import APICaller
from .strategies import build_search_strategies


GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1/volumes"

logger = logging.getLogger(__name__)


def fetch_google_data(
    title: str,
    author: Optional[str],
    api_caller: APICaller,
    api_key: Optional[str],
) -> Optional[Dict]:
    """
    Fetch the best matching volume from Google Books.

    Every strategy is tried, including title-only, restricted to English
    editions.

    Returns:
        First volume item, or None if no key is configured or nothing matched
    """
    if not api_key:
        logger.warning(f"[{title}] Google Books API key not configured, skipping")
        return None

    for strategy in build_search_strategies(title, author):
        query = f"intitle:{strategy.title}"
        if strategy.author:
            query += f" inauthor:{strategy.author}"

        params = {
            "q": query,
            "langRestrict": "en",
            "maxResults": 5,
            "key": api_key,
        }

        success, status_code, data = api_caller.get(GOOGLE_BOOKS_URL, params)
        items = (data or {}).get("items") or []
        if success and items:
            logger.info(f"[{title}] Google Books success with {strategy.label}: {len(items)} results")
            return items[0]

        logger.debug(f"[{title}] Google Books miss with {strategy.label} (status {status_code})")

    logger.info(f"[{title}] Google Books: no results found after all attempts")
    return None


def search_google_books(
    keyword: str,
    limit: int,
    api_caller: APICaller,
    api_key: Optional[str],
) -> List[Dict]:
    """Free-text search used to pad thin recommendation lists"""
    if limit <= 0 or not api_key:
        return []

    params = {
        "q": keyword,
        "langRestrict": "en",
        "maxResults": min(limit, 40),
        "key": api_key,
    }
    success, _, data = api_caller.get(GOOGLE_BOOKS_URL, params)
    if not success or not data:
        return []
    return (data.get("items") or [])[:limit]
