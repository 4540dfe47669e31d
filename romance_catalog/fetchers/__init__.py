"""
Data fetcher modules for the bibliographic adapters.
"""

from .google_fetcher import fetch_google_data, search_google_books
from .open_library_fetcher import fetch_open_library_data, search_open_library
from .strategies import SearchStrategy, build_search_strategies

__all__ = [
    "SearchStrategy",
    "build_search_strategies",
    "fetch_google_data",
    "fetch_open_library_data",
    "search_google_books",
    "search_open_library",
]
