"""
Core Book Enricher - single title lookup across both bibliographic adapters.
Handles a (title, author) -> MergedBook transformation without touching the catalog.
"""

import logging
from typing import Optional

from .api_caller import APICaller
from .book_merger import merge_sources
from .fetchers import fetch_google_data, fetch_open_library_data
from .models import MergedBook, SourceResult
from .processors import process_google_response, process_open_library_response


class BookEnricher:
    """
    Queries adapter A (Open Library) then adapter B (Google Books) and merges
    the results.

    Adapter failures are logged and treated as "no data from this source";
    fetch_book_data never raises because of a network or parse error.
    """

    def __init__(self, google_api_key: Optional[str] = None, api_caller: Optional[APICaller] = None):
        self.google_api_key = google_api_key
        self.api_caller = api_caller or APICaller()
        self.logger = logging.getLogger(self.__class__.__name__)

    def fetch_book_data(self, title: str, author: Optional[str] = None) -> MergedBook:
        """
        Main lookup method.

        Args:
            title: Title as stored in the catalog (series markers allowed)
            author: Optional author name

        Returns:
            MergedBook whose `source` is open_library, google_books, hybrid or not_found
        """
        self.logger.info(f"Fetching book data: {title} by {author or 'unknown author'}")

        open_library = self._fetch_open_library(title, author)
        google = self._fetch_google(title, author)
        merged = merge_sources(open_library, google, title, author)

        self.logger.info(
            f"[{title}] Final result - source: {merged.source}, "
            f"has_cover: {bool(merged.cover_url)}, has_summary: {bool(merged.summary)}"
        )
        return merged

    def _fetch_open_library(self, title: str, author: Optional[str]) -> Optional[SourceResult]:
        try:
            doc = fetch_open_library_data(title, author, self.api_caller)
            return process_open_library_response(doc)
        except Exception as e:
            self.logger.error(f"[{title}] Open Library error: {e}")
            return None

    def _fetch_google(self, title: str, author: Optional[str]) -> Optional[SourceResult]:
        try:
            item = fetch_google_data(title, author, self.api_caller, self.google_api_key)
            return process_google_response(item)
        except Exception as e:
            self.logger.error(f"[{title}] Google Books error: {e}")
            return None
