"""
Catalog store port. The pipeline only reads and writes through this interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import BookQuery, BookRecord, EnrichmentAttempt, Quote, Review


class CatalogStore(ABC):
    """Books, enrichment logs, reviews, quotes and the mood/genre taxonomies"""

    @abstractmethod
    def get_book(self, book_id: str) -> Optional[BookRecord]:
        ...

    @abstractmethod
    def query_books(self, query: BookQuery) -> List[BookRecord]:
        """Return matching books ordered by creation time, paginated by the query"""
        ...

    @abstractmethod
    def add_book(self, book: BookRecord) -> BookRecord:
        ...

    @abstractmethod
    def update_book(self, book_id: str, updates: dict) -> None:
        ...

    @abstractmethod
    def log_enrichment(self, attempt: EnrichmentAttempt) -> None:
        ...

    @abstractmethod
    def get_genre_name(self, genre_id: str) -> Optional[str]:
        ...

    @abstractmethod
    def get_mood_name(self, mood_id: str) -> Optional[str]:
        ...

    @abstractmethod
    def add_review(self, review: Review) -> Review:
        ...

    @abstractmethod
    def find_reviews(
        self,
        book_id: str,
        user_id: Optional[str] = None,
        user_ip: Optional[str] = None,
        since: Optional[str] = None,
    ) -> List[Review]:
        """Reviews of a book, optionally narrowed by user, address and ISO timestamp"""
        ...

    @abstractmethod
    def add_quote(self, quote: Quote) -> Quote:
        ...

    @abstractmethod
    def find_quotes(self, book_title: str) -> List[Quote]:
        """Quotes whose book title contains `book_title`, case-insensitively"""
        ...
