"""
In-process catalog store for local runs and tests.
"""

from dataclasses import replace
from typing import Dict, List, Optional

from ..models import BookQuery, BookRecord, EnrichmentAttempt, Quote, Review
from ..models.book import utc_now_iso
from .base import CatalogStore


class InMemoryCatalogStore(CatalogStore):

    def __init__(
        self,
        books: Optional[List[BookRecord]] = None,
        genres: Optional[Dict[str, str]] = None,
        moods: Optional[Dict[str, str]] = None,
    ):
        self.books: Dict[str, BookRecord] = {}
        self.enrichment_logs: List[EnrichmentAttempt] = []
        self.reviews: List[Review] = []
        self.quotes: List[Quote] = []
        self.genres = dict(genres or {})
        self.moods = dict(moods or {})
        for book in books or []:
            self.add_book(book)

    def get_book(self, book_id: str) -> Optional[BookRecord]:
        book = self.books.get(str(book_id))
        return replace(book) if book else None

    def query_books(self, query: BookQuery) -> List[BookRecord]:
        matches = [replace(book) for book in self.books.values() if query.matches(book)]
        return query.paginate(matches)

    def add_book(self, book: BookRecord) -> BookRecord:
        if not book.created_at:
            book.created_at = utc_now_iso()
        self.books[book.id] = replace(book)
        return book

    def update_book(self, book_id: str, updates: dict) -> None:
        book = self.books.get(str(book_id))
        if book is None:
            raise KeyError(f"Book {book_id} not found")
        book.apply_updates(updates)

    def log_enrichment(self, attempt: EnrichmentAttempt) -> None:
        self.enrichment_logs.append(attempt)

    def get_genre_name(self, genre_id: str) -> Optional[str]:
        return self.genres.get(str(genre_id))

    def get_mood_name(self, mood_id: str) -> Optional[str]:
        return self.moods.get(str(mood_id))

    def add_review(self, review: Review) -> Review:
        self.reviews.append(review)
        return review

    def find_reviews(self, book_id, user_id=None, user_ip=None, since=None) -> List[Review]:
        return [
            review for review in self.reviews
            if review.book_id == str(book_id)
            and (user_id is None or review.user_id == user_id)
            and (user_ip is None or review.user_ip == user_ip)
            and (since is None or review.created_at >= since)
        ]

    def add_quote(self, quote: Quote) -> Quote:
        self.quotes.append(quote)
        return quote

    def find_quotes(self, book_title: str) -> List[Quote]:
        needle = book_title.lower()
        return [quote for quote in self.quotes if needle in (quote.book_title or "").lower()]
