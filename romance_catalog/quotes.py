"""
Quote of the moment, drawn from the enriched catalog.

A random enriched book is picked; a stored quote for it is served when one
exists, otherwise the book is looked up again and any quotes found are
stored for next time. Every failure path ends in one of the fixed quotes.
"""

import logging
import random
from typing import Dict, List, Optional

from .book_enricher import BookEnricher
from .models import BookQuery, BookRecord, Quote
from .store import CatalogStore


FALLBACK_QUOTES = [
    {
        "text": "You are my heart, my life, my one and only thought.",
        "author": "Arthur Conan Doyle",
        "book_title": "The White Company",
        "book_id": None,
    },
    {
        "text": "Whatever our souls are made of, his and mine are the same.",
        "author": "Emily Brontë",
        "book_title": "Wuthering Heights",
        "book_id": None,
    },
    {
        "text": "I would rather share one lifetime with you than face all the ages of this world alone.",
        "author": "J.R.R. Tolkien",
        "book_title": "The Lord of the Rings",
        "book_id": None,
    },
    {
        "text": (
            "I have waited for this opportunity for more than half a century, to repeat to you "
            "once again my vow of eternal fidelity and everlasting love."
        ),
        "author": "Gabriel García Márquez",
        "book_title": "Love in the Time of Cholera",
        "book_id": None,
    },
    {
        "text": "I wish you to know that you have been the last dream of my soul.",
        "author": "Charles Dickens",
        "book_title": "A Tale of Two Cities",
        "book_id": None,
    },
]

CANDIDATE_LIMIT = 100


def quote_payload(text: str, author: str, book_title: Optional[str], book_id: Optional[str]) -> Dict:
    return {"text": text, "author": author, "book_title": book_title, "book_id": book_id}


class QuoteService:

    def __init__(
        self,
        store: CatalogStore,
        enricher: BookEnricher,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.enricher = enricher
        self.rng = rng or random.Random()
        self.logger = logging.getLogger(self.__class__.__name__)

    def random_quote(self) -> Dict:
        """Always returns a quote; catalog and lookup failures fall back to a fixed one"""
        try:
            quote = self._catalog_quote()
        except Exception as e:
            self.logger.error(f"Error generating quote: {e}")
            quote = None
        return quote or dict(self.rng.choice(FALLBACK_QUOTES))

    def _catalog_quote(self) -> Optional[Dict]:
        books = self.store.query_books(BookQuery(has_source=True, limit=CANDIDATE_LIMIT))
        if not books:
            self.logger.info("No enriched books found, using fallback")
            return None

        book = self.rng.choice(books)
        self.logger.info(f"Selected book: {book.title} by {book.author}")

        stored = self.store.find_quotes(book.title)
        if stored:
            self.logger.info(f"Found {len(stored)} stored quotes for {book.title}")
            quote = self.rng.choice(stored)
            return quote_payload(quote.text, quote.author, quote.book_title, book.id)

        fetched = self._fetch_quotes(book)
        if not fetched:
            self.logger.info(f"No quotes found for {book.title}, using fallback")
            return None
        return quote_payload(self.rng.choice(fetched), book.author, book.title, book.id)

    def _fetch_quotes(self, book: BookRecord) -> List[str]:
        merged = self.enricher.fetch_book_data(book.title, book.author)
        for text in merged.quotes:
            try:
                self.store.add_quote(Quote(text=text, author=book.author, book_title=book.title, source=merged.source))
            except Exception as e:
                self.logger.error(f"Error storing quote for {book.title}: {e}")
        return merged.quotes
