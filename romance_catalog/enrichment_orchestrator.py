"""
Enrichment Orchestrator - drives catalog records through the enrichment pipeline.

Per record: needs-enrichment? -> fetch -> merge -> decide-update -> persist -> log.
Records are processed sequentially with a fixed pause between external lookups.
"""

import logging
import time
from typing import Callable, List, Optional

from .book_enricher import BookEnricher
from .book_merger import plan_field_updates
from .exceptions import NotFoundError
from .models import (
    BookQuery,
    BookRecord,
    EnrichmentAttempt,
    EnrichmentResult,
    EnrichmentStats,
    MergedBook,
    Quote,
    SOURCE_NOT_FOUND,
)
from .store import CatalogStore
from .utils.text import is_blank, validate_book_match


class EnrichmentOrchestrator:
    """
    Coordinates the BookEnricher and the catalog store.

    Each record runs inside its own failure boundary: an exception while
    enriching one book is logged as an `error` attempt and the batch moves on.
    `enrich_single` logs the same attempt and then re-raises.
    """

    def __init__(
        self,
        enricher: BookEnricher,
        store: CatalogStore,
        delay_seconds: float = 0.5,
        batch_size: int = 25,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.enricher = enricher
        self.store = store
        self.delay_seconds = delay_seconds
        self.batch_size = batch_size
        self.sleep = sleep
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def needs_enrichment(book: BookRecord, force: bool = False) -> bool:
        """
        A record is eligible when forced, or when it has never been stamped
        with a terminal source and is missing a cover, a summary or a source,
        or still carries the placeholder summary.
        """
        if force:
            return True
        if book.is_source_tagged:
            return False
        return (
            is_blank(book.cover_url)
            or is_blank(book.summary)
            or book.has_placeholder_summary
            or is_blank(book.source)
        )

    def enrich_single(self, book_id: str, force: bool = False) -> EnrichmentResult:
        book = self.store.get_book(book_id)
        if book is None:
            raise NotFoundError("Book not found")
        try:
            return self.enrich_record(book, force)
        except Exception as e:
            self._record_failure(book, e)
            raise

    def run_batch(
        self,
        offset: int = 0,
        limit: Optional[int] = None,
        book_ids: Optional[List[str]] = None,
        force: bool = False,
    ) -> EnrichmentStats:
        """
        Enrich one page of the catalog.

        Callers keep advancing `offset` to `stats.next_offset` until
        `stats.exhausted` is true.
        """
        limit = limit or self.batch_size
        books = self.store.query_books(BookQuery(book_ids=book_ids, offset=offset, limit=limit))
        self.logger.info(
            f"Starting enrichment batch: offset={offset}, limit={limit}, "
            f"found={len(books)}, force={force}"
        )

        stats = EnrichmentStats(offset=offset, requested=limit)
        for i, book in enumerate(books, 1):
            self.logger.info(f"Processing book {i}/{len(books)}: {book.title}")
            result = self._enrich_guarded(book, force)
            stats.add(result)

            # Only records that reached the external APIs need pacing
            if result.status != "skipped" and i < len(books):
                self.sleep(self.delay_seconds)

        self.logger.info(
            f"Batch complete: {stats.updated} updated, {stats.no_data_found} without new data, "
            f"{stats.skipped} skipped, {stats.errors} errors"
        )
        return stats

    def run_all(
        self,
        batch_size: Optional[int] = None,
        book_ids: Optional[List[str]] = None,
        force: bool = False,
    ) -> List[EnrichmentStats]:
        """Keep invoking run_batch with an advancing offset until a short page"""
        batches = []
        offset = 0
        while True:
            stats = self.run_batch(offset=offset, limit=batch_size, book_ids=book_ids, force=force)
            batches.append(stats)
            if stats.exhausted:
                return batches
            offset = stats.next_offset

    def _enrich_guarded(self, book: BookRecord, force: bool) -> EnrichmentResult:
        try:
            return self.enrich_record(book, force)
        except Exception as e:
            self._record_failure(book, e)
            return EnrichmentResult(book_id=book.id, title=book.title, status="error", message=str(e))

    def _record_failure(self, book: BookRecord, error: Exception) -> None:
        self.logger.error(f"Failed to enrich book '{book.title}': {error}")
        self._log_attempt(EnrichmentAttempt(book_id=book.id, status="error", error_message=str(error)))

    def _store_quotes(self, book: BookRecord, merged: MergedBook) -> None:
        """Best effort: a failed quote write never fails the record"""
        if not merged.quotes:
            return
        try:
            if self.store.find_quotes(book.title):
                return
            for text in merged.quotes:
                self.store.add_quote(Quote(text=text, author=book.author, book_title=book.title, source=merged.source))
            self.logger.info(f"Stored {len(merged.quotes)} quotes for {book.title}")
        except Exception as e:
            self.logger.error(f"Could not store quotes for {book.title}: {e}")

    def _log_attempt(self, attempt: EnrichmentAttempt) -> None:
        try:
            self.store.log_enrichment(attempt)
        except Exception as e:
            self.logger.error(f"Could not write enrichment log for {attempt.book_id}: {e}")

    def enrich_record(self, book: BookRecord, force: bool = False) -> EnrichmentResult:
        if not self.needs_enrichment(book, force):
            self.logger.info(f"Skipping {book.title} - already enriched with source: {book.source}")
            self._log_attempt(EnrichmentAttempt(
                book_id=book.id,
                status="skipped",
                data_source=book.source,
                error_message="Already enriched",
            ))
            return EnrichmentResult(
                book_id=book.id,
                title=book.title,
                status="skipped",
                source=book.source,
                message="Already enriched",
            )

        merged = self.enricher.fetch_book_data(book.title, book.author)

        if merged.found and not validate_book_match(book.title, book.author, merged.title, merged.author):
            self.logger.warning(f"Skipping {book.title} - book mismatch detected ({merged.title})")
            self.store.update_book(book.id, {"source": SOURCE_NOT_FOUND})
            self._log_attempt(EnrichmentAttempt(
                book_id=book.id,
                status="skipped",
                fields_updated=("source",),
                data_source="validation_failed",
                error_message="Title/author mismatch - wrong book data",
            ))
            return EnrichmentResult(
                book_id=book.id,
                title=book.title,
                status="no_data",
                source=SOURCE_NOT_FOUND,
                message="Validation failed - wrong book data",
            )

        updates = plan_field_updates(book, merged, force)
        self.store.update_book(book.id, updates)
        self._store_quotes(book, merged)
        changed = [name for name in updates if name != "source"]

        if changed:
            self._log_attempt(EnrichmentAttempt(
                book_id=book.id,
                status="success",
                fields_updated=tuple(updates),
                data_source=merged.source,
            ))
            self.logger.info(f"Updated {book.title}: {', '.join(changed)}")
            return EnrichmentResult(
                book_id=book.id,
                title=book.title,
                status="updated",
                fields_updated=list(updates),
                source=merged.source,
                message=f"Updated: {', '.join(updates)}",
            )

        message = "No data found from APIs" if not merged.found else "No new fields to update"
        self._log_attempt(EnrichmentAttempt(
            book_id=book.id,
            status="partial",
            fields_updated=("source",),
            data_source=merged.source,
            error_message=message,
        ))
        self.logger.info(f"No new data for {book.title} ({merged.source})")
        return EnrichmentResult(
            book_id=book.id,
            title=book.title,
            status="no_data",
            fields_updated=["source"],
            source=merged.source,
            message=message,
        )
