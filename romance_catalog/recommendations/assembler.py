"""
Recommendation assembler: tiered catalog selection, external fallback and blurbs.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..api_caller import APICaller
from ..exceptions import ValidationError
from ..fetchers import search_google_books, search_open_library
from ..models import (
    BookQuery,
    BookRecord,
    RecommendationCandidate,
    RecommendationRequest,
    CONTEXT_TYPES,
    LINEAGE_DATABASE,
    LINEAGE_GOOGLE_BOOKS,
    LINEAGE_OPEN_LIBRARY,
)
from ..processors import google_item_to_book, open_library_doc_to_book
from ..store import CatalogStore
from .blurbs import BlurbGenerator
from .cache import RecommendationCache
from .categories import CategoryFilter, get_category


DEFAULT_LIMIT = 4
MAX_LIMIT = 20
CATEGORY_LIMIT = 6
MIN_LOCAL_RESULTS = 3


def sanitize_limit(limit: Any, default: int = DEFAULT_LIMIT) -> int:
    """Integer in [1, MAX_LIMIT]; unparsable or zero values fall back to the default"""
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return default
    if value == 0:
        return default
    return max(1, min(value, MAX_LIMIT))


def build_request(
    context_type: Any,
    context_id: Any,
    context_data: Optional[Dict] = None,
    limit: Any = None,
) -> RecommendationRequest:
    if not context_type or context_type not in CONTEXT_TYPES:
        raise ValidationError("Invalid context type")
    if isinstance(context_id, int) and not isinstance(context_id, bool):
        context_id = str(context_id)
    if not context_id or not isinstance(context_id, str) or len(context_id) > 100:
        raise ValidationError("Invalid context ID")
    if context_data is not None and not isinstance(context_data, dict):
        raise ValidationError("Invalid context data")

    return RecommendationRequest(
        context_type=context_type,
        context_id=context_id,
        context_data=context_data,
        limit=sanitize_limit(limit),
    )


class RecommendationAssembler:
    """
    Builds recommendation lists for a book, genre, mood or curated category.

    Catalog selection is synchronous; blurbs for the final list are generated
    concurrently. Results are cached per context when a cache is supplied.
    """

    def __init__(
        self,
        store: CatalogStore,
        blurbs: BlurbGenerator,
        api_caller: Optional[APICaller] = None,
        google_api_key: Optional[str] = None,
        cache: Optional[RecommendationCache] = None,
    ):
        self.store = store
        self.blurbs = blurbs
        self.api_caller = api_caller or APICaller()
        self.google_api_key = google_api_key
        self.cache = cache
        self.logger = logging.getLogger(self.__class__.__name__)

    # Similar books

    def similar_books(self, request: RecommendationRequest) -> List[RecommendationCandidate]:
        return asyncio.run(self.similar_books_async(request))

    async def similar_books_async(self, request: RecommendationRequest) -> List[RecommendationCandidate]:
        cached = self._cached(request.context_type, request.context_id)
        if cached is not None:
            return cached

        context_book = self._context_book(request) if request.context_type == "book" else None
        candidates = self.select_similar(request, context_book)
        await self.blurbs.attach_blurbs(candidates, request.context_type, context_book)

        self._store_cache(request.context_type, request.context_id, candidates)
        return candidates

    def select_similar(
        self,
        request: RecommendationRequest,
        context_book: Optional[Dict] = None,
    ) -> List[RecommendationCandidate]:
        if request.context_type == "book":
            if context_book is None:
                context_book = self._context_book(request)
            if not context_book:
                self.logger.info(f"No context data for book {request.context_id}")
                return []
            queries = self._book_tiers(request.context_id, context_book)
        elif request.context_type == "genre":
            name = self.store.get_genre_name(request.context_id)
            queries = [BookQuery(genre=name)] if name else []
        else:
            name = self.store.get_mood_name(request.context_id)
            queries = [BookQuery(mood_contains=name)] if name else []

        books = self._collect(queries, request.limit, exclude_id=request.context_id)
        self.logger.info(f"Selected {len(books)} books for {request.context_type} {request.context_id}")
        return [RecommendationCandidate(book=book, lineage=LINEAGE_DATABASE) for book in books]

    def _context_book(self, request: RecommendationRequest) -> Optional[Dict]:
        if request.context_data:
            return request.context_data
        book = self.store.get_book(request.context_id)
        return book.to_dict() if book else None

    @staticmethod
    def _book_tiers(book_id: str, data: Dict) -> List[BookQuery]:
        trope = data.get("trope")
        mood = data.get("mood")
        genre = data.get("genre")
        heat_level = data.get("heat_level")

        queries = []
        if trope:
            queries.append(BookQuery(trope_contains=trope, exclude_id=book_id))
        if mood and heat_level:
            queries.append(BookQuery(mood_contains=mood, heat_levels=[heat_level], exclude_id=book_id))
        if genre:
            queries.append(BookQuery(genre=genre, exclude_id=book_id))
        if mood or trope or genre:
            queries.append(BookQuery(
                mood_contains=mood,
                trope_contains=trope,
                genre=genre,
                match_any=True,
                exclude_id=book_id,
            ))
        return queries

    def _collect(self, queries: List[BookQuery], limit: int, exclude_id: Optional[str] = None) -> List[BookRecord]:
        """Run queries in order, keeping first-seen books until `limit` are collected"""
        selected: List[BookRecord] = []
        seen = set()
        if exclude_id:
            seen.add(exclude_id)

        for query in queries:
            if len(selected) >= limit:
                break
            # Over-fetch so duplicates from earlier tiers don't starve this one
            query.limit = limit + len(seen)
            for book in self.store.query_books(query):
                if book.id in seen:
                    continue
                seen.add(book.id)
                selected.append(book)
                if len(selected) >= limit:
                    break
        return selected

    # Curated categories

    def category_recommendations(self, category: str) -> List[RecommendationCandidate]:
        return asyncio.run(self.category_recommendations_async(category))

    async def category_recommendations_async(self, category: str) -> List[RecommendationCandidate]:
        category_filter = get_category(category)

        cached = self._cached("category", category)
        if cached is not None:
            return cached

        candidates = self.select_for_category(category_filter)
        await self.blurbs.attach_blurbs(candidates, "category")

        self._store_cache("category", category, candidates)
        return candidates

    def select_for_category(self, category_filter: CategoryFilter) -> List[RecommendationCandidate]:
        books = self.store.query_books(category_filter.to_query(CATEGORY_LIMIT))
        candidates = [RecommendationCandidate(book=book, lineage=LINEAGE_DATABASE) for book in books]
        self.logger.info(f"Found {len(candidates)} catalog books for '{category_filter.search_keyword}'")

        if len(candidates) < MIN_LOCAL_RESULTS:
            candidates.extend(self._external_candidates(category_filter, candidates))

        return candidates[:CATEGORY_LIMIT]

    def _external_candidates(
        self,
        category_filter: CategoryFilter,
        existing: List[RecommendationCandidate],
    ) -> List[RecommendationCandidate]:
        seen_ids = {candidate.id for candidate in existing}
        seen_titles = {(candidate.book.title or "").lower() for candidate in existing}
        found: List[RecommendationCandidate] = []

        def add(book: BookRecord, lineage: str):
            title_key = (book.title or "").lower()
            if book.id in seen_ids or title_key in seen_titles:
                return
            seen_ids.add(book.id)
            seen_titles.add(title_key)
            found.append(RecommendationCandidate(book=book, lineage=lineage))

        needed = CATEGORY_LIMIT - len(existing)
        keyword = category_filter.search_keyword

        try:
            for doc in search_open_library(keyword, needed, self.api_caller):
                add(open_library_doc_to_book(doc, category_filter.mood_keyword, category_filter.trope), LINEAGE_OPEN_LIBRARY)
        except Exception as e:
            self.logger.error(f"Open Library category search failed: {e}")

        if len(found) < needed:
            try:
                items = search_google_books(keyword, needed - len(found), self.api_caller, self.google_api_key)
                for item in items:
                    add(google_item_to_book(item, category_filter.mood_keyword, category_filter.trope), LINEAGE_GOOGLE_BOOKS)
            except Exception as e:
                self.logger.error(f"Google Books category search failed: {e}")

        self.logger.info(f"Added {len(found)} external books for '{keyword}'")
        return found[:needed]

    # Cache

    def _cached(self, context_type: str, context_id: str) -> Optional[List[RecommendationCandidate]]:
        if self.cache is None:
            return None
        cached = self.cache.get(context_type, context_id)
        if cached is not None:
            self.logger.info(f"Cache hit for {context_type} {context_id}")
        return cached

    def _store_cache(self, context_type: str, context_id: str, candidates: List[RecommendationCandidate]):
        if self.cache is not None and candidates:
            self.cache.set(context_type, context_id, candidates)
