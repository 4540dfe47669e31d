"""
Data models for the romance catalog pipeline.
"""

from .book import (
    BookRecord,
    EnrichmentAttempt,
    EnrichmentResult,
    EnrichmentStats,
    MergedBook,
    SourceResult,
    ENRICHABLE_FIELDS,
    HEAT_LEVELS,
    PLACEHOLDER_SUMMARY,
    SOURCE_GOOGLE_BOOKS,
    SOURCE_HYBRID,
    SOURCE_MANUAL,
    SOURCE_NOT_FOUND,
    SOURCE_OPEN_LIBRARY,
    TERMINAL_SOURCES,
)
from .query import BookQuery
from .recommendation import (
    CacheEntry,
    RecommendationCandidate,
    RecommendationRequest,
    CONTEXT_TYPES,
    LINEAGE_DATABASE,
    LINEAGE_GOOGLE_BOOKS,
    LINEAGE_OPEN_LIBRARY,
)
from .quote import Quote
from .review import Review, DEFAULT_NICKNAME

__all__ = [
    "BookRecord",
    "BookQuery",
    "CacheEntry",
    "EnrichmentAttempt",
    "EnrichmentResult",
    "EnrichmentStats",
    "MergedBook",
    "Quote",
    "RecommendationCandidate",
    "RecommendationRequest",
    "Review",
    "SourceResult",
    "CONTEXT_TYPES",
    "DEFAULT_NICKNAME",
    "ENRICHABLE_FIELDS",
    "HEAT_LEVELS",
    "LINEAGE_DATABASE",
    "LINEAGE_GOOGLE_BOOKS",
    "LINEAGE_OPEN_LIBRARY",
    "PLACEHOLDER_SUMMARY",
    "SOURCE_GOOGLE_BOOKS",
    "SOURCE_HYBRID",
    "SOURCE_MANUAL",
    "SOURCE_NOT_FOUND",
    "SOURCE_OPEN_LIBRARY",
    "TERMINAL_SOURCES",
]
