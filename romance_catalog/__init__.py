# romance_catalog/__init__.py
"""
Romance catalog enrichment and recommendation pipeline.

Primary interfaces:
- BookEnricher: Fetch and merge public catalog data for one title
- EnrichmentOrchestrator: Enrich stored records in resumable batches
- RecommendationAssembler: Similar-book and curated category recommendations
- ReviewService: Reader review submission
- QuoteService: Quote of the moment from the enriched catalog

Admin interfaces:
- CatalogCSVImporter: Import cleaned CSV rows into the catalog
- MoodRecategorizer / TropeRecategorizer: Bulk taxonomy passes
"""

from .config import Settings
from .models import BookRecord, MergedBook, EnrichmentResult, EnrichmentStats
from .book_enricher import BookEnricher
from .enrichment_orchestrator import EnrichmentOrchestrator
from .recommendations import (
    BlurbGenerator,
    ChatCompletionClient,
    RecommendationAssembler,
    SessionRecommendationCache,
)
from .quotes import QuoteService
from .reviews import ReviewService
from .store import CatalogStore, DynamoCatalogStore, InMemoryCatalogStore

# Admin components
from .csv_importer import CatalogCSVImporter, ImportStats
from .recategorizer import MoodRecategorizer, TropeRecategorizer

# Internal components
from .api_caller import APICaller
from .fetchers import fetch_google_data, fetch_open_library_data
from .processors import process_google_response, process_open_library_response
from .book_merger import merge_sources, plan_field_updates

__all__ = [
    # Primary interface
    "Settings",
    "BookRecord",
    "MergedBook",
    "EnrichmentResult",
    "EnrichmentStats",
    "BookEnricher",
    "EnrichmentOrchestrator",
    "BlurbGenerator",
    "ChatCompletionClient",
    "RecommendationAssembler",
    "SessionRecommendationCache",
    "QuoteService",
    "ReviewService",
    "CatalogStore",
    "DynamoCatalogStore",
    "InMemoryCatalogStore",

    # Admin interface
    "CatalogCSVImporter",
    "ImportStats",
    "MoodRecategorizer",
    "TropeRecategorizer",

    # Internal components
    "APICaller",
    "fetch_google_data",
    "fetch_open_library_data",
    "process_google_response",
    "process_open_library_response",
    "merge_sources",
    "plan_field_updates",
]
