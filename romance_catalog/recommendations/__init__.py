"""
Recommendation assembly, blurb generation and caching.
"""

from .assembler import RecommendationAssembler, build_request, sanitize_limit
from .blurbs import BlurbGenerator, FALLBACK_BLURB
from .cache import RecommendationCache, SessionRecommendationCache
from .categories import CATEGORY_FILTERS, CategoryFilter, get_category
from .chat_client import ChatCompletionClient, ChatCompletionError

__all__ = [
    "BlurbGenerator",
    "CategoryFilter",
    "ChatCompletionClient",
    "ChatCompletionError",
    "RecommendationAssembler",
    "RecommendationCache",
    "SessionRecommendationCache",
    "build_request",
    "get_category",
    "sanitize_limit",
    "CATEGORY_FILTERS",
    "FALLBACK_BLURB",
]
