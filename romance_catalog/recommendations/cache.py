"""
Session-scoped recommendation cache.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, MutableMapping, Optional

from ..models import CacheEntry, RecommendationCandidate


CACHE_KEY_PREFIX = "recommendations-"

logger = logging.getLogger(__name__)


class RecommendationCache(ABC):
    """get/set over a (context type, context id) key"""

    @abstractmethod
    def get(self, context_type: str, context_id: str) -> Optional[List[RecommendationCandidate]]:
        """Return the stored candidates, or None on a miss"""
        ...

    @abstractmethod
    def set(self, context_type: str, context_id: str, candidates: List[RecommendationCandidate]) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class SessionRecommendationCache(RecommendationCache):
    """
    Stores JSON-encoded CacheEntry strings in a per-visitor mapping.

    There is no expiry; the entries live as long as the mapping does.
    Entries that fail to decode count as a miss and are removed.
    """

    def __init__(self, storage: Optional[MutableMapping[str, str]] = None):
        self.storage = storage if storage is not None else {}

    @staticmethod
    def cache_key(context_type: str, context_id: str) -> str:
        return f"{CACHE_KEY_PREFIX}{context_type}-{context_id}"

    def get(self, context_type, context_id):
        key = self.cache_key(context_type, context_id)
        raw = self.storage.get(key)
        if raw is None:
            return None

        try:
            return CacheEntry.from_json(raw).data
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Dropping malformed cache entry {key}: {e}")
            self.storage.pop(key, None)
            return None

    def set(self, context_type, context_id, candidates):
        key = self.cache_key(context_type, context_id)
        self.storage[key] = CacheEntry(data=list(candidates)).to_json()

    def clear(self):
        for key in [k for k in self.storage if k.startswith(CACHE_KEY_PREFIX)]:
            del self.storage[key]
