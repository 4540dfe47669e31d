"""
Transient recommendation models.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .book import BookRecord, SOURCE_GOOGLE_BOOKS, SOURCE_OPEN_LIBRARY


LINEAGE_DATABASE = "database"
LINEAGE_OPEN_LIBRARY = SOURCE_OPEN_LIBRARY
LINEAGE_GOOGLE_BOOKS = SOURCE_GOOGLE_BOOKS

CONTEXT_TYPES = ("book", "genre", "mood")


@dataclass
class RecommendationCandidate:
    """A catalog or externally found book plus its promotional blurb"""
    book: BookRecord
    lineage: str = LINEAGE_DATABASE
    blurb: Optional[str] = None

    @property
    def id(self) -> str:
        return self.book.id

    def to_dict(self) -> Dict[str, Any]:
        data = self.book.to_dict()
        data["lineage"] = self.lineage
        data["blurb"] = self.blurb
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecommendationCandidate":
        book_data = dict(data)
        lineage = book_data.pop("lineage", LINEAGE_DATABASE)
        blurb = book_data.pop("blurb", None)
        return cls(book=BookRecord.from_dict(book_data), lineage=lineage, blurb=blurb)


@dataclass
class RecommendationRequest:
    """Validated similar-books request"""
    context_type: str
    context_id: str
    context_data: Optional[Dict[str, Any]] = None
    limit: int = 4


@dataclass
class CacheEntry:
    data: List[RecommendationCandidate]
    timestamp: float = field(default_factory=time.time)

    def to_json(self) -> str:
        return json.dumps({
            "data": [candidate.to_dict() for candidate in self.data],
            "timestamp": self.timestamp,
        })

    @classmethod
    def from_json(cls, raw: str) -> "CacheEntry":
        """Raises ValueError/KeyError/TypeError on malformed input"""
        payload = json.loads(raw)
        return cls(
            data=[RecommendationCandidate.from_dict(item) for item in payload["data"]],
            timestamp=float(payload["timestamp"]),
        )
