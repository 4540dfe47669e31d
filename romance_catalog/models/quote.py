from dataclasses import asdict, dataclass, field
from typing import Dict, Optional
from uuid import uuid4

from .book import utc_now_iso


@dataclass
class Quote:
    """A line from a book, as stored in the quotes table"""
    text: str
    author: str
    book_title: Optional[str] = None
    source: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "Quote":
        return cls(
            text=data["text"],
            author=data.get("author") or "",
            book_title=data.get("book_title"),
            source=data.get("source"),
            id=str(data["id"]),
            created_at=data.get("created_at") or utc_now_iso(),
        )
