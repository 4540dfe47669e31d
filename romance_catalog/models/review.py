from dataclasses import asdict, dataclass, field
from typing import Dict, Optional
from uuid import uuid4

from .book import utc_now_iso


DEFAULT_NICKNAME = "A Hopeless Romantic"


@dataclass
class Review:
    book_id: str
    user_id: str
    rating: int
    review_text: str
    nickname: str = DEFAULT_NICKNAME
    user_ip: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "Review":
        return cls(
            book_id=str(data["book_id"]),
            user_id=str(data["user_id"]),
            rating=int(data["rating"]),
            review_text=data["review_text"],
            nickname=data.get("nickname") or DEFAULT_NICKNAME,
            user_ip=data.get("user_ip"),
            id=str(data["id"]),
            created_at=data["created_at"],
        )
