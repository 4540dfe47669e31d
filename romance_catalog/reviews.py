"""
Review submission with sanitisation, validation and duplicate protection.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from .exceptions import ConflictError, DuplicateReviewError, ValidationError
from .models import Review, DEFAULT_NICKNAME
from .store import CatalogStore
from .utils import strip_html


UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

MIN_REVIEW_LENGTH = 10
MAX_REVIEW_LENGTH = 5000
MAX_NICKNAME_LENGTH = 100
DUPLICATE_WINDOW = timedelta(hours=24)
UNKNOWN_IP = "unknown"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_rating(rating: Any) -> int:
    if rating is None or isinstance(rating, bool):
        raise ValidationError("Missing required fields")
    try:
        value = int(rating)
    except (TypeError, ValueError):
        raise ValidationError("Rating must be between 1 and 5") from None
    if value != rating and str(value) != str(rating).strip():
        raise ValidationError("Rating must be between 1 and 5")
    if value < 1 or value > 5:
        raise ValidationError("Rating must be between 1 and 5")
    return value


class ReviewService:
    """
    Accepts reader reviews.

    One review per user per book (409), and one review per network address
    per book within 24 hours (429). Rejected submissions never write a row.
    """

    def __init__(self, store: CatalogStore, clock: Callable[[], datetime] = _utc_now):
        self.store = store
        self.clock = clock
        self.logger = logging.getLogger(self.__class__.__name__)

    def submit(
        self,
        book_id: Any,
        rating: Any,
        review_text: Optional[str],
        user_id: str,
        nickname: Optional[str] = None,
        user_ip: Optional[str] = None,
    ) -> Review:
        text = strip_html(review_text) if review_text else ""
        clean_nickname = strip_html(nickname)[:MAX_NICKNAME_LENGTH] if nickname else ""

        if not book_id or rating in (None, "", 0) or not text:
            raise ValidationError("Missing required fields")
        if not isinstance(book_id, str) or not UUID_PATTERN.match(book_id):
            raise ValidationError("Invalid book ID format")

        rating_value = _parse_rating(rating)

        if len(text) < MIN_REVIEW_LENGTH or len(text) > MAX_REVIEW_LENGTH:
            raise ValidationError(
                f"Review must be between {MIN_REVIEW_LENGTH} and {MAX_REVIEW_LENGTH} characters"
            )

        now = self.clock()

        if user_ip and user_ip != UNKNOWN_IP:
            since = (now - DUPLICATE_WINDOW).isoformat()
            if self.store.find_reviews(book_id, user_ip=user_ip, since=since):
                self.logger.info(f"Duplicate review for {book_id} from {user_ip} within 24h")
                raise DuplicateReviewError(
                    "You've already shared your heart about this book today. Come back tomorrow 💕"
                )

        if self.store.find_reviews(book_id, user_id=user_id):
            raise ConflictError(
                "You've already reviewed this book. You can edit your existing review instead. 💕"
            )

        review = Review(
            book_id=book_id,
            user_id=user_id,
            rating=rating_value,
            review_text=text,
            nickname=clean_nickname or DEFAULT_NICKNAME,
            user_ip=user_ip or UNKNOWN_IP,
            created_at=now.isoformat(),
        )
        self.store.add_review(review)
        self.logger.info(f"Review {review.id} submitted for book {book_id} by {user_id}")
        return review
