"""
Submit a reader review for a catalog book.
"""

from typing import Optional

from ..config import Settings
from ..reviews import ReviewService
from .common import (
    build_store,
    exception_response,
    get_client_ip,
    get_correlation_id,
    get_user_id,
    is_preflight,
    json_response,
    log_structured,
    parse_body,
)

SERVICE = "submit_review"


def lambda_handler(event, context, service: Optional[ReviewService] = None):
    correlation_id = get_correlation_id(event)
    if is_preflight(event):
        return json_response(200, {}, correlation_id)

    try:
        user_id = get_user_id(event)
        body = parse_body(event)

        if service is None:
            service = ReviewService(build_store(Settings.from_env()))
        review = service.submit(
            book_id=body.get("bookId"),
            rating=body.get("rating"),
            review_text=body.get("review"),
            user_id=user_id,
            nickname=body.get("nickname"),
            user_ip=get_client_ip(event),
        )

        log_structured("INFO", "Review submitted", correlation_id, SERVICE,
                       review_id=review.id, book_id=review.book_id)
        data = review.to_dict()
        data.pop("user_ip", None)
        return json_response(200, {"data": data}, correlation_id)

    except Exception as e:
        return exception_response(e, correlation_id, SERVICE)
