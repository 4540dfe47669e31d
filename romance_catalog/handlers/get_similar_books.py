"""
Recommendations related to a book, genre or mood, each with a short blurb.
"""

from typing import Optional

from ..config import Settings
from ..recommendations import RecommendationAssembler, build_request
from .common import (
    build_assembler,
    build_store,
    exception_response,
    get_correlation_id,
    is_preflight,
    json_response,
    log_structured,
    parse_body,
)

SERVICE = "get_similar_books"


def lambda_handler(event, context, assembler: Optional[RecommendationAssembler] = None):
    correlation_id = get_correlation_id(event)
    if is_preflight(event):
        return json_response(200, {}, correlation_id)

    try:
        body = parse_body(event)
        request = build_request(
            body.get("contextType"),
            body.get("contextId"),
            body.get("contextData"),
            body.get("limit"),
        )

        if assembler is None:
            settings = Settings.from_env()
            assembler = build_assembler(settings, build_store(settings))
        candidates = assembler.similar_books(request)

        log_structured("INFO", "Similar books assembled", correlation_id, SERVICE,
                       context_type=request.context_type, context_id=request.context_id,
                       count=len(candidates))
        return json_response(200, {"recommendations": [c.to_dict() for c in candidates]}, correlation_id)

    except Exception as e:
        return exception_response(e, correlation_id, SERVICE)
