"""
Look up a title on the public catalogs and return the merged record without
touching the store.
"""

from typing import Optional

from ..book_enricher import BookEnricher
from ..config import Settings
from ..exceptions import ValidationError
from .common import (
    build_enricher,
    exception_response,
    get_correlation_id,
    is_preflight,
    json_response,
    log_structured,
    parse_body,
)

SERVICE = "fetch_book_data"


def lambda_handler(event, context, enricher: Optional[BookEnricher] = None):
    correlation_id = get_correlation_id(event)
    if is_preflight(event):
        return json_response(200, {}, correlation_id)

    log_structured("INFO", "Fetch book data invoked", correlation_id, SERVICE,
                   request_id=getattr(context, "aws_request_id", None))

    try:
        body = parse_body(event)
        title = str(body.get("title") or "").strip()
        if not title:
            raise ValidationError("Title is required")
        author = str(body.get("author") or "").strip() or None

        enricher = enricher or build_enricher(Settings.from_env())
        merged = enricher.fetch_book_data(title, author)

        log_structured("INFO", "Book data fetched", correlation_id, SERVICE,
                       title=title, source=merged.source, fields=sorted(merged.field_sources))
        return json_response(200, merged.to_dict(), correlation_id)

    except Exception as e:
        return exception_response(e, correlation_id, SERVICE)
