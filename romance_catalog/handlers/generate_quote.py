"""
Public quote of the moment. Always answers 200 with a quote.
"""

from typing import Optional

from ..config import Settings
from ..quotes import QuoteService
from .common import (
    build_enricher,
    build_store,
    exception_response,
    get_correlation_id,
    is_preflight,
    json_response,
    log_structured,
)

SERVICE = "generate_quote"


def lambda_handler(event, context, service: Optional[QuoteService] = None):
    correlation_id = get_correlation_id(event)
    if is_preflight(event):
        return json_response(200, {}, correlation_id)

    try:
        if service is None:
            settings = Settings.from_env()
            service = QuoteService(build_store(settings), build_enricher(settings))
        quote = service.random_quote()

        log_structured("INFO", "Quote served", correlation_id, SERVICE,
                       book_id=quote.get("book_id"), book_title=quote.get("book_title"))
        return json_response(200, quote, correlation_id)

    except Exception as e:
        return exception_response(e, correlation_id, SERVICE)
