"""
Enrich one catalog record on demand.
"""

from typing import Optional

from ..config import Settings
from ..enrichment_orchestrator import EnrichmentOrchestrator
from ..exceptions import ValidationError
from .common import (
    build_orchestrator,
    build_store,
    exception_response,
    get_correlation_id,
    is_preflight,
    json_response,
    log_structured,
    parse_body,
)

SERVICE = "enrich_single_book"


def lambda_handler(event, context, orchestrator: Optional[EnrichmentOrchestrator] = None):
    correlation_id = get_correlation_id(event)
    if is_preflight(event):
        return json_response(200, {}, correlation_id)

    try:
        body = parse_body(event)
        book_id = body.get("bookId")
        if not book_id:
            raise ValidationError("bookId is required")
        force = bool(body.get("forceRefresh", False))

        log_structured("INFO", "Single enrichment requested", correlation_id, SERVICE,
                       book_id=book_id, force=force)

        if orchestrator is None:
            settings = Settings.from_env()
            orchestrator = build_orchestrator(settings, build_store(settings))
        result = orchestrator.enrich_single(str(book_id), force=force)

        log_structured("INFO", "Single enrichment finished", correlation_id, SERVICE,
                       book_id=book_id, status=result.status, fields=result.fields_updated)
        return json_response(200, {"success": result.status != "error", **result.to_dict()}, correlation_id)

    except Exception as e:
        return exception_response(e, correlation_id, SERVICE)
