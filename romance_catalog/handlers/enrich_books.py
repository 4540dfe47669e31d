"""
Enrich one page of the catalog. Callers advance `offset` to `nextOffset`
until `exhausted` comes back true.
"""

from typing import Any, Optional

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

SERVICE = "enrich_books"
MAX_BATCH_SIZE = 100


def _int_param(value: Any, name: str, default: Optional[int]) -> Optional[int]:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer") from None


def lambda_handler(event, context, orchestrator: Optional[EnrichmentOrchestrator] = None):
    correlation_id = get_correlation_id(event)
    if is_preflight(event):
        return json_response(200, {}, correlation_id)

    try:
        body = parse_body(event)
        offset = _int_param(body.get("offset"), "offset", 0)
        limit = _int_param(body.get("limit"), "limit", None)
        book_ids = body.get("bookIds")
        force = bool(body.get("forceRefresh", False))

        if offset < 0:
            raise ValidationError("offset must not be negative")
        if limit is not None and not 1 <= limit <= MAX_BATCH_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_BATCH_SIZE}")
        if book_ids is not None:
            if not isinstance(book_ids, list):
                raise ValidationError("bookIds must be a list")
            book_ids = [str(book_id) for book_id in book_ids]

        log_structured("INFO", "Batch enrichment requested", correlation_id, SERVICE,
                       offset=offset, limit=limit, force=force,
                       book_ids=len(book_ids) if book_ids is not None else None)

        if orchestrator is None:
            settings = Settings.from_env()
            orchestrator = build_orchestrator(settings, build_store(settings))
        stats = orchestrator.run_batch(offset=offset, limit=limit, book_ids=book_ids, force=force)

        log_structured("INFO", "Batch enrichment finished", correlation_id, SERVICE,
                       processed=stats.total_processed, updated=stats.updated,
                       errors=stats.errors, next_offset=stats.next_offset)
        return json_response(200, stats.to_dict(), correlation_id)

    except Exception as e:
        return exception_response(e, correlation_id, SERVICE)
