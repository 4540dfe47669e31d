"""
Curated category recommendations, padded from the public catalogs when the
store has too few matches.
"""

from typing import Optional

from ..config import Settings
from ..exceptions import ValidationError
from ..recommendations import RecommendationAssembler
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

SERVICE = "get_recommendations"


def lambda_handler(event, context, assembler: Optional[RecommendationAssembler] = None):
    correlation_id = get_correlation_id(event)
    if is_preflight(event):
        return json_response(200, {}, correlation_id)

    try:
        body = parse_body(event)
        category = body.get("category")
        if not category or not isinstance(category, str):
            raise ValidationError("Category is required")

        if assembler is None:
            settings = Settings.from_env()
            assembler = build_assembler(settings, build_store(settings))
        candidates = assembler.category_recommendations(category)

        lineage = {}
        for candidate in candidates:
            lineage[candidate.lineage] = lineage.get(candidate.lineage, 0) + 1
        log_structured("INFO", "Category recommendations assembled", correlation_id, SERVICE,
                       category=category, count=len(candidates), lineage=lineage)
        return json_response(200, {"recommendations": [c.to_dict() for c in candidates]}, correlation_id)

    except Exception as e:
        return exception_response(e, correlation_id, SERVICE)
