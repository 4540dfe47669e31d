"""
Shared plumbing for the API Gateway Lambda handlers.
"""

import base64
import json
import logging
import os
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from ..api_caller import APICaller
from ..book_enricher import BookEnricher
from ..config import Settings
from ..enrichment_orchestrator import EnrichmentOrchestrator
from ..exceptions import AuthenticationError, CatalogError, ForbiddenError, ValidationError
from ..recommendations import BlurbGenerator, ChatCompletionClient, RecommendationAssembler
from ..store import CatalogStore, DynamoCatalogStore


logger = logging.getLogger()
logger.setLevel(os.environ.get("LOG_LEVEL", "INFO"))

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Authorization, Content-Type, X-Correlation-ID",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def log_structured(level: str, message: str, correlation_id: str = None, service: str = "romance_catalog", **kwargs):
    """Structured logging with correlation ID and metadata"""
    log_entry = {
        "timestamp": datetime.now().isoformat(),
        "level": level,
        "message": message,
        "service": service,
        "environment": os.environ.get("ENVIRONMENT", "unknown"),
    }
    if correlation_id:
        log_entry["correlation_id"] = correlation_id
    log_entry.update(kwargs)

    line = json.dumps(log_entry, default=str)
    if level == "ERROR":
        logger.error(line)
    elif level == "WARNING":
        logger.warning(line)
    elif level == "DEBUG":
        logger.debug(line)
    else:
        logger.info(line)


def _header(event: Dict[str, Any], name: str) -> Optional[str]:
    headers = event.get("headers") or {}
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None


def get_correlation_id(event: Dict[str, Any]) -> str:
    return _header(event, "X-Correlation-ID") or str(uuid.uuid4())


def is_preflight(event: Dict[str, Any]) -> bool:
    return event.get("httpMethod") == "OPTIONS"


def parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    body = event.get("body")
    if not body:
        return {}
    if event.get("isBase64Encoded", False):
        body = base64.b64decode(body).decode("utf-8")
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        raise ValidationError("Request body must be valid JSON") from None
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def get_user_id(event: Dict[str, Any]) -> str:
    """Caller identity as resolved by the API Gateway authorizer"""
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    claims = authorizer.get("claims") or {}
    user_id = claims.get("sub") or authorizer.get("principalId")
    if not user_id:
        raise AuthenticationError("Authentication required")
    return str(user_id)


def get_client_ip(event: Dict[str, Any]) -> str:
    forwarded = _header(event, "X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    identity = (event.get("requestContext") or {}).get("identity") or {}
    return _header(event, "X-Real-IP") or identity.get("sourceIp") or "unknown"


def json_response(status_code: int, body: Any, correlation_id: str = None) -> Dict[str, Any]:
    headers = {"Content-Type": "application/json", **CORS_HEADERS}
    if correlation_id:
        headers["X-Correlation-ID"] = correlation_id
    return {
        "statusCode": status_code,
        "headers": headers,
        "body": json.dumps(body, default=str),
    }


def error_response(status_code: int, message: str, correlation_id: str = None) -> Dict[str, Any]:
    """Generate error response for API Gateway"""
    body = {"error": message}
    if correlation_id:
        body["correlation_id"] = correlation_id
    return json_response(status_code, body, correlation_id)


def exception_response(error: Exception, correlation_id: str, service: str) -> Dict[str, Any]:
    if isinstance(error, CatalogError):
        log_structured("WARNING", error.message, correlation_id, service, status_code=error.status_code)
        return error_response(error.status_code, error.message, correlation_id)

    log_structured("ERROR", f"Unhandled error: {error}", correlation_id, service, error_type=type(error).__name__)
    return error_response(500, str(error) or "Internal server error", correlation_id)


def build_store(settings: Settings) -> CatalogStore:
    return DynamoCatalogStore.from_settings(settings)


def build_enricher(settings: Settings) -> BookEnricher:
    return BookEnricher(google_api_key=settings.google_books_api_key, api_caller=APICaller())


def build_orchestrator(settings: Settings, store: CatalogStore) -> EnrichmentOrchestrator:
    return EnrichmentOrchestrator(
        enricher=build_enricher(settings),
        store=store,
        delay_seconds=settings.enrichment_delay_seconds,
        batch_size=settings.enrichment_batch_size,
    )


def build_chat_client(settings: Settings) -> ChatCompletionClient:
    return ChatCompletionClient(settings.ai_gateway_url, settings.ai_gateway_api_key, settings.ai_model)


def build_assembler(settings: Settings, store: CatalogStore) -> RecommendationAssembler:
    return RecommendationAssembler(
        store=store,
        blurbs=BlurbGenerator(build_chat_client(settings)),
        api_caller=APICaller(),
        google_api_key=settings.google_books_api_key,
    )


def require_admin(event: Dict[str, Any]) -> str:
    """Authenticated caller that belongs to the `admin` group"""
    user_id = get_user_id(event)
    claims = ((event.get("requestContext") or {}).get("authorizer") or {}).get("claims") or {}
    groups = claims.get("cognito:groups") or []
    if isinstance(groups, str):
        groups = groups.strip("[]").replace(",", " ").split()
    if "admin" not in groups:
        raise ForbiddenError("Admin access required")
    return user_id
