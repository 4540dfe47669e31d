"""
Runtime configuration read from environment variables.
"""

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_AI_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_AI_MODEL = "google/gemini-2.5-flash"


@dataclass
class Settings:
    """Settings shared by the pipeline components and Lambda handlers"""
    environment: str = "prod"
    log_level: str = "INFO"

    # External services
    google_books_api_key: Optional[str] = None
    ai_gateway_url: str = DEFAULT_AI_GATEWAY_URL
    ai_gateway_api_key: Optional[str] = None
    ai_model: str = DEFAULT_AI_MODEL

    # DynamoDB tables
    books_table: str = "romance-books"
    enrichment_logs_table: str = "romance-enrichment-logs"
    reviews_table: str = "romance-reviews"
    quotes_table: str = "romance-quotes"
    genres_table: str = "romance-genres"
    moods_table: str = "romance-moods"

    # Enrichment pacing
    enrichment_delay_seconds: float = 0.5
    enrichment_batch_size: int = 25

    @classmethod
    def from_env(cls) -> "Settings":
        env = os.environ
        return cls(
            environment=env.get("ENVIRONMENT", "prod"),
            log_level=env.get("LOG_LEVEL", "INFO"),
            google_books_api_key=env.get("GOOGLE_BOOKS_API_KEY") or None,
            ai_gateway_url=env.get("AI_GATEWAY_URL", DEFAULT_AI_GATEWAY_URL),
            ai_gateway_api_key=env.get("AI_GATEWAY_API_KEY") or None,
            ai_model=env.get("AI_MODEL", DEFAULT_AI_MODEL),
            books_table=env.get("BOOKS_TABLE", cls.books_table),
            enrichment_logs_table=env.get("ENRICHMENT_LOGS_TABLE", cls.enrichment_logs_table),
            reviews_table=env.get("REVIEWS_TABLE", cls.reviews_table),
            quotes_table=env.get("QUOTES_TABLE", cls.quotes_table),
            genres_table=env.get("GENRES_TABLE", cls.genres_table),
            moods_table=env.get("MOODS_TABLE", cls.moods_table),
            enrichment_delay_seconds=float(env.get("ENRICHMENT_DELAY_SECONDS", 0.5)),
            enrichment_batch_size=int(env.get("ENRICHMENT_BATCH_SIZE", 25)),
        )
