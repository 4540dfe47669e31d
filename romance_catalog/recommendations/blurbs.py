"""
Promotional blurb generation for recommendation candidates.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from ..models import BookRecord, RecommendationCandidate
from .chat_client import ChatCompletionClient


FALLBACK_BLURB = (
    "A captivating romance that will sweep you off your feet "
    "and leave you believing in the power of love."
)

SIMILAR_BOOKS_PROMPT = (
    "You are a poetic romance book curator. Create ONE beautiful, evocative sentence "
    "(15-25 words) that emotionally connects books. Use lyrical language like \"longing\", "
    "\"melt\", \"captivate\", \"sweep\". Be romantic and emotional."
)

CATEGORY_PROMPT = (
    "You are a romance book expert. Create a compelling, romantic hook of one or two "
    "sentences that makes readers want to dive in. Be emotional and evocative and "
    "capture the heart of the story. Keep it under 50 words in total."
)


def _context_line(book: BookRecord, context_type: str, context_book: Optional[Dict]) -> str:
    if context_type == "book":
        context_book = context_book or {}
        trope = context_book.get("trope") or "romance"
        title = context_book.get("title") or "this story"
        return f'If you loved the {trope} in "{title}", you\'ll melt for "{book.title}" by {book.author}.'
    if context_type == "genre":
        return f"This {book.genre or 'romance'} gem will captivate you with its {book.mood or 'romantic'} atmosphere."
    if context_type == "mood":
        return f"Perfect for when you're craving that {book.mood or 'romantic'} feeling."
    return f'A "Why You\'ll Love It" hook for readers browsing {context_type}.'


def build_user_prompt(book: BookRecord, context_type: str, context_book: Optional[Dict] = None) -> str:
    return (
        f'Write a recommendation for "{book.title}" by {book.author}.\n'
        f"Context: {_context_line(book, context_type, context_book)}\n"
        f"Genre: {book.genre or 'Romance'}\n"
        f"Mood: {book.mood or 'Romantic'}\n"
        f"Trope: {book.trope or 'Love story'}"
    )


class BlurbGenerator:
    """
    One chat-completion call per candidate, all issued concurrently.

    Every failure degrades to FALLBACK_BLURB; one candidate failing never
    affects the others.
    """

    def __init__(self, client: ChatCompletionClient):
        self.client = client
        self.logger = logging.getLogger(self.__class__.__name__)

    async def attach_blurbs(
        self,
        candidates: List[RecommendationCandidate],
        context_type: str,
        context_book: Optional[Dict] = None,
    ) -> List[RecommendationCandidate]:
        if not candidates:
            return candidates

        if not self.client.enabled:
            self.logger.info("No AI gateway key configured, using fallback blurbs")
            for candidate in candidates:
                candidate.blurb = FALLBACK_BLURB
            return candidates

        system = SIMILAR_BOOKS_PROMPT if context_type in ("book", "genre", "mood") else CATEGORY_PROMPT
        self.logger.info(f"Generating blurbs for {len(candidates)} books")

        async with self.client.open_session() as session:
            tasks = [
                self._generate(session, system, build_user_prompt(candidate.book, context_type, context_book), candidate)
                for candidate in candidates
            ]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        for candidate, result in zip(candidates, results):
            candidate.blurb = result if isinstance(result, str) else FALLBACK_BLURB
        return candidates

    async def _generate(self, session, system: str, user: str, candidate: RecommendationCandidate) -> str:
        try:
            return await self.client.complete(session, system, user)
        except Exception as e:
            self.logger.error(f"Error generating blurb for {candidate.book.title}: {e}")
            return FALLBACK_BLURB
