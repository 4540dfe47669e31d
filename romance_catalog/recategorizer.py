"""
Bulk mood and trope recategorization over the catalog.

Moods follow deterministic keyword rules; tropes are classified by the
chat-completion gateway into a closed list.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .models import BookQuery, BookRecord
from .recommendations.chat_client import ChatCompletionClient
from .store import CatalogStore


SPICY = "Spicy & Steamy"
DARK = "Dark & Intense"
MAGICAL = "Magical & Enchanting"
EPIC = "Sweeping & Epic"
COZY = "Cozy & Comforting"

# Title or author fragment -> (mood, heat level)
KNOWN_BOOKS: Dict[str, Tuple[str, Optional[str]]] = {
    "fifty shades": (SPICY, "scorching"),
    "crossfire": (SPICY, "scorching"),
    "bared to you": (SPICY, "scorching"),
    "reflected in you": (SPICY, "scorching"),
    "entwined with you": (SPICY, "scorching"),
    "beautiful bastard": (SPICY, "hot"),
    "beautiful stranger": (SPICY, "hot"),
    "beautiful player": (SPICY, "hot"),
    "thoughtless": (SPICY, "hot"),
    "black dagger brotherhood": (DARK, "hot"),
    "lover awakened": (DARK, "hot"),
    "lover eternal": (DARK, "hot"),
    "lover enshrined": (DARK, "hot"),
    "lover avenged": (DARK, "hot"),
    "lover mine": (DARK, "hot"),
    "darkest": (DARK, None),
    "twisted": (DARK, None),
    "immortals after dark": (MAGICAL, "hot"),
    "a hunger like no other": (MAGICAL, "hot"),
    "kiss of midnight": (MAGICAL, "hot"),
    "dark needs at night": (MAGICAL, "hot"),
    "kiss of a demon king": (MAGICAL, "hot"),
    "lothaire": (MAGICAL, "hot"),
    "psy-changeling": (MAGICAL, None),
    "guild hunter": (MAGICAL, None),
    "vampire academy": (MAGICAL, None),
    "discovery of witches": (MAGICAL, None),
    "kate daniels": (MAGICAL, None),
    "poison study": (MAGICAL, None),
    "lisa kleypas": (EPIC, None),
    "julia quinn": (EPIC, None),
    "bridgerton": (EPIC, None),
    "highlander": (EPIC, None),
    "maya banks": (EPIC, None),
}

SPICY_KEYWORDS = ("erotica", "erotic", "explicit", "steamy", "sensual", "seduction")
MAGICAL_KEYWORDS = (
    "paranormal", "fantasy", "vampire", "witch", "magic", "fae", "shifter",
    "werewolf", "immortal", "supernatural", "dragon", "demon", "angel",
    "psychic", "necromancer", "sorcerer", "mage",
)
HISTORICAL_KEYWORDS = (
    "historical", "regency", "medieval", "victorian", "highland", "duke",
    "earl", "viscount", "marquess", "lord", "lady", "baron", "laird",
    "scottish", "tudor", "georgian", "wallflower",
)
DARK_KEYWORDS = (
    "dark", "suspense", "thriller", "mafia", "biker", "hitman", "assassin",
    "stalker", "captive", "kidnap", "anti-hero", "villain", "ruthless", "dangerous",
)
COZY_GENRE_HINTS = ("contemporary", "romantic comedy", "rom-com", "small town")
LEGACY_MOODS = ("playful", "bittersweet")

VALID_TROPES = (
    "Enemies to Lovers",
    "Friends to Lovers",
    "Second Chance",
    "Fake Relationship",
    "Forced Proximity",
    "Grumpy/Sunshine",
    "Forbidden Love",
)

TROPE_PROMPT = (
    "You are a romance book expert. Analyze the summary and identify the PRIMARY trope. "
    "Respond with ONLY ONE of these exact values: "
    + ", ".join(f'"{trope}"' for trope in VALID_TROPES)
    + ', or "Unknown" if none fit clearly.'
)


def determine_mood(book: BookRecord) -> Tuple[str, Optional[str]]:
    """Return (mood, heat level override or None) for a catalog record"""
    title = (book.title or "").lower()
    author = (book.author or "").lower()
    genre = (book.genre or "").lower()
    current = (book.mood or "").lower()

    for key, (mood, heat) in KNOWN_BOOKS.items():
        if key in title or key in author:
            return mood, heat

    if book.heat_level in ("hot", "scorching"):
        return SPICY, None

    def hit(keywords) -> bool:
        return any(keyword in genre or keyword in title for keyword in keywords)

    if hit(SPICY_KEYWORDS):
        return SPICY, "hot"
    if hit(MAGICAL_KEYWORDS):
        return MAGICAL, None
    if hit(HISTORICAL_KEYWORDS):
        return EPIC, None
    if hit(DARK_KEYWORDS):
        return DARK, None

    if (current in LEGACY_MOODS or book.heat_level in ("sweet", "warm")
            or any(hint in genre for hint in COZY_GENRE_HINTS)):
        return COZY, None

    return book.mood or COZY, None


@dataclass
class RecategorizationStats:
    total_books: int = 0
    updated: int = 0
    unchanged: int = 0
    no_detection: int = 0
    errors: int = 0
    distribution: Dict[str, int] = field(default_factory=dict)

    def count(self, label: str):
        self.distribution[label] = self.distribution.get(label, 0) + 1

    def to_dict(self) -> Dict:
        return {
            "totalBooks": self.total_books,
            "updated": self.updated,
            "unchanged": self.unchanged,
            "noDetection": self.no_detection,
            "errors": self.errors,
            "distribution": dict(self.distribution),
        }


class MoodRecategorizer:
    def __init__(self, store: CatalogStore):
        self.store = store
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self) -> RecategorizationStats:
        books = self.store.query_books(BookQuery())
        stats = RecategorizationStats(total_books=len(books))
        self.logger.info(f"Recategorizing moods for {len(books)} books")

        for book in books:
            mood, heat = determine_mood(book)
            stats.count(mood)

            if book.mood == mood and (heat is None or book.heat_level == heat):
                stats.unchanged += 1
                continue

            updates = {"mood": mood}
            if heat:
                updates["heat_level"] = heat
            try:
                self.store.update_book(book.id, updates)
            except Exception as e:
                self.logger.error(f"Error updating book {book.id}: {e}")
                stats.errors += 1
                continue

            self.logger.info(f"Updated '{book.title}' from '{book.mood}' to '{mood}'")
            stats.updated += 1

        self.logger.info(f"Mood recategorization complete: {stats.updated} updated, {stats.unchanged} unchanged")
        return stats


class TropeRecategorizer:
    """
    Classifies each summarised book into one of VALID_TROPES.

    Books are processed one at a time with a short pause between calls;
    answers outside the closed list are ignored.
    """

    MIN_SUMMARY_LENGTH = 50

    def __init__(self, store: CatalogStore, client: ChatCompletionClient, delay_seconds: float = 0.15):
        self.store = store
        self.client = client
        self.delay_seconds = delay_seconds
        self.logger = logging.getLogger(self.__class__.__name__)

    async def detect_trope(self, session, book: BookRecord) -> Optional[str]:
        summary = book.summary or ""
        if len(summary) < self.MIN_SUMMARY_LENGTH:
            return None

        user = f"Book: {book.title}\n\nSummary: {summary[:500]}\n\nWhat is the primary romance trope?"
        try:
            answer = await self.client.complete(session, TROPE_PROMPT, user, max_tokens=50)
        except Exception as e:
            self.logger.error(f"Trope detection failed for '{book.title}': {e}")
            return None

        answer = answer.strip().strip('"')
        if answer in VALID_TROPES:
            return answer
        self.logger.info(f"Unknown trope for '{book.title}': {answer!r}")
        return None

    def run(self) -> RecategorizationStats:
        return asyncio.run(self.run_async())

    async def run_async(self) -> RecategorizationStats:
        books = self.store.query_books(BookQuery(has_summary=True))
        stats = RecategorizationStats(total_books=len(books))

        if not self.client.enabled:
            self.logger.warning("No AI gateway key configured, skipping trope recategorization")
            stats.no_detection = len(books)
            return stats

        self.logger.info(f"Analyzing tropes for {len(books)} books")
        async with self.client.open_session() as session:
            for book in books:
                trope = await self.detect_trope(session, book)
                if not trope:
                    stats.no_detection += 1
                    continue

                stats.count(trope)
                if book.trope == trope:
                    stats.unchanged += 1
                else:
                    try:
                        self.store.update_book(book.id, {"trope": trope})
                        stats.updated += 1
                        self.logger.info(f"Updated '{book.title}' from '{book.trope}' to '{trope}'")
                    except Exception as e:
                        self.logger.error(f"Error updating book {book.id}: {e}")
                        stats.errors += 1

                if self.delay_seconds:
                    await asyncio.sleep(self.delay_seconds)

        self.logger.info(
            f"Trope recategorization complete: {stats.updated} updated, "
            f"{stats.unchanged} unchanged, {stats.no_detection} undetected"
        )
        return stats
