"""
Curated recommendation categories.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..exceptions import ValidationError
from ..models import BookQuery


@dataclass(frozen=True)
class CategoryFilter:
    search_keyword: str
    trope: Optional[str] = None
    genre: Optional[str] = None
    mood_keyword: Optional[str] = None
    heat_levels: Tuple[str, ...] = ()

    def to_query(self, limit: int) -> BookQuery:
        return BookQuery(
            trope_contains=self.trope,
            genre=self.genre,
            mood_contains=self.mood_keyword,
            heat_levels=list(self.heat_levels) or None,
            limit=limit,
        )


CATEGORY_FILTERS = {
    "enemies-to-lovers": CategoryFilter("enemies to lovers romance", trope="Enemies to Lovers"),
    "second-chance": CategoryFilter("second chance romance", trope="Second Chance"),
    "royal-fantasy": CategoryFilter("fantasy romance princess", genre="Fantasy Romance", mood_keyword="Fantasy"),
    "comfort-healing": CategoryFilter("heartwarming cozy romance", mood_keyword="Comforting"),
    "dark-obsession": CategoryFilter("dark romance obsession", mood_keyword="Dark", heat_levels=("hot", "scorching")),
}


def get_category(slug: str) -> CategoryFilter:
    try:
        return CATEGORY_FILTERS[slug]
    except KeyError:
        raise ValidationError(f"Unknown category: {slug}") from None
