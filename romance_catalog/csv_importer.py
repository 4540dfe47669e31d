"""
Catalog CSV import: cleans exported book lists and inserts new records.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

import pandas as pd

from .exceptions import ValidationError
from .models import BookQuery, BookRecord
from .models.book import utc_now_iso
from .store import CatalogStore
from .utils import clean_html_entities


MIN_SUMMARY_LENGTH = 50
MAX_REPORTED_ERRORS = 100

SUMMARY_COLUMNS = ("description", "summary", "synopsis")
YEAR_COLUMNS = ("publish_year", "publishyear", "release year", "publication_year")

_EDITION_SUFFIX = re.compile(r"\s*\([^)]*Edition\)$", re.IGNORECASE)
_FORMAT_SUFFIX = re.compile(r"\s*\((Paperback|Hardcover|Mass Market|Audio CD)\)$", re.IGNORECASE)
_TRAILING_PARENS = re.compile(r"\s*\([^)]*\)$")


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value).strip()


def _first(row: Dict[str, str], columns: Iterable[str]) -> str:
    for column in columns:
        if row.get(column):
            return row[column]
    return ""


def clean_title(title: str) -> str:
    title = _EDITION_SUFFIX.sub("", title)
    return _FORMAT_SUFFIX.sub("", title).strip()


def normalize_heat_level(value: str) -> str:
    heat = value.lower().strip()
    if "very hot" in heat or "explicit" in heat or "scorch" in heat:
        return "scorching"
    if "sweet" in heat or "clean" in heat:
        return "sweet"
    if "mild" in heat or "warm" in heat or "flirt" in heat:
        return "warm"
    if "spicy" in heat or "hot" in heat or "steam" in heat:
        return "hot"
    return "warm"


def _parse_int(value: str) -> Optional[int]:
    match = re.match(r"^\s*(\d+)", value)
    return int(match.group(1)) if match else None


def _parse_float(value: str) -> Optional[float]:
    try:
        return float(value)
    except ValueError:
        return None


@dataclass
class ImportStats:
    imported: int = 0
    skipped: int = 0
    rejected: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "imported": self.imported,
            "skipped": self.skipped,
            "rejected": self.rejected,
            "errors": self.errors[:MAX_REPORTED_ERRORS],
            "message": (
                f"Import complete: {self.imported} imported, "
                f"{self.skipped} skipped (duplicates), {self.rejected} rejected"
            ),
        }


class CatalogCSVImporter:
    """
    Imports book rows into the catalog.

    Rows need a title, an author and a summary of at least 50 characters.
    Books already present (case-insensitive title and author) are skipped.
    """

    def __init__(self, store: CatalogStore, batch_size: int = 50):
        self.store = store
        self.batch_size = batch_size
        self.logger = logging.getLogger(self.__class__.__name__)

    def load_csv(self, csv_path: str) -> List[Dict[str, Any]]:
        df = pd.read_csv(csv_path, dtype=str).fillna("")
        self.logger.info(f"Loaded {len(df)} rows from {csv_path}")
        return df.to_dict(orient="records")

    def import_csv(self, csv_path: str) -> ImportStats:
        return self.import_rows(self.load_csv(csv_path))

    def import_rows(self, rows: List[Dict[str, Any]]) -> ImportStats:
        stats = ImportStats()
        total_batches = (len(rows) + self.batch_size - 1) // self.batch_size

        for start in range(0, len(rows), self.batch_size):
            self.logger.info(f"Processing batch {start // self.batch_size + 1}/{total_batches}")
            for raw in rows[start:start + self.batch_size]:
                self._import_row(raw, stats)

        self.logger.info(
            f"Import complete: {stats.imported} imported, {stats.skipped} skipped, {stats.rejected} rejected"
        )
        return stats

    def _import_row(self, raw: Dict[str, Any], stats: ImportStats):
        try:
            book = self.clean_row(raw)
        except ValidationError as e:
            stats.rejected += 1
            stats.errors.append(e.message)
            return

        if self.is_duplicate(book):
            stats.skipped += 1
            self.logger.info(f"Skipped duplicate: {book.title}")
            return

        self.store.add_book(book)
        stats.imported += 1
        self.logger.info(f"Imported: {book.title}")

    def is_duplicate(self, book: BookRecord) -> bool:
        title = _TRAILING_PARENS.sub("", book.title).strip()
        query = BookQuery(title_equals=title, author_equals=book.author, limit=1)
        return bool(self.store.query_books(query))

    @staticmethod
    def clean_row(raw: Dict[str, Any]) -> BookRecord:
        """Build a catalog record from a CSV row; raises ValidationError when unusable"""
        row = {str(key).strip().lower(): _text(value) for key, value in raw.items()}

        title = row.get("title", "")
        author = row.get("author", "")
        if not title or not author:
            raise ValidationError("Missing title or author for row")

        summary = clean_html_entities(_first(row, SUMMARY_COLUMNS))
        if len(summary) < MIN_SUMMARY_LENGTH:
            raise ValidationError(f"{title}: Summary too short or missing")

        heat = row.get("heat_level")
        year = _first(row, YEAR_COLUMNS)
        rating = row.get("rating")
        page_count = row.get("page_count")

        return BookRecord(
            id=row.get("id") or str(uuid4()),
            title=clean_title(title),
            author=author,
            summary=summary,
            genre=row.get("genre") or None,
            mood=row.get("mood") or None,
            trope=row.get("trope") or None,
            heat_level=normalize_heat_level(heat) if heat else None,
            publisher=row.get("publisher") or None,
            publication_year=_parse_int(year) if year else None,
            page_count=_parse_int(page_count) if page_count else None,
            rating=_parse_float(rating) if rating else None,
            created_at=utc_now_iso(),
        )
