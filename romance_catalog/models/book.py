"""
Catalog and enrichment data models.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from ..utils.text import is_blank


SOURCE_OPEN_LIBRARY = "open_library"
SOURCE_GOOGLE_BOOKS = "google_books"
SOURCE_HYBRID = "hybrid"
SOURCE_NOT_FOUND = "not_found"
SOURCE_MANUAL = "manual"

TERMINAL_SOURCES = (SOURCE_OPEN_LIBRARY, SOURCE_GOOGLE_BOOKS, SOURCE_HYBRID, SOURCE_NOT_FOUND)

PLACEHOLDER_SUMMARY = "A romantic story full of emotions and unforgettable moments"

HEAT_LEVELS = ("sweet", "warm", "hot", "scorching")

# Fields the enrichment pipeline is allowed to fill in
ENRICHABLE_FIELDS = (
    "cover_url",
    "summary",
    "publication_year",
    "publisher",
    "page_count",
    "isbn13",
    "isbn10",
)

_INT_FIELDS = ("publication_year", "page_count")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_int(value) -> Optional[int]:
    if is_blank(value):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value) -> Optional[float]:
    if is_blank(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass
class BookRecord:
    """A row of the books catalog"""
    id: str
    title: str
    author: str
    summary: Optional[str] = None
    cover_url: Optional[str] = None
    genre: Optional[str] = None
    mood: Optional[str] = None
    trope: Optional[str] = None
    heat_level: Optional[str] = None
    source: Optional[str] = None
    publication_year: Optional[int] = None
    publisher: Optional[str] = None
    page_count: Optional[int] = None
    isbn13: Optional[str] = None
    isbn10: Optional[str] = None
    rating: Optional[float] = None
    created_at: Optional[str] = None

    @property
    def has_placeholder_summary(self) -> bool:
        return bool(self.summary) and PLACEHOLDER_SUMMARY in self.summary

    @property
    def is_source_tagged(self) -> bool:
        """True once an enrichment attempt has stamped a terminal source"""
        return not is_blank(self.source) and self.source != SOURCE_MANUAL

    def apply_updates(self, updates: Dict) -> None:
        for key, value in updates.items():
            setattr(self, key, value)

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "BookRecord":
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        for name in _INT_FIELDS:
            if name in values:
                values[name] = _to_int(values[name])
        if "rating" in values:
            values["rating"] = _to_float(values["rating"])
        values["id"] = str(values.get("id", ""))
        return cls(**values)


@dataclass
class SourceResult:
    """Normalized output of one bibliographic adapter"""
    source_tag: str
    title: Optional[str] = None
    author: Optional[str] = None
    summary: Optional[str] = None
    cover_url: Optional[str] = None
    publication_year: Optional[int] = None
    publisher: Optional[str] = None
    page_count: Optional[int] = None
    isbn13: Optional[str] = None
    isbn10: Optional[str] = None
    quotes: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return all(
            is_blank(getattr(self, f.name)) or getattr(self, f.name) == ()
            for f in fields(self)
            if f.name != "source_tag"
        )


@dataclass
class MergedBook:
    """Result of merging adapter outputs; `field_sources` records who supplied what"""
    title: str
    author: str
    source: str = SOURCE_NOT_FOUND
    summary: Optional[str] = None
    cover_url: Optional[str] = None
    publication_year: Optional[int] = None
    publisher: Optional[str] = None
    page_count: Optional[int] = None
    isbn13: Optional[str] = None
    isbn10: Optional[str] = None
    quotes: List[str] = field(default_factory=list)
    field_sources: Dict[str, str] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.source != SOURCE_NOT_FOUND

    def to_dict(self) -> Dict:
        data = asdict(self)
        data.pop("field_sources")
        return data


@dataclass(frozen=True)
class EnrichmentAttempt:
    """Append-only log entry written once per record per orchestrator pass"""
    book_id: str
    status: str  # success | partial | skipped | error
    fields_updated: Tuple[str, ...] = ()
    data_source: Optional[str] = None
    error_message: Optional[str] = None
    created_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["fields_updated"] = list(self.fields_updated)
        return data


@dataclass
class EnrichmentResult:
    """Outcome of enriching a single record, reported back to the caller"""
    book_id: str
    title: str
    status: str  # updated | no_data | skipped | error
    fields_updated: List[str] = field(default_factory=list)
    source: Optional[str] = None
    message: Optional[str] = None

    @property
    def updated(self) -> bool:
        return self.status == "updated"

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["updated"] = self.updated
        return data


@dataclass
class EnrichmentStats:
    """Summary of one batch invocation"""
    offset: int = 0
    requested: int = 0
    total_processed: int = 0
    updated: int = 0
    no_data_found: int = 0
    skipped: int = 0
    errors: int = 0
    details: List[EnrichmentResult] = field(default_factory=list)

    @property
    def next_offset(self) -> int:
        return self.offset + self.total_processed

    @property
    def exhausted(self) -> bool:
        """A short page means the caller can stop advancing the offset"""
        return self.total_processed < self.requested

    def add(self, result: EnrichmentResult) -> None:
        self.total_processed += 1
        self.details.append(result)
        if result.status == "updated":
            self.updated += 1
        elif result.status == "no_data":
            self.no_data_found += 1
        elif result.status == "skipped":
            self.skipped += 1
        else:
            self.errors += 1

    def to_dict(self) -> Dict:
        return {
            "totalProcessed": self.total_processed,
            "updated": self.updated,
            "noDataFound": self.no_data_found,
            "skipped": self.skipped,
            "errors": self.errors,
            "nextOffset": self.next_offset,
            "exhausted": self.exhausted,
            "details": [detail.to_dict() for detail in self.details],
            "message": (
                f"Processed {self.total_processed} books: {self.updated} updated, "
                f"{self.skipped} skipped, {self.errors} failed"
            ),
        }
