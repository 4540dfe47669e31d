"""Tests for the DynamoDB catalog store against in-process table fakes."""

from decimal import Decimal

import pytest

from romance_catalog.config import Settings
from romance_catalog.models import BookQuery, BookRecord, EnrichmentAttempt, Quote, Review
from romance_catalog.store import DynamoCatalogStore
from romance_catalog.store.dynamodb import from_dynamo, scan_all, to_dynamo


class FakeTable:
    """Minimal boto3 Table: items keyed by id, scans paged by `page_size`"""

    def __init__(self, items=None, page_size=2):
        self.items = {item["id"]: dict(item) for item in items or []}
        self.page_size = page_size
        self.scan_calls = []
        self.update_calls = []

    def get_item(self, Key):
        item = self.items.get(Key["id"])
        return {"Item": dict(item)} if item else {}

    def put_item(self, Item):
        self.items[Item["id"]] = dict(Item)

    def update_item(self, Key, UpdateExpression, ExpressionAttributeNames, ExpressionAttributeValues, ConditionExpression):
        self.update_calls.append(UpdateExpression)
        item = self.items[Key["id"]]
        for placeholder, name in ExpressionAttributeNames.items():
            item[name] = ExpressionAttributeValues[placeholder.replace("#f", ":v")]

    def scan(self, ExclusiveStartKey=None, **kwargs):
        self.scan_calls.append(kwargs)
        ids = sorted(self.items)
        start = ids.index(ExclusiveStartKey["id"]) + 1 if ExclusiveStartKey else 0
        page = ids[start:start + self.page_size]
        response = {"Items": [dict(self.items[i]) for i in page]}
        if start + self.page_size < len(ids):
            response["LastEvaluatedKey"] = {"id": page[-1]}
        return response


class FakeResource:
    def __init__(self):
        self.tables = {}

    def Table(self, name):
        return self.tables.setdefault(name, FakeTable())


def book_item(n, **extra):
    item = {
        "id": f"book-{n}",
        "title": f"Book {n}",
        "author": f"Author {n}",
        "created_at": f"2024-01-0{n}T00:00:00+00:00",
    }
    item.update(extra)
    return item


@pytest.fixture
def tables():
    return {
        "books": FakeTable([book_item(n) for n in range(1, 6)]),
        "logs": FakeTable(),
        "reviews": FakeTable(),
        "genres": FakeTable([{"id": "g1", "name": "Fantasy Romance"}]),
        "moods": FakeTable(),
        "quotes": FakeTable(),
    }


@pytest.fixture
def dynamo_store(tables):
    return DynamoCatalogStore(
        books_table=tables["books"],
        logs_table=tables["logs"],
        reviews_table=tables["reviews"],
        genres_table=tables["genres"],
        moods_table=tables["moods"],
        quotes_table=tables["quotes"],
    )


# ── Conversions ────────────────────────────────────


def test_decimal_round_trip():
    assert from_dynamo({"rating": Decimal("4.5"), "pages": Decimal("320"), "tags": [Decimal("1")]}) == {
        "rating": 4.5,
        "pages": 320,
        "tags": [1],
    }
    assert to_dynamo({"rating": 4.5, "pages": 320}) == {"rating": Decimal("4.5"), "pages": 320}


def test_scan_all_follows_pagination(tables):
    items = scan_all(tables["books"])
    assert len(items) == 5
    assert len(tables["books"].scan_calls) == 3


# ── Books ──────────────────────────────────────────


def test_get_book_converts_numbers(tables, dynamo_store):
    tables["books"].put_item(Item=book_item(9, page_count=Decimal("416"), rating=Decimal("4.2")))

    book = dynamo_store.get_book("book-9")

    assert book.page_count == 416
    assert book.rating == 4.2
    assert dynamo_store.get_book("missing") is None


def test_query_books_filters_and_pages(tables, dynamo_store):
    tables["books"].items["book-2"]["trope"] = "Second Chance"
    tables["books"].items["book-4"]["trope"] = "second chance romance"

    assert [b.id for b in dynamo_store.query_books(BookQuery(trope_contains="SECOND CHANCE"))] == ["book-2", "book-4"]
    assert [b.id for b in dynamo_store.query_books(BookQuery(offset=1, limit=2))] == ["book-2", "book-3"]


def test_query_books_with_source_only(tables, dynamo_store):
    tables["books"].items["book-3"]["source"] = "open_library"

    assert [b.id for b in dynamo_store.query_books(BookQuery(has_source=True))] == ["book-3"]


def test_add_and_update_book(tables, dynamo_store):
    dynamo_store.add_book(BookRecord(id="new", title="Wildfire", author="Hannah Grace", rating=4.1))
    dynamo_store.update_book("new", {"summary": "Summer camp.", "source": "google_books"})

    stored = tables["books"].items["new"]
    assert stored["rating"] == Decimal("4.1")
    assert stored["created_at"]
    assert stored["summary"] == "Summer camp."
    assert stored["source"] == "google_books"
    assert tables["books"].update_calls == ["SET #f0 = :v0, #f1 = :v1"]


def test_empty_update_is_a_no_op(tables, dynamo_store):
    dynamo_store.update_book("book-1", {})
    assert tables["books"].update_calls == []


def test_log_enrichment_key(tables, dynamo_store):
    attempt = EnrichmentAttempt(book_id="book-1", status="success", fields_updated=("summary",))
    dynamo_store.log_enrichment(attempt)

    item = tables["logs"].items[f"book-1#{attempt.created_at}"]
    assert item["fields_updated"] == ["summary"]


def test_taxonomy_names(dynamo_store):
    assert dynamo_store.get_genre_name("g1") == "Fantasy Romance"
    assert dynamo_store.get_mood_name("m1") is None


# ── Reviews ────────────────────────────────────────


def test_reviews_are_scanned_with_filter(tables, dynamo_store):
    review = Review(book_id="book-1", user_id="u1", rating=5, review_text="Loved it so much.", user_ip="10.0.0.1")
    dynamo_store.add_review(review)

    found = dynamo_store.find_reviews("book-1", user_ip="10.0.0.1", since="2000-01-01")

    assert found == [review]
    assert "FilterExpression" in tables["reviews"].scan_calls[-1]


# ── Quotes ─────────────────────────────────────────


def test_quotes_match_title_case_insensitively(tables, dynamo_store):
    dynamo_store.add_quote(Quote(text="First line.", author="Hannah Grace", book_title="Icebreaker (Maple Hills)"))
    dynamo_store.add_quote(Quote(text="Other line.", author="Someone", book_title="Wildfire"))

    found = dynamo_store.find_quotes("ICEBREAKER")

    assert [q.text for q in found] == ["First line."]
    assert len(tables["quotes"].items) == 2


def test_from_settings_uses_configured_table_names():
    resource = FakeResource()
    settings = Settings(
        books_table="b", enrichment_logs_table="l", reviews_table="r", genres_table="g", moods_table="m", quotes_table="q"
    )

    dynamo_store = DynamoCatalogStore.from_settings(settings, dynamodb=resource)

    assert set(resource.tables) == {"b", "l", "r", "g", "m", "q"}
    assert dynamo_store.books_table is resource.tables["b"]
