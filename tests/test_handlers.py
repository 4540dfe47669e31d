"""Tests for the API Gateway Lambda handlers."""

import json

import pytest

from romance_catalog.csv_importer import CatalogCSVImporter
from romance_catalog.enrichment_orchestrator import EnrichmentOrchestrator
from romance_catalog.handlers import (
    enrich_books,
    enrich_single_book,
    fetch_book_data,
    generate_quote,
    get_recommendations,
    get_similar_books,
    import_csv_books,
    recategorize_moods,
    recategorize_tropes,
    submit_review,
)
from romance_catalog.models import MergedBook, Quote, SOURCE_GOOGLE_BOOKS
from romance_catalog.quotes import FALLBACK_QUOTES, QuoteService
from romance_catalog.recategorizer import MoodRecategorizer
from romance_catalog.recommendations import BlurbGenerator, RecommendationAssembler
from romance_catalog.reviews import ReviewService
from romance_catalog.store import InMemoryCatalogStore

from .conftest import FakeAPICaller, FakeChatClient

BOOK_ID = "3f2504e0-4f89-11d3-9a0c-0305e82c3301"


class StubEnricher:
    def fetch_book_data(self, title, author=None):
        return MergedBook(title=title, author=author or "", source=SOURCE_GOOGLE_BOOKS, summary="Found it.")


def event(body=None, method="POST", headers=None, user=None, groups=None):
    evt = {
        "httpMethod": method,
        "headers": headers or {},
        "body": json.dumps(body) if isinstance(body, dict) else body,
        "requestContext": {"identity": {"sourceIp": "10.0.0.9"}},
    }
    if user:
        claims = {"sub": user}
        if groups:
            claims["cognito:groups"] = groups
        evt["requestContext"]["authorizer"] = {"claims": claims}
    return evt


def body_of(response):
    return json.loads(response["body"])


def make_assembler(store):
    return RecommendationAssembler(store, BlurbGenerator(FakeChatClient()), api_caller=FakeAPICaller())


# ── Common behaviour ───────────────────────────────


def test_preflight():
    response = fetch_book_data.lambda_handler(event(method="OPTIONS"), None, enricher=StubEnricher())
    assert response["statusCode"] == 200
    assert response["headers"]["Access-Control-Allow-Origin"] == "*"


def test_correlation_id_is_echoed():
    response = fetch_book_data.lambda_handler(
        event({"title": "Icebreaker"}, headers={"x-correlation-id": "abc-123"}), None, enricher=StubEnricher()
    )
    assert response["headers"]["X-Correlation-ID"] == "abc-123"


def test_invalid_json_is_a_bad_request():
    response = fetch_book_data.lambda_handler(event("{oops"), None, enricher=StubEnricher())
    assert response["statusCode"] == 400


def test_unexpected_errors_surface_as_500(store):
    class Exploding(EnrichmentOrchestrator):
        def run_batch(self, *args, **kwargs):
            raise RuntimeError("table unavailable")

    response = enrich_books.lambda_handler(event({}), None, orchestrator=Exploding(StubEnricher(), store))

    assert response["statusCode"] == 500
    assert body_of(response)["error"] == "table unavailable"


# ── Enrichment ─────────────────────────────────────


def test_fetch_book_data():
    response = fetch_book_data.lambda_handler(event({"title": "Icebreaker", "author": "Hannah Grace"}), None, enricher=StubEnricher())

    assert response["statusCode"] == 200
    data = body_of(response)
    assert data["source"] == SOURCE_GOOGLE_BOOKS
    assert data["summary"] == "Found it."


def test_fetch_book_data_requires_title():
    response = fetch_book_data.lambda_handler(event({"author": "Hannah Grace"}), None, enricher=StubEnricher())
    assert response["statusCode"] == 400
    assert body_of(response)["error"] == "Title is required"


def test_enrich_single_book(store, make_book):
    book = store.add_book(make_book())
    orchestrator = EnrichmentOrchestrator(StubEnricher(), store, sleep=lambda _: None)

    response = enrich_single_book.lambda_handler(event({"bookId": book.id}), None, orchestrator=orchestrator)

    data = body_of(response)
    assert response["statusCode"] == 200
    assert data["success"] is True
    assert data["updated"] is True
    assert "summary" in data["fields_updated"]


def test_enrich_single_book_write_failure_is_500(make_book):
    class ReadOnlyStore(InMemoryCatalogStore):
        def update_book(self, book_id, updates):
            raise RuntimeError("ProvisionedThroughputExceededException")

    failing = ReadOnlyStore()
    book = failing.add_book(make_book())
    orchestrator = EnrichmentOrchestrator(StubEnricher(), failing, sleep=lambda _: None)

    response = enrich_single_book.lambda_handler(event({"bookId": book.id}), None, orchestrator=orchestrator)

    assert response["statusCode"] == 500
    assert body_of(response)["error"] == "ProvisionedThroughputExceededException"
    assert failing.enrichment_logs[-1].status == "error"


def test_enrich_single_book_not_found(store):
    orchestrator = EnrichmentOrchestrator(StubEnricher(), store)
    response = enrich_single_book.lambda_handler(event({"bookId": "missing"}), None, orchestrator=orchestrator)
    assert response["statusCode"] == 404


def test_enrich_books_page(store, make_book):
    for _ in range(3):
        store.add_book(make_book())
    orchestrator = EnrichmentOrchestrator(StubEnricher(), store, sleep=lambda _: None)

    response = enrich_books.lambda_handler(event({"offset": 1, "limit": 5}), None, orchestrator=orchestrator)

    data = body_of(response)
    assert data["totalProcessed"] == 2
    assert data["nextOffset"] == 3
    assert data["exhausted"] is True


@pytest.mark.parametrize("body", [{"offset": -1}, {"limit": 0}, {"limit": "many"}, {"bookIds": "x"}])
def test_enrich_books_rejects_bad_paging(store, body):
    orchestrator = EnrichmentOrchestrator(StubEnricher(), store)
    assert enrich_books.lambda_handler(event(body), None, orchestrator=orchestrator)["statusCode"] == 400


# ── Recommendations ────────────────────────────────


def test_get_similar_books(store, make_book):
    store.add_book(make_book(id="ctx", trope="Second Chance"))
    store.add_book(make_book(id="other", trope="Second Chance"))

    response = get_similar_books.lambda_handler(
        event({"contextType": "book", "contextId": "ctx", "limit": 4}), None, assembler=make_assembler(store)
    )

    recommendations = body_of(response)["recommendations"]
    assert [r["id"] for r in recommendations] == ["other"]
    assert recommendations[0]["lineage"] == "database"
    assert recommendations[0]["blurb"]


def test_get_similar_books_invalid_context(store):
    response = get_similar_books.lambda_handler(
        event({"contextType": "planet", "contextId": "x"}), None, assembler=make_assembler(store)
    )
    assert response["statusCode"] == 400
    assert body_of(response)["error"] == "Invalid context type"


@pytest.mark.parametrize("body", [{}, {"category": "unknown-category"}])
def test_get_recommendations_bad_category(store, body):
    response = get_recommendations.lambda_handler(event(body), None, assembler=make_assembler(store))
    assert response["statusCode"] == 400


# ── Reviews ────────────────────────────────────────


def test_submit_review_requires_sign_in(store):
    response = submit_review.lambda_handler(event({"bookId": BOOK_ID}), None, service=ReviewService(store))
    assert response["statusCode"] == 401


def test_submit_review_and_duplicate_address(store):
    service = ReviewService(store)
    payload = {"bookId": BOOK_ID, "rating": 5, "review": "An absolute delight of a book."}

    first = submit_review.lambda_handler(event(payload, user="u1"), None, service=service)
    second = submit_review.lambda_handler(event(payload, user="u2"), None, service=service)

    assert first["statusCode"] == 200
    assert "user_ip" not in body_of(first)["data"]
    assert store.reviews[0].user_ip == "10.0.0.9"
    assert second["statusCode"] == 429
    assert len(store.reviews) == 1


def test_forwarded_address_wins(store):
    payload = {"bookId": BOOK_ID, "rating": 5, "review": "An absolute delight of a book."}
    submit_review.lambda_handler(
        event(payload, user="u1", headers={"X-Forwarded-For": "203.0.113.5, 10.0.0.1"}), None, service=ReviewService(store)
    )
    assert store.reviews[0].user_ip == "203.0.113.5"


# ── Quotes ─────────────────────────────────────────


def test_generate_quote_from_catalog(store, make_book):
    book = store.add_book(make_book(title="Icebreaker", source=SOURCE_GOOGLE_BOOKS))
    store.add_quote(Quote(text="First line.", author="Hannah Grace", book_title="Icebreaker"))

    response = generate_quote.lambda_handler(event(), None, service=QuoteService(store, StubEnricher()))

    assert response["statusCode"] == 200
    assert body_of(response) == {"text": "First line.", "author": "Hannah Grace", "book_title": "Icebreaker", "book_id": book.id}


def test_generate_quote_empty_catalog_still_answers(store):
    response = generate_quote.lambda_handler(event(), None, service=QuoteService(store, StubEnricher()))

    assert response["statusCode"] == 200
    assert body_of(response) in FALLBACK_QUOTES


# ── Admin ──────────────────────────────────────────


def test_import_requires_admin(store):
    body = {"books": []}
    importer = CatalogCSVImporter(store)

    assert import_csv_books.lambda_handler(event(body), None, importer=importer)["statusCode"] == 401
    assert import_csv_books.lambda_handler(event(body, user="u1"), None, importer=importer)["statusCode"] == 403


def test_import_rows(store):
    rows = [{"title": "Wildfire", "author": "Hannah Grace", "summary": "x" * 60}]
    response = import_csv_books.lambda_handler(
        event({"books": rows}, user="admin-1", groups="admin"), None, importer=CatalogCSVImporter(store)
    )

    data = body_of(response)
    assert data["success"] is True
    assert data["imported"] == 1


def test_import_rejects_non_list(store):
    response = import_csv_books.lambda_handler(
        event({"books": "nope"}, user="admin-1", groups=["admin"]), None, importer=CatalogCSVImporter(store)
    )
    assert response["statusCode"] == 400


def test_recategorize_moods(store, make_book):
    store.add_book(make_book(mood="Playful"))
    response = recategorize_moods.lambda_handler(
        event(user="admin-1", groups="[admin users]"), None, recategorizer=MoodRecategorizer(store)
    )

    data = body_of(response)
    assert data["updated"] == 1
    assert data["distribution"] == {"Cozy & Comforting": 1}


def test_recategorize_tropes_requires_admin():
    response = recategorize_tropes.lambda_handler(event(user="reader"), None, recategorizer=object())
    assert response["statusCode"] == 403
