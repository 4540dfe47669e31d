"""Tests for the adapter response processors and search fetchers."""

from romance_catalog.fetchers import fetch_google_data, fetch_open_library_data, search_open_library
from romance_catalog.fetchers.google_fetcher import GOOGLE_BOOKS_URL
from romance_catalog.fetchers.open_library_fetcher import OPEN_LIBRARY_SEARCH_URL
from romance_catalog.models import SOURCE_GOOGLE_BOOKS, SOURCE_OPEN_LIBRARY
from romance_catalog.processors import (
    google_item_to_book,
    open_library_doc_to_book,
    process_google_response,
    process_open_library_response,
    select_cover_url,
)

from .conftest import FakeAPICaller, google_item, ol_doc


# ── Open Library ───────────────────────────────────


def test_process_open_library_doc():
    result = process_open_library_response(ol_doc())

    assert result.source_tag == SOURCE_OPEN_LIBRARY
    assert result.title == "Icebreaker"
    assert result.author == "Hannah Grace"
    assert result.cover_url == "https://covers.openlibrary.org/b/id/12345-L.jpg"
    assert result.summary is None
    assert result.publisher == "Atria"
    assert result.page_count == 416
    assert result.isbn13 == "9781668026038"
    assert result.isbn10 == "1668026031"


def test_process_open_library_without_cover():
    result = process_open_library_response(ol_doc(cover_i=None))
    assert result.cover_url is None


def test_open_library_first_sentence_becomes_quotes():
    result = process_open_library_response(ol_doc(first_sentence=["  It started on the ice. ", ""]))
    assert result.quotes == ("It started on the ice.",)

    assert process_open_library_response(ol_doc()).quotes == ()


def test_process_open_library_empty():
    assert process_open_library_response(None) is None
    assert process_open_library_response({}) is None


def test_open_library_doc_to_book():
    book = open_library_doc_to_book(ol_doc(), mood="Dark", trope="Second Chance")
    assert book.id == "ol-OL1W"
    assert book.source == SOURCE_OPEN_LIBRARY
    assert book.genre == "Romance"
    assert (book.mood, book.trope) == ("Dark", "Second Chance")


# ── Google Books ───────────────────────────────────


def test_process_google_item():
    result = process_google_response(google_item())

    assert result.source_tag == SOURCE_GOOGLE_BOOKS
    assert result.summary.startswith("Anastasia")
    assert result.cover_url == "https://books.google.com/books/content?id=abc"
    assert result.publication_year == 2022
    assert result.page_count == 432


def test_process_google_drops_non_english_description():
    result = process_google_response(google_item(description="Elle est à Paris après la guerre."))
    assert result.summary is None
    assert result.title == "Icebreaker"


def test_select_cover_url_prefers_largest():
    links = {
        "thumbnail": "http://books.google.com/small",
        "large": "http://books.google.com/large",
    }
    assert select_cover_url(links) == "https://books.google.com/large"


def test_select_cover_url_rejects_unknown_hosts():
    assert select_cover_url({"thumbnail": "http://example.com/cover.jpg"}) is None


def test_google_item_to_book():
    book = google_item_to_book(google_item())
    assert book.id == "gb-vol1"
    assert book.source == SOURCE_GOOGLE_BOOKS


# ── Fetch strategies ───────────────────────────────


def test_open_library_skips_title_only_query_when_author_known():
    caller = FakeAPICaller()
    assert fetch_open_library_data("Icebreaker (Maple Hills, #1)", "Hannah Grace", caller) is None

    calls = caller.calls_to(OPEN_LIBRARY_SEARCH_URL)
    assert len(calls) == 2
    assert all(call["author"] == "Hannah Grace" for call in calls)
    assert calls[1]["title"] == "Icebreaker"


def test_open_library_returns_first_doc_of_first_hit():
    caller = FakeAPICaller({OPEN_LIBRARY_SEARCH_URL: [(False, 500, None), (True, 200, {"docs": [ol_doc(), ol_doc(title="Other")]})]})
    doc = fetch_open_library_data("Icebreaker (Maple Hills, #1)", "Hannah Grace", caller)
    assert doc["title"] == "Icebreaker"


def test_google_tries_title_only_last():
    caller = FakeAPICaller()
    fetch_google_data("Icebreaker (Maple Hills, #1)", "Hannah Grace", caller, "key")

    queries = [call["q"] for call in caller.calls_to(GOOGLE_BOOKS_URL)]
    assert queries == [
        "intitle:Icebreaker (Maple Hills, #1) inauthor:Hannah Grace",
        "intitle:Icebreaker inauthor:Hannah Grace",
        "intitle:Icebreaker",
    ]
    assert all(call["langRestrict"] == "en" for call in caller.calls_to(GOOGLE_BOOKS_URL))


def test_google_without_key_makes_no_calls():
    caller = FakeAPICaller()
    assert fetch_google_data("Icebreaker", None, caller, None) is None
    assert caller.calls == []


def test_search_open_library_limits_results():
    caller = FakeAPICaller({OPEN_LIBRARY_SEARCH_URL: [(True, 200, {"docs": [ol_doc()] * 5})]})
    assert len(search_open_library("dark romance", 3, caller)) == 3
    assert search_open_library("dark romance", 0, caller) == []
