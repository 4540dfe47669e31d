"""Tests for review submission."""

from datetime import datetime, timedelta, timezone

import pytest

from romance_catalog.exceptions import ConflictError, DuplicateReviewError, ValidationError
from romance_catalog.models import DEFAULT_NICKNAME
from romance_catalog.reviews import ReviewService

BOOK_ID = "3f2504e0-4f89-11d3-9a0c-0305e82c3301"
TEXT = "Swooned from the first chapter to the last."


@pytest.fixture
def clock():
    now = {"value": datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)}

    def tick():
        return now["value"]

    tick.advance = lambda **delta: now.update(value=now["value"] + timedelta(**delta))
    return tick


@pytest.fixture
def service(store, clock):
    return ReviewService(store, clock=clock)


def test_submit_review(service, store):
    review = service.submit(BOOK_ID, 5, "<p>" + TEXT + "</p>", user_id="u1", user_ip="10.0.0.1")

    assert review.review_text == TEXT
    assert review.nickname == DEFAULT_NICKNAME
    assert review.created_at == "2026-01-01T12:00:00+00:00"
    assert store.reviews == [review]


def test_nickname_sanitised_and_truncated(service):
    review = service.submit(BOOK_ID, 4, TEXT, user_id="u1", nickname="<i>" + "x" * 150 + "</i>")
    assert review.nickname == "x" * 100


def test_same_address_within_a_day_is_rejected_without_writing(service, store):
    service.submit(BOOK_ID, 5, TEXT, user_id="u1", user_ip="10.0.0.1")

    with pytest.raises(DuplicateReviewError) as exc_info:
        service.submit(BOOK_ID, 3, TEXT, user_id="u2", user_ip="10.0.0.1")

    assert exc_info.value.status_code == 429
    assert len(store.reviews) == 1


def test_same_address_after_a_day_is_accepted(service, store, clock):
    service.submit(BOOK_ID, 5, TEXT, user_id="u1", user_ip="10.0.0.1")
    clock.advance(hours=25)

    service.submit(BOOK_ID, 4, TEXT, user_id="u2", user_ip="10.0.0.1")
    assert len(store.reviews) == 2


def test_unknown_address_is_not_rate_limited(service, store):
    service.submit(BOOK_ID, 5, TEXT, user_id="u1", user_ip="unknown")
    service.submit(BOOK_ID, 5, TEXT, user_id="u2")
    assert len(store.reviews) == 2


def test_same_user_twice_conflicts(service, store, clock):
    service.submit(BOOK_ID, 5, TEXT, user_id="u1", user_ip="10.0.0.1")
    clock.advance(days=3)

    with pytest.raises(ConflictError):
        service.submit(BOOK_ID, 2, TEXT, user_id="u1", user_ip="10.0.0.2")
    assert len(store.reviews) == 1


@pytest.mark.parametrize(
    "book_id, rating, text, message",
    [
        (None, 5, TEXT, "Missing required fields"),
        (BOOK_ID, None, TEXT, "Missing required fields"),
        (BOOK_ID, 5, "<b></b>", "Missing required fields"),
        ("not-a-uuid", 5, TEXT, "Invalid book ID format"),
        (BOOK_ID, 6, TEXT, "Rating must be between 1 and 5"),
        (BOOK_ID, "great", TEXT, "Rating must be between 1 and 5"),
        (BOOK_ID, 4.5, TEXT, "Rating must be between 1 and 5"),
        (BOOK_ID, 5, "Too short", "Review must be between 10 and 5000 characters"),
        (BOOK_ID, 5, "x" * 5001, "Review must be between 10 and 5000 characters"),
    ],
)
def test_validation(service, store, book_id, rating, text, message):
    with pytest.raises(ValidationError) as exc_info:
        service.submit(book_id, rating, text, user_id="u1")

    assert exc_info.value.message == message
    assert store.reviews == []


def test_numeric_string_rating_accepted(service):
    assert service.submit(BOOK_ID, "3", TEXT, user_id="u1").rating == 3
