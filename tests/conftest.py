"""Shared fakes and fixtures for the romance catalog tests."""

from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest

from romance_catalog.models import BookRecord
from romance_catalog.store import InMemoryCatalogStore

Response = Tuple[bool, int, Optional[dict]]


class FakeAPICaller:
    """
    Stands in for APICaller. Responses are keyed by URL; each key holds either
    a list consumed in order (the last entry repeats) or a callable taking the
    query params.
    """

    def __init__(self, responses: Optional[Dict[str, Union[List[Response], Callable]]] = None, error: Exception = None):
        self.responses = responses or {}
        self.error = error
        self.calls: List[Tuple[str, dict]] = []

    def get(self, url: str, params: Optional[dict] = None) -> Response:
        self.calls.append((url, dict(params or {})))
        if self.error is not None:
            raise self.error

        entry = self.responses.get(url)
        if entry is None:
            return False, 404, None
        if callable(entry):
            return entry(params or {})
        if len(entry) > 1:
            return entry.pop(0)
        return entry[0]

    def calls_to(self, url: str) -> List[dict]:
        return [params for called, params in self.calls if called == url]


class NullSession:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeChatClient:
    """Chat-completion stand-in; `reply` may be a string, an exception or a callable(user_prompt)"""

    def __init__(self, reply="A lyrical little blurb.", enabled: bool = True):
        self.reply = reply
        self.enabled = enabled
        self.calls: List[Tuple[str, str, int]] = []

    def open_session(self):
        return NullSession()

    async def complete(self, session, system: str, user: str, max_tokens: int = 100) -> str:
        self.calls.append((system, user, max_tokens))
        reply = self.reply(user) if callable(self.reply) else self.reply
        if isinstance(reply, Exception):
            raise reply
        return reply


def ol_doc(title="Icebreaker", author="Hannah Grace", **extra) -> dict:
    doc = {
        "key": "/works/OL1W",
        "title": title,
        "author_name": [author],
        "first_publish_year": 2022,
        "publisher": ["Atria"],
        "number_of_pages_median": 416,
        "cover_i": 12345,
        "isbn": ["9781668026038", "1668026031"],
    }
    doc.update(extra)
    return doc


def google_item(title="Icebreaker", author="Hannah Grace", **volume) -> dict:
    info = {
        "title": title,
        "authors": [author],
        "description": "Anastasia has worked her entire life for a spot on the Olympic team.",
        "imageLinks": {"thumbnail": "http://books.google.com/books/content?id=abc&edge=curl"},
        "publishedDate": "2022-11-01",
        "publisher": "Simon and Schuster",
        "pageCount": 432,
    }
    info.update(volume)
    return {"id": "vol1", "volumeInfo": info}


@pytest.fixture
def make_book():
    counter = {"n": 0}

    def factory(**overrides) -> BookRecord:
        counter["n"] += 1
        n = counter["n"]
        values = {
            "id": f"book-{n}",
            "title": f"Book {n}",
            "author": f"Author {n}",
            "created_at": f"2024-01-01T00:00:{n:02d}+00:00",
        }
        values.update(overrides)
        return BookRecord(**values)

    return factory


@pytest.fixture
def store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore(
        genres={"g1": "Fantasy Romance"},
        moods={"m1": "Dark & Intense"},
    )
