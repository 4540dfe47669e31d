"""
DynamoDB-backed catalog store.

DynamoDB has no case-insensitive substring filter, so book queries scan the
table and apply BookQuery.matches in process. The catalog is small enough
for this to be acceptable.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr

from ..config import Settings
from ..models import BookQuery, BookRecord, EnrichmentAttempt, Quote, Review
from ..models.book import utc_now_iso
from .base import CatalogStore


def from_dynamo(value: Any) -> Any:
    """Convert DynamoDB Decimals back into ints/floats"""
    if isinstance(value, list):
        return [from_dynamo(v) for v in value]
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def to_dynamo(value: Any) -> Any:
    """DynamoDB rejects Python floats"""
    if isinstance(value, list):
        return [to_dynamo(v) for v in value]
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def scan_all(table, **kwargs) -> List[Dict]:
    """Follow LastEvaluatedKey until the whole table has been read"""
    response = table.scan(**kwargs)
    items = list(response.get("Items", []))
    while "LastEvaluatedKey" in response:
        response = table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))
    return items


class DynamoCatalogStore(CatalogStore):

    def __init__(self, books_table, logs_table, reviews_table, genres_table, moods_table, quotes_table):
        self.books_table = books_table
        self.logs_table = logs_table
        self.reviews_table = reviews_table
        self.genres_table = genres_table
        self.moods_table = moods_table
        self.quotes_table = quotes_table
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_settings(cls, settings: Settings, dynamodb=None) -> "DynamoCatalogStore":
        dynamodb = dynamodb or boto3.resource("dynamodb")
        return cls(
            books_table=dynamodb.Table(settings.books_table),
            logs_table=dynamodb.Table(settings.enrichment_logs_table),
            reviews_table=dynamodb.Table(settings.reviews_table),
            genres_table=dynamodb.Table(settings.genres_table),
            moods_table=dynamodb.Table(settings.moods_table),
            quotes_table=dynamodb.Table(settings.quotes_table),
        )

    def get_book(self, book_id: str) -> Optional[BookRecord]:
        response = self.books_table.get_item(Key={"id": str(book_id)})
        item = response.get("Item")
        return BookRecord.from_dict(from_dynamo(item)) if item else None

    def query_books(self, query: BookQuery) -> List[BookRecord]:
        books = [BookRecord.from_dict(from_dynamo(item)) for item in scan_all(self.books_table)]
        return query.paginate([book for book in books if query.matches(book)])

    def add_book(self, book: BookRecord) -> BookRecord:
        if not book.created_at:
            book.created_at = utc_now_iso()
        self.books_table.put_item(Item=to_dynamo(book.to_dict()))
        return book

    def update_book(self, book_id: str, updates: dict) -> None:
        if not updates:
            return
        names = {}
        values = {}
        assignments = []
        for index, (key, value) in enumerate(updates.items()):
            names[f"#f{index}"] = key
            values[f":v{index}"] = to_dynamo(value)
            assignments.append(f"#f{index} = :v{index}")

        self.books_table.update_item(
            Key={"id": str(book_id)},
            UpdateExpression="SET " + ", ".join(assignments),
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
            ConditionExpression=Attr("id").exists(),
        )
        self.logger.debug(f"Updated book {book_id}: {sorted(updates)}")

    def log_enrichment(self, attempt: EnrichmentAttempt) -> None:
        item = attempt.to_dict()
        item["id"] = f"{attempt.book_id}#{attempt.created_at}"
        self.logs_table.put_item(Item=to_dynamo(item))

    def _taxonomy_name(self, table, item_id: str) -> Optional[str]:
        item = table.get_item(Key={"id": str(item_id)}).get("Item")
        return item.get("name") if item else None

    def get_genre_name(self, genre_id: str) -> Optional[str]:
        return self._taxonomy_name(self.genres_table, genre_id)

    def get_mood_name(self, mood_id: str) -> Optional[str]:
        return self._taxonomy_name(self.moods_table, mood_id)

    def add_review(self, review: Review) -> Review:
        self.reviews_table.put_item(Item=to_dynamo(review.to_dict()))
        return review

    def find_reviews(self, book_id, user_id=None, user_ip=None, since=None) -> List[Review]:
        condition = Attr("book_id").eq(str(book_id))
        if user_id is not None:
            condition = condition & Attr("user_id").eq(user_id)
        if user_ip is not None:
            condition = condition & Attr("user_ip").eq(user_ip)
        if since is not None:
            condition = condition & Attr("created_at").gte(since)

        items = scan_all(self.reviews_table, FilterExpression=condition)
        return [Review.from_dict(from_dynamo(item)) for item in items]

    def add_quote(self, quote: Quote) -> Quote:
        self.quotes_table.put_item(Item=to_dynamo(quote.to_dict()))
        return quote

    def find_quotes(self, book_title: str) -> List[Quote]:
        # `contains` is case-sensitive in DynamoDB, so match in process
        needle = book_title.lower()
        return [
            Quote.from_dict(from_dynamo(item))
            for item in scan_all(self.quotes_table)
            if needle in (item.get("book_title") or "").lower()
        ]
