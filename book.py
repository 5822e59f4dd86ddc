from __future__ import annotations

from typing import Any, Dict, Optional

from utils.validators import YearParser

_KNOWN_KEYS = ("bookId", "title", "author", "publicationYear")


class Book:
    """A single catalog record, keyed by ``book_id``.

    New books have their year coerced on construction. Books read back from
    the backing file keep the stored values and any extra keys unchanged.
    """

    def __init__(self, book_id: Any, title: Any, author: Any, publication_year: Any = None,
                 extra: Optional[Dict[str, Any]] = None) -> None:
        self.book_id = book_id
        self.title = title
        self.author = author
        self.publication_year = YearParser.parse(publication_year)
        self.extra = dict(extra or {})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self) -> dict:
        # Keys match the on-disk and wire format.
        data = {
            "bookId": self.book_id,
            "title": self.title,
            "author": self.author,
            "publicationYear": self.publication_year,
        }
        data.update(self.extra)
        return data

    @staticmethod
    def from_dict(data: dict) -> "Book":
        """Build a new book from an inbound payload (year is coerced)."""
        return Book(
            book_id=data.get("bookId"),
            title=data.get("title"),
            author=data.get("author"),
            publication_year=data.get("publicationYear"),
        )

    @staticmethod
    def from_record(record: dict) -> "Book":
        """Wrap a stored record as-is."""
        book = Book(
            book_id=record.get("bookId"),
            title=record.get("title"),
            author=record.get("author"),
            extra={k: v for k, v in record.items() if k not in _KNOWN_KEYS},
        )
        book.publication_year = record.get("publicationYear")
        return book
