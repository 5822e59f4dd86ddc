import logging
from typing import List, Optional, Dict, Any

import database
from book import Book
from utils.validators import YearParser

logger = logging.getLogger(__name__)


def _same_id(stored: Any, wanted: Any) -> bool:
    """Strict id equality: "1", 1 and True are three different ids."""
    numbers = (int, float)
    if (isinstance(stored, numbers) and isinstance(wanted, numbers)
            and not isinstance(stored, bool) and not isinstance(wanted, bool)):
        return stored == wanted
    return type(stored) is type(wanted) and stored == wanted


class LibraryError(Exception):
    pass


class StorageError(LibraryError):
    """Raised when the backing file could not be written."""


class Library:
    """Manages the book catalog held in the JSON backing file.

    Every operation reloads the file, so there is no in-memory copy that
    could drift from disk. Writes are not serialized: two concurrent
    load/mutate/save cycles race and the later save wins.
    """

    def __init__(self, books_file: Optional[str] = None) -> None:
        # None means "whatever database.BOOKS_FILE points to at call time".
        self.books_file = books_file

    # ------------------------- Persistence ------------------------- #
    def _load(self) -> List[Dict[str, Any]]:
        records = database.load_books(self.books_file)
        clean = [r for r in records if isinstance(r, dict)]
        if len(clean) != len(records):
            logger.warning(f"Skipped {len(records) - len(clean)} malformed catalog entries")
        return clean

    def _save(self, records: List[Dict[str, Any]], action: str) -> None:
        if not database.save_books(records, self.books_file):
            raise StorageError(f"Failed to {action} book")

    # ------------------------- Core operations ------------------------- #
    def list_books(self) -> List[Book]:
        """All books in insertion order (fresh from disk on every call)."""
        return [Book.from_record(r) for r in self._load()]

    def find_book(self, book_id: Any) -> Optional[Book]:
        for record in self._load():
            if _same_id(record.get("bookId"), book_id):
                return Book.from_record(record)
        return None

    def add_book(self, book: Book) -> Book:
        """Append a new book. Prevent duplicates by book ID."""
        records = self._load()
        if any(_same_id(r.get("bookId"), book.book_id) for r in records):
            raise ValueError("Book ID already exists")

        records.append(book.to_dict())
        self._save(records, "save")
        logger.info(f"Added book {book.book_id!r}")
        return book

    def update_book(self, book_id: Any, *, title: Any = None, author: Any = None,
                    publication_year: Any = None) -> Optional[Book]:
        """Merge the supplied fields over an existing book. Returns None if not found.

        Falsy values ("" or 0) are treated the same as omitted ones and keep
        the stored value.
        """
        records = self._load()
        for index, record in enumerate(records):
            if _same_id(record.get("bookId"), book_id):
                break
        else:
            return None

        updated = dict(record)
        if title:
            updated["title"] = title
        if author:
            updated["author"] = author
        if publication_year:
            updated["publicationYear"] = YearParser.parse(publication_year)

        records[index] = updated
        self._save(records, "update")
        logger.info(f"Updated book {book_id!r}")
        return Book.from_record(updated)

    def remove_book(self, book_id: Any) -> bool:
        records = self._load()
        remaining = [r for r in records if not _same_id(r.get("bookId"), book_id)]
        if len(remaining) == len(records):
            return False

        self._save(remaining, "delete")
        logger.info(f"Removed book {book_id!r}")
        return True

    def get_statistics(self) -> Dict[str, Any]:
        """Get library statistics."""
        books = self.list_books()
        return {
            "total_books": len(books),
            "unique_authors": len({b.author for b in books if isinstance(b.author, str)}),
            "undated_books": sum(1 for b in books if b.publication_year is None),
        }
