import pytest

import database
from library import Library, StorageError
from book import Book


def test_add_list_and_find(lib):
    assert lib.list_books() == []

    book = Book("B1", "Dune", "Frank Herbert", "1965")
    lib.add_book(book)

    found = lib.find_book("B1")
    assert found is not None
    assert found.title == "Dune"
    assert found.publication_year == 1965
    assert len(lib.list_books()) == 1


def test_add_duplicate_id(lib):
    lib.add_book(Book("B1", "Test Book", "Test Author", 2000))

    with pytest.raises(ValueError, match="Book ID already exists"):
        lib.add_book(Book("B1", "Other Book", "Other Author", 2001))

    assert len(lib.list_books()) == 1  # Ensure no duplicate was added
    assert lib.find_book("B1").title == "Test Book"


def test_find_missing_returns_none(lib):
    assert lib.find_book("nope") is None


def test_insertion_order_preserved(lib):
    for book_id in ["C", "A", "B"]:
        lib.add_book(Book(book_id, f"Title {book_id}", "Author", 1999))
    assert [b.book_id for b in lib.list_books()] == ["C", "A", "B"]


def test_persistence(lib, books_file):
    lib.add_book(Book("B1", "Sapiens", "Yuval Noah Harari", 2011))
    lib.add_book(Book("B2", "Dune", "Frank Herbert", 1965))

    # A new instance reads the persisted data
    lib2 = Library(books_file=books_file)
    assert [b.to_dict() for b in lib2.list_books()] == [b.to_dict() for b in lib.list_books()]
    assert lib2.find_book("B1").title == "Sapiens"


def test_remove(lib):
    lib.add_book(Book("123", "Test", "Author", 1990))
    assert lib.remove_book("123") is True
    assert lib.remove_book("123") is False  # Should return False if not found
    assert lib.list_books() == []


def test_remove_missing_leaves_catalog_unchanged(lib):
    lib.add_book(Book("B1", "Dune", "Herbert", 1965))
    before = [b.to_dict() for b in lib.list_books()]
    assert lib.remove_book("B9") is False
    assert [b.to_dict() for b in lib.list_books()] == before


def test_update_book(lib):
    lib.add_book(Book("B1", "Old Title", "Old Author", 1900))

    updated = lib.update_book("B1", title="New Title", author="New Author", publication_year="2001")
    assert updated.title == "New Title"
    assert updated.author == "New Author"
    assert updated.publication_year == 2001

    # Verify persistence
    found = Library().find_book("B1")
    assert found.title == "New Title"
    assert found.publication_year == 2001


def test_update_book_partial(lib):
    lib.add_book(Book("B1", "Original Title", "Original Author", 1950))

    updated = lib.update_book("B1", title="Only Title Changed")
    assert updated.book_id == "B1"
    assert updated.title == "Only Title Changed"
    assert updated.author == "Original Author"
    assert updated.publication_year == 1950


def test_update_ignores_falsy_values(lib):
    lib.add_book(Book("B1", "Title", "Author", 1950))

    updated = lib.update_book("B1", title="", author=None, publication_year=0)
    assert updated.to_dict() == {"bookId": "B1", "title": "Title", "author": "Author", "publicationYear": 1950}


def test_update_book_not_found(lib):
    assert lib.update_book("nonexistent", title="New Title") is None


def test_save_failure_raises_storage_error(lib, monkeypatch):
    lib.add_book(Book("B1", "Dune", "Herbert", 1965))
    monkeypatch.setattr(database, "save_books", lambda books, path=None: False)

    with pytest.raises(StorageError, match="Failed to save book"):
        lib.add_book(Book("B2", "Emma", "Austen", 1815))
    with pytest.raises(StorageError, match="Failed to update book"):
        lib.update_book("B1", title="Dune Messiah")
    with pytest.raises(StorageError, match="Failed to delete book"):
        lib.remove_book("B1")


def test_malformed_entries_are_skipped(lib, books_file):
    database.save_books(["junk", {"bookId": "B1", "title": "Dune", "author": "Herbert", "publicationYear": 1965}])
    assert [b.book_id for b in lib.list_books()] == ["B1"]


def test_statistics(lib):
    lib.add_book(Book("1", "Book 1", "Author A", 2000))
    lib.add_book(Book("2", "Book 2", "Author A", 2001))
    lib.add_book(Book("3", "Book 3", "Author B", 2002))
    lib.add_book(Book("4", "Book 4", "Author B", "n.d."))
    assert lib.get_statistics() == {"total_books": 4, "unique_authors": 2, "undated_books": 1}


def test_stored_records_are_returned_unchanged(lib):
    stored = {"bookId": "B1", "title": "Dune", "publicationYear": "1965", "author": "Herbert", "shelf": "SF-3"}
    database.save_books([stored])

    assert lib.find_book("B1").to_dict() == stored
    assert [b.to_dict() for b in lib.list_books()] == [stored]


def test_update_keeps_extra_keys(lib):
    database.save_books([{"bookId": "B1", "title": "Dune", "author": "Herbert", "publicationYear": 1965, "shelf": "SF-3"}])

    updated = lib.update_book("B1", title="Dune Messiah")
    assert updated.to_dict()["shelf"] == "SF-3"
    assert database.load_books()[0]["shelf"] == "SF-3"


def test_ids_compare_strictly_by_type(lib):
    database.save_books([
        {"bookId": 1, "title": "Numeric", "author": "A", "publicationYear": 2000},
        {"bookId": True, "title": "Boolean", "author": "B", "publicationYear": 2001},
    ])

    assert lib.find_book("1") is None
    assert lib.find_book(1).title == "Numeric"
    assert lib.find_book(1.0).title == "Numeric"
    assert lib.find_book(True).title == "Boolean"
    assert lib.remove_book("1") is False
    assert len(lib.list_books()) == 2
