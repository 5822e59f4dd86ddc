import pytest

import database
from library import Library

@pytest.fixture
def books_file(tmp_path, monkeypatch):
    # Point the default backing file at a per-test location
    path = str(tmp_path / "data" / "books.json")
    monkeypatch.setattr(database, "BOOKS_FILE", path)
    return path

@pytest.fixture
def lib(books_file):
    return Library()
