import logging
from typing import Any, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

import database
from library import Library, StorageError
from book import Book
from config import settings
from utils.validators import FieldValidator

logger = logging.getLogger(__name__)

library = Library()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create (or repair) the backing file before serving requests
    database.initialize_database(library.books_file)
    logger.info(f"Books database located at: {library.books_file or database.BOOKS_FILE}")
    yield


app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug, lifespan=lifespan)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error bodies ---
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


# --- Models ---
# Values are stored as sent; only the year is coerced (see Book).
class BookCreateModel(BaseModel):
    bookId: Any = None
    title: Any = None
    author: Any = None
    publicationYear: Any = None


class BookUpdateModel(BaseModel):
    title: Any = None
    author: Any = None
    publicationYear: Any = None


# --- API Endpoints ---
@app.get("/")
def read_root():
    """Liveness check: the process is up and accepting connections."""
    return {"message": "Library API is running"}


@app.get("/books")
@app.get("/bookGet", include_in_schema=False)
def get_books():
    """Get every book in insertion order."""
    try:
        return [b.to_dict() for b in library.list_books()]
    except Exception:
        logger.exception("Error in book retrieval route")
        raise HTTPException(status_code=500, detail="Server error")


@app.get("/books/{book_id}")
def get_book(book_id: str):
    """Get a single book by its ID."""
    book = library.find_book(book_id)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book.to_dict()


@app.post("/books", status_code=201)
@app.post("/bookAdd", status_code=201, include_in_schema=False)
def add_book(payload: Optional[BookCreateModel] = None):
    """Add a new book. All four fields are required."""
    data = payload.model_dump() if payload else None
    if FieldValidator.has_non_finite(data):
        raise HTTPException(status_code=400, detail="Invalid request body")
    if not FieldValidator.has_required_fields(data):
        raise HTTPException(status_code=400, detail="All fields are required")

    book = Book.from_dict(data)
    try:
        library.add_book(book)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to save book")
    return book.to_dict()


@app.put("/books/{book_id}")
def update_book(book_id: str, update: Optional[BookUpdateModel] = None):
    """Update title, author and/or publication year of a book."""
    update = update or BookUpdateModel()
    if FieldValidator.has_non_finite(update.model_dump()):
        raise HTTPException(status_code=400, detail="Invalid request body")
    try:
        book = library.update_book(
            book_id,
            title=update.title,
            author=update.author,
            publication_year=update.publicationYear,
        )
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to update book")
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book.to_dict()


@app.delete("/books/{book_id}")
def delete_book(book_id: str):
    """Delete a book by its ID."""
    try:
        removed = library.remove_book(book_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to delete book")
    if not removed:
        raise HTTPException(status_code=404, detail="Book not found")
    return {"message": "Book deleted successfully"}
