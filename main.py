import subprocess
import sys
from typing import Optional

import httpx
import typer
from rich.console import Console

from library import Library, StorageError
from book import Book
from config import settings
from utils.ui_helpers import set_output_mode, print_list_result, print_book_result, print_stats_result

console = Console(stderr=True)

app = typer.Typer(help="Library catalog CLI")


def get_library() -> Library:
    # Library keeps no state between calls
    return Library()


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (e.g. output mode)."""
    if output and not set_output_mode(output):
        raise typer.BadParameter(f"unknown output mode {output!r}", param_hint="--output")


@app.command("list")
def cli_list():
    """List every book in the catalog."""
    print_list_result(get_library().list_books())


@app.command("find")
def cli_find(book_id: str):
    """Find a book by ID and show its details."""
    book = get_library().find_book(book_id)
    if book:
        print_book_result(book)
    else:
        print(f"Book with ID {book_id} not found.")


@app.command("add")
def cli_add(
    book_id: str,
    title: str,
    author: str,
    year: str = typer.Argument(..., help="Publication year"),
):
    """Add a book to the catalog."""
    if not (book_id and title and author and year):
        print("Error: All fields are required")
        raise typer.Exit(code=1)
    book = Book(book_id=book_id, title=title, author=author, publication_year=year)
    try:
        get_library().add_book(book)
    except (ValueError, StorageError) as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    print(f"Successfully added: {book.title} by {book.author}")


@app.command("update")
def cli_update(
    book_id: str,
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="New author"),
    year: Optional[str] = typer.Option(None, "--year", "-y", help="New publication year"),
):
    """Update the title, author and/or year of a book."""
    try:
        book = get_library().update_book(book_id, title=title, author=author, publication_year=year)
    except StorageError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    if not book:
        print(f"Book with ID {book_id} not found.")
        return
    print(f"Updated: {book.title} by {book.author}")


@app.command("remove")
def cli_remove(book_id: str):
    """Remove a book by ID."""
    try:
        removed = get_library().remove_book(book_id)
    except StorageError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    if removed:
        print(f"Book with ID {book_id} has been removed.")
    else:
        print(f"Book with ID {book_id} not found.")


@app.command("stats")
def cli_stats():
    """Show catalog statistics."""
    print_stats_result(get_library().get_statistics())


@app.command("ping")
def cli_ping(
    url: str = typer.Option(settings.base_url, "--url", help="Base URL of a running API"),
    timeout: float = typer.Option(settings.ping_timeout, "--timeout", help="Seconds to wait for a response"),
):
    """Check that the API server is reachable.

    Exit code 1 means no response at all (server unreachable); exit code 2
    means the server answered with an HTTP error status.
    """
    try:
        response = httpx.get(url.rstrip("/") + "/", timeout=timeout)
    except httpx.RequestError as e:
        console.print(f"[bold red]Server unreachable at {url}[/]: {e}")
        raise typer.Exit(code=1)

    if response.status_code >= 400:
        console.print(f"[yellow]Server at {url} responded with HTTP {response.status_code}[/]")
        raise typer.Exit(code=2)

    try:
        data = response.json()
        message = data.get("message", "") if isinstance(data, dict) else ""
    except ValueError:
        message = response.text
    print(f"OK: {message}")


@app.command("serve")
def cli_serve(
    host: str = typer.Option(settings.api_host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.api_port, "--port", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
):
    """Start the API server with uvicorn."""
    print(f"Starting API on http://{host}:{port}/")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "api:app",
        "--host", host,
        "--port", str(port),
    ]
    if reload:
        args.append("--reload")
    try:
        subprocess.run(args, check=False)
    except KeyboardInterrupt:
        print("Server stopped.")


if __name__ == "__main__":
    app()
