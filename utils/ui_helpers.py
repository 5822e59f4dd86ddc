import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# CLI output mode lives in the environment
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"
OUTPUT_MODES = ("plain", "json", "rich")

# Stat key -> label, in display order
STAT_LABELS = {
    "total_books": "Total Books",
    "unique_authors": "Unique Authors",
    "undated_books": "Books Without Year",
}

_console = Console()

def set_output_mode(mode: str) -> bool:
    """Select the output mode. Returns False (and changes nothing) for unknown modes."""
    mode = (mode or "").lower().strip()
    if mode not in OUTPUT_MODES:
        return False
    os.environ[OUTPUT_MODE_ENV] = mode
    return True

def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, "plain").lower()
    return mode if mode in OUTPUT_MODES else "plain"

def _year(book: Any) -> str:
    year = getattr(book, "publication_year", None)
    return "" if year is None else str(year)

def print_list_result(books: List[Any]) -> None:
    """Print the book list in the current output mode.
    - plain: 'ID - Title by Author (Year)' lines, or 'No books in library.'
    - json: the records as a JSON array
    - rich: a Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No books in library.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("Book ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Year", style="green", justify="right")
        for b in books:
            table.add_row(str(b.book_id), str(b.title), str(b.author), _year(b))
        _console.print(table)
    else:
        for b in books:
            print(f"{b.book_id} - {b.title} by {b.author} ({_year(b) or 'n/a'})")

def print_book_result(book: Any) -> None:
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(book.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Title:[/] {book.title}\n"
            f"[bold]Author:[/] {book.author}\n"
            f"[bold]Year:[/] {_year(book) or 'n/a'}"
        )
        _console.print(Panel.fit(content, title=f"📖 {book.book_id}", border_style="cyan"))
    else:
        print("Book Found")
        print(f"Book ID: {book.book_id}")
        print(f"Title: {book.title}")
        print(f"Author: {book.author}")
        print(f"Year: {_year(book) or 'n/a'}")

def print_stats_result(stats: Dict[str, Any]) -> None:
    if not stats:
        print("No statistics available.")
        return

    rows = [(key, label, stats.get(key, 0)) for key, label in STAT_LABELS.items()]
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps({key: value for key, _, value in rows}))
    elif mode == "rich":
        content = "\n".join(f"[bold]{label}:[/] {value}" for _, label, value in rows)
        _console.print(Panel.fit(content, title="📊 Catalog", border_style="blue"))
    else:
        for _, label, value in rows:
            print(f"{label}: {value}")
