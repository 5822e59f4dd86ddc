import json
import logging
import os
from typing import List, Dict, Any, Optional

from config import settings

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Default backing file. Tests and callers may point this elsewhere before use.
BOOKS_FILE = settings.books_file


def _resolve(path: Optional[str]) -> str:
    return path or BOOKS_FILE


def _ensure_parent(path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _write_empty(path: str) -> None:
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([], f, indent=2)


def initialize_database(path: Optional[str] = None) -> None:
    """Make sure the backing file exists and holds a JSON array.

    A missing file is created as ``[]``. An existing file that cannot be
    parsed, or whose content is not an array, is reset to ``[]``.
    """
    path = _resolve(path)
    if not os.path.exists(path):
        _write_empty(path)
        logger.info(f"Created empty catalog at {path}")
        return

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = json.load(f, parse_constant=_reject_constant)
    except (ValueError, OSError) as e:
        logger.error(f"Error reading {path}. Resetting to empty array: {e}")
        _write_empty(path)
        return

    if not isinstance(content, list):
        logger.warning(f"{path} is not an array. Resetting to empty array.")
        _write_empty(path)


def load_books(path: Optional[str] = None) -> List[Dict[str, Any]]:
    """Read every record from the backing file.

    Never raises: a missing file is initialized, while corrupt or
    non-array content reads as an empty catalog.
    """
    path = _resolve(path)
    try:
        if not os.path.exists(path):
            _write_empty(path)
            return []
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f, parse_constant=_reject_constant)
    except (ValueError, OSError) as e:
        logger.error(f"Error reading books file {path}: {e}")
        return []

    if not isinstance(data, list):
        logger.warning(f"{path} data is not an array. Returning empty array.")
        return []
    return data


def save_books(books: List[Dict[str, Any]], path: Optional[str] = None) -> bool:
    """Overwrite the backing file with ``books``. Returns success as a boolean."""
    path = _resolve(path)
    try:
        # The file must stay strict JSON: no NaN or Infinity
        payload = json.dumps(books, indent=2, ensure_ascii=False, allow_nan=False)
        _ensure_parent(path)
        with open(path, "w", encoding="utf-8") as f:
            f.write(payload)
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Error writing books file {path}: {e}")
        return False
