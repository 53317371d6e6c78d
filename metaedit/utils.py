from datetime import datetime
from pathlib import Path
from typing import Sequence, TypeVar

from .errors import InvalidPathError, ValidationError

T = TypeVar("T")


def ensure_path(path_str: str) -> Path:
    """Return a resolved Path object and ensure it exists."""
    if not path_str.strip():
        raise InvalidPathError("No path given")
    p = Path(path_str).expanduser().resolve()
    if not p.exists():
        raise InvalidPathError(f"Path does not exist: {p}")
    return p


def ensure_file(path_str: str) -> Path:
    p = ensure_path(path_str)
    if not p.is_file():
        raise InvalidPathError(f"Not a regular file: {p}")
    return p


def pick_choice(choice: str, options: Sequence[T], default: T) -> T:
    """Map a 1-based menu answer onto ``options``; blank picks ``default``."""
    choice = choice.strip()
    if not choice:
        return default
    if not choice.isdigit() or not 1 <= int(choice) <= len(options):
        raise ValidationError(f"Invalid choice: {choice!r}")
    return options[int(choice) - 1]


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO 8601 date or datetime. Naive values are taken as local time."""
    value = text.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Not an ISO date: {text!r}") from None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def format_timestamp(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")
