"""Base Repository: Shared plumbing for the file-backed data sources.

Every repository in this package:
- Reads one file under data/ (JSON or Parquet)
- Caches the parsed snapshot until clear_cache()
- Reports I/O and parse failures as RepositoryError, naming the file
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """Read-only, cached access to one data file.

    Snapshots returned by get_all() are immutable (tuples, frozen
    dataclasses, DataFrames) so callers can share them freely.
    """

    @abstractmethod
    def get_all(self) -> T:
        """Load the complete snapshot, from cache when available.

        Raises:
            RepositoryError: If the file cannot be read or parsed
        """

    @abstractmethod
    def clear_cache(self) -> None:
        """Drop the cached snapshot so the next read hits the file."""


class RepositoryError(Exception):
    """A data file is missing, unreadable or malformed.

    Attributes:
        path: Offending file, when known
    """

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        if path:
            message = f"{message} (path: {path})"
        super().__init__(message)


def read_json(path: Path, what: str) -> Any:
    """Parse a JSON data file.

    Args:
        path: File to read
        what: Human-readable name used in error messages

    Raises:
        RepositoryError: If the file is missing or not valid JSON
    """
    if not path.exists():
        raise RepositoryError(f"{what} not found", str(path))
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RepositoryError(f"Failed to read {what}: {e}", str(path))
