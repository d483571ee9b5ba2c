# File: laragen/utils.py
"""
Laragen - Utility Functions & Helpers
=====================================
String transformation, PHP literal formatting, file I/O, and timing
utilities used throughout the generation pipeline.

Naming helpers follow Laravel's ``Str`` conventions closely enough that
file names derived here match what the framework expects:

- ``to_studly_case("user_addresses")``  → ``UserAddresses``
- ``to_singular("user_addresses")``     → ``user_address``
- ``model_name_for("review_media")``    → ``ReviewMedia``

All string-conversion functions are decorated with
``@lru_cache(maxsize=None)``; the same table and column names are
converted many times during a run.
"""

from __future__ import annotations

import functools
import hashlib
import logging
import os
import re
import tempfile
import time
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (compiled once at module load)
# ---------------------------------------------------------------------------

_CAMEL_TO_SNAKE_RE1: re.Pattern[str] = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_TO_SNAKE_RE2: re.Pattern[str] = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUM_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]")
_MULTI_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"_{2,}")
_LEADING_TRAILING_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"^_+|_+$")
_SPLIT_WORDS_RE: re.Pattern[str] = re.compile(
    r"[A-Z]?[a-z]+|[A-Z]+(?=[A-Z][a-z]|\d|\b)|[A-Z]|\d+"
)

# Words that are spelled the same in singular and plural
_UNCOUNTABLE: FrozenSet[str] = frozenset({
    "media", "data", "equipment", "information", "news", "series",
    "species", "metadata", "feedback", "analytics",
})

_SINGULAR_IRREGULARS: Dict[str, str] = {
    "people": "person",
    "children": "child",
    "men": "man",
    "women": "woman",
    "mice": "mouse",
    "geese": "goose",
    "teeth": "tooth",
    "feet": "foot",
    "indices": "index",
    "matrices": "matrix",
    "vertices": "vertex",
    "axes": "axis",
    "crises": "crisis",
    "analyses": "analysis",
    "statuses": "status",
    "addresses": "address",
    "leaves": "leaf",
    "lives": "life",
    "wives": "wife",
    "knives": "knife",
}


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """
    Convert any string to snake_case.

    Examples:
        >>> to_snake_case("OrderReturn")
        'order_return'
        >>> to_snake_case("already_snake")
        'already_snake'
    """
    if not name:
        return ""
    s: str = _CAMEL_TO_SNAKE_RE1.sub(r"\1_\2", name)
    s = _CAMEL_TO_SNAKE_RE2.sub(r"\1_\2", s)
    s = _NON_ALPHANUM_RE.sub("_", s)
    s = _MULTI_UNDERSCORE_RE.sub("_", s)
    s = _LEADING_TRAILING_UNDERSCORE_RE.sub("", s)
    return s.lower()


@functools.lru_cache(maxsize=None)
def to_studly_case(name: str) -> str:
    """
    Convert any string to StudlyCase (Laravel's name for PascalCase).

    Examples:
        >>> to_studly_case("administrative_divisions")
        'AdministrativeDivisions'
        >>> to_studly_case("out_of_stock")
        'OutOfStock'
    """
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    return "".join(word.capitalize() for word in words)


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Convert any string to camelCase.

    Examples:
        >>> to_camel_case("default_address")
        'defaultAddress'
        >>> to_camel_case("twoFactorMethods")
        'twoFactorMethods'
    """
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    if not words:
        return ""
    first: str = words[0].lower()
    rest: str = "".join(w.capitalize() for w in words[1:])
    return first + rest


@functools.lru_cache(maxsize=None)
def to_human_words(name: str) -> str:
    """
    Convert an identifier to lower-case words separated by spaces.

    Examples:
        >>> to_human_words("out_of_stock")
        'out of stock'
        >>> to_human_words("defaultAddress")
        'default address'
    """
    return " ".join(_extract_words(name))


@functools.lru_cache(maxsize=None)
def to_singular(name: str) -> str:
    """
    Naive English singularisation of the *last* word of a snake_case name.

    Only the trailing word is inflected, the way Laravel's
    ``Str::singular`` behaves on table names:

        >>> to_singular("user_addresses")
        'user_address'
        >>> to_singular("dispute_messages")
        'dispute_message'
        >>> to_singular("review_media")
        'review_media'
    """
    if not name:
        return ""

    head: str
    sep: str
    word: str
    head, sep, word = name.rpartition("_")
    lower: str = word.lower()

    if lower in _UNCOUNTABLE:
        return name

    singular: str
    if lower in _SINGULAR_IRREGULARS:
        singular = _SINGULAR_IRREGULARS[lower]
        if word[0].isupper():
            singular = singular[0].upper() + singular[1:]
    elif lower.endswith("ies") and len(word) > 3:
        singular = word[:-3] + "y"
    elif lower.endswith(("sses", "shes", "ches", "xes", "zes")):
        singular = word[:-2]
    elif lower.endswith("oes") and len(word) > 4:
        singular = word[:-2]
    elif lower.endswith("s") and not lower.endswith(("ss", "us", "is")):
        singular = word[:-1]
    else:
        singular = word

    return f"{head}{sep}{singular}"


@functools.lru_cache(maxsize=None)
def model_name_for(table_name: str) -> str:
    """Derive the Eloquent class name for a table: singular, then StudlyCase."""
    return to_studly_case(to_singular(table_name))


@functools.lru_cache(maxsize=None)
def _extract_words(name: str) -> Tuple[str, ...]:
    """
    Extract individual words from any casing style.

    Returns a tuple (hashable for LRU cache) of lowercase word strings.
    """
    cleaned: str = _NON_ALPHANUM_RE.sub(" ", name)
    words: List[str] = _SPLIT_WORDS_RE.findall(cleaned)
    return tuple(w.lower() for w in words if w)


# ---------------------------------------------------------------------------
# PHP literal formatting
# ---------------------------------------------------------------------------


def php_string(value: str) -> str:
    """Render *value* as a single-quoted PHP string literal."""
    escaped: str = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def php_boolean(value: Any) -> Optional[str]:
    """
    ``true``/``false`` for a bool or for the strings ``"true"``/``"false"``.

    Returns None for anything else.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str) and value in ("true", "false"):
        return value
    return None


def php_literal(value: Any) -> str:
    """
    Render a scalar as a PHP literal.

    Strings are single-quoted, booleans become ``true``/``false``,
    ``None`` becomes ``null`` and numbers are emitted as-is.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return php_string(value)
    return str(value)


def php_array(items: Sequence[Any]) -> str:
    """Render a flat PHP array literal: ``['a', 'b']``."""
    return "[" + ", ".join(php_literal(item) for item in items) + "]"


def php_double_quoted_array(items: Sequence[str]) -> str:
    """Render ``["a", "b"]``, the form used inside Faker expressions."""
    escaped: List[str] = [
        '"' + item.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$") + '"'
        for item in items
    ]
    return "[" + ", ".join(escaped) + "]"


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def write_file(path: Path, content: str) -> int:
    """
    Atomically write *content* to *path*.

    The payload goes to a temporary file in the destination directory,
    is flushed to disk, then renamed over the target, so readers never
    observe a partially written artifact.

    Returns the number of bytes written.
    """
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")
    fd: int
    tmp_path: str
    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(encoded)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, str(path))
    except OSError:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)


def read_file(path: Path) -> str:
    """Read a file and return its content as a string."""
    return path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling generation steps.

    Usage:
        with Timer("render migrations") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)


__all__: List[str] = [
    "to_snake_case",
    "to_studly_case",
    "to_camel_case",
    "to_human_words",
    "to_singular",
    "model_name_for",
    "php_string",
    "php_boolean",
    "php_literal",
    "php_array",
    "php_double_quoted_array",
    "ensure_directory",
    "write_file",
    "read_file",
    "sha256_hex",
    "count_lines",
    "Timer",
]
