"""Reader and writer for flat ``key=value`` rc files (``.npmrc`` style).

Both the live npm configuration and the stored profiles use this format.
Values are converted at the boundary: ``true``/``false`` become ``bool``,
everything else stays ``str``.  Writes go through a temporary file in the
destination directory and :func:`os.replace`, so readers never observe a
partially written file.
"""

from __future__ import annotations

import io
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Mapping, Union

from dotenv import dotenv_values

from .errors import InvalidProfileError, StorageIOError

logger = logging.getLogger(__name__)

Value = Union[str, bool]
Record = Dict[str, Value]

_KEY_PATTERN = re.compile(r"^[^=#;\s'\"]+$")
_NEEDS_QUOTES = re.compile(r"(^\s|\s$|#|^['\"]|[\r\n])")


def is_valid_key(key: str) -> bool:
    return bool(_KEY_PATTERN.match(key))


def parse_value(text: str) -> Value:
    """Convert a raw string from disk into its typed value."""

    if text == "true":
        return True
    if text == "false":
        return False
    return text


def format_value(value: Value) -> str:
    """Serialize ``value`` so that :func:`read_rc_file` restores it."""

    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    if not _NEEDS_QUOTES.search(text):
        return text
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'


def read_rc_file(path: Path) -> Record:
    """Parse ``path``; a missing file yields an empty record."""

    if not path.exists():
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise StorageIOError(f"Cannot read {path}: {exc}") from exc
    # npm treats ";" lines as comments, dotenv does not
    lines = [line for line in text.splitlines() if not line.lstrip().startswith(";")]
    # interpolation would expand npm-style ${NPM_TOKEN} references
    raw = dotenv_values(stream=io.StringIO("\n".join(lines)), interpolate=False)
    return {key: parse_value(value) for key, value in raw.items() if value is not None}


def render_rc(record: Mapping[str, Value]) -> str:
    lines = []
    for key in sorted(record):
        if not is_valid_key(key):
            raise InvalidProfileError(f"Invalid configuration key: {key!r}")
        lines.append(f"{key}={format_value(record[key])}")
    return "\n".join(lines) + "\n" if lines else ""


def atomic_write_text(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` via a temporary sibling file.

    Symlinks are followed, so the file they point to is the one replaced.
    """

    path = path.resolve()
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise StorageIOError(f"Cannot write {path}: {exc}") from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug("Temporary file %s already gone", tmp_name)


def write_rc_file(path: Path, record: Mapping[str, Value]) -> None:
    """Atomically overwrite ``path`` with ``record`` in sorted key order."""

    atomic_write_text(path, render_rc(record))
    logger.debug("Wrote %d keys to %s", len(record), path)


__all__ = [
    "Record",
    "Value",
    "atomic_write_text",
    "format_value",
    "is_valid_key",
    "parse_value",
    "read_rc_file",
    "render_rc",
    "write_rc_file",
]
