"""Adapter for the live ``.npmrc`` file read by npm."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from .rcfile import Record, Value, read_rc_file, write_rc_file

logger = logging.getLogger(__name__)


class LiveConfig:
    """Read-modify-write access to the single live configuration file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def read(self) -> Record:
        record = read_rc_file(self.path)
        logger.debug("Read %d keys from %s", len(record), self.path)
        return record

    def write(self, record: Mapping[str, Value]) -> None:
        write_rc_file(self.path, record)

    def __repr__(self) -> str:
        return f"LiveConfig({str(self.path)!r})"


__all__ = ["LiveConfig"]
