"""Logging helpers with KV/JSON formatting and credential masking."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict

from .config import LogCfg

# npm credential keys: _auth, _authToken, _password, //host/:_authToken, ...
_SECRET_PAIR_PATTERN = re.compile(
    r"(?P<key>(?:\S*:)?_(?:auth|authToken|password))(?P<sep>\s*[=:]\s*)(?P<value>[^\s,;'\"}]+)"
)


def mask_secrets(text: Any) -> Any:
    """Mask credential values of ``key=value`` pairs found in ``text``."""

    if not isinstance(text, str):
        return text
    return _SECRET_PAIR_PATTERN.sub(lambda m: f"{m.group('key')}{m.group('sep')}***", text)


class SecretsFilter(logging.Filter):
    """Filter that masks npm credentials in log messages and context."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - signature mandated by logging
        record.msg = mask_secrets(record.getMessage())
        record.args = ()
        ctx = getattr(record, "ctx", None)
        if isinstance(ctx, dict):
            record.ctx = {
                key: "***" if _SECRET_PAIR_PATTERN.match(f"{key}=x") else value
                for key, value in ctx.items()
            }
        return True


class KVFormatter(logging.Formatter):
    """Formatter that appends key-value context pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        ctx = getattr(record, "ctx", None)
        if ctx and isinstance(ctx, dict):
            kv = " ".join(f"{key}={value}" for key, value in ctx.items())
            if kv:
                return f"{base} | {kv}"
        return base


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, "%Y-%m-%d %H:%M:%S"),
        }
        ctx = getattr(record, "ctx", None)
        if isinstance(ctx, dict):
            payload.update(ctx)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(cfg: LogCfg, *, verbose: bool = False) -> None:
    """Configure root logging handlers according to env settings."""

    level = logging.DEBUG if verbose else getattr(logging, cfg.level.upper(), logging.WARNING)
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(level)

    handler = logging.StreamHandler()
    handler.addFilter(SecretsFilter())

    if cfg.json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            KVFormatter(
                fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    root.addHandler(handler)


def log_kv(logger: logging.Logger, level: int, message: str, **ctx: Any) -> None:
    """Emit log record with structured context in ``ctx``."""

    logger.log(level, message, extra={"ctx": ctx})
