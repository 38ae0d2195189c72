"""Centralised environment configuration helpers for strong-registry."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "strong-registry"
DEFAULT_REGISTRY_URL = "https://registry.npmjs.org/"
DEFAULT_PROGRAM_NAME = "sl-registry"


def _getenv(*names: str, default: Optional[str] = None) -> Optional[str]:
    for idx, name in enumerate(names):
        value = os.getenv(name)
        if value:
            if len(names) > 1 and idx != 0:
                logger.warning(
                    "ENV alias %s used for %s; please rename to %s",
                    name,
                    names[0],
                    names[0],
                )
            return value
    return default


def _as_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class PathsCfg:
    data_dir: Path
    npmrc: Path


@dataclass(frozen=True)
class RegistryCfg:
    default_url: str
    program_name: str


@dataclass(frozen=True)
class LogCfg:
    level: str
    json: bool


@dataclass(frozen=True)
class AppConfig:
    paths: PathsCfg
    registry: RegistryCfg
    log: LogCfg


def settings_env_path() -> Path:
    """Return the per-user ``.env`` file consulted for defaults."""

    return Path(user_config_dir(APP_NAME)) / ".env"


@lru_cache()
def load_all() -> AppConfig:
    env_path = settings_env_path()
    if env_path.is_file():
        # real environment variables win over the file
        load_dotenv(env_path, override=False)
        logger.debug("Loaded settings from %s", env_path)

    home = Path.home()
    data_dir = _getenv("STRONG_REGISTRY_HOME", default=str(home / ".strong-registry"))
    npmrc = _getenv("NPM_CONFIG_USERCONFIG", "npm_config_userconfig", default=str(home / ".npmrc"))

    paths_cfg = PathsCfg(
        data_dir=Path(data_dir or "").expanduser(),
        npmrc=Path(npmrc or "").expanduser(),
    )

    registry_cfg = RegistryCfg(
        default_url=(_getenv("STRONG_REGISTRY_DEFAULT_URL", default=DEFAULT_REGISTRY_URL) or DEFAULT_REGISTRY_URL).strip(),
        program_name=(_getenv("CMD", default=DEFAULT_PROGRAM_NAME) or DEFAULT_PROGRAM_NAME).strip(),
    )

    log_cfg = LogCfg(
        level=(_getenv("LOG_LEVEL", default="WARNING") or "WARNING").upper(),
        json=_as_bool(_getenv("LOG_JSON"), False),
    )

    return AppConfig(paths=paths_cfg, registry=registry_cfg, log=log_cfg)
