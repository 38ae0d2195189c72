from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict, Mapping

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from strong_registry.config import load_all
from strong_registry.live_config import LiveConfig
from strong_registry.profile_store import ProfileStore
from strong_registry.rcfile import Value
from strong_registry.sync import SyncEngine

NPMJS = "https://registry.npmjs.org/"

_ENV_VARS = (
    "STRONG_REGISTRY_HOME",
    "STRONG_REGISTRY_DEFAULT_URL",
    "NPM_CONFIG_USERCONFIG",
    "npm_config_userconfig",
    "CMD",
    "LOG_LEVEL",
    "LOG_JSON",
)


class MemoryLiveConfig:
    """In-memory stand-in for the live ``.npmrc``."""

    def __init__(self, record: Mapping[str, Value] | None = None) -> None:
        self.record: Dict[str, Value] = dict(record or {})
        self.writes = 0

    def read(self) -> Dict[str, Value]:
        return dict(self.record)

    def write(self, record: Mapping[str, Value]) -> None:
        self.record = dict(record)
        self.writes += 1


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    load_all.cache_clear()

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield home
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
    load_all.cache_clear()


@pytest.fixture
def data_dir(isolated_env) -> Path:
    return isolated_env / ".strong-registry"


@pytest.fixture
def store(data_dir) -> ProfileStore:
    store = ProfileStore(data_dir)
    store.ensure_initialized(NPMJS)
    return store


@pytest.fixture
def npmrc(isolated_env) -> Path:
    return isolated_env / ".npmrc"


@pytest.fixture
def live(npmrc) -> LiveConfig:
    return LiveConfig(npmrc)


@pytest.fixture
def engine(store, live) -> SyncEngine:
    return SyncEngine(store, live, default_registry=NPMJS)
