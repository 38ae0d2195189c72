"""Directory-backed storage of named registry profiles."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .errors import (
    DuplicateRegistryError,
    InvalidProfileError,
    InvalidProfileNameError,
    StorageIOError,
    UnknownRegistryError,
)
from .rcfile import Record, Value, read_rc_file, write_rc_file

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_NAME = "default"
PROFILE_SUFFIX = ".ini"
CACHE_SUFFIX = ".cache"

REGISTRY_KEY = "registry"
CACHE_KEY = "cache"
RECOGNIZED_KEYS = frozenset(
    {
        "registry",
        "proxy",
        "https-proxy",
        "username",
        "email",
        "always-auth",
        "strict-ssl",
    }
)

Profile = Record


def validate_profile_name(name: str) -> str:
    if not name or not name.strip():
        raise InvalidProfileNameError("Profile name must not be empty")
    if name.startswith(".") or "/" in name or "\\" in name or "\0" in name:
        raise InvalidProfileNameError(f"Invalid profile name: {name!r}")
    return name


class ProfileStore:
    """One ``<name>.ini`` file per profile inside ``data_dir``."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{validate_profile_name(name)}{PROFILE_SUFFIX}"

    def cache_path(self, name: str) -> Path:
        """Download cache used while ``name`` is the live profile."""

        return self.data_dir / f"{validate_profile_name(name)}{CACHE_SUFFIX}"

    def ensure_initialized(self, default_registry: str) -> bool:
        """Create the storage directory and seed ``default``.

        Returns ``True`` when this was the first run.
        """

        first_run = not self.data_dir.is_dir()
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageIOError(f"Cannot create {self.data_dir}: {exc}") from exc
        if not self.exists(DEFAULT_PROFILE_NAME):
            logger.info("Seeding %s profile with %s", DEFAULT_PROFILE_NAME, default_registry)
            self.save(DEFAULT_PROFILE_NAME, {REGISTRY_KEY: default_registry})
        return first_run

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def list_names(self) -> List[str]:
        if not self.data_dir.is_dir():
            return []
        try:
            entries = list(self.data_dir.iterdir())
        except OSError as exc:
            raise StorageIOError(f"Cannot list {self.data_dir}: {exc}") from exc
        return sorted(
            entry.name[: -len(PROFILE_SUFFIX)]
            for entry in entries
            if entry.name.endswith(PROFILE_SUFFIX)
            and not entry.name.startswith(".")
            and entry.is_file()
        )

    def load(self, name: str) -> Profile:
        path = self.path_for(name)
        if not path.is_file():
            raise UnknownRegistryError(name)
        return read_rc_file(path)

    def load_all(self) -> Dict[str, Profile]:
        return {name: self.load(name) for name in self.list_names()}

    def find_by_registry(self, registry: Value) -> Optional[str]:
        """Return the name of the profile whose ``registry`` equals ``registry``."""

        for name, profile in self.load_all().items():
            if profile.get(REGISTRY_KEY) == registry:
                return name
        return None

    def save(self, name: str, profile: Mapping[str, Value]) -> None:
        """Persist ``profile`` under ``name``, replacing any previous record."""

        path = self.path_for(name)
        record: Profile = {key: value for key, value in profile.items() if key != CACHE_KEY}
        registry = record.get(REGISTRY_KEY)
        if not isinstance(registry, str) or not registry.strip():
            raise InvalidProfileError(f'Profile "{name}" has no registry URL')
        owner = self._registry_owner(registry, exclude=name)
        if owner is not None:
            raise DuplicateRegistryError(name, registry, owner)
        write_rc_file(path, record)
        logger.debug("Saved profile %s (%s)", name, registry)

    def _registry_owner(self, registry: str, *, exclude: str) -> Optional[str]:
        for other in self.list_names():
            if other == exclude:
                continue
            if self.load(other).get(REGISTRY_KEY) == registry:
                return other
        return None


__all__ = [
    "CACHE_KEY",
    "DEFAULT_PROFILE_NAME",
    "Profile",
    "ProfileStore",
    "RECOGNIZED_KEYS",
    "REGISTRY_KEY",
    "validate_profile_name",
]
