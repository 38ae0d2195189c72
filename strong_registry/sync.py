"""Switching the live npm configuration between stored profiles.

:meth:`SyncEngine.use` is a read-modify-write cycle over two resources:

* the profile store, which holds one record per named registry, and
* the live configuration, which holds exactly one profile plus a derived
  ``cache`` path.

Before the live file is replaced, unrecognized keys written into it by the
user or by npm itself (``_auth``, ``//host/:_authToken`` ...) are folded
back into the profile that was active, so switching away never loses them.
The engine never prints; messages for the user are carried by
:class:`SyncResult`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Tuple

from .errors import BackfillConflictWarning, DuplicateRegistryError, OrphanedLiveConfigWarning
from .logging_setup import log_kv
from .profile_store import CACHE_KEY, RECOGNIZED_KEYS, REGISTRY_KEY, Profile, ProfileStore
from .rcfile import Record, Value, is_valid_key

logger = logging.getLogger(__name__)


class LiveConfigResource(Protocol):
    def read(self) -> Record: ...

    def write(self, record: Mapping[str, Value]) -> None: ...


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a single :meth:`SyncEngine.use` call."""

    name: str
    registry: str
    cache: str
    live: Dict[str, Value]
    previous: Optional[str] = None
    backfilled: Optional[str] = None
    backfilled_keys: Tuple[str, ...] = ()
    warnings: Tuple[UserWarning, ...] = ()


def backfill_candidates(live: Mapping[str, Value], stored: Mapping[str, Value]) -> Dict[str, Value]:
    """Unrecognized live keys whose value is missing from or differs in ``stored``."""

    return {
        key: value
        for key, value in live.items()
        if key != CACHE_KEY
        and key not in RECOGNIZED_KEYS
        and is_valid_key(key)
        and stored.get(key) != value
    }


def compose_live_config(profile: Mapping[str, Value], cache_path: Path) -> Dict[str, Value]:
    """Build the complete live record for ``profile``.

    Keys of the previous live config are never carried over; the result holds
    the profile's own keys and the derived ``cache`` path only.
    """

    live: Dict[str, Value] = {key: value for key, value in profile.items() if key != CACHE_KEY}
    live[CACHE_KEY] = str(cache_path)
    return live


class SyncEngine:
    def __init__(self, store: ProfileStore, live: LiveConfigResource, *, default_registry: str) -> None:
        self.store = store
        self.live = live
        self.default_registry = default_registry

    def live_registry(self, live: Mapping[str, Value]) -> Value:
        # npm falls back to its public registry when the key is absent
        return live.get(REGISTRY_KEY) or self.default_registry

    def resolve_active(self, live: Optional[Mapping[str, Value]] = None) -> Optional[str]:
        """Name of the stored profile the live config currently reflects."""

        if live is None:
            live = self.live.read()
        return self.store.find_by_registry(self.live_registry(live))

    def use(self, name: str) -> SyncResult:
        target = self.store.load(name)
        cache_path = self.store.cache_path(name)
        current_live = self.live.read()
        previous = self.resolve_active(current_live)

        warnings: List[UserWarning] = []
        backfilled_keys: Tuple[str, ...] = ()
        if previous is not None:
            try:
                backfilled_keys = self._backfill(previous, current_live)
            except DuplicateRegistryError as exc:
                conflict = BackfillConflictWarning(previous, str(exc))
                logger.debug("%s", conflict)
                warnings.append(conflict)
            if backfilled_keys and previous == name:
                target = self.store.load(name)
        elif current_live:
            orphan = OrphanedLiveConfigWarning(str(self.live_registry(current_live)))
            logger.debug("%s", orphan)
            warnings.append(orphan)

        new_live = compose_live_config(target, cache_path)
        dropped = sorted(set(current_live) - set(new_live))
        self.live.write(new_live)
        log_kv(
            logger,
            logging.INFO,
            "Live config switched",
            profile=name,
            previous=previous,
            dropped=",".join(dropped) or "-",
        )

        return SyncResult(
            name=name,
            registry=str(target.get(REGISTRY_KEY, "")),
            cache=str(cache_path),
            live=new_live,
            previous=previous,
            backfilled=previous if backfilled_keys else None,
            backfilled_keys=backfilled_keys,
            warnings=tuple(warnings),
        )

    def _backfill(self, name: str, live: Mapping[str, Value]) -> Tuple[str, ...]:
        stored: Profile = self.store.load(name)
        updates = backfill_candidates(live, stored)
        if not updates:
            return ()
        stored.update(updates)
        self.store.save(name, stored)
        logger.info("Updated profile %s from live config: %s", name, ", ".join(sorted(updates)))
        return tuple(sorted(updates))


__all__ = [
    "LiveConfigResource",
    "SyncEngine",
    "SyncResult",
    "backfill_candidates",
    "compose_live_config",
]
