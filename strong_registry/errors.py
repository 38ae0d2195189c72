"""Exception types raised by strong-registry."""

from __future__ import annotations


class RegistryError(RuntimeError):
    """Base class for failures reported to the user."""


class NotFoundError(RegistryError):
    """Raised when a stored record does not exist."""


class UnknownRegistryError(NotFoundError):
    """Raised when no profile is stored under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Unknown registry: "{name}"')
        self.name = name


class AlreadyExistsError(RegistryError):
    """Raised when adding a profile under a name that is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f'Configuration "{name}" already exists. Use --force to overwrite it.'
        )
        self.name = name


class InvalidProfileError(RegistryError):
    """Raised when a profile record cannot be stored as-is."""


class InvalidProfileNameError(InvalidProfileError):
    """Raised for names that cannot be mapped to a profile file."""


class DuplicateRegistryError(InvalidProfileError):
    """Raised when two profiles would share the same registry URL."""

    def __init__(self, name: str, registry: str, owner: str) -> None:
        super().__init__(
            f'Registry {registry} is already used by "{owner}", cannot save "{name}"'
        )
        self.name = name
        self.registry = registry
        self.owner = owner


class StorageIOError(RegistryError):
    """Raised when reading or writing a profile or the live config fails."""


class OrphanedLiveConfigWarning(UserWarning):
    """Live config points at a registry that matches no stored profile."""

    def __init__(self, registry: str) -> None:
        super().__init__(
            f"Discarding npmrc configuration of an unknown registry {registry}"
        )
        self.registry = registry


class BackfillConflictWarning(UserWarning):
    """Live config keys could not be saved back into the active profile."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f'Could not update "{name}" with config from npmrc: {reason}')
        self.name = name


__all__ = [
    "AlreadyExistsError",
    "BackfillConflictWarning",
    "DuplicateRegistryError",
    "InvalidProfileError",
    "InvalidProfileNameError",
    "NotFoundError",
    "OrphanedLiveConfigWarning",
    "RegistryError",
    "StorageIOError",
    "UnknownRegistryError",
]
