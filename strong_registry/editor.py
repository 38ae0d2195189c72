"""Interactive creation and editing of registry profiles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from .errors import AlreadyExistsError, InvalidProfileError
from .profile_store import RECOGNIZED_KEYS, REGISTRY_KEY, Profile, ProfileStore, validate_profile_name
from .rcfile import Value
from .sync import LiveConfigResource

logger = logging.getLogger(__name__)

AskFn = Callable[[str], str]


@dataclass
class Prompt:
    """Description of a free-text question."""

    key: str
    question: str
    required: bool = False

    def ask(self, existing: Optional[str], ask: Optional[AskFn] = None) -> str:
        """Request a value, returning the typed answer or ``existing``."""

        ask = ask or input
        default = existing or ""
        while True:
            prompt = f"{self.question}:"
            if default:
                prompt += f" ({default})"
            raw = ask(prompt + " ").strip()

            if raw:
                return raw

            if default:
                return default

            if not self.required:
                return ""

            print("A value is required. Please try again.")


@dataclass
class Confirm:
    """Yes/no question with a boolean default."""

    key: str
    question: str

    def ask(self, existing: Optional[Value], ask: Optional[AskFn] = None) -> bool:
        ask = ask or input
        default = existing if isinstance(existing, bool) else True
        hint = "(Y/n)" if default else "(y/N)"
        while True:
            raw = ask(f"{self.question} {hint} ").strip().lower()
            if not raw:
                return default
            if raw in {"y", "yes"}:
                return True
            if raw in {"n", "no"}:
                return False
            print("Please answer y or n.")


REGISTRY_PROMPT = Prompt(REGISTRY_KEY, "Registry URL", required=True)

FIELD_PROMPTS: tuple[Prompt, ...] = (
    Prompt("proxy", "HTTP proxy"),
    Prompt("https-proxy", "HTTPS proxy"),
    Prompt("username", "User name"),
    Prompt("email", "Email"),
)

FLAG_PROMPTS: tuple[Confirm, ...] = (
    Confirm("always-auth", "Always authenticate?"),
    Confirm("strict-ssl", "Check validity of server SSL certificates?"),
)


def collect_answers(defaults: Mapping[str, Value], ask: Optional[AskFn] = None) -> Dict[str, Value]:
    """Ask every profile question in order, offering ``defaults``."""

    answers: Dict[str, Value] = {}
    for prompt in (REGISTRY_PROMPT,) + FIELD_PROMPTS:
        current = defaults.get(prompt.key)
        answers[prompt.key] = prompt.ask(current if isinstance(current, str) else None, ask)
    for confirm in FLAG_PROMPTS:
        answers[confirm.key] = confirm.ask(defaults.get(confirm.key), ask)
    return answers


def build_profile(answers: Mapping[str, Value], base: Optional[Mapping[str, Value]] = None) -> Profile:
    """Turn prompt answers into a storable profile.

    Passthrough keys of ``base`` (credentials and the like) are kept, empty
    text answers are dropped and both flags are always explicit booleans.
    """

    profile: Profile = {
        key: value for key, value in (base or {}).items() if key not in RECOGNIZED_KEYS
    }
    registry = answers.get(REGISTRY_KEY)
    if not isinstance(registry, str) or not registry.strip():
        raise InvalidProfileError("Registry URL is required")
    profile[REGISTRY_KEY] = registry.strip()
    for prompt in FIELD_PROMPTS:
        value = answers.get(prompt.key)
        if isinstance(value, str) and value.strip():
            profile[prompt.key] = value.strip()
    for confirm in FLAG_PROMPTS:
        value = answers.get(confirm.key)
        profile[confirm.key] = value if isinstance(value, bool) else True
    return profile


def profile_defaults(
    existing: Optional[Mapping[str, Value]],
    live: Mapping[str, Value],
    registry_url: Optional[str] = None,
) -> Dict[str, Value]:
    defaults: Dict[str, Value] = {}
    existing = existing or {}
    registry = registry_url or existing.get(REGISTRY_KEY)
    if registry:
        defaults[REGISTRY_KEY] = registry
    for prompt in FIELD_PROMPTS:
        value = existing.get(prompt.key) or live.get(prompt.key)
        if isinstance(value, str) and value:
            defaults[prompt.key] = value
    for confirm in FLAG_PROMPTS:
        if confirm.key in existing:
            defaults[confirm.key] = existing[confirm.key]
    return defaults


def add_profile(
    store: ProfileStore,
    live: LiveConfigResource,
    name: str,
    registry_url: Optional[str] = None,
    *,
    ask: Optional[AskFn] = None,
    overwrite: bool = False,
) -> Profile:
    """Interactively create (or, with ``overwrite``, edit) profile ``name``.

    Nothing is written until every question has been answered.
    """

    validate_profile_name(name)
    existing = store.load(name) if store.exists(name) else None
    if existing is not None and not overwrite:
        raise AlreadyExistsError(name)

    defaults = profile_defaults(existing, live.read(), registry_url)
    answers = collect_answers(defaults, ask)
    profile = build_profile(answers, base=existing)
    store.save(name, profile)
    logger.info("%s profile %s (%s)", "Updated" if existing else "Created", name, profile[REGISTRY_KEY])
    return profile


__all__ = [
    "Confirm",
    "FIELD_PROMPTS",
    "FLAG_PROMPTS",
    "Prompt",
    "REGISTRY_PROMPT",
    "add_profile",
    "build_profile",
    "collect_answers",
    "profile_defaults",
]
