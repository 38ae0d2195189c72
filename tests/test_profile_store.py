from __future__ import annotations

import pytest

from strong_registry.errors import (
    DuplicateRegistryError,
    InvalidProfileError,
    InvalidProfileNameError,
    UnknownRegistryError,
)
from strong_registry.profile_store import ProfileStore
from strong_registry.rcfile import read_rc_file

from conftest import NPMJS


def test_first_run_creates_directory_and_default(data_dir) -> None:
    store = ProfileStore(data_dir)
    assert store.ensure_initialized(NPMJS) is True
    assert data_dir.is_dir()
    assert read_rc_file(data_dir / "default.ini") == {"registry": NPMJS}
    assert store.ensure_initialized(NPMJS) is False


def test_bootstrap_does_not_touch_existing_default(store) -> None:
    store.save("default", {"registry": NPMJS, "_auth": "token"})
    store.ensure_initialized("http://other/")
    assert store.load("default") == {"registry": NPMJS, "_auth": "token"}


def test_list_names_sorted_and_ignores_other_files(store, data_dir) -> None:
    store.save("zeta", {"registry": "http://zeta/"})
    store.save("alpha", {"registry": "http://alpha/"})
    (data_dir / "custom.cache").mkdir()
    (data_dir / "notes.txt").write_text("x", encoding="utf-8")
    (data_dir / ".default.ini.tmp").write_text("x", encoding="utf-8")
    assert store.list_names() == ["alpha", "default", "zeta"]


def test_load_unknown_name(store) -> None:
    with pytest.raises(UnknownRegistryError) as exc:
        store.load("unknown")
    assert str(exc.value) == 'Unknown registry: "unknown"'


def test_names_are_not_case_folded(store) -> None:
    store.save("Custom", {"registry": "http://custom/"})
    assert store.exists("Custom")
    assert not store.exists("custom")


def test_save_round_trips_typed_values(store) -> None:
    profile = {
        "registry": "http://custom/registry",
        "proxy": "http://proxy",
        "always-auth": True,
        "strict-ssl": False,
        "_auth": "user:name",
    }
    store.save("custom", profile)
    assert store.load("custom") == profile


def test_save_never_stores_cache(store) -> None:
    store.save("custom", {"registry": "http://custom/", "cache": "/tmp/x"})
    assert "cache" not in store.load("custom")


def test_save_requires_registry(store) -> None:
    with pytest.raises(InvalidProfileError):
        store.save("custom", {"proxy": "http://proxy"})
    with pytest.raises(InvalidProfileError):
        store.save("custom", {"registry": "  "})
    assert not store.exists("custom")


def test_save_rejects_duplicate_registry(store) -> None:
    with pytest.raises(DuplicateRegistryError) as exc:
        store.save("mirror", {"registry": NPMJS})
    assert exc.value.owner == "default"
    assert not store.exists("mirror")


def test_resaving_same_profile_is_not_a_duplicate(store) -> None:
    store.save("default", {"registry": NPMJS, "email": "me@example.com"})
    assert store.load("default")["email"] == "me@example.com"


@pytest.mark.parametrize("name", ["", "../escape", "a/b", ".hidden"])
def test_invalid_names_rejected(store, name) -> None:
    with pytest.raises(InvalidProfileNameError):
        store.save(name, {"registry": "http://r/"})


def test_find_by_registry(store) -> None:
    store.save("custom", {"registry": "http://custom/"})
    assert store.find_by_registry("http://custom/") == "custom"
    assert store.find_by_registry(NPMJS) == "default"
    assert store.find_by_registry("http://nowhere/") is None


def test_cache_paths_are_unique_per_name(store, data_dir) -> None:
    names = ["default", "custom", "Custom", "custom.cache", "custom-2"]
    paths = {store.cache_path(name) for name in names}
    assert len(paths) == len(names)
    assert store.cache_path("custom") == data_dir / "custom.cache"
