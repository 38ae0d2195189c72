from __future__ import annotations

from pathlib import Path

from strong_registry import config


def test_defaults_follow_home_directory(isolated_env) -> None:
    cfg = config.load_all()
    assert cfg.paths.data_dir == isolated_env / ".strong-registry"
    assert cfg.paths.npmrc == isolated_env / ".npmrc"
    assert cfg.registry.default_url == "https://registry.npmjs.org/"
    assert cfg.registry.program_name == "sl-registry"
    assert cfg.log.level == "WARNING"
    assert cfg.log.json is False


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("STRONG_REGISTRY_HOME", str(tmp_path / "profiles"))
    monkeypatch.setenv("NPM_CONFIG_USERCONFIG", str(tmp_path / "npmrc"))
    monkeypatch.setenv("STRONG_REGISTRY_DEFAULT_URL", " http://mirror/ ")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_JSON", "yes")

    cfg = config.load_all()

    assert cfg.paths.data_dir == tmp_path / "profiles"
    assert cfg.paths.npmrc == tmp_path / "npmrc"
    assert cfg.registry.default_url == "http://mirror/"
    assert cfg.log.level == "DEBUG"
    assert cfg.log.json is True


def test_lowercase_npm_variable_is_accepted_as_alias(monkeypatch, tmp_path, caplog) -> None:
    monkeypatch.setenv("npm_config_userconfig", str(tmp_path / "alias-npmrc"))
    assert config.load_all().paths.npmrc == tmp_path / "alias-npmrc"
    assert "ENV alias npm_config_userconfig" in caplog.text


def test_env_file_supplies_defaults_without_overriding_env(monkeypatch, tmp_path) -> None:
    env_file = config.settings_env_path()
    env_file.parent.mkdir(parents=True)
    env_file.write_text(
        f"STRONG_REGISTRY_HOME={tmp_path / 'from-file'}\nCMD=from-file\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("CMD", "from-env")
    # registered so the value load_dotenv puts into os.environ is undone
    monkeypatch.setenv("STRONG_REGISTRY_HOME", "")
    monkeypatch.delenv("STRONG_REGISTRY_HOME")

    cfg = config.load_all()

    assert cfg.paths.data_dir == tmp_path / "from-file"
    assert cfg.registry.program_name == "from-env"


def test_settings_env_path_is_in_user_config_dir(isolated_env) -> None:
    assert config.settings_env_path() == Path(isolated_env / ".config" / "strong-registry" / ".env")


def test_load_all_is_cached(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("STRONG_REGISTRY_HOME", str(tmp_path / "cached"))
    first = config.load_all()
    monkeypatch.setenv("STRONG_REGISTRY_HOME", str(tmp_path / "ignored"))
    assert config.load_all() is first
    assert first.paths.data_dir == tmp_path / "cached"


def test_as_bool_parsing() -> None:
    assert config._as_bool("on") is True
    assert config._as_bool("0") is False
    assert config._as_bool(None, True) is True
