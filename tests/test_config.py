import pytest

from config import CONFIG_ENV_VAR, DEFAULT_SEASON, load_settings
from errors import ConfigError


def write_config(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_load_settings(tmp_path):
    cfg = write_config(tmp_path / "auth.cfg", "# shell settings\ndatabase=nfl.db\ndefault_season=2024\n")
    settings = load_settings(str(cfg))

    assert settings.database == cfg.resolve().parent / "nfl.db"
    assert settings.default_season == 2024
    assert settings.bootstrap_script is None


def test_defaults_and_absolute_paths(tmp_path):
    db_path = tmp_path / "data" / "nfl.db"
    cfg = write_config(tmp_path / "auth.cfg", f"DATABASE={db_path}\nbootstrap_script=nfl.sql\n")
    settings = load_settings(str(cfg))

    assert settings.database == db_path
    assert settings.default_season == DEFAULT_SEASON
    assert settings.bootstrap_script == cfg.resolve().parent / "nfl.sql"


def test_config_path_from_environment(tmp_path, monkeypatch):
    cfg = write_config(tmp_path / "elsewhere.cfg", "database=nfl.db\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(cfg))
    assert load_settings().database.name == "nfl.db"


def test_missing_file(tmp_path, monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ConfigError, match="Could not find config file: auth.cfg"):
        load_settings()


def test_missing_database_key(tmp_path):
    cfg = write_config(tmp_path / "auth.cfg", "username=me\npassword=secret\n")
    with pytest.raises(ConfigError, match="'database' not provided"):
        load_settings(str(cfg))


def test_bad_default_season(tmp_path):
    cfg = write_config(tmp_path / "auth.cfg", "database=nfl.db\ndefault_season=last year\n")
    with pytest.raises(ConfigError, match="default_season"):
        load_settings(str(cfg))
