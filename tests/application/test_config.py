from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from spacelearn.application import config as config_module
from spacelearn.application.config import AppConfig, resolve_config
from spacelearn.domain.constants import INTERVALS


@pytest.fixture(autouse=True)
def no_config_files(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module, "CONFIG_FILES", [tmp_path / "missing.toml"])
    for var in ("SPACELEARN_BACKEND", "SPACELEARN_DATA_FILE", "SPACELEARN_INTERVALS"):
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    config = AppConfig()
    assert config.backend == "json"
    assert config.data_file.name == "entries.json"
    assert config.supabase_table == "revisoes"
    assert config.intervals == list(INTERVALS)
    assert config.policy().max_step == 5


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("SPACELEARN_BACKEND", "memory")
    monkeypatch.setenv("SPACELEARN_INTERVALS", "[2, 4, 8]")
    config = AppConfig()
    assert config.backend == "memory"
    assert config.policy().intervals == (2, 4, 8)


def test_toml_file_is_read(monkeypatch, tmp_path):
    toml = tmp_path / "config.toml"
    toml.write_text(
        'backend = "supabase"\n'
        'supabase_url = "https://demo.supabase.co/"\n'
        'supabase_key = "anon"\n',
        encoding="utf-8",
    )
    monkeypatch.setattr(config_module, "CONFIG_FILES", [toml])

    config = AppConfig()

    assert config.backend == "supabase"
    assert config.supabase_url == "https://demo.supabase.co"
    assert config.supabase_key == "anon"


def test_cli_overrides_beat_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SPACELEARN_BACKEND", "memory")
    config = resolve_config({"backend": "json", "data_file": tmp_path / "e.json", "verbose": None})
    assert config.backend == "json"
    assert config.data_file == (tmp_path / "e.json").resolve()
    assert config.verbose == 1


def test_data_file_expands_user(mock_home):
    config = resolve_config({"data_file": "~/notes/entries.json"})
    assert config.data_file == Path(mock_home, "notes/entries.json").resolve()


@pytest.mark.parametrize("intervals", [[], [0, 1], [5, 2]])
def test_bad_intervals_rejected(intervals):
    with pytest.raises(PydanticValidationError):
        AppConfig(intervals=intervals)


def test_unknown_backend_rejected():
    with pytest.raises(PydanticValidationError):
        AppConfig(backend="sqlite")
