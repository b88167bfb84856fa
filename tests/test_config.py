from __future__ import annotations

import pytest
from pydantic import ValidationError

from hsds_client import HsdsSettings, __version__
from hsds_client.core.config import get_user_env_file, write_user_env_vars


def test_defaults():
    settings = HsdsSettings()

    assert settings.endpoint == "http://localhost:5101"
    assert settings.http_timeout_seconds == 30.0
    assert settings.user_agent == f"hsds-client/{__version__}"
    assert settings.log_level == "WARNING"
    assert settings.token is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HSDS_ENDPOINT", "https://hsds.example.org")
    monkeypatch.setenv("HSDS_USERNAME", "alice")
    monkeypatch.setenv("HSDS_LOG_LEVEL", "debug")

    settings = HsdsSettings()

    assert settings.endpoint == "https://hsds.example.org"
    assert settings.username == "alice"
    assert settings.log_level == "DEBUG"


def test_project_env_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("HSDS_TOKEN=from-dotenv\n", encoding="utf-8")
    assert HsdsSettings().token == "from-dotenv"


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        HsdsSettings(log_level="LOUD")
    with pytest.raises(ValidationError):
        HsdsSettings(http_timeout_seconds=0)


def test_write_user_env_vars_merges(tmp_path):
    path = write_user_env_vars({"HSDS_ENDPOINT": "http://a:5101", "HSDS_USERNAME": "bob"})
    assert path == get_user_env_file()
    assert path.is_relative_to(tmp_path)

    write_user_env_vars({"HSDS_USERNAME": "carol", "HSDS_PASSWORD": None})

    lines = path.read_text(encoding="utf-8").splitlines()
    assert "HSDS_ENDPOINT=http://a:5101" in lines
    assert "HSDS_USERNAME=carol" in lines
    assert not any(line.startswith("HSDS_PASSWORD") for line in lines)


def test_write_user_env_vars_keeps_other_lines():
    path = get_user_env_file()
    path.parent.mkdir(parents=True)
    path.write_text("# mine\nOTHER=1\nHSDS_USERNAME=bob\n", encoding="utf-8")

    write_user_env_vars({"HSDS_USERNAME": "carol", "HSDS_ENDPOINT": "http://b:5101"})

    assert path.read_text(encoding="utf-8").splitlines() == [
        "# mine",
        "OTHER=1",
        "HSDS_USERNAME=carol",
        "HSDS_ENDPOINT=http://b:5101",
    ]
