import logging

import pytest

from pipeml.errors import ConfigurationError
from pipeml.settings import (
    get_collaborator_modules,
    get_config_dir,
    get_log_level,
    read_config,
)


def test_config_dir_precedence(monkeypatch, tmp_path):
    monkeypatch.setenv("PIPEML_CONFIG_DIR", str(tmp_path / "explicit"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    assert get_config_dir() == tmp_path / "explicit"

    monkeypatch.delenv("PIPEML_CONFIG_DIR")
    assert get_config_dir() == tmp_path / "xdg" / "pipeml"


def test_missing_settings_file_is_empty():
    assert read_config() == {}


def test_settings_file_and_invalid_json(write_settings):
    path = write_settings({"log_level": "info"})
    assert read_config() == {"log_level": "info"}

    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid settings file"):
        read_config()

    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="JSON object"):
        read_config()


def test_collaborator_modules_merge_settings_and_environment(monkeypatch):
    monkeypatch.setenv("PIPEML_COLLABORATORS", "b_mod, c_mod,a_mod")
    assert get_collaborator_modules({"collaborator_modules": ["a_mod", "b_mod"]}) == ["a_mod", "b_mod", "c_mod"]
    assert get_collaborator_modules({"collaborator_modules": "single"}) == ["single", "b_mod", "c_mod", "a_mod"]
    with pytest.raises(ConfigurationError):
        get_collaborator_modules({"collaborator_modules": {"a": 1}})


def test_log_level():
    assert get_log_level({}) == logging.WARNING
    assert get_log_level({"log_level": "debug"}) == logging.DEBUG
    with pytest.raises(ConfigurationError, match="Unknown log_level"):
        get_log_level({"log_level": "chatty"})
