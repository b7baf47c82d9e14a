"""
Tests for settings loading and the package logger setup.
"""

import logging

import pytest

from paraprim import config
from paraprim.config import PARAPRIM_CONFIG, Settings, load_settings, settings_path
from paraprim.logging_config import setup_logging


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.delenv(PARAPRIM_CONFIG, raising=False)
    monkeypatch.setattr(config, "_user_config_file", lambda: tmp_path / "absent.yaml")
    config.clear_cache()
    yield
    config.clear_cache()


@pytest.fixture
def restore_logger():
    logger = logging.getLogger("paraprim")
    level, handlers = logger.level, list(logger.handlers)
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


def write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_bundled_defaults():
    settings = load_settings()
    assert settings.tolerance == 0.0
    assert settings.warn_unused is True
    assert settings.log_level == "WARNING"
    assert settings.source.endswith("defaults.yaml")


def test_explicit_file_overrides_some_keys(tmp_path):
    path = write(tmp_path / "s.yaml", "tolerance: 0.25\n")
    settings = load_settings(str(path))
    assert settings.tolerance == 0.25
    assert settings.warn_unused is True
    assert settings.source == str(path)


def test_environment_variable(tmp_path, monkeypatch):
    path = write(tmp_path / "env.yaml", "warn_unused: false\nlog_level: debug\n")
    monkeypatch.setenv(PARAPRIM_CONFIG, str(path))
    assert settings_path() == path
    settings = load_settings()
    assert settings.warn_unused is False
    assert settings.log_level == "DEBUG"


def test_settings_are_cached(tmp_path):
    path = write(tmp_path / "s.yaml", "tolerance: 1\n")
    assert load_settings(str(path)) is load_settings(str(path))


def test_missing_files(tmp_path, monkeypatch):
    with pytest.raises(FileNotFoundError):
        load_settings(str(tmp_path / "nope.yaml"))
    monkeypatch.setenv(PARAPRIM_CONFIG, str(tmp_path / "gone.yaml"))
    with pytest.raises(FileNotFoundError):
        settings_path()


@pytest.mark.parametrize("text", [
    "schema_version: '2.0'\n",
    "- a\n- b\n",
    "tolerance: -1\n",
    "tolerance: yes\n",
    "warn_unused: 3\n",
    "log_level: LOUD\n",
])
def test_invalid_settings(tmp_path, text):
    path = write(tmp_path / "bad.yaml", text)
    with pytest.raises(ValueError):
        load_settings(str(path))


def test_empty_file_uses_defaults(tmp_path):
    path = write(tmp_path / "empty.yaml", "")
    assert load_settings(str(path)) == Settings(source=str(path))


def test_setup_logging_console(restore_logger):
    logger = setup_logging("debug")
    assert logger is restore_logger
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    setup_logging(logging.INFO)
    assert len(logger.handlers) == 1


def test_setup_logging_file(tmp_path, restore_logger):
    log_file = tmp_path / "run.log"
    logger = setup_logging(logging.INFO, str(log_file))
    assert len(logger.handlers) == 2
    logging.getLogger("paraprim.structure").info("classified")
    for handler in logger.handlers:
        handler.flush()
    assert "classified" in log_file.read_text(encoding="utf-8")


def test_setup_logging_bad_level(restore_logger):
    with pytest.raises(ValueError):
        setup_logging("chatty")


def test_setup_logging_uses_settings_level(tmp_path, monkeypatch, restore_logger):
    path = write(tmp_path / "quiet.yaml", "log_level: error\n")
    monkeypatch.setenv(PARAPRIM_CONFIG, str(path))
    logger = setup_logging()
    assert logger.level == logging.ERROR
    assert logger.handlers[0].level == logging.ERROR


def test_setup_logging_default_level(restore_logger):
    assert setup_logging().level == logging.WARNING
