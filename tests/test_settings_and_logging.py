"""
Tests for settings loading and logging setup.
"""
import logging
from logging.handlers import RotatingFileHandler

import pytest
from pydantic import ValidationError

from exp_auditor.core import logging_config
from exp_auditor.core.config import Settings, get_settings


def test_settings_defaults(monkeypatch):
    for name in ("APP_NAME", "LOG_LEVEL", "LOG_FILE", "FIRMWARE_MAX_AGE_MONTHS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.APP_NAME == "EXP Config Auditor"
    assert settings.LOG_LEVEL == "INFO"
    assert settings.LOG_FILE is None
    assert settings.FIRMWARE_MAX_AGE_MONTHS == 6
    assert settings.has_log_file() is False


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("FIRMWARE_MAX_AGE_MONTHS", "12")
    monkeypatch.setenv("LOG_FILE", "  ")
    settings = Settings(_env_file=None)
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.FIRMWARE_MAX_AGE_MONTHS == 12
    assert settings.has_log_file() is False


def test_settings_reject_non_positive_firmware_age(monkeypatch):
    monkeypatch.setenv("FIRMWARE_MAX_AGE_MONTHS", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def _installed_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, "_exp_auditor_handler", False)]


def test_setup_logging_is_idempotent():
    logging_config.setup_logging("WARNING")
    logging_config.setup_logging("DEBUG")
    handlers = _installed_handlers()
    assert len(handlers) == 1
    assert logging.getLogger().level == logging.DEBUG


def test_setup_logging_with_file(tmp_path, monkeypatch):
    log_file = tmp_path / "logs" / "auditor.log"
    monkeypatch.setattr(logging_config.settings, "LOG_FILE", str(log_file))
    logging_config.setup_logging("INFO")
    try:
        file_handlers = [h for h in _installed_handlers() if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == 10 * 1024 * 1024
        assert file_handlers[0].backupCount == 5
        logging.getLogger("exp_auditor.test").info("hello")
        file_handlers[0].flush()
        assert "hello" in log_file.read_text()
    finally:
        monkeypatch.setattr(logging_config.settings, "LOG_FILE", None)
        logging_config.setup_logging("INFO")
    assert not any(isinstance(h, RotatingFileHandler) for h in _installed_handlers())


def test_unknown_level_falls_back_to_info():
    logging_config.setup_logging("chatty")
    assert logging.getLogger().level == logging.INFO
