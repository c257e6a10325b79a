from __future__ import annotations

import importlib
from types import SimpleNamespace

import pytest

from scholax.core.exceptions import ConfigurationError
from scholax.core.settings import Settings


def test_settings_from_module_applies_defaults():
    settings = Settings.from_module(SimpleNamespace(SECRET_KEY="s", DB_CONFIG={"host": "db"}))

    assert settings.secret_key == "s"
    assert settings.db_config == {"host": "db"}
    assert settings.otp_ttl_minutes == 10
    assert settings.session_days == 7
    assert settings.section_max_length == 1
    assert settings.import_max_rows == 100
    assert settings.student_email_domain == "iiitranchi.ac.in"
    assert settings.log_file is None


def test_settings_from_module_reads_overrides():
    module = SimpleNamespace(
        SECRET_KEY="s",
        STUDENT_EMAIL_DOMAIN="College.EDU",
        SECTION_MAX_LENGTH=2,
        EMAIL_TEST_MODE=True,
        LOG_FILE="",
    )

    settings = Settings.from_module(module)

    assert settings.student_email_domain == "college.edu"
    assert settings.section_max_length == 2
    assert settings.email_test_mode is True
    assert settings.log_file is None


def test_missing_secret_key_fails_fast():
    with pytest.raises(ConfigurationError):
        Settings.from_module(SimpleNamespace(DB_CONFIG={}))


def test_blank_secret_key_fails_fast():
    with pytest.raises(ConfigurationError):
        Settings.from_module(SimpleNamespace(SECRET_KEY="  "))


def test_dev_secret_key_requires_debug():
    with pytest.raises(ConfigurationError):
        Settings.from_module(SimpleNamespace(SECRET_KEY="dev-secret-key", DEBUG=False))

    assert Settings.from_module(SimpleNamespace(SECRET_KEY="dev-secret-key", DEBUG=True)).debug is True


def test_production_module_without_secret_env_fails_fast(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    module = importlib.reload(importlib.import_module("config.production"))

    with pytest.raises(ConfigurationError):
        Settings.from_module(module)


def test_upload_limit_is_configurable():
    settings = Settings.from_module(SimpleNamespace(SECRET_KEY="s", IMPORT_MAX_UPLOAD_BYTES=4096))

    assert settings.import_max_upload_bytes == 4096
    assert Settings.from_module(SimpleNamespace(SECRET_KEY="s")).import_max_upload_bytes == 2 * 1024 * 1024
