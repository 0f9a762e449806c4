import pytest
from pydantic import ValidationError

from remindermail.core.config import Environment, ReminderSettings, load_settings


BASE = {
    "STORE_URL": "https://example.supabase.co",
    "STORE_KEY": "service-key",
    "FROM_EMAIL": "reminders@example.com",
}


def test_defaults_and_endpoint():
    settings = ReminderSettings(_env_file=None, **BASE)
    assert settings.ENVIRONMENT is Environment.PRODUCTION
    assert settings.store_endpoint == "https://example.supabase.co/rest/v1/reminders"
    assert settings.SMTP_PORT == 587
    assert settings.LOG_LEVEL == "INFO"


def test_rest_path_and_trailing_slashes_are_normalized():
    settings = ReminderSettings(
        _env_file=None, **{**BASE, "STORE_URL": "https://example.supabase.co///"}, STORE_REST_PATH="api/"
    )
    assert settings.store_endpoint == "https://example.supabase.co/api/reminders"


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("REMINDER_STORE_URL", "https://env.supabase.co")
    monkeypatch.setenv("REMINDER_STORE_KEY", "env-key")
    monkeypatch.setenv("REMINDER_FROM_EMAIL", "env@example.com")
    monkeypatch.setenv("REMINDER_SMTP_PORT", "465")
    monkeypatch.setenv("REMINDER_METRICS_ENABLED", "true")
    monkeypatch.setenv("REMINDER_LOG_LEVEL", "debug")

    settings = load_settings(_env_file=None)

    assert settings.STORE_KEY == "env-key"
    assert settings.SMTP_PORT == 465
    assert settings.METRICS_ENABLED is True
    assert settings.LOG_LEVEL == "DEBUG"


def test_missing_required_fields(monkeypatch):
    for name in ("REMINDER_STORE_URL", "REMINDER_STORE_KEY", "REMINDER_FROM_EMAIL"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ValidationError):
        ReminderSettings(_env_file=None)


def test_blank_key_rejected():
    with pytest.raises(ValidationError):
        ReminderSettings(_env_file=None, **{**BASE, "STORE_KEY": "  "})


def test_plain_http_store_rejected_in_production():
    with pytest.raises(ValidationError):
        ReminderSettings(_env_file=None, **{**BASE, "STORE_URL": "http://localhost:54321"})
    settings = ReminderSettings(
        _env_file=None, **{**BASE, "STORE_URL": "http://localhost:54321"}, ENVIRONMENT="development"
    )
    assert settings.is_development


def test_bad_log_level():
    with pytest.raises(ValidationError):
        ReminderSettings(_env_file=None, **BASE, LOG_LEVEL="LOUD")
