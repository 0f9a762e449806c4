import pytest

from remindermail.core.config import ReminderSettings


@pytest.fixture
def settings():
    return ReminderSettings(
        _env_file=None,
        STORE_URL="https://example.supabase.co/",
        STORE_KEY="service-key",
        FROM_EMAIL="reminders@example.com",
        SMTP_SERVER="smtp.example.com",
        SMTP_PORT=587,
        SMTP_USERNAME="reminders@example.com",
        SMTP_PASSWORD="hunter2",
    )
