import pytest

from remindermail import cli
from remindermail.reminders import metrics
from remindermail.reminders.exceptions import TransportError
from remindermail.reminders.schemas import ReminderStatus
from tests.fakes import FakeStore, FakeTransport, make_reminder


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("REMINDER_STORE_URL", "https://example.supabase.co")
    monkeypatch.setenv("REMINDER_STORE_KEY", "service-key")
    monkeypatch.setenv("REMINDER_FROM_EMAIL", "reminders@example.com")
    monkeypatch.setenv("REMINDER_SMTP_SERVER", "smtp.example.com")
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli, "load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture
def wiring(env, monkeypatch):
    store = FakeStore([make_reminder()])
    transport = FakeTransport()
    monkeypatch.setattr(cli, "ReminderStoreClient", lambda settings: store)
    monkeypatch.setattr(cli, "EmailService", lambda settings: transport)
    return store, transport


def test_run_sends_due_reminders_and_exits_zero(wiring):
    store, transport = wiring
    assert cli.main(["--now", "2024-01-15T14:05:00Z"]) == cli.EXIT_OK
    assert store.updates == [("r1", ReminderStatus.SENT)]
    assert transport.sent[0]["sender"] == "reminders@example.com"


def test_failed_delivery_still_exits_zero(wiring):
    store, transport = wiring
    transport.failing.add("x@test.com")
    assert cli.main(["--now", "2024-01-15T14:05:00Z"]) == cli.EXIT_OK
    assert store.updates == [("r1", ReminderStatus.FAILED)]


def test_not_due_yet(wiring):
    store, transport = wiring
    assert cli.main(["--now", "2024-01-15T13:00:00Z"]) == cli.EXIT_OK
    assert store.updates == []
    assert transport.sent == []


def test_dry_run_touches_nothing(wiring):
    store, transport = wiring
    assert cli.main(["--dry-run", "--now", "2024-01-15T14:05:00Z"]) == cli.EXIT_OK
    assert store.updates == []
    assert transport.sent == []


def test_fetch_failure_exits_non_zero(wiring):
    store, transport = wiring
    store.fetch_error = TransportError("connection refused")
    assert cli.main([]) == cli.EXIT_FATAL
    assert store.updates == []
    assert transport.sent == []


def test_missing_configuration_exits_non_zero(env, monkeypatch):
    monkeypatch.delenv("REMINDER_STORE_KEY")
    monkeypatch.chdir("/")
    assert cli.main([]) == cli.EXIT_CONFIG


def test_missing_smtp_server_exits_non_zero(env, monkeypatch):
    monkeypatch.delenv("REMINDER_SMTP_SERVER")
    monkeypatch.chdir("/")
    monkeypatch.setattr(cli, "ReminderStoreClient", lambda settings: FakeStore())
    assert cli.main([]) == cli.EXIT_CONFIG


def test_bad_now_is_a_usage_error(env):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--now", "yesterday"])
    assert exc.value.code == 2


def test_metrics_push_failure_keeps_exit_zero(wiring, monkeypatch):
    monkeypatch.setenv("REMINDER_METRICS_ENABLED", "true")
    monkeypatch.setenv("REMINDER_METRICS_PUSHGATEWAY_URL", "http://pushgateway:9091")

    def broken_push(*args, **kwargs):
        raise ValueError("URL can't contain control characters")

    monkeypatch.setattr(metrics, "push_to_gateway", broken_push)
    assert cli.main(["--now", "2024-01-15T14:05:00Z"]) == cli.EXIT_OK
