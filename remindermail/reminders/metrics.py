import logging
from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, push_to_gateway


logger = logging.getLogger(__name__)

registry = CollectorRegistry()

reminders_fetched_total = Counter(
    "reminders_fetched_total",
    "Scheduled reminders fetched from the store",
    registry=registry,
)

reminders_due_total = Counter(
    "reminders_due_total",
    "Reminders selected as due",
    registry=registry,
)

reminders_skipped_total = Counter(
    "reminders_skipped_total",
    "Reminders skipped because of unusable fields",
    registry=registry,
)

reminders_sent_total = Counter(
    "reminders_sent_total",
    "Reminders delivered to every recipient",
    registry=registry,
)

reminders_failed_total = Counter(
    "reminders_failed_total",
    "Reminders marked failed",
    registry=registry,
)

deliveries_total = Counter(
    "reminder_deliveries_total",
    "Per-recipient email send attempts",
    ["result"],
    registry=registry,
)

status_write_failed_total = Counter(
    "reminder_status_write_failed_total",
    "Status updates that could not be written back",
    registry=registry,
)

last_run_duration_seconds = Gauge(
    "reminder_last_run_duration_seconds",
    "Wall time of the last notifier run",
    registry=registry,
)

last_run_success_timestamp = Gauge(
    "reminder_last_run_success_timestamp_seconds",
    "Unix time the last run completed",
    registry=registry,
)


def push_metrics(gateway_url: Optional[str], job: str) -> bool:
    """Push the registry to a Pushgateway; failures are logged, not raised."""
    if not gateway_url:
        return False
    try:
        push_to_gateway(gateway_url, job=job, registry=registry)
    except Exception as e:
        logger.warning(f"Could not push metrics to {gateway_url}: {e}")
        return False
    return True
