import logging
import time
from typing import Optional, Protocol, Sequence

from remindermail.utils.timezone import Clock, SystemClock
from . import metrics
from .dispatcher import Dispatcher
from .due import select_due
from .exceptions import TransportError
from .schemas import Reminder, ReminderOutcome, ReminderStatus, RunSummary


logger = logging.getLogger(__name__)


class ReminderStore(Protocol):
    def fetch_scheduled(self) -> Sequence[Reminder]:
        ...

    def update_status(self, reminder_id: str, status: ReminderStatus) -> None:
        ...


class ReminderNotificationService:
    """One pass of fetch -> due filter -> dispatch -> status write.

    Fetch errors propagate to the caller. Everything after the fetch is
    handled per reminder so one bad reminder cannot stop the batch.
    """

    def __init__(
        self,
        store: ReminderStore,
        dispatcher: Optional[Dispatcher],
        clock: Optional[Clock] = None,
        dry_run: bool = False,
    ):
        if dispatcher is None and not dry_run:
            raise ValueError("a dispatcher is required unless dry_run is set")
        self.store = store
        self.dispatcher = dispatcher
        self.clock = clock or SystemClock()
        self.dry_run = dry_run

    def process_scheduled_reminders(self) -> RunSummary:
        started = time.monotonic()
        now = self.clock.now()
        summary = RunSummary()

        reminders = self.store.fetch_scheduled()
        summary.fetched = len(reminders)
        metrics.reminders_fetched_total.inc(summary.fetched)

        due, errors = select_due(reminders, now)
        summary.due = len(due)
        summary.skipped = len(errors)
        metrics.reminders_due_total.inc(summary.due)
        metrics.reminders_skipped_total.inc(summary.skipped)
        logger.info(f"{summary.due} of {summary.fetched} reminder(s) due at {now.isoformat()}")

        for reminder in due:
            if self.dry_run:
                logger.info(f"[dry-run] Would send reminder {reminder.id} to {len(reminder.recipients)} recipient(s)")
                continue
            outcome = self.process_reminder(reminder)
            summary.outcomes.append(outcome)
            if outcome.ok:
                summary.sent += 1
            else:
                summary.failed += 1
            if not self._record_outcome(outcome):
                summary.status_write_errors += 1

        metrics.last_run_duration_seconds.set(time.monotonic() - started)
        metrics.last_run_success_timestamp.set_to_current_time()
        return summary

    def process_reminder(self, reminder: Reminder) -> ReminderOutcome:
        try:
            outcome = self.dispatcher.dispatch(reminder)
        except Exception as e:
            logger.exception(f"Error processing reminder {reminder.id}")
            outcome = ReminderOutcome(reminder_id=reminder.id, error=str(e))

        if outcome.ok:
            metrics.reminders_sent_total.inc()
            logger.info(f"Processed reminder {reminder.id} successfully")
        else:
            metrics.reminders_failed_total.inc()
            logger.warning(f"Processed reminder {reminder.id} with failure")
        return outcome

    def _record_outcome(self, outcome: ReminderOutcome) -> bool:
        # The email is already out; a failed write leaves the reminder
        # scheduled and it will be sent again next run.
        try:
            self.store.update_status(outcome.reminder_id, outcome.status)
        except TransportError as e:
            metrics.status_write_failed_total.inc()
            logger.error(f"Could not record status {outcome.status.value} for reminder {outcome.reminder_id}: {e}")
            return False
        except Exception:
            metrics.status_write_failed_total.inc()
            logger.exception(f"Unexpected error recording status for reminder {outcome.reminder_id}")
            return False
        return True
