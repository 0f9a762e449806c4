import logging
from datetime import datetime
from typing import Iterable, List, Tuple

from remindermail.utils.timezone import parse_local_datetime, to_utc_aware
from .exceptions import RecordError
from .schemas import Reminder


logger = logging.getLogger(__name__)


def reminder_local_time(reminder: Reminder) -> datetime:
    """The reminder's date+time as an aware datetime in its own timezone."""
    try:
        return parse_local_datetime(reminder.date, reminder.time, reminder.timezone)
    except ValueError as e:
        raise RecordError(reminder.id, str(e)) from e


def reminder_due_at(reminder: Reminder) -> datetime:
    """Due instant in UTC. Raises RecordError for bad date/time/timezone."""
    local_dt = reminder_local_time(reminder)
    try:
        return to_utc_aware(local_dt)
    except (ValueError, OverflowError) as e:
        # Years 1 and 9999 can fall outside datetime's range once shifted to UTC
        raise RecordError(reminder.id, f"cannot convert to UTC: {e}") from e


def is_due(reminder: Reminder, now: datetime) -> bool:
    return reminder_due_at(reminder) <= to_utc_aware(now)


def select_due(reminders: Iterable[Reminder], now: datetime) -> Tuple[List[Reminder], List[RecordError]]:
    """
    Split fetched reminders into the due set.

    `now` is captured once by the caller and used for every reminder. A
    reminder whose fields cannot be interpreted is left out and its error
    returned; it stays scheduled in the store.
    """
    now_utc = to_utc_aware(now)
    due: List[Reminder] = []
    errors: List[RecordError] = []
    for reminder in reminders:
        try:
            due_at = reminder_due_at(reminder)
        except RecordError as e:
            logger.error(f"Error processing reminder {reminder.id}: {e}")
            errors.append(e)
            continue
        if due_at <= now_utc:
            due.append(reminder)
        else:
            logger.debug(f"Reminder {reminder.id} not due until {due_at.isoformat()}")
    return due, errors
