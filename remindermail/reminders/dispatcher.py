import html
import logging
from typing import List, Tuple

from remindermail.services.email_service import MailTransport
from remindermail.utils.timezone import format_clock_time, format_long_date
from .due import reminder_local_time
from .exceptions import DeliveryError
from .metrics import deliveries_total
from .schemas import DeliveryResult, Reminder, ReminderOutcome


logger = logging.getLogger(__name__)


def build_subject(reminder: Reminder) -> str:
    return f"Reminder: {reminder.title}"


def build_html_body(reminder: Reminder) -> str:
    """HTML body showing the reminder in the recipient-facing local time."""
    local_dt = reminder_local_time(reminder)
    title = html.escape(reminder.title)
    return f"""
        <html>
        <body>
            <h2>{title}</h2>
            <p><strong>Type:</strong> {html.escape(reminder.type.value)}</p>
            <p><strong>Date:</strong> {format_long_date(local_dt)}</p>
            <p><strong>Time:</strong> {format_clock_time(local_dt)} {html.escape(reminder.timezone)}</p>
        </body>
        </html>
        """


def render_message(reminder: Reminder) -> Tuple[str, str]:
    return build_subject(reminder), build_html_body(reminder)


class Dispatcher:
    """Sends one reminder to each of its recipients, in order, once."""

    def __init__(self, transport: MailTransport, sender: str):
        self.transport = transport
        self.sender = sender

    def dispatch(self, reminder: Reminder) -> ReminderOutcome:
        outcome = ReminderOutcome(reminder_id=reminder.id)
        try:
            subject, body = render_message(reminder)
        except Exception as e:
            logger.error(f"Error processing reminder {reminder.id}: {e}")
            outcome.error = f"render failed: {e}"
            return outcome

        outcome.deliveries = self._send_all(reminder.recipients, subject, body)
        return outcome

    def _send_all(self, recipients: List[str], subject: str, body: str) -> List[DeliveryResult]:
        results: List[DeliveryResult] = []
        for recipient in recipients:
            result = self._send_one(recipient, subject, body)
            deliveries_total.labels(result="ok" if result.ok else "failed").inc()
            results.append(result)
        return results

    def _send_one(self, recipient: str, subject: str, body: str) -> DeliveryResult:
        try:
            if not self.transport.send(recipient, subject, body, self.sender):
                raise DeliveryError(recipient, "transport reported failure")
        except DeliveryError as e:
            logger.warning(f"Failed to send email to: {recipient} ({e})")
            return DeliveryResult(recipient=recipient, ok=False, error=str(e))
        except Exception as e:
            # Any transport bug counts against this recipient only
            logger.exception(f"Unexpected error sending to {recipient}")
            return DeliveryResult(recipient=recipient, ok=False, error=f"unexpected error: {e}")
        return DeliveryResult(recipient=recipient, ok=True)
