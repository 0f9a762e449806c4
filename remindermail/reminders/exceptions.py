from typing import Optional


class ReminderPipelineError(Exception):
    """Base class for errors raised by the reminder pipeline."""


class TransportError(ReminderPipelineError):
    """Network or HTTP failure talking to the reminder store or mail server."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ReminderPipelineError):
    """The reminder store returned a body that is not the expected JSON."""


class RecordError(ReminderPipelineError):
    """A single reminder has unusable fields (date, time, timezone, shape)."""

    def __init__(self, reminder_id: Optional[str], message: str):
        super().__init__(f"reminder {reminder_id}: {message}")
        self.reminder_id = reminder_id


class DeliveryError(ReminderPipelineError):
    """One send attempt to one recipient failed."""

    def __init__(self, recipient: str, message: str):
        super().__init__(f"{recipient}: {message}")
        self.recipient = recipient
