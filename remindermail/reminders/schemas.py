"""
Schemas for reminder rows and pipeline results
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReminderType(str, Enum):
    APPOINTMENT = "appointment"
    TASK = "task"
    EVENT = "event"
    MEETING = "meeting"
    CALL = "call"


class ReminderStatus(str, Enum):
    SCHEDULED = "scheduled"
    SENT = "sent"
    FAILED = "failed"


class Reminder(BaseModel):
    """A reminder row as returned by the store (`select=*`)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    user_id: Optional[str] = None
    title: str
    type: ReminderType
    # Kept as strings; parsing happens in the due filter so a bad value only
    # excludes this reminder.
    date: str
    time: str
    timezone: str
    recipients: List[str] = Field(default_factory=list)
    status: ReminderStatus = ReminderStatus.SCHEDULED
    created_at: Optional[str] = None


class StatusUpdate(BaseModel):
    """PATCH body for the status writer."""
    status: ReminderStatus


@dataclass(frozen=True)
class DeliveryResult:
    recipient: str
    ok: bool
    error: Optional[str] = None


@dataclass
class ReminderOutcome:
    """Reminder-level result of one dispatch attempt."""

    reminder_id: str
    deliveries: List[DeliveryResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        # No recipients counts as success.
        return self.error is None and all(d.ok for d in self.deliveries)

    @property
    def status(self) -> ReminderStatus:
        return ReminderStatus.SENT if self.ok else ReminderStatus.FAILED


@dataclass
class RunSummary:
    fetched: int = 0
    due: int = 0
    skipped: int = 0
    sent: int = 0
    failed: int = 0
    status_write_errors: int = 0
    outcomes: List[ReminderOutcome] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "fetched": self.fetched,
            "due": self.due,
            "skipped": self.skipped,
            "sent": self.sent,
            "failed": self.failed,
            "status_write_errors": self.status_write_errors,
        }
