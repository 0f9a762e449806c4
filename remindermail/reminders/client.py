import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from remindermail.core.config import ReminderSettings
from .exceptions import DecodeError, RecordError, TransportError
from .schemas import Reminder, ReminderStatus, StatusUpdate


logger = logging.getLogger(__name__)


class ReminderStoreClient:
    """PostgREST client for the `reminders` table.

    Only the two calls the notifier needs: list scheduled reminders and
    patch a single reminder's status.
    """

    def __init__(self, settings: ReminderSettings, session: Optional[requests.Session] = None):
        self.endpoint = settings.store_endpoint
        self.timeout = settings.HTTP_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.session.headers.update(self._build_headers(settings.STORE_KEY))

    @staticmethod
    def _build_headers(api_key: str) -> Dict[str, str]:
        # Supabase wants the key both as apikey and as bearer token.
        return {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def fetch_scheduled(self) -> List[Reminder]:
        """GET every reminder with status=scheduled.

        Raises TransportError / DecodeError; rows that do not parse are logged
        and dropped.
        """
        params = {"select": "*", "status": f"eq.{ReminderStatus.SCHEDULED.value}"}
        try:
            r = self.session.get(
                self.endpoint,
                params=params,
                headers={"Prefer": "return=representation"},
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise TransportError(f"fetch failed with HTTP {status_code}", status_code=status_code) from e
        except requests.RequestException as e:
            raise TransportError(f"fetch failed: {e}") from e

        try:
            rows = r.json()
        except ValueError as e:
            raise DecodeError(f"reminder store returned invalid JSON: {e}") from e
        if not isinstance(rows, list):
            raise DecodeError(f"expected a JSON array, got {type(rows).__name__}")

        reminders: List[Reminder] = []
        for row in rows:
            try:
                reminder = self._parse_row(row)
            except RecordError as e:
                logger.error(f"Skipping malformed reminder row: {e}")
                continue
            if reminder.status != ReminderStatus.SCHEDULED:
                logger.warning(f"Ignoring reminder {reminder.id} with status {reminder.status.value}")
                continue
            reminders.append(reminder)
        logger.info(f"Fetched {len(reminders)} scheduled reminder(s)")
        return reminders

    @staticmethod
    def _parse_row(row: Any) -> Reminder:
        if not isinstance(row, dict):
            raise RecordError(None, f"expected an object, got {type(row).__name__}")
        try:
            return Reminder.model_validate(row)
        except ValidationError as e:
            rid = row.get("id")
            raise RecordError(str(rid) if rid is not None else None, str(e)) from e

    def update_status(self, reminder_id: str, status: ReminderStatus) -> None:
        """PATCH exactly one reminder's status; raises TransportError."""
        body = StatusUpdate(status=status).model_dump(mode="json")
        try:
            r = self.session.patch(
                self.endpoint,
                params={"id": f"eq.{reminder_id}"},
                json=body,
                headers={"Prefer": "return=minimal"},
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise TransportError(
                f"status update for {reminder_id} failed with HTTP {status_code}",
                status_code=status_code,
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"status update for {reminder_id} failed: {e}") from e
        logger.debug(f"Reminder {reminder_id} marked {status.value}")

    def close(self) -> None:
        self.session.close()
