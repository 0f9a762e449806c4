"""
Entry point for the reminder notifier.

Runs a single pass and exits. Schedule it from cron, e.g. every minute:

    * * * * * /path/to/venv/bin/remindermail-send >> /var/log/remindermail.log 2>&1
"""

import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from remindermail.core.config import ReminderSettings, load_settings
from remindermail.reminders.client import ReminderStoreClient
from remindermail.reminders.dispatcher import Dispatcher
from remindermail.reminders.exceptions import DecodeError, TransportError
from remindermail.reminders.metrics import push_metrics
from remindermail.reminders.service import ReminderNotificationService
from remindermail.services.email_service import EmailService
from remindermail.utils.timezone import Clock, FixedClock, SystemClock, parse_instant


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remindermail-send",
        description="Email every scheduled reminder that is due and record the outcome",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Normal cron run
  remindermail-send

  # See what would go out, without sending or updating anything
  remindermail-send --dry-run

  # Evaluate due-ness as of a given instant
  remindermail-send --dry-run --now 2024-01-15T14:05:00Z
        """,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and filter only; do not send emails or update statuses",
    )
    parser.add_argument(
        "--now",
        type=parse_instant,
        default=None,
        help="Reference instant (ISO 8601, naive values are UTC); defaults to the current time",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override REMINDER_LOG_LEVEL",
    )
    return parser


def configure_logging(level: str, log_file: Optional[str] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def build_service(
    settings: ReminderSettings,
    store: ReminderStoreClient,
    clock: Clock,
    dry_run: bool = False,
) -> ReminderNotificationService:
    dispatcher = None
    if not dry_run:
        dispatcher = Dispatcher(EmailService(settings), sender=settings.FROM_EMAIL)
    return ReminderNotificationService(store, dispatcher, clock=clock, dry_run=dry_run)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv()

    try:
        settings = load_settings()
    except ValidationError as e:
        configure_logging(args.log_level or "INFO")
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG

    configure_logging(args.log_level or settings.LOG_LEVEL, settings.LOG_FILE)
    clock = FixedClock(args.now) if args.now else SystemClock()

    store = ReminderStoreClient(settings)
    try:
        service = build_service(settings, store, clock, dry_run=args.dry_run)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        store.close()
        return EXIT_CONFIG

    logger.info("🚀 Starting reminder notifier run" + (" (dry run)" if args.dry_run else ""))
    try:
        summary = service.process_scheduled_reminders()
    except (TransportError, DecodeError) as e:
        logger.error(f"❌ Fatal error fetching reminders: {e}")
        return EXIT_FATAL
    except Exception:
        logger.exception("❌ Fatal error processing reminders")
        return EXIT_FATAL
    finally:
        store.close()

    logger.info(f"👋 Run complete: {summary.as_dict()}")
    if settings.METRICS_ENABLED:
        push_metrics(settings.METRICS_PUSHGATEWAY_URL, settings.METRICS_JOB_NAME)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
