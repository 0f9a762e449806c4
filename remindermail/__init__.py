"""Reminder email notifier.

Polls the hosted reminder store for scheduled reminders, emails the ones that
are due and records the outcome back in the store. Meant to be run from cron
or any other periodic job runner; each invocation is a single pass.
"""

__version__ = "0.1.0"
