#!/usr/bin/env python3
"""
Cron wrapper for the reminder notifier

Usage:
    python scripts/send_reminders.py [--dry-run] [--now ISO8601]

Loads `.env` from the project root before running, so it works from any cwd.
"""

import os
import sys

project_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_dir)

from dotenv import load_dotenv

env_file = os.path.join(project_dir, ".env")
if os.path.exists(env_file):
    load_dotenv(env_file)

from remindermail.cli import main

if __name__ == "__main__":
    sys.exit(main())
