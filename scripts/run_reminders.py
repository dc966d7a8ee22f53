#!/usr/bin/env python3
"""
Manual Trigger Script for the reminder dispatcher

Usage:
    # Full run: exchange credentials and send reminders
    python scripts/run_reminders.py

    # Dry run: fetch and classify only, nothing is sent
    python scripts/run_reminders.py --dry-run
"""

import sys
import os
import argparse
import json

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from engines.reminder_engine import ReminderEngine, run_reminders
from models.reminder import ReminderWindow
import logging

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def run_dry():
    """Print which events would get which reminder."""
    print(f"\n{'='*60}")
    print("Dry Run (no notifications sent)")
    print(f"{'='*60}\n")

    engine = ReminderEngine.from_settings()
    plan = engine.plan()

    if not plan:
        print("No events in range")
        return 0

    for event, window in plan:
        label = "skip" if window == ReminderWindow.NONE else window.value
        print(f"  {event.id}  {event.date.isoformat()}  {label:>4}  {event.agenda or '-'}")

    due = sum(1 for _, window in plan if window != ReminderWindow.NONE)
    print(f"\n{due} of {len(plan)} events due for a reminder")
    return 0


def run_full():
    """Run once and print the response."""
    print(f"\n{'='*60}")
    print("Running reminder dispatcher")
    print(f"{'='*60}\n")

    response = run_reminders()

    print(f"Status: {response.status_code}")
    if response.body is not None:
        print(json.dumps(response.body, indent=2))

    return 0 if response.status_code < 500 else 1


def main():
    parser = argparse.ArgumentParser(description="Send 24h / 72h event reminders once")
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Only fetch and classify events, do not send anything'
    )
    args = parser.parse_args()

    try:
        return run_dry() if args.dry_run else run_full()
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
