"""
Reminder Scheduler

Runs the ReminderEngine on a fixed interval inside the API process. Each
tick is an independent run: fresh clients, a fresh access token, nothing
carried over. Deployments that trigger /trigger from an external cron
leave ENABLE_SCHEDULER off.
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from engines.reminder_engine import run_reminders
import logging
import sys

logger = logging.getLogger(__name__)

JOB_ID = 'event_reminders'


def run_reminder_job():
    """
    Runs one reminder pass.

    Never raises, so a failed run doesn't take the scheduler down; the next
    tick is the retry.
    """
    logger.info("Starting scheduled reminder run")

    try:
        response = run_reminders()
    except Exception as e:
        logger.error(f"Scheduled reminder run failed: {e}", exc_info=True)
        return {
            'status': 'error',
            'error': str(e)
        }

    if response.status_code == 500:
        return {
            'status': 'error',
            'error': response.body['error']
        }

    body = response.body or {}
    logger.info(f"Scheduled reminder run complete: {body.get('message', 'no reminders due')}")
    return {
        'status': 'success',
        'processed_events': body.get('processedEvents', 0),
        'notifications': len(body.get('notifications', []))
    }


def start_scheduler(interval_minutes: int = 60, run_immediately: bool = False):
    """
    Start the background scheduler.

    Args:
        interval_minutes: Minutes between runs
        run_immediately: If True, run once immediately

    Returns:
        APScheduler BackgroundScheduler instance
    """
    scheduler = BackgroundScheduler()

    scheduler.add_job(
        run_reminder_job,
        trigger=IntervalTrigger(minutes=interval_minutes),
        id=JOB_ID,
        name='Event Reminders (24h / 72h)',
        max_instances=1,
        coalesce=True,
        replace_existing=True
    )

    scheduler.start()
    logger.info(f"Reminder scheduler started (every {interval_minutes} minutes)")

    if run_immediately:
        logger.info("Running reminder job immediately")
        run_reminder_job()

    return scheduler


def stop_scheduler(scheduler):
    """
    Stop the background scheduler.

    Args:
        scheduler: APScheduler BackgroundScheduler instance
    """
    scheduler.shutdown(wait=False)
    logger.info("Reminder scheduler stopped")


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    result = run_reminder_job()

    if result.get('status') == 'error':
        print(f"\nReminder run failed: {result.get('error')}")
        sys.exit(1)

    print(f"\nProcessed events: {result['processed_events']}")
    print(f"Notifications: {result['notifications']}")
