from datetime import datetime, timezone
from typing import Optional, Tuple
import logging

from models.reminder import ReminderWindow

logger = logging.getLogger(__name__)

DEFAULT_AGENDA = "Your event"


class WindowClassifier:
    """Assigns an event to a reminder window based on how far ahead it is"""

    def __init__(self, near_term_hours: float = 24, mid_term_hours: float = 72):
        """Initialize classifier

        Args:
            near_term_hours: Upper bound (inclusive) of the near-term window
            mid_term_hours: Upper bound (inclusive) of the mid-term window
        """
        if not 0 < near_term_hours < mid_term_hours:
            raise ValueError("near_term_hours must be positive and below mid_term_hours")
        self.near_term_hours = near_term_hours
        self.mid_term_hours = mid_term_hours

    def hours_until(self, now: datetime, event_date: datetime) -> float:
        """Hours from `now` until `event_date`, negative if already passed

        Naive datetimes are treated as UTC.
        """
        return (_as_utc(event_date) - _as_utc(now)).total_seconds() / 3600

    def classify(self, now: datetime, event_date: datetime) -> ReminderWindow:
        """Classify an event into a reminder window

        Decision table (first match wins):
        - 0 < hours <= near_term_hours: NEAR_TERM
        - near_term_hours < hours <= mid_term_hours: MID_TERM
        - anything else: NONE
        """
        hours = self.hours_until(now, event_date)

        if 0 < hours <= self.near_term_hours:
            return ReminderWindow.NEAR_TERM
        if self.near_term_hours < hours <= self.mid_term_hours:
            return ReminderWindow.MID_TERM
        return ReminderWindow.NONE


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


_default_classifier = WindowClassifier()


def hours_until(now: datetime, event_date: datetime) -> float:
    return _default_classifier.hours_until(now, event_date)


def classify(now: datetime, event_date: datetime) -> ReminderWindow:
    """Classify with the standard 24h / 72h windows"""
    return _default_classifier.classify(now, event_date)


def build_notification(window: ReminderWindow, agenda: Optional[str]) -> Tuple[str, str]:
    """Build (title, body) for a reminder

    Args:
        window: NEAR_TERM or MID_TERM
        agenda: Event agenda, falls back to "Your event" when empty

    Returns:
        Tuple of notification title and body
    """
    label = agenda or DEFAULT_AGENDA

    if window == ReminderWindow.NEAR_TERM:
        return (
            "Event Tomorrow!",
            f'Reminder: "{label}" is happening in less than 24 hours!',
        )
    if window == ReminderWindow.MID_TERM:
        return (
            "Event in 3 Days",
            f'Upcoming: "{label}" is happening in less than 3 days',
        )
    raise ValueError(f"No notification for reminder window {window.value!r}")
