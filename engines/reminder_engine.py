"""
Reminder Engine - one stateless pass over upcoming events

Each run goes Fetching -> Processing -> Responding:
- Fetch events dated within the next 72 hours
- Classify each into a 24h / 72h reminder window, skipping the rest
- Resolve the owner's delivery token and send one push per qualifying event
- Report one outcome per qualifying event

Per-event failures (no token, gateway rejection) are recorded in the report.
Store and credential failures abort the run.
"""

from typing import Callable, List, Optional, Tuple
from datetime import datetime, timedelta, timezone
from pydantic import BaseModel
from supabase import create_client
from models.event import Event
from models.dispatch import DispatchOutcome, RunReport
from models.reminder import ReminderWindow
from processors.window_classifier import WindowClassifier, build_notification
from services.database import DatabaseService
from services.recipient_resolver import RecipientResolver
from services.credentials import AccessTokenProvider
from services.notification_dispatcher import NotificationDispatcher
from errors import CredentialError, FetchError, RecipientMissing
import logging

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RunResponse(BaseModel):
    """HTTP-shaped result of a run: status code plus optional JSON body"""

    status_code: int
    body: Optional[dict] = None


class ReminderEngine:
    """Drives classification, recipient lookup and dispatch for one run"""

    def __init__(
        self,
        db: DatabaseService,
        resolver: RecipientResolver,
        dispatcher: NotificationDispatcher,
        classifier: Optional[WindowClassifier] = None,
        now_fn: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.resolver = resolver
        self.dispatcher = dispatcher
        self.classifier = classifier or WindowClassifier()
        self.now_fn = now_fn

    @classmethod
    def from_settings(cls, settings=None) -> "ReminderEngine":
        """Build an engine with fresh, run-scoped collaborators"""
        if settings is None:
            from config import settings

        db = DatabaseService(
            create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
        )
        token_provider = AccessTokenProvider(
            settings.CLIENT_EMAIL,
            settings.FIREBASE_PRIVATE_KEY,
            token_uri=settings.TOKEN_URI,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
        dispatcher = NotificationDispatcher(
            settings.PROJECT_ID,
            token_provider,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
        return cls(db=db, resolver=RecipientResolver(db), dispatcher=dispatcher)

    # ==================== PUBLIC API ====================

    def fetch_events(self, now: datetime) -> List[Event]:
        """Events dated within [now, now + mid-term window], in store order"""
        end = now + timedelta(hours=self.classifier.mid_term_hours)
        events = self.db.get_upcoming_events(now, end)
        logger.info(f"Fetched {len(events)} events between {now.isoformat()} and {end.isoformat()}")
        return events

    def plan(self, now: Optional[datetime] = None) -> List[Tuple[Event, ReminderWindow]]:
        """Fetch and classify without resolving recipients or sending anything"""
        now = now or self.now_fn()
        return [(event, self.classifier.classify(now, event.date)) for event in self.fetch_events(now)]

    def run(self, now: Optional[datetime] = None) -> RunReport:
        """Run the full pipeline once

        Returns:
            RunReport with one outcome per event in a reminder window

        Raises:
            FetchError: event or recipient store failed
            CredentialError: access token could not be obtained
        """
        now = now or self.now_fn()
        events = self.fetch_events(now)

        notifications: List[DispatchOutcome] = []
        for event in events:
            outcome = self.process_event(event, now)
            if outcome is not None:
                notifications.append(outcome)

        report = RunReport(processed_events=len(events), notifications=notifications)
        logger.info(
            f"Run complete: {report.processed_events} events, "
            f"{report.sent_count} sent, {report.failed_count} failed"
        )
        return report

    def process_event(self, event: Event, now: datetime) -> Optional[DispatchOutcome]:
        """Handle a single event, None if it is outside both reminder windows"""
        window = self.classifier.classify(now, event.date)
        if window == ReminderWindow.NONE:
            logger.debug(f"Event {event.id} not in a reminder window, skipping")
            return None

        token = self.resolver.resolve_token(event.profile)
        if token is None:
            missing = RecipientMissing(event.profile)
            logger.warning(f"Event {event.id}: {missing}")
            return DispatchOutcome(event_id=event.id, success=False, message=str(missing))

        title, body = build_notification(window, event.agenda)

        try:
            return self.dispatcher.send(
                token=token,
                title=title,
                body=body,
                event_id=event.id,
                event_date=event.date,
                window=window,
            )
        except (CredentialError, FetchError):
            raise
        except Exception as e:
            logger.error(f"Unexpected error dispatching event {event.id}: {e}", exc_info=True)
            return DispatchOutcome(event_id=event.id, success=False, message=f"dispatch failed: {e}")


def run_reminders(engine: Optional[ReminderEngine] = None, now: Optional[datetime] = None) -> RunResponse:
    """Run once and map the result to the response contract

    - no event due a reminder (including an empty store): 204, empty body
    - success: 200, {message, processedEvents, notifications}
    - unrecoverable failure: 500, {error}
    """
    try:
        engine = engine or ReminderEngine.from_settings()
        report = engine.run(now=now)
    except Exception as e:
        logger.error(f"Reminder run failed: {e}", exc_info=True)
        return RunResponse(status_code=500, body={"error": str(e)})

    if not report.notifications:
        return RunResponse(status_code=204)

    return RunResponse(status_code=200, body=report.to_response())
