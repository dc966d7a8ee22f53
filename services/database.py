from supabase import create_client, Client
from typing import List, Optional
from datetime import datetime
from pydantic import ValidationError
from models.event import Event
from models.recipient import Recipient
from errors import FetchError
import logging

logger = logging.getLogger(__name__)


class DatabaseService:
    """Read-only access to the events and profile tables

    Construct one per run. Pass `client` to reuse an existing (or fake)
    Supabase client; otherwise one is created from settings.
    """

    def __init__(self, client: Optional[Client] = None):
        if client is None:
            from config import settings

            client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
        self.client = client

    # Events
    def get_upcoming_events(self, start: datetime, end: datetime) -> List[Event]:
        """Fetch events whose date lies in [start, end], in store order

        Raises:
            FetchError: query failed or a row could not be parsed
        """
        try:
            response = (
                self.client.table("events")
                .select("id, date, agenda, profile")
                .gte("date", start.isoformat())
                .lte("date", end.isoformat())
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching events between {start} and {end}: {e}")
            raise FetchError(f"Failed to fetch events: {e}") from e

        try:
            return [Event(**row) for row in response.data] if response.data else []
        except (ValidationError, TypeError) as e:
            raise FetchError(f"Malformed event row: {e}") from e

    # Recipients
    def get_recipient(self, profile_id: str) -> Optional[Recipient]:
        """Fetch the profile's delivery token, None if the profile doesn't exist

        Raises:
            FetchError: query failed
        """
        try:
            response = (
                self.client.table("profile")
                .select("fcm_token")
                .eq("id", profile_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching profile {profile_id}: {e}")
            raise FetchError(f"Failed to fetch profile {profile_id}: {e}") from e

        if not response.data:
            return None
        return Recipient(id=profile_id, fcm_token=response.data[0].get("fcm_token"))
