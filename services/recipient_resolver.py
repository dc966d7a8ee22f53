from typing import Optional
from services.database import DatabaseService
import logging

logger = logging.getLogger(__name__)


class RecipientResolver:
    """Maps a profile id to its current FCM delivery token"""

    def __init__(self, db: DatabaseService):
        self.db = db

    def resolve_token(self, profile_id: str) -> Optional[str]:
        """Return the delivery token, or None when there is nothing to send to

        Both a missing profile and a profile without a token resolve to None.
        Store failures propagate as FetchError.
        """
        recipient = self.db.get_recipient(profile_id)

        if recipient is None:
            logger.info(f"Profile {profile_id} not found")
            return None

        token = (recipient.fcm_token or "").strip()
        if not token:
            logger.info(f"Profile {profile_id} has no delivery token")
            return None

        return token
