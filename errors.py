"""
Error taxonomy for a reminder run.

FetchError and CredentialError abort the whole run. RecipientMissing and
DispatchError are per-event and end up as failed outcomes in the report.
"""


class ReminderError(Exception):
    """Base class for reminder run errors"""


class FetchError(ReminderError):
    """Event or recipient store unreachable, or returned a malformed response"""


class CredentialError(ReminderError):
    """Service-account key could not be exchanged for an access token"""


class RecipientMissing(ReminderError):
    """Profile has no delivery token registered"""

    def __init__(self, profile_id: str):
        self.profile_id = profile_id
        super().__init__(f"no delivery token for profile {profile_id}")


class DispatchError(ReminderError):
    """Push gateway rejected the message or could not be reached"""
