from datetime import datetime
from models.dispatch import DispatchOutcome
from models.reminder import ReminderWindow
from services.credentials import AccessTokenProvider
from errors import DispatchError
import requests
import logging

logger = logging.getLogger(__name__)

FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"


class NotificationDispatcher:
    """Sends one FCM push message per call, never raising on delivery failure"""

    def __init__(self, project_id: str, token_provider: AccessTokenProvider, timeout: float = 10.0):
        self.project_id = project_id
        self.token_provider = token_provider
        self.timeout = timeout

    @property
    def send_url(self) -> str:
        return FCM_SEND_URL.format(project_id=self.project_id)

    def build_message(
        self,
        token: str,
        title: str,
        body: str,
        event_id: str,
        event_date: datetime,
        window: ReminderWindow,
    ) -> dict:
        """Build the FCM v1 request body (data values must be strings)"""
        return {
            "message": {
                "token": token,
                "notification": {"title": title, "body": body},
                "data": {
                    "eventId": str(event_id),
                    "eventDate": event_date.isoformat(),
                    "notificationType": window.value,
                },
            }
        }

    def send(
        self,
        token: str,
        title: str,
        body: str,
        event_id: str,
        event_date: datetime,
        window: ReminderWindow,
    ) -> DispatchOutcome:
        """Send a push message for one event

        Returns:
            DispatchOutcome, success=False on gateway rejection or transport failure

        Raises:
            CredentialError: the run's access token could not be obtained
        """
        access_token = self.token_provider.get_token()
        message = self.build_message(token, title, body, event_id, event_date, window)

        logger.info(f"Sending {window.value} reminder for event {event_id} to token {token[:12]}...")
        try:
            name = self._post(message, access_token)
        except DispatchError as e:
            logger.warning(f"Reminder for event {event_id} not delivered: {e}")
            return DispatchOutcome(event_id=event_id, success=False, message=str(e))

        return DispatchOutcome(
            event_id=event_id,
            success=True,
            message=f"sent {window.value} reminder" + (f" ({name})" if name else ""),
        )

    def _post(self, message: dict, access_token: str) -> str:
        """POST one message, returning the FCM message name

        Raises:
            DispatchError: transport failure or non-2xx response
        """
        try:
            response = requests.post(
                self.send_url,
                json=message,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {access_token}",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DispatchError(f"push gateway request failed: {e}") from e

        if not response.ok:
            raise DispatchError(f"push gateway returned {response.status_code}: {response.text}")

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        return payload.get("name", "") if isinstance(payload, dict) else ""
