# Models module - Pydantic models for store rows and run results
from models.event import Event
from models.recipient import Recipient
from models.reminder import ReminderWindow
from models.dispatch import DispatchOutcome, RunReport

__all__ = [
    "Event",
    "Recipient",
    "ReminderWindow",
    "DispatchOutcome",
    "RunReport",
]
