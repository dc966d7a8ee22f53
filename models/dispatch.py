from pydantic import BaseModel
from typing import List, Dict, Any


class DispatchOutcome(BaseModel):
    event_id: str
    success: bool
    message: str

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "eventId": self.event_id,
            "message": self.message,
        }


class RunReport(BaseModel):
    processed_events: int
    notifications: List[DispatchOutcome] = []

    @property
    def sent_count(self) -> int:
        return sum(1 for n in self.notifications if n.success)

    @property
    def failed_count(self) -> int:
        return len(self.notifications) - self.sent_count

    def to_response(self) -> Dict[str, Any]:
        """Serialize to the JSON body returned by /run and /trigger"""
        return {
            "message": (
                f"Processed {self.processed_events} events: "
                f"{self.sent_count} notifications sent, {self.failed_count} failed"
            ),
            "processedEvents": self.processed_events,
            "notifications": [n.to_response() for n in self.notifications],
        }
