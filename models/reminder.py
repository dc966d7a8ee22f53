from enum import Enum


class ReminderWindow(str, Enum):
    """How far ahead an event lies, as sent to clients in `notificationType`"""

    NEAR_TERM = "24h"
    MID_TERM = "72h"
    NONE = "none"
