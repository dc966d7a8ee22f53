from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class Event(BaseModel):
    id: str
    date: datetime
    agenda: Optional[str] = None
    profile: str  # id of the owning profile (recipient)

    class Config:
        from_attributes = True
        frozen = True
