from pydantic import BaseModel
from typing import Optional


class Recipient(BaseModel):
    id: str
    fcm_token: Optional[str] = None  # None until the app registers a device

    class Config:
        from_attributes = True
