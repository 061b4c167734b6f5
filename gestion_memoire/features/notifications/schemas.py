from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    titre: str
    message: str
    lu: bool
    user_id: int
    created_at: datetime


class MarkAllReadOut(BaseModel):
    message: str
    updated: int
