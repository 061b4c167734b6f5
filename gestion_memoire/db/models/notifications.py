from sqlmodel import Field

from .base import BaseModelDB


class Notification(BaseModelDB, table=True):
    user_id: int = Field(foreign_key="user.id", index=True)
    titre: str
    message: str
    lu: bool = Field(default=False, index=True)
