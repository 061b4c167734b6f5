import datetime as dt
from typing import Optional

from sqlmodel import Field

from .base import BaseModelDB
from .enums import SessionRequestStatus, SessionType


class SessionRequest(BaseModelDB, table=True):
    """Demande de séance faite par un étudiant à son encadreur."""

    __tablename__ = "session_request"

    date: dt.date
    heure: str  # "HH:MM"
    type: SessionType
    statut: SessionRequestStatus = Field(default=SessionRequestStatus.EN_ATTENTE, index=True)

    etudiant_id: int = Field(foreign_key="user.id", index=True)
    encadreur_id: int = Field(foreign_key="user.id", index=True)
    session_id: Optional[int] = Field(default=None, foreign_key="session_encadrement.id")
