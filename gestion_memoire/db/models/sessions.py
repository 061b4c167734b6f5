from datetime import datetime
from typing import Optional

from sqlmodel import Field

from .base import BaseModelDB
from .enums import SessionStatus, SessionType


class SessionEncadrement(BaseModelDB, table=True):
    """Séance de suivi entre un encadreur et un étudiant, signée (visa) par les deux."""

    __tablename__ = "session_encadrement"

    numero: int = Field(default=1)
    date: datetime = Field(index=True)
    duree: int = Field(default=60, gt=0)  # minutes
    type: SessionType = Field(default=SessionType.PRESENTIEL)
    status: SessionStatus = Field(default=SessionStatus.PLANIFIEE, index=True)

    meeting_link: Optional[str] = None
    salle: Optional[str] = None
    rapport: Optional[str] = None
    remarques: Optional[str] = None

    visa_etudiant: bool = Field(default=False)
    visa_encadreur: bool = Field(default=False)

    encadreur_id: int = Field(foreign_key="user.id", index=True)
    etudiant_id: int = Field(foreign_key="user.id", index=True)
