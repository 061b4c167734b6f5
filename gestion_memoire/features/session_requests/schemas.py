import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from gestion_memoire.db.models.enums import SessionRequestStatus, SessionType
from gestion_memoire.features.sessions.schemas import SessionOut
from gestion_memoire.features.users.schemas import UserSummaryOut

HEURE_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class SessionRequestCreateIn(BaseModel):
    date: dt.date
    heure: str = Field(pattern=HEURE_PATTERN, examples=["14:30"])
    type: SessionType


class SessionRequestDecisionIn(BaseModel):
    statut: Literal["ACCEPTEE", "REFUSEE"]
    meeting_link: Optional[str] = None
    salle: Optional[str] = None
    duree: Optional[int] = Field(default=None, gt=0, le=600)


class SessionRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: dt.date
    heure: str
    type: SessionType
    statut: SessionRequestStatus
    etudiant_id: int
    encadreur_id: int
    session_id: Optional[int] = None
    created_at: dt.datetime


class SessionRequestDetailOut(SessionRequestOut):
    etudiant: Optional[UserSummaryOut] = None


class SessionRequestDecisionOut(BaseModel):
    request: SessionRequestOut
    session: Optional[SessionOut] = None
