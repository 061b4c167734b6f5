from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gestion_memoire.db.models.enums import SessionStatus, SessionType
from gestion_memoire.features.users.schemas import UserSummaryOut
from gestion_memoire.features.validators import reject_null


class VisaType(str, Enum):
    ENCADREUR = "ENCADREUR"
    ETUDIANT = "ETUDIANT"


# ---------- IN / UPDATE ----------

class SessionCreateIn(BaseModel):
    date: datetime
    duree: int = Field(default=60, gt=0, le=600, description="Durée en minutes")
    etudiant_id: int
    type: SessionType = SessionType.PRESENTIEL
    meeting_link: Optional[str] = None
    salle: Optional[str] = None


class SessionUpdateIn(BaseModel):
    date: Optional[datetime] = None
    duree: Optional[int] = Field(default=None, gt=0, le=600)
    status: Optional[SessionStatus] = None
    rapport: Optional[str] = None
    remarques: Optional[str] = None
    meeting_link: Optional[str] = None
    salle: Optional[str] = None

    @field_validator("date", "duree", "status")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class VisaIn(BaseModel):
    type: VisaType


# ---------- OUT ----------

class SessionMemoireOut(BaseModel):
    id: int
    titre: str


class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    numero: int
    date: datetime
    duree: int
    type: SessionType
    status: SessionStatus
    meeting_link: Optional[str] = None
    salle: Optional[str] = None
    rapport: Optional[str] = None
    remarques: Optional[str] = None
    visa_etudiant: bool
    visa_encadreur: bool
    encadreur_id: int
    etudiant_id: int
    created_at: datetime
    updated_at: datetime


class SessionDetailOut(SessionOut):
    encadreur: Optional[UserSummaryOut] = None
    etudiant: Optional[UserSummaryOut] = None
    memoire: Optional[SessionMemoireOut] = None
