from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gestion_memoire.db.models.enums import SujetStatus
from gestion_memoire.features.memoires.schemas import MemoireOut
from gestion_memoire.features.users.schemas import UserSummaryOut
from gestion_memoire.features.validators import reject_null


# ---------- IN / UPDATE ----------

class SujetCreateIn(BaseModel):
    titre: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    mots_cles: List[str] = Field(default_factory=list)


class SujetUpdateIn(BaseModel):
    titre: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    mots_cles: Optional[List[str]] = None

    @field_validator("titre", "mots_cles")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class SujetStatusIn(BaseModel):
    status: SujetStatus


# ---------- OUT ----------

class SujetMemoireOut(BaseModel):
    id: int
    etudiant: Optional[UserSummaryOut] = None


class SujetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    titre: str
    description: Optional[str] = None
    mots_cles: List[str] = Field(default_factory=list)
    status: SujetStatus
    date_validation: Optional[datetime] = None
    encadreur_id: int
    created_at: datetime
    updated_at: datetime


class SujetDetailOut(SujetOut):
    encadreur: Optional[UserSummaryOut] = None
    memoires: List[SujetMemoireOut] = Field(default_factory=list)


class ReserveOut(BaseModel):
    message: str
    memoire: MemoireOut
