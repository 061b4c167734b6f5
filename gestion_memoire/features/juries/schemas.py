from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gestion_memoire.features.users.schemas import UserSummaryOut


class JuryCreateIn(BaseModel):
    memoire_id: int
    president_id: int
    rapporteur_id: int
    examinateur_id: int
    date_soutenance: datetime
    salle: str = Field(min_length=1, max_length=120)


class JuryUpdateIn(BaseModel):
    president_id: Optional[int] = None
    rapporteur_id: Optional[int] = None
    examinateur_id: Optional[int] = None
    date_soutenance: Optional[datetime] = None
    salle: Optional[str] = Field(default=None, min_length=1, max_length=120)


class JuryMemoireOut(BaseModel):
    id: int
    titre: str
    etudiant: Optional[UserSummaryOut] = None


class JuryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    memoire_id: int
    president_id: int
    rapporteur_id: int
    examinateur_id: int
    date_soutenance: datetime
    salle: str
    created_at: datetime
    updated_at: datetime


class JuryDetailOut(JuryOut):
    memoire: Optional[JuryMemoireOut] = None
    president: Optional[UserSummaryOut] = None
    rapporteur: Optional[UserSummaryOut] = None
    examinateur: Optional[UserSummaryOut] = None
