from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gestion_memoire.db.models.enums import PaiementMethode, PaiementStatus
from gestion_memoire.features.users.schemas import UserSummaryOut


class PaiementCreateIn(BaseModel):
    montant: int = Field(gt=0, description="Montant en FCFA")
    reference: str = Field(min_length=1, max_length=120)
    date: datetime
    methode: PaiementMethode = PaiementMethode.ESPECE


class PaiementUpdateIn(BaseModel):
    montant: Optional[int] = Field(default=None, gt=0)
    reference: Optional[str] = Field(default=None, min_length=1, max_length=120)
    date: Optional[datetime] = None
    methode: Optional[PaiementMethode] = None


class PaiementStatusIn(BaseModel):
    status: PaiementStatus


class PaiementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    montant: int
    reference: str
    date: datetime
    methode: PaiementMethode
    status: PaiementStatus
    etudiant_id: int
    created_at: datetime
    updated_at: datetime


class PaiementDetailOut(PaiementOut):
    etudiant: Optional[UserSummaryOut] = None


class PaiementStatsOut(BaseModel):
    TOTAL: int
    VALIDE: int
    EN_ATTENTE: int
    REJETE: int
