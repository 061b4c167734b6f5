from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gestion_memoire.db.models.enums import MemoireStatus, SujetStatus, ValidationAction
from gestion_memoire.features.users.schemas import UserSummaryOut
from gestion_memoire.features.validators import reject_null


# ---------- IN / UPDATE ----------

class MemoireCreateIn(BaseModel):
    titre: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    mots_cles: List[str] = Field(default_factory=list)
    sujet_id: int


class MemoireUpdateIn(BaseModel):
    titre: Optional[str] = None
    description: Optional[str] = None
    mots_cles: Optional[List[str]] = None
    date_depot: Optional[datetime] = None
    date_soutenance: Optional[datetime] = None
    status: Optional[MemoireStatus] = None
    progression: Optional[int] = Field(default=None, ge=0, le=100)

    @field_validator("titre", "mots_cles", "status", "progression")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class MemoireStatusIn(BaseModel):
    status: MemoireStatus
    commentaire: Optional[str] = None


class ValidationIn(BaseModel):
    action: ValidationAction
    commentaire: Optional[str] = None


class DocumentCommentIn(BaseModel):
    commentaire: str = Field(min_length=1)


# ---------- OUT ----------

class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    memoire_id: int
    nom: str
    url: str
    type: str
    commentaire: Optional[str] = None
    created_at: datetime


class HistoriqueOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: MemoireStatus
    commentaire: Optional[str] = None
    created_at: datetime


class SujetBriefOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    titre: str
    status: SujetStatus


class JuryBriefOut(BaseModel):
    id: int
    date_soutenance: datetime
    salle: str
    president: Optional[UserSummaryOut] = None
    rapporteur: Optional[UserSummaryOut] = None
    examinateur: Optional[UserSummaryOut] = None


class MemoireOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    titre: str
    description: Optional[str] = None
    mots_cles: List[str] = Field(default_factory=list)
    status: MemoireStatus
    progression: int
    date_depot: Optional[datetime] = None
    date_soutenance: Optional[datetime] = None
    fichier_final: Optional[str] = None
    published: bool
    etudiant_id: int
    encadreur_id: int
    sujet_id: int
    created_at: datetime
    updated_at: datetime


class MemoireDetailOut(MemoireOut):
    etudiant: Optional[UserSummaryOut] = None
    encadreur: Optional[UserSummaryOut] = None
    sujet: Optional[SujetBriefOut] = None
    documents: List[DocumentOut] = Field(default_factory=list)
    historique: List[HistoriqueOut] = Field(default_factory=list)
    jury: Optional[JuryBriefOut] = None


class MemoireActionOut(BaseModel):
    message: str
    memoire: MemoireOut


class DocumentActionOut(BaseModel):
    message: str
    document: DocumentOut
