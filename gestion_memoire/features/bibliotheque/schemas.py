from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from gestion_memoire.features.memoires.schemas import MemoireOut
from gestion_memoire.features.users.schemas import UserSummaryOut


class BibliothequeItemOut(BaseModel):
    id: int
    titre: str
    description: Optional[str] = None
    mots_cles: List[str] = Field(default_factory=list)
    date_soutenance: Optional[datetime] = None
    fichier_final: Optional[str] = None
    etudiant: Optional[UserSummaryOut] = None
    encadreur: Optional[UserSummaryOut] = None


class PublishOut(BaseModel):
    message: str
    memoire: MemoireOut
