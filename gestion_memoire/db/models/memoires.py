from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from .base import BaseModelDB
from .enums import MemoireStatus


class Memoire(BaseModelDB, table=True):
    """Mémoire d'un étudiant (un seul par étudiant), rattaché à un sujet et à son encadreur."""

    titre: str = Field(index=True)
    description: Optional[str] = None
    mots_cles: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    status: MemoireStatus = Field(default=MemoireStatus.EN_COURS, index=True)
    progression: int = Field(default=0, ge=0, le=100)

    date_depot: Optional[datetime] = None
    date_soutenance: Optional[datetime] = Field(default=None, index=True)
    fichier_final: Optional[str] = None
    published: bool = Field(default=False, index=True)

    etudiant_id: int = Field(foreign_key="user.id", unique=True, index=True)
    encadreur_id: int = Field(foreign_key="user.id", index=True)
    sujet_id: int = Field(foreign_key="sujet.id", index=True)


class HistoriqueMemoireStatus(BaseModelDB, table=True):
    """Trace de chaque changement de statut d'un mémoire."""

    memoire_id: int = Field(foreign_key="memoire.id", index=True)
    status: MemoireStatus
    commentaire: Optional[str] = None
