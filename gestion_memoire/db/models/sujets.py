from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from .base import BaseModelDB
from .enums import SujetStatus


class Sujet(BaseModelDB, table=True):
    """Sujet de mémoire proposé par un encadreur, validé par un administrateur."""

    titre: str = Field(index=True)
    description: Optional[str] = None
    mots_cles: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    status: SujetStatus = Field(default=SujetStatus.EN_ATTENTE, index=True)
    date_validation: Optional[datetime] = None

    encadreur_id: int = Field(foreign_key="user.id", index=True)
