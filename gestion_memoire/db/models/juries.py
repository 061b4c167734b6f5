from datetime import datetime

from sqlmodel import Field

from .base import BaseModelDB


class Jury(BaseModelDB, table=True):
    """Jury de soutenance (président, rapporteur, examinateur), un seul par mémoire."""

    memoire_id: int = Field(foreign_key="memoire.id", unique=True, index=True)
    president_id: int = Field(foreign_key="user.id")
    rapporteur_id: int = Field(foreign_key="user.id")
    examinateur_id: int = Field(foreign_key="user.id")

    date_soutenance: datetime = Field(index=True)
    salle: str
