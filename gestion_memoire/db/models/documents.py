from typing import Optional

from sqlmodel import Field

from .base import BaseModelDB


class Document(BaseModelDB, table=True):
    """Version intermédiaire déposée par l'étudiant, commentable par l'encadreur."""

    memoire_id: int = Field(foreign_key="memoire.id", index=True)
    nom: str
    url: str
    type: str
    commentaire: Optional[str] = None
