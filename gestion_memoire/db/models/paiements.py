from datetime import datetime

from sqlmodel import Field

from .base import BaseModelDB
from .enums import PaiementMethode, PaiementStatus


class Paiement(BaseModelDB, table=True):
    """Paiement des frais (montant en FCFA) soumis par un étudiant, validé par un admin."""

    montant: int = Field(gt=0)
    reference: str = Field(index=True)
    date: datetime = Field(index=True)
    methode: PaiementMethode = Field(default=PaiementMethode.ESPECE)
    status: PaiementStatus = Field(default=PaiementStatus.EN_ATTENTE, index=True)

    etudiant_id: int = Field(foreign_key="user.id", index=True)
