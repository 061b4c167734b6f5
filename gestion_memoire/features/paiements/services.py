import logging
from typing import List, Optional, Sequence

from gestion_memoire.db.models.base import as_naive_utc
from gestion_memoire.db.models.enums import PaiementStatus, Role
from gestion_memoire.db.models.paiements import Paiement
from gestion_memoire.db.models.users import User
from gestion_memoire.db.repositories.paiements import PaiementRepository
from gestion_memoire.db.repositories.users import UserRepository
from gestion_memoire.features.errors import PermissionError
from gestion_memoire.features.memoires.services import summary
from gestion_memoire.features.notifications.services import Notifier
from gestion_memoire.features.paiements.schemas import (
    PaiementCreateIn,
    PaiementDetailOut,
    PaiementOut,
    PaiementStatsOut,
    PaiementUpdateIn,
)

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    PaiementStatus.VALIDE: "validé",
    PaiementStatus.REJETE: "rejeté",
    PaiementStatus.EN_ATTENTE: "remis en attente",
}


class PaiementService:
    def __init__(self, *, repo: PaiementRepository, user_repo: UserRepository, notifier: Notifier):
        self.repo = repo
        self.users = user_repo
        self.notifier = notifier

    def _get(self, paiement_id: int) -> Paiement:
        paiement = self.repo.get(paiement_id)
        if not paiement:
            raise LookupError("Paiement non trouvé")
        return paiement

    def _commit(self, paiement: Paiement) -> Paiement:
        self.repo.session.commit()
        self.repo.session.refresh(paiement)
        return paiement

    def details(self, paiements: Sequence[Paiement]) -> List[PaiementDetailOut]:
        users = self.users.get_many(p.etudiant_id for p in paiements)
        return [
            PaiementDetailOut(
                **PaiementOut.model_validate(p).model_dump(),
                etudiant=summary(users.get(p.etudiant_id)),
            )
            for p in paiements
        ]

    # -------- Reads --------

    def list(self, *, user: User, status: Optional[PaiementStatus] = None) -> List[PaiementDetailOut]:
        etudiant_id = user.id if user.role == Role.ETUDIANT else None
        return self.details(self.repo.search(status=status, etudiant_id=etudiant_id))

    def get(self, paiement_id: int, *, user: User) -> PaiementDetailOut:
        paiement = self._get(paiement_id)
        if user.role != Role.ADMIN and paiement.etudiant_id != user.id:
            raise PermissionError("Accès non autorisé")
        return self.details([paiement])[0]

    def stats(self) -> PaiementStatsOut:
        totals = self.repo.sum_by_status()
        return PaiementStatsOut(
            TOTAL=sum(totals.values()),
            VALIDE=totals[PaiementStatus.VALIDE],
            EN_ATTENTE=totals[PaiementStatus.EN_ATTENTE],
            REJETE=totals[PaiementStatus.REJETE],
        )

    # -------- Writes --------

    def create(self, payload: PaiementCreateIn, *, user: User) -> Paiement:
        paiement = self.repo.create(
            montant=payload.montant,
            reference=payload.reference,
            date=as_naive_utc(payload.date),
            methode=payload.methode,
            status=PaiementStatus.EN_ATTENTE,
            etudiant_id=user.id,
            commit=False,
        )
        self.notifier.send_to_admins(
            "Nouveau paiement à valider",
            f"{user.prenom} {user.nom} a soumis un paiement de {payload.montant} FCFA (réf. {payload.reference})",
        )
        logger.info("Paiement soumis etudiant=%s montant=%s", user.id, payload.montant)
        return self._commit(paiement)

    def update(self, paiement_id: int, payload: PaiementUpdateIn) -> Paiement:
        paiement = self._get(paiement_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "date" in changes:
            changes["date"] = as_naive_utc(changes["date"])
        return self.repo.update(paiement, **changes)

    def update_status(self, paiement_id: int, status: PaiementStatus) -> Paiement:
        paiement = self._get(paiement_id)
        self.repo.update(paiement, status=status, commit=False)
        self.notifier.send(
            paiement.etudiant_id,
            "Statut du paiement",
            f"Votre paiement de {paiement.montant} FCFA (réf. {paiement.reference}) a été {STATUS_LABELS[status]}",
        )
        logger.info("Paiement %s -> %s", paiement.id, status.value)
        return self._commit(paiement)

    def delete(self, paiement_id: int) -> None:
        paiement = self._get(paiement_id)
        self.notifier.send(
            paiement.etudiant_id,
            "Paiement supprimé",
            f"Votre paiement de {paiement.montant} FCFA (réf. {paiement.reference}) a été supprimé",
        )
        self.repo.delete(paiement, commit=False)
        self.repo.session.commit()
