import logging
from typing import List, Optional, Sequence

from gestion_memoire.db.models.base import utcnow
from gestion_memoire.db.models.enums import Role, SujetStatus
from gestion_memoire.db.models.memoires import Memoire
from gestion_memoire.db.models.sujets import Sujet
from gestion_memoire.db.models.users import User
from gestion_memoire.db.repositories.memoires import MemoireRepository
from gestion_memoire.db.repositories.sujets import SujetRepository
from gestion_memoire.db.repositories.users import UserRepository
from gestion_memoire.features.errors import InvalidTransitionError, PermissionError
from gestion_memoire.features.memoires.services import MemoireService, summary
from gestion_memoire.features.notifications.services import Notifier
from gestion_memoire.features.sujets.schemas import (
    SujetCreateIn,
    SujetDetailOut,
    SujetMemoireOut,
    SujetOut,
    SujetUpdateIn,
)

logger = logging.getLogger(__name__)


class SujetService:
    """
    Sujets proposés par les encadreurs.
    - Encadreur : CRUD sur ses sujets tant qu'aucun mémoire n'y est rattaché.
    - Admin : validation / rejet, CRUD sur tous les sujets.
    - Étudiant : consultation et réservation d'un sujet validé.
    """

    def __init__(
        self,
        *,
        repo: SujetRepository,
        memoire_repo: MemoireRepository,
        user_repo: UserRepository,
        memoire_svc: MemoireService,
        notifier: Notifier,
    ):
        self.repo = repo
        self.memoires = memoire_repo
        self.users = user_repo
        self.memoire_svc = memoire_svc
        self.notifier = notifier

    # -------- Helpers --------

    def _get(self, sujet_id: int) -> Sujet:
        sujet = self.repo.get(sujet_id)
        if not sujet:
            raise LookupError("Sujet non trouvé")
        return sujet

    def _assert_can_edit(self, user: User, sujet: Sujet) -> None:
        if user.role != Role.ADMIN and sujet.encadreur_id != user.id:
            raise PermissionError("Vous ne pouvez modifier que vos propres sujets")
        if self.repo.count_memoires(sujet.id) > 0:
            raise InvalidTransitionError("Ce sujet ne peut pas être modifié car il est déjà attribué")

    def details(self, sujets: Sequence[Sujet]) -> List[SujetDetailOut]:
        memoires = {s.id: self.memoires.list_by_sujet(s.id) for s in sujets}
        user_ids = {s.encadreur_id for s in sujets}
        for rows in memoires.values():
            user_ids.update(m.etudiant_id for m in rows)
        users = self.users.get_many(user_ids)

        return [
            SujetDetailOut(
                **SujetOut.model_validate(s).model_dump(),
                encadreur=summary(users.get(s.encadreur_id)),
                memoires=[
                    SujetMemoireOut(id=m.id, etudiant=summary(users.get(m.etudiant_id)))
                    for m in memoires[s.id]
                ],
            )
            for s in sujets
        ]

    # -------- Reads --------

    def list(
        self,
        *,
        user: User,
        status: Optional[SujetStatus] = None,
        specialite: Optional[str] = None,
    ) -> List[SujetDetailOut]:
        encadreur_id = user.id if user.role == Role.ENCADREUR else None
        return self.details(
            self.repo.search(status=status, specialite=specialite, encadreur_id=encadreur_id)
        )

    def get(self, sujet_id: int) -> SujetDetailOut:
        return self.details([self._get(sujet_id)])[0]

    # -------- Writes --------

    def create(self, payload: SujetCreateIn, *, user: User) -> Sujet:
        sujet = self.repo.create(
            titre=payload.titre,
            description=payload.description,
            mots_cles=list(payload.mots_cles),
            status=SujetStatus.EN_ATTENTE,
            encadreur_id=user.id,
        )
        logger.info("Sujet créé id=%s encadreur=%s", sujet.id, user.id)
        return sujet

    def update(self, sujet_id: int, payload: SujetUpdateIn, *, user: User) -> Sujet:
        sujet = self._get(sujet_id)
        self._assert_can_edit(user, sujet)
        return self.repo.update(sujet, **payload.model_dump(exclude_unset=True))

    def update_status(self, sujet_id: int, status: SujetStatus) -> Sujet:
        sujet = self._get(sujet_id)
        date_validation = utcnow() if status == SujetStatus.VALIDE else None
        self.repo.update(sujet, status=status, date_validation=date_validation, commit=False)

        verdict = {
            SujetStatus.VALIDE: "a été validé",
            SujetStatus.REJETE: "a été rejeté",
            SujetStatus.EN_ATTENTE: "est remis en attente",
        }[status]
        self.notifier.send(sujet.encadreur_id, "Statut du sujet", f"Votre sujet « {sujet.titre} » {verdict}")
        self.repo.session.commit()
        self.repo.session.refresh(sujet)
        logger.info("Sujet %s -> %s", sujet.id, status.value)
        return sujet

    def delete(self, sujet_id: int, *, user: User) -> None:
        sujet = self._get(sujet_id)
        self._assert_can_edit(user, sujet)
        self.repo.delete(sujet)

    def reserve(self, sujet_id: int, *, user: User) -> Memoire:
        """Un étudiant choisit un sujet validé et libre : son mémoire est créé à partir du sujet."""
        sujet = self._get(sujet_id)
        if sujet.status != SujetStatus.VALIDE:
            raise InvalidTransitionError("Ce sujet n'est pas encore validé")
        if self.repo.count_memoires(sujet.id) > 0:
            raise InvalidTransitionError("Ce sujet est déjà attribué")
        if self.memoires.get_by_etudiant(user.id):
            raise InvalidTransitionError("Vous avez déjà un mémoire en cours")

        return self.memoire_svc.open_for_student(
            etudiant=user,
            sujet=sujet,
            titre=sujet.titre,
            description=sujet.description,
            mots_cles=sujet.mots_cles,
        )
