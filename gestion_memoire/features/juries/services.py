import logging
from typing import List, Sequence

from gestion_memoire.db.models.base import as_naive_utc
from gestion_memoire.db.models.enums import MemoireStatus, Role
from gestion_memoire.db.models.juries import Jury
from gestion_memoire.db.repositories.juries import JuryRepository
from gestion_memoire.db.repositories.memoires import MemoireRepository
from gestion_memoire.db.repositories.users import UserRepository
from gestion_memoire.features.errors import ConflictError, InvalidTransitionError
from gestion_memoire.features.juries.schemas import (
    JuryCreateIn,
    JuryDetailOut,
    JuryMemoireOut,
    JuryOut,
    JuryUpdateIn,
)
from gestion_memoire.features.memoires.services import MemoireService, summary
from gestion_memoire.features.notifications.services import Notifier

logger = logging.getLogger(__name__)


class JuryService:
    """
    Jurys de soutenance (admin).
    Assigner un jury fait passer le mémoire VALIDE à SOUTENU ; le supprimer le ramène à VALIDE.
    """

    def __init__(
        self,
        *,
        repo: JuryRepository,
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

    def _get(self, jury_id: int) -> Jury:
        jury = self.repo.get(jury_id)
        if not jury:
            raise LookupError("Jury non trouvé")
        return jury

    def _check_members(self, president_id: int, rapporteur_id: int, examinateur_id: int) -> None:
        ids = [president_id, rapporteur_id, examinateur_id]
        if len(set(ids)) != 3:
            raise InvalidTransitionError("Les membres du jury doivent être trois personnes distinctes")
        members = self.users.get_many(ids)
        if any(i not in members or members[i].role != Role.ENCADREUR for i in ids):
            raise InvalidTransitionError("Les membres du jury doivent être des encadreurs")

    def _commit(self, jury: Jury) -> Jury:
        self.repo.session.commit()
        self.repo.session.refresh(jury)
        return jury

    def details(self, juries: Sequence[Jury]) -> List[JuryDetailOut]:
        memoires = {j.memoire_id: self.memoires.get(j.memoire_id) for j in juries}
        user_ids = set()
        for j in juries:
            user_ids.update((j.president_id, j.rapporteur_id, j.examinateur_id))
        user_ids.update(m.etudiant_id for m in memoires.values() if m)
        users = self.users.get_many(user_ids)

        out: List[JuryDetailOut] = []
        for j in juries:
            memoire = memoires.get(j.memoire_id)
            out.append(
                JuryDetailOut(
                    **JuryOut.model_validate(j).model_dump(),
                    memoire=JuryMemoireOut(
                        id=memoire.id,
                        titre=memoire.titre,
                        etudiant=summary(users.get(memoire.etudiant_id)),
                    ) if memoire else None,
                    president=summary(users.get(j.president_id)),
                    rapporteur=summary(users.get(j.rapporteur_id)),
                    examinateur=summary(users.get(j.examinateur_id)),
                )
            )
        return out

    # -------- Reads --------

    def list(self) -> List[JuryDetailOut]:
        return self.details(self.repo.list_all())

    def get(self, jury_id: int) -> JuryDetailOut:
        return self.details([self._get(jury_id)])[0]

    # -------- Writes --------

    def create(self, payload: JuryCreateIn) -> Jury:
        if self.repo.get_by_memoire(payload.memoire_id):
            raise ConflictError("Un jury existe déjà pour ce mémoire")
        memoire = self.memoires.get(payload.memoire_id)
        if not memoire or memoire.status != MemoireStatus.VALIDE:
            raise InvalidTransitionError("Le mémoire doit être validé avant d'assigner un jury")
        self._check_members(payload.president_id, payload.rapporteur_id, payload.examinateur_id)

        date_soutenance = as_naive_utc(payload.date_soutenance)
        jury = self.repo.create(
            memoire_id=memoire.id,
            president_id=payload.president_id,
            rapporteur_id=payload.rapporteur_id,
            examinateur_id=payload.examinateur_id,
            date_soutenance=date_soutenance,
            salle=payload.salle,
            commit=False,
        )
        self.memoire_svc.change_status(
            memoire,
            MemoireStatus.SOUTENU,
            commentaire=f"Jury assigné, soutenance le {date_soutenance:%d/%m/%Y à %H:%M} en salle {payload.salle}",
            date_soutenance=date_soutenance,
        )
        self.notifier.send(
            memoire.etudiant_id,
            "Jury assigné",
            f"Votre soutenance est prévue le {date_soutenance:%d/%m/%Y à %H:%M} en salle {payload.salle}",
        )
        logger.info("Jury assigné memoire=%s", memoire.id)
        return self._commit(jury)

    def update(self, jury_id: int, payload: JuryUpdateIn) -> Jury:
        jury = self._get(jury_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        self._check_members(
            changes.get("president_id", jury.president_id),
            changes.get("rapporteur_id", jury.rapporteur_id),
            changes.get("examinateur_id", jury.examinateur_id),
        )
        if "date_soutenance" in changes:
            changes["date_soutenance"] = as_naive_utc(changes["date_soutenance"])

        self.repo.update(jury, commit=False, **changes)
        memoire = self.memoires.get(jury.memoire_id)
        if memoire:
            if "date_soutenance" in changes:
                self.memoires.update(memoire, date_soutenance=jury.date_soutenance, commit=False)
            self.notifier.send(
                memoire.etudiant_id,
                "Jury modifié",
                f"Votre soutenance est prévue le {jury.date_soutenance:%d/%m/%Y à %H:%M} en salle {jury.salle}",
            )
        return self._commit(jury)

    def delete(self, jury_id: int) -> None:
        jury = self._get(jury_id)
        memoire = self.memoires.get(jury.memoire_id)
        if memoire:
            self.memoire_svc.change_status(
                memoire,
                MemoireStatus.VALIDE,
                commentaire="Jury supprimé",
                date_soutenance=None,
            )
            self.notifier.send(
                memoire.etudiant_id,
                "Soutenance annulée",
                "Le jury de votre soutenance a été supprimé",
            )
        self.repo.delete(jury, commit=False)
        self.repo.session.commit()
        logger.info("Jury %s supprimé", jury_id)
