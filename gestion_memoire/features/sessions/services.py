import logging
from typing import List, Optional, Sequence

from gestion_memoire.db.models.base import as_naive_utc
from gestion_memoire.db.models.enums import Role, SessionStatus, SessionType
from gestion_memoire.db.models.sessions import SessionEncadrement
from gestion_memoire.db.models.users import User
from gestion_memoire.db.repositories.memoires import MemoireRepository
from gestion_memoire.db.repositories.sessions import SessionRepository
from gestion_memoire.db.repositories.users import UserRepository
from gestion_memoire.features.errors import InvalidTransitionError, PermissionError
from gestion_memoire.features.memoires.services import summary
from gestion_memoire.features.notifications.services import Notifier
from gestion_memoire.features.sessions.schemas import (
    SessionCreateIn,
    SessionDetailOut,
    SessionMemoireOut,
    SessionOut,
    SessionUpdateIn,
    VisaType,
)

logger = logging.getLogger(__name__)


def check_location(type_: SessionType, *, meeting_link: Optional[str], salle: Optional[str]) -> None:
    """Une séance virtuelle a besoin d'un lien, une séance présentielle d'une salle."""
    if type_ == SessionType.VIRTUEL and not meeting_link:
        raise InvalidTransitionError("Le lien de réunion est requis pour une session virtuelle")
    if type_ == SessionType.PRESENTIEL and not salle:
        raise InvalidTransitionError("La salle est requise pour une session en présentiel")


class SessionService:
    """Séances d'encadrement : planifiées par l'encadreur, signées (visa) par les deux participants."""

    def __init__(
        self,
        *,
        repo: SessionRepository,
        memoire_repo: MemoireRepository,
        user_repo: UserRepository,
        notifier: Notifier,
    ):
        self.repo = repo
        self.memoires = memoire_repo
        self.users = user_repo
        self.notifier = notifier

    # -------- Helpers --------

    def _get(self, session_id: int) -> SessionEncadrement:
        seance = self.repo.get(session_id)
        if not seance:
            raise LookupError("Session non trouvée")
        return seance

    @staticmethod
    def _assert_participant(user: User, seance: SessionEncadrement) -> None:
        if user.id not in (seance.encadreur_id, seance.etudiant_id):
            raise PermissionError("Accès non autorisé")

    @staticmethod
    def _assert_owner(user: User, seance: SessionEncadrement) -> None:
        if seance.encadreur_id != user.id:
            raise PermissionError("Vous ne pouvez gérer que vos propres sessions")

    def _commit(self, seance: SessionEncadrement) -> SessionEncadrement:
        self.repo.session.commit()
        self.repo.session.refresh(seance)
        return seance

    def schedule(
        self,
        *,
        encadreur_id: int,
        etudiant_id: int,
        date,
        duree: int,
        type_: SessionType,
        meeting_link: Optional[str],
        salle: Optional[str],
    ) -> SessionEncadrement:
        """Insère une séance PLANIFIEE avec le numéro suivant du binôme (sans commit)."""
        return self.repo.create(
            numero=self.repo.next_numero(encadreur_id=encadreur_id, etudiant_id=etudiant_id),
            date=as_naive_utc(date),
            duree=duree,
            type=type_,
            status=SessionStatus.PLANIFIEE,
            meeting_link=meeting_link,
            salle=salle,
            encadreur_id=encadreur_id,
            etudiant_id=etudiant_id,
            commit=False,
        )

    def details(self, seances: Sequence[SessionEncadrement]) -> List[SessionDetailOut]:
        user_ids = set()
        for s in seances:
            user_ids.update((s.encadreur_id, s.etudiant_id))
        users = self.users.get_many(user_ids)
        memoires = {s.etudiant_id: self.memoires.get_by_etudiant(s.etudiant_id) for s in seances}

        out: List[SessionDetailOut] = []
        for s in seances:
            memoire = memoires.get(s.etudiant_id)
            out.append(
                SessionDetailOut(
                    **SessionOut.model_validate(s).model_dump(),
                    encadreur=summary(users.get(s.encadreur_id)),
                    etudiant=summary(users.get(s.etudiant_id)),
                    memoire=SessionMemoireOut(id=memoire.id, titre=memoire.titre) if memoire else None,
                )
            )
        return out

    # -------- Reads --------

    def list(self, *, user: User, status: Optional[SessionStatus] = None) -> List[SessionDetailOut]:
        scope = {}
        if user.role == Role.ENCADREUR:
            scope["encadreur_id"] = user.id
        elif user.role == Role.ETUDIANT:
            scope["etudiant_id"] = user.id
        return self.details(self.repo.search(status=status, **scope))

    def get(self, session_id: int, *, user: User) -> SessionDetailOut:
        seance = self._get(session_id)
        if user.role != Role.ADMIN:
            self._assert_participant(user, seance)
        return self.details([seance])[0]

    # -------- Writes --------

    def create(self, payload: SessionCreateIn, *, user: User) -> SessionEncadrement:
        if not self.memoires.get_supervised(etudiant_id=payload.etudiant_id, encadreur_id=user.id):
            raise InvalidTransitionError("Vous n'encadrez pas cet étudiant")
        check_location(payload.type, meeting_link=payload.meeting_link, salle=payload.salle)

        seance = self.schedule(
            encadreur_id=user.id,
            etudiant_id=payload.etudiant_id,
            date=payload.date,
            duree=payload.duree,
            type_=payload.type,
            meeting_link=payload.meeting_link,
            salle=payload.salle,
        )
        self.notifier.send(
            payload.etudiant_id,
            "Nouvelle session d'encadrement",
            f"Session n°{seance.numero} planifiée le {seance.date:%d/%m/%Y à %H:%M}",
        )
        logger.info("Session %s planifiée encadreur=%s etudiant=%s", seance.id, user.id, payload.etudiant_id)
        return self._commit(seance)

    def update(self, session_id: int, payload: SessionUpdateIn, *, user: User) -> SessionEncadrement:
        seance = self._get(session_id)
        self._assert_owner(user, seance)

        changes = payload.model_dump(exclude_unset=True)
        if "date" in changes and changes["date"] is not None:
            changes["date"] = as_naive_utc(changes["date"])
        status = changes.get("status")
        status_changed = status is not None and status != seance.status

        self.repo.update(seance, commit=False, **changes)
        if status_changed:
            self.notifier.send(
                seance.etudiant_id,
                "Session mise à jour",
                f"La session n°{seance.numero} est maintenant {status.value}",
            )
            logger.info("Session %s -> %s", seance.id, status.value)
        return self._commit(seance)

    def delete(self, session_id: int, *, user: User) -> None:
        seance = self._get(session_id)
        self._assert_owner(user, seance)
        if seance.status == SessionStatus.EFFECTUEE:
            raise InvalidTransitionError("Impossible de supprimer une session déjà effectuée")

        self.notifier.send(
            seance.etudiant_id,
            "Session annulée",
            f"La session n°{seance.numero} du {seance.date:%d/%m/%Y} a été supprimée",
        )
        self.repo.delete(seance, commit=False)
        self.repo.session.commit()

    def sign_visa(self, session_id: int, visa: VisaType, *, user: User) -> SessionEncadrement:
        if visa.value != user.role.value:
            raise PermissionError("Vous ne pouvez signer que votre propre visa")
        seance = self._get(session_id)
        self._assert_participant(user, seance)
        if seance.status == SessionStatus.ANNULEE:
            raise InvalidTransitionError("Impossible de signer une session annulée")

        field = "visa_encadreur" if visa == VisaType.ENCADREUR else "visa_etudiant"
        if getattr(seance, field):
            raise InvalidTransitionError("Visa déjà signé")

        changes = {field: True}
        other_signed = seance.visa_etudiant if visa == VisaType.ENCADREUR else seance.visa_encadreur
        if other_signed:
            changes["status"] = SessionStatus.EFFECTUEE
        self.repo.update(seance, commit=False, **changes)

        other_id = seance.etudiant_id if visa == VisaType.ENCADREUR else seance.encadreur_id
        self.notifier.send(
            other_id,
            "Visa de session",
            f"{user.prenom} {user.nom} a signé la session n°{seance.numero}",
        )
        if other_signed:
            logger.info("Session %s effectuée (deux visas)", seance.id)
        return self._commit(seance)
