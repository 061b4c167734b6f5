import logging
from datetime import datetime, time
from typing import List

from gestion_memoire.core.config import settings
from gestion_memoire.db.models.enums import Role, SessionRequestStatus
from gestion_memoire.db.models.session_requests import SessionRequest
from gestion_memoire.db.models.users import User
from gestion_memoire.db.repositories.memoires import MemoireRepository
from gestion_memoire.db.repositories.session_requests import SessionRequestRepository
from gestion_memoire.db.repositories.users import UserRepository
from gestion_memoire.features.errors import InvalidTransitionError, PermissionError
from gestion_memoire.features.memoires.services import summary
from gestion_memoire.features.notifications.services import Notifier
from gestion_memoire.features.session_requests.schemas import (
    SessionRequestCreateIn,
    SessionRequestDecisionIn,
    SessionRequestDecisionOut,
    SessionRequestDetailOut,
    SessionRequestOut,
)
from gestion_memoire.features.sessions.schemas import SessionOut
from gestion_memoire.features.sessions.services import SessionService, check_location

logger = logging.getLogger(__name__)


class SessionRequestService:
    """
    Demandes de séance : l'étudiant propose une date/heure, son encadreur accepte ou refuse.
    Une demande ne quitte l'état EN_ATTENTE qu'une seule fois.
    """

    def __init__(
        self,
        *,
        repo: SessionRequestRepository,
        memoire_repo: MemoireRepository,
        user_repo: UserRepository,
        session_svc: SessionService,
        notifier: Notifier,
    ):
        self.repo = repo
        self.memoires = memoire_repo
        self.users = user_repo
        self.session_svc = session_svc
        self.notifier = notifier

    def create(self, payload: SessionRequestCreateIn, *, user: User) -> SessionRequest:
        memoire = self.memoires.get_by_etudiant(user.id)
        if not memoire:
            raise InvalidTransitionError("Aucun mémoire trouvé pour cet étudiant")

        request = self.repo.create(
            date=payload.date,
            heure=payload.heure,
            type=payload.type,
            statut=SessionRequestStatus.EN_ATTENTE,
            etudiant_id=user.id,
            encadreur_id=memoire.encadreur_id,
            commit=False,
        )
        self.notifier.send(
            memoire.encadreur_id,
            "Nouvelle demande de session",
            f"{user.prenom} {user.nom} demande une session le {payload.date:%d/%m/%Y} à {payload.heure}",
        )
        self.repo.session.commit()
        self.repo.session.refresh(request)
        return request

    def list(self, *, user: User) -> List[SessionRequestDetailOut]:
        if user.role == Role.ENCADREUR:
            rows = self.repo.search(encadreur_id=user.id)
        elif user.role == Role.ETUDIANT:
            rows = self.repo.search(etudiant_id=user.id)
        else:
            rows = self.repo.search()

        users = self.users.get_many(r.etudiant_id for r in rows)
        return [
            SessionRequestDetailOut(
                **SessionRequestOut.model_validate(r).model_dump(),
                etudiant=summary(users.get(r.etudiant_id)),
            )
            for r in rows
        ]

    def decide(self, request_id: int, payload: SessionRequestDecisionIn, *, user: User) -> SessionRequestDecisionOut:
        request = self.repo.get(request_id)
        if not request:
            raise LookupError("Demande non trouvée")
        if request.encadreur_id != user.id:
            raise PermissionError("Cette demande ne vous est pas adressée")
        if request.statut != SessionRequestStatus.EN_ATTENTE:
            raise InvalidTransitionError("Cette demande a déjà été traitée")

        seance = None
        if payload.statut == SessionRequestStatus.ACCEPTEE.value:
            check_location(request.type, meeting_link=payload.meeting_link, salle=payload.salle)
            hours, minutes = (int(part) for part in request.heure.split(":"))
            seance = self.session_svc.schedule(
                encadreur_id=request.encadreur_id,
                etudiant_id=request.etudiant_id,
                date=datetime.combine(request.date, time(hours, minutes)),
                duree=payload.duree or settings.DEFAULT_SESSION_DURATION,
                type_=request.type,
                meeting_link=payload.meeting_link,
                salle=payload.salle,
            )
            self.repo.update(request, statut=SessionRequestStatus.ACCEPTEE, session_id=seance.id, commit=False)
            message = f"Votre demande du {request.date:%d/%m/%Y} à {request.heure} a été acceptée"
        else:
            self.repo.update(request, statut=SessionRequestStatus.REFUSEE, commit=False)
            message = f"Votre demande du {request.date:%d/%m/%Y} à {request.heure} a été refusée"

        self.notifier.send(request.etudiant_id, "Demande de session", message)
        self.repo.session.commit()
        self.repo.session.refresh(request)
        if seance is not None:
            self.repo.session.refresh(seance)
        logger.info("Demande %s -> %s", request.id, request.statut.value)

        return SessionRequestDecisionOut(
            request=SessionRequestOut.model_validate(request),
            session=SessionOut.model_validate(seance) if seance else None,
        )
