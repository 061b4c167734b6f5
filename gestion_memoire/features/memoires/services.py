"""
➡️ But : Cycle de vie d'un mémoire.

EN_COURS → SOUMIS → EN_REVISION … → (dépôt final) SOUMIS_FINAL
  → (encadreur) VALIDE_ENCADREUR → (admin) VALIDE → (jury assigné) SOUTENU

Chaque changement de statut écrit une ligne HistoriqueMemoireStatus et notifie
les personnes concernées, dans la même transaction.
"""

import logging
from typing import Dict, List, Optional, Sequence

from gestion_memoire.db.models.base import as_naive_utc, utcnow
from gestion_memoire.db.models.documents import Document
from gestion_memoire.db.models.enums import MemoireStatus, Role, ValidationAction
from gestion_memoire.db.models.memoires import Memoire
from gestion_memoire.db.models.sujets import Sujet
from gestion_memoire.db.models.users import User
from gestion_memoire.db.repositories.documents import DocumentRepository
from gestion_memoire.db.repositories.juries import JuryRepository
from gestion_memoire.db.repositories.memoires import HistoriqueRepository, MemoireRepository
from gestion_memoire.db.repositories.sujets import SujetRepository
from gestion_memoire.db.repositories.users import UserRepository
from gestion_memoire.features.errors import ConflictError, InvalidTransitionError, PermissionError
from gestion_memoire.features.memoires.schemas import (
    DocumentOut,
    HistoriqueOut,
    JuryBriefOut,
    MemoireCreateIn,
    MemoireDetailOut,
    MemoireOut,
    MemoireStatusIn,
    MemoireUpdateIn,
    SujetBriefOut,
    ValidationIn,
)
from gestion_memoire.features.notifications.services import Notifier
from gestion_memoire.features.users.schemas import UserSummaryOut
from gestion_memoire.utils.uploads import save_upload

logger = logging.getLogger(__name__)


PROGRESSION_BY_STATUS: Dict[MemoireStatus, int] = {
    MemoireStatus.SOUMIS_FINAL: 75,
    MemoireStatus.VALIDE_ENCADREUR: 85,
    MemoireStatus.VALIDE: 100,
    MemoireStatus.SOUTENU: 100,
    MemoireStatus.REJETE: 0,
}

ENCADREUR_STATUSES = {MemoireStatus.EN_REVISION, MemoireStatus.VALIDE, MemoireStatus.REJETE}
FINAL_DEPOSIT_FROM = {MemoireStatus.EN_COURS, MemoireStatus.SOUMIS, MemoireStatus.EN_REVISION}
LOCKED_STATUSES = {MemoireStatus.VALIDE, MemoireStatus.SOUTENU}


def progression_for(status: MemoireStatus, current: int) -> int:
    return PROGRESSION_BY_STATUS.get(status, current)


def summary(user: Optional[User]) -> Optional[UserSummaryOut]:
    return UserSummaryOut.model_validate(user) if user else None


class MemoireService:
    def __init__(
        self,
        *,
        repo: MemoireRepository,
        historique_repo: HistoriqueRepository,
        document_repo: DocumentRepository,
        sujet_repo: SujetRepository,
        user_repo: UserRepository,
        jury_repo: JuryRepository,
        notifier: Notifier,
    ):
        self.repo = repo
        self.historique = historique_repo
        self.documents = document_repo
        self.sujets = sujet_repo
        self.users = user_repo
        self.juries = jury_repo
        self.notifier = notifier

    # -------- Helpers --------

    def _commit(self, memoire: Memoire) -> Memoire:
        self.repo.session.commit()
        self.repo.session.refresh(memoire)
        return memoire

    def _get(self, memoire_id: int) -> Memoire:
        memoire = self.repo.get(memoire_id)
        if not memoire:
            raise LookupError("Mémoire non trouvé")
        return memoire

    @staticmethod
    def _assert_can_view(user: User, memoire: Memoire) -> None:
        if user.role == Role.ADMIN:
            return
        if user.id in (memoire.etudiant_id, memoire.encadreur_id):
            return
        raise PermissionError("Accès non autorisé")

    @staticmethod
    def _assert_owner(user: User, memoire: Memoire) -> None:
        if memoire.etudiant_id != user.id:
            raise PermissionError("Ce mémoire ne vous appartient pas")

    @staticmethod
    def _assert_supervisor(user: User, memoire: Memoire) -> None:
        if memoire.encadreur_id != user.id:
            raise PermissionError("Vous n'encadrez pas ce mémoire")

    def change_status(
        self,
        memoire: Memoire,
        status: MemoireStatus,
        *,
        commentaire: Optional[str] = None,
        **changes,
    ) -> Memoire:
        """Applique un statut (+ progression) et écrit l'historique, sans commit."""
        changes.setdefault("progression", progression_for(status, memoire.progression))
        previous = memoire.status
        self.repo.update(memoire, status=status, commit=False, **changes)
        self.historique.create(
            memoire_id=memoire.id, status=status, commentaire=commentaire, commit=False
        )
        logger.info("Mémoire %s : %s -> %s", memoire.id, previous.value, status.value)
        return memoire

    def _store(self, content: bytes, filename: Optional[str]):
        try:
            return save_upload(content, original_name=filename)
        except ValueError as exc:
            raise InvalidTransitionError(str(exc))

    # -------- Presentation --------

    def detail(self, memoire: Memoire) -> MemoireDetailOut:
        return self.details([memoire])[0]

    def details(self, memoires: Sequence[Memoire]) -> List[MemoireDetailOut]:
        juries = {m.id: self.juries.get_by_memoire(m.id) for m in memoires}
        user_ids = set()
        for m in memoires:
            user_ids.update((m.etudiant_id, m.encadreur_id))
            jury = juries[m.id]
            if jury:
                user_ids.update((jury.president_id, jury.rapporteur_id, jury.examinateur_id))
        users = self.users.get_many(user_ids)

        out: List[MemoireDetailOut] = []
        for m in memoires:
            sujet = self.sujets.get(m.sujet_id)
            jury = juries[m.id]
            out.append(
                MemoireDetailOut(
                    **MemoireOut.model_validate(m).model_dump(),
                    etudiant=summary(users.get(m.etudiant_id)),
                    encadreur=summary(users.get(m.encadreur_id)),
                    sujet=SujetBriefOut.model_validate(sujet) if sujet else None,
                    documents=[DocumentOut.model_validate(d) for d in self.documents.list_for_memoire(m.id)],
                    historique=[HistoriqueOut.model_validate(h) for h in self.historique.list_for_memoire(m.id)],
                    jury=JuryBriefOut(
                        id=jury.id,
                        date_soutenance=jury.date_soutenance,
                        salle=jury.salle,
                        president=summary(users.get(jury.president_id)),
                        rapporteur=summary(users.get(jury.rapporteur_id)),
                        examinateur=summary(users.get(jury.examinateur_id)),
                    ) if jury else None,
                )
            )
        return out

    # -------- Création --------

    def open_for_student(
        self,
        *,
        etudiant: User,
        sujet: Sujet,
        titre: str,
        description: Optional[str],
        mots_cles: List[str],
    ) -> Memoire:
        """Crée le mémoire d'un étudiant à partir d'un sujet (création directe ou réservation)."""
        if self.repo.get_by_etudiant(etudiant.id):
            raise ConflictError("Vous avez déjà un mémoire en cours")

        memoire = self.repo.create(
            titre=titre,
            description=description,
            mots_cles=list(mots_cles),
            status=MemoireStatus.EN_COURS,
            progression=0,
            etudiant_id=etudiant.id,
            encadreur_id=sujet.encadreur_id,
            sujet_id=sujet.id,
            commit=False,
        )
        self.historique.create(
            memoire_id=memoire.id,
            status=MemoireStatus.EN_COURS,
            commentaire="Création du mémoire",
            commit=False,
        )
        self.notifier.send(
            sujet.encadreur_id,
            "Nouveau mémoire",
            f"{etudiant.prenom} {etudiant.nom} a commencé un mémoire sur le sujet « {sujet.titre} »",
        )
        logger.info("Mémoire créé etudiant=%s sujet=%s", etudiant.id, sujet.id)
        return self._commit(memoire)

    def create(self, payload: MemoireCreateIn, *, user: User) -> Memoire:
        if self.repo.get_by_etudiant(user.id):
            raise ConflictError("Vous avez déjà un mémoire en cours")
        sujet = self.sujets.get(payload.sujet_id)
        if not sujet:
            raise LookupError("Sujet non trouvé")
        return self.open_for_student(
            etudiant=user,
            sujet=sujet,
            titre=payload.titre,
            description=payload.description,
            mots_cles=payload.mots_cles,
        )

    # -------- Reads --------

    def get_mine(self, *, user: User) -> MemoireDetailOut:
        memoire = self.repo.get_by_etudiant(user.id)
        if not memoire:
            raise LookupError("Aucun mémoire trouvé")
        return self.detail(memoire)

    def list(self, *, user: User, status: Optional[MemoireStatus] = None) -> List[MemoireDetailOut]:
        scope = {}
        if user.role == Role.ENCADREUR:
            scope["encadreur_id"] = user.id
        elif user.role == Role.ETUDIANT:
            scope["etudiant_id"] = user.id
        return self.details(self.repo.search(status=status, **scope))

    def get(self, memoire_id: int, *, user: User) -> MemoireDetailOut:
        memoire = self._get(memoire_id)
        self._assert_can_view(user, memoire)
        return self.detail(memoire)

    # -------- Statut --------

    def update_status(self, memoire_id: int, payload: MemoireStatusIn, *, user: User) -> Memoire:
        memoire = self._get(memoire_id)

        if user.role == Role.ETUDIANT:
            self._assert_owner(user, memoire)
            if payload.status != MemoireStatus.SOUMIS:
                raise PermissionError("Vous ne pouvez que soumettre votre mémoire")
        elif user.role == Role.ENCADREUR:
            self._assert_supervisor(user, memoire)
            if payload.status not in ENCADREUR_STATUSES:
                raise PermissionError("Statut non autorisé pour un encadreur")

        self.change_status(memoire, payload.status, commentaire=payload.commentaire)
        self.notifier.send(
            memoire.etudiant_id,
            "Statut du mémoire mis à jour",
            f"Votre mémoire « {memoire.titre} » est maintenant {payload.status.value}",
        )
        return self._commit(memoire)

    def update(self, memoire_id: int, payload: MemoireUpdateIn, *, user: User) -> Memoire:
        memoire = self._get(memoire_id)
        self._assert_can_view(user, memoire)
        if user.role != Role.ADMIN and memoire.status in LOCKED_STATUSES:
            raise InvalidTransitionError("Un mémoire validé ou soutenu ne peut être modifié que par un administrateur")

        changes = payload.model_dump(exclude_unset=True)
        for key in ("date_depot", "date_soutenance"):
            if key in changes:
                changes[key] = as_naive_utc(changes[key])

        status = changes.pop("status", None)
        if status is not None and status != memoire.status:
            self.change_status(memoire, status, commentaire="Mise à jour du mémoire", **changes)
        else:
            self.repo.update(memoire, commit=False, **changes)
        return self._commit(memoire)

    # -------- Documents --------

    def add_document(
        self,
        memoire_id: int,
        *,
        user: User,
        content: bytes,
        filename: Optional[str],
        nom: Optional[str] = None,
        type_: Optional[str] = None,
    ) -> Document:
        memoire = self._get(memoire_id)
        self._assert_owner(user, memoire)

        stored = self._store(content, filename)
        document = self.documents.create(
            memoire_id=memoire.id,
            nom=nom or filename or stored.filename,
            url=stored.url,
            type=type_ or stored.mime,
            commit=False,
        )
        self.notifier.send(
            memoire.encadreur_id,
            "Nouveau document",
            f"{user.prenom} {user.nom} a déposé le document « {document.nom} »",
        )
        self.repo.session.commit()
        self.repo.session.refresh(document)
        return document

    def comment_document(self, document_id: int, commentaire: str, *, user: User) -> Document:
        document = self.documents.get(document_id)
        if not document:
            raise LookupError("Document non trouvé")
        memoire = self._get(document.memoire_id)
        self._assert_supervisor(user, memoire)

        self.documents.update(document, commentaire=commentaire, commit=False)
        self.notifier.send(
            memoire.etudiant_id,
            "Nouveau commentaire",
            f"Votre encadreur a commenté le document « {document.nom} »",
        )
        self.repo.session.commit()
        self.repo.session.refresh(document)
        return document

    # -------- Dépôt final + validations --------

    def depot_final(self, memoire_id: int, *, user: User, content: bytes, filename: Optional[str]) -> Memoire:
        memoire = self._get(memoire_id)
        self._assert_owner(user, memoire)
        if memoire.status not in FINAL_DEPOSIT_FROM:
            raise InvalidTransitionError("Le dépôt final n'est pas possible dans l'état actuel du mémoire")

        stored = self._store(content, filename)
        self.change_status(
            memoire,
            MemoireStatus.SOUMIS_FINAL,
            commentaire="Dépôt de la version finale",
            fichier_final=stored.url,
            date_depot=utcnow(),
        )
        self.notifier.send(
            memoire.encadreur_id,
            "Dépôt final",
            f"{user.prenom} {user.nom} a déposé la version finale de son mémoire",
        )
        return self._commit(memoire)

    def validate_by_encadreur(self, memoire_id: int, payload: ValidationIn, *, user: User) -> Memoire:
        memoire = self._get(memoire_id)
        self._assert_supervisor(user, memoire)
        if memoire.status != MemoireStatus.SOUMIS_FINAL:
            raise InvalidTransitionError("Le mémoire n'est pas en attente de validation par l'encadreur")

        if payload.action == ValidationAction.ACCEPTE:
            self.change_status(memoire, MemoireStatus.VALIDE_ENCADREUR, commentaire=payload.commentaire)
            self.notifier.send(
                memoire.etudiant_id,
                "Version finale validée",
                "Votre encadreur a validé la version finale de votre mémoire",
            )
            self.notifier.send_to_admins(
                "Mémoire à valider",
                f"Le mémoire « {memoire.titre} » attend la validation de l'administration",
            )
        else:
            self.change_status(memoire, MemoireStatus.EN_REVISION, commentaire=payload.commentaire)
            self.notifier.send(
                memoire.etudiant_id,
                "Version finale refusée",
                payload.commentaire or "Votre encadreur demande des corrections sur la version finale",
            )
        return self._commit(memoire)

    def validate_by_admin(self, memoire_id: int, payload: ValidationIn) -> Memoire:
        memoire = self._get(memoire_id)
        if memoire.status != MemoireStatus.VALIDE_ENCADREUR:
            raise InvalidTransitionError("Le mémoire doit d'abord être validé par l'encadreur")

        if payload.action == ValidationAction.ACCEPTE:
            self.change_status(memoire, MemoireStatus.VALIDE, commentaire=payload.commentaire)
            titre, message = "Mémoire validé", f"Le mémoire « {memoire.titre} » a été validé par l'administration"
        else:
            self.change_status(memoire, MemoireStatus.EN_REVISION, commentaire=payload.commentaire)
            titre, message = "Mémoire refusé", f"Le mémoire « {memoire.titre} » a été renvoyé en révision"
        self.notifier.send_many([memoire.etudiant_id, memoire.encadreur_id], titre, message)
        return self._commit(memoire)
