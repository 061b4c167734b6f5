import logging
from typing import List, Optional

from gestion_memoire.db.models.enums import MemoireStatus
from gestion_memoire.db.models.memoires import Memoire
from gestion_memoire.db.models.users import User
from gestion_memoire.db.repositories.memoires import MemoireRepository
from gestion_memoire.db.repositories.users import UserRepository
from gestion_memoire.features.bibliotheque.schemas import BibliothequeItemOut
from gestion_memoire.features.errors import InvalidTransitionError
from gestion_memoire.features.memoires.services import summary
from gestion_memoire.features.notifications.services import Notifier

logger = logging.getLogger(__name__)


def matches(memoire: Memoire, etudiant: Optional[User], search: str) -> bool:
    """Titre ou nom de l'étudiant contenant le texte, ou un mot égal à un mot-clé."""
    needle = search.strip().lower()
    if not needle:
        return True
    if needle in memoire.titre.lower():
        return True
    if etudiant and needle in etudiant.nom.lower():
        return True
    keywords = {k.lower() for k in memoire.mots_cles or []}
    return any(word in keywords for word in needle.split())


class BibliothequeService:
    """Bibliothèque des mémoires soutenus et publiés."""

    def __init__(self, *, memoire_repo: MemoireRepository, user_repo: UserRepository, notifier: Notifier):
        self.memoires = memoire_repo
        self.users = user_repo
        self.notifier = notifier

    def list(
        self,
        *,
        search: Optional[str] = None,
        year: Optional[int] = None,
        encadreur_id: Optional[int] = None,
    ) -> List[BibliothequeItemOut]:
        rows = self.memoires.list_published(year=year, encadreur_id=encadreur_id)
        users = self.users.get_many(
            uid for m in rows for uid in (m.etudiant_id, m.encadreur_id)
        )
        if search:
            rows = [m for m in rows if matches(m, users.get(m.etudiant_id), search)]

        return [
            BibliothequeItemOut(
                id=m.id,
                titre=m.titre,
                description=m.description,
                mots_cles=list(m.mots_cles or []),
                date_soutenance=m.date_soutenance,
                fichier_final=m.fichier_final,
                etudiant=summary(users.get(m.etudiant_id)),
                encadreur=summary(users.get(m.encadreur_id)),
            )
            for m in rows
        ]

    def publish(self, memoire_id: int) -> Memoire:
        memoire = self.memoires.get(memoire_id)
        if not memoire:
            raise LookupError("Mémoire non trouvé")
        if memoire.status != MemoireStatus.SOUTENU:
            raise InvalidTransitionError("Seuls les mémoires soutenus peuvent être publiés")
        if memoire.published:
            raise InvalidTransitionError("Mémoire déjà publié")

        self.memoires.update(memoire, published=True, commit=False)
        self.notifier.send_many(
            [memoire.etudiant_id, memoire.encadreur_id],
            "Mémoire publié",
            f"Le mémoire « {memoire.titre} » est maintenant disponible dans la bibliothèque",
        )
        self.memoires.session.commit()
        self.memoires.session.refresh(memoire)
        logger.info("Mémoire %s publié", memoire.id)
        return memoire
