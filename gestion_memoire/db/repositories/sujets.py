from typing import Optional, Sequence
from sqlmodel import select, func

from gestion_memoire.db.repositories.base import BaseRepository
from gestion_memoire.db.models.sujets import Sujet
from gestion_memoire.db.models.users import User
from gestion_memoire.db.models.memoires import Memoire
from gestion_memoire.db.models.enums import SujetStatus


class SujetRepository(BaseRepository[Sujet]):
    """CRUD Sujets + filtres de listing."""
    model = Sujet

    def search(
        self,
        *,
        status: Optional[SujetStatus] = None,
        specialite: Optional[str] = None,
        encadreur_id: Optional[int] = None,
    ) -> Sequence[Sujet]:
        """
        Liste des sujets, les plus récents d'abord.
        - specialite : spécialité de l'encadreur propriétaire
        - encadreur_id : restreint aux sujets d'un encadreur
        """
        stmt = select(Sujet)
        if status is not None:
            stmt = stmt.where(Sujet.status == status)
        if specialite:
            stmt = stmt.join(User, User.id == Sujet.encadreur_id).where(User.specialite == specialite)
        if encadreur_id is not None:
            stmt = stmt.where(Sujet.encadreur_id == encadreur_id)
        stmt = stmt.order_by(Sujet.created_at.desc(), Sujet.id.desc())
        return self.session.exec(stmt).all()

    def count_memoires(self, sujet_id: int) -> int:
        """Nombre de mémoires attribués au sujet (0 = libre)."""
        stmt = select(func.count(Memoire.id)).where(Memoire.sujet_id == sujet_id)
        return int(self.session.exec(stmt).one())
