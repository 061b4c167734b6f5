from typing import Optional, Sequence
from sqlmodel import select, func

from gestion_memoire.db.repositories.base import BaseRepository
from gestion_memoire.db.models.sessions import SessionEncadrement
from gestion_memoire.db.models.enums import SessionStatus


class SessionRepository(BaseRepository[SessionEncadrement]):
    model = SessionEncadrement

    def search(
        self,
        *,
        status: Optional[SessionStatus] = None,
        encadreur_id: Optional[int] = None,
        etudiant_id: Optional[int] = None,
    ) -> Sequence[SessionEncadrement]:
        stmt = select(SessionEncadrement)
        if status is not None:
            stmt = stmt.where(SessionEncadrement.status == status)
        if encadreur_id is not None:
            stmt = stmt.where(SessionEncadrement.encadreur_id == encadreur_id)
        if etudiant_id is not None:
            stmt = stmt.where(SessionEncadrement.etudiant_id == etudiant_id)
        stmt = stmt.order_by(SessionEncadrement.date.desc(), SessionEncadrement.id.desc())
        return self.session.exec(stmt).all()

    def next_numero(self, *, encadreur_id: int, etudiant_id: int) -> int:
        """Numéro de la prochaine séance pour ce binôme encadreur/étudiant."""
        stmt = (
            select(func.count(SessionEncadrement.id))
            .where(SessionEncadrement.encadreur_id == encadreur_id)
            .where(SessionEncadrement.etudiant_id == etudiant_id)
        )
        return int(self.session.exec(stmt).one()) + 1
