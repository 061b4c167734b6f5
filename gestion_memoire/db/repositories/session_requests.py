from typing import Optional, Sequence
from sqlmodel import select

from gestion_memoire.db.repositories.base import BaseRepository
from gestion_memoire.db.models.session_requests import SessionRequest


class SessionRequestRepository(BaseRepository[SessionRequest]):
    model = SessionRequest

    def search(
        self,
        *,
        encadreur_id: Optional[int] = None,
        etudiant_id: Optional[int] = None,
    ) -> Sequence[SessionRequest]:
        stmt = select(SessionRequest)
        if encadreur_id is not None:
            stmt = stmt.where(SessionRequest.encadreur_id == encadreur_id)
        if etudiant_id is not None:
            stmt = stmt.where(SessionRequest.etudiant_id == etudiant_id)
        stmt = stmt.order_by(SessionRequest.created_at.desc(), SessionRequest.id.desc())
        return self.session.exec(stmt).all()
