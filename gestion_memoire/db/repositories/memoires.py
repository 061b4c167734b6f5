from datetime import datetime
from typing import Optional, Sequence
from sqlmodel import select, func

from gestion_memoire.db.repositories.base import BaseRepository
from gestion_memoire.db.models.memoires import Memoire, HistoriqueMemoireStatus
from gestion_memoire.db.models.enums import MemoireStatus


class MemoireRepository(BaseRepository[Memoire]):
    model = Memoire

    def get_by_etudiant(self, etudiant_id: int) -> Optional[Memoire]:
        return self.session.exec(
            select(Memoire).where(Memoire.etudiant_id == etudiant_id)
        ).first()

    def get_supervised(self, *, etudiant_id: int, encadreur_id: int) -> Optional[Memoire]:
        """Mémoire de l'étudiant s'il est encadré par cet encadreur."""
        return self.session.exec(
            select(Memoire)
            .where(Memoire.etudiant_id == etudiant_id)
            .where(Memoire.encadreur_id == encadreur_id)
        ).first()

    def list_by_sujet(self, sujet_id: int) -> Sequence[Memoire]:
        return self.session.exec(select(Memoire).where(Memoire.sujet_id == sujet_id)).all()

    def search(
        self,
        *,
        status: Optional[MemoireStatus] = None,
        etudiant_id: Optional[int] = None,
        encadreur_id: Optional[int] = None,
    ) -> Sequence[Memoire]:
        """Liste filtrée, dernières mises à jour d'abord."""
        stmt = select(Memoire)
        if status is not None:
            stmt = stmt.where(Memoire.status == status)
        if etudiant_id is not None:
            stmt = stmt.where(Memoire.etudiant_id == etudiant_id)
        if encadreur_id is not None:
            stmt = stmt.where(Memoire.encadreur_id == encadreur_id)
        stmt = stmt.order_by(Memoire.updated_at.desc(), Memoire.id.desc())
        return self.session.exec(stmt).all()

    def list_published(
        self,
        *,
        year: Optional[int] = None,
        encadreur_id: Optional[int] = None,
    ) -> Sequence[Memoire]:
        """Mémoires publiés et soutenus (la recherche texte se fait côté service)."""
        stmt = (
            select(Memoire)
            .where(Memoire.published == True)  # noqa: E712
            .where(Memoire.status == MemoireStatus.SOUTENU)
        )
        if year is not None:
            stmt = stmt.where(Memoire.date_soutenance >= datetime(year, 1, 1))
            stmt = stmt.where(Memoire.date_soutenance < datetime(year + 1, 1, 1))
        if encadreur_id is not None:
            stmt = stmt.where(Memoire.encadreur_id == encadreur_id)
        stmt = stmt.order_by(Memoire.date_soutenance.desc(), Memoire.id.desc())
        return self.session.exec(stmt).all()

    def count_created(self, *, start: Optional[datetime] = None, end: Optional[datetime] = None) -> int:
        stmt = select(func.count(Memoire.id))
        if start is not None:
            stmt = stmt.where(Memoire.created_at >= start)
        if end is not None:
            stmt = stmt.where(Memoire.created_at <= end)
        return int(self.session.exec(stmt).one())


class HistoriqueRepository(BaseRepository[HistoriqueMemoireStatus]):
    model = HistoriqueMemoireStatus

    def list_for_memoire(self, memoire_id: int) -> Sequence[HistoriqueMemoireStatus]:
        return self.session.exec(
            select(HistoriqueMemoireStatus)
            .where(HistoriqueMemoireStatus.memoire_id == memoire_id)
            .order_by(HistoriqueMemoireStatus.created_at.desc(), HistoriqueMemoireStatus.id.desc())
        ).all()
