from datetime import datetime
from typing import Dict, Optional, Sequence
from sqlmodel import select, func

from gestion_memoire.db.repositories.base import BaseRepository
from gestion_memoire.db.models.paiements import Paiement
from gestion_memoire.db.models.enums import PaiementStatus


class PaiementRepository(BaseRepository[Paiement]):
    model = Paiement

    def search(
        self,
        *,
        status: Optional[PaiementStatus] = None,
        etudiant_id: Optional[int] = None,
    ) -> Sequence[Paiement]:
        stmt = select(Paiement)
        if status is not None:
            stmt = stmt.where(Paiement.status == status)
        if etudiant_id is not None:
            stmt = stmt.where(Paiement.etudiant_id == etudiant_id)
        stmt = stmt.order_by(Paiement.date.desc(), Paiement.id.desc())
        return self.session.exec(stmt).all()

    def sum_by_status(self) -> Dict[PaiementStatus, int]:
        """Somme des montants par statut (statuts absents = 0)."""
        rows = self.session.exec(
            select(Paiement.status, func.sum(Paiement.montant)).group_by(Paiement.status)
        ).all()
        totals = {s: 0 for s in PaiementStatus}
        for status, total in rows:
            totals[PaiementStatus(status)] = int(total or 0)
        return totals

    def sum_in_range(self, *, start: Optional[datetime] = None, end: Optional[datetime] = None) -> int:
        stmt = select(func.sum(Paiement.montant))
        if start is not None:
            stmt = stmt.where(Paiement.date >= start)
        if end is not None:
            stmt = stmt.where(Paiement.date <= end)
        return int(self.session.exec(stmt).one() or 0)

    def list_recent(
        self, *, limit: int = 5, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Sequence[Paiement]:
        stmt = select(Paiement)
        if start is not None:
            stmt = stmt.where(Paiement.created_at >= start)
        if end is not None:
            stmt = stmt.where(Paiement.created_at <= end)
        return self.session.exec(stmt.order_by(Paiement.created_at.desc()).limit(limit)).all()
