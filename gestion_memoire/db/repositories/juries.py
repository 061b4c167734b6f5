from datetime import datetime
from typing import Optional, Sequence
from sqlmodel import select, func

from gestion_memoire.db.repositories.base import BaseRepository
from gestion_memoire.db.models.juries import Jury


class JuryRepository(BaseRepository[Jury]):
    model = Jury

    def get_by_memoire(self, memoire_id: int) -> Optional[Jury]:
        return self.session.exec(select(Jury).where(Jury.memoire_id == memoire_id)).first()

    def list_all(self) -> Sequence[Jury]:
        return self.session.exec(
            select(Jury).order_by(Jury.date_soutenance.desc(), Jury.id.desc())
        ).all()

    def count_in_range(self, *, start: Optional[datetime] = None, end: Optional[datetime] = None) -> int:
        stmt = select(func.count(Jury.id))
        if start is not None:
            stmt = stmt.where(Jury.date_soutenance >= start)
        if end is not None:
            stmt = stmt.where(Jury.date_soutenance <= end)
        return int(self.session.exec(stmt).one())

    def list_recent(
        self, *, limit: int = 5, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Sequence[Jury]:
        stmt = select(Jury)
        if start is not None:
            stmt = stmt.where(Jury.created_at >= start)
        if end is not None:
            stmt = stmt.where(Jury.created_at <= end)
        return self.session.exec(stmt.order_by(Jury.created_at.desc()).limit(limit)).all()

    def list_upcoming(self, *, start: datetime, end: Optional[datetime] = None, limit: int = 10) -> Sequence[Jury]:
        stmt = select(Jury).where(Jury.date_soutenance >= start)
        if end is not None:
            stmt = stmt.where(Jury.date_soutenance <= end)
        return self.session.exec(stmt.order_by(Jury.date_soutenance.asc()).limit(limit)).all()
