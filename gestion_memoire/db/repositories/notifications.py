from typing import Sequence
from sqlmodel import select

from gestion_memoire.db.repositories.base import BaseRepository
from gestion_memoire.db.models.notifications import Notification
from gestion_memoire.db.models.base import utcnow


class NotificationRepository(BaseRepository[Notification]):
    model = Notification

    def list_for_user(self, user_id: int, *, unread_only: bool = False) -> Sequence[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.lu == False)  # noqa: E712
        stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
        return self.session.exec(stmt).all()

    def mark_all_read(self, user_id: int) -> int:
        unread = self.list_for_user(user_id, unread_only=True)
        now = utcnow()
        for notif in unread:
            notif.lu = True
            notif.updated_at = now
            self.session.add(notif)
        self.session.commit()
        return len(unread)
