import logging
from typing import Iterable, Optional, Sequence

from gestion_memoire.db.models.notifications import Notification
from gestion_memoire.db.repositories.notifications import NotificationRepository
from gestion_memoire.db.repositories.users import UserRepository
from gestion_memoire.features.errors import PermissionError

logger = logging.getLogger(__name__)


class Notifier:
    """
    Écrit les lignes Notification pour les autres services.
    commit=False par défaut : la notification part dans la même transaction
    que la modification qui l'a provoquée.
    """

    def __init__(self, *, repo: NotificationRepository, user_repo: UserRepository):
        self.repo = repo
        self.users = user_repo

    def send(self, user_id: Optional[int], titre: str, message: str, *, commit: bool = False) -> Optional[Notification]:
        if user_id is None:
            return None
        logger.debug("notification user=%s titre=%r", user_id, titre)
        return self.repo.create(user_id=user_id, titre=titre, message=message, commit=commit)

    def send_many(self, user_ids: Iterable[int], titre: str, message: str, *, commit: bool = False) -> None:
        for user_id in dict.fromkeys(user_ids):
            self.send(user_id, titre, message)
        if commit:
            self.repo.session.commit()

    def send_to_admins(self, titre: str, message: str, *, commit: bool = False) -> None:
        self.send_many((u.id for u in self.users.list_admins()), titre, message, commit=commit)


class NotificationService:
    def __init__(self, repo: NotificationRepository):
        self.repo = repo

    def _get_owned(self, notification_id: int, *, user_id: int) -> Notification:
        notif = self.repo.get(notification_id)
        if not notif:
            raise LookupError("Notification non trouvée")
        if notif.user_id != user_id:
            raise PermissionError("Accès non autorisé")
        return notif

    def list(self, *, user_id: int, unread_only: bool = False) -> Sequence[Notification]:
        return self.repo.list_for_user(user_id, unread_only=unread_only)

    def mark_as_read(self, notification_id: int, *, user_id: int) -> Notification:
        notif = self._get_owned(notification_id, user_id=user_id)
        if notif.lu:
            return notif
        return self.repo.update(notif, lu=True)

    def mark_all_as_read(self, *, user_id: int) -> int:
        return self.repo.mark_all_read(user_id)

    def delete(self, notification_id: int, *, user_id: int) -> None:
        notif = self._get_owned(notification_id, user_id=user_id)
        self.repo.delete(notif)
