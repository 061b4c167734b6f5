from typing import List

from fastapi import APIRouter, Depends, Path, Query

from gestion_memoire.api.v1.dependencies import (
    get_current_user,
    get_notification_service,
    translate_errors,
)
from gestion_memoire.db.models.users import User
from gestion_memoire.features.notifications.schemas import MarkAllReadOut, NotificationOut
from gestion_memoire.features.notifications.services import NotificationService
from gestion_memoire.features.users.schemas import MessageOut

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
    responses={404: {"description": "Not Found"}},
)


@router.get("", summary="Mes notifications", response_model=List[NotificationOut])
def list_notifications(
    unread_only: bool = Query(False),
    user: User = Depends(get_current_user),
    svc: NotificationService = Depends(get_notification_service),
):
    return svc.list(user_id=user.id, unread_only=unread_only)


@router.patch("/read-all", summary="Tout marquer comme lu", response_model=MarkAllReadOut)
def mark_all_as_read(
    user: User = Depends(get_current_user),
    svc: NotificationService = Depends(get_notification_service),
):
    updated = svc.mark_all_as_read(user_id=user.id)
    return MarkAllReadOut(message="Toutes les notifications ont été marquées comme lues", updated=updated)


@router.patch("/{notification_id}/read", summary="Marquer comme lue", response_model=NotificationOut)
def mark_as_read(
    notification_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: NotificationService = Depends(get_notification_service),
):
    with translate_errors():
        return svc.mark_as_read(notification_id, user_id=user.id)


@router.delete("/{notification_id}", summary="Supprimer une notification", response_model=MessageOut)
def delete(
    notification_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: NotificationService = Depends(get_notification_service),
):
    with translate_errors():
        svc.delete(notification_id, user_id=user.id)
    return MessageOut(message="Notification supprimée")
