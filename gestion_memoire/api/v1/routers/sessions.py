from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from gestion_memoire.api.v1.dependencies import (
    get_current_user,
    get_session_service,
    require_roles,
    translate_errors,
)
from gestion_memoire.db.models.enums import Role, SessionStatus
from gestion_memoire.db.models.users import User
from gestion_memoire.features.sessions.schemas import (
    SessionCreateIn,
    SessionDetailOut,
    SessionOut,
    SessionUpdateIn,
    VisaIn,
)
from gestion_memoire.features.sessions.services import SessionService
from gestion_memoire.features.users.schemas import MessageOut

router = APIRouter(
    prefix="/sessions",
    tags=["sessions"],
    responses={404: {"description": "Not Found"}},
)


@router.post(
    "",
    summary="Planifier une session (encadreur)",
    status_code=status.HTTP_201_CREATED,
    response_model=SessionOut,
)
def create(
    payload: SessionCreateIn,
    user: User = Depends(require_roles(Role.ENCADREUR)),
    svc: SessionService = Depends(get_session_service),
):
    with translate_errors():
        return svc.create(payload, user=user)


@router.get("", summary="Lister les sessions", response_model=List[SessionDetailOut])
def list_sessions(
    status_: Optional[SessionStatus] = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    svc: SessionService = Depends(get_session_service),
):
    return svc.list(user=user, status=status_)


@router.get("/{session_id}", summary="Récupérer une session", response_model=SessionDetailOut)
def get_one(
    session_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: SessionService = Depends(get_session_service),
):
    with translate_errors():
        return svc.get(session_id, user=user)


@router.put("/{session_id}", summary="Modifier une session (encadreur)", response_model=SessionOut)
def update(
    payload: SessionUpdateIn,
    session_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(Role.ENCADREUR)),
    svc: SessionService = Depends(get_session_service),
):
    with translate_errors():
        return svc.update(session_id, payload, user=user)


@router.delete("/{session_id}", summary="Supprimer une session (encadreur)", response_model=MessageOut)
def delete(
    session_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(Role.ENCADREUR)),
    svc: SessionService = Depends(get_session_service),
):
    with translate_errors():
        svc.delete(session_id, user=user)
    return MessageOut(message="Session supprimée avec succès")


@router.patch("/{session_id}/visa", summary="Signer une session", response_model=SessionOut)
def sign_visa(
    payload: VisaIn,
    session_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(Role.ENCADREUR, Role.ETUDIANT)),
    svc: SessionService = Depends(get_session_service),
):
    with translate_errors():
        return svc.sign_visa(session_id, payload.type, user=user)
