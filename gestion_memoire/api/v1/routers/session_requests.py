from typing import List

from fastapi import APIRouter, Depends, Path, status

from gestion_memoire.api.v1.dependencies import (
    get_current_user,
    get_session_request_service,
    require_roles,
    translate_errors,
)
from gestion_memoire.db.models.enums import Role
from gestion_memoire.db.models.users import User
from gestion_memoire.features.session_requests.schemas import (
    SessionRequestCreateIn,
    SessionRequestDecisionIn,
    SessionRequestDecisionOut,
    SessionRequestDetailOut,
    SessionRequestOut,
)
from gestion_memoire.features.session_requests.services import SessionRequestService

router = APIRouter(
    prefix="/session-requests",
    tags=["session-requests"],
    responses={404: {"description": "Not Found"}},
)


@router.post(
    "",
    summary="Demander une session (étudiant)",
    status_code=status.HTTP_201_CREATED,
    response_model=SessionRequestOut,
)
def create(
    payload: SessionRequestCreateIn,
    user: User = Depends(require_roles(Role.ETUDIANT)),
    svc: SessionRequestService = Depends(get_session_request_service),
):
    with translate_errors():
        return svc.create(payload, user=user)


@router.get("", summary="Lister les demandes de session", response_model=List[SessionRequestDetailOut])
def list_requests(
    user: User = Depends(get_current_user),
    svc: SessionRequestService = Depends(get_session_request_service),
):
    return svc.list(user=user)


@router.patch(
    "/{request_id}",
    summary="Accepter / refuser une demande (encadreur)",
    response_model=SessionRequestDecisionOut,
)
def decide(
    payload: SessionRequestDecisionIn,
    request_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(Role.ENCADREUR)),
    svc: SessionRequestService = Depends(get_session_request_service),
):
    with translate_errors():
        return svc.decide(request_id, payload, user=user)
