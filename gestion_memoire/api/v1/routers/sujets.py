from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from gestion_memoire.api.v1.dependencies import (
    get_current_user,
    get_sujet_service,
    require_roles,
    translate_errors,
)
from gestion_memoire.db.models.enums import Role, SujetStatus
from gestion_memoire.db.models.users import User
from gestion_memoire.features.memoires.schemas import MemoireOut
from gestion_memoire.features.sujets.schemas import (
    ReserveOut,
    SujetCreateIn,
    SujetDetailOut,
    SujetOut,
    SujetStatusIn,
    SujetUpdateIn,
)
from gestion_memoire.features.sujets.services import SujetService
from gestion_memoire.features.users.schemas import MessageOut

router = APIRouter(
    prefix="/sujets",
    tags=["sujets"],
    responses={404: {"description": "Not Found"}},
)


@router.post(
    "",
    summary="Proposer un sujet",
    status_code=status.HTTP_201_CREATED,
    response_model=SujetOut,
)
def create(
    payload: SujetCreateIn,
    user: User = Depends(require_roles(Role.ENCADREUR, Role.ADMIN)),
    svc: SujetService = Depends(get_sujet_service),
):
    return svc.create(payload, user=user)


@router.get("", summary="Lister les sujets", response_model=List[SujetDetailOut])
def list_sujets(
    status_: Optional[SujetStatus] = Query(None, alias="status"),
    specialite: Optional[str] = Query(None, description="Spécialité de l'encadreur"),
    user: User = Depends(get_current_user),
    svc: SujetService = Depends(get_sujet_service),
):
    return svc.list(user=user, status=status_, specialite=specialite)


@router.get("/{sujet_id}", summary="Récupérer un sujet", response_model=SujetDetailOut)
def get_one(
    sujet_id: int = Path(..., ge=1),
    _: User = Depends(get_current_user),
    svc: SujetService = Depends(get_sujet_service),
):
    with translate_errors():
        return svc.get(sujet_id)


@router.put("/{sujet_id}", summary="Modifier un sujet", response_model=SujetOut)
def update(
    payload: SujetUpdateIn,
    sujet_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(Role.ENCADREUR, Role.ADMIN)),
    svc: SujetService = Depends(get_sujet_service),
):
    with translate_errors():
        return svc.update(sujet_id, payload, user=user)


@router.patch("/{sujet_id}/status", summary="Valider / rejeter un sujet (admin)", response_model=SujetOut)
def update_status(
    payload: SujetStatusIn,
    sujet_id: int = Path(..., ge=1),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: SujetService = Depends(get_sujet_service),
):
    with translate_errors():
        return svc.update_status(sujet_id, payload.status)


@router.delete("/{sujet_id}", summary="Supprimer un sujet", response_model=MessageOut)
def delete(
    sujet_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(Role.ENCADREUR, Role.ADMIN)),
    svc: SujetService = Depends(get_sujet_service),
):
    with translate_errors():
        svc.delete(sujet_id, user=user)
    return MessageOut(message="Sujet supprimé avec succès")


@router.post(
    "/{sujet_id}/reserve",
    summary="Choisir un sujet (étudiant)",
    status_code=status.HTTP_201_CREATED,
    response_model=ReserveOut,
)
def reserve(
    sujet_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(Role.ETUDIANT)),
    svc: SujetService = Depends(get_sujet_service),
):
    with translate_errors():
        memoire = svc.reserve(sujet_id, user=user)
    return ReserveOut(message="Sujet réservé avec succès", memoire=MemoireOut.model_validate(memoire))
