from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from gestion_memoire.api.v1.dependencies import (
    get_current_user,
    get_paiement_service,
    require_roles,
    translate_errors,
)
from gestion_memoire.db.models.enums import PaiementStatus, Role
from gestion_memoire.db.models.users import User
from gestion_memoire.features.paiements.schemas import (
    PaiementCreateIn,
    PaiementDetailOut,
    PaiementOut,
    PaiementStatsOut,
    PaiementStatusIn,
    PaiementUpdateIn,
)
from gestion_memoire.features.paiements.services import PaiementService
from gestion_memoire.features.users.schemas import MessageOut

router = APIRouter(
    prefix="/paiements",
    tags=["paiements"],
    responses={404: {"description": "Not Found"}},
)


@router.post(
    "",
    summary="Soumettre un paiement (étudiant)",
    status_code=status.HTTP_201_CREATED,
    response_model=PaiementOut,
)
def create(
    payload: PaiementCreateIn,
    user: User = Depends(require_roles(Role.ETUDIANT)),
    svc: PaiementService = Depends(get_paiement_service),
):
    return svc.create(payload, user=user)


@router.get("", summary="Lister les paiements", response_model=List[PaiementDetailOut])
def list_paiements(
    status_: Optional[PaiementStatus] = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    svc: PaiementService = Depends(get_paiement_service),
):
    return svc.list(user=user, status=status_)


@router.get("/stats", summary="Montants par statut (admin)", response_model=PaiementStatsOut)
def stats(
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: PaiementService = Depends(get_paiement_service),
):
    return svc.stats()


@router.get("/{paiement_id}", summary="Récupérer un paiement", response_model=PaiementDetailOut)
def get_one(
    paiement_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: PaiementService = Depends(get_paiement_service),
):
    with translate_errors():
        return svc.get(paiement_id, user=user)


@router.put("/{paiement_id}", summary="Modifier un paiement (admin)", response_model=PaiementOut)
def update(
    payload: PaiementUpdateIn,
    paiement_id: int = Path(..., ge=1),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: PaiementService = Depends(get_paiement_service),
):
    with translate_errors():
        return svc.update(paiement_id, payload)


@router.patch("/{paiement_id}/status", summary="Valider / rejeter un paiement (admin)", response_model=PaiementOut)
def update_status(
    payload: PaiementStatusIn,
    paiement_id: int = Path(..., ge=1),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: PaiementService = Depends(get_paiement_service),
):
    with translate_errors():
        return svc.update_status(paiement_id, payload.status)


@router.delete("/{paiement_id}", summary="Supprimer un paiement (admin)", response_model=MessageOut)
def delete(
    paiement_id: int = Path(..., ge=1),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: PaiementService = Depends(get_paiement_service),
):
    with translate_errors():
        svc.delete(paiement_id)
    return MessageOut(message="Paiement supprimé avec succès")
