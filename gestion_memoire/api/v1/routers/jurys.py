from typing import List

from fastapi import APIRouter, Depends, Path, status

from gestion_memoire.api.v1.dependencies import get_jury_service, require_roles, translate_errors
from gestion_memoire.db.models.enums import Role
from gestion_memoire.db.models.users import User
from gestion_memoire.features.juries.schemas import JuryCreateIn, JuryDetailOut, JuryOut, JuryUpdateIn
from gestion_memoire.features.juries.services import JuryService
from gestion_memoire.features.users.schemas import MessageOut

router = APIRouter(
    prefix="/jurys",
    tags=["jurys"],
    responses={404: {"description": "Not Found"}},
)


@router.post(
    "",
    summary="Assigner un jury (admin)",
    status_code=status.HTTP_201_CREATED,
    response_model=JuryOut,
)
def create(
    payload: JuryCreateIn,
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: JuryService = Depends(get_jury_service),
):
    with translate_errors():
        return svc.create(payload)


@router.get("", summary="Lister les jurys", response_model=List[JuryDetailOut])
def list_jurys(
    _: User = Depends(require_roles(Role.ADMIN, Role.ENCADREUR)),
    svc: JuryService = Depends(get_jury_service),
):
    return svc.list()


@router.get("/{jury_id}", summary="Récupérer un jury", response_model=JuryDetailOut)
def get_one(
    jury_id: int = Path(..., ge=1),
    _: User = Depends(require_roles(Role.ADMIN, Role.ENCADREUR)),
    svc: JuryService = Depends(get_jury_service),
):
    with translate_errors():
        return svc.get(jury_id)


@router.put("/{jury_id}", summary="Modifier un jury (admin)", response_model=JuryOut)
def update(
    payload: JuryUpdateIn,
    jury_id: int = Path(..., ge=1),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: JuryService = Depends(get_jury_service),
):
    with translate_errors():
        return svc.update(jury_id, payload)


@router.delete("/{jury_id}", summary="Supprimer un jury (admin)", response_model=MessageOut)
def delete(
    jury_id: int = Path(..., ge=1),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: JuryService = Depends(get_jury_service),
):
    with translate_errors():
        svc.delete(jury_id)
    return MessageOut(message="Jury supprimé avec succès")
