from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from gestion_memoire.api.v1.dependencies import get_bibliotheque_service, require_roles, translate_errors
from gestion_memoire.db.models.enums import Role
from gestion_memoire.db.models.users import User
from gestion_memoire.features.bibliotheque.schemas import BibliothequeItemOut, PublishOut
from gestion_memoire.features.bibliotheque.services import BibliothequeService
from gestion_memoire.features.memoires.schemas import MemoireOut

router = APIRouter(
    prefix="/bibliotheque",
    tags=["bibliotheque"],
    responses={404: {"description": "Not Found"}},
)


@router.get("", summary="Mémoires soutenus et publiés", response_model=List[BibliothequeItemOut])
def list_published(
    search: Optional[str] = Query(None, description="Titre, nom de l'étudiant ou mot-clé"),
    year: Optional[int] = Query(None, ge=1900, le=2100, description="Année de soutenance"),
    encadreur_id: Optional[int] = Query(None, ge=1),
    _: User = Depends(require_roles(Role.ADMIN, Role.ENCADREUR, Role.ETUDIANT)),
    svc: BibliothequeService = Depends(get_bibliotheque_service),
):
    return svc.list(search=search, year=year, encadreur_id=encadreur_id)


@router.patch("/memoires/{memoire_id}/publish", summary="Publier un mémoire soutenu (admin)", response_model=PublishOut)
def publish(
    memoire_id: int = Path(..., ge=1),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: BibliothequeService = Depends(get_bibliotheque_service),
):
    with translate_errors():
        memoire = svc.publish(memoire_id)
    return PublishOut(message="Mémoire publié avec succès", memoire=MemoireOut.model_validate(memoire))
