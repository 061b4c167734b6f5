from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status

from gestion_memoire.api.v1.dependencies import (
    get_memoire_service,
    require_roles,
    translate_errors,
)
from gestion_memoire.db.models.enums import MemoireStatus, Role
from gestion_memoire.db.models.users import User
from gestion_memoire.features.memoires.schemas import (
    DocumentActionOut,
    DocumentCommentIn,
    DocumentOut,
    MemoireActionOut,
    MemoireCreateIn,
    MemoireDetailOut,
    MemoireOut,
    MemoireStatusIn,
    MemoireUpdateIn,
    ValidationIn,
)
from gestion_memoire.features.memoires.services import MemoireService

router = APIRouter(
    prefix="/memoires",
    tags=["memoires"],
    responses={404: {"description": "Not Found"}},
)

ALL_ROLES = (Role.ADMIN, Role.ENCADREUR, Role.ETUDIANT)


def _action(message: str, memoire) -> MemoireActionOut:
    return MemoireActionOut(message=message, memoire=MemoireOut.model_validate(memoire))

# -----------------------------
# Création + lecture
# -----------------------------
@router.post(
    "",
    summary="Créer mon mémoire (étudiant)",
    status_code=status.HTTP_201_CREATED,
    response_model=MemoireOut,
)
def create(
    payload: MemoireCreateIn,
    user: User = Depends(require_roles(Role.ETUDIANT)),
    svc: MemoireService = Depends(get_memoire_service),
):
    with translate_errors():
        return svc.create(payload, user=user)


@router.get("/me", summary="Mon mémoire (étudiant)", response_model=MemoireDetailOut)
def get_mine(
    user: User = Depends(require_roles(Role.ETUDIANT)),
    svc: MemoireService = Depends(get_memoire_service),
):
    with translate_errors():
        return svc.get_mine(user=user)


@router.get("", summary="Lister les mémoires", response_model=List[MemoireDetailOut])
def list_memoires(
    status_: Optional[MemoireStatus] = Query(None, alias="status"),
    user: User = Depends(require_roles(*ALL_ROLES)),
    svc: MemoireService = Depends(get_memoire_service),
):
    return svc.list(user=user, status=status_)


@router.get("/{memoire_id}", summary="Récupérer un mémoire", response_model=MemoireDetailOut)
def get_one(
    memoire_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(*ALL_ROLES)),
    svc: MemoireService = Depends(get_memoire_service),
):
    with translate_errors():
        return svc.get(memoire_id, user=user)

# -----------------------------
# Mises à jour
# -----------------------------
@router.patch("/{memoire_id}/status", summary="Changer le statut d'un mémoire", response_model=MemoireActionOut)
def update_status(
    payload: MemoireStatusIn,
    memoire_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(*ALL_ROLES)),
    svc: MemoireService = Depends(get_memoire_service),
):
    with translate_errors():
        memoire = svc.update_status(memoire_id, payload, user=user)
    return _action("Statut mis à jour avec succès", memoire)


@router.put("/{memoire_id}", summary="Modifier un mémoire", response_model=MemoireOut)
def update(
    payload: MemoireUpdateIn,
    memoire_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(*ALL_ROLES)),
    svc: MemoireService = Depends(get_memoire_service),
):
    with translate_errors():
        return svc.update(memoire_id, payload, user=user)

# -----------------------------
# Documents
# -----------------------------
@router.post(
    "/{memoire_id}/documents",
    summary="Déposer un document (étudiant)",
    status_code=status.HTTP_201_CREATED,
    response_model=DocumentActionOut,
)
async def upload_document(
    memoire_id: int = Path(..., ge=1),
    file: UploadFile = File(...),
    nom: Optional[str] = Form(None),
    type_: Optional[str] = Form(None, alias="type"),
    user: User = Depends(require_roles(Role.ETUDIANT)),
    svc: MemoireService = Depends(get_memoire_service),
):
    content = await file.read()
    with translate_errors():
        document = svc.add_document(
            memoire_id,
            user=user,
            content=content,
            filename=file.filename,
            nom=nom,
            type_=type_,
        )
    return DocumentActionOut(message="Document déposé avec succès", document=DocumentOut.model_validate(document))


@router.patch(
    "/documents/{document_id}/comment",
    summary="Commenter un document (encadreur)",
    response_model=DocumentActionOut,
)
def comment_document(
    payload: DocumentCommentIn,
    document_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(Role.ENCADREUR)),
    svc: MemoireService = Depends(get_memoire_service),
):
    with translate_errors():
        document = svc.comment_document(document_id, payload.commentaire, user=user)
    return DocumentActionOut(message="Commentaire enregistré", document=DocumentOut.model_validate(document))

# -----------------------------
# Dépôt final + validations
# -----------------------------
@router.post("/{memoire_id}/depot-final", summary="Déposer la version finale (étudiant)", response_model=MemoireActionOut)
async def depot_final(
    memoire_id: int = Path(..., ge=1),
    file: UploadFile = File(...),
    user: User = Depends(require_roles(Role.ETUDIANT)),
    svc: MemoireService = Depends(get_memoire_service),
):
    content = await file.read()
    with translate_errors():
        memoire = svc.depot_final(memoire_id, user=user, content=content, filename=file.filename)
    return _action("Version finale déposée avec succès", memoire)


@router.post(
    "/{memoire_id}/validation-encadreur",
    summary="Valider / refuser la version finale (encadreur)",
    response_model=MemoireActionOut,
)
def validation_encadreur(
    payload: ValidationIn,
    memoire_id: int = Path(..., ge=1),
    user: User = Depends(require_roles(Role.ENCADREUR)),
    svc: MemoireService = Depends(get_memoire_service),
):
    with translate_errors():
        memoire = svc.validate_by_encadreur(memoire_id, payload, user=user)
    return _action("Décision de l'encadreur enregistrée", memoire)


@router.post(
    "/{memoire_id}/validation-admin",
    summary="Validation finale (admin)",
    response_model=MemoireActionOut,
)
def validation_admin(
    payload: ValidationIn,
    memoire_id: int = Path(..., ge=1),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: MemoireService = Depends(get_memoire_service),
):
    with translate_errors():
        memoire = svc.validate_by_admin(memoire_id, payload)
    return _action("Décision de l'administration enregistrée", memoire)
