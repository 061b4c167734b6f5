from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from gestion_memoire.api.v1.dependencies import (
    get_current_user,
    get_user_service,
    pagination,
    require_roles,
    translate_errors,
)
from gestion_memoire.db.models.enums import Role
from gestion_memoire.db.models.users import User
from gestion_memoire.features.users.schemas import (
    ChangePasswordIn,
    EtudiantListOut,
    MessageOut,
    ProfileOut,
    ProfileUpdateIn,
    UserCreateIn,
    UserListOut,
    UserOut,
    UserSummaryOut,
    UserUpdateIn,
)
from gestion_memoire.features.users.services import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"description": "Not Found"}},
)

# -----------------------------
# Self-service
# -----------------------------
@router.put("/profile", summary="Mettre à jour mon profil", response_model=ProfileOut)
def update_profile(
    payload: ProfileUpdateIn,
    user: User = Depends(get_current_user),
    svc: UserService = Depends(get_user_service),
):
    with translate_errors():
        updated = svc.update_profile(user.id, payload)
    return ProfileOut(message="Profil mis à jour avec succès", user=UserOut.model_validate(updated))


@router.put("/password", summary="Changer mon mot de passe", response_model=MessageOut)
def change_password(
    payload: ChangePasswordIn,
    user: User = Depends(get_current_user),
    svc: UserService = Depends(get_user_service),
):
    with translate_errors():
        svc.change_password(user.id, payload)
    return MessageOut(message="Mot de passe modifié avec succès")

# -----------------------------
# Listes
# -----------------------------
@router.get("", summary="Lister les utilisateurs (admin)", response_model=UserListOut)
def list_users(
    role: Optional[Role] = Query(None),
    page_params: dict = Depends(pagination),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: UserService = Depends(get_user_service),
):
    return svc.list(role=role, **page_params)


@router.get("/encadreurs", summary="Lister les encadreurs", response_model=List[UserSummaryOut])
def list_encadreurs(
    _: User = Depends(require_roles(Role.ADMIN, Role.ETUDIANT)),
    svc: UserService = Depends(get_user_service),
):
    return svc.list_encadreurs()


@router.get("/etudiants", summary="Lister les étudiants", response_model=EtudiantListOut)
def list_etudiants(
    page_params: dict = Depends(pagination),
    _: User = Depends(require_roles(Role.ADMIN, Role.ENCADREUR)),
    svc: UserService = Depends(get_user_service),
):
    return svc.list_etudiants(**page_params)

# -----------------------------
# Admin CRUD
# -----------------------------
@router.get("/{user_id}", summary="Récupérer un utilisateur (admin)", response_model=UserOut)
def get_user(
    user_id: int = Path(..., ge=1),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: UserService = Depends(get_user_service),
):
    with translate_errors():
        return svc.get(user_id)


@router.post(
    "",
    summary="Créer un utilisateur (admin)",
    status_code=status.HTTP_201_CREATED,
    response_model=UserOut,
)
def create_user(
    payload: UserCreateIn,
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: UserService = Depends(get_user_service),
):
    with translate_errors():
        return svc.create(payload)


@router.put("/{user_id}", summary="Modifier un utilisateur (admin)", response_model=UserOut)
def update_user(
    payload: UserUpdateIn,
    user_id: int = Path(..., ge=1),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: UserService = Depends(get_user_service),
):
    with translate_errors():
        return svc.update(user_id, payload)


@router.delete("/{user_id}", summary="Supprimer un utilisateur (admin)", response_model=MessageOut)
def delete_user(
    user_id: int = Path(..., ge=1),
    admin: User = Depends(require_roles(Role.ADMIN)),
    svc: UserService = Depends(get_user_service),
):
    with translate_errors():
        svc.delete(user_id, current_user_id=admin.id)
    return MessageOut(message="Utilisateur supprimé avec succès")
