"""
➡️ But : Contenir la logique métier : orchestrer les repos, appliquer des règles, gérer les erreurs.

UserService : gestion des comptes par l'admin, profil et mot de passe de l'utilisateur courant.
"""

import logging
import math
from typing import Optional

from gestion_memoire.db.models.enums import Role
from gestion_memoire.db.models.users import User
from gestion_memoire.db.repositories.users import UserRepository
from gestion_memoire.features.errors import ConflictError, InvalidTransitionError
from gestion_memoire.features.users.schemas import (
    ChangePasswordIn,
    EtudiantListOut,
    PaginationOut,
    ProfileUpdateIn,
    UserCreateIn,
    UserListOut,
    UserOut,
    UserSummaryOut,
    UserUpdateIn,
)
from gestion_memoire.security.password import hash_password, verify_password

logger = logging.getLogger(__name__)


def check_role_fields(role: Role, *, specialite: Optional[str], matricule: Optional[str]) -> None:
    """Champs obligatoires selon le rôle (inscription et création par l'admin)."""
    if role == Role.ENCADREUR and not specialite:
        raise InvalidTransitionError("La spécialité est requise pour un encadreur")
    if role == Role.ETUDIANT and not matricule:
        raise InvalidTransitionError("Le matricule est requis pour un étudiant")


def _pagination(total: int, page: int, limit: int) -> PaginationOut:
    return PaginationOut(
        total=total,
        pages=math.ceil(total / limit) if limit else 0,
        current_page=page,
        per_page=limit,
    )


class UserService:
    def __init__(self, repo: UserRepository):
        self.repo = repo

    def get(self, user_id: int) -> User:
        user = self.repo.get(user_id)
        if not user:
            raise LookupError("Utilisateur non trouvé")
        return user

    # ---------- Création (inscription + admin) ----------
    def create(self, payload: UserCreateIn) -> User:
        email = payload.email.strip().lower()
        if self.repo.get_by_email(email):
            raise ConflictError("Cet email est déjà utilisé")
        check_role_fields(payload.role, specialite=payload.specialite, matricule=payload.matricule)

        user = self.repo.create(
            email=email,
            hashed_password=hash_password(payload.password),
            nom=payload.nom,
            prenom=payload.prenom,
            role=payload.role,
            specialite=payload.specialite if payload.role == Role.ENCADREUR else None,
            matricule=payload.matricule if payload.role == Role.ETUDIANT else None,
            telephone=payload.telephone,
        )
        logger.info("Utilisateur créé id=%s role=%s", user.id, user.role.value)
        return user

    # ---------- Self-service ----------
    def update_profile(self, user_id: int, payload: ProfileUpdateIn) -> User:
        user = self.get(user_id)
        changes = payload.model_dump(exclude_unset=True, exclude={"specialite", "matricule"})
        if user.role == Role.ENCADREUR and payload.specialite:
            changes["specialite"] = payload.specialite
        if user.role == Role.ETUDIANT and payload.matricule:
            changes["matricule"] = payload.matricule
        return self.repo.update(user, **changes)

    def change_password(self, user_id: int, payload: ChangePasswordIn) -> None:
        user = self.get(user_id)
        if not verify_password(payload.current_password, user.hashed_password):
            raise InvalidTransitionError("Mot de passe actuel incorrect")
        self.repo.update(user, hashed_password=hash_password(payload.new_password))

    # ---------- Listes ----------
    def list(self, *, role: Optional[Role], page: int, limit: int) -> UserListOut:
        users, total = self.repo.list_by_role(role, offset=(page - 1) * limit, limit=limit)
        return UserListOut(
            users=[UserOut.model_validate(u) for u in users],
            pagination=_pagination(total, page, limit),
        )

    def list_encadreurs(self):
        users, _ = self.repo.list_by_role(Role.ENCADREUR, order_by_name=True)
        return [UserSummaryOut.model_validate(u) for u in users]

    def list_etudiants(self, *, page: int, limit: int) -> EtudiantListOut:
        users, total = self.repo.list_by_role(
            Role.ETUDIANT, offset=(page - 1) * limit, limit=limit, order_by_name=True
        )
        return EtudiantListOut(
            etudiants=[UserSummaryOut.model_validate(u) for u in users],
            pagination=_pagination(total, page, limit),
        )

    # ---------- Admin ----------
    def update(self, user_id: int, payload: UserUpdateIn) -> User:
        user = self.get(user_id)
        changes = payload.model_dump(exclude_unset=True)
        if "email" in changes and changes["email"] is not None:
            email = changes["email"].strip().lower()
            existing = self.repo.get_by_email(email)
            if existing and existing.id != user.id:
                raise ConflictError("Cet email est déjà utilisé")
            changes["email"] = email

        role = changes.get("role") or user.role
        if role != Role.ENCADREUR:
            changes["specialite"] = None
        if role != Role.ETUDIANT:
            changes["matricule"] = None
        check_role_fields(
            role,
            specialite=changes.get("specialite", user.specialite),
            matricule=changes.get("matricule", user.matricule),
        )
        return self.repo.update(user, **changes)

    def delete(self, user_id: int, *, current_user_id: int) -> None:
        if user_id == current_user_id:
            raise InvalidTransitionError("Vous ne pouvez pas supprimer votre propre compte")
        user = self.get(user_id)
        if self.repo.is_linked_to_memoire(user.id):
            raise InvalidTransitionError("Impossible de supprimer un utilisateur lié à un mémoire")
        self.repo.delete(user)
        logger.info("Utilisateur supprimé id=%s", user_id)
