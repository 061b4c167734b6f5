"""
➡️ But : Définir les formats d'entrée/sortie de l'API (couche validation).

UserCreateIn → création d'un compte par un admin
UserUpdateIn → mise à jour (admin)
ProfileUpdateIn / ChangePasswordIn → self-service
UserOut → réponse de l'API (jamais le hash du mot de passe)
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gestion_memoire.db.models.enums import Role
from gestion_memoire.features.validators import reject_null


class UserCreateIn(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=128)
    nom: str = Field(min_length=1, max_length=120)
    prenom: str = Field(min_length=1, max_length=120)
    role: Role
    specialite: Optional[str] = None
    matricule: Optional[str] = None
    telephone: Optional[str] = None


class UserUpdateIn(BaseModel):
    email: Optional[str] = None
    nom: Optional[str] = None
    prenom: Optional[str] = None
    telephone: Optional[str] = None
    role: Optional[Role] = None
    specialite: Optional[str] = None
    matricule: Optional[str] = None

    @field_validator("email", "nom", "prenom", "role")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class ProfileUpdateIn(BaseModel):
    nom: Optional[str] = None
    prenom: Optional[str] = None
    telephone: Optional[str] = None
    specialite: Optional[str] = None
    matricule: Optional[str] = None

    @field_validator("nom", "prenom")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class ChangePasswordIn(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    nom: str
    prenom: str
    role: Role
    specialite: Optional[str] = None
    matricule: Optional[str] = None
    telephone: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserSummaryOut(BaseModel):
    """Projection courte d'un utilisateur, imbriquée dans les autres réponses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    nom: str
    prenom: str
    email: Optional[str] = None
    specialite: Optional[str] = None
    matricule: Optional[str] = None
    telephone: Optional[str] = None


class PaginationOut(BaseModel):
    total: int
    pages: int
    current_page: int
    per_page: int


class UserListOut(BaseModel):
    users: List[UserOut]
    pagination: PaginationOut


class EtudiantListOut(BaseModel):
    etudiants: List[UserSummaryOut]
    pagination: PaginationOut


class MessageOut(BaseModel):
    message: str


class ProfileOut(BaseModel):
    message: str
    user: UserOut
