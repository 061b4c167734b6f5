from typing import Optional

from pydantic import BaseModel, Field

from gestion_memoire.db.models.enums import Role
from gestion_memoire.features.users.schemas import UserOut

# ---------- Inputs ----------

class RegisterIn(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=128)
    nom: str = Field(min_length=1, max_length=120)
    prenom: str = Field(min_length=1, max_length=120)
    role: Role
    specialite: Optional[str] = None
    matricule: Optional[str] = None
    telephone: Optional[str] = None

class LoginIn(BaseModel):
    email: str
    password: str


# ---------- Outputs ----------

class RegisterOut(BaseModel):
    message: str
    user: UserOut

class LoginOut(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    expires_in: int  # secondes
    user: UserOut
