"""
➡️ But : Définir la structure des tables de la base (ORM).

Représente les comptes : administrateurs, encadreurs et étudiants (une seule table, rôle en colonne).
"""

from typing import Optional

from sqlmodel import Field

from .base import BaseModelDB
from .enums import Role


class User(BaseModelDB, table=True):
    email: str = Field(index=True, unique=True)
    hashed_password: str
    nom: str
    prenom: str
    role: Role = Field(index=True)

    specialite: Optional[str] = None   # encadreur
    matricule: Optional[str] = None    # étudiant
    telephone: Optional[str] = None
