"""
➡️ But : Encapsuler toutes les opérations de base de données.

UserRepository : CRUD (create, read, update, delete) sur la table User.

Ne contient aucune logique métier, juste de la persistance.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Optional, Sequence, Tuple
from sqlmodel import select, func, or_

from gestion_memoire.db.repositories.base import BaseRepository
from gestion_memoire.db.models.users import User
from gestion_memoire.db.models.memoires import Memoire
from gestion_memoire.db.models.enums import Role

class UserRepository(BaseRepository[User]):
    """
    Repository pour la table User.
    Hérite du CRUD générique de BaseRepository.
    Contient uniquement les requêtes spécifiques à User.
    """
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        """Retourne un utilisateur par son email (insensible à la casse)."""
        return self.session.exec(
            select(self.model).where(func.lower(self.model.email) == email.strip().lower())
        ).first()

    def get_many(self, ids: Iterable[int]) -> Dict[int, User]:
        """Charge plusieurs utilisateurs d'un coup, indexés par id."""
        ids = {i for i in ids if i is not None}
        if not ids:
            return {}
        rows = self.session.exec(select(self.model).where(self.model.id.in_(ids))).all()
        return {u.id: u for u in rows}

    def list_by_role(
        self,
        role: Optional[Role] = None,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
        order_by_name: bool = False,
    ) -> Tuple[Sequence[User], int]:
        """Liste (paginée si limit) + total, filtrée par rôle."""
        stmt = select(self.model)
        count_stmt = select(func.count(self.model.id))
        if role is not None:
            stmt = stmt.where(self.model.role == role)
            count_stmt = count_stmt.where(self.model.role == role)

        if order_by_name:
            stmt = stmt.order_by(self.model.nom.asc(), self.model.prenom.asc())
        else:
            stmt = stmt.order_by(self.model.created_at.desc(), self.model.id.desc())

        stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        return self.session.exec(stmt).all(), int(self.session.exec(count_stmt).one())

    def list_admins(self) -> Sequence[User]:
        return self.session.exec(select(self.model).where(self.model.role == Role.ADMIN)).all()

    def is_linked_to_memoire(self, user_id: int) -> bool:
        stmt = select(func.count(Memoire.id)).where(
            or_(Memoire.etudiant_id == user_id, Memoire.encadreur_id == user_id)
        )
        return int(self.session.exec(stmt).one()) > 0

    def count_students(self, *, start: Optional[datetime] = None, end: Optional[datetime] = None) -> int:
        stmt = select(func.count(self.model.id)).where(self.model.role == Role.ETUDIANT)
        if start is not None:
            stmt = stmt.where(self.model.created_at >= start)
        if end is not None:
            stmt = stmt.where(self.model.created_at <= end)
        return int(self.session.exec(stmt).one())

    def list_recent(
        self, *, limit: int = 5, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Sequence[User]:
        stmt = select(self.model)
        if start is not None:
            stmt = stmt.where(self.model.created_at >= start)
        if end is not None:
            stmt = stmt.where(self.model.created_at <= end)
        return self.session.exec(stmt.order_by(self.model.created_at.desc()).limit(limit)).all()
