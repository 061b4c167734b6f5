from typing import Sequence
from sqlmodel import select

from gestion_memoire.db.repositories.base import BaseRepository
from gestion_memoire.db.models.documents import Document


class DocumentRepository(BaseRepository[Document]):
    model = Document

    def list_for_memoire(self, memoire_id: int) -> Sequence[Document]:
        return self.session.exec(
            select(Document)
            .where(Document.memoire_id == memoire_id)
            .order_by(Document.created_at.asc(), Document.id.asc())
        ).all()
