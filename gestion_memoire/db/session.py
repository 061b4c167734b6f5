"""
➡️ But : Configurer la base (SQLite par défaut) et gérer les sessions de base de données.

engine : connexion à la base (settings.DATABASE_URL).

init_db() : crée les tables à partir des modèles SQLModel.

get_session() : dépendance FastAPI qui ouvre une session, la fournit aux routes, puis la ferme proprement.
"""

from typing import Dict, Any
from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

# Import all models for creating all tables
from gestion_memoire.db.models.users import User  # noqa: F401
from gestion_memoire.db.models.sujets import Sujet  # noqa: F401
from gestion_memoire.db.models.memoires import Memoire, HistoriqueMemoireStatus  # noqa: F401
from gestion_memoire.db.models.documents import Document  # noqa: F401
from gestion_memoire.db.models.sessions import SessionEncadrement  # noqa: F401
from gestion_memoire.db.models.session_requests import SessionRequest  # noqa: F401
from gestion_memoire.db.models.juries import Jury  # noqa: F401
from gestion_memoire.db.models.paiements import Paiement  # noqa: F401
from gestion_memoire.db.models.notifications import Notification  # noqa: F401

from gestion_memoire.core.config import settings


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _build_engine() -> Engine:
    url = settings.DATABASE_URL
    assert url, "DATABASE_URL must be set"

    is_sqlite = url.startswith("sqlite:")

    connect_args: Dict[str, Any] = {}
    kwargs: Dict[str, Any] = {}
    if is_sqlite:
        # Requis pour SQLite quand utilisé dans un app serveur (multi-threads)
        connect_args["check_same_thread"] = False
        if _is_memory_sqlite(url):
            # une seule connexion partagée, sinon chaque connexion voit une base vide
            kwargs["poolclass"] = StaticPool

    engine = create_engine(
        url,
        echo=(settings.ENV == "dev" and settings.LOG_LEVEL.upper() == "DEBUG"),
        connect_args=connect_args,
        pool_pre_ping=not is_sqlite,  # ping utile pour Postgres/MySQL ; inutile pour SQLite
        **kwargs,
    )
    return engine

engine: Engine = _build_engine()

def init_db() -> None:
    """
    Crée les tables si elles n'existent pas (usage dev/demo).
    En prod avec Alembic, préfère des migrations.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    Dépendance FastAPI : fournit une session par requête.
    Utilisation :
        def route(..., session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
