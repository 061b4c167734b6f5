import os
import tempfile

# Configuration de test, avant tout import de l'application
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="gestion-memoire-uploads-"))

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from gestion_memoire.core.config import jwt_settings
from gestion_memoire.db.models.enums import MemoireStatus, Role, SujetStatus
from gestion_memoire.db.models.memoires import Memoire
from gestion_memoire.db.models.sujets import Sujet
from gestion_memoire.db.models.users import User
from gestion_memoire.db.session import engine
from gestion_memoire.main import app
from gestion_memoire.security.password import hash_password
from gestion_memoire.security.tokens import create_access_token

PASSWORD = "password123"
PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n%%EOF\n"


@pytest.fixture(autouse=True)
def reset_db():
    """Base SQLite en mémoire recréée pour chaque test."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


def _persist(entity):
    with Session(engine) as session:
        session.add(entity)
        session.commit()
        session.refresh(entity)
    return entity


@pytest.fixture
def make_user():
    counter = {"n": 0}

    def _make(role: Role, **fields) -> User:
        counter["n"] += 1
        n = counter["n"]
        defaults = {
            "email": f"{role.value.lower()}{n}@isi.edu",
            "hashed_password": hash_password(PASSWORD),
            "nom": f"Nom{n}",
            "prenom": f"Prenom{n}",
            "role": role,
        }
        if role == Role.ENCADREUR:
            defaults["specialite"] = "Intelligence Artificielle"
        if role == Role.ETUDIANT:
            defaults["matricule"] = f"ISI2024{n:03d}"
        defaults.update(fields)
        return _persist(User(**defaults))

    return _make


@pytest.fixture
def auth():
    def _headers(user: User) -> dict:
        token = create_access_token(user_id=user.id, role=user.role.value, settings=jwt_settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN, email="admin@isi.edu")


@pytest.fixture
def encadreur(make_user):
    return make_user(Role.ENCADREUR, email="encadreur@isi.edu")


@pytest.fixture
def etudiant(make_user):
    return make_user(Role.ETUDIANT, email="etudiant@isi.edu")


@pytest.fixture
def make_sujet():
    def _make(encadreur: User, status: SujetStatus = SujetStatus.VALIDE, **fields) -> Sujet:
        defaults = {
            "titre": "Système de recommandation",
            "description": "Recommandation par apprentissage profond",
            "mots_cles": ["IA", "Recommandation"],
            "status": status,
            "encadreur_id": encadreur.id,
        }
        defaults.update(fields)
        return _persist(Sujet(**defaults))

    return _make


@pytest.fixture
def make_memoire():
    def _make(etudiant: User, sujet: Sujet, status: MemoireStatus = MemoireStatus.EN_COURS, **fields) -> Memoire:
        defaults = {
            "titre": sujet.titre,
            "description": sujet.description,
            "mots_cles": list(sujet.mots_cles),
            "status": status,
            "etudiant_id": etudiant.id,
            "encadreur_id": sujet.encadreur_id,
            "sujet_id": sujet.id,
        }
        defaults.update(fields)
        return _persist(Memoire(**defaults))

    return _make


@pytest.fixture
def sujet(make_sujet, encadreur):
    return make_sujet(encadreur)


@pytest.fixture
def memoire(client, auth, etudiant, sujet):
    """Mémoire EN_COURS obtenu par réservation du sujet (historique + notification compris)."""
    r = client.post(f"/api/v1/sujets/{sujet.id}/reserve", headers=auth(etudiant))
    assert r.status_code == 201, r.text
    return r.json()["memoire"]
