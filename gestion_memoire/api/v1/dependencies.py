"""
➡️ But : Centraliser les dépendances réutilisables des routes.

Exemples :

get_memoire_service() : crée un MemoireService (repos + notifier) à partir d'une session DB.

get_current_user() : lit le token (header Bearer ou cookie) et charge l'utilisateur.

require_roles(Role.ADMIN, ...) : garde de rôle → 403 si le rôle n'est pas autorisé.

pagination() : paramètres communs page et limit.

translate_errors() : exceptions métier → HTTPException.
"""

from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from fastapi import Cookie, Depends, HTTPException, Query, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from gestion_memoire.core.config import jwt_settings, settings
from gestion_memoire.db.models.enums import Role
from gestion_memoire.db.models.users import User
from gestion_memoire.db.session import get_session

from gestion_memoire.db.repositories.documents import DocumentRepository
from gestion_memoire.db.repositories.juries import JuryRepository
from gestion_memoire.db.repositories.memoires import HistoriqueRepository, MemoireRepository
from gestion_memoire.db.repositories.notifications import NotificationRepository
from gestion_memoire.db.repositories.paiements import PaiementRepository
from gestion_memoire.db.repositories.session_requests import SessionRequestRepository
from gestion_memoire.db.repositories.sessions import SessionRepository
from gestion_memoire.db.repositories.sujets import SujetRepository
from gestion_memoire.db.repositories.users import UserRepository

from gestion_memoire.features.authentication.services import AuthService
from gestion_memoire.features.bibliotheque.services import BibliothequeService
from gestion_memoire.features.dashboard.services import DashboardService
from gestion_memoire.features.errors import ConflictError, InvalidTransitionError, PermissionError
from gestion_memoire.features.juries.services import JuryService
from gestion_memoire.features.memoires.services import MemoireService
from gestion_memoire.features.notifications.services import NotificationService, Notifier
from gestion_memoire.features.paiements.services import PaiementService
from gestion_memoire.features.session_requests.services import SessionRequestService
from gestion_memoire.features.sessions.services import SessionService
from gestion_memoire.features.sujets.services import SujetService
from gestion_memoire.features.users.services import UserService


def pagination(
    page: int = Query(1, ge=1, description="Numéro de page", examples=[1]),
    limit: int = Query(10, ge=1, le=100, description="Taille de page", examples=[10]),
):
    return {"page": page, "limit": limit}


@contextmanager
def translate_errors() -> Iterator[None]:
    """Traduit les exceptions métier levées par les services en réponses HTTP."""
    try:
        yield
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc) or "Accès non autorisé")
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc).strip("'\"") or "Non trouvé")
    except (InvalidTransitionError, ConflictError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


# -----------------------------
# Repositories
# -----------------------------
def get_user_repository(session: Session = Depends(get_session)) -> UserRepository:
    return UserRepository(session)

def get_sujet_repository(session: Session = Depends(get_session)) -> SujetRepository:
    return SujetRepository(session)

def get_memoire_repository(session: Session = Depends(get_session)) -> MemoireRepository:
    return MemoireRepository(session)

def get_historique_repository(session: Session = Depends(get_session)) -> HistoriqueRepository:
    return HistoriqueRepository(session)

def get_document_repository(session: Session = Depends(get_session)) -> DocumentRepository:
    return DocumentRepository(session)

def get_session_repository(session: Session = Depends(get_session)) -> SessionRepository:
    return SessionRepository(session)

def get_session_request_repository(session: Session = Depends(get_session)) -> SessionRequestRepository:
    return SessionRequestRepository(session)

def get_jury_repository(session: Session = Depends(get_session)) -> JuryRepository:
    return JuryRepository(session)

def get_paiement_repository(session: Session = Depends(get_session)) -> PaiementRepository:
    return PaiementRepository(session)

def get_notification_repository(session: Session = Depends(get_session)) -> NotificationRepository:
    return NotificationRepository(session)


# -----------------------------
# Auth
# -----------------------------
def get_auth_service(user_repo: UserRepository = Depends(get_user_repository)) -> AuthService:
    return AuthService(user_repo=user_repo, jwt_settings=jwt_settings)


bearer_scheme = HTTPBearer(auto_error=False)

def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    token_cookie: Optional[str] = Cookie(default=None, alias=settings.AUTH_COOKIE_NAME),
) -> str:
    """Token depuis `Authorization: Bearer <token>` ou, à défaut, le cookie httpOnly."""
    if credentials and credentials.scheme.lower() == "bearer" and credentials.credentials:
        return credentials.credentials
    if token_cookie:
        return token_cookie
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token manquant")


def get_current_user(
    access_token: str = Depends(get_access_token),
    auth_svc: AuthService = Depends(get_auth_service),
) -> User:
    return auth_svc.get_current_user(access_token=access_token)


def require_roles(*roles: Role) -> Callable[..., User]:
    """
    Garde de rôle :
        user: User = Depends(require_roles(Role.ADMIN, Role.ENCADREUR))
    """
    def _guard(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Accès non autorisé")
        return user
    return _guard


# -----------------------------
# Services
# -----------------------------
def get_notifier(
    repo: NotificationRepository = Depends(get_notification_repository),
    user_repo: UserRepository = Depends(get_user_repository),
) -> Notifier:
    return Notifier(repo=repo, user_repo=user_repo)

def get_notification_service(
    repo: NotificationRepository = Depends(get_notification_repository),
) -> NotificationService:
    return NotificationService(repo)

def get_user_service(user_repo: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(user_repo)

def get_memoire_service(
    repo: MemoireRepository = Depends(get_memoire_repository),
    historique_repo: HistoriqueRepository = Depends(get_historique_repository),
    document_repo: DocumentRepository = Depends(get_document_repository),
    sujet_repo: SujetRepository = Depends(get_sujet_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    jury_repo: JuryRepository = Depends(get_jury_repository),
    notifier: Notifier = Depends(get_notifier),
) -> MemoireService:
    return MemoireService(
        repo=repo,
        historique_repo=historique_repo,
        document_repo=document_repo,
        sujet_repo=sujet_repo,
        user_repo=user_repo,
        jury_repo=jury_repo,
        notifier=notifier,
    )

def get_sujet_service(
    repo: SujetRepository = Depends(get_sujet_repository),
    memoire_repo: MemoireRepository = Depends(get_memoire_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    memoire_svc: MemoireService = Depends(get_memoire_service),
    notifier: Notifier = Depends(get_notifier),
) -> SujetService:
    return SujetService(
        repo=repo,
        memoire_repo=memoire_repo,
        user_repo=user_repo,
        memoire_svc=memoire_svc,
        notifier=notifier,
    )

def get_session_service(
    repo: SessionRepository = Depends(get_session_repository),
    memoire_repo: MemoireRepository = Depends(get_memoire_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    notifier: Notifier = Depends(get_notifier),
) -> SessionService:
    return SessionService(repo=repo, memoire_repo=memoire_repo, user_repo=user_repo, notifier=notifier)

def get_session_request_service(
    repo: SessionRequestRepository = Depends(get_session_request_repository),
    memoire_repo: MemoireRepository = Depends(get_memoire_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    session_svc: SessionService = Depends(get_session_service),
    notifier: Notifier = Depends(get_notifier),
) -> SessionRequestService:
    return SessionRequestService(
        repo=repo,
        memoire_repo=memoire_repo,
        user_repo=user_repo,
        session_svc=session_svc,
        notifier=notifier,
    )

def get_jury_service(
    repo: JuryRepository = Depends(get_jury_repository),
    memoire_repo: MemoireRepository = Depends(get_memoire_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    memoire_svc: MemoireService = Depends(get_memoire_service),
    notifier: Notifier = Depends(get_notifier),
) -> JuryService:
    return JuryService(
        repo=repo,
        memoire_repo=memoire_repo,
        user_repo=user_repo,
        memoire_svc=memoire_svc,
        notifier=notifier,
    )

def get_paiement_service(
    repo: PaiementRepository = Depends(get_paiement_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    notifier: Notifier = Depends(get_notifier),
) -> PaiementService:
    return PaiementService(repo=repo, user_repo=user_repo, notifier=notifier)

def get_bibliotheque_service(
    memoire_repo: MemoireRepository = Depends(get_memoire_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    notifier: Notifier = Depends(get_notifier),
) -> BibliothequeService:
    return BibliothequeService(memoire_repo=memoire_repo, user_repo=user_repo, notifier=notifier)

def get_dashboard_service(
    user_repo: UserRepository = Depends(get_user_repository),
    memoire_repo: MemoireRepository = Depends(get_memoire_repository),
    jury_repo: JuryRepository = Depends(get_jury_repository),
    paiement_repo: PaiementRepository = Depends(get_paiement_repository),
) -> DashboardService:
    return DashboardService(
        user_repo=user_repo,
        memoire_repo=memoire_repo,
        jury_repo=jury_repo,
        paiement_repo=paiement_repo,
    )
