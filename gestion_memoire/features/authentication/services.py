import logging

from fastapi import HTTPException, status
from jose import JWTError

from gestion_memoire.db.models.enums import Role
from gestion_memoire.db.models.users import User
from gestion_memoire.db.repositories.users import UserRepository
from gestion_memoire.features.authentication.schemas import LoginIn, LoginOut, RegisterIn
from gestion_memoire.features.errors import InvalidTransitionError
from gestion_memoire.features.users.schemas import UserCreateIn, UserOut
from gestion_memoire.features.users.services import UserService
from gestion_memoire.security.password import verify_password
from gestion_memoire.security.tokens import JWTSettings, create_access_token, decode_token

logger = logging.getLogger(__name__)


class AuthService:
    """
    Service d'authentification : orchestre le repository utilisateur + les tokens.
    Les échecs d'authentification lèvent directement des HTTPException 401.
    """

    def __init__(self, *, user_repo: UserRepository, jwt_settings: JWTSettings):
        self.user_repo = user_repo
        self.jwt = jwt_settings

    # ---------- Inscription ----------
    def register(self, payload: RegisterIn) -> User:
        # l'inscription publique ne crée jamais d'administrateur
        if payload.role not in (Role.ENCADREUR, Role.ETUDIANT):
            raise InvalidTransitionError("Rôle invalide")
        return UserService(self.user_repo).create(UserCreateIn(**payload.model_dump()))

    # ---------- Connexion ----------
    def login(self, payload: LoginIn) -> LoginOut:
        user = self.user_repo.get_by_email(payload.email)
        if not user or not verify_password(payload.password, user.hashed_password):
            # Ne pas révéler si l'utilisateur existe
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Email ou mot de passe incorrect",
            )

        token = create_access_token(user_id=user.id, role=user.role.value, settings=self.jwt)
        logger.info("Connexion user=%s role=%s", user.id, user.role.value)
        return LoginOut(
            message="Connexion réussie",
            token=token,
            token_type="bearer",
            expires_in=int(self.jwt.access_ttl.total_seconds()),
            user=UserOut.model_validate(user),
        )

    # ---------- Utilisateur courant depuis le token ----------
    def get_current_user(self, *, access_token: str) -> User:
        try:
            decoded = decode_token(access_token, self.jwt)
        except JWTError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token invalide")

        if decoded.get("typ") != "access":
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token invalide")

        try:
            user_id = int(decoded["sub"])
        except (KeyError, TypeError, ValueError):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token invalide")

        user = self.user_repo.get(user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Utilisateur non trouvé")
        return user
