from fastapi import APIRouter, Depends, Response, status

from gestion_memoire.api.v1.dependencies import get_auth_service, get_current_user, translate_errors
from gestion_memoire.core.config import settings
from gestion_memoire.db.models.users import User
from gestion_memoire.features.authentication.schemas import LoginIn, LoginOut, RegisterIn, RegisterOut
from gestion_memoire.features.authentication.services import AuthService
from gestion_memoire.features.users.schemas import UserOut

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses={401: {"description": "Non authentifié"}},
)

# -----------------------------
# Register
# -----------------------------
@router.post(
    "/register",
    summary="Créer un compte (encadreur ou étudiant)",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterOut,
)
def register(payload: RegisterIn, svc: AuthService = Depends(get_auth_service)):
    with translate_errors():
        user = svc.register(payload)
    return RegisterOut(message="Utilisateur créé avec succès", user=UserOut.model_validate(user))

# -----------------------------
# Login
# -----------------------------
@router.post(
    "/login",
    summary="Se connecter",
    description="Retourne un access token. Il est aussi posé en cookie httpOnly.",
    response_model=LoginOut,
)
def login(payload: LoginIn, response: Response, svc: AuthService = Depends(get_auth_service)):
    out = svc.login(payload)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=out.token,
        httponly=True,
        samesite=settings.AUTH_COOKIE_SAMESITE,
        secure=settings.AUTH_COOKIE_SECURE,
        max_age=out.expires_in,
        path="/",
    )
    return out

# -----------------------------
# Me (profil courant)
# -----------------------------
@router.get(
    "/me",
    summary="Récupérer l'utilisateur courant",
    response_model=UserOut,
)
def me(user: User = Depends(get_current_user)):
    return user

# -----------------------------
# Logout
# -----------------------------
@router.post(
    "/logout",
    summary="Se déconnecter (suppression du cookie)",
    status_code=status.HTTP_204_NO_CONTENT,
)
def logout(response: Response):
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME, path="/")
    return None
