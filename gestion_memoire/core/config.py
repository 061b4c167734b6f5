"""
➡️ But : Centraliser tous les paramètres configurables (nom d'app, chemin DB, secrets, uploads...).

Utilise pydantic-settings pour charger automatiquement les variables d'environnement (.env, variables système…).

Fournit un objet settings unique, que tu importes ailleurs :

from gestion_memoire.core.config import settings
print(settings.APP_NAME)
"""

from datetime import timedelta
from typing import List, Optional

from pydantic_settings import BaseSettings
from gestion_memoire.security.tokens import JWTSettings

DEFAULT_JWT_SECRET = "CHANGE_ME"


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "Gestion Memoire API"
    ENV: str = "dev"  # dev | prod | test
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:8080"]

    # -----------------------------
    # DB
    # -----------------------------
    SQLITE_PATH: str = "gestion_memoire.db"
    # Si tu veux forcer une URL différente (ex: Postgres), définis DATABASE_URL dans l'env.
    DATABASE_URL: Optional[str] = None

    # -----------------------------
    # JWT / Auth
    # -----------------------------
    JWT_SECRET_KEY: str = DEFAULT_JWT_SECRET     # ⚠️ change en prod
    JWT_ISSUER: str = "gestion-memoire"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TTL_MINUTES: int = 24 * 60

    # Cookie (token httpOnly posé au login)
    AUTH_COOKIE_NAME: str = "token"
    AUTH_COOKIE_SAMESITE: str = "lax"     # "lax" | "strict" | "none"
    AUTH_COOKIE_SECURE: Optional[bool] = None   # auto selon ENV si None

    # -----------------------------
    # Uploads (stockage disque)
    # -----------------------------
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_MB: int = 20

    # -----------------------------
    # Métier
    # -----------------------------
    DEFAULT_SESSION_DURATION: int = 60  # minutes

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    # -----------------------------
    # Post-process values
    # -----------------------------
    def model_post_init(self, __context):  # appelée automatiquement
        # DATABASE_URL par défaut depuis SQLITE_PATH si non fourni
        if not self.DATABASE_URL:
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{self.SQLITE_PATH}")

        # Cookie secure auto: true en prod si non spécifié
        if self.AUTH_COOKIE_SECURE is None:
            object.__setattr__(self, "AUTH_COOKIE_SECURE", self.ENV == "prod")

        if self.ENV == "prod" and self.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
            raise RuntimeError("JWT_SECRET_KEY doit être défini en production")


# Instance globale importable partout
settings = Settings()

# Objet JWT prêt à l'emploi pour les services
jwt_settings = JWTSettings(
    secret=settings.JWT_SECRET_KEY,
    issuer=settings.JWT_ISSUER,
    algorithm=settings.JWT_ALGORITHM,
    access_ttl=timedelta(minutes=settings.ACCESS_TTL_MINUTES),
)
