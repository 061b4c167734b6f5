"""
➡️ But : assembler toutes les pièces du puzzle.

Crée l'instance FastAPI (app).

Configure :

logs (niveau depuis settings.LOG_LEVEL) + identifiant de requête X-Request-ID

CORS (origines du frontend autorisées, cookies inclus)

gestionnaire d'erreurs global (500 journalisé)

fichiers déposés servis sous /uploads

schéma OpenAPI personnalisé

Inclut les routers (ex : /api/v1/memoires).

Initialise la base au démarrage.

Point unique d'exécution : uvicorn gestion_memoire.main:app --reload.
"""

import logging
import time
import uuid
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from gestion_memoire.api.v1.routers import (
    authentication,
    bibliotheque,
    dashboard,
    jurys,
    memoires,
    notifications,
    paiements,
    session_requests,
    sessions,
    sujets,
    users,
)
from gestion_memoire.core.config import settings
from gestion_memoire.core.logging import configure_logging
from gestion_memoire.core.openapi import custom_openapi
from gestion_memoire.db.session import init_db

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("gestion_memoire.api")

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    openapi_tags=[
        {"name": "auth", "description": "Inscription, connexion, utilisateur courant"},
        {"name": "users", "description": "Profil et gestion des comptes"},
        {"name": "sujets", "description": "Sujets proposés par les encadreurs"},
        {"name": "memoires", "description": "Mémoires, documents, dépôt final et validations"},
        {"name": "sessions", "description": "Sessions d'encadrement et visas"},
        {"name": "session-requests", "description": "Demandes de session des étudiants"},
        {"name": "jurys", "description": "Jurys de soutenance"},
        {"name": "paiements", "description": "Paiements des frais"},
        {"name": "notifications", "description": "Notifications de l'utilisateur courant"},
        {"name": "bibliotheque", "description": "Mémoires soutenus et publiés"},
        {"name": "dashboard", "description": "Tableau de bord administrateur"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS, allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-ID"] = req_id
    logger.info(
        "%s %s -> %s (%.1f ms) request_id=%s",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000.0,
        req_id,
    )
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Erreur non gérée sur %s %s request_id=%s",
        request.method,
        request.url.path,
        getattr(request.state, "request_id", ""),
    )
    return JSONResponse(status_code=500, content={"detail": "Erreur interne du serveur"})


# Fichiers déposés (documents, versions finales)
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# Routers
app.include_router(authentication.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(sujets.router, prefix="/api/v1")
app.include_router(memoires.router, prefix="/api/v1")
app.include_router(sessions.router, prefix="/api/v1")
app.include_router(session_requests.router, prefix="/api/v1")
app.include_router(jurys.router, prefix="/api/v1")
app.include_router(paiements.router, prefix="/api/v1")
app.include_router(notifications.router, prefix="/api/v1")
app.include_router(bibliotheque.router, prefix="/api/v1")
app.include_router(dashboard.router, prefix="/api/v1")

app.openapi = lambda: custom_openapi(app)


@app.get("/", include_in_schema=False)
def root():
    return {"message": "Bienvenue sur l'API de gestion des mémoires"}


# Démarrage
@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("Base initialisée (%s)", settings.ENV)


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=3000, reload=(settings.ENV == "dev"))
