"""
➡️ But : Personnaliser la documentation Swagger/OpenAPI.

custom_openapi(app) complète le schéma généré par FastAPI avec une description
des conventions de l'API (auth, erreurs, pagination, dates).
"""

from fastapi.openapi.utils import get_openapi

def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=(
            "API de gestion des mémoires : sujets, mémoires, encadrement, jurys, paiements.\n\n"
            "### Conventions\n"
            "- Authentification : `Authorization: Bearer <token>` ou cookie httpOnly `token` posé au login.\n"
            "- Erreurs : `{\"detail\": \"message\"}` ; 400 règle métier, 401 non authentifié, "
            "403 rôle ou propriétaire, 404 introuvable, 500 erreur interne.\n"
            "- Pagination : query params `page` & `limit`.\n"
            "- Toutes les heures sont en UTC.\n"
        ),
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema
