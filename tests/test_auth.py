from gestion_memoire.db.models.enums import Role

from conftest import PASSWORD


def test_register_login_and_me(client):
    r = client.post("/api/v1/auth/register", json={
        "email": "Amine.Trabelsi@isi.edu",
        "password": "secret123",
        "nom": "Trabelsi",
        "prenom": "Amine",
        "role": "ETUDIANT",
        "matricule": "ISI2024001",
        "specialite": "ignorée pour un étudiant",
    })
    assert r.status_code == 201, r.text
    user = r.json()["user"]
    assert user["email"] == "amine.trabelsi@isi.edu"
    assert user["matricule"] == "ISI2024001"
    assert user["specialite"] is None
    assert "hashed_password" not in user

    r = client.post("/api/v1/auth/login", json={"email": "amine.trabelsi@isi.edu", "password": "secret123"})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Connexion réussie"
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 24 * 3600
    assert r.cookies.get("token") == body["token"]

    r = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert r.status_code == 200
    assert r.json()["role"] == "ETUDIANT"


def test_cookie_is_accepted_and_cleared_on_logout(client, etudiant):
    r = client.post("/api/v1/auth/login", json={"email": etudiant.email, "password": PASSWORD})
    assert r.status_code == 200

    # le client renvoie le cookie httpOnly posé au login
    assert client.get("/api/v1/auth/me").status_code == 200

    r = client.post("/api/v1/auth/logout")
    assert r.status_code == 204
    client.cookies.clear()
    assert client.get("/api/v1/auth/me").status_code == 401


def test_register_rejects_duplicate_email(client, encadreur):
    r = client.post("/api/v1/auth/register", json={
        "email": encadreur.email.upper(),
        "password": "secret123",
        "nom": "Doublon",
        "prenom": "Test",
        "role": "ENCADREUR",
        "specialite": "Réseaux",
    })
    assert r.status_code == 400
    assert r.json()["detail"] == "Cet email est déjà utilisé"


def test_register_requires_role_fields(client):
    r = client.post("/api/v1/auth/register", json={
        "email": "sans.specialite@isi.edu",
        "password": "secret123",
        "nom": "Sans",
        "prenom": "Specialite",
        "role": "ENCADREUR",
    })
    assert r.status_code == 400


def test_register_cannot_create_admin(client):
    r = client.post("/api/v1/auth/register", json={
        "email": "pirate@isi.edu",
        "password": "secret123",
        "nom": "Pirate",
        "prenom": "Admin",
        "role": "ADMIN",
    })
    assert r.status_code == 400
    assert r.json()["detail"] == "Rôle invalide"


def test_login_with_bad_credentials(client, etudiant):
    r = client.post("/api/v1/auth/login", json={"email": etudiant.email, "password": "wrong-password"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Email ou mot de passe incorrect"

    r = client.post("/api/v1/auth/login", json={"email": "inconnu@isi.edu", "password": PASSWORD})
    assert r.status_code == 401
    assert r.json()["detail"] == "Email ou mot de passe incorrect"


def test_protected_routes_require_a_valid_token(client):
    r = client.get("/api/v1/auth/me")
    assert r.status_code == 401
    assert r.json()["detail"] == "Token manquant"

    r = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Token invalide"


def test_role_guard_returns_403(client, auth, etudiant):
    r = client.get("/api/v1/users", headers=auth(etudiant))
    assert r.status_code == 403
    assert r.json()["detail"] == "Accès non autorisé"


def test_token_of_deleted_user_is_rejected(client, auth, make_user, admin):
    ghost = make_user(Role.ENCADREUR)
    headers = auth(ghost)
    assert client.delete(f"/api/v1/users/{ghost.id}", headers=auth(admin)).status_code == 200

    r = client.get("/api/v1/auth/me", headers=headers)
    assert r.status_code == 401
    assert r.json()["detail"] == "Utilisateur non trouvé"


def test_responses_carry_a_request_id(client):
    r = client.get("/", headers={"X-Request-ID": "abc123"})
    assert r.status_code == 200
    assert r.headers["X-Request-ID"] == "abc123"
