from gestion_memoire.db.models.enums import Role

from conftest import PASSWORD


def test_update_profile_only_touches_role_fields_that_apply(client, auth, etudiant):
    r = client.put("/api/v1/users/profile", headers=auth(etudiant), json={
        "telephone": "77000000",
        "matricule": "ISI2024999",
        "specialite": "ignorée",
    })
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Profil mis à jour avec succès"
    assert body["user"]["telephone"] == "77000000"
    assert body["user"]["matricule"] == "ISI2024999"
    assert body["user"]["specialite"] is None


def test_change_password(client, auth, etudiant):
    headers = auth(etudiant)
    r = client.put("/api/v1/users/password", headers=headers, json={
        "current_password": "mauvais",
        "new_password": "nouveau123",
    })
    assert r.status_code == 400
    assert r.json()["detail"] == "Mot de passe actuel incorrect"

    r = client.put("/api/v1/users/password", headers=headers, json={
        "current_password": PASSWORD,
        "new_password": "nouveau123",
    })
    assert r.status_code == 200

    r = client.post("/api/v1/auth/login", json={"email": etudiant.email, "password": "nouveau123"})
    assert r.status_code == 200


def test_admin_lists_users_with_pagination(client, auth, admin, make_user):
    for _ in range(3):
        make_user(Role.ETUDIANT)
    make_user(Role.ENCADREUR)

    r = client.get("/api/v1/users", headers=auth(admin), params={"role": "ETUDIANT", "page": 1, "limit": 2})
    assert r.status_code == 200
    body = r.json()
    assert len(body["users"]) == 2
    assert body["pagination"] == {"total": 3, "pages": 2, "current_page": 1, "per_page": 2}
    assert all(u["role"] == "ETUDIANT" for u in body["users"])


def test_encadreurs_and_etudiants_listings(client, auth, admin, make_user):
    make_user(Role.ENCADREUR, nom="Zeroual", specialite="Réseaux")
    make_user(Role.ENCADREUR, nom="Amrani", specialite="Blockchain")
    student = make_user(Role.ETUDIANT)
    encadreur = make_user(Role.ENCADREUR, nom="Benali")

    r = client.get("/api/v1/users/encadreurs", headers=auth(student))
    assert r.status_code == 200
    assert [u["nom"] for u in r.json()] == ["Amrani", "Benali", "Zeroual"]

    r = client.get("/api/v1/users/etudiants", headers=auth(encadreur))
    assert r.status_code == 200
    assert r.json()["pagination"]["total"] == 1
    assert r.json()["etudiants"][0]["matricule"] == student.matricule

    # un encadreur ne liste pas les encadreurs, un étudiant ne liste pas les étudiants
    assert client.get("/api/v1/users/encadreurs", headers=auth(encadreur)).status_code == 403
    assert client.get("/api/v1/users/etudiants", headers=auth(student)).status_code == 403


def test_admin_crud(client, auth, admin):
    headers = auth(admin)
    r = client.post("/api/v1/users", headers=headers, json={
        "email": "sonia.mahmoud@isi.edu",
        "password": "secret123",
        "nom": "Mahmoud",
        "prenom": "Sonia",
        "role": "ENCADREUR",
        "specialite": "Cybersécurité",
    })
    assert r.status_code == 201, r.text
    user_id = r.json()["id"]

    r = client.get(f"/api/v1/users/{user_id}", headers=headers)
    assert r.status_code == 200
    assert r.json()["specialite"] == "Cybersécurité"

    # passage en étudiant : la spécialité disparaît, le matricule devient obligatoire
    r = client.put(f"/api/v1/users/{user_id}", headers=headers, json={"role": "ETUDIANT"})
    assert r.status_code == 400
    r = client.put(f"/api/v1/users/{user_id}", headers=headers, json={"role": "ETUDIANT", "matricule": "ISI2024050"})
    assert r.status_code == 200
    assert r.json()["specialite"] is None
    assert r.json()["matricule"] == "ISI2024050"

    r = client.delete(f"/api/v1/users/{user_id}", headers=headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Utilisateur supprimé avec succès"
    assert client.get(f"/api/v1/users/{user_id}", headers=headers).status_code == 404


def test_admin_update_rejects_taken_email(client, auth, admin, encadreur, etudiant):
    r = client.put(f"/api/v1/users/{etudiant.id}", headers=auth(admin), json={"email": encadreur.email})
    assert r.status_code == 400
    assert r.json()["detail"] == "Cet email est déjà utilisé"


def test_admin_cannot_delete_self_or_linked_user(client, auth, admin, etudiant, memoire):
    headers = auth(admin)
    r = client.delete(f"/api/v1/users/{admin.id}", headers=headers)
    assert r.status_code == 400

    r = client.delete(f"/api/v1/users/{etudiant.id}", headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Impossible de supprimer un utilisateur lié à un mémoire"


def test_unknown_user_is_404(client, auth, admin):
    r = client.get("/api/v1/users/9999", headers=auth(admin))
    assert r.status_code == 404
    assert r.json()["detail"] == "Utilisateur non trouvé"


def test_profile_and_admin_update_reject_null_names(client, auth, admin, etudiant):
    for field in ("nom", "prenom"):
        r = client.put("/api/v1/users/profile", headers=auth(etudiant), json={field: None})
        assert r.status_code == 422, field

    for field in ("email", "nom", "prenom", "role"):
        r = client.put(f"/api/v1/users/{etudiant.id}", headers=auth(admin), json={field: None})
        assert r.status_code == 422, field

    r = client.put("/api/v1/users/profile", headers=auth(etudiant), json={"telephone": None})
    assert r.status_code == 200
    assert r.json()["user"]["nom"] == etudiant.nom
