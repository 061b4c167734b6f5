from gestion_memoire.db.models.enums import Role, SujetStatus


def test_encadreur_proposes_and_admin_validates(client, auth, admin, encadreur):
    r = client.post("/api/v1/sujets", headers=auth(encadreur), json={
        "titre": "Blockchain et Cryptomonnaies",
        "description": "Paiement décentralisé",
        "mots_cles": ["Blockchain", "DeFi"],
    })
    assert r.status_code == 201, r.text
    sujet = r.json()
    assert sujet["status"] == "EN_ATTENTE"
    assert sujet["encadreur_id"] == encadreur.id
    assert sujet["date_validation"] is None

    r = client.patch(f"/api/v1/sujets/{sujet['id']}/status", headers=auth(admin), json={"status": "VALIDE"})
    assert r.status_code == 200
    assert r.json()["status"] == "VALIDE"
    assert r.json()["date_validation"] is not None

    notifs = client.get("/api/v1/notifications", headers=auth(encadreur)).json()
    assert notifs[0]["titre"] == "Statut du sujet"

    r = client.patch(f"/api/v1/sujets/{sujet['id']}/status", headers=auth(admin), json={"status": "REJETE"})
    assert r.json()["date_validation"] is None


def test_only_admin_changes_status(client, auth, encadreur, sujet):
    r = client.patch(f"/api/v1/sujets/{sujet.id}/status", headers=auth(encadreur), json={"status": "VALIDE"})
    assert r.status_code == 403


def test_students_cannot_propose(client, auth, etudiant):
    r = client.post("/api/v1/sujets", headers=auth(etudiant), json={"titre": "Mon sujet"})
    assert r.status_code == 403


def test_list_is_scoped_for_encadreurs_and_filterable(client, auth, admin, make_user, make_sujet):
    ia = make_user(Role.ENCADREUR, specialite="Intelligence Artificielle")
    reseaux = make_user(Role.ENCADREUR, specialite="Réseaux")
    make_sujet(ia, titre="Vision par ordinateur")
    make_sujet(reseaux, titre="SDN", status=SujetStatus.EN_ATTENTE)

    r = client.get("/api/v1/sujets", headers=auth(ia))
    assert [s["titre"] for s in r.json()] == ["Vision par ordinateur"]

    r = client.get("/api/v1/sujets", headers=auth(admin), params={"status": "EN_ATTENTE"})
    assert [s["titre"] for s in r.json()] == ["SDN"]

    r = client.get("/api/v1/sujets", headers=auth(admin), params={"specialite": "Réseaux"})
    body = r.json()
    assert len(body) == 1
    assert body[0]["encadreur"]["specialite"] == "Réseaux"


def test_get_one_includes_encadreur_and_memoires(client, auth, etudiant, sujet, memoire):
    r = client.get(f"/api/v1/sujets/{sujet.id}", headers=auth(etudiant))
    assert r.status_code == 200
    body = r.json()
    assert body["encadreur"]["id"] == sujet.encadreur_id
    assert body["memoires"] == [{"id": memoire["id"], "etudiant": body["memoires"][0]["etudiant"]}]
    assert body["memoires"][0]["etudiant"]["id"] == etudiant.id

    assert client.get("/api/v1/sujets/9999", headers=auth(etudiant)).status_code == 404


def test_owner_edits_and_deletes_free_subject(client, auth, encadreur, make_user, sujet):
    other = make_user(Role.ENCADREUR)
    r = client.put(f"/api/v1/sujets/{sujet.id}", headers=auth(other), json={"titre": "Volé"})
    assert r.status_code == 403

    r = client.put(f"/api/v1/sujets/{sujet.id}", headers=auth(encadreur), json={"mots_cles": ["NLP"]})
    assert r.status_code == 200
    assert r.json()["mots_cles"] == ["NLP"]
    assert r.json()["titre"] == sujet.titre

    r = client.delete(f"/api/v1/sujets/{sujet.id}", headers=auth(encadreur))
    assert r.status_code == 200
    assert r.json()["message"] == "Sujet supprimé avec succès"


def test_assigned_subject_is_locked(client, auth, encadreur, admin, sujet, memoire):
    r = client.put(f"/api/v1/sujets/{sujet.id}", headers=auth(encadreur), json={"titre": "Nouveau titre"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Ce sujet ne peut pas être modifié car il est déjà attribué"

    r = client.delete(f"/api/v1/sujets/{sujet.id}", headers=auth(admin))
    assert r.status_code == 400


def test_reserve_creates_memoire_for_student(client, auth, encadreur, etudiant, sujet):
    r = client.post(f"/api/v1/sujets/{sujet.id}/reserve", headers=auth(etudiant))
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Sujet réservé avec succès"
    memoire = body["memoire"]
    assert memoire["titre"] == sujet.titre
    assert memoire["status"] == "EN_COURS"
    assert memoire["progression"] == 0
    assert memoire["encadreur_id"] == encadreur.id
    assert memoire["sujet_id"] == sujet.id

    notifs = client.get("/api/v1/notifications", headers=auth(encadreur)).json()
    assert [n["titre"] for n in notifs] == ["Nouveau mémoire"]


def test_reserve_rules(client, auth, make_user, make_sujet, encadreur, etudiant, sujet, memoire):
    pending = make_sujet(encadreur, status=SujetStatus.EN_ATTENTE, titre="En attente")
    other_student = make_user(Role.ETUDIANT)

    r = client.post(f"/api/v1/sujets/{pending.id}/reserve", headers=auth(other_student))
    assert r.status_code == 400
    assert r.json()["detail"] == "Ce sujet n'est pas encore validé"

    r = client.post(f"/api/v1/sujets/{sujet.id}/reserve", headers=auth(other_student))
    assert r.status_code == 400
    assert r.json()["detail"] == "Ce sujet est déjà attribué"

    free = make_sujet(encadreur, titre="Libre")
    r = client.post(f"/api/v1/sujets/{free.id}/reserve", headers=auth(etudiant))
    assert r.status_code == 400
    assert r.json()["detail"] == "Vous avez déjà un mémoire en cours"

    r = client.post(f"/api/v1/sujets/{free.id}/reserve", headers=auth(encadreur))
    assert r.status_code == 403


def test_update_rejects_null_title_or_keywords(client, auth, encadreur, sujet):
    for field in ("titre", "mots_cles"):
        r = client.put(f"/api/v1/sujets/{sujet.id}", headers=auth(encadreur), json={field: None})
        assert r.status_code == 422, field

    r = client.put(f"/api/v1/sujets/{sujet.id}", headers=auth(encadreur), json={"description": None})
    assert r.status_code == 200
    assert r.json()["description"] is None
