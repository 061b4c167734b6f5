from gestion_memoire.db.models.enums import Role


def _create(client, headers, etudiant_id, **fields):
    payload = {"date": "2030-05-10T10:00:00", "etudiant_id": etudiant_id, "salle": "Bureau 12"}
    payload.update(fields)
    return client.post("/api/v1/sessions", headers=headers, json=payload)


def test_encadreur_schedules_numbered_sessions(client, auth, encadreur, etudiant, memoire):
    r = _create(client, auth(encadreur), etudiant.id)
    assert r.status_code == 201, r.text
    first = r.json()
    assert first["numero"] == 1
    assert first["status"] == "PLANIFIEE"
    assert first["duree"] == 60
    assert first["type"] == "PRESENTIEL"
    assert first["visa_etudiant"] is False and first["visa_encadreur"] is False

    r = _create(client, auth(encadreur), etudiant.id, type="VIRTUEL", meeting_link="https://meet.example/abc", salle=None)
    assert r.status_code == 201
    assert r.json()["numero"] == 2

    notifs = client.get("/api/v1/notifications", headers=auth(etudiant)).json()
    assert [n["titre"] for n in notifs] == ["Nouvelle session d'encadrement"] * 2


def test_schedule_rules(client, auth, make_user, encadreur, etudiant, memoire):
    stranger = make_user(Role.ETUDIANT)
    r = _create(client, auth(encadreur), stranger.id)
    assert r.status_code == 400
    assert r.json()["detail"] == "Vous n'encadrez pas cet étudiant"

    r = _create(client, auth(encadreur), etudiant.id, salle=None)
    assert r.status_code == 400

    r = _create(client, auth(encadreur), etudiant.id, type="VIRTUEL", salle=None)
    assert r.status_code == 400

    r = _create(client, auth(etudiant), etudiant.id)
    assert r.status_code == 403


def test_list_and_get_are_scoped(client, auth, admin, make_user, encadreur, etudiant, memoire):
    session_id = _create(client, auth(encadreur), etudiant.id).json()["id"]

    r = client.get("/api/v1/sessions", headers=auth(etudiant))
    assert r.status_code == 200
    body = r.json()
    assert len(body) == 1
    assert body[0]["memoire"] == {"id": memoire["id"], "titre": memoire["titre"]}
    assert body[0]["encadreur"]["id"] == encadreur.id

    assert len(client.get("/api/v1/sessions", headers=auth(admin)).json()) == 1
    assert client.get("/api/v1/sessions", headers=auth(make_user(Role.ENCADREUR))).json() == []
    assert client.get("/api/v1/sessions", headers=auth(admin), params={"status": "EFFECTUEE"}).json() == []

    assert client.get(f"/api/v1/sessions/{session_id}", headers=auth(etudiant)).status_code == 200
    assert client.get(f"/api/v1/sessions/{session_id}", headers=auth(make_user(Role.ETUDIANT))).status_code == 403
    assert client.get("/api/v1/sessions/9999", headers=auth(admin)).status_code == 404


def test_update_notifies_on_status_change(client, auth, make_user, encadreur, etudiant, memoire):
    session_id = _create(client, auth(encadreur), etudiant.id).json()["id"]

    r = client.put(f"/api/v1/sessions/{session_id}", headers=auth(make_user(Role.ENCADREUR)), json={"rapport": "x"})
    assert r.status_code == 403

    r = client.put(f"/api/v1/sessions/{session_id}", headers=auth(encadreur), json={
        "rapport": "Plan validé",
        "status": "EN_COURS",
    })
    assert r.status_code == 200
    assert r.json()["rapport"] == "Plan validé"
    assert r.json()["status"] == "EN_COURS"

    notif = client.get("/api/v1/notifications", headers=auth(etudiant)).json()[0]
    assert notif["titre"] == "Session mise à jour"


def test_visas_complete_the_session(client, auth, encadreur, etudiant, memoire):
    session_id = _create(client, auth(encadreur), etudiant.id).json()["id"]
    url = f"/api/v1/sessions/{session_id}/visa"

    r = client.patch(url, headers=auth(etudiant), json={"type": "ENCADREUR"})
    assert r.status_code == 403

    r = client.patch(url, headers=auth(etudiant), json={"type": "ETUDIANT"})
    assert r.status_code == 200
    assert r.json()["visa_etudiant"] is True
    assert r.json()["status"] == "PLANIFIEE"

    r = client.patch(url, headers=auth(etudiant), json={"type": "ETUDIANT"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Visa déjà signé"

    r = client.patch(url, headers=auth(encadreur), json={"type": "ENCADREUR"})
    assert r.status_code == 200
    assert r.json()["status"] == "EFFECTUEE"

    notif = client.get("/api/v1/notifications", headers=auth(etudiant)).json()[0]
    assert notif["titre"] == "Visa de session"

    r = client.delete(f"/api/v1/sessions/{session_id}", headers=auth(encadreur))
    assert r.status_code == 400
    assert r.json()["detail"] == "Impossible de supprimer une session déjà effectuée"


def test_cancelled_session_cannot_be_signed_but_can_be_deleted(client, auth, encadreur, etudiant, memoire):
    session_id = _create(client, auth(encadreur), etudiant.id).json()["id"]
    client.put(f"/api/v1/sessions/{session_id}", headers=auth(encadreur), json={"status": "ANNULEE"})

    r = client.patch(f"/api/v1/sessions/{session_id}/visa", headers=auth(encadreur), json={"type": "ENCADREUR"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Impossible de signer une session annulée"

    r = client.delete(f"/api/v1/sessions/{session_id}", headers=auth(encadreur))
    assert r.status_code == 200
    assert client.get(f"/api/v1/sessions/{session_id}", headers=auth(encadreur)).status_code == 404

    notif = client.get("/api/v1/notifications", headers=auth(etudiant)).json()[0]
    assert notif["titre"] == "Session annulée"


def test_update_rejects_null_for_required_fields(client, auth, encadreur, etudiant, memoire):
    session_id = _create(client, auth(encadreur), etudiant.id, salle="Salle B-12").json()["id"]
    url = f"/api/v1/sessions/{session_id}"

    for field in ("date", "duree", "status"):
        assert client.put(url, headers=auth(encadreur), json={field: None}).status_code == 422, field

    r = client.put(url, headers=auth(encadreur), json={"salle": None})
    assert r.status_code == 200
    assert r.json()["salle"] is None
    assert r.json()["duree"] == 60
