from datetime import datetime

from sqlmodel import Session

from gestion_memoire.db.models.enums import Role
from gestion_memoire.db.models.paiements import Paiement
from gestion_memoire.db.session import engine


def _pay(client, headers, montant=50000, reference="PAY-001", **fields):
    payload = {"montant": montant, "reference": reference, "date": "2030-01-15T10:00:00"}
    payload.update(fields)
    return client.post("/api/v1/paiements", headers=headers, json=payload)


def test_student_submits_a_payment(client, auth, admin, etudiant):
    r = _pay(client, auth(etudiant), methode="WAVE")
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["status"] == "EN_ATTENTE"
    assert body["methode"] == "WAVE"
    assert body["etudiant_id"] == etudiant.id

    notif = client.get("/api/v1/notifications", headers=auth(admin)).json()[0]
    assert notif["titre"] == "Nouveau paiement à valider"
    assert "50000 FCFA" in notif["message"]


def test_payment_validation_errors(client, auth, admin, etudiant):
    assert _pay(client, auth(etudiant), montant=0).status_code == 422
    assert _pay(client, auth(etudiant), methode="CHEQUE").status_code == 422
    assert _pay(client, auth(admin)).status_code == 403


def test_default_method_is_cash(client, auth, etudiant):
    assert _pay(client, auth(etudiant)).json()["methode"] == "ESPECE"


def test_list_and_get_are_scoped(client, auth, admin, make_user, etudiant):
    other = make_user(Role.ETUDIANT)
    mine = _pay(client, auth(etudiant)).json()
    theirs = _pay(client, auth(other), reference="PAY-002").json()

    listed = client.get("/api/v1/paiements", headers=auth(etudiant)).json()
    assert [p["id"] for p in listed] == [mine["id"]]
    assert listed[0]["etudiant"]["matricule"] == etudiant.matricule

    assert len(client.get("/api/v1/paiements", headers=auth(admin)).json()) == 2
    assert client.get("/api/v1/paiements", headers=auth(admin), params={"status": "VALIDE"}).json() == []

    assert client.get(f"/api/v1/paiements/{mine['id']}", headers=auth(etudiant)).status_code == 200
    assert client.get(f"/api/v1/paiements/{theirs['id']}", headers=auth(etudiant)).status_code == 403
    assert client.get(f"/api/v1/paiements/{theirs['id']}", headers=auth(admin)).status_code == 200
    assert client.get("/api/v1/paiements/9999", headers=auth(admin)).status_code == 404


def test_status_update_and_stats(client, auth, admin, etudiant):
    ids = [
        _pay(client, auth(etudiant), montant=montant, reference=f"PAY-{montant}").json()["id"]
        for montant in (50000, 30000, 20000)
    ]

    r = client.patch(f"/api/v1/paiements/{ids[0]}/status", headers=auth(admin), json={"status": "VALIDE"})
    assert r.status_code == 200
    assert r.json()["status"] == "VALIDE"
    client.patch(f"/api/v1/paiements/{ids[2]}/status", headers=auth(admin), json={"status": "REJETE"})

    notif = client.get("/api/v1/notifications", headers=auth(etudiant)).json()[0]
    assert notif["titre"] == "Statut du paiement"
    assert notif["message"].endswith("a été rejeté")

    r = client.get("/api/v1/paiements/stats", headers=auth(admin))
    assert r.status_code == 200
    assert r.json() == {"TOTAL": 100000, "VALIDE": 50000, "EN_ATTENTE": 30000, "REJETE": 20000}

    assert client.get("/api/v1/paiements/stats", headers=auth(etudiant)).status_code == 403


def test_admin_updates_and_deletes(client, auth, admin, etudiant):
    paiement_id = _pay(client, auth(etudiant)).json()["id"]

    r = client.put(f"/api/v1/paiements/{paiement_id}", headers=auth(admin), json={"montant": 45000, "methode": "YAS"})
    assert r.status_code == 200
    assert r.json()["montant"] == 45000
    assert r.json()["methode"] == "YAS"
    assert r.json()["reference"] == "PAY-001"

    r = client.delete(f"/api/v1/paiements/{paiement_id}", headers=auth(admin))
    assert r.status_code == 200
    assert client.get(f"/api/v1/paiements/{paiement_id}", headers=auth(admin)).status_code == 404

    notif = client.get("/api/v1/notifications", headers=auth(etudiant)).json()[0]
    assert notif["titre"] == "Paiement supprimé"


def test_dates_are_stored_and_returned_in_utc(client, auth, etudiant):
    r = _pay(client, auth(etudiant), date="2030-01-15T10:00:00+02:00")
    assert r.status_code == 201, r.text
    assert r.json()["date"] == "2030-01-15T08:00:00"

    with Session(engine) as session:
        stored = session.get(Paiement, r.json()["id"])
        assert stored.date == datetime(2030, 1, 15, 8, 0)
        assert stored.created_at.tzinfo is None
        assert stored.created_at <= stored.updated_at

    r = client.get(f"/api/v1/paiements/{r.json()['id']}", headers=auth(etudiant))
    assert r.json()["date"] == "2030-01-15T08:00:00"
