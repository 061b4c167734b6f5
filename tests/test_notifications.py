import pytest
from sqlmodel import Session

from gestion_memoire.db.models.notifications import Notification
from gestion_memoire.db.session import engine


@pytest.fixture
def notify():
    def _notify(user, titre="Info", message="Message", lu=False) -> int:
        with Session(engine) as session:
            notif = Notification(user_id=user.id, titre=titre, message=message, lu=lu)
            session.add(notif)
            session.commit()
            return notif.id

    return _notify


def test_list_own_notifications(client, auth, etudiant, encadreur, notify):
    notify(etudiant, titre="Ancienne", lu=True)
    notify(etudiant, titre="Récente")
    notify(encadreur, titre="Pas pour moi")

    r = client.get("/api/v1/notifications", headers=auth(etudiant))
    assert r.status_code == 200
    assert [n["titre"] for n in r.json()] == ["Récente", "Ancienne"]

    r = client.get("/api/v1/notifications", headers=auth(etudiant), params={"unread_only": True})
    assert [n["titre"] for n in r.json()] == ["Récente"]


def test_mark_as_read(client, auth, etudiant, encadreur, notify):
    mine = notify(etudiant)
    theirs = notify(encadreur)

    r = client.patch(f"/api/v1/notifications/{mine}/read", headers=auth(etudiant))
    assert r.status_code == 200
    assert r.json()["lu"] is True

    assert client.patch(f"/api/v1/notifications/{theirs}/read", headers=auth(etudiant)).status_code == 403
    assert client.patch("/api/v1/notifications/9999/read", headers=auth(etudiant)).status_code == 404


def test_mark_all_as_read(client, auth, etudiant, encadreur, notify):
    notify(etudiant)
    notify(etudiant)
    notify(etudiant, lu=True)
    notify(encadreur)

    r = client.patch("/api/v1/notifications/read-all", headers=auth(etudiant))
    assert r.status_code == 200
    assert r.json()["updated"] == 2

    assert client.get("/api/v1/notifications", headers=auth(etudiant), params={"unread_only": True}).json() == []
    assert len(client.get("/api/v1/notifications", headers=auth(encadreur), params={"unread_only": True}).json()) == 1


def test_delete(client, auth, etudiant, encadreur, notify):
    mine = notify(etudiant)
    theirs = notify(encadreur)

    assert client.delete(f"/api/v1/notifications/{theirs}", headers=auth(etudiant)).status_code == 403

    r = client.delete(f"/api/v1/notifications/{mine}", headers=auth(etudiant))
    assert r.status_code == 200
    assert r.json()["message"] == "Notification supprimée"
    assert client.get("/api/v1/notifications", headers=auth(etudiant)).json() == []
