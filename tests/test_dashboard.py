from datetime import datetime

import pytest
from sqlmodel import Session

from gestion_memoire.db.models.enums import MemoireStatus, Role
from gestion_memoire.db.models.juries import Jury
from gestion_memoire.db.models.paiements import Paiement
from gestion_memoire.db.session import engine


@pytest.fixture
def activity(make_user, make_sujet, make_memoire, encadreur, etudiant):
    """Un mémoire soutenu avec son jury et un paiement."""
    members = [make_user(Role.ENCADREUR) for _ in range(3)]
    memoire = make_memoire(etudiant, make_sujet(encadreur), status=MemoireStatus.SOUTENU)
    with Session(engine) as session:
        session.add(Jury(
            memoire_id=memoire.id,
            president_id=members[0].id,
            rapporteur_id=members[1].id,
            examinateur_id=members[2].id,
            date_soutenance=datetime(2030, 7, 1, 9, 0),
            salle="Salle A-101",
        ))
        session.add(Paiement(
            montant=50000,
            reference="PAY-001",
            date=datetime(2030, 1, 15, 10, 0),
            etudiant_id=etudiant.id,
        ))
        session.commit()
    return memoire


def test_dashboard_is_admin_only(client, auth, encadreur):
    for path in ("stats", "activities", "events"):
        assert client.get(f"/api/v1/admin/dashboard/{path}", headers=auth(encadreur)).status_code == 403


def test_stats(client, auth, admin, make_user, activity):
    make_user(Role.ETUDIANT)

    r = client.get("/api/v1/admin/dashboard/stats", headers=auth(admin))
    assert r.status_code == 200
    assert r.json() == {"users": 2, "memoires": 1, "jurys": 1, "montant": 50000}

    r = client.get("/api/v1/admin/dashboard/stats", headers=auth(admin), params={
        "start_date": "2030-06-01T00:00:00",
        "end_date": "2030-12-31T23:59:59",
    })
    assert r.json() == {"users": 0, "memoires": 0, "jurys": 1, "montant": 0}


def test_activities(client, auth, admin, activity):
    r = client.get("/api/v1/admin/dashboard/activities", headers=auth(admin))
    assert r.status_code == 200
    items = r.json()
    assert len(items) <= 10
    assert {i["type"] for i in items} == {"user", "payment", "jury"}

    payment = next(i for i in items if i["type"] == "payment")
    assert payment["message"] == "Paiement reçu"
    assert payment["details"].startswith("50 000 FCFA")

    stamps = [i["created_at"] for i in items]
    assert stamps == sorted(stamps, reverse=True)


def test_events(client, auth, admin, activity):
    r = client.get("/api/v1/admin/dashboard/events", headers=auth(admin))
    assert r.status_code == 200
    assert r.json() == [{
        "title": "Soutenance de Mémoire",
        "date": "01/07/2030",
        "time": "09:00",
        "location": "Salle A-101",
        "status": "Planifié",
    }]

    r = client.get("/api/v1/admin/dashboard/events", headers=auth(admin), params={"start_date": "2031-01-01T00:00:00"})
    assert r.json() == []
