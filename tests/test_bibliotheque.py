from datetime import datetime

import pytest

from gestion_memoire.db.models.enums import MemoireStatus, Role


@pytest.fixture
def soutenu(make_memoire, make_sujet, encadreur, etudiant):
    return make_memoire(
        etudiant,
        make_sujet(encadreur),
        status=MemoireStatus.SOUTENU,
        progression=100,
        date_soutenance=datetime(2030, 7, 1, 9, 0),
        fichier_final="/uploads/Final_1.pdf",
    )


def test_publish_rules(client, auth, admin, make_user, make_memoire, make_sujet, encadreur, etudiant, soutenu):
    url = f"/api/v1/bibliotheque/memoires/{soutenu.id}/publish"
    en_cours = make_memoire(make_user(Role.ETUDIANT), make_sujet(encadreur, titre="Autre sujet"))

    assert client.patch(url, headers=auth(encadreur)).status_code == 403

    r = client.patch(url, headers=auth(admin))
    assert r.status_code == 200
    assert r.json()["message"] == "Mémoire publié avec succès"
    assert r.json()["memoire"]["published"] is True

    r = client.patch(url, headers=auth(admin))
    assert r.status_code == 400
    assert r.json()["detail"] == "Mémoire déjà publié"

    r = client.patch(f"/api/v1/bibliotheque/memoires/{en_cours.id}/publish", headers=auth(admin))
    assert r.status_code == 400
    assert r.json()["detail"] == "Seuls les mémoires soutenus peuvent être publiés"

    assert client.patch("/api/v1/bibliotheque/memoires/9999/publish", headers=auth(admin)).status_code == 404

    titres = [n["titre"] for n in client.get("/api/v1/notifications", headers=auth(etudiant)).json()]
    assert "Mémoire publié" in titres


def test_only_published_memoires_are_listed(client, auth, etudiant, soutenu):
    assert client.get("/api/v1/bibliotheque", headers=auth(etudiant)).json() == []


def test_search_and_filters(client, auth, admin, make_user, encadreur, etudiant, soutenu):
    client.patch(f"/api/v1/bibliotheque/memoires/{soutenu.id}/publish", headers=auth(admin))
    reader = make_user(Role.ETUDIANT)

    def ids(**params):
        r = client.get("/api/v1/bibliotheque", headers=auth(reader), params=params)
        assert r.status_code == 200
        return [item["id"] for item in r.json()]

    assert ids() == [soutenu.id]
    assert ids(search="RECOMMANDATION") == [soutenu.id]
    assert ids(search="ia") == [soutenu.id]
    assert ids(search=etudiant.nom.lower()) == [soutenu.id]
    assert ids(search="blockchain") == []
    assert ids(year=2030) == [soutenu.id]
    assert ids(year=2029) == []
    assert ids(encadreur_id=encadreur.id) == [soutenu.id]
    assert ids(encadreur_id=encadreur.id + 100) == []

    item = client.get("/api/v1/bibliotheque", headers=auth(reader)).json()[0]
    assert item["etudiant"]["id"] == etudiant.id
    assert item["encadreur"]["id"] == encadreur.id
    assert item["fichier_final"] == "/uploads/Final_1.pdf"
