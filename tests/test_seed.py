import pytest
from sqlmodel import Session, select

from gestion_memoire.db.models.enums import MemoireStatus, Role
from gestion_memoire.db.models.juries import Jury
from gestion_memoire.db.models.memoires import HistoriqueMemoireStatus, Memoire
from gestion_memoire.db.models.users import User
from gestion_memoire.db.seed import DEFAULT_SEED_PATH, load_seed_yaml, seed_all
from gestion_memoire.db.session import engine


def test_seed_loads_demo_data_once(client):
    with Session(engine) as session:
        seed_all(session, DEFAULT_SEED_PATH)
        seed_all(session, DEFAULT_SEED_PATH)

        users = session.exec(select(User)).all()
        assert len(users) == 8
        assert sum(1 for u in users if u.role == Role.ENCADREUR) == 5

        memoires = session.exec(select(Memoire)).all()
        assert len(memoires) == 2
        assert all(m.status == MemoireStatus.VALIDE and m.progression == 100 for m in memoires)
        assert len(session.exec(select(HistoriqueMemoireStatus)).all()) == 2
        assert len(session.exec(select(Jury)).all()) == 2

    r = client.post("/api/v1/auth/login", json={"email": "admin@isi.edu", "password": "password123"})
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "ADMIN"


def test_seed_yaml_must_be_a_mapping(tmp_path):
    path = tmp_path / "seed.yaml"
    path.write_text("- juste\n- une liste\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_seed_yaml(path)
