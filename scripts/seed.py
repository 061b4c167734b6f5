from gestion_memoire.db.session import engine, Session, init_db

from gestion_memoire.db.seed import DEFAULT_SEED_PATH, seed_all


def run_seed():
    init_db()
    with Session(engine) as session:
        seed_all(session, seed_path=DEFAULT_SEED_PATH)
    print("Base de données initialisée avec succès")


if __name__ == "__main__":
    run_seed()
