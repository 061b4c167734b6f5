"""
Seed de démonstration (dev) à partir de seed_data.yaml.

Les entrées YAML se référencent par `key` (ex: `encadreur_key: benali`) ;
les ids réels sont résolus à l'insertion. Chaque étape est idempotente :
si la table contient déjà des lignes, rien n'est réinséré.
"""

from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from sqlmodel import Session, select

from gestion_memoire.db.models.base import utcnow
from gestion_memoire.db.models.enums import (
    MemoireStatus,
    PaiementMethode,
    PaiementStatus,
    Role,
    SessionStatus,
    SessionType,
    SujetStatus,
)
from gestion_memoire.db.models.juries import Jury
from gestion_memoire.db.models.memoires import HistoriqueMemoireStatus, Memoire
from gestion_memoire.db.models.notifications import Notification
from gestion_memoire.db.models.paiements import Paiement
from gestion_memoire.db.models.sessions import SessionEncadrement
from gestion_memoire.db.models.sujets import Sujet
from gestion_memoire.db.models.users import User
from gestion_memoire.security.password import hash_password

DEFAULT_SEED_PATH = Path(__file__).with_name("seed_data.yaml")


# -----------------------------
# YAML loader
# -----------------------------
def load_seed_yaml(seed_path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(seed_path)
    if not path.exists():
        raise FileNotFoundError(f"Seed YAML introuvable: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Le YAML de seed doit contenir un objet racine (mapping).")
    return data


# -----------------------------
# Helpers
# -----------------------------
def _as_datetime(value: Any) -> datetime:
    """YAML donne des date ou datetime ; la base stocke des datetime."""
    if value is None:
        return utcnow()
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return datetime.fromisoformat(str(value))


def _resolve(keys: Dict[str, int], key: str, what: str) -> int:
    try:
        return keys[key]
    except KeyError:
        raise ValueError(f"{what} '{key}' inconnu dans le YAML de seed.")


# -----------------------------
# Seed Users
# -----------------------------
def seed_users(session: Session, data: Dict[str, Any]) -> Dict[str, int]:
    users: List[Dict[str, Any]] = data.get("users", [])
    if session.exec(select(User)).first():
        print("ℹ️ Les utilisateurs existent déjà, aucune insertion effectuée.")
        by_email = {u.email: u.id for u in session.exec(select(User)).all()}
        return {u["key"]: by_email[u["email"]] for u in users if u["email"] in by_email}

    password = hash_password(str(data.get("default_password", "password123")))
    objs = {
        u["key"]: User(
            email=u["email"].lower(),
            hashed_password=password,
            nom=u["nom"],
            prenom=u["prenom"],
            role=Role(u["role"]),
            telephone=u.get("telephone"),
            specialite=u.get("specialite"),
            matricule=u.get("matricule"),
        )
        for u in users
    }
    session.add_all(objs.values())
    session.commit()
    print(f"✅ {len(objs)} utilisateurs insérés.")
    return {key: user.id for key, user in objs.items()}


# -----------------------------
# Seed Sujets + Mémoires + Jurys
# -----------------------------
def seed_sujets(session: Session, data: Dict[str, Any], users: Dict[str, int]) -> Dict[str, int]:
    if session.exec(select(Sujet)).first():
        print("ℹ️ Les sujets existent déjà, aucune insertion effectuée.")
        return {}

    objs = {
        s["key"]: Sujet(
            titre=s["titre"],
            description=s.get("description"),
            mots_cles=list(s.get("mots_cles", [])),
            status=SujetStatus(s.get("status", "EN_ATTENTE")),
            date_validation=_as_datetime(s["date_validation"]) if s.get("date_validation") else None,
            encadreur_id=_resolve(users, s["encadreur_key"], "Utilisateur"),
        )
        for s in data.get("sujets", [])
    }
    session.add_all(objs.values())
    session.commit()
    print(f"✅ {len(objs)} sujets insérés.")
    return {key: sujet.id for key, sujet in objs.items()}


def seed_memoires(
    session: Session,
    data: Dict[str, Any],
    users: Dict[str, int],
    sujets: Dict[str, int],
) -> Dict[str, int]:
    if session.exec(select(Memoire)).first() or not sujets:
        print("ℹ️ Les mémoires existent déjà, aucune insertion effectuée.")
        return {}

    objs: Dict[str, Memoire] = {}
    for m in data.get("memoires", []):
        sujet = session.get(Sujet, _resolve(sujets, m["sujet_key"], "Sujet"))
        status = MemoireStatus(m.get("status", "EN_COURS"))
        objs[m["key"]] = Memoire(
            titre=m["titre"],
            description=m.get("description"),
            mots_cles=list(m.get("mots_cles", [])),
            status=status,
            progression=100 if status in (MemoireStatus.VALIDE, MemoireStatus.SOUTENU) else 0,
            date_soutenance=_as_datetime(m["date_soutenance"]) if m.get("date_soutenance") else None,
            etudiant_id=_resolve(users, m["etudiant_key"], "Utilisateur"),
            encadreur_id=sujet.encadreur_id,
            sujet_id=sujet.id,
        )
    session.add_all(objs.values())
    session.flush()
    session.add_all([
        HistoriqueMemoireStatus(memoire_id=m.id, status=m.status, commentaire="Création du mémoire")
        for m in objs.values()
    ])
    session.commit()
    print(f"✅ {len(objs)} mémoires insérés.")
    return {key: memoire.id for key, memoire in objs.items()}


def seed_jurys(
    session: Session,
    data: Dict[str, Any],
    users: Dict[str, int],
    memoires: Dict[str, int],
) -> None:
    if session.exec(select(Jury)).first() or not memoires:
        print("ℹ️ Les jurys existent déjà, aucune insertion effectuée.")
        return

    jurys = data.get("jurys", [])
    session.add_all([
        Jury(
            memoire_id=_resolve(memoires, j["memoire_key"], "Mémoire"),
            president_id=_resolve(users, j["president_key"], "Utilisateur"),
            rapporteur_id=_resolve(users, j["rapporteur_key"], "Utilisateur"),
            examinateur_id=_resolve(users, j["examinateur_key"], "Utilisateur"),
            date_soutenance=_as_datetime(j["date_soutenance"]),
            salle=j["salle"],
        )
        for j in jurys
    ])
    session.commit()
    print(f"✅ {len(jurys)} jurys insérés.")


# -----------------------------
# Seed Sessions / Paiements / Notifications
# -----------------------------
def seed_sessions(session: Session, data: Dict[str, Any], users: Dict[str, int]) -> None:
    if session.exec(select(SessionEncadrement)).first():
        print("ℹ️ Les sessions existent déjà, aucune insertion effectuée.")
        return

    numeros: Dict[tuple, int] = {}
    objs: List[SessionEncadrement] = []
    for s in data.get("sessions", []):
        pair = (s["encadreur_key"], s["etudiant_key"])
        numeros[pair] = numeros.get(pair, 0) + 1
        objs.append(SessionEncadrement(
            numero=numeros[pair],
            date=_as_datetime(s["date"]),
            duree=int(s.get("duree", 60)),
            type=SessionType(s.get("type", "PRESENTIEL")),
            status=SessionStatus(s.get("status", "PLANIFIEE")),
            meeting_link=s.get("meeting_link"),
            salle=s.get("salle"),
            rapport=s.get("rapport"),
            encadreur_id=_resolve(users, s["encadreur_key"], "Utilisateur"),
            etudiant_id=_resolve(users, s["etudiant_key"], "Utilisateur"),
        ))
    session.add_all(objs)
    session.commit()
    print(f"✅ {len(objs)} sessions insérées.")


def seed_paiements(session: Session, data: Dict[str, Any], users: Dict[str, int]) -> None:
    if session.exec(select(Paiement)).first():
        print("ℹ️ Les paiements existent déjà, aucune insertion effectuée.")
        return

    paiements = data.get("paiements", [])
    session.add_all([
        Paiement(
            montant=int(p["montant"]),
            reference=p["reference"],
            date=_as_datetime(p.get("date")),
            methode=PaiementMethode(p.get("methode", "ESPECE")),
            status=PaiementStatus(p.get("status", "EN_ATTENTE")),
            etudiant_id=_resolve(users, p["etudiant_key"], "Utilisateur"),
        )
        for p in paiements
    ])
    session.commit()
    print(f"✅ {len(paiements)} paiements insérés.")


def seed_notifications(session: Session, data: Dict[str, Any], users: Dict[str, int]) -> None:
    if session.exec(select(Notification)).first():
        print("ℹ️ Les notifications existent déjà, aucune insertion effectuée.")
        return

    notifications = data.get("notifications", [])
    session.add_all([
        Notification(
            user_id=_resolve(users, n["user_key"], "Utilisateur"),
            titre=n["titre"],
            message=n["message"],
        )
        for n in notifications
    ])
    session.commit()
    print(f"✅ {len(notifications)} notifications insérées.")


def seed_all(session: Session, seed_path: Union[str, Path] = DEFAULT_SEED_PATH) -> None:
    data = load_seed_yaml(seed_path)

    users = seed_users(session, data)
    sujets = seed_sujets(session, data, users)
    memoires = seed_memoires(session, data, users, sujets)
    seed_jurys(session, data, users, memoires)

    seed_sessions(session, data, users)
    seed_paiements(session, data, users)
    seed_notifications(session, data, users)
