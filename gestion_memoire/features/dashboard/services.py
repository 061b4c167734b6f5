"""
Tableau de bord administrateur : compteurs, activité récente et soutenances à venir.

Les bornes start/end sont optionnelles et s'appliquent :
- à la date de création pour les utilisateurs, mémoires et l'activité ;
- à la date de soutenance pour les jurys ;
- à la date du paiement pour le montant encaissé.
"""

from datetime import datetime
from typing import List, Optional

from gestion_memoire.db.models.base import as_naive_utc, utcnow
from gestion_memoire.db.repositories.juries import JuryRepository
from gestion_memoire.db.repositories.memoires import MemoireRepository
from gestion_memoire.db.repositories.paiements import PaiementRepository
from gestion_memoire.db.repositories.users import UserRepository
from gestion_memoire.features.dashboard.schemas import ActivityOut, DashboardStatsOut, EventOut


class DashboardService:
    def __init__(
        self,
        *,
        user_repo: UserRepository,
        memoire_repo: MemoireRepository,
        jury_repo: JuryRepository,
        paiement_repo: PaiementRepository,
    ):
        self.users = user_repo
        self.memoires = memoire_repo
        self.juries = jury_repo
        self.paiements = paiement_repo

    def stats(self, *, start: Optional[datetime] = None, end: Optional[datetime] = None) -> DashboardStatsOut:
        start, end = as_naive_utc(start), as_naive_utc(end)
        return DashboardStatsOut(
            users=self.users.count_students(start=start, end=end),
            memoires=self.memoires.count_created(start=start, end=end),
            jurys=self.juries.count_in_range(start=start, end=end),
            montant=self.paiements.sum_in_range(start=start, end=end),
        )

    def activities(self, *, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[ActivityOut]:
        start, end = as_naive_utc(start), as_naive_utc(end)
        activities: List[ActivityOut] = []

        for u in self.users.list_recent(start=start, end=end):
            activities.append(ActivityOut(
                type="user",
                message="Nouvel utilisateur ajouté",
                details=f"{u.prenom} {u.nom}",
                created_at=u.created_at,
            ))

        paiements = self.paiements.list_recent(start=start, end=end)
        etudiants = self.users.get_many(p.etudiant_id for p in paiements)
        for p in paiements:
            etudiant = etudiants.get(p.etudiant_id)
            name = f"{etudiant.prenom} {etudiant.nom}" if etudiant else ""
            activities.append(ActivityOut(
                type="payment",
                message="Paiement reçu",
                details=f"{p.montant:,} FCFA - {name}".replace(",", " ").strip(" -"),
                created_at=p.created_at,
            ))

        for j in self.juries.list_recent(start=start, end=end):
            activities.append(ActivityOut(
                type="jury",
                message="Jury programmé",
                details=f"Jury ID {j.id}",
                created_at=j.created_at,
            ))

        activities.sort(key=lambda a: a.created_at, reverse=True)
        return activities[:10]

    def events(self, *, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[EventOut]:
        juries = self.juries.list_upcoming(start=as_naive_utc(start) or utcnow(), end=as_naive_utc(end))
        return [
            EventOut(
                title="Soutenance de Mémoire",
                date=j.date_soutenance.strftime("%d/%m/%Y"),
                time=j.date_soutenance.strftime("%H:%M"),
                location=j.salle,
                status="Planifié",
            )
            for j in juries
        ]
