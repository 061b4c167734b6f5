"""Valeurs de statut et de rôle partagées entre tables, schémas et services."""

from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    ENCADREUR = "ENCADREUR"
    ETUDIANT = "ETUDIANT"


class SujetStatus(str, Enum):
    EN_ATTENTE = "EN_ATTENTE"
    VALIDE = "VALIDE"
    REJETE = "REJETE"


class MemoireStatus(str, Enum):
    EN_COURS = "EN_COURS"
    SOUMIS = "SOUMIS"
    EN_REVISION = "EN_REVISION"
    SOUMIS_FINAL = "SOUMIS_FINAL"
    VALIDE_ENCADREUR = "VALIDE_ENCADREUR"
    VALIDE = "VALIDE"
    REJETE = "REJETE"
    SOUTENU = "SOUTENU"


class SessionType(str, Enum):
    PRESENTIEL = "PRESENTIEL"
    VIRTUEL = "VIRTUEL"


class SessionStatus(str, Enum):
    PLANIFIEE = "PLANIFIEE"
    EN_COURS = "EN_COURS"
    EFFECTUEE = "EFFECTUEE"
    ANNULEE = "ANNULEE"


class SessionRequestStatus(str, Enum):
    EN_ATTENTE = "EN_ATTENTE"
    ACCEPTEE = "ACCEPTEE"
    REFUSEE = "REFUSEE"


class PaiementStatus(str, Enum):
    EN_ATTENTE = "EN_ATTENTE"
    VALIDE = "VALIDE"
    REJETE = "REJETE"


class PaiementMethode(str, Enum):
    ESPECE = "ESPECE"
    ORANGE_MONEY = "ORANGE_MONEY"
    WAVE = "WAVE"
    YAS = "YAS"


class ValidationAction(str, Enum):
    ACCEPTE = "ACCEPTE"
    REFUSE = "REFUSE"
