from datetime import datetime

from pydantic import BaseModel


class DashboardStatsOut(BaseModel):
    users: int
    memoires: int
    jurys: int
    montant: int


class ActivityOut(BaseModel):
    type: str  # user | payment | jury
    message: str
    details: str
    created_at: datetime


class EventOut(BaseModel):
    title: str
    date: str  # dd/mm/yyyy
    time: str  # HH:MM
    location: str
    status: str
