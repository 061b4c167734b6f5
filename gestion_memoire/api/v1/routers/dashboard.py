from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from gestion_memoire.api.v1.dependencies import get_dashboard_service, require_roles
from gestion_memoire.db.models.enums import Role
from gestion_memoire.db.models.users import User
from gestion_memoire.features.dashboard.schemas import ActivityOut, DashboardStatsOut, EventOut
from gestion_memoire.features.dashboard.services import DashboardService

router = APIRouter(
    prefix="/admin/dashboard",
    tags=["dashboard"],
)


@router.get("/stats", summary="Compteurs globaux", response_model=DashboardStatsOut)
def stats(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: DashboardService = Depends(get_dashboard_service),
):
    return svc.stats(start=start_date, end=end_date)


@router.get("/activities", summary="Activité récente", response_model=List[ActivityOut])
def activities(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: DashboardService = Depends(get_dashboard_service),
):
    return svc.activities(start=start_date, end=end_date)


@router.get("/events", summary="Soutenances à venir", response_model=List[EventOut])
def events(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    _: User = Depends(require_roles(Role.ADMIN)),
    svc: DashboardService = Depends(get_dashboard_service),
):
    return svc.events(start=start_date, end=end_date)
