import logging
from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..auth import TenantContext, get_tenant_context
from ..cache import cache, dashboard_key
from ..config import DASHBOARD_CACHE_TTL
from ..database import get_db
from ..models import Appointment, Doctor, Patient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


class DashboardStats(BaseModel):
    appointmentsToday: int
    totalPatients: int
    totalDoctors: int
    confirmedToday: int
    pendingToday: int


def compute_stats(db: Session, organization_id: str, unit_id: Optional[str], day: date) -> dict:
    """Counters for one day; appointment counts follow the current unit when one is set"""
    day_start = datetime.combine(day, datetime.min.time())
    day_end = day_start + timedelta(days=1)

    todays = db.query(func.count(Appointment.id)).filter(
        Appointment.organization_id == organization_id,
        Appointment.start_at >= day_start,
        Appointment.start_at < day_end,
    )
    if unit_id:
        todays = todays.filter(Appointment.unit_id == unit_id)

    return {
        "appointmentsToday": todays.scalar() or 0,
        "totalPatients": db.query(func.count(Patient.id))
        .filter(Patient.organization_id == organization_id)
        .scalar()
        or 0,
        "totalDoctors": db.query(func.count(Doctor.id))
        .filter(Doctor.organization_id == organization_id)
        .scalar()
        or 0,
        "confirmedToday": todays.filter(Appointment.status == "confirmed").scalar() or 0,
        "pendingToday": todays.filter(Appointment.status == "scheduled").scalar() or 0,
    }


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    day: Optional[date] = Query(None, alias="date"),
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Today's agenda counters - with caching"""
    day = day or date.today()
    cache_key = dashboard_key(context.organization_id, context.unit_id, day.isoformat())

    cached_stats = cache.get(cache_key)
    if cached_stats is not None:
        logger.info(f"✅ Returning cached dashboard stats for organization {context.organization_id}")
        return cached_stats

    stats = compute_stats(db, context.organization_id, context.unit_id, day)
    cache.set(cache_key, stats, ttl=DASHBOARD_CACHE_TTL)
    return stats
