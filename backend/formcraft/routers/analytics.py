"""Owner analytics router."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from formcraft.database import get_db
from formcraft.models.user import User
from formcraft.schemas.analytics import AnalyticsResponse, DashboardStats
from formcraft.services.analytics import AnalyticsService
from formcraft.services.auth import get_current_active_user

router = APIRouter()


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    form_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    estimate_views: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Analytics across all of the user's forms, or one form with ``form_id``.

    Defaults to the last 30 days.
    """
    return AnalyticsService.get_analytics(
        db, current_user, form_id, start_date, end_date, estimate_views=estimate_views
    )


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return AnalyticsService.get_dashboard_stats(db, current_user)
