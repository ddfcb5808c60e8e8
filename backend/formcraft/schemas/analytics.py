"""Analytics Pydantic schemas."""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel


class DailyPoint(BaseModel):
    """One calendar day of activity."""
    date: date
    views: int
    submissions: int
    views_estimated: bool = False


class AnalyticsSummary(BaseModel):
    total_views: int = 0
    total_submissions: int = 0
    conversion_rate: float = 0.0
    device_info: Dict[str, int] = {}
    geo_locations: Dict[str, int] = {}
    referrers: Dict[str, int] = {}


class AnalyticsResponse(AnalyticsSummary):
    """Summary, breakdowns and the daily series for a date range."""
    form_id: Optional[str] = None
    start_date: date
    end_date: date
    daily: List[DailyPoint] = []


class DashboardStats(BaseModel):
    total_forms: int
    active_forms: int
    total_submissions: int
    total_views: int
