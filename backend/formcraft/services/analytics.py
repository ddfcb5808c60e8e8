"""Analytics aggregation over view records and submissions."""

import logging
import random
import re
from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from formcraft.config import get_settings
from formcraft.models.form import Form, FormStatus, Submission, ViewRecord
from formcraft.models.user import User
from formcraft.schemas.analytics import (
    AnalyticsResponse,
    AnalyticsSummary,
    DailyPoint,
    DashboardStats,
)

logger = logging.getLogger(__name__)

MOBILE_UA = re.compile(r"Mobile|iPhone|iPad|Android|BlackBerry|IEMobile", re.IGNORECASE)
DIRECT = "Direct"
UNKNOWN_COUNTRY = "Unknown"
JITTER_RANGE = (0.8, 1.2)


def iter_days(start: date, end: date) -> Iterable[date]:
    """Each calendar day in [start, end]; nothing when start > end."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def classify_device(user_agent: Optional[str], geo_location: Optional[Dict[str, Any]] = None) -> str:
    if geo_location and geo_location.get("deviceType"):
        return str(geo_location["deviceType"])
    return "Mobile" if MOBILE_UA.search(user_agent or "") else "Desktop"


def classify_country(geo_location: Optional[Dict[str, Any]]) -> str:
    if geo_location and geo_location.get("country"):
        return str(geo_location["country"])
    return UNKNOWN_COUNTRY


def classify_referrer(referrer: Optional[str]) -> str:
    if not referrer or referrer.strip().lower() == "direct":
        return DIRECT
    try:
        hostname = urlparse(referrer.strip()).hostname
    except ValueError:
        return DIRECT
    return hostname or DIRECT


def conversion_rate(views: int, submissions: int) -> float:
    if views <= 0:
        return 0.0
    return submissions / views * 100


def summarize(views: Sequence[ViewRecord], submissions: Sequence[Submission]) -> AnalyticsSummary:
    """Totals, conversion rate and device/geo/referrer breakdowns."""
    devices = Counter(classify_device(v.user_agent, v.geo_location) for v in views)
    countries = Counter(classify_country(v.geo_location) for v in views)
    referrers = Counter(classify_referrer(v.referrer) for v in views)
    return AnalyticsSummary(
        total_views=len(views),
        total_submissions=len(submissions),
        conversion_rate=conversion_rate(len(views), len(submissions)),
        device_info=dict(devices),
        geo_locations=dict(countries),
        referrers=dict(referrers),
    )


def daily_series(
    start: date,
    end: date,
    submissions: Sequence[Submission],
    views: Sequence[ViewRecord] = (),
) -> List[DailyPoint]:
    """Exact per-day submission and view counts over [start, end]."""
    submissions_by_day = Counter(s.created_at.date() for s in submissions if s.created_at)
    views_by_day = Counter(v.timestamp.date() for v in views if v.timestamp)
    return [
        DailyPoint(date=day, views=views_by_day.get(day, 0), submissions=submissions_by_day.get(day, 0))
        for day in iter_days(start, end)
    ]


def estimated_daily_views(
    start: date,
    end: date,
    forms: Sequence[Tuple[int, date]],
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> Dict[date, int]:
    """
    Approximate per-day views from lifetime totals.

    ``forms`` holds (view_count, created_on) pairs. Each form's total is spread
    evenly over the days since creation and scaled by a random factor in
    [0.8, 1.2]. Future days and days before creation get nothing. The result
    is an estimate, not a count; callers must label it as such.
    """
    today = today or date.today()
    rng = rng or random.Random()
    estimates: Dict[date, int] = {}
    for day in iter_days(start, end):
        total = 0
        if day <= today:
            for view_count, created_on in forms:
                if day < created_on:
                    continue
                days_live = max(1, (today - created_on).days + 1)
                base = (view_count or 0) / days_live
                total += max(0, round(base * rng.uniform(*JITTER_RANGE)))
        estimates[day] = total
    return estimates


def estimated_daily_series(
    start: date,
    end: date,
    submissions: Sequence[Submission],
    forms: Sequence[Tuple[int, date]],
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> List[DailyPoint]:
    """Daily series with exact submissions and estimated views."""
    estimates = estimated_daily_views(start, end, forms, today=today, rng=rng)
    return [
        DailyPoint(date=point.date, views=estimates.get(point.date, 0),
                   submissions=point.submissions, views_estimated=True)
        for point in daily_series(start, end, submissions)
    ]


def _range_bounds(start: date, end: date) -> Tuple[datetime, datetime]:
    return datetime.combine(start, time.min), datetime.combine(end, time.max)


class AnalyticsService:
    """Service for owner-facing analytics."""

    @staticmethod
    def resolve_range(start: Optional[date], end: Optional[date]) -> Tuple[date, date]:
        settings = get_settings()
        end = end or datetime.utcnow().date()
        start = start or end - timedelta(days=settings.analytics_default_days)
        return start, end

    @staticmethod
    def _scope(db: Session, user: User, form_id: Optional[str]) -> List[Form]:
        query = db.query(Form).filter(Form.owner_id == user.id)
        if form_id and form_id != "all":
            form = query.filter(Form.id == form_id).first()
            if not form:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Form not found"
                )
            return [form]
        return query.all()

    @staticmethod
    def query_submissions(db: Session, form_ids: List[str], start: date, end: date) -> List[Submission]:
        if not form_ids or start > end:
            return []
        lower, upper = _range_bounds(start, end)
        return db.query(Submission).filter(
            Submission.form_id.in_(form_ids),
            Submission.created_at >= lower,
            Submission.created_at <= upper,
        ).all()

    @staticmethod
    def query_views(db: Session, form_ids: List[str], start: date, end: date) -> List[ViewRecord]:
        if not form_ids or start > end:
            return []
        lower, upper = _range_bounds(start, end)
        return db.query(ViewRecord).filter(
            ViewRecord.form_id.in_(form_ids),
            ViewRecord.timestamp >= lower,
            ViewRecord.timestamp <= upper,
        ).all()

    @staticmethod
    def get_analytics(
        db: Session,
        user: User,
        form_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        estimate_views: bool = False,
    ) -> AnalyticsResponse:
        """
        Aggregate one form (or all of the owner's forms) over a date range.

        Views come from exact view records unless ``estimate_views`` asks
        for the lifetime-total approximation.
        """
        start, end = AnalyticsService.resolve_range(start, end)
        forms = AnalyticsService._scope(db, user, form_id)
        form_ids = [f.id for f in forms]

        submissions = AnalyticsService.query_submissions(db, form_ids, start, end)
        views = AnalyticsService.query_views(db, form_ids, start, end)

        summary = summarize(views, submissions)
        if estimate_views:
            daily = estimated_daily_series(
                start, end, submissions,
                [(f.view_count, f.created_at.date()) for f in forms if f.created_at],
            )
        else:
            daily = daily_series(start, end, submissions, views)

        if start > end:
            logger.info("Empty analytics range requested: %s > %s", start, end)

        return AnalyticsResponse(
            form_id=form_id if form_id and form_id != "all" else None,
            start_date=start,
            end_date=end,
            daily=daily,
            **summary.model_dump(),
        )

    @staticmethod
    def get_daily(
        db: Session,
        user: User,
        form_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[DailyPoint]:
        return AnalyticsService.get_analytics(db, user, form_id, start, end).daily

    @staticmethod
    def get_dashboard_stats(db: Session, user: User) -> DashboardStats:
        forms = db.query(Form).filter(Form.owner_id == user.id).all()
        form_ids = [f.id for f in forms]
        total_submissions = 0
        if form_ids:
            total_submissions = db.query(Submission).filter(Submission.form_id.in_(form_ids)).count()
        return DashboardStats(
            total_forms=len(forms),
            active_forms=sum(1 for f in forms if f.status == FormStatus.PUBLISHED),
            total_submissions=total_submissions,
            total_views=sum(f.view_count or 0 for f in forms),
        )
