"""Plan limits for forms and submissions."""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum as PyEnum
from typing import Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from formcraft.models.form import Form, Submission
from formcraft.models.user import PlanType, User


class Resource(str, PyEnum):
    FORMS = "forms"
    SUBMISSIONS = "submissions"


@dataclass(frozen=True)
class PlanLimits:
    forms: float
    # Submissions per calendar month, across all of the owner's forms
    submissions: float


PLAN_LIMITS: Dict[PlanType, PlanLimits] = {
    PlanType.FREE: PlanLimits(forms=3, submissions=100),
    PlanType.PREMIUM: PlanLimits(forms=math.inf, submissions=math.inf),
}


def _month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class QuotaService:
    """Answers whether an owner has reached a plan limit."""

    @staticmethod
    def limits_for(user: User) -> PlanLimits:
        return PLAN_LIMITS.get(user.plan_type, PLAN_LIMITS[PlanType.FREE])

    @staticmethod
    def usage(db: Session, user: User, resource: Resource, now: Optional[datetime] = None) -> int:
        if resource == Resource.FORMS:
            return db.query(func.count(Form.id)).filter(Form.owner_id == user.id).scalar() or 0
        now = now or datetime.utcnow()
        return db.query(func.count(Submission.id)).join(Form).filter(
            Form.owner_id == user.id,
            Submission.created_at >= _month_start(now),
        ).scalar() or 0

    @staticmethod
    def is_over_limit(db: Session, user: User, resource: Resource, now: Optional[datetime] = None) -> bool:
        """True once the owner's usage has reached the plan cap."""
        limit = getattr(QuotaService.limits_for(user), resource.value)
        if math.isinf(limit):
            return False
        return QuotaService.usage(db, user, resource, now) >= limit
