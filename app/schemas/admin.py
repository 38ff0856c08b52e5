"""
Admin schemas.
"""
from decimal import Decimal
from typing import Dict, Optional
from app.schemas.base import BaseSchema


class AdminStatsResponse(BaseSchema):
    users_total: int
    users_active: int
    resumes_total: int
    cover_letters_total: int
    job_applications_total: int
    subscriptions_active: int
    subscriptions_grace_period: int
    revenue: Dict[str, Decimal]


class AdminUserUpdate(BaseSchema):
    is_active: Optional[bool] = None
    is_admin: Optional[bool] = None


class CronRunResponse(BaseSchema):
    job: str
    task_id: str
    status: str = "queued"
