from datetime import datetime
from typing import Optional

from replydesk.schemas.base import CamelModel


class AnalyticsCreate(CamelModel):
    user_id: str
    total_inquiries: Optional[int] = None
    automated_responses: Optional[int] = None
    manual_responses: Optional[int] = None
    average_response_time: Optional[int] = None
    customer_satisfaction: Optional[int] = None
    time_saved: Optional[int] = None


class AnalyticsUpdate(CamelModel):
    date: Optional[datetime] = None
    total_inquiries: Optional[int] = None
    automated_responses: Optional[int] = None
    manual_responses: Optional[int] = None
    average_response_time: Optional[int] = None
    customer_satisfaction: Optional[int] = None
    time_saved: Optional[int] = None


class Analytics(CamelModel):
    """One day's rollup of inquiry and response counters."""
    id: str
    user_id: str
    date: Optional[datetime] = None
    total_inquiries: int = 0
    automated_responses: int = 0
    manual_responses: int = 0
    average_response_time: int = 0
    # 0-100; the summary rescales it to a 0-5 score
    customer_satisfaction: int = 0
    time_saved: int = 0


class AnalyticsSummary(CamelModel):
    response_rate: float = 0
    time_saved: int = 0
    customer_satisfaction: float = 0
    active_templates: int = 0
    weekly_inquiries: int = 0
    weekly_responses: int = 0
