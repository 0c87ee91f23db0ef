"""Dashboard rollup over a window of daily analytics rows."""
from typing import Sequence

from replydesk.schemas.analytics import Analytics, AnalyticsSummary
from replydesk.schemas.template import Template

# Days covered by the dashboard summary
SUMMARY_WINDOW_DAYS = 7


def summarize_analytics(analytics: Sequence[Analytics], templates: Sequence[Template]) -> AnalyticsSummary:
    """Aggregate rollups into the dashboard numbers.

    Response rate is automated responses over inquiries as a percentage and
    satisfaction is rescaled from 0-100 to a 0-5 score. Both are 0 when there
    is nothing to divide by.
    """
    total_inquiries = sum(a.total_inquiries for a in analytics)
    automated = sum(a.automated_responses for a in analytics)

    response_rate = (automated / total_inquiries * 100) if total_inquiries else 0
    satisfaction = (
        sum(a.customer_satisfaction for a in analytics) / len(analytics) / 20
        if analytics else 0
    )

    return AnalyticsSummary(
        response_rate=response_rate,
        time_saved=sum(a.time_saved for a in analytics),
        customer_satisfaction=satisfaction,
        active_templates=sum(1 for t in templates if t.is_active),
        weekly_inquiries=total_inquiries,
        weekly_responses=automated,
    )
