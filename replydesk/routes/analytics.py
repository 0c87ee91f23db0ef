from typing import List

from fastapi import APIRouter, Depends, Query

from replydesk.deps import get_demo_owner, get_storage
from replydesk.schemas.analytics import Analytics, AnalyticsSummary
from replydesk.schemas.user import User
from replydesk.services.analytics import SUMMARY_WINDOW_DAYS, summarize_analytics
from replydesk.storage import StorageBackend

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


@router.get("", response_model=List[Analytics])
def list_analytics(
    days: int = Query(30, ge=0, description="Trailing window in days; 0 returns everything"),
    storage: StorageBackend = Depends(get_storage),
    owner: User = Depends(get_demo_owner),
):
    return storage.get_analytics(owner.id, days)


@router.get("/summary", response_model=AnalyticsSummary)
def analytics_summary(
    storage: StorageBackend = Depends(get_storage),
    owner: User = Depends(get_demo_owner),
):
    rows = storage.get_analytics(owner.id, SUMMARY_WINDOW_DAYS)
    return summarize_analytics(rows, storage.get_templates(owner.id))
