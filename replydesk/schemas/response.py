from datetime import datetime
from typing import Optional

from replydesk.schemas.base import CamelModel


class ResponseCreate(CamelModel):
    inquiry_id: str
    template_id: Optional[str] = None
    content: str
    is_automated: Optional[bool] = None
    was_modified: Optional[bool] = None
    customer_feedback: Optional[int] = None
    success: Optional[bool] = None


class ResponseFeedback(CamelModel):
    """Only the feedback fields are mutable after a response is sent."""
    customer_feedback: Optional[int] = None
    success: Optional[bool] = None


class Response(CamelModel):
    id: str
    inquiry_id: str
    template_id: Optional[str] = None
    content: str
    is_automated: bool = True
    was_modified: bool = False
    sent_at: datetime
    customer_feedback: Optional[int] = None
    success: Optional[bool] = None
