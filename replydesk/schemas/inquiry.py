from datetime import datetime
from typing import Optional

from replydesk.schemas.ai import Classification, Priority
from replydesk.schemas.base import CamelModel


class InquiryIn(CamelModel):
    """Body of POST /api/inquiries; category and priority come from the classifier."""
    subject: Optional[str] = None
    content: str
    source: Optional[str] = None
    sender: Optional[str] = None


class InquiryCreate(InquiryIn):
    user_id: str
    category: Optional[str] = None
    priority: Optional[Priority] = None
    ai_classification: Optional[Classification] = None


class Inquiry(CamelModel):
    id: str
    user_id: str
    subject: Optional[str] = None
    content: str
    category: Optional[str] = None
    priority: Priority = Priority.normal
    source: str = "email"
    sender: Optional[str] = None
    ai_classification: Optional[Classification] = None
    created_at: datetime
