from datetime import datetime
from typing import List, Optional

from replydesk.schemas.base import CamelModel


class TemplateIn(CamelModel):
    """Template fields a client may send when creating one."""
    name: str
    category: str
    subject: Optional[str] = None
    content: str
    variables: Optional[List[str]] = None
    is_active: Optional[bool] = None
    success_rate: Optional[int] = None
    times_used: Optional[int] = None


class TemplateCreate(TemplateIn):
    user_id: str


class TemplateUpdate(CamelModel):
    name: Optional[str] = None
    category: Optional[str] = None
    subject: Optional[str] = None
    content: Optional[str] = None
    variables: Optional[List[str]] = None
    is_active: Optional[bool] = None
    success_rate: Optional[int] = None
    times_used: Optional[int] = None


class Template(CamelModel):
    id: str
    user_id: str
    name: str
    category: str
    subject: Optional[str] = None
    content: str
    variables: List[str] = []
    is_active: bool = True
    success_rate: int = 0
    times_used: int = 0
    created_at: datetime
    updated_at: datetime
