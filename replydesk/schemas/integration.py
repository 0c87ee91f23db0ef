from datetime import datetime
from typing import Any, Dict, Optional

from replydesk.schemas.base import CamelModel

# Platforms the dashboard knows how to render; any other name is still accepted.
KNOWN_PLATFORMS = ("Gmail", "Slack", "Discord", "Telegram")


class IntegrationIn(CamelModel):
    platform: str
    is_active: Optional[bool] = None
    # Provider-defined shapes, stored as-is
    credentials: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None


class IntegrationCreate(IntegrationIn):
    user_id: str


class IntegrationUpdate(CamelModel):
    platform: Optional[str] = None
    is_active: Optional[bool] = None
    credentials: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    last_sync: Optional[datetime] = None


class Integration(CamelModel):
    id: str
    user_id: str
    platform: str
    is_active: bool = False
    credentials: Optional[Dict[str, Any]] = None
    settings: Dict[str, Any] = {}
    last_sync: Optional[datetime] = None
    created_at: datetime
