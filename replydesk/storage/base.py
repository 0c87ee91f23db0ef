"""
Storage Backend Interface

Abstract base class defining the CRUD contract every store implements.
Lookups return ``None`` for a missing record; nothing here raises for
"not found". Create never checks uniqueness or references.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel

from replydesk.schemas.analytics import Analytics, AnalyticsCreate
from replydesk.schemas.inquiry import Inquiry, InquiryCreate
from replydesk.schemas.integration import Integration, IntegrationCreate
from replydesk.schemas.response import Response, ResponseCreate
from replydesk.schemas.template import Template, TemplateCreate
from replydesk.schemas.user import User, UserCreate

M = TypeVar("M", bound=BaseModel)


# Values applied by create_* when the insert payload leaves a field out (or null).
TEMPLATE_DEFAULTS: Dict[str, Any] = {
    "subject": None,
    "variables": [],
    "is_active": True,
    "success_rate": 0,
    "times_used": 0,
}
INQUIRY_DEFAULTS: Dict[str, Any] = {
    "subject": None,
    "category": None,
    "priority": "normal",
    "source": "email",
    "sender": None,
    "ai_classification": None,
}
RESPONSE_DEFAULTS: Dict[str, Any] = {
    "template_id": None,
    "is_automated": True,
    "was_modified": False,
    "customer_feedback": None,
    "success": None,
}
INTEGRATION_DEFAULTS: Dict[str, Any] = {
    "is_active": False,
    "credentials": None,
    "settings": {},
}
ANALYTICS_DEFAULTS: Dict[str, Any] = {
    "total_inquiries": 0,
    "automated_responses": 0,
    "manual_responses": 0,
    "average_response_time": 0,
    "customer_satisfaction": 0,
    "time_saved": 0,
}


def apply_defaults(payload: Dict[str, Any], defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Fill omitted or null fields from ``defaults`` (mutable defaults are copied)."""
    data = dict(payload)
    for key, default in defaults.items():
        if data.get(key) is None:
            data[key] = default.copy() if isinstance(default, (list, dict)) else default
    return data


def merge_record(model: Type[M], record: M, fields: Dict[str, Any]) -> M:
    """Shallow merge of ``fields`` onto ``record``, re-validated. ``id`` never changes."""
    data = record.model_dump()
    data.update({k: v for k, v in fields.items() if k != "id"})
    return model.model_validate(data)


class StorageBackend(ABC):
    """CRUD over users, templates, inquiries, responses, integrations and analytics."""

    BACKEND_NAME: str = "base"

    # User operations
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, payload: UserCreate) -> User: ...

    # Template operations
    @abstractmethod
    def get_templates(self, user_id: str) -> List[Template]: ...

    @abstractmethod
    def get_template(self, template_id: str) -> Optional[Template]: ...

    @abstractmethod
    def create_template(self, payload: TemplateCreate) -> Template: ...

    @abstractmethod
    def update_template(self, template_id: str, fields: Dict[str, Any]) -> Optional[Template]:
        """Shallow-merge ``fields``; ``updated_at`` always moves forward."""

    @abstractmethod
    def increment_template_usage(self, template_id: str) -> Optional[Template]:
        """Atomically add one to ``times_used`` and refresh ``updated_at``."""

    @abstractmethod
    def delete_template(self, template_id: str) -> bool: ...

    # Inquiry operations
    @abstractmethod
    def get_inquiries(self, user_id: str) -> List[Inquiry]: ...

    @abstractmethod
    def get_inquiry(self, inquiry_id: str) -> Optional[Inquiry]: ...

    @abstractmethod
    def create_inquiry(self, payload: InquiryCreate) -> Inquiry: ...

    # Response operations
    @abstractmethod
    def get_responses(self, inquiry_id: str) -> List[Response]: ...

    @abstractmethod
    def get_responses_by_user(self, user_id: str) -> List[Response]:
        """Responses whose inquiry belongs to ``user_id``."""

    @abstractmethod
    def create_response(self, payload: ResponseCreate) -> Response: ...

    @abstractmethod
    def update_response(self, response_id: str, fields: Dict[str, Any]) -> Optional[Response]: ...

    # Integration operations
    @abstractmethod
    def get_integrations(self, user_id: str) -> List[Integration]: ...

    @abstractmethod
    def get_integration(self, integration_id: str) -> Optional[Integration]: ...

    @abstractmethod
    def create_integration(self, payload: IntegrationCreate) -> Integration: ...

    @abstractmethod
    def update_integration(self, integration_id: str, fields: Dict[str, Any]) -> Optional[Integration]: ...

    # Analytics operations
    @abstractmethod
    def get_analytics(self, user_id: str, days: Optional[int] = None) -> List[Analytics]:
        """Owner's rollups; with a truthy ``days`` only those dated in the trailing window."""

    @abstractmethod
    def create_analytics(self, payload: AnalyticsCreate) -> Analytics: ...

    @abstractmethod
    def update_analytics(self, analytics_id: str, fields: Dict[str, Any]) -> Optional[Analytics]: ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
