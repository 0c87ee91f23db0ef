"""In-process store keyed by generated ids. Data lives as long as the instance."""

import threading
import uuid
from typing import Any, Dict, List, Optional, TypeVar

from pydantic import BaseModel

from replydesk.schemas.analytics import Analytics, AnalyticsCreate
from replydesk.schemas.inquiry import Inquiry, InquiryCreate
from replydesk.schemas.integration import Integration, IntegrationCreate
from replydesk.schemas.response import Response, ResponseCreate
from replydesk.schemas.template import Template, TemplateCreate
from replydesk.schemas.user import User, UserCreate
from replydesk.storage.base import (
    ANALYTICS_DEFAULTS,
    INQUIRY_DEFAULTS,
    INTEGRATION_DEFAULTS,
    RESPONSE_DEFAULTS,
    TEMPLATE_DEFAULTS,
    StorageBackend,
    apply_defaults,
    merge_record,
)
from replydesk.utils.datetime import advance_past, days_ago, ensure_aware_utc, utc_now


M = TypeVar("M", bound=BaseModel)


def _new_id() -> str:
    return str(uuid.uuid4())


class MemStorage(StorageBackend):
    """Dict-per-entity store.

    FastAPI runs sync handlers on a thread pool, so every public method holds
    ``self._lock``. Records handed out are copies of what is stored.
    """

    BACKEND_NAME = "memory"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self._templates: Dict[str, Template] = {}
        self._inquiries: Dict[str, Inquiry] = {}
        self._responses: Dict[str, Response] = {}
        self._integrations: Dict[str, Integration] = {}
        self._analytics: Dict[str, Analytics] = {}

    @staticmethod
    def _copy(record: M) -> M:
        return record.model_copy(deep=True)

    # User operations

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return self._copy(user) if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return self._copy(user)
        return None

    def create_user(self, payload: UserCreate) -> User:
        user = User(id=_new_id(), **payload.model_dump())
        with self._lock:
            self._users[user.id] = user
        return self._copy(user)

    # Template operations

    def get_templates(self, user_id: str) -> List[Template]:
        with self._lock:
            return [self._copy(t) for t in self._templates.values() if t.user_id == user_id]

    def get_template(self, template_id: str) -> Optional[Template]:
        with self._lock:
            template = self._templates.get(template_id)
            return self._copy(template) if template else None

    def create_template(self, payload: TemplateCreate) -> Template:
        now = utc_now()
        data = apply_defaults(payload.model_dump(), TEMPLATE_DEFAULTS)
        template = Template(id=_new_id(), created_at=now, updated_at=now, **data)
        with self._lock:
            self._templates[template.id] = template
        return self._copy(template)

    def update_template(self, template_id: str, fields: Dict[str, Any]) -> Optional[Template]:
        with self._lock:
            template = self._templates.get(template_id)
            if template is None:
                return None
            changes = {k: v for k, v in fields.items() if k not in ("created_at", "updated_at")}
            changes["updated_at"] = advance_past(template.updated_at)
            updated = merge_record(Template, template, changes)
            self._templates[template_id] = updated
            return self._copy(updated)

    def increment_template_usage(self, template_id: str) -> Optional[Template]:
        # Read and write under one lock so concurrent intakes each count
        with self._lock:
            template = self._templates.get(template_id)
            if template is None:
                return None
            updated = template.model_copy(update={
                "times_used": template.times_used + 1,
                "updated_at": advance_past(template.updated_at),
            })
            self._templates[template_id] = updated
            return self._copy(updated)

    def delete_template(self, template_id: str) -> bool:
        with self._lock:
            return self._templates.pop(template_id, None) is not None

    # Inquiry operations

    def get_inquiries(self, user_id: str) -> List[Inquiry]:
        with self._lock:
            return [self._copy(i) for i in self._inquiries.values() if i.user_id == user_id]

    def get_inquiry(self, inquiry_id: str) -> Optional[Inquiry]:
        with self._lock:
            inquiry = self._inquiries.get(inquiry_id)
            return self._copy(inquiry) if inquiry else None

    def create_inquiry(self, payload: InquiryCreate) -> Inquiry:
        data = apply_defaults(payload.model_dump(), INQUIRY_DEFAULTS)
        inquiry = Inquiry(id=_new_id(), created_at=utc_now(), **data)
        with self._lock:
            self._inquiries[inquiry.id] = inquiry
        return self._copy(inquiry)

    # Response operations

    def get_responses(self, inquiry_id: str) -> List[Response]:
        with self._lock:
            return [self._copy(r) for r in self._responses.values() if r.inquiry_id == inquiry_id]

    def get_responses_by_user(self, user_id: str) -> List[Response]:
        # Both steps under one lock so the inquiry set cannot shift in between
        with self._lock:
            inquiry_ids = {i.id for i in self._inquiries.values() if i.user_id == user_id}
            return [self._copy(r) for r in self._responses.values() if r.inquiry_id in inquiry_ids]

    def create_response(self, payload: ResponseCreate) -> Response:
        data = apply_defaults(payload.model_dump(), RESPONSE_DEFAULTS)
        response = Response(id=_new_id(), sent_at=utc_now(), **data)
        with self._lock:
            self._responses[response.id] = response
        return self._copy(response)

    def update_response(self, response_id: str, fields: Dict[str, Any]) -> Optional[Response]:
        with self._lock:
            response = self._responses.get(response_id)
            if response is None:
                return None
            updated = merge_record(Response, response, fields)
            self._responses[response_id] = updated
            return self._copy(updated)

    # Integration operations

    def get_integrations(self, user_id: str) -> List[Integration]:
        with self._lock:
            return [self._copy(i) for i in self._integrations.values() if i.user_id == user_id]

    def get_integration(self, integration_id: str) -> Optional[Integration]:
        with self._lock:
            integration = self._integrations.get(integration_id)
            return self._copy(integration) if integration else None

    def create_integration(self, payload: IntegrationCreate) -> Integration:
        data = apply_defaults(payload.model_dump(), INTEGRATION_DEFAULTS)
        integration = Integration(id=_new_id(), created_at=utc_now(), last_sync=None, **data)
        with self._lock:
            self._integrations[integration.id] = integration
        return self._copy(integration)

    def update_integration(self, integration_id: str, fields: Dict[str, Any]) -> Optional[Integration]:
        with self._lock:
            integration = self._integrations.get(integration_id)
            if integration is None:
                return None
            updated = merge_record(Integration, integration, fields)
            self._integrations[integration_id] = updated
            return self._copy(updated)

    # Analytics operations

    def get_analytics(self, user_id: str, days: Optional[int] = None) -> List[Analytics]:
        with self._lock:
            rows = [self._copy(a) for a in self._analytics.values() if a.user_id == user_id]
        if days:
            cutoff = days_ago(days)
            rows = [a for a in rows if a.date is not None and ensure_aware_utc(a.date) >= cutoff]
        return rows

    def create_analytics(self, payload: AnalyticsCreate) -> Analytics:
        data = apply_defaults(payload.model_dump(), ANALYTICS_DEFAULTS)
        analytics = Analytics(id=_new_id(), date=utc_now(), **data)
        with self._lock:
            self._analytics[analytics.id] = analytics
        return self._copy(analytics)

    def update_analytics(self, analytics_id: str, fields: Dict[str, Any]) -> Optional[Analytics]:
        with self._lock:
            analytics = self._analytics.get(analytics_id)
            if analytics is None:
                return None
            updated = merge_record(Analytics, analytics, fields)
            self._analytics[analytics_id] = updated
            return self._copy(updated)
