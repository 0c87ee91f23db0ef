"""SQLAlchemy-backed store. Same contract and defaults as MemStorage."""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from replydesk.db import Base, build_engine, build_session_factory
from replydesk.models.analytics import Analytics as AnalyticsRow
from replydesk.models.inquiry import Inquiry as InquiryRow
from replydesk.models.integration import Integration as IntegrationRow
from replydesk.models.response import Response as ResponseRow
from replydesk.models.template import Template as TemplateRow
from replydesk.models.user import User as UserRow
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
from replydesk.utils.datetime import advance_past, days_ago, ensure_aware_utc, to_naive_utc, utc_now

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_JSON_COLUMNS = {"variables", "ai_classification", "credentials", "settings"}


def _to_record(model: Type[M], row) -> M:
    """ORM row -> API record. Stored datetimes are naive UTC."""
    data = {}
    for column in row.__table__.columns:
        value = getattr(row, column.name)
        if isinstance(value, datetime):
            value = ensure_aware_utc(value)
        data[column.name] = value
    return model.model_validate(data)


def _column_values(record: BaseModel) -> Dict[str, Any]:
    """API record -> column values ready to assign on an ORM row."""
    values = record.model_dump()
    json_fields = _JSON_COLUMNS & set(values)
    if json_fields:
        values.update(record.model_dump(mode="json", include=json_fields))
    for key, value in values.items():
        if isinstance(value, datetime):
            values[key] = to_naive_utc(value)
        elif isinstance(value, Enum):
            values[key] = value.value
    return values


class SqlStorage(StorageBackend):
    """Each operation runs in its own session and commits before returning."""

    BACKEND_NAME = "sql"

    def __init__(self, engine: Optional[Engine] = None) -> None:
        self.engine = engine or build_engine()
        self._session_factory = build_session_factory(self.engine)
        Base.metadata.create_all(bind=self.engine)
        logger.info("SQL storage ready (%s)", self.engine.dialect.name)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _insert(self, row_cls, model: Type[M], record: M) -> M:
        with self._session() as db:
            row = row_cls(**_column_values(record))
            db.add(row)
            db.flush()
            db.refresh(row)
            return _to_record(model, row)

    def _get(self, row_cls, model: Type[M], record_id: str) -> Optional[M]:
        with self._session() as db:
            row = db.get(row_cls, record_id)
            return _to_record(model, row) if row is not None else None

    def _update(self, row_cls, model: Type[M], record_id: str, fields: Dict[str, Any], touch: bool = False) -> Optional[M]:
        with self._session() as db:
            row = db.get(row_cls, record_id)
            if row is None:
                return None
            current = _to_record(model, row)
            changes = dict(fields)
            if touch:
                changes.pop("created_at", None)
                changes["updated_at"] = advance_past(current.updated_at)
            updated = merge_record(model, current, changes)
            for key, value in _column_values(updated).items():
                setattr(row, key, value)
            db.flush()
            db.refresh(row)
            return _to_record(model, row)

    # User operations

    def get_user(self, user_id: str) -> Optional[User]:
        return self._get(UserRow, User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._session() as db:
            row = db.query(UserRow).filter(UserRow.username == username).first()
            return _to_record(User, row) if row is not None else None

    def create_user(self, payload: UserCreate) -> User:
        return self._insert(UserRow, User, User(id=str(uuid.uuid4()), **payload.model_dump()))

    # Template operations

    def get_templates(self, user_id: str) -> List[Template]:
        with self._session() as db:
            rows = (
                db.query(TemplateRow)
                .filter(TemplateRow.user_id == user_id)
                .order_by(TemplateRow.created_at)
                .all()
            )
            return [_to_record(Template, r) for r in rows]

    def get_template(self, template_id: str) -> Optional[Template]:
        return self._get(TemplateRow, Template, template_id)

    def create_template(self, payload: TemplateCreate) -> Template:
        now = utc_now()
        data = apply_defaults(payload.model_dump(), TEMPLATE_DEFAULTS)
        record = Template(id=str(uuid.uuid4()), created_at=now, updated_at=now, **data)
        return self._insert(TemplateRow, Template, record)

    def update_template(self, template_id: str, fields: Dict[str, Any]) -> Optional[Template]:
        return self._update(TemplateRow, Template, template_id, fields, touch=True)

    def increment_template_usage(self, template_id: str) -> Optional[Template]:
        with self._session() as db:
            result = db.execute(
                update(TemplateRow)
                .where(TemplateRow.id == template_id)
                .values(times_used=TemplateRow.times_used + 1)
            )
            if result.rowcount == 0:
                return None
            row = db.get(TemplateRow, template_id, populate_existing=True)
            row.updated_at = to_naive_utc(advance_past(ensure_aware_utc(row.updated_at)))
            db.flush()
            return _to_record(Template, row)

    def delete_template(self, template_id: str) -> bool:
        with self._session() as db:
            row = db.get(TemplateRow, template_id)
            if row is None:
                return False
            db.delete(row)
            return True

    # Inquiry operations

    def get_inquiries(self, user_id: str) -> List[Inquiry]:
        with self._session() as db:
            rows = (
                db.query(InquiryRow)
                .filter(InquiryRow.user_id == user_id)
                .order_by(InquiryRow.created_at)
                .all()
            )
            return [_to_record(Inquiry, r) for r in rows]

    def get_inquiry(self, inquiry_id: str) -> Optional[Inquiry]:
        return self._get(InquiryRow, Inquiry, inquiry_id)

    def create_inquiry(self, payload: InquiryCreate) -> Inquiry:
        data = apply_defaults(payload.model_dump(), INQUIRY_DEFAULTS)
        record = Inquiry(id=str(uuid.uuid4()), created_at=utc_now(), **data)
        return self._insert(InquiryRow, Inquiry, record)

    # Response operations

    def get_responses(self, inquiry_id: str) -> List[Response]:
        with self._session() as db:
            rows = (
                db.query(ResponseRow)
                .filter(ResponseRow.inquiry_id == inquiry_id)
                .order_by(ResponseRow.sent_at)
                .all()
            )
            return [_to_record(Response, r) for r in rows]

    def get_responses_by_user(self, user_id: str) -> List[Response]:
        owned_inquiries = select(InquiryRow.id).where(InquiryRow.user_id == user_id)
        with self._session() as db:
            rows = (
                db.query(ResponseRow)
                .filter(ResponseRow.inquiry_id.in_(owned_inquiries))
                .order_by(ResponseRow.sent_at)
                .all()
            )
            return [_to_record(Response, r) for r in rows]

    def create_response(self, payload: ResponseCreate) -> Response:
        data = apply_defaults(payload.model_dump(), RESPONSE_DEFAULTS)
        record = Response(id=str(uuid.uuid4()), sent_at=utc_now(), **data)
        return self._insert(ResponseRow, Response, record)

    def update_response(self, response_id: str, fields: Dict[str, Any]) -> Optional[Response]:
        return self._update(ResponseRow, Response, response_id, fields)

    # Integration operations

    def get_integrations(self, user_id: str) -> List[Integration]:
        with self._session() as db:
            rows = (
                db.query(IntegrationRow)
                .filter(IntegrationRow.user_id == user_id)
                .order_by(IntegrationRow.created_at)
                .all()
            )
            return [_to_record(Integration, r) for r in rows]

    def get_integration(self, integration_id: str) -> Optional[Integration]:
        return self._get(IntegrationRow, Integration, integration_id)

    def create_integration(self, payload: IntegrationCreate) -> Integration:
        data = apply_defaults(payload.model_dump(), INTEGRATION_DEFAULTS)
        record = Integration(id=str(uuid.uuid4()), created_at=utc_now(), last_sync=None, **data)
        return self._insert(IntegrationRow, Integration, record)

    def update_integration(self, integration_id: str, fields: Dict[str, Any]) -> Optional[Integration]:
        return self._update(IntegrationRow, Integration, integration_id, fields)

    # Analytics operations

    def get_analytics(self, user_id: str, days: Optional[int] = None) -> List[Analytics]:
        with self._session() as db:
            q = db.query(AnalyticsRow).filter(AnalyticsRow.user_id == user_id)
            if days:
                cutoff = to_naive_utc(days_ago(days))
                q = q.filter(AnalyticsRow.date.isnot(None), AnalyticsRow.date >= cutoff)
            return [_to_record(Analytics, r) for r in q.order_by(AnalyticsRow.date).all()]

    def create_analytics(self, payload: AnalyticsCreate) -> Analytics:
        data = apply_defaults(payload.model_dump(), ANALYTICS_DEFAULTS)
        record = Analytics(id=str(uuid.uuid4()), date=utc_now(), **data)
        return self._insert(AnalyticsRow, Analytics, record)

    def update_analytics(self, analytics_id: str, fields: Dict[str, Any]) -> Optional[Analytics]:
        return self._update(AnalyticsRow, Analytics, analytics_id, fields)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(url={self.engine.url.render_as_string(hide_password=True)})"
