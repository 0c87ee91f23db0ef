from sqlalchemy import Boolean, Column, DateTime, JSON, String
import uuid

from replydesk.db import Base


class Integration(Base):
    __tablename__ = "integrations"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    platform = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=False)
    credentials = Column(JSON, nullable=True)
    settings = Column(JSON, nullable=False, default=dict)
    last_sync = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
