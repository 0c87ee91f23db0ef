from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String, Text
import uuid

from replydesk.db import Base


class Template(Base):
    __tablename__ = "templates"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    name = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    subject = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    variables = Column(JSON, nullable=False, default=list)  # placeholder names, in order
    is_active = Column(Boolean, nullable=False, default=True)
    success_rate = Column(Integer, nullable=False, default=0)
    times_used = Column(Integer, nullable=False, default=0)

    # naive UTC
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
