from sqlalchemy import Column, DateTime, JSON, String, Text
import uuid

from replydesk.db import Base


class Inquiry(Base):
    __tablename__ = "inquiries"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    subject = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    category = Column(String, nullable=True)
    priority = Column(String, nullable=False, default="normal")
    source = Column(String, nullable=False, default="email")
    sender = Column(Text, nullable=True)
    ai_classification = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False)
