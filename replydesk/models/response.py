from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
import uuid

from replydesk.db import Base


class Response(Base):
    __tablename__ = "responses"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    # Plain references: nothing enforces that the inquiry or template exists
    inquiry_id = Column(String, nullable=False, index=True)
    template_id = Column(String, nullable=True, index=True)
    content = Column(Text, nullable=False)
    is_automated = Column(Boolean, nullable=False, default=True)
    was_modified = Column(Boolean, nullable=False, default=False)
    sent_at = Column(DateTime, nullable=False)
    customer_feedback = Column(Integer, nullable=True)
    success = Column(Boolean, nullable=True)
