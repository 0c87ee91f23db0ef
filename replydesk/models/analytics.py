from sqlalchemy import Column, DateTime, Integer, String
import uuid

from replydesk.db import Base


class Analytics(Base):
    __tablename__ = "analytics"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    date = Column(DateTime, nullable=True, index=True)
    total_inquiries = Column(Integer, nullable=False, default=0)
    automated_responses = Column(Integer, nullable=False, default=0)
    manual_responses = Column(Integer, nullable=False, default=0)
    average_response_time = Column(Integer, nullable=False, default=0)
    customer_satisfaction = Column(Integer, nullable=False, default=0)
    time_saved = Column(Integer, nullable=False, default=0)
