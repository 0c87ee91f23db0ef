from sqlalchemy import Column, String, Text
import uuid

from replydesk.db import Base


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    # Not unique at the database level; lookups assume one match.
    username = Column(String, nullable=False, index=True)
    password = Column(Text, nullable=False)
