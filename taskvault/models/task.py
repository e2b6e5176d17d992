from sqlalchemy import Boolean, Column, String, Text

from taskvault.database import Base
from taskvault.models._columns import NAME_LENGTH, USER_ID_LENGTH, Timestamp, new_id, utcnow


class Task(Base):
    __tablename__ = "tasks"
    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(USER_ID_LENGTH), nullable=False, index=True)
    title = Column(String(NAME_LENGTH), nullable=False)
    description = Column(Text, nullable=False, default="")
    is_urgent = Column(Boolean, nullable=False, default=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(Timestamp, nullable=False, default=utcnow)
    updated_at = Column(Timestamp, nullable=False, default=utcnow, onupdate=utcnow)
