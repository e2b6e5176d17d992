from sqlalchemy import JSON, Column, String

from taskvault.database import Base
from taskvault.models._columns import NAME_LENGTH, USER_ID_LENGTH, Timestamp, new_id, utcnow


class Backup(Base):
    """Point-in-time copy of a user's tasks and settings document."""

    __tablename__ = "backups"
    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(USER_ID_LENGTH), nullable=False, index=True)
    backup_name = Column(String(NAME_LENGTH), nullable=False)
    tasks_data = Column(JSON, nullable=False, default=list)
    settings_data = Column(JSON, nullable=False, default=dict)
    created_at = Column(Timestamp, nullable=False, default=utcnow)
