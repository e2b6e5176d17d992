from sqlalchemy import JSON, Column, String

from taskvault.database import Base
from taskvault.models._columns import USER_ID_LENGTH, Timestamp, new_id, utcnow


class AppSettings(Base):
    __tablename__ = "app_settings"
    id = Column(String(36), primary_key=True, default=new_id)
    # one settings document per user
    user_id = Column(String(USER_ID_LENGTH), nullable=False, unique=True)
    settings_data = Column(JSON, nullable=False, default=dict)
    created_at = Column(Timestamp, nullable=False, default=utcnow)
    updated_at = Column(Timestamp, nullable=False, default=utcnow, onupdate=utcnow)
