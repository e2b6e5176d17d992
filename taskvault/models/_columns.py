import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.dialects import mysql

# microsecond precision on MySQL so creation order survives the round trip
Timestamp = DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")

NAME_LENGTH = 255
USER_ID_LENGTH = 64


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    # naive UTC: MySQL DATETIME and SQLite both drop tzinfo on the way back
    return datetime.now(timezone.utc).replace(tzinfo=None)
