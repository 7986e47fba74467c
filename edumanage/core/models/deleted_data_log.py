"""
Audit log for destructive edits. Each entry holds the verbatim rows removed by one delete
and is consumed (deleted) when those rows are restored.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from edumanage.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeletedDataLog(Base):
    __tablename__ = "deleted_data_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_name = Column(Text, nullable=True)
    admission_number = Column(Text, nullable=False, index=True)
    data_type = Column(String(20), nullable=False)  # DataType value
    scope = Column(Text, nullable=False)
    deleted_by = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    reason = Column(Text, nullable=True)
    deleted_data = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)
