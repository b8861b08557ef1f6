from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, DateTime

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """공통 타임스탬프 필드를 위한 믹스인"""
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, comment="생성일시")
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False, comment="수정일시")
