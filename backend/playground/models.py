from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from .db import Base


def _now():
    return datetime.now(timezone.utc)


class CollectionItem(Base):
    __tablename__ = "collections"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

class RequestItem(Base):
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    collection_id = Column(Integer, ForeignKey("collections.id", ondelete="SET NULL"), nullable=True, index=True)
    method = Column(String, nullable=False)
    url = Column(String, nullable=False)
    headers = Column(Text)  # JSON string
    query_params = Column(Text)  # JSON string
    body = Column(Text)  # JSON string
    auth = Column(Text)  # JSON string
    created_at = Column(DateTime, default=_now, nullable=False)

class HistoryItem(Base):
    __tablename__ = "history"

    id = Column(Integer, primary_key=True, index=True)
    method = Column(String, nullable=False)
    url = Column(String, nullable=False)
    headers = Column(Text)
    query_params = Column(Text)
    body = Column(Text)
    auth = Column(Text)
    status_code = Column(Integer)
    duration_ms = Column(Integer)
    size = Column(Integer)
    response_headers = Column(Text)
    response_body = Column(Text)
    created_at = Column(DateTime, default=_now, nullable=False)
