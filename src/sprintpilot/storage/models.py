from datetime import datetime
from typing import Any

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Integer, JSON, DateTime, func
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP


class Base(DeclarativeBase):
    pass

# Helper to support both Postgres JSONB and generic JSON (for SQLite)
JSON_TYPE = JSON().with_variant(JSONB, 'postgresql')
TIMESTAMP_TYPE = DateTime(timezone=True).with_variant(TIMESTAMP(timezone=True), 'postgresql')

# --- Documents ---

class DocumentModel(Base):
    """One JSON document per key (current sprint, master holidays, history)."""
    __tablename__ = "documents"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[Any] = mapped_column(JSON_TYPE, nullable=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now(), onupdate=func.now())
    version: Mapped[int] = mapped_column(Integer, server_default='1')
