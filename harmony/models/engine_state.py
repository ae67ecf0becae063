"""
EngineStateRecord — opaque key-value store for engine documents.

One row per logical user session (`key`). `document` holds the JSON-encoded
EngineStateDocument; the engine never queries inside it.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from harmony.db.base import Base


class EngineStateRecord(Base):
    __tablename__ = "engine_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    key: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    document: Mapped[str] = mapped_column(
        Text, nullable=False,
        comment="JSON-encoded EngineStateDocument",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
