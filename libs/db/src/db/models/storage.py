from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Key-value store: gf_storage
# ---------------------------


class GfStorageEntry(Base):
    __tablename__ = "gf_storage"

    # Keys are namespaced by the application, e.g.
    # "@gofinances:transactions_user:<user id>".
    key: Mapped[str] = mapped_column(String, primary_key=True)
    # JSON text owned by the caller; the database never inspects it.
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
    )
