from __future__ import annotations
import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, DateTime, ForeignKey, Index, Uuid
from eduvault.db import Base


class Visit(Base):
    __tablename__ = "visits"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    profile_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    viewer_role: Mapped[str] = mapped_column(String(16), nullable=False)  # recruiter|guest
    viewer_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    recruiter_company: Mapped[str | None] = mapped_column(String(200), nullable=True)

    ip_address: Mapped[str] = mapped_column(String(64), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False, default="Unknown")
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    country: Mapped[str | None] = mapped_column(String(120), nullable=True)
    user_agent: Mapped[str] = mapped_column(String(512), nullable=False)
    browser: Mapped[str] = mapped_column(String(64), nullable=False, default="Unknown")
    os: Mapped[str] = mapped_column(String(64), nullable=False, default="Unknown")

    # python-side default so window filters compare like with like on every backend
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), index=True, nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        Index("ix_visits_profile_timestamp", "profile_id", "timestamp"),
    )
