from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, DateTime, Text, Index, Uuid, func
from eduvault.db import Base, JSONDoc


class Challenge(Base):
    """
    Coding exercise definition.
    Content is written by admins only; the two counters are the sole fields
    touched by regular traffic and are bumped with a single UPDATE (see
    services.challenges.record_attempt).
    """
    __tablename__ = "challenges"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    slug: Mapped[str] = mapped_column(String(120), unique=True, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text(), nullable=False)
    difficulty: Mapped[str] = mapped_column(String(8), nullable=False, default="Medium")  # Easy|Medium|Hard
    language: Mapped[str] = mapped_column(String(16), nullable=False)  # javascript|python|java|cpp
    track: Mapped[str] = mapped_column(String(64), nullable=False)
    starter_code: Mapped[str] = mapped_column(Text(), nullable=False)
    tags: Mapped[list] = mapped_column(JSONDoc, nullable=False, default=list)
    blurb: Mapped[str | None] = mapped_column(String(500), nullable=True)
    authors: Mapped[list] = mapped_column(JSONDoc, nullable=False, default=list)
    # [{"input": str, "expected_output": str, "description": str, "is_hidden": bool}]
    test_cases: Mapped[list] = mapped_column(JSONDoc, nullable=False, default=list)

    total_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_passed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_challenges_language_difficulty", "language", "difficulty"),
    )

    @property
    def success_rate(self) -> float:
        if not self.total_attempts:
            return 0.0
        return round(self.total_passed / self.total_attempts * 100, 2)
