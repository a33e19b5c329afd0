from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, Index, CheckConstraint, Uuid, func
from eduvault.db import Base, JSONDoc

SUBMISSION_STATUSES = ("Pending", "Running", "Passed", "Failed", "Error")


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    challenge_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("challenges.id", ondelete="CASCADE"), index=True, nullable=False
    )

    code: Mapped[str] = mapped_column(Text(), nullable=False)
    language: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="Pending")  # see SUBMISSION_STATUSES

    # [{"test_name", "passed", "expected", "actual", "error"}]
    test_results: Mapped[list] = mapped_column(JSONDoc, nullable=False, default=list)
    execution_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    memory_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # bytes
    error_message: Mapped[str | None] = mapped_column(Text(), nullable=True)

    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # set at most once, by the badge award
    badge_awarded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    badge_awarded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Judge0 tokens, kept when the server ran the code
    execution_tokens: Mapped[list] = mapped_column(JSONDoc, nullable=False, default=list)

    __table_args__ = (
        Index("ix_submissions_user_challenge", "user_id", "challenge_id"),
        Index("ix_submissions_user_status", "user_id", "status"),
        CheckConstraint(
            "status IN (" + ",".join(f"'{s}'" for s in SUBMISSION_STATUSES) + ")", name="ck_submissions_status"
        ),
    )
