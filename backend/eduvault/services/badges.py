from __future__ import annotations
import uuid
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.models.challenge import Challenge
from eduvault.models.submission import Submission
from eduvault.models.user import Badge
from eduvault.schemas.submission import BadgePublic
from eduvault.services.challenges import to_ref

log = structlog.get_logger()


def _insert_for(session: AsyncSession):
    dialect = session.bind.dialect.name if session.bind is not None else "postgresql"
    return sqlite.insert if dialect == "sqlite" else postgresql.insert


async def award_badge_once(session: AsyncSession, submission: Submission) -> bool:
    """
    Conditional insert keyed on (user_id, challenge_id); the unique constraint
    makes a concurrent second award a no-op. Returns True only for the insert
    that actually created the badge, and only then marks the submission.
    Caller commits.
    """
    insert = _insert_for(session)
    stmt = (
        insert(Badge)
        .values(
            id=uuid.uuid4(),
            user_id=submission.user_id,
            challenge_id=submission.challenge_id,
            submission_id=submission.id,
            earned_at=datetime.now(timezone.utc),
        )
        .on_conflict_do_nothing(index_elements=["user_id", "challenge_id"])
        .returning(Badge.id)
    )
    inserted = (await session.execute(stmt)).scalar_one_or_none()
    if inserted is None:
        return False
    submission.badge_awarded = True
    submission.badge_awarded_at = datetime.now(timezone.utc)
    log.info("badge_awarded", user_id=str(submission.user_id), challenge_id=str(submission.challenge_id))
    return True


async def list_badges(session: AsyncSession, user_id: uuid.UUID) -> list[BadgePublic]:
    rows = (await session.execute(
        select(Badge, Challenge)
        .join(Challenge, Challenge.id == Badge.challenge_id)
        .where(Badge.user_id == user_id)
        .order_by(Badge.earned_at.desc())
    )).all()
    return [
        BadgePublic(challenge_id=b.challenge_id, submission_id=b.submission_id, earned_at=b.earned_at, challenge=to_ref(ch))
        for b, ch in rows
    ]


async def get_badge(session: AsyncSession, user_id: uuid.UUID, challenge_id: uuid.UUID) -> BadgePublic | None:
    row = (await session.execute(
        select(Badge, Challenge)
        .join(Challenge, Challenge.id == Badge.challenge_id)
        .where(Badge.user_id == user_id, Badge.challenge_id == challenge_id)
    )).first()
    if not row:
        return None
    b, ch = row
    return BadgePublic(challenge_id=b.challenge_id, submission_id=b.submission_id, earned_at=b.earned_at, challenge=to_ref(ch))
