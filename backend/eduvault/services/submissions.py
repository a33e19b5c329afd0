from __future__ import annotations
import uuid
from typing import Any
from sqlalchemy import select, func, distinct
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.errors import ExecutionError, ValidationFailed
from eduvault.models.challenge import Challenge
from eduvault.models.submission import Submission
from eduvault.models.user import Badge
from eduvault.schemas.submission import SubmitRequest, RunRequest, SubmissionPublic, CaseResult, UserStats
from eduvault.services.badges import award_badge_once
from eduvault.services.challenges import get_challenge_or_404, find_challenge, record_attempt, challenge_cases, to_ref
from eduvault.services.execution.base import ExecutionAdapter

log = structlog.get_logger()

DEFAULT_LIMIT = 20


def _require(challenge_id: str | None, code: str | None) -> tuple[str, str]:
    if not challenge_id or not challenge_id.strip():
        raise ValidationFailed("Challenge ID is required")
    if not code or not code.strip():
        raise ValidationFailed("Code is required")
    return challenge_id.strip(), code


async def _record_verdict(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    challenge: Challenge,
    code: str,
    language: str,
    results: list[dict[str, Any]],
    passed: bool,
    execution_time_ms: int = 0,
    memory_used: int = 0,
    tokens: list[str] | None = None,
) -> tuple[Submission, bool]:
    sub = Submission(
        user_id=user_id,
        challenge_id=challenge.id,
        code=code,
        language=language,
        status="Passed" if passed else "Failed",
        test_results=results,
        execution_time_ms=execution_time_ms,
        memory_used=memory_used,
        execution_tokens=tokens or [],
    )
    session.add(sub)
    await session.flush()
    await record_attempt(session, challenge.id, passed)
    awarded = False
    if passed:
        awarded = await award_badge_once(session, sub)
    await session.commit()
    await session.refresh(sub)
    log.info(
        "submission_recorded",
        submission_id=str(sub.id), challenge=challenge.slug, status=sub.status, badge_awarded=awarded,
    )
    return sub, awarded


async def submit(session: AsyncSession, user_id: uuid.UUID, payload: SubmitRequest) -> tuple[Submission, Challenge, bool]:
    """
    Record a verdict computed by the client. The status follows the
    `passed` flag alone; per-test results are stored as given.
    """
    challenge_ref, code = _require(payload.challenge_id, payload.code)
    ch = await get_challenge_or_404(session, challenge_ref)
    sub, awarded = await _record_verdict(
        session,
        user_id=user_id,
        challenge=ch,
        code=code,
        language=payload.language,
        results=[r.model_dump() for r in payload.results],
        passed=payload.passed,
        execution_time_ms=payload.execution_time,
    )
    return sub, ch, awarded


async def run(
    session: AsyncSession, user_id: uuid.UUID, payload: RunRequest, adapter: ExecutionAdapter
) -> tuple[Submission, Challenge, bool]:
    """Execute against the challenge's test cases on the configured service, then record like `submit`."""
    challenge_ref, code = _require(payload.challenge_id, payload.code)
    ch = await get_challenge_or_404(session, challenge_ref)
    language = payload.language or ch.language
    try:
        report = await adapter.execute(code, language, challenge_cases(ch))
    except ExecutionError as e:
        log.error("execution_failed", challenge=ch.slug, language=language, error=e.message)
        session.add(Submission(
            user_id=user_id, challenge_id=ch.id, code=code, language=language,
            status="Error", error_message=ExecutionError.default_message,
        ))
        await session.commit()
        raise
    elapsed = sum(r.time or 0.0 for r in report.results)
    memory = max((r.memory or 0 for r in report.results), default=0)
    sub, awarded = await _record_verdict(
        session,
        user_id=user_id,
        challenge=ch,
        code=code,
        language=language,
        results=[r.to_result() for r in report.results],
        passed=report.all_passed,
        execution_time_ms=int(elapsed * 1000),
        memory_used=memory,
        tokens=[r.token for r in report.results if r.token],
    )
    return sub, ch, awarded


def to_public(sub: Submission, ch: Challenge | None = None) -> SubmissionPublic:
    return SubmissionPublic(
        id=sub.id, user_id=sub.user_id, challenge_id=sub.challenge_id, code=sub.code,
        language=sub.language, status=sub.status,
        test_results=[CaseResult.model_validate(r) for r in (sub.test_results or [])],
        execution_time_ms=sub.execution_time_ms, memory_used=sub.memory_used,
        error_message=sub.error_message, submitted_at=sub.submitted_at,
        badge_awarded=sub.badge_awarded, badge_awarded_at=sub.badge_awarded_at,
        challenge=to_ref(ch) if ch else None,
    )


async def list_submissions(
    session: AsyncSession,
    user_id: uuid.UUID,
    challenge: str | None = None,
    status: str | None = None,
    limit: int = DEFAULT_LIMIT,
) -> list[SubmissionPublic]:
    stmt = (
        select(Submission, Challenge)
        .join(Challenge, Challenge.id == Submission.challenge_id)
        .where(Submission.user_id == user_id)
    )
    if challenge:
        ch = await find_challenge(session, challenge)
        if not ch:
            return []
        stmt = stmt.where(Submission.challenge_id == ch.id)
    if status:
        stmt = stmt.where(Submission.status == status)
    rows = (await session.execute(stmt.order_by(Submission.submitted_at.desc()).limit(limit))).all()
    return [to_public(sub, ch) for sub, ch in rows]


async def recent_for_challenge(session: AsyncSession, user_id: uuid.UUID, challenge_id: uuid.UUID, limit: int = 5) -> list[Submission]:
    return list((await session.scalars(
        select(Submission)
        .where(Submission.user_id == user_id, Submission.challenge_id == challenge_id)
        .order_by(Submission.submitted_at.desc())
        .limit(limit)
    )).all())


async def user_stats(session: AsyncSession, user_id: uuid.UUID) -> UserStats:
    total = await session.scalar(select(func.count()).select_from(Submission).where(Submission.user_id == user_id)) or 0
    passed = await session.scalar(
        select(func.count()).select_from(Submission).where(Submission.user_id == user_id, Submission.status == "Passed")
    ) or 0
    attempted = await session.scalar(
        select(func.count(distinct(Submission.challenge_id))).where(Submission.user_id == user_id)
    ) or 0
    solved = await session.scalar(
        select(func.count(distinct(Submission.challenge_id))).where(Submission.user_id == user_id, Submission.status == "Passed")
    ) or 0
    badges = await session.scalar(select(func.count()).select_from(Badge).where(Badge.user_id == user_id)) or 0
    return UserStats(
        total_submissions=total,
        passed_submissions=passed,
        challenges_attempted=attempted,
        challenges_passed=solved,
        badges_earned=badges,
        success_rate=round(passed / total * 100, 2) if total else 0.0,
    )
