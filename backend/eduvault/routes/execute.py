from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from eduvault.auth_deps import get_current_user
from eduvault.db import get_session
from eduvault.models.challenge import Challenge
from eduvault.models.submission import Submission
from eduvault.models.user import User
from eduvault.schemas.submission import (
    SubmitRequest, RunRequest, SubmitResponse, SubmissionResponse, SubmissionList,
    StatsResponse, BadgeList, BadgeCheck, SubmissionStatus,
)
from eduvault.services import submissions as submission_service
from eduvault.services.badges import list_badges, get_badge
from eduvault.services.challenges import get_challenge_or_404
from eduvault.services.execution.base import ExecutionAdapter
from eduvault.services.execution.factory import get_execution_adapter

router = APIRouter(prefix="/execute", tags=["execute"])

@router.post("", status_code=410)
async def legacy_execute(user: User = Depends(get_current_user)):
    raise HTTPException(status_code=410, detail="Use /execute/run or /execute/submit")

@router.post("/submit", status_code=201, response_model=SubmitResponse)
async def submit(
    payload: SubmitRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    sub, ch, awarded = await submission_service.submit(session, user.id, payload)
    return SubmitResponse(
        message="Challenge passed!" if sub.status == "Passed" else "Submission recorded",
        submission=submission_service.to_public(sub, ch),
        badge_awarded=awarded,
    )

@router.post("/run", status_code=201, response_model=SubmitResponse)
async def run(
    payload: RunRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    adapter: ExecutionAdapter = Depends(get_execution_adapter),
):
    sub, ch, awarded = await submission_service.run(session, user.id, payload, adapter)
    return SubmitResponse(
        message="Challenge passed!" if sub.status == "Passed" else "Some tests failed",
        submission=submission_service.to_public(sub, ch),
        badge_awarded=awarded,
    )

@router.get("/submissions", response_model=SubmissionList)
async def my_submissions(
    challenge_id: str | None = Query(default=None),
    status: SubmissionStatus | None = Query(default=None),
    limit: int = Query(default=submission_service.DEFAULT_LIMIT, ge=1, le=100),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    rows = await submission_service.list_submissions(session, user.id, challenge_id, status, limit)
    return SubmissionList(count=len(rows), submissions=rows)

@router.get("/submissions/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    sub = await session.get(Submission, submission_id)
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")
    if sub.user_id != user.id:
        raise HTTPException(status_code=403, detail="Access denied")
    ch = await session.get(Challenge, sub.challenge_id)
    return SubmissionResponse(submission=submission_service.to_public(sub, ch))

@router.get("/stats", response_model=StatsResponse)
async def stats(user: User = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    return StatsResponse(stats=await submission_service.user_stats(session, user.id))

@router.get("/badges", response_model=BadgeList)
async def badges(user: User = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    rows = await list_badges(session, user.id)
    return BadgeList(count=len(rows), badges=rows)

@router.get("/badges/{challenge_id}", response_model=BadgeCheck)
async def badge_for_challenge(
    challenge_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    ch = await get_challenge_or_404(session, challenge_id)
    badge = await get_badge(session, user.id, ch.id)
    return BadgeCheck(has_badge=badge is not None, badge=badge)
