from __future__ import annotations
from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, or_, func
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.auth_deps import get_current_user, require_admin
from eduvault.db import get_session
from eduvault.models.challenge import Challenge
from eduvault.models.user import User
from eduvault.schemas.challenge import ChallengeCreate, ChallengeUpdate, ChallengeResponse, ChallengeList
from eduvault.schemas.common import MessageResponse
from eduvault.schemas.submission import ChallengeDetail, SubmissionBrief
from eduvault.services.challenges import get_challenge_or_404, to_public, create_challenge as create_challenge_row, update_challenge as apply_update
from eduvault.services.submissions import recent_for_challenge

router = APIRouter(prefix="/challenges", tags=["challenges"])
log = structlog.get_logger()

@router.get("", response_model=ChallengeList)
async def list_challenges(
    language: str | None = Query(default=None),
    difficulty: str | None = Query(default=None),
    tags: str | None = Query(default=None, description="comma separated; any match"),
    search: str | None = Query(default=None),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    stmt = select(Challenge).where(Challenge.is_active.is_(True))
    if language:
        stmt = stmt.where(Challenge.language == language)
    if difficulty:
        stmt = stmt.where(Challenge.difficulty == difficulty)
    if search:
        needle = search.strip().lower()
        stmt = stmt.where(or_(
            func.lower(Challenge.title).contains(needle, autoescape=True),
            func.lower(Challenge.description).contains(needle, autoescape=True),
            func.lower(func.coalesce(Challenge.blurb, "")).contains(needle, autoescape=True),
        ))
    rows = list((await session.scalars(stmt.order_by(Challenge.created_at.desc()))).all())
    if tags:
        wanted = {t.strip() for t in tags.split(",") if t.strip()}
        rows = [c for c in rows if wanted & set(c.tags or [])]
    return ChallengeList(count=len(rows), challenges=[to_public(c) for c in rows])

@router.get("/{slug_or_id}", response_model=ChallengeDetail)
async def get_challenge(
    slug_or_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    ch = await get_challenge_or_404(session, slug_or_id)
    recent = await recent_for_challenge(session, user.id, ch.id)
    return ChallengeDetail(challenge=to_public(ch), user_submissions=[SubmissionBrief.model_validate(s) for s in recent])

@router.post("", status_code=201, response_model=ChallengeResponse)
async def create_challenge(
    payload: ChallengeCreate,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    ch = await create_challenge_row(session, payload)
    return ChallengeResponse(message="Challenge created successfully", challenge=to_public(ch, include_hidden=True))

@router.put("/{slug_or_id}", response_model=ChallengeResponse)
async def update_challenge(
    slug_or_id: str,
    payload: ChallengeUpdate,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    ch = await get_challenge_or_404(session, slug_or_id)
    ch = await apply_update(session, ch, payload)
    return ChallengeResponse(message="Challenge updated successfully", challenge=to_public(ch, include_hidden=True))

@router.delete("/{slug_or_id}", response_model=MessageResponse)
async def delete_challenge(
    slug_or_id: str,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    ch = await get_challenge_or_404(session, slug_or_id)
    slug = ch.slug
    await session.delete(ch)
    await session.commit()
    log.info("challenge_deleted", slug=slug)
    return MessageResponse(message="Challenge deleted successfully")
