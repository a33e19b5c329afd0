from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.auth_deps import get_current_recruiter
from eduvault.db import get_session
from eduvault.models.recruiter import Recruiter, Bookmark
from eduvault.models.user import User
from eduvault.schemas.common import MessageResponse
from eduvault.schemas.scout import StudentCard, SearchResponse, BookmarksResponse

router = APIRouter(prefix="/scout", tags=["scout"])
log = structlog.get_logger()

def _icontains(column, needle: str):
    return func.lower(column).contains(needle.strip().lower(), autoescape=True)

@router.get("/search", response_model=SearchResponse)
async def search(
    skill: str | None = Query(default=None),
    university: str | None = Query(default=None),
    degree: str | None = Query(default=None),
    branch: str | None = Query(default=None),
    graduation_year: int | None = Query(default=None),
    session: AsyncSession = Depends(get_session),
):
    stmt = select(User).where(User.portfolio_public.is_(True))
    if university:
        stmt = stmt.where(_icontains(User.university, university))
    if degree:
        stmt = stmt.where(_icontains(User.degree, degree))
    if branch:
        stmt = stmt.where(_icontains(User.branch, branch))
    if graduation_year is not None:
        stmt = stmt.where(User.graduation_year == graduation_year)
    students = list((await session.scalars(stmt.order_by(User.full_name))).all())
    if skill:
        # skills is a JSON list; match element-wise so it behaves the same on every backend
        needle = skill.strip().lower()
        students = [s for s in students if any(needle in str(k).lower() for k in (s.skills or []))]
    return SearchResponse(count=len(students), students=[StudentCard.model_validate(s) for s in students])

@router.post("/bookmark/{student_id}", response_model=MessageResponse)
async def add_bookmark(
    student_id: uuid.UUID,
    recruiter: Recruiter = Depends(get_current_recruiter),
    session: AsyncSession = Depends(get_session),
):
    student = await session.get(User, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    if not student.portfolio_public:
        raise HTTPException(status_code=403, detail="Cannot bookmark private profiles")
    session.add(Bookmark(recruiter_id=recruiter.id, user_id=student.id))
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=409, detail="Student already bookmarked")
    log.info("bookmark_added", recruiter_id=str(recruiter.id), student_id=str(student.id))
    return MessageResponse(message="Student bookmarked successfully")

@router.delete("/bookmark/{student_id}", response_model=MessageResponse)
async def remove_bookmark(
    student_id: uuid.UUID,
    recruiter: Recruiter = Depends(get_current_recruiter),
    session: AsyncSession = Depends(get_session),
):
    bookmark = await session.scalar(
        select(Bookmark).where(Bookmark.recruiter_id == recruiter.id, Bookmark.user_id == student_id)
    )
    if not bookmark:
        raise HTTPException(status_code=404, detail="Student not bookmarked")
    await session.delete(bookmark)
    await session.commit()
    return MessageResponse(message="Bookmark removed successfully")

@router.get("/bookmarks", response_model=BookmarksResponse)
async def list_bookmarks(
    recruiter: Recruiter = Depends(get_current_recruiter),
    session: AsyncSession = Depends(get_session),
):
    students = (await session.scalars(
        select(User)
        .join(Bookmark, Bookmark.user_id == User.id)
        .where(Bookmark.recruiter_id == recruiter.id)
        .order_by(Bookmark.created_at.desc())
    )).all()
    return BookmarksResponse(count=len(students), bookmarks=[StudentCard.model_validate(s) for s in students])
