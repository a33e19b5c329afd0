from __future__ import annotations
import uuid
from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends, HTTPException, Request, Header
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.auth_deps import get_optional_viewer
from eduvault.config import settings
from eduvault.db import get_session
from eduvault.models.document import Document
from eduvault.models.project import Project
from eduvault.models.recruiter import Recruiter
from eduvault.models.user import User
from eduvault.schemas.document import DocumentPublic
from eduvault.schemas.portfolio import PortfolioProfile, PortfolioResponse, GuestPassResponse
from eduvault.schemas.project import ProjectPublic
from eduvault.services.analytics import record_visit
from eduvault.services.badges import list_badges
from eduvault.services.storage import presign_get

router = APIRouter(prefix="/portfolio", tags=["portfolio"])
log = structlog.get_logger()

async def get_public_owner(session: AsyncSession, username: str) -> User:
    user = await session.scalar(select(User).where(User.username == username.lower()))
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not user.portfolio_public:
        raise HTTPException(status_code=403, detail="This portfolio is private")
    return user

def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",", 1)[0].strip()
    return request.client.host if request.client else "unknown"

@router.get("/{username}", response_model=PortfolioResponse)
async def get_portfolio(
    username: str,
    request: Request,
    x_visitor_location: str | None = Header(default=None, alias="X-Visitor-Location"),
    viewer: Recruiter | None = Depends(get_optional_viewer),
    session: AsyncSession = Depends(get_session),
):
    user = await get_public_owner(session, username)
    documents = (await session.scalars(
        select(Document)
        .where(Document.user_id == user.id, Document.is_public.is_(True))
        .order_by(Document.uploaded_at.desc())
    )).all()
    projects = (await session.scalars(
        select(Project)
        .where(Project.user_id == user.id, Project.is_public.is_(True))
        .order_by(Project.created_at.desc())
    )).all()
    badges = await list_badges(session, user.id)

    await record_visit(
        session,
        user.id,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
        location_header=x_visitor_location,
        recruiter_id=viewer.id if viewer else None,
        recruiter_company=viewer.company_name if viewer else None,
    )
    log.info("portfolio_viewed", username=user.username, viewer="recruiter" if viewer else "guest")

    return PortfolioResponse(
        user=PortfolioProfile(
            name=user.full_name, username=user.username, email=user.email,
            university=user.university, degree=user.degree, branch=user.branch,
            graduation_year=user.graduation_year, skills=list(user.skills or []), bio=user.bio,
        ),
        documents=[DocumentPublic.model_validate(d) for d in documents],
        projects=[ProjectPublic.model_validate(p) for p in projects],
        badges=badges,
    )

@router.get("/{username}/document/{document_id}", response_model=GuestPassResponse)
async def guest_pass(username: str, document_id: uuid.UUID, session: AsyncSession = Depends(get_session)):
    user = await get_public_owner(session, username)
    doc = await session.get(Document, document_id)
    # private and foreign documents are indistinguishable from missing ones
    if not doc or doc.user_id != user.id or not doc.is_public:
        raise HTTPException(status_code=404, detail="Document not found")
    ttl = settings.s3_presign_expiry_seconds
    url = presign_get(doc.storage_key, expires_seconds=ttl)
    return GuestPassResponse(
        guest_pass_url=url,
        expires_at=datetime.now(timezone.utc) + timedelta(seconds=ttl),
        document=DocumentPublic.model_validate(doc),
    )
