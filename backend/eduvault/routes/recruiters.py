from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.auth_deps import get_current_recruiter
from eduvault.db import get_session
from eduvault.models.recruiter import Recruiter
from eduvault.schemas.auth import RecruiterRegisterRequest, LoginRequest, RecruiterPublic, RecruiterAuthResponse, RecruiterResponse
from eduvault.security import hash_password, verify_password, make_access_token, make_refresh_token, ROLE_RECRUITER

router = APIRouter(prefix="/recruiters", tags=["recruiters"])
log = structlog.get_logger()

def _auth_response(recruiter: Recruiter, message: str) -> RecruiterAuthResponse:
    sub = str(recruiter.id)
    return RecruiterAuthResponse(
        message=message,
        access=make_access_token(sub, ROLE_RECRUITER),
        refresh=make_refresh_token(sub, ROLE_RECRUITER),
        recruiter=RecruiterPublic.model_validate(recruiter),
    )

@router.post("/register", status_code=201, response_model=RecruiterAuthResponse)
async def register(payload: RecruiterRegisterRequest, session: AsyncSession = Depends(get_session)):
    email = payload.email.lower()
    if await session.scalar(select(Recruiter).where(Recruiter.email == email)):
        raise HTTPException(status_code=409, detail="Recruiter already exists with this email")
    recruiter = Recruiter(
        full_name=payload.full_name.strip(),
        email=email,
        password_hash=hash_password(payload.password),
        company_name=payload.company_name.strip(),
        website=payload.website.strip(),
    )
    session.add(recruiter)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=409, detail="Recruiter already exists with this email")
    await session.refresh(recruiter)
    log.info("recruiter_registered", recruiter_id=str(recruiter.id), company=recruiter.company_name)
    return _auth_response(recruiter, "Recruiter account created successfully")

@router.post("/login", response_model=RecruiterAuthResponse)
async def login(payload: LoginRequest, session: AsyncSession = Depends(get_session)):
    recruiter = await session.scalar(select(Recruiter).where(Recruiter.email == payload.email.lower()))
    if not recruiter or not verify_password(payload.password, recruiter.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _auth_response(recruiter, "Login successful")

@router.get("/me", response_model=RecruiterResponse)
async def me(recruiter: Recruiter = Depends(get_current_recruiter)):
    return RecruiterResponse(recruiter=RecruiterPublic.model_validate(recruiter))
