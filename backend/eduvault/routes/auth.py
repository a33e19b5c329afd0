from __future__ import annotations
import re
from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.auth_deps import get_current_user
from eduvault.db import get_session
from eduvault.models.user import User
from eduvault.schemas.auth import RegisterRequest, LoginRequest, ProfileUpdate, UserPublic, TokenPair, AuthResponse, UserResponse
from eduvault.security import hash_password, verify_password, make_access_token, make_refresh_token, decode_token

router = APIRouter(prefix="/auth", tags=["auth"])
log = structlog.get_logger()

def _username_base(email: str) -> str:
    base = re.sub(r"[^a-z0-9_.-]", "", email.split("@", 1)[0].lower())
    return base or "student"

async def _unique_username(session: AsyncSession, email: str) -> str:
    base = _username_base(email)
    username, n = base, 1
    while await session.scalar(select(User.id).where(User.username == username)):
        username = f"{base}{n}"
        n += 1
    return username

def _token_pair(user: User) -> TokenPair:
    return TokenPair(access=make_access_token(str(user.id), user.role), refresh=make_refresh_token(str(user.id), user.role))

@router.post("/register", status_code=201, response_model=AuthResponse)
async def register(payload: RegisterRequest, session: AsyncSession = Depends(get_session)):
    email = payload.email.lower()
    exists = await session.scalar(select(User).where(User.email == email))
    if exists:
        raise HTTPException(status_code=409, detail="A vault already exists with this email")
    user = User(
        full_name=payload.full_name.strip(),
        email=email,
        username=await _unique_username(session, email),
        password_hash=hash_password(payload.password),
        university=payload.university,
        degree=payload.degree,
        branch=payload.branch,
        graduation_year=payload.graduation_year,
        skills=[],
        bio="",
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=409, detail="A vault already exists with this email")
    await session.refresh(user)
    log.info("user_registered", user_id=str(user.id), username=user.username)
    pair = _token_pair(user)
    return AuthResponse(message="Vault Created Successfully", access=pair.access, refresh=pair.refresh, user=UserPublic.model_validate(user))

@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, session: AsyncSession = Depends(get_session)):
    user = await session.scalar(select(User).where(User.email == payload.email.lower()))
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    pair = _token_pair(user)
    return AuthResponse(message="Vault Unlocked", access=pair.access, refresh=pair.refresh, user=UserPublic.model_validate(user))

@router.post("/refresh", response_model=TokenPair)
async def refresh(authorization: str | None = Header(None)):
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing refresh token")
    token = authorization.split(" ", 1)[1]
    try:
        data = decode_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid token")
    if data.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Wrong token type")
    sub, role = data.get("sub"), data.get("role", "student")
    return TokenPair(access=make_access_token(sub, role), refresh=make_refresh_token(sub, role))

@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    return UserResponse(user=UserPublic.model_validate(user))

@router.patch("/profile", response_model=UserResponse)
async def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "skills" in changes:
        # de-duplicate, keep first-seen order
        changes["skills"] = list(dict.fromkeys(s.strip() for s in changes["skills"] if s.strip()))
    for field, value in changes.items():
        setattr(user, field, value)
    await session.commit()
    await session.refresh(user)
    return UserResponse(message="Profile updated", user=UserPublic.model_validate(user))
