from __future__ import annotations
import uuid
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from eduvault.db import get_session
from eduvault.security import decode_token, ROLE_ADMIN, ROLE_RECRUITER, ROLE_STUDENT
from eduvault.models.user import User
from eduvault.models.recruiter import Recruiter

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

def _access_claims(token: str) -> dict:
    try:
        data = decode_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid token")
    if data.get("type") != "access":
        raise HTTPException(status_code=401, detail="Wrong token type")
    try:
        data["sub"] = uuid.UUID(str(data.get("sub")))
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token")
    return data

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> User:
    data = _access_claims(credentials.credentials)
    if data.get("role", ROLE_STUDENT) not in (ROLE_STUDENT, ROLE_ADMIN):
        raise HTTPException(status_code=403, detail="Student account required")
    user = await session.get(User, data["sub"])
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user

async def get_current_recruiter(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> Recruiter:
    data = _access_claims(credentials.credentials)
    if data.get("role") != ROLE_RECRUITER:
        raise HTTPException(status_code=403, detail="Recruiter account required")
    recruiter = await session.get(Recruiter, data["sub"])
    if not recruiter:
        raise HTTPException(status_code=401, detail="Recruiter not found")
    return recruiter

async def require_admin(user: User = Depends(get_current_user)) -> User:
    # role is read from the row, not the token, so a demotion takes effect immediately
    if user.role != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user

async def get_optional_viewer(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_security),
    session: AsyncSession = Depends(get_session)
) -> Recruiter | None:
    """The recruiter behind an optional bearer token; anything else counts as a guest."""
    if credentials is None:
        return None
    try:
        data = _access_claims(credentials.credentials)
    except HTTPException:
        return None
    if data.get("role") != ROLE_RECRUITER:
        return None
    return await session.get(Recruiter, data["sub"])
