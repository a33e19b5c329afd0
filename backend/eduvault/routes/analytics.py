from __future__ import annotations
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from eduvault.auth_deps import get_current_user
from eduvault.db import get_session
from eduvault.models.user import User
from eduvault.schemas.analytics import TrafficResponse, SummaryResponse
from eduvault.services.analytics import traffic_report, traffic_summary

router = APIRouter(prefix="/analytics", tags=["analytics"])

@router.get("/my-traffic", response_model=TrafficResponse)
async def my_traffic(user: User = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    return TrafficResponse(analytics=await traffic_report(session, user.id))

@router.get("/summary", response_model=SummaryResponse)
async def summary(user: User = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    return SummaryResponse(summary=await traffic_summary(session, user.id))
