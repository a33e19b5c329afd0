from __future__ import annotations
import uuid
from datetime import datetime, timedelta, timezone
from sqlalchemy import select, func, distinct
from sqlalchemy.ext.asyncio import AsyncSession
from eduvault.models.visit import Visit
from eduvault.schemas.analytics import LocationCount, TrafficReport, TrafficSummary, VisitPublic

TOP_LOCATIONS = 5
RECENT_VISITS = 20
NO_DATA = "No data"

# first match wins; Edge and Opera also advertise Chrome
_BROWSERS = (
    ("Edg/", "Edge"),
    ("OPR/", "Opera"),
    ("Firefox/", "Firefox"),
    ("Chrome/", "Chrome"),
    ("Safari/", "Safari"),
)
_SYSTEMS = (
    ("Windows", "Windows"),
    ("Android", "Android"),
    ("iPhone", "iOS"),
    ("iPad", "iOS"),
    ("Mac OS X", "macOS"),
    ("Linux", "Linux"),
)


def parse_user_agent(ua: str | None) -> tuple[str, str]:
    ua = ua or ""
    browser = next((name for token, name in _BROWSERS if token in ua), "Unknown")
    os_name = next((name for token, name in _SYSTEMS if token in ua), "Unknown")
    return browser, os_name


def parse_location(header: str | None) -> tuple[str, str | None, str | None]:
    """`City, Country` header value -> (location, city, country)."""
    if not header or not header.strip():
        return "Unknown", None, None
    location = header.strip()[:200]
    parts = [p.strip() for p in location.split(",") if p.strip()]
    if len(parts) >= 2:
        return location, parts[0], parts[-1]
    return location, None, parts[0] if parts else None


async def record_visit(
    session: AsyncSession,
    profile_id: uuid.UUID,
    *,
    ip_address: str,
    user_agent: str | None,
    location_header: str | None = None,
    recruiter_id: uuid.UUID | None = None,
    recruiter_company: str | None = None,
) -> Visit:
    browser, os_name = parse_user_agent(user_agent)
    location, city, country = parse_location(location_header)
    visit = Visit(
        profile_id=profile_id,
        viewer_role="recruiter" if recruiter_id else "guest",
        viewer_id=recruiter_id,
        recruiter_company=recruiter_company,
        ip_address=ip_address or "unknown",
        location=location,
        city=city,
        country=country,
        user_agent=(user_agent or "Unknown")[:512],
        browser=browser,
        os=os_name,
    )
    session.add(visit)
    await session.commit()
    return visit


async def _count(session: AsyncSession, *where) -> int:
    return await session.scalar(select(func.count()).select_from(Visit).where(*where)) or 0


async def _top_locations(session: AsyncSession, profile_id: uuid.UUID, limit: int) -> list[LocationCount]:
    n = func.count().label("n")
    rows = (await session.execute(
        select(Visit.location, n)
        .where(Visit.profile_id == profile_id)
        .group_by(Visit.location)
        .order_by(n.desc(), Visit.location)
        .limit(limit)
    )).all()
    return [LocationCount(location=loc, count=cnt) for loc, cnt in rows]


async def traffic_report(session: AsyncSession, profile_id: uuid.UUID) -> TrafficReport:
    mine = Visit.profile_id == profile_id
    unique = await session.scalar(select(func.count(distinct(Visit.ip_address))).where(mine)) or 0
    recent = (await session.scalars(
        select(Visit).where(mine).order_by(Visit.timestamp.desc()).limit(RECENT_VISITS)
    )).all()
    return TrafficReport(
        total_views=await _count(session, mine),
        unique_visitors=unique,
        recruiter_views=await _count(session, mine, Visit.viewer_role == "recruiter"),
        guest_views=await _count(session, mine, Visit.viewer_role == "guest"),
        top_locations=await _top_locations(session, profile_id, TOP_LOCATIONS),
        recent_visits=[VisitPublic.model_validate(v) for v in recent],
    )


async def traffic_summary(session: AsyncSession, profile_id: uuid.UUID, now: datetime | None = None) -> TrafficSummary:
    now = now or datetime.now(timezone.utc)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    mine = Visit.profile_id == profile_id
    top = await _top_locations(session, profile_id, 1)
    return TrafficSummary(
        today_views=await _count(session, mine, Visit.timestamp >= midnight),
        week_views=await _count(session, mine, Visit.timestamp >= now - timedelta(days=7)),
        total_views=await _count(session, mine),
        top_location=top[0].location if top else NO_DATA,
    )
