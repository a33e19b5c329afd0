from __future__ import annotations
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from eduvault.schemas.common import Envelope

class VisitPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timestamp: datetime
    location: str
    city: str | None = None
    country: str | None = None
    browser: str
    os: str
    viewer_role: str
    recruiter_company: str | None = None

class LocationCount(BaseModel):
    location: str
    count: int

class TrafficReport(BaseModel):
    total_views: int
    unique_visitors: int
    recruiter_views: int
    guest_views: int
    top_locations: list[LocationCount]
    recent_visits: list[VisitPublic]

class TrafficResponse(Envelope):
    analytics: TrafficReport

class TrafficSummary(BaseModel):
    today_views: int
    week_views: int
    total_views: int
    top_location: str

class SummaryResponse(Envelope):
    summary: TrafficSummary
