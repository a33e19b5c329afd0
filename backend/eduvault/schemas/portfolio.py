from __future__ import annotations
from pydantic import BaseModel
from datetime import datetime
from eduvault.schemas.common import Envelope
from eduvault.schemas.document import DocumentPublic
from eduvault.schemas.project import ProjectPublic
from eduvault.schemas.submission import BadgePublic

class PortfolioProfile(BaseModel):
    name: str
    username: str
    email: str
    university: str
    degree: str
    branch: str
    graduation_year: int
    skills: list[str]
    bio: str

class PortfolioResponse(Envelope):
    user: PortfolioProfile
    documents: list[DocumentPublic]
    projects: list[ProjectPublic]
    badges: list[BadgePublic]

class GuestPassResponse(Envelope):
    guest_pass_url: str
    expires_at: datetime
    document: DocumentPublic
