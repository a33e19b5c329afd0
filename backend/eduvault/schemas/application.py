from __future__ import annotations
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import date, datetime
from eduvault.schemas.common import Envelope

ApplicationStatus = Literal["To Apply", "Applied", "Interviewing", "Offer", "Rejected"]

class ApplicationCreate(BaseModel):
    company: str = Field(min_length=1, max_length=200)
    position: str = Field(min_length=1, max_length=200)
    status: ApplicationStatus = "To Apply"
    salary: str | None = None
    location: str | None = None
    link: str | None = None
    notes: str | None = None
    linked_document_ids: list[UUID] = Field(default_factory=list)
    applied_date: date | None = None

class ApplicationUpdate(BaseModel):
    company: str | None = Field(default=None, min_length=1, max_length=200)
    position: str | None = Field(default=None, min_length=1, max_length=200)
    status: ApplicationStatus | None = None
    salary: str | None = None
    location: str | None = None
    link: str | None = None
    notes: str | None = None
    linked_document_ids: list[UUID] | None = None
    applied_date: date | None = None

class ApplicationPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company: str
    position: str
    status: ApplicationStatus
    salary: str | None = None
    location: str | None = None
    link: str | None = None
    notes: str | None = None
    linked_document_ids: list[UUID] = Field(default_factory=list)
    applied_date: date | None = None
    created_at: datetime
    updated_at: datetime

class ApplicationResponse(Envelope):
    application: ApplicationPublic

class ApplicationList(Envelope):
    count: int
    applications: list[ApplicationPublic]
