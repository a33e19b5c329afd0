from __future__ import annotations
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime
from eduvault.schemas.common import Envelope

Category = Literal["Academics", "Internships", "Projects", "Certifications", "Extracurriculars"]
CATEGORIES: tuple[str, ...] = ("Academics", "Internships", "Projects", "Certifications", "Extracurriculars")

class DocumentPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    original_name: str
    mime_type: str
    file_size: int
    category: Category
    tags: list[str] = Field(default_factory=list)
    is_public: bool
    derived_title: str | None = None
    derived_description: str | None = None
    user_edited: bool = False
    uploaded_at: datetime

class DocumentUpdate(BaseModel):
    category: Category | None = None
    tags: list[str] | None = None
    is_public: bool | None = None
    derived_title: str | None = Field(default=None, max_length=100)
    derived_description: str | None = None

class DocumentResponse(Envelope):
    document: DocumentPublic

class DocumentList(Envelope):
    count: int
    documents: list[DocumentPublic]

class SignedUrlResponse(Envelope):
    signed_url: str
    expires_in_seconds: int
    document: DocumentPublic
