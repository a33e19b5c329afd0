from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from eduvault.schemas.common import Envelope

class StudentCard(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_name: str
    email: str
    username: str
    university: str
    degree: str
    branch: str
    graduation_year: int
    skills: list[str] = Field(default_factory=list)
    bio: str = ""

class SearchResponse(Envelope):
    count: int
    students: list[StudentCard]

class BookmarksResponse(Envelope):
    count: int
    bookmarks: list[StudentCard]
