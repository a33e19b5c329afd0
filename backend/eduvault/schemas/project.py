from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime
from eduvault.schemas.common import Envelope

class ProjectCreate(BaseModel):
    github_link: str | None = None
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    tags: list[str] | None = None

class ProjectUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    tags: list[str] | None = None
    is_public: bool | None = None

class ProjectPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    github_link: str
    description: str
    tags: list[str] = Field(default_factory=list)
    stars: int
    forks: int
    last_commit_at: datetime | None = None
    activity_graph: list[int] = Field(default_factory=list)
    is_public: bool
    created_at: datetime

class ProjectResponse(Envelope):
    project: ProjectPublic

class ProjectList(Envelope):
    projects: list[ProjectPublic]
