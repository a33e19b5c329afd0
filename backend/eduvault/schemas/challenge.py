from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import Literal, List
from uuid import UUID
from datetime import datetime
from eduvault.schemas.common import Envelope

Difficulty = Literal["Easy", "Medium", "Hard"]
ChallengeLanguage = Literal["javascript", "python", "java", "cpp"]

class ChallengeCase(BaseModel):
    input: str = ""
    expected_output: str
    description: str = ""
    is_hidden: bool = False

class ChallengeCreate(BaseModel):
    slug: str = Field(min_length=1, max_length=120)
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    difficulty: Difficulty = "Medium"
    language: ChallengeLanguage
    track: str = Field(min_length=1, max_length=64)
    starter_code: str
    tags: List[str] = Field(default_factory=list)
    blurb: str | None = Field(default=None, max_length=500)
    authors: List[str] = Field(default_factory=list)
    test_cases: List[ChallengeCase] = Field(default_factory=list)
    is_active: bool = True

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("slug must not be blank")
        return v

class ChallengeUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    difficulty: Difficulty | None = None
    language: ChallengeLanguage | None = None
    track: str | None = None
    starter_code: str | None = None
    tags: List[str] | None = None
    blurb: str | None = Field(default=None, max_length=500)
    authors: List[str] | None = None
    test_cases: List[ChallengeCase] | None = None
    is_active: bool | None = None

class ChallengePublic(BaseModel):
    id: UUID
    slug: str
    title: str
    description: str
    difficulty: Difficulty
    language: ChallengeLanguage
    track: str
    starter_code: str
    tags: List[str]
    blurb: str | None = None
    authors: List[str] = Field(default_factory=list)
    # hidden cases are stripped before this leaves the server
    test_cases: List[ChallengeCase]
    total_attempts: int
    total_passed: int
    success_rate: float
    is_active: bool
    created_at: datetime

class ChallengeRef(BaseModel):
    id: UUID
    slug: str
    title: str
    difficulty: Difficulty
    language: ChallengeLanguage

class ChallengeResponse(Envelope):
    challenge: ChallengePublic

class ChallengeList(Envelope):
    count: int
    challenges: List[ChallengePublic]

class SeedResponse(Envelope):
    challenge: ChallengePublic | None = None

class CatalogSeedResponse(Envelope):
    created: List[str]
    existing: List[str]
