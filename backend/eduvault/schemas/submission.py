from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal
from uuid import UUID
from datetime import datetime
from eduvault.schemas.common import Envelope
from eduvault.schemas.challenge import ChallengeRef, ChallengePublic

SubmissionStatus = Literal["Pending", "Running", "Passed", "Failed", "Error"]
SubmissionLanguage = Literal["javascript", "python", "java", "cpp"]


class CaseResult(BaseModel):
    """Persisted per-test outcome."""
    test_name: str = ""
    passed: bool = False
    expected: str | None = None
    actual: str | None = None
    error: str | None = None


class SubmitRequest(BaseModel):
    # challenge_id/code are checked by the intake service so a miss is a 400, not a schema error
    challenge_id: str | None = None
    code: str | None = None
    language: SubmissionLanguage = "javascript"
    results: list[CaseResult] = Field(default_factory=list)
    passed: bool = False
    execution_time: int = Field(default=0, ge=0, description="milliseconds")


class RunRequest(BaseModel):
    challenge_id: str | None = None
    code: str | None = None
    language: SubmissionLanguage | None = None


class SubmissionPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    challenge_id: UUID
    code: str
    language: str
    status: SubmissionStatus
    test_results: list[CaseResult] = Field(default_factory=list)
    execution_time_ms: int
    memory_used: int
    error_message: str | None = None
    submitted_at: datetime
    badge_awarded: bool
    badge_awarded_at: datetime | None = None
    challenge: ChallengeRef | None = None


class SubmissionBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: SubmissionStatus
    submitted_at: datetime
    execution_time_ms: int


class SubmitResponse(Envelope):
    submission: SubmissionPublic
    badge_awarded: bool


class SubmissionResponse(Envelope):
    submission: SubmissionPublic


class SubmissionList(Envelope):
    count: int
    submissions: list[SubmissionPublic]


class ChallengeDetail(Envelope):
    challenge: ChallengePublic
    user_submissions: list[SubmissionBrief]


class UserStats(BaseModel):
    total_submissions: int
    passed_submissions: int
    challenges_attempted: int
    challenges_passed: int
    badges_earned: int
    success_rate: float


class StatsResponse(Envelope):
    stats: UserStats


class BadgePublic(BaseModel):
    challenge_id: UUID
    submission_id: UUID
    earned_at: datetime
    challenge: ChallengeRef | None = None


class BadgeList(Envelope):
    count: int
    badges: list[BadgePublic]


class BadgeCheck(Envelope):
    has_badge: bool
    badge: BadgePublic | None = None
