from __future__ import annotations
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from uuid import UUID
from datetime import datetime
from eduvault.schemas.common import Envelope

class RegisterRequest(BaseModel):
    full_name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    university: str = Field(min_length=1, max_length=200)
    degree: str = Field(min_length=1, max_length=120)
    branch: str = Field(min_length=1, max_length=120)
    graduation_year: int = Field(ge=2020, le=2030)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class ProfileUpdate(BaseModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=120)
    university: str | None = Field(default=None, min_length=1, max_length=200)
    degree: str | None = Field(default=None, min_length=1, max_length=120)
    branch: str | None = Field(default=None, min_length=1, max_length=120)
    graduation_year: int | None = Field(default=None, ge=2020, le=2030)
    skills: list[str] | None = None
    bio: str | None = Field(default=None, max_length=300)
    portfolio_public: bool | None = None

class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_name: str
    email: EmailStr
    username: str
    university: str
    degree: str
    branch: str
    graduation_year: int
    skills: list[str] = Field(default_factory=list)
    bio: str = ""
    portfolio_public: bool
    role: str
    created_at: datetime

class TokenPair(BaseModel):
    access: str
    refresh: str

class AuthResponse(Envelope):
    access: str
    refresh: str
    user: UserPublic

class UserResponse(Envelope):
    user: UserPublic

class RecruiterRegisterRequest(BaseModel):
    full_name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    company_name: str = Field(min_length=1, max_length=200)
    website: str = ""

class RecruiterPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_name: str
    email: EmailStr
    company_name: str
    website: str
    role: str = "recruiter"
    created_at: datetime

class RecruiterAuthResponse(Envelope):
    access: str
    refresh: str
    recruiter: RecruiterPublic

class RecruiterResponse(Envelope):
    recruiter: RecruiterPublic
