import asyncio
import os
import tempfile
import uuid

_DB_DIR = tempfile.mkdtemp(prefix="eduvault-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("JUDGE0_POLL_INTERVAL_SECONDS", "0")
os.environ.setdefault("ENVIRONMENT", "test")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import update

from eduvault.db import Base, SessionLocal, engine
import eduvault.models.user  # noqa: F401  register tables
import eduvault.models.recruiter  # noqa: F401
import eduvault.models.document  # noqa: F401
import eduvault.models.job_application  # noqa: F401
import eduvault.models.project  # noqa: F401
import eduvault.models.visit  # noqa: F401
import eduvault.models.challenge  # noqa: F401
import eduvault.models.submission  # noqa: F401
from eduvault.main import app
from eduvault.models.user import User


async def _create_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def _drop_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="session", autouse=True)
def database():
    asyncio.run(_create_schema())
    yield
    asyncio.run(_drop_schema())


@pytest_asyncio.fixture
async def api():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def student_payload(**overrides):
    payload = {
        "full_name": "Ada Lovelace",
        "email": f"ada-{uuid.uuid4().hex[:10]}@example.com",
        "password": "supersecret",
        "university": "State University",
        "degree": "B.Tech",
        "branch": "Computer Science",
        "graduation_year": 2026,
    }
    payload.update(overrides)
    return payload


async def register_student(ac: httpx.AsyncClient, **overrides) -> dict:
    """Returns the register response body plus an `auth` header dict."""
    r = await ac.post("/auth/register", json=student_payload(**overrides))
    assert r.status_code == 201, r.text
    body = r.json()
    body["auth"] = {"Authorization": f"Bearer {body['access']}"}
    return body


async def register_recruiter(ac: httpx.AsyncClient, **overrides) -> dict:
    payload = {
        "full_name": "Grace Hopper",
        "email": f"grace-{uuid.uuid4().hex[:10]}@example.com",
        "password": "supersecret",
        "company_name": "Acme Corp",
        "website": "https://acme.example.com",
    }
    payload.update(overrides)
    r = await ac.post("/recruiters/register", json=payload)
    assert r.status_code == 201, r.text
    body = r.json()
    body["auth"] = {"Authorization": f"Bearer {body['access']}"}
    return body


async def promote_to_admin(user_id: str) -> None:
    async with SessionLocal() as session:
        await session.execute(update(User).where(User.id == uuid.UUID(user_id)).values(role="admin"))
        await session.commit()


@pytest_asyncio.fixture
async def student(api):
    return await register_student(api)


@pytest_asyncio.fixture
async def admin(api):
    body = await register_student(api, full_name="Site Admin")
    await promote_to_admin(body["user"]["id"])
    return body


@pytest_asyncio.fixture
async def recruiter(api):
    return await register_recruiter(api)


def challenge_payload(**overrides):
    payload = {
        "slug": f"two-fer-{uuid.uuid4().hex[:8]}",
        "title": "Two Fer",
        "description": "One for you, one for me.",
        "difficulty": "Easy",
        "language": "javascript",
        "track": "javascript",
        "starter_code": "function twoFer(name) {}\n",
        "tags": ["strings"],
        "blurb": "Create a sentence of the form 'One for X, one for me.'",
        "test_cases": [
            {"input": "", "expected_output": "One for you, one for me.", "description": "no name"},
            {"input": "Alice", "expected_output": "One for Alice, one for me.", "description": "a name", "is_hidden": True},
        ],
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def challenge(api, admin):
    r = await api.post("/challenges", json=challenge_payload(), headers=admin["auth"])
    assert r.status_code == 201, r.text
    return r.json()["challenge"]
