from __future__ import annotations
import uuid
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.errors import Conflict, NotFound
from eduvault.models.challenge import Challenge
from eduvault.schemas.challenge import ChallengeCase, ChallengeCreate, ChallengeUpdate, ChallengePublic, ChallengeRef

log = structlog.get_logger()

HELLO_WORLD = {
    "slug": "hello-world",
    "title": "Hello World",
    "description": (
        "# Hello World\n\n"
        "Write a program that prints the string \"Hello, World!\".\n\n"
        "This is a classic first program that introduces you to the basics of programming."
    ),
    "difficulty": "Easy",
    "language": "javascript",
    "track": "javascript",
    "starter_code": "function helloWorld() {\n  // Your code here\n\n}\n\nconsole.log(helloWorld());\n",
    "tags": ["strings", "introduction"],
    "blurb": 'The classical introductory exercise. Just say "Hello, World!"',
    "authors": ["EduVault Team"],
    "test_cases": [
        {"input": "", "expected_output": "Hello, World!", "description": "Returns the greeting", "is_hidden": False},
    ],
}


def parse_uuid(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


async def find_challenge(session: AsyncSession, slug_or_id: str) -> Challenge | None:
    """Slug first, then primary key when the value parses as a UUID."""
    ch = await session.scalar(select(Challenge).where(Challenge.slug == slug_or_id.strip().lower()))
    if ch:
        return ch
    cid = parse_uuid(slug_or_id)
    if cid is None:
        return None
    return await session.get(Challenge, cid)


async def get_challenge_or_404(session: AsyncSession, slug_or_id: str) -> Challenge:
    ch = await find_challenge(session, slug_or_id)
    if not ch:
        raise NotFound("Challenge not found")
    return ch


async def record_attempt(session: AsyncSession, challenge_id: uuid.UUID, passed: bool) -> None:
    """
    Bump the challenge counters in a single UPDATE so concurrent submissions
    never lose an increment. Caller commits.
    """
    await session.execute(
        update(Challenge)
        .where(Challenge.id == challenge_id)
        .values(
            total_attempts=Challenge.total_attempts + 1,
            total_passed=Challenge.total_passed + (1 if passed else 0),
        )
        .execution_options(synchronize_session=False)
    )


def challenge_cases(ch: Challenge) -> list[ChallengeCase]:
    return [ChallengeCase.model_validate(tc) for tc in (ch.test_cases or [])]


def to_public(ch: Challenge, include_hidden: bool = False) -> ChallengePublic:
    cases = [tc for tc in challenge_cases(ch) if include_hidden or not tc.is_hidden]
    return ChallengePublic(
        id=ch.id, slug=ch.slug, title=ch.title, description=ch.description,
        difficulty=ch.difficulty, language=ch.language, track=ch.track,
        starter_code=ch.starter_code, tags=list(ch.tags or []), blurb=ch.blurb,
        authors=list(ch.authors or []), test_cases=cases,
        total_attempts=ch.total_attempts, total_passed=ch.total_passed,
        success_rate=ch.success_rate, is_active=ch.is_active, created_at=ch.created_at,
    )


def to_ref(ch: Challenge) -> ChallengeRef:
    return ChallengeRef(id=ch.id, slug=ch.slug, title=ch.title, difficulty=ch.difficulty, language=ch.language)


async def create_challenge(session: AsyncSession, payload: ChallengeCreate) -> Challenge:
    ch = Challenge(**payload.model_dump(exclude={"test_cases"}), test_cases=[tc.model_dump() for tc in payload.test_cases])
    session.add(ch)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise Conflict(f"Challenge '{payload.slug}' already exists")
    await session.refresh(ch)
    log.info("challenge_created", slug=ch.slug)
    return ch


async def update_challenge(session: AsyncSession, ch: Challenge, payload: ChallengeUpdate) -> Challenge:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "test_cases" in changes:
        changes["test_cases"] = [tc.model_dump() for tc in payload.test_cases]
    for field, value in changes.items():
        setattr(ch, field, value)
    await session.commit()
    await session.refresh(ch)
    log.info("challenge_updated", slug=ch.slug, fields=sorted(changes))
    return ch
