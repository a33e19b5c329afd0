from __future__ import annotations
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from eduvault.auth_deps import require_admin
from eduvault.db import get_session
from eduvault.errors import Conflict
from eduvault.models.user import User
from eduvault.schemas.challenge import ChallengeCreate, SeedResponse, CatalogSeedResponse
from eduvault.services.catalog import seed_catalog
from eduvault.services.challenges import HELLO_WORLD, create_challenge, to_public

router = APIRouter(prefix="/admin", tags=["admin"])

@router.post("/seed-challenge", response_model=SeedResponse)
# older clients still post here
@router.post("/create-test-challenge", response_model=SeedResponse, include_in_schema=False)
async def seed_challenge(admin: User = Depends(require_admin), session: AsyncSession = Depends(get_session)):
    """Create the hello-world challenge. Seeding twice is not an error."""
    try:
        ch = await create_challenge(session, ChallengeCreate.model_validate(HELLO_WORLD))
    except Conflict:
        return SeedResponse(message="Challenge already exists")
    return SeedResponse(message="Test challenge created successfully", challenge=to_public(ch, include_hidden=True))

@router.post("/seed-catalog", response_model=CatalogSeedResponse)
async def seed_challenge_catalog(admin: User = Depends(require_admin), session: AsyncSession = Depends(get_session)):
    created, existing = await seed_catalog(session)
    return CatalogSeedResponse(
        message=f"Seeded {len(created)} challenges ({len(existing)} already present)",
        created=created,
        existing=existing,
    )
