from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from eduvault.auth_deps import get_current_user
from eduvault.db import get_session
from eduvault.models.document import Document
from eduvault.models.job_application import JobApplication
from eduvault.models.user import User
from eduvault.schemas.application import ApplicationCreate, ApplicationUpdate, ApplicationPublic, ApplicationResponse, ApplicationList
from eduvault.schemas.common import MessageResponse

router = APIRouter(prefix="/applications", tags=["applications"])

async def _linked_ids(session: AsyncSession, user: User, ids: list[uuid.UUID]) -> list[str]:
    unique = list(dict.fromkeys(ids))
    if not unique:
        return []
    owned = set((await session.scalars(
        select(Document.id).where(Document.id.in_(unique), Document.user_id == user.id)
    )).all())
    if len(owned) != len(unique):
        raise HTTPException(status_code=400, detail="Linked documents must belong to you")
    return [str(i) for i in unique]

async def _get_owned(session: AsyncSession, application_id: uuid.UUID, user: User) -> JobApplication:
    app_row = await session.get(JobApplication, application_id)
    if not app_row:
        raise HTTPException(status_code=404, detail="Application not found")
    if app_row.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized to modify this application")
    return app_row

@router.get("", response_model=ApplicationList)
async def list_applications(user: User = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    rows = (await session.scalars(
        select(JobApplication)
        .where(JobApplication.user_id == user.id)
        .order_by(JobApplication.updated_at.desc(), JobApplication.created_at.desc())
    )).all()
    return ApplicationList(count=len(rows), applications=[ApplicationPublic.model_validate(r) for r in rows])

@router.post("", status_code=201, response_model=ApplicationResponse)
async def create_application(
    payload: ApplicationCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    data = payload.model_dump(exclude={"linked_document_ids"})
    row = JobApplication(user_id=user.id, linked_document_ids=await _linked_ids(session, user, payload.linked_document_ids), **data)
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return ApplicationResponse(message="Application created successfully", application=ApplicationPublic.model_validate(row))

@router.patch("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: uuid.UUID,
    payload: ApplicationUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    row = await _get_owned(session, application_id, user)
    changes = payload.model_dump(exclude_unset=True)
    if "linked_document_ids" in changes:
        row.linked_document_ids = await _linked_ids(session, user, payload.linked_document_ids or [])
        changes.pop("linked_document_ids")
    for field in ("company", "position", "status"):
        # required columns: an explicit null is ignored
        if field in changes and changes[field] is None:
            changes.pop(field)
    for field, value in changes.items():
        setattr(row, field, value)
    await session.commit()
    await session.refresh(row)
    return ApplicationResponse(message="Application updated successfully", application=ApplicationPublic.model_validate(row))

@router.delete("/{application_id}", response_model=MessageResponse)
async def delete_application(
    application_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    row = await _get_owned(session, application_id, user)
    await session.delete(row)
    await session.commit()
    return MessageResponse(message="Application deleted successfully")
