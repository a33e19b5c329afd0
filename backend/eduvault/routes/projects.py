from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.auth_deps import get_current_user
from eduvault.db import get_session
from eduvault.models.project import Project
from eduvault.models.user import User
from eduvault.schemas.common import MessageResponse
from eduvault.schemas.project import ProjectCreate, ProjectUpdate, ProjectPublic, ProjectResponse, ProjectList
from eduvault.services.github import GitHubClient, get_github_client, parse_github_url

router = APIRouter(prefix="/projects", tags=["projects"])
log = structlog.get_logger()

async def _get_owned(session: AsyncSession, project_id: uuid.UUID, user: User) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    if project.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized to modify this project")
    return project

@router.post("", status_code=201, response_model=ProjectResponse)
async def create_project(
    payload: ProjectCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    github: GitHubClient = Depends(get_github_client),
):
    if not payload.github_link or not payload.github_link.strip():
        raise HTTPException(status_code=400, detail="GitHub link is required")
    parsed = parse_github_url(payload.github_link)
    if not parsed:
        raise HTTPException(status_code=400, detail="Invalid GitHub URL format")
    owner, repo = parsed

    meta = await github.fetch_metadata(owner, repo)
    activity = await github.fetch_commit_activity(owner, repo)
    tags = payload.tags if payload.tags is not None else (meta.topics if meta else [])
    project = Project(
        user_id=user.id,
        title=payload.title or (meta.title if meta else repo),
        github_link=payload.github_link.strip(),
        description=payload.description if payload.description is not None else (meta.description if meta else ""),
        tags=list(tags),
        stars=meta.stars if meta else 0,
        forks=meta.forks if meta else 0,
        last_commit_at=meta.last_commit_at if meta else None,
        activity_graph=activity,
    )
    session.add(project)
    await session.commit()
    await session.refresh(project)
    log.info("project_created", project_id=str(project.id), repo=f"{owner}/{repo}", metadata=meta is not None)
    return ProjectResponse(message="Project added successfully", project=ProjectPublic.model_validate(project))

@router.get("", response_model=ProjectList)
async def my_projects(user: User = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    rows = (await session.scalars(
        select(Project).where(Project.user_id == user.id).order_by(Project.created_at.desc())
    )).all()
    return ProjectList(projects=[ProjectPublic.model_validate(p) for p in rows])

@router.get("/user/{user_id}", response_model=ProjectList)
async def public_projects(user_id: uuid.UUID, session: AsyncSession = Depends(get_session)):
    rows = (await session.scalars(
        select(Project)
        .where(Project.user_id == user_id, Project.is_public.is_(True))
        .order_by(Project.created_at.desc())
    )).all()
    return ProjectList(projects=[ProjectPublic.model_validate(p) for p in rows])

@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: uuid.UUID,
    payload: ProjectUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    project = await _get_owned(session, project_id, user)
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(project, field, list(value) if field == "tags" else value)
    await session.commit()
    await session.refresh(project)
    return ProjectResponse(message="Project updated successfully", project=ProjectPublic.model_validate(project))

@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    project = await _get_owned(session, project_id, user)
    await session.delete(project)
    await session.commit()
    return MessageResponse(message="Project deleted successfully")
