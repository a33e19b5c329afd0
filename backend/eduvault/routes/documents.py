from __future__ import annotations
import json
import uuid
from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, File, Form
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.auth_deps import get_current_user
from eduvault.config import settings
from eduvault.db import get_session
from eduvault.models.document import Document
from eduvault.models.user import User
from eduvault.schemas.common import MessageResponse
from eduvault.schemas.document import CATEGORIES, DocumentPublic, DocumentUpdate, DocumentResponse, DocumentList, SignedUrlResponse
from eduvault.services.media import validate_upload, derive_title, ext_for_mime
from eduvault.services.storage import put_bytes, presign_get, delete_object

router = APIRouter(prefix="/documents", tags=["documents"])
log = structlog.get_logger()

def parse_tags(raw: str | None) -> list[str]:
    """Tags arrive as a JSON array or a comma separated string."""
    if not raw or not raw.strip():
        return []
    raw = raw.strip()
    if raw.startswith("["):
        try:
            values = json.loads(raw)
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="Invalid tags")
        if not isinstance(values, list):
            raise HTTPException(status_code=400, detail="Invalid tags")
    else:
        values = raw.split(",")
    return list(dict.fromkeys(str(v).strip() for v in values if str(v).strip()))

async def get_owned_document(session: AsyncSession, document_id: uuid.UUID, user: User) -> Document:
    doc = await session.get(Document, document_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")
    if doc.user_id != user.id:
        raise HTTPException(status_code=403, detail="Access denied")
    return doc

@router.post("/upload", status_code=201, response_model=DocumentResponse)
async def upload_document(
    file: UploadFile | None = File(default=None),
    category: str | None = Form(default=None),
    tags: str | None = Form(default=None),
    is_public: bool = Form(default=False),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not category:
        raise HTTPException(status_code=400, detail="Category is required")
    if category not in CATEGORIES:
        raise HTTPException(status_code=400, detail=f"Category must be one of: {', '.join(CATEGORIES)}")
    data = await file.read()
    try:
        mime = validate_upload(data, file.content_type, settings.max_upload_bytes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    key = f"u/{user.id}/{uuid.uuid4()}.{ext_for_mime(mime)}"
    put_bytes(key, data, mime)
    doc = Document(
        user_id=user.id,
        original_name=(file.filename or key.rsplit("/", 1)[-1])[:255],
        storage_key=key,
        mime_type=mime,
        file_size=len(data),
        category=category,
        tags=parse_tags(tags),
        is_public=is_public,
        derived_title=derive_title(data, mime),
    )
    session.add(doc)
    try:
        await session.commit()
    except Exception:
        await session.rollback()
        # keep storage in step with the table
        try:
            delete_object(key)
        except Exception as cleanup:
            log.warning("upload_cleanup_failed", key=key, error=str(cleanup))
        raise
    await session.refresh(doc)
    log.info("document_uploaded", document_id=str(doc.id), mime=mime, size=len(data))
    return DocumentResponse(message="Document uploaded successfully", document=DocumentPublic.model_validate(doc))

@router.get("", response_model=DocumentList)
async def list_documents(
    category: str | None = Query(default=None),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    stmt = select(Document).where(Document.user_id == user.id)
    if category:
        stmt = stmt.where(Document.category == category)
    docs = (await session.scalars(stmt.order_by(Document.uploaded_at.desc()))).all()
    return DocumentList(count=len(docs), documents=[DocumentPublic.model_validate(d) for d in docs])

@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    doc = await get_owned_document(session, document_id, user)
    return DocumentResponse(document=DocumentPublic.model_validate(doc))

@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: uuid.UUID,
    payload: DocumentUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    doc = await get_owned_document(session, document_id, user)
    changes = payload.model_dump(exclude_unset=True)
    for field in ("category", "is_public"):
        if changes.get(field) is not None:
            setattr(doc, field, changes[field])
    if changes.get("tags") is not None:
        doc.tags = list(dict.fromkeys(t.strip() for t in changes["tags"] if t.strip()))
    if "derived_title" in changes or "derived_description" in changes:
        if "derived_title" in changes:
            doc.derived_title = changes["derived_title"]
        if "derived_description" in changes:
            doc.derived_description = changes["derived_description"]
        doc.user_edited = True
    await session.commit()
    await session.refresh(doc)
    return DocumentResponse(message="Document updated", document=DocumentPublic.model_validate(doc))

@router.get("/{document_id}/view", response_model=SignedUrlResponse)
async def view_document(
    document_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    doc = await get_owned_document(session, document_id, user)
    ttl = settings.s3_presign_expiry_seconds
    url = presign_get(doc.storage_key, expires_seconds=ttl, download_name=doc.original_name)
    return SignedUrlResponse(signed_url=url, expires_in_seconds=ttl, document=DocumentPublic.model_validate(doc))

@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    doc = await get_owned_document(session, document_id, user)
    try:
        delete_object(doc.storage_key)
    except Exception as e:
        log.warning("storage_delete_failed", document_id=str(doc.id), key=doc.storage_key, error=str(e))
    await session.delete(doc)
    await session.commit()
    return MessageResponse(message="Document deleted successfully")
