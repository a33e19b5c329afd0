from __future__ import annotations
import io
from datetime import timedelta
from minio import Minio
from minio.error import S3Error
from eduvault.config import settings

_client: Minio | None = None

def _parse_endpoint(ep: str) -> tuple[str, bool]:
    # Return (host:port, secure)
    secure = ep.startswith("https://")
    host = ep.replace("http://", "").replace("https://", "")
    return host, secure

def _get_client() -> Minio:
    global _client
    if _client is None:
        host, secure = _parse_endpoint(settings.s3_endpoint)
        client = Minio(host, access_key=settings.s3_access_key, secret_key=settings.s3_secret_key, secure=secure)
        try:
            if not client.bucket_exists(settings.s3_bucket_uploads):
                client.make_bucket(settings.s3_bucket_uploads)
        except S3Error as e:
            # Concurrent startups race on creation; anything else is real
            if e.code not in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists"):
                raise
        _client = client
    return _client

def put_bytes(key: str, data: bytes, content_type: str) -> None:
    _get_client().put_object(
        settings.s3_bucket_uploads, key, io.BytesIO(data), length=len(data), content_type=content_type
    )

def delete_object(key: str) -> None:
    _get_client().remove_object(settings.s3_bucket_uploads, key)

def presign_get(key: str, expires_seconds: int | None = None, download_name: str | None = None) -> str:
    """Time-limited URL for reading one object without credentials."""
    ttl = expires_seconds or settings.s3_presign_expiry_seconds
    headers = None
    if download_name:
        headers = {"response-content-disposition": f'attachment; filename="{download_name}"'}
    return _get_client().presigned_get_object(
        settings.s3_bucket_uploads, key, expires=timedelta(seconds=ttl), response_headers=headers
    )
