from __future__ import annotations
import os
from pydantic import BaseModel

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "eduvault-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "EduVault")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    database_url: str = os.getenv("DATABASE_URL", "postgresql+asyncpg://postgres:postgres@db:5432/eduvault_dev")

    # Object storage (MinIO speaks S3)
    s3_endpoint: str = os.getenv("S3_ENDPOINT", "http://minio:9000")
    s3_access_key: str = os.getenv("S3_ACCESS_KEY", "minioadmin")
    s3_secret_key: str = os.getenv("S3_SECRET_KEY", "minioadmin")
    s3_bucket_uploads: str = os.getenv("S3_BUCKET_UPLOADS", "eduvault-uploads-dev")
    s3_presign_expiry_seconds: int = int(os.getenv("S3_PRESIGN_EXPIRY_SECONDS", "600"))  # 10 min guest pass
    max_upload_bytes: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    # Auth
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    access_ttl_min: int = int(os.getenv("ACCESS_TTL_MIN", "60"))
    refresh_ttl_min: int = int(os.getenv("REFRESH_TTL_MIN", "10080"))  # 7d

    # Code execution
    execution_backend: str = os.getenv("EXECUTION_BACKEND", "judge0")  # judge0|piston
    execution_timeout_seconds: float = float(os.getenv("EXECUTION_TIMEOUT_SECONDS", "10"))
    judge0_api_url: str = os.getenv("JUDGE0_API_URL", "https://judge0-ce.p.rapidapi.com")
    judge0_api_key: str = os.getenv("JUDGE0_API_KEY", "")
    judge0_api_host: str = os.getenv("JUDGE0_API_HOST", "judge0-ce.p.rapidapi.com")
    judge0_poll_max_attempts: int = int(os.getenv("JUDGE0_POLL_MAX_ATTEMPTS", "10"))
    judge0_poll_interval_seconds: float = float(os.getenv("JUDGE0_POLL_INTERVAL_SECONDS", "1.0"))
    piston_url: str = os.getenv("PISTON_URL", "https://emkc.org/api/v2/piston")

    # Source hosting
    github_api_url: str = os.getenv("GITHUB_API_URL", "https://api.github.com")
    github_timeout_seconds: float = float(os.getenv("GITHUB_TIMEOUT_SECONDS", "5"))

settings = Settings()
