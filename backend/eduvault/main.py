from __future__ import annotations
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from eduvault.config import settings
from eduvault.errors import EduVaultError, ExecutionError
from eduvault.logging_setup import configure_logging
from eduvault.routes.system import router as system_router
from eduvault.routes.auth import router as auth_router
from eduvault.routes.recruiters import router as recruiters_router
from eduvault.routes.documents import router as documents_router
from eduvault.routes.portfolio import router as portfolio_router
from eduvault.routes.applications import router as applications_router
from eduvault.routes.scout import router as scout_router
from eduvault.routes.analytics import router as analytics_router
from eduvault.routes.projects import router as projects_router
from eduvault.routes.challenges import router as challenges_router
from eduvault.routes.admin import router as admin_router
from eduvault.routes.execute import router as execute_router
import structlog

configure_logging()
log = structlog.get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", env=settings.environment, version=settings.app_version, git_sha=settings.git_sha,
             execution_backend=settings.execution_backend)
    yield
    log.info("shutdown")

app = FastAPI(
    title=f"{settings.app_display_name} API",
    version=settings.app_version,
    lifespan=lifespan,
    description=f"{settings.app_display_name} API for student portfolios, job tracking and coding challenges"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "dev" else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system_router)
app.include_router(auth_router)
app.include_router(recruiters_router)
app.include_router(documents_router)
app.include_router(portfolio_router)
app.include_router(applications_router)
app.include_router(scout_router)
app.include_router(analytics_router)
app.include_router(projects_router)
app.include_router(challenges_router)
app.include_router(admin_router)
app.include_router(execute_router)

def _envelope(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message}, headers=headers)

@app.exception_handler(EduVaultError)
async def eduvault_error_handler(request: Request, exc: EduVaultError):
    if isinstance(exc, ExecutionError):
        # upstream detail stays in the logs
        log.error("execution_error", path=request.url.path, error=exc.message)
        return _envelope(exc.status_code, ExecutionError.default_message)
    return _envelope(exc.status_code, exc.message)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _envelope(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    message = f"{field}: {first.get('msg')}" if field else (first.get("msg") or "Invalid request")
    return _envelope(400, message)

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("unhandled_error", path=request.url.path)
    return _envelope(500, "Internal server error")

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    structlog.contextvars.bind_contextvars(request_id=rid)
    try:
        response: Response = await call_next(request)
    finally:
        structlog.contextvars.clear_contextvars()
    response.headers["X-Request-ID"] = rid
    return response
