from __future__ import annotations
from eduvault.config import settings
from eduvault.services.execution.base import ExecutionAdapter
from eduvault.services.execution.judge0 import Judge0Adapter
from eduvault.services.execution.piston import PistonAdapter


def get_execution_adapter() -> ExecutionAdapter:
    """FastAPI dependency; which service runs code is a deployment setting."""
    backend = settings.execution_backend.lower()
    if backend == "piston":
        return PistonAdapter(settings.piston_url, timeout=settings.execution_timeout_seconds)
    if backend == "judge0":
        return Judge0Adapter(
            settings.judge0_api_url,
            api_key=settings.judge0_api_key,
            api_host=settings.judge0_api_host,
            max_attempts=settings.judge0_poll_max_attempts,
            interval=settings.judge0_poll_interval_seconds,
            timeout=settings.execution_timeout_seconds,
        )
    raise ValueError(f"Unknown EXECUTION_BACKEND: {settings.execution_backend}")
