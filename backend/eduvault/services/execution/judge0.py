from __future__ import annotations
import asyncio
from typing import Any, Awaitable, Callable, Sequence
import httpx
import structlog
from eduvault.errors import ExecutionError, ExecutionTimeout, UnsupportedLanguage
from eduvault.schemas.challenge import ChallengeCase
from eduvault.services.execution.base import CaseOutcome, ExecutionReport, case_name, failed_outcome

log = structlog.get_logger()

LANGUAGE_IDS = {
    "javascript": 63,  # Node.js
    "python": 71,      # Python 3
    "java": 62,
    "cpp": 54,
    "c": 50,
}

STATUS_IN_QUEUE = 1
STATUS_PROCESSING = 2
STATUS_ACCEPTED = 3

STATUS_DESCRIPTIONS = {
    1: "In Queue",
    2: "Processing",
    3: "Accepted",
    4: "Wrong Answer",
    5: "Time Limit Exceeded",
    6: "Compilation Error",
    7: "Runtime Error (SIGSEGV)",
    8: "Runtime Error (SIGXFSZ)",
    9: "Runtime Error (SIGFPE)",
    10: "Runtime Error (SIGABRT)",
    11: "Runtime Error (NZEC)",
    12: "Runtime Error (Other)",
    13: "Internal Error",
    14: "Exec Format Error",
}


def get_language_id(language: str) -> int:
    lang_id = LANGUAGE_IDS.get((language or "").lower())
    if not lang_id:
        raise UnsupportedLanguage(f"Unsupported language: {language}")
    return lang_id


def get_status_description(status_id: int | None) -> str:
    return STATUS_DESCRIPTIONS.get(status_id, "Unknown Status")


def is_terminal(status_id: int) -> bool:
    # 1 = In Queue, 2 = Processing; everything above is a verdict
    return status_id > STATUS_PROCESSING


class Judge0Adapter:
    """
    Judge0-style service: submit once per test case, then poll the token until
    the status is terminal. Status 3 (Accepted) is a pass; any other terminal
    status is a fail.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str = "",
        api_host: str = "",
        max_attempts: int = 10,
        interval: float = 1.0,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max_attempts
        self.interval = interval
        self.timeout = timeout
        self._transport = transport
        self._sleep = sleep
        self._headers = {"content-type": "application/json"}
        if api_key:
            self._headers["X-RapidAPI-Key"] = api_key
        if api_host:
            self._headers["X-RapidAPI-Host"] = api_host

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, headers=self._headers, timeout=self.timeout, transport=self._transport
        )

    async def submit(self, client: httpx.AsyncClient, code: str, language_id: int, stdin: str, expected_output: str) -> str:
        r = await client.post(
            "/submissions",
            params={"base64_encoded": "false", "wait": "false", "fields": "*"},
            json={
                "language_id": language_id,
                "source_code": code,
                "stdin": stdin,
                "expected_output": expected_output,
            },
        )
        r.raise_for_status()
        token = r.json().get("token")
        if not token:
            raise ExecutionError("Execution service returned no submission token")
        return token

    async def fetch_result(self, client: httpx.AsyncClient, token: str) -> dict[str, Any]:
        r = await client.get(f"/submissions/{token}", params={"base64_encoded": "false", "fields": "*"})
        r.raise_for_status()
        return r.json()

    async def poll_result(self, client: httpx.AsyncClient, token: str) -> dict[str, Any]:
        """Wait for a terminal status; raises ExecutionTimeout once max_attempts checks come back non-terminal."""
        for _ in range(self.max_attempts):
            result = await self.fetch_result(client, token)
            status_id = int(((result.get("status") or {}).get("id")) or 0)
            if is_terminal(status_id):
                return result
            await self._sleep(self.interval)
        raise ExecutionTimeout("Execution timeout: Result not available")

    async def execute(self, code: str, language: str, test_cases: Sequence[ChallengeCase]) -> ExecutionReport:
        language_id = get_language_id(language)
        outcomes: list[CaseOutcome] = []
        log.info("execution_started", backend="judge0", language=language, test_cases=len(test_cases))
        async with self._client() as client:
            for i, case in enumerate(test_cases):
                try:
                    token = await self.submit(client, code, language_id, case.input or "", case.expected_output or "")
                    result = await self.poll_result(client, token)
                    outcome = self._to_outcome(case, i, token, result)
                except (httpx.HTTPError, ValueError, TypeError, AttributeError, ExecutionError) as e:
                    log.warning("execution_case_failed", backend="judge0", case=i + 1, error=str(e))
                    outcomes.append(failed_outcome(case, i, str(e)))
                    continue
                outcomes.append(outcome)
        report = ExecutionReport.from_outcomes(outcomes)
        log.info("execution_finished", backend="judge0", passed=report.passed_tests, total=report.total_tests)
        return report

    @staticmethod
    def _to_outcome(case: ChallengeCase, index: int, token: str, result: dict[str, Any]) -> CaseOutcome:
        status = result.get("status") or {}
        status_id = int(status.get("id") or 0)
        time = result.get("time")
        return CaseOutcome(
            test_name=case_name(case, index),
            passed=status_id == STATUS_ACCEPTED,
            expected=case.expected_output,
            actual=result.get("stdout") or "",
            error=result.get("stderr") or result.get("compile_output") or None,
            input=case.input,
            status_id=status_id,
            status_description=status.get("description") or get_status_description(status_id),
            time=float(time) if time not in (None, "") else None,
            memory=result.get("memory"),
            token=token,
        )
