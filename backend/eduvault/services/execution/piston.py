from __future__ import annotations
from typing import Any, Sequence
import httpx
import structlog
from eduvault.errors import UnsupportedLanguage
from eduvault.schemas.challenge import ChallengeCase
from eduvault.services.execution.base import CaseOutcome, ExecutionReport, case_name, failed_outcome

log = structlog.get_logger()

# language -> (piston runtime, version)
LANGUAGE_CONFIG = {
    "javascript": ("javascript", "18.15.0"),
    "python": ("python", "3.10.0"),
    "cpp": ("c++", "10.2.0"),
    "java": ("java", "15.0.2"),
    "c": ("c", "10.2.0"),
}


def get_runtime(language: str) -> tuple[str, str]:
    runtime = LANGUAGE_CONFIG.get((language or "").lower())
    if not runtime:
        raise UnsupportedLanguage(f"Unsupported language: {language}")
    return runtime


def judge_run(run: dict[str, Any], expected_output: str) -> tuple[bool, str, str | None]:
    """(passed, stdout, error) for one Piston `run` block. Any stderr fails the case."""
    stdout = run.get("stdout") or ""
    stderr = run.get("stderr") or ""
    if stderr:
        return False, stdout, stderr
    return stdout.strip() == (expected_output or "").strip(), stdout, None


class PistonAdapter:
    """Piston-style service: one synchronous run per test case, stdout compared after trimming."""

    def __init__(self, base_url: str, *, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def run(self, client: httpx.AsyncClient, code: str, language: str, stdin: str) -> dict[str, Any]:
        name, version = get_runtime(language)
        r = await client.post(
            "/execute",
            json={"language": name, "version": version, "files": [{"content": code}], "stdin": stdin},
        )
        r.raise_for_status()
        return r.json()

    async def execute(self, code: str, language: str, test_cases: Sequence[ChallengeCase]) -> ExecutionReport:
        get_runtime(language)
        outcomes: list[CaseOutcome] = []
        log.info("execution_started", backend="piston", language=language, test_cases=len(test_cases))
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
            for i, case in enumerate(test_cases):
                try:
                    data = await self.run(client, code, language, case.input or "")
                    passed, stdout, error = judge_run(data.get("run") or {}, case.expected_output)
                except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
                    # a malformed body fails only this case
                    log.warning("execution_case_failed", backend="piston", case=i + 1, error=str(e))
                    outcomes.append(failed_outcome(case, i, str(e)))
                    continue
                outcomes.append(CaseOutcome(
                    test_name=case_name(case, i),
                    passed=passed,
                    expected=case.expected_output,
                    actual=stdout,
                    error=error,
                    input=case.input,
                ))
        report = ExecutionReport.from_outcomes(outcomes)
        log.info("execution_finished", backend="piston", passed=report.passed_tests, total=report.total_tests)
        return report
