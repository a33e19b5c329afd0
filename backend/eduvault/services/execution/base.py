from __future__ import annotations
from typing import Any, Iterable, Protocol, Sequence
from pydantic import BaseModel, Field
from eduvault.schemas.challenge import ChallengeCase


class CaseOutcome(BaseModel):
    """What an execution service reported for one test case."""
    test_name: str
    passed: bool
    expected: str | None = None
    actual: str | None = None
    error: str | None = None
    input: str | None = None
    status_id: int | None = None
    status_description: str | None = None
    time: float | None = None
    memory: int | None = None
    token: str | None = None

    def to_result(self) -> dict[str, Any]:
        """The subset persisted on a Submission."""
        return {
            "test_name": self.test_name,
            "passed": self.passed,
            "expected": self.expected,
            "actual": self.actual,
            "error": self.error,
        }


class ExecutionReport(BaseModel):
    results: list[CaseOutcome] = Field(default_factory=list)
    total_tests: int = 0
    passed_tests: int = 0
    all_passed: bool = True

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[CaseOutcome]) -> "ExecutionReport":
        results = list(outcomes)
        passed = sum(1 for r in results if r.passed)
        return cls(
            results=results,
            total_tests=len(results),
            passed_tests=passed,
            all_passed=all(r.passed for r in results),
        )


class ExecutionAdapter(Protocol):
    async def execute(self, code: str, language: str, test_cases: Sequence[ChallengeCase]) -> ExecutionReport:
        ...


def case_name(case: ChallengeCase, index: int) -> str:
    return case.description or f"Test Case {index + 1}"


def failed_outcome(case: ChallengeCase, index: int, error: str) -> CaseOutcome:
    return CaseOutcome(
        test_name=case_name(case, index),
        passed=False,
        expected=case.expected_output,
        actual="",
        error=error,
        input=case.input,
    )
