import json

import httpx
import pytest

from eduvault.errors import ExecutionTimeout, UnsupportedLanguage
from eduvault.schemas.challenge import ChallengeCase
from eduvault.services.execution.base import ExecutionReport
from eduvault.services.execution.judge0 import Judge0Adapter, get_language_id, get_status_description
from eduvault.services.execution.piston import PistonAdapter, judge_run

CASES = [
    ChallengeCase(input="", expected_output="Hello, World!", description="greets"),
    ChallengeCase(input="Bob", expected_output="Hello, Bob!"),
]


async def _no_sleep(_):
    return None


def judge0_service(statuses_by_token: dict[str, list[int]], fail_submit_for: set[str] = frozenset()):
    """Fake Judge0: each submission gets token t<n>; GETs walk that token's status list."""
    submitted = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST" and request.url.path == "/submissions":
            payload = json.loads(request.content)
            token = f"t{len(submitted) + 1}"
            submitted.append(payload)
            if payload["stdin"] in fail_submit_for:
                return httpx.Response(503, json={"error": "unavailable"})
            return httpx.Response(201, json={"token": token})
        token = request.url.path.rsplit("/", 1)[-1]
        queue = statuses_by_token[token]
        status = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(200, json={
            "status": {"id": status, "description": get_status_description(status)},
            "stdout": "Hello, World!\n" if status == 3 else "nope\n",
            "stderr": None,
            "compile_output": "syntax error" if status == 6 else None,
            "time": "0.015",
            "memory": 2048,
        })

    return httpx.MockTransport(handler), submitted


def judge0(transport, max_attempts=5):
    return Judge0Adapter("https://judge0.test", transport=transport, max_attempts=max_attempts, interval=0, sleep=_no_sleep)


def test_language_ids():
    assert get_language_id("JavaScript") == 63
    assert get_language_id("python") == 71
    assert get_language_id("cpp") == 54
    with pytest.raises(UnsupportedLanguage):
        get_language_id("cobol")


def test_status_table():
    assert get_status_description(4) == "Wrong Answer"
    assert get_status_description(5) == "Time Limit Exceeded"
    assert get_status_description(6) == "Compilation Error"
    assert get_status_description(14) == "Exec Format Error"
    assert get_status_description(99) == "Unknown Status"


@pytest.mark.asyncio
async def test_judge0_accepted_after_polling():
    transport, submitted = judge0_service({"t1": [1, 2, 3], "t2": [2, 3]})
    report = await judge0(transport).execute("print()", "python", CASES)
    assert report.all_passed is True
    assert (report.total_tests, report.passed_tests) == (2, 2)
    assert [s["language_id"] for s in submitted] == [71, 71]
    assert submitted[1]["stdin"] == "Bob" and submitted[1]["expected_output"] == "Hello, Bob!"
    assert report.results[0].test_name == "greets"
    assert report.results[1].test_name == "Test Case 2"
    assert report.results[0].time == 0.015


@pytest.mark.asyncio
async def test_judge0_non_accepted_terminal_status_fails():
    transport, _ = judge0_service({"t1": [3], "t2": [6]})
    report = await judge0(transport).execute("x", "javascript", CASES)
    assert report.all_passed is False
    assert [r.passed for r in report.results] == [True, False]
    assert report.results[1].status_description == "Compilation Error"
    assert report.results[1].error == "syntax error"


@pytest.mark.asyncio
async def test_judge0_poll_exhaustion_raises_timeout():
    transport, _ = judge0_service({"t1": [1]})
    adapter = judge0(transport, max_attempts=3)
    async with adapter._client() as client:
        with pytest.raises(ExecutionTimeout):
            await adapter.poll_result(client, "t1")


@pytest.mark.asyncio
async def test_judge0_timeout_fails_only_that_case():
    transport, _ = judge0_service({"t1": [2], "t2": [3]})
    report = await judge0(transport, max_attempts=2).execute("x", "javascript", CASES)
    assert [r.passed for r in report.results] == [False, True]
    assert "timeout" in report.results[0].error.lower()


@pytest.mark.asyncio
async def test_judge0_service_error_is_isolated_per_case():
    transport, _ = judge0_service({"t2": [3]}, fail_submit_for={""})
    report = await judge0(transport).execute("x", "javascript", CASES)
    assert [r.passed for r in report.results] == [False, True]
    assert report.results[0].error
    assert report.all_passed is False


@pytest.mark.asyncio
async def test_judge0_unknown_language_rejected_before_any_call():
    transport, submitted = judge0_service({})
    with pytest.raises(UnsupportedLanguage):
        await judge0(transport).execute("x", "brainfuck", CASES)
    assert submitted == []


def piston_service(runs: dict[str, dict]):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        seen.append(payload)
        run = runs[payload["stdin"]]
        if run is None:
            return httpx.Response(500, json={"message": "boom"})
        return httpx.Response(200, json={"language": payload["language"], "version": payload["version"], "run": run})

    return httpx.MockTransport(handler), seen


@pytest.mark.asyncio
async def test_piston_compares_trimmed_stdout():
    transport, seen = piston_service({
        "": {"stdout": "  Hello, World!\n", "stderr": "", "code": 0},
        "Bob": {"stdout": "Hello, Bobby!\n", "stderr": "", "code": 0},
    })
    report = await PistonAdapter("https://piston.test", transport=transport).execute("x", "cpp", CASES)
    assert [r.passed for r in report.results] == [True, False]
    assert seen[0]["language"] == "c++"
    assert seen[0]["files"] == [{"content": "x"}]
    assert seen[1]["stdin"] == "Bob"


@pytest.mark.asyncio
async def test_piston_stderr_forces_failure_and_errors_are_isolated():
    transport, _ = piston_service({
        "": {"stdout": "Hello, World!", "stderr": "DeprecationWarning", "code": 0},
        "Bob": None,
    })
    report = await PistonAdapter("https://piston.test", transport=transport).execute("x", "python", CASES)
    assert [r.passed for r in report.results] == [False, False]
    assert report.results[0].error == "DeprecationWarning"
    assert report.results[1].error
    assert report.passed_tests == 0


def test_judge_run_helper():
    assert judge_run({"stdout": "ok\n", "stderr": ""}, "ok") == (True, "ok\n", None)
    assert judge_run({"stdout": "ok", "stderr": "warn"}, "ok")[0] is False


def test_empty_case_list_is_vacuously_passed():
    report = ExecutionReport.from_outcomes([])
    assert report.all_passed is True
    assert report.total_tests == 0


@pytest.mark.asyncio
async def test_piston_malformed_body_fails_only_that_case():
    def handler(request: httpx.Request) -> httpx.Response:
        if json.loads(request.content)["stdin"] == "":
            return httpx.Response(200, json=["unexpected"])
        return httpx.Response(200, json={"run": {"stdout": "Hello, Bob!\n", "stderr": ""}})

    adapter = PistonAdapter("https://piston.test", transport=httpx.MockTransport(handler))
    report = await adapter.execute("x", "python", CASES)
    assert [r.passed for r in report.results] == [False, True]
    assert report.results[0].error
    assert report.total_tests == 2


@pytest.mark.asyncio
async def test_judge0_malformed_result_fails_only_that_case():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            stdin = json.loads(request.content)["stdin"]
            return httpx.Response(201, json={"token": "bad" if stdin == "" else "good"})
        token = request.url.path.rsplit("/", 1)[-1]
        return httpx.Response(200, json={
            "status": {"id": 3, "description": "Accepted"},
            "stdout": "Hello, Bob!\n",
            "time": "n/a" if token == "bad" else "0.01",
            "memory": 1024,
        })

    report = await judge0(httpx.MockTransport(handler)).execute("x", "python", CASES)
    assert [r.passed for r in report.results] == [False, True]
    assert report.results[1].token == "good"
    assert report.total_tests == 2
