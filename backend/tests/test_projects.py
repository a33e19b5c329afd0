import httpx
import pytest

from conftest import register_student
from eduvault.main import app
from eduvault.services.github import GitHubClient, get_github_client, parse_github_url, pad_weeks


async def _no_sleep(_):
    return None


def github_transport(stats_responses):
    """Fake GitHub: repo metadata for octo/widget, commit stats from a queue of (status, body)."""
    stats = list(stats_responses)
    calls = {"stats": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/repos/octo/widget":
            return httpx.Response(200, json={
                "name": "widget",
                "description": "A tiny widget",
                "stargazers_count": 42,
                "forks_count": 7,
                "pushed_at": "2026-01-02T03:04:05Z",
                "topics": ["python", "cli"],
            })
        if request.url.path == "/repos/octo/widget/stats/commit_activity":
            calls["stats"] += 1
            status, body = stats.pop(0) if stats else (202, {})
            return httpx.Response(status, json=body)
        return httpx.Response(404, json={"message": "Not Found"})

    return httpx.MockTransport(handler), calls


@pytest.fixture
def fake_github():
    transport, calls = github_transport([(202, {}), (200, [{"total": n} for n in range(1, 21)])])
    client = GitHubClient("https://api.github.test", transport=transport, sleep=_no_sleep)
    app.dependency_overrides[get_github_client] = lambda: client
    yield calls
    app.dependency_overrides.pop(get_github_client, None)


def test_parse_github_url():
    assert parse_github_url("https://github.com/octo/widget") == ("octo", "widget")
    assert parse_github_url("git@github.com:octo/widget.git") is None
    assert parse_github_url("https://github.com/octo/widget.git") == ("octo", "widget")
    assert parse_github_url("https://gitlab.com/octo/widget") is None
    assert parse_github_url("") is None


def test_pad_weeks():
    assert pad_weeks([5, 6]) == [0] * 13 + [5, 6]
    assert pad_weeks(list(range(20))) == list(range(5, 20))


@pytest.mark.asyncio
async def test_create_project_fetches_metadata_and_activity(api, student, fake_github):
    r = await api.post("/projects", headers=student["auth"], json={"github_link": "https://github.com/octo/widget"})
    assert r.status_code == 201, r.text
    project = r.json()["project"]
    assert project["title"] == "widget"
    assert project["stars"] == 42 and project["forks"] == 7
    assert project["tags"] == ["python", "cli"]
    assert project["activity_graph"] == list(range(6, 21))
    assert fake_github["stats"] == 2


@pytest.mark.asyncio
async def test_create_project_requires_valid_link(api, student, fake_github):
    r = await api.post("/projects", headers=student["auth"], json={})
    assert r.status_code == 400
    assert r.json()["message"] == "GitHub link is required"
    r = await api.post("/projects", headers=student["auth"], json={"github_link": "https://example.com/x"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_github_failure_falls_back(api, student):
    def handler(request):
        return httpx.Response(500, json={})
    client = GitHubClient("https://api.github.test", transport=httpx.MockTransport(handler), sleep=_no_sleep)
    app.dependency_overrides[get_github_client] = lambda: client
    try:
        r = await api.post("/projects", headers=student["auth"], json={"github_link": "https://github.com/octo/gone"})
    finally:
        app.dependency_overrides.pop(get_github_client, None)
    assert r.status_code == 201
    project = r.json()["project"]
    assert project["title"] == "gone"
    assert project["stars"] == 0
    assert project["activity_graph"] == [0] * 15


@pytest.mark.asyncio
async def test_project_visibility_and_ownership(api, student, fake_github):
    other = await register_student(api)
    r = await api.post("/projects", headers=student["auth"],
                       json={"github_link": "https://github.com/octo/widget", "title": "My Widget"})
    pid = r.json()["project"]["id"]
    assert r.json()["project"]["title"] == "My Widget"

    assert (await api.patch(f"/projects/{pid}", headers=other["auth"], json={"title": "Mine now"})).status_code == 403
    r = await api.patch(f"/projects/{pid}", headers=student["auth"], json={"is_public": False})
    assert r.json()["project"]["is_public"] is False

    public = await api.get(f"/projects/user/{student['user']['id']}")
    assert public.json()["projects"] == []
    own = await api.get("/projects", headers=student["auth"])
    assert len(own.json()["projects"]) == 1

    assert (await api.delete(f"/projects/{pid}", headers=other["auth"])).status_code == 403
    assert (await api.delete(f"/projects/{pid}", headers=student["auth"])).status_code == 200
