import uuid
from datetime import datetime, timedelta, timezone

import pytest

import eduvault.routes.documents as documents_routes
import eduvault.routes.portfolio as portfolio_routes
from eduvault.db import SessionLocal
from eduvault.models.visit import Visit
from eduvault.services.analytics import parse_user_agent, parse_location, traffic_summary

CHROME_WIN = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"
SAFARI_IOS = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"


@pytest.fixture
def storage(monkeypatch):
    monkeypatch.setattr(documents_routes, "put_bytes", lambda key, data, content_type: None)
    monkeypatch.setattr(portfolio_routes, "presign_get",
                        lambda key, expires_seconds=None, download_name=None: f"https://storage.test/{key}")


async def _upload(api, auth, text: bytes, public: bool) -> str:
    r = await api.post(
        "/documents/upload",
        headers=auth,
        files={"file": ("note.txt", text, "text/plain")},
        data={"category": "Projects", "is_public": "true" if public else "false"},
    )
    assert r.status_code == 201, r.text
    return r.json()["document"]["id"]


@pytest.mark.asyncio
async def test_portfolio_shows_only_public_documents(api, student, storage):
    public_id = await _upload(api, student["auth"], b"Public write-up", public=True)
    await _upload(api, student["auth"], b"Private notes", public=False)

    username = student["user"]["username"]
    r = await api.get(f"/portfolio/{username.upper()}", headers={"User-Agent": CHROME_WIN})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["user"]["username"] == username
    assert [d["id"] for d in body["documents"]] == [public_id]
    assert body["badges"] == []


@pytest.mark.asyncio
async def test_portfolio_missing_and_private(api, student):
    assert (await api.get(f"/portfolio/nobody-{uuid.uuid4().hex}")).status_code == 404
    await api.patch("/auth/profile", headers=student["auth"], json={"portfolio_public": False})
    r = await api.get(f"/portfolio/{student['user']['username']}")
    assert r.status_code == 403
    assert r.json()["message"] == "This portfolio is private"


@pytest.mark.asyncio
async def test_guest_pass_only_for_public_documents(api, student, storage):
    public_id = await _upload(api, student["auth"], b"Shareable", public=True)
    private_id = await _upload(api, student["auth"], b"Secret", public=False)
    username = student["user"]["username"]

    r = await api.get(f"/portfolio/{username}/document/{public_id}")
    assert r.status_code == 200
    assert r.json()["guest_pass_url"].startswith("https://storage.test/u/")
    assert (await api.get(f"/portfolio/{username}/document/{private_id}")).status_code == 404


@pytest.mark.asyncio
async def test_visits_feed_traffic_report(api, student, recruiter):
    username = student["user"]["username"]
    await api.get(f"/portfolio/{username}", headers={"User-Agent": CHROME_WIN, "X-Visitor-Location": "Pune, India"})
    await api.get(f"/portfolio/{username}", headers={"User-Agent": SAFARI_IOS, "X-Visitor-Location": "Pune, India"})
    await api.get(f"/portfolio/{username}", headers={**recruiter["auth"], "User-Agent": CHROME_WIN, "X-Visitor-Location": "Berlin, Germany"})

    r = await api.get("/analytics/my-traffic", headers=student["auth"])
    assert r.status_code == 200
    report = r.json()["analytics"]
    assert report["total_views"] == 3
    assert report["recruiter_views"] == 1
    assert report["guest_views"] == 2
    assert report["top_locations"][0] == {"location": "Pune, India", "count": 2}
    assert len(report["recent_visits"]) == 3
    recruiter_visit = next(v for v in report["recent_visits"] if v["viewer_role"] == "recruiter")
    assert recruiter_visit["recruiter_company"] == "Acme Corp"
    assert recruiter_visit["city"] == "Berlin" and recruiter_visit["country"] == "Germany"

    r = await api.get("/analytics/summary", headers=student["auth"])
    summary = r.json()["summary"]
    assert summary["total_views"] == 3
    assert summary["today_views"] == 3
    assert summary["top_location"] == "Pune, India"


@pytest.mark.asyncio
async def test_summary_windows(student):
    profile_id = uuid.UUID(student["user"]["id"])
    now = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)
    async with SessionLocal() as session:
        for ts in (now - timedelta(hours=1), now - timedelta(days=3), now - timedelta(days=30)):
            session.add(Visit(profile_id=profile_id, viewer_role="guest", ip_address="10.0.0.1",
                              user_agent="curl/8", timestamp=ts))
        await session.commit()
        summary = await traffic_summary(session, profile_id, now=now)
    assert summary.today_views == 1
    assert summary.week_views == 2
    assert summary.total_views == 3
    assert summary.top_location == "Unknown"


@pytest.mark.asyncio
async def test_summary_without_visits(api, student):
    r = await api.get("/analytics/summary", headers=student["auth"])
    assert r.json()["summary"] == {"today_views": 0, "week_views": 0, "total_views": 0, "top_location": "No data"}


def test_user_agent_parsing():
    assert parse_user_agent(CHROME_WIN) == ("Chrome", "Windows")
    assert parse_user_agent(SAFARI_IOS) == ("Safari", "iOS")
    assert parse_user_agent(None) == ("Unknown", "Unknown")


def test_location_header_parsing():
    assert parse_location("Pune, Maharashtra, India") == ("Pune, Maharashtra, India", "Pune", "India")
    assert parse_location("India") == ("India", None, "India")
    assert parse_location(None) == ("Unknown", None, None)
