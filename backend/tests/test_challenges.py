import uuid

import pytest
from sqlalchemy import select, func

from conftest import challenge_payload
from eduvault.db import SessionLocal
from eduvault.models.challenge import Challenge
from eduvault.services.catalog import CATALOG
from eduvault.services.challenges import record_attempt


@pytest.mark.asyncio
async def test_admin_creates_and_hidden_cases_are_stripped(api, student, challenge):
    # the admin response carries every case
    assert len(challenge["test_cases"]) == 2

    r = await api.get(f"/challenges/{challenge['slug']}", headers=student["auth"])
    assert r.status_code == 200
    body = r.json()
    assert [tc["description"] for tc in body["challenge"]["test_cases"]] == ["no name"]
    assert body["user_submissions"] == []
    assert body["challenge"]["success_rate"] == 0.0

    r = await api.get("/challenges", headers=student["auth"], params={"search": "one for you"})
    listed = [c for c in r.json()["challenges"] if c["id"] == challenge["id"]]
    assert listed and all(not tc["is_hidden"] for tc in listed[0]["test_cases"])


@pytest.mark.asyncio
async def test_lookup_by_id_and_unknown(api, student, challenge):
    r = await api.get(f"/challenges/{challenge['id']}", headers=student["auth"])
    assert r.status_code == 200
    assert r.json()["challenge"]["slug"] == challenge["slug"]
    assert (await api.get("/challenges/no-such-challenge", headers=student["auth"])).status_code == 404


@pytest.mark.asyncio
async def test_list_filters(api, admin, student):
    tag = f"t{uuid.uuid4().hex[:6]}"
    py = await api.post("/challenges", headers=admin["auth"],
                        json=challenge_payload(language="python", difficulty="Hard", tags=[tag]))
    js = await api.post("/challenges", headers=admin["auth"], json=challenge_payload(tags=[tag]))
    inactive = await api.post("/challenges", headers=admin["auth"], json=challenge_payload(tags=[tag], is_active=False))
    assert py.status_code == js.status_code == inactive.status_code == 201

    r = await api.get("/challenges", headers=student["auth"], params={"tags": tag})
    assert {c["id"] for c in r.json()["challenges"]} == {py.json()["challenge"]["id"], js.json()["challenge"]["id"]}

    r = await api.get("/challenges", headers=student["auth"], params={"tags": tag, "language": "python", "difficulty": "Hard"})
    assert [c["id"] for c in r.json()["challenges"]] == [py.json()["challenge"]["id"]]


@pytest.mark.asyncio
async def test_non_admin_cannot_write(api, student, challenge):
    assert (await api.post("/challenges", headers=student["auth"], json=challenge_payload())).status_code == 403
    assert (await api.put(f"/challenges/{challenge['id']}", headers=student["auth"], json={"title": "x"})).status_code == 403
    assert (await api.delete(f"/challenges/{challenge['id']}", headers=student["auth"])).status_code == 403
    assert (await api.post("/admin/seed-challenge", headers=student["auth"])).status_code == 403


@pytest.mark.asyncio
async def test_admin_update_delete_and_duplicate_slug(api, admin, challenge):
    r = await api.put(f"/challenges/{challenge['id']}", headers=admin["auth"], json={"title": "Two-Fer", "difficulty": "Medium"})
    assert r.status_code == 200
    assert r.json()["challenge"]["title"] == "Two-Fer"

    r = await api.post("/challenges", headers=admin["auth"], json=challenge_payload(slug=challenge["slug"].upper()))
    assert r.status_code == 409

    assert (await api.delete(f"/challenges/{challenge['id']}", headers=admin["auth"])).status_code == 200
    assert (await api.delete(f"/challenges/{challenge['id']}", headers=admin["auth"])).status_code == 404


@pytest.mark.asyncio
async def test_seed_is_idempotent(api, admin):
    first = await api.post("/admin/seed-challenge", headers=admin["auth"])
    second = await api.post("/admin/seed-challenge", headers=admin["auth"])
    assert first.status_code == second.status_code == 200
    assert second.json() == {"success": True, "message": "Challenge already exists", "challenge": None}
    r = await api.get("/challenges/hello-world", headers=admin["auth"])
    assert r.json()["challenge"]["title"] == "Hello World"


@pytest.mark.asyncio
async def test_record_attempt_counts(challenge):
    cid = uuid.UUID(challenge["id"])
    async with SessionLocal() as session:
        await record_attempt(session, cid, passed=False)
        await record_attempt(session, cid, passed=True)
        await record_attempt(session, cid, passed=True)
        await session.commit()
        ch = await session.get(Challenge, cid)
        assert (ch.total_attempts, ch.total_passed) == (3, 2)
        assert ch.success_rate == 66.67


def test_success_rate_without_attempts():
    assert Challenge(total_attempts=0, total_passed=0).success_rate == 0.0


@pytest.mark.asyncio
async def test_legacy_seed_path_reports_existing(api, admin):
    await api.post("/admin/seed-challenge", headers=admin["auth"])
    r = await api.post("/admin/create-test-challenge", headers=admin["auth"])
    assert r.status_code == 200
    assert r.json()["message"] == "Challenge already exists"


@pytest.mark.asyncio
async def test_catalog_seed_twice_keeps_one_row_per_slug(api, admin, student):
    slugs = {c["slug"] for c in CATALOG}
    first = await api.post("/admin/seed-catalog", headers=admin["auth"])
    assert first.status_code == 200, first.text
    assert set(first.json()["created"]) | set(first.json()["existing"]) == slugs

    second = await api.post("/admin/seed-catalog", headers=admin["auth"])
    assert second.json()["created"] == []
    assert set(second.json()["existing"]) == slugs

    async with SessionLocal() as session:
        rows = (await session.execute(
            select(Challenge.slug, func.count()).where(Challenge.slug.in_(slugs)).group_by(Challenge.slug)
        )).all()
    assert {slug: n for slug, n in rows} == {slug: 1 for slug in slugs}

    r = await api.get("/challenges/py-factorial", headers=student["auth"])
    assert r.json()["challenge"]["test_cases"][0]["expected_output"] == "120"
    assert (await api.post("/admin/seed-catalog", headers=student["auth"])).status_code == 403
