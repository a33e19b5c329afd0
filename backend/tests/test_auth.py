import pytest
from fastapi import status

from conftest import register_student, student_payload


@pytest.mark.asyncio
async def test_register_login_me_refresh(api):
    payload = student_payload()
    r = await api.post("/auth/register", json=payload)
    assert r.status_code == status.HTTP_201_CREATED, r.text
    body = r.json()
    assert body["success"] is True
    assert body["user"]["email"] == payload["email"]
    assert body["user"]["username"] == payload["email"].split("@")[0]
    assert body["user"]["role"] == "student"

    r = await api.post("/auth/login", json={"email": payload["email"], "password": "supersecret"})
    assert r.status_code == 200
    tokens = r.json()
    assert tokens["access"] and tokens["refresh"]

    me = await api.get("/auth/me", headers={"Authorization": f"Bearer {tokens['access']}"})
    assert me.status_code == 200
    assert me.json()["user"]["full_name"] == "Ada Lovelace"

    r = await api.post("/auth/refresh", headers={"Authorization": f"Bearer {tokens['refresh']}"})
    assert r.status_code == 200
    assert r.json()["access"] != tokens["access"]


@pytest.mark.asyncio
async def test_duplicate_email_rejected(api):
    payload = student_payload()
    assert (await api.post("/auth/register", json=payload)).status_code == 201
    r = await api.post("/auth/register", json={**payload, "email": payload["email"].upper()})
    assert r.status_code == 409
    assert r.json() == {"success": False, "message": "A vault already exists with this email"}


@pytest.mark.asyncio
async def test_username_gets_numeric_suffix_when_taken(api):
    first = await register_student(api, email="sam.t@example.com")
    second = await register_student(api, email="sam.t@example.org")
    third = await register_student(api, email="sam.t@example.net")
    assert first["user"]["username"] == "sam.t"
    assert second["user"]["username"] == "sam.t1"
    assert third["user"]["username"] == "sam.t2"


@pytest.mark.asyncio
async def test_login_bad_password(api, student):
    r = await api.post("/auth/login", json={"email": student["user"]["email"], "password": "wrong-password"})
    assert r.status_code == 401
    assert r.json()["success"] is False


@pytest.mark.asyncio
async def test_register_validation_is_400(api):
    r = await api.post("/auth/register", json=student_payload(graduation_year=2019))
    assert r.status_code == 400
    assert "graduation_year" in r.json()["message"]
    r = await api.post("/auth/register", json=student_payload(password="123"))
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(api, student):
    r = await api.post("/auth/refresh", headers={"Authorization": f"Bearer {student['access']}"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_update_profile(api, student):
    r = await api.patch(
        "/auth/profile",
        headers=student["auth"],
        json={"skills": ["python", "sql", "python"], "bio": "Builder", "portfolio_public": False},
    )
    assert r.status_code == 200, r.text
    user = r.json()["user"]
    assert user["skills"] == ["python", "sql"]
    assert user["bio"] == "Builder"
    assert user["portfolio_public"] is False

    r = await api.patch("/auth/profile", headers=student["auth"], json={"bio": "x" * 301})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_recruiter_register_login_me(api, recruiter):
    assert recruiter["recruiter"]["role"] == "recruiter"
    r = await api.post("/recruiters/login", json={"email": recruiter["recruiter"]["email"], "password": "supersecret"})
    assert r.status_code == 200
    me = await api.get("/recruiters/me", headers={"Authorization": f"Bearer {r.json()['access']}"})
    assert me.status_code == 200
    assert me.json()["recruiter"]["company_name"] == "Acme Corp"


@pytest.mark.asyncio
async def test_tokens_do_not_cross_account_kinds(api, student, recruiter):
    assert (await api.get("/recruiters/me", headers=student["auth"])).status_code == 403
    assert (await api.get("/auth/me", headers=recruiter["auth"])).status_code == 403
