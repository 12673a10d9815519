"""
End-to-end tests for the HTTP API through httpx's ASGI transport.

The lifespan is not run: each test gets its own database via the get_db
override and the scheduler never starts.
"""
from datetime import date, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from taskvora.database import get_db
from taskvora.main import app

REGISTER = {
    "employee_id": "EMP100",
    "full_name": "Carla Dias",
    "email": "carla@company.com",
    "department": "Finance",
    "password": "Carla#2025",
}


@pytest.fixture
async def client(session_factory):
    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def auth_headers(client) -> dict:
    await client.post("/api/auth/register", json=REGISTER)
    resp = await client.post(
        "/api/auth/login", json={"email": REGISTER["email"], "password": REGISTER["password"]}
    )
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


class TestAuthRoutes:

    async def test_register_login_profile(self, client):
        resp = await client.post("/api/auth/register", json=REGISTER)
        assert resp.status_code == 201

        dup = await client.post("/api/auth/register", json=REGISTER)
        assert dup.status_code == 409
        assert "Email already exists" in dup.json()["detail"]

        login = await client.post(
            "/api/auth/login", json={"email": REGISTER["email"], "password": REGISTER["password"]}
        )
        assert login.status_code == 200
        body = login.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["role"] == "employee"

        profile = await client.get(
            "/api/auth/profile", headers={"Authorization": f"Bearer {body['access_token']}"}
        )
        assert profile.status_code == 200
        assert profile.json()["user"]["employee_id"] == "EMP100"

    async def test_wrong_password(self, client):
        await client.post("/api/auth/register", json=REGISTER)
        resp = await client.post(
            "/api/auth/login", json={"email": REGISTER["email"], "password": "nope"}
        )
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid credentials"

    async def test_protected_routes_need_token(self, client):
        assert (await client.get("/api/passwords")).status_code == 401
        bad = await client.get("/api/reminders", headers={"Authorization": "Bearer garbage"})
        assert bad.status_code == 401

    async def test_run_digest_is_admin_only(self, client, auth_headers):
        resp = await client.post("/api/notifications/run-digest", headers=auth_headers)
        assert resp.status_code == 403


class TestPasswordRoutes:

    async def test_crud_flow(self, client, auth_headers):
        soon = (date.today() + timedelta(days=2)).isoformat()
        resp = await client.post(
            "/api/passwords",
            json={"app_name": "AWS", "username": "carla", "password": "s3cr3t", "expiry_date": soon},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        pwd_id = resp.json()["id"]

        listed = (await client.get("/api/passwords", headers=auth_headers)).json()["passwords"]
        assert listed[0]["password"] == "s3cr3t"
        assert listed[0]["status"] == "warning"

        expiring = (await client.get("/api/passwords/expiring?days=3", headers=auth_headers)).json()
        assert expiring["count"] == 1
        assert "password" not in expiring["passwords"][0]

        missing = await client.put(
            "/api/passwords/999",
            json={"app_name": "x", "username": "x", "password": "x"},
            headers=auth_headers,
        )
        assert missing.status_code == 404

        deleted = await client.delete(f"/api/passwords/{pwd_id}", headers=auth_headers)
        assert deleted.status_code == 200
        assert (await client.get("/api/passwords", headers=auth_headers)).json()["passwords"] == []


class TestReminderRoutes:

    async def test_past_date_is_rejected(self, client, auth_headers):
        resp = await client.post(
            "/api/reminders",
            json={"title": "Old", "reminder_date": "2000-01-01"},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid reminder date"

    async def test_complete_flow(self, client, auth_headers):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        resp = await client.post(
            "/api/reminders",
            json={"title": "Budget meeting", "reminder_date": tomorrow, "priority": "high"},
            headers=auth_headers,
        )
        rem_id = resp.json()["id"]

        upcoming = (await client.get("/api/reminders/upcoming", headers=auth_headers)).json()
        assert upcoming["count"] == 1

        done = await client.put(f"/api/reminders/{rem_id}/complete", headers=auth_headers)
        assert done.status_code == 200

        reminders = (await client.get("/api/reminders", headers=auth_headers)).json()["reminders"]
        assert reminders[0]["status"] == "completed"
        assert (await client.get("/api/reminders/upcoming", headers=auth_headers)).json()["count"] == 0


class TestNotificationRoutes:

    async def test_send_now_in_demo_mode(self, client, auth_headers):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        await client.post(
            "/api/reminders",
            json={"title": "Budget meeting", "reminder_date": tomorrow},
            headers=auth_headers,
        )

        resp = await client.post("/api/notifications/send-now", headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json()["reminders"] == 1
        count = await client.get("/api/notifications/email-count", headers=auth_headers)
        assert count.json() == {"count": 1}

    async def test_health(self, client):
        resp = await client.get("/api/health")
        assert resp.json()["status"] == "OK"
