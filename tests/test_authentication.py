"""
Login, server-side sessions, the current-user role gate and logout.
Run: pytest tests/test_authentication.py -v
"""

import asyncio

from pymongo.errors import PyMongoError
from sqlalchemy.exc import OperationalError

from conftest import ADMIN_HEADERS


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------

class TestLogin:

    def test_login_by_official_name(self, approved_account, login):
        data = approved_account("companies", name="Acme Corp", email="hr@acme.com")

        response = login("companies", "Acme Corp")

        assert response.status_code == 200
        body = response.json()
        assert body["msg"] == "Successfully logged in"
        assert body["data"] == {"id": data["accountId"], "type": "COMPANY"}

    def test_login_by_email(self, approved_account, login):
        data = approved_account("employers", name="Jane Hiring", email="jane@hiring.com")

        response = login("employers", "JANE@hiring.com")

        assert response.status_code == 200
        assert response.json()["data"] == {"id": data["accountId"], "type": "EMPLOYER"}

    def test_sets_session_cookie(self, approved_account, login, session_collection):
        approved_account("companies")

        response = login("companies", "Acme Corp")

        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith("sid=")
        assert "httponly" in cookie
        assert "samesite=lax" in cookie
        assert session_collection.count_documents({}) == 1

    def test_session_stores_only_id_and_type(self, approved_account, login, session_collection):
        approved_account("companies")
        login("companies", "Acme Corp")

        stored = session_collection.find_one()
        assert set(stored["identity"]) == {"id", "type"}

    def test_unknown_user(self, client, login):
        response = login("companies", "Nobody")

        assert response.status_code == 401
        assert response.json() == {"success": False, "msg": "User doesn't exist"}

    def test_wrong_password(self, approved_account, login):
        approved_account("companies")

        response = login("companies", "Acme Corp", password="wrong-password")

        assert response.status_code == 401
        assert response.json()["msg"] == "Wrong password"

    def test_unapproved_account_cannot_login(self, register_account, login, session_collection):
        register_account("companies")

        response = login("companies", "Acme Corp")

        assert response.status_code == 401
        assert response.json()["msg"] == "User isn't approved yet"
        assert "set-cookie" not in response.headers
        assert session_collection.count_documents({}) == 0

    def test_company_cannot_login_as_employer(self, approved_account, login):
        approved_account("companies")

        response = login("employers", "Acme Corp")

        assert response.status_code == 401
        assert response.json()["msg"] == "User doesn't exist"

    def test_first_candidate_with_matching_password_wins(self, approved_account, login):
        # One account matches the credential by email, the other by official name
        approved_account("companies", name="Beta Corp", email="beta@corp.com", password="beta-pass")
        second = approved_account("companies", name="beta@corp.com", email="other@corp.com", password="other-pass")

        response = login("companies", "beta@corp.com", password="other-pass")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == second["accountId"]

    def test_database_failure(self, services, approved_account, login, monkeypatch):
        approved_account("companies")

        def broken(*args):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        monkeypatch.setattr(services.companies.repository, "match_name_email", broken)

        response = login("companies", "Acme Corp")

        assert response.status_code == 403
        assert response.json()["msg"] == "Something went wrong"

    def test_session_store_failure(self, services, approved_account, login, monkeypatch):
        approved_account("companies")

        def broken(identity):
            raise PyMongoError("mongo down")

        monkeypatch.setattr(services.sessions, "create", broken)

        response = login("companies", "Acme Corp")

        assert response.status_code == 403
        assert response.json()["msg"] == "Something went wrong when logging in"

    def test_relogin_replaces_previous_session(self, approved_account, login, session_collection):
        approved_account("companies")
        login("companies", "Acme Corp")
        first = session_collection.find_one()["_id"]

        login("companies", "Acme Corp")

        assert session_collection.count_documents({}) == 1
        assert session_collection.find_one()["_id"] != first

    def test_missing_credentials(self, client):
        response = client.post("/api/companies/login", json={"username": "Acme Corp"})

        assert response.status_code == 400
        assert 'at "password"' in response.json()["msg"]


# ---------------------------------------------------------------------------
# Current user / role gate
# ---------------------------------------------------------------------------

class TestCurrent:

    def test_current_company(self, client, company_session):
        response = client.get("/api/companies/current")

        assert response.status_code == 200
        assert response.json()["data"] == {"id": company_session, "type": "COMPANY"}

    def test_no_session(self, client):
        response = client.get("/api/companies/current")

        assert response.status_code == 403
        assert response.json() == {"success": False, "msg": "Something went wrong"}

    def test_company_session_on_employer_endpoint(self, client, company_session):
        response = client.get("/api/employers/current")

        assert response.status_code == 400
        assert response.json() == {"success": False, "msg": "User isn't logged in"}

    def test_employer_session_on_company_endpoint(self, client, employer_session):
        response = client.get("/api/companies/current")

        assert response.status_code == 400
        assert "data" not in response.json()

    def test_unknown_sid_cookie(self, client):
        response = client.get("/api/companies/current", headers={"Cookie": "sid=forged-session-id"})

        assert response.status_code == 403

    def test_deleted_account_drops_session(self, client, company_session, session_collection):
        # Rejecting deletes the account even after it was approved
        client.post(
            "/api/admin/companies/approval",
            json={"id": company_session, "status": "REJECTED"},
            headers=ADMIN_HEADERS,
        )

        response = client.get("/api/companies/current")

        assert response.status_code == 403
        assert session_collection.count_documents({}) == 0


# ---------------------------------------------------------------------------
# Logout
# ---------------------------------------------------------------------------

class TestLogout:

    def test_logout(self, client, company_session, session_collection):
        response = client.post("/api/companies/logout")

        assert response.status_code == 200
        body = response.json()
        assert body["msg"] == "Successfully logged out"
        assert body["data"] == {"id": company_session, "type": "COMPANY"}
        assert session_collection.count_documents({}) == 0
        assert client.get("/api/companies/current").status_code == 403

    def test_logout_clears_cookie(self, client, company_session):
        response = client.post("/api/companies/logout")

        cookie = response.headers["set-cookie"]
        assert cookie.startswith('sid=""') or "Max-Age=0" in cookie

    def test_logout_without_session(self, client):
        response = client.post("/api/companies/logout")

        assert response.status_code == 403
        assert response.json()["msg"] == "Something went wrong"

    def test_company_cannot_logout_through_employer_endpoint(self, client, company_session, session_collection):
        response = client.post("/api/employers/logout")

        assert response.status_code == 401
        assert response.json()["msg"] == "User isn't logged in"
        assert session_collection.count_documents({}) == 1
        assert client.get("/api/companies/current").status_code == 200


# ---------------------------------------------------------------------------
# Handlers that hash passwords
# ---------------------------------------------------------------------------

def test_register_and_login_run_in_threadpool(client):
    endpoints = {
        route.path: route.endpoint
        for route in client.app.routes
        if route.path.endswith(("/register", "/login"))
    }

    assert set(endpoints) == {
        "/api/companies/register", "/api/companies/login",
        "/api/employers/register", "/api/employers/login",
    }
    for endpoint in endpoints.values():
        assert not asyncio.iscoroutinefunction(endpoint)
