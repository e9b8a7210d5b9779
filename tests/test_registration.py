"""
Registration workflow: validation, duplicate detection, password
confirmation, hashing and the account + approval insert.
Run: pytest tests/test_registration.py -v
"""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from app.db.postgres import engine, execute_raw_sql
from app.db.schema import registration_approvals
from app.repositories import CompanyRepository
from app.services.account_service import NAME_OR_EMAIL_USED


@pytest.mark.parametrize("kind", ["companies", "employers"])
class TestRegister:

    def test_success_creates_account_and_approval(self, kind, register_account):
        response = register_account(kind)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["msg"] == "Successfully registered"
        assert set(body["data"]) == {"accountId", "approvalId"}

        table = kind
        account = execute_raw_sql(f"SELECT * FROM {table} WHERE id = :id", {"id": body["data"]["accountId"]})[0]
        assert account["approval_status"] == "UNAPPROVED"
        approval = execute_raw_sql(
            "SELECT * FROM registration_approvals WHERE id = :id", {"id": body["data"]["approvalId"]}
        )[0]
        assert approval["user_type"] == ("COMPANY" if kind == "companies" else "EMPLOYER")
        assert approval["image_url"] is None

    def test_password_is_stored_hashed(self, kind, register_account):
        register_account(kind, password="secret123")

        stored = execute_raw_sql(f"SELECT password FROM {kind}")[0]["password"]
        assert stored != "secret123"
        assert stored.startswith("$2")

    def test_email_is_lowercased(self, kind, register_account):
        register_account(kind, email="HR@Acme.com")

        assert execute_raw_sql(f"SELECT email FROM {kind}")[0]["email"] == "hr@acme.com"

    def test_duplicate_email(self, kind, register_account):
        register_account(kind, name="Acme Corp", email="hr@acme.com")

        response = register_account(kind, name="Other Corp", email="hr@acme.com")

        assert response.status_code == 400
        assert response.json() == {"success": False, "msg": "Email was already used"}

    def test_duplicate_name(self, kind, register_account):
        register_account(kind, name="Acme Corp", email="hr@acme.com")

        response = register_account(kind, name="Acme Corp", email="jobs@acme.com")

        assert response.status_code == 400
        assert response.json()["msg"] == "Name was already used"

    def test_email_conflict_reported_before_name_conflict(self, kind, register_account):
        register_account(kind, name="Acme Corp", email="hr@acme.com")
        register_account(kind, name="Beta Corp", email="hr@beta.com")

        response = register_account(kind, name="Acme Corp", email="hr@beta.com")

        assert response.json()["msg"] == "Email was already used"

    def test_password_mismatch(self, kind, register_account):
        response = register_account(kind, password="secret123", confirm="secret124")

        assert response.status_code == 400
        assert response.json()["msg"] == "Password does not match"
        assert execute_raw_sql(f"SELECT id FROM {kind}") == []

    def test_duplicate_checked_before_password_match(self, kind, register_account):
        register_account(kind)

        response = register_account(kind, confirm="different1")

        assert response.json()["msg"] == "Email was already used"

    def test_invalid_email(self, kind, register_account):
        response = register_account(kind, email="not-an-email")

        assert response.status_code == 400
        msg = response.json()["msg"]
        assert msg.startswith("Validation error:")
        assert 'at "email"' in msg

    def test_short_password(self, kind, register_account):
        response = register_account(kind, password="short")

        assert response.status_code == 400
        assert 'at "password"' in response.json()["msg"]

    def test_missing_field(self, kind, client):
        response = client.post(f"/api/{kind}/register", json={"email": "hr@acme.com"})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert 'at "officialName"' in response.json()["msg"]

    def test_same_identity_allowed_across_account_types(self, kind, register_account):
        other = "employers" if kind == "companies" else "companies"
        register_account(other)

        assert register_account(kind).status_code == 201


class TestRegistrationIntegrity:

    def test_unique_constraint_rejects_second_insert(self):
        repository = CompanyRepository()
        repository.register("Acme Corp", "hr@acme.com", "hash")

        with pytest.raises(IntegrityError):
            repository.register("Acme Corp", "other@acme.com", "hash")

    def test_race_past_duplicate_check_reports_duplicate(self, services, register_account, monkeypatch):
        register_account("companies", name="Acme Corp", email="hr@acme.com")
        repository = services.companies.repository
        real_check = repository.duplicate_name_email
        calls = []

        def stale_check(name, email):
            calls.append(name)
            # The first check misses the concurrent insert
            return [] if len(calls) == 1 else real_check(name, email)

        monkeypatch.setattr(repository, "duplicate_name_email", stale_check)

        response = register_account("companies", name="Other Corp", email="hr@acme.com")

        assert response.status_code == 400
        assert response.json()["msg"] == "Email was already used"

    def test_race_without_visible_duplicate(self, services, monkeypatch):
        repository = services.companies.repository
        monkeypatch.setattr(repository, "duplicate_name_email", lambda name, email: [])

        def conflicting_insert(*args, **kwargs):
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(repository, "register", conflicting_insert)

        result = services.companies.register({
            "officialName": "Acme Corp", "email": "hr@acme.com",
            "password": "secret123", "confirmPassword": "secret123",
        })

        assert result.success is False
        assert result.status == 400
        assert result.msg == NAME_OR_EMAIL_USED

    def test_account_and_approval_are_one_transaction(self, register_account):
        registration_approvals.drop(bind=engine)

        response = register_account("companies")

        assert response.status_code == 403
        assert response.json() == {"success": False, "msg": "Something went wrong"}
        with engine.connect() as connection:
            assert connection.execute(text("SELECT COUNT(*) FROM companies")).scalar() == 0
