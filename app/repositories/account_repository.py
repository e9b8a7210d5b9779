"""
Account repositories - data access for organization accounts.

One repository per account table (companies, employers). Each also owns
the rows of registration_approvals that point at its table, since an
account and its approval request are always created and resolved together.
"""

import uuid
from typing import List, Optional

from sqlalchemy import text

from app.db.postgres import execute_raw_sql, get_db_session
from app.schemas.schemas import AccountType, ApprovalDecisionStatus, RegisteredAccount

ACCOUNT_TABLES = {
    AccountType.company: "companies",
    AccountType.employer: "employers",
}

# registration_approvals column that references each account table
APPROVAL_FOREIGN_KEYS = {
    AccountType.company: "company_id",
    AccountType.employer: "employer_id",
}


class AccountRepository:
    """CRUD and lookups for one organization account table."""

    def __init__(self, account_type: AccountType):
        self.account_type = account_type
        self.table = ACCOUNT_TABLES[account_type]
        self.approval_fk = APPROVAL_FOREIGN_KEYS[account_type]

    def duplicate_name_email(self, official_name: str, email: str) -> List[dict]:
        """All accounts already using this official name or this email."""
        return execute_raw_sql(
            f"SELECT official_name, email FROM {self.table} "
            "WHERE official_name = :name OR email = :email",
            {"name": official_name, "email": email.lower()}
        )

    def match_name_email(self, name_or_email: str) -> List[dict]:
        """
        Login candidates: accounts whose name OR email equals the credential.
        More than one row is possible (one by name, another by email).
        """
        return execute_raw_sql(
            f"SELECT id, password, approval_status FROM {self.table} "
            "WHERE official_name = :value OR email = :email ORDER BY created_at",
            {"value": name_or_email, "email": name_or_email.lower()}
        )

    def register(
        self,
        official_name: str,
        email: str,
        hashed_password: Optional[str],
        **extra_columns,
    ) -> RegisteredAccount:
        """
        Insert the account and its registration approval in one transaction.

        Raises sqlalchemy.exc.IntegrityError when the name or email is taken.
        """
        account_id = str(uuid.uuid4())
        approval_id = str(uuid.uuid4())

        values = {
            "id": account_id,
            "official_name": official_name,
            "email": email.lower(),
            "password": hashed_password,
            **extra_columns,
        }
        columns = ", ".join(values)
        placeholders = ", ".join(f":{column}" for column in values)

        with get_db_session() as db:
            db.execute(
                text(f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})"),
                values
            )
            db.execute(
                text(f"""
                    INSERT INTO registration_approvals (id, user_type, {self.approval_fk})
                    VALUES (:id, :user_type, :account_id)
                """),
                {"id": approval_id, "user_type": self.account_type.value, "account_id": account_id}
            )

        return RegisteredAccount(account_id=account_id, approval_id=approval_id)

    def get_by_id(self, account_id: str) -> Optional[dict]:
        """Account without password or timestamps."""
        rows = execute_raw_sql(
            f"SELECT id, official_name, email, approval_status FROM {self.table} WHERE id = :id",
            {"id": account_id}
        )
        return rows[0] if rows else None

    def get_by_email(self, email: str) -> Optional[dict]:
        rows = execute_raw_sql(
            f"SELECT id, official_name, email, approval_status FROM {self.table} WHERE email = :email",
            {"email": email.lower()}
        )
        return rows[0] if rows else None

    def name_taken(self, official_name: str) -> bool:
        rows = execute_raw_sql(
            f"SELECT id FROM {self.table} WHERE official_name = :name",
            {"name": official_name}
        )
        return bool(rows)

    # ------------------------------------------------------------
    # Registration approvals
    # ------------------------------------------------------------

    def get_approval(self, approval_id: str) -> Optional[dict]:
        """Approval row, only if it belongs to this account type."""
        rows = execute_raw_sql(
            """
            SELECT id, user_type, image_url FROM registration_approvals
            WHERE id = :id AND user_type = :user_type
            """,
            {"id": approval_id, "user_type": self.account_type.value}
        )
        return rows[0] if rows else None

    def set_approval_image(self, approval_id: str, image_url: str) -> bool:
        with get_db_session() as db:
            result = db.execute(
                text("""
                    UPDATE registration_approvals
                    SET image_url = :url, updated_at = CURRENT_TIMESTAMP
                    WHERE id = :id AND user_type = :user_type
                """),
                {"url": image_url, "id": approval_id, "user_type": self.account_type.value}
            )
            return result.rowcount == 1

    def list_pending_approvals(self) -> List[dict]:
        return execute_raw_sql(
            f"""
            SELECT a.id AS approval_id, a.user_type, acc.id AS account_id,
                   acc.official_name, acc.email, a.image_url, a.created_at
            FROM registration_approvals a
            JOIN {self.table} acc ON a.{self.approval_fk} = acc.id
            WHERE a.user_type = :user_type AND acc.approval_status = 'UNAPPROVED'
            ORDER BY a.created_at
            """,
            {"user_type": self.account_type.value}
        )

    def decide(self, account_id: str, status: ApprovalDecisionStatus) -> bool:
        """
        Apply an admin decision. The approval request is consumed either way;
        APPROVED flips the account status, REJECTED deletes the account row.

        Returns False if the account does not exist.
        """
        with get_db_session() as db:
            found = db.execute(
                text(f"SELECT id FROM {self.table} WHERE id = :id"),
                {"id": account_id}
            ).fetchone()
            if not found:
                return False

            db.execute(
                text(f"DELETE FROM registration_approvals WHERE {self.approval_fk} = :id"),
                {"id": account_id}
            )
            if status == ApprovalDecisionStatus.approved:
                db.execute(
                    text(f"""
                        UPDATE {self.table}
                        SET approval_status = 'APPROVED', updated_at = CURRENT_TIMESTAMP
                        WHERE id = :id
                    """),
                    {"id": account_id}
                )
            else:
                db.execute(text(f"DELETE FROM {self.table} WHERE id = :id"), {"id": account_id})
        return True


class CompanyRepository(AccountRepository):
    def __init__(self):
        super().__init__(AccountType.company)


class EmployerRepository(AccountRepository):
    """Employers can also sign in with Google, keyed by the Google subject id."""

    def __init__(self):
        super().__init__(AccountType.employer)

    def get_by_google_id(self, google_id: str) -> Optional[dict]:
        rows = execute_raw_sql(
            "SELECT id, official_name, email, approval_status FROM employers WHERE google_id = :gid",
            {"gid": google_id}
        )
        return rows[0] if rows else None

    def link_google_id(self, account_id: str, google_id: str) -> None:
        with get_db_session() as db:
            db.execute(
                text("""
                    UPDATE employers SET google_id = :gid, updated_at = CURRENT_TIMESTAMP
                    WHERE id = :id
                """),
                {"gid": google_id, "id": account_id}
            )
