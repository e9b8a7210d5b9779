"""
Post repositories - job posts and job-finding posts.

Both tables share the same shape around ownership (owner_id + owner_type),
so one class handles them; each instance is bound to a table and the list
of editable columns.
"""

import uuid
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import text

from app.db.postgres import execute_raw_sql, get_db_session
from app.schemas.schemas import SessionIdentity

JOB_POST_COLUMNS = ("title", "description", "location", "salary", "hiring_amount", "work_date")
JOB_FINDING_POST_COLUMNS = ("title", "description", "desired_position", "expected_salary", "location")


def escape_like(value: str) -> str:
    """Make % and _ in user input match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostRepository:
    def __init__(self, table: str, columns: Sequence[str]):
        self.table = table
        self.columns = tuple(columns)
        self._select = (
            f"SELECT id, owner_id, owner_type, {', '.join(self.columns)}, created_at, updated_at "
            f"FROM {self.table}"
        )

    def create(self, owner: SessionIdentity, values: dict) -> str:
        post_id = str(uuid.uuid4())
        params = {column: values.get(column) for column in self.columns}
        params.update({"id": post_id, "owner_id": owner.id, "owner_type": owner.type.value})

        columns = ", ".join(params)
        placeholders = ", ".join(f":{column}" for column in params)
        with get_db_session() as db:
            db.execute(text(f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})"), params)
        return post_id

    def get(self, post_id: str) -> Optional[dict]:
        rows = execute_raw_sql(f"{self._select} WHERE id = :id", {"id": post_id})
        return rows[0] if rows else None

    def list(self, page: int, limit: int, search: Optional[str] = None) -> Tuple[List[dict], int]:
        """Newest first, optional case-insensitive title search. Returns (rows, total)."""
        where = ""
        params = {}
        if search:
            where = " WHERE LOWER(title) LIKE :search ESCAPE '\\'"
            params["search"] = f"%{escape_like(search.lower())}%"

        total = execute_raw_sql(f"SELECT COUNT(*) AS total FROM {self.table}{where}", params)[0]["total"]

        params.update({"limit": limit, "offset": (page - 1) * limit})
        rows = execute_raw_sql(
            f"{self._select}{where} ORDER BY created_at DESC LIMIT :limit OFFSET :offset",
            params
        )
        return rows, total

    def list_by_owner(self, owner: SessionIdentity) -> List[dict]:
        return execute_raw_sql(
            f"{self._select} WHERE owner_id = :owner_id AND owner_type = :owner_type "
            "ORDER BY created_at DESC",
            {"owner_id": owner.id, "owner_type": owner.type.value}
        )

    def update(self, post_id: str, owner: SessionIdentity, values: dict) -> bool:
        """Replace the editable columns. False if the post is missing or not owned by `owner`."""
        assignments = ", ".join(f"{column} = :{column}" for column in self.columns)
        params = {column: values.get(column) for column in self.columns}
        params.update({"id": post_id, "owner_id": owner.id, "owner_type": owner.type.value})

        with get_db_session() as db:
            result = db.execute(
                text(f"""
                    UPDATE {self.table} SET {assignments}, updated_at = CURRENT_TIMESTAMP
                    WHERE id = :id AND owner_id = :owner_id AND owner_type = :owner_type
                """),
                params
            )
            return result.rowcount > 0

    def delete(self, post_id: str, owner: SessionIdentity) -> bool:
        with get_db_session() as db:
            result = db.execute(
                text(f"""
                    DELETE FROM {self.table}
                    WHERE id = :id AND owner_id = :owner_id AND owner_type = :owner_type
                """),
                {"id": post_id, "owner_id": owner.id, "owner_type": owner.type.value}
            )
            return result.rowcount > 0


class JobPostRepository(PostRepository):
    def __init__(self):
        super().__init__("job_posts", JOB_POST_COLUMNS)


class JobFindingPostRepository(PostRepository):
    def __init__(self):
        super().__init__("job_finding_posts", JOB_FINDING_POST_COLUMNS)
