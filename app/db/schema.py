"""
Relational schema - table definitions for SQLAlchemy Core.

Tables:
- companies / employers: organization accounts waiting for (or past) admin approval
- registration_approvals: one pending approval per account, holds the proof image URL
- job_posts: hiring posts owned by a company or an employer
- job_finding_posts: posts from people looking for work

Queries are written as text() SQL in the repositories; these definitions
are only used to create the tables and their constraints.
"""

from sqlalchemy import (
    Column, Date, DateTime, ForeignKey, Integer, MetaData, Numeric, String,
    Table, Text, func,
)

metadata = MetaData()


def _timestamps():
    return [
        Column("created_at", DateTime, nullable=False, server_default=func.now()),
        Column("updated_at", DateTime, nullable=False, server_default=func.now()),
    ]


companies = Table(
    "companies", metadata,
    Column("id", String(36), primary_key=True),
    Column("official_name", String(255), nullable=False, unique=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("approval_status", String(20), nullable=False, server_default="UNAPPROVED"),
    *_timestamps(),
)

employers = Table(
    "employers", metadata,
    Column("id", String(36), primary_key=True),
    Column("official_name", String(255), nullable=False, unique=True),
    Column("email", String(255), nullable=False, unique=True),
    # NULL for accounts created through Google sign-in
    Column("password", String(255), nullable=True),
    Column("google_id", String(255), nullable=True, unique=True),
    Column("approval_status", String(20), nullable=False, server_default="UNAPPROVED"),
    *_timestamps(),
)

registration_approvals = Table(
    "registration_approvals", metadata,
    Column("id", String(36), primary_key=True),
    Column("user_type", String(20), nullable=False),
    Column("company_id", String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=True),
    Column("employer_id", String(36), ForeignKey("employers.id", ondelete="CASCADE"), nullable=True),
    Column("image_url", Text, nullable=True),
    *_timestamps(),
)

job_posts = Table(
    "job_posts", metadata,
    Column("id", String(36), primary_key=True),
    Column("owner_id", String(36), nullable=False, index=True),
    Column("owner_type", String(20), nullable=False),
    Column("title", String(200), nullable=False),
    Column("description", Text, nullable=True),
    Column("location", String(255), nullable=True),
    Column("salary", Numeric(12, 2), nullable=True),
    Column("hiring_amount", Integer, nullable=False, server_default="1"),
    Column("work_date", Date, nullable=True),
    *_timestamps(),
)

job_finding_posts = Table(
    "job_finding_posts", metadata,
    Column("id", String(36), primary_key=True),
    Column("owner_id", String(36), nullable=False, index=True),
    Column("owner_type", String(20), nullable=False),
    Column("title", String(200), nullable=False),
    Column("description", Text, nullable=True),
    Column("desired_position", String(200), nullable=True),
    Column("expected_salary", Numeric(12, 2), nullable=True),
    Column("location", String(255), nullable=True),
    *_timestamps(),
)
