"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
JSON keys are camelCase on the wire (officialName, confirmPassword, ...),
snake_case in Python.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# ENUMS
# ============================================================

class AccountType(str, Enum):
    company = "COMPANY"
    employer = "EMPLOYER"


class ApprovalStatus(str, Enum):
    unapproved = "UNAPPROVED"
    approved = "APPROVED"


class ApprovalDecisionStatus(str, Enum):
    approved = "APPROVED"
    rejected = "REJECTED"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    official_name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=8, max_length=72)
    confirm_password: str = Field(..., min_length=1, max_length=72)

    @field_validator("official_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Official name must contain at least 2 characters")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Official name or email")
    password: str = Field(..., min_length=1)


class SessionIdentity(BaseModel):
    """What a session remembers about the logged-in account. Nothing else."""
    id: str
    type: AccountType


class RegisteredAccount(CamelModel):
    account_id: str
    approval_id: str


class GoogleProfile(BaseModel):
    sub: str
    email: EmailStr
    name: Optional[str] = None


# ============================================================
# REGISTRATION APPROVAL SCHEMAS
# ============================================================

class RegistrationImage(CamelModel):
    approval_id: str
    url: str


class ApprovalDecision(BaseModel):
    id: str = Field(..., min_length=1, description="Account id")
    status: ApprovalDecisionStatus


class ApprovalDecisionResult(BaseModel):
    id: str
    status: ApprovalDecisionStatus


class PendingApproval(CamelModel):
    approval_id: str
    user_type: AccountType
    account_id: str
    official_name: str
    email: str
    image_url: Optional[str] = None
    created_at: datetime


# ============================================================
# POST SCHEMAS
# ============================================================

class JobPostCreate(CamelModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    salary: Optional[float] = Field(None, ge=0)
    hiring_amount: int = Field(1, ge=1)
    work_date: Optional[date] = None


class JobPostResponse(CamelModel):
    id: str
    owner_id: str
    owner_type: AccountType
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[float] = None
    hiring_amount: int
    work_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class JobFindingPostCreate(CamelModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = None
    desired_position: Optional[str] = Field(None, max_length=200)
    expected_salary: Optional[float] = Field(None, ge=0)
    location: Optional[str] = Field(None, max_length=255)


class JobFindingPostResponse(CamelModel):
    id: str
    owner_id: str
    owner_type: AccountType
    title: str
    description: Optional[str] = None
    desired_position: Optional[str] = None
    expected_salary: Optional[float] = None
    location: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PostPage(BaseModel):
    posts: List[Any]
    total: int
    page: int
    limit: int


class CreatedPost(BaseModel):
    id: str


# ============================================================
# VALIDATION ERRORS
# ============================================================

def format_validation_error(errors: Iterable[dict]) -> str:
    """Render pydantic errors as one line: Validation error: <msg> at "<field>"; ..."""
    parts = []
    for error in errors:
        loc = ".".join(str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path"))
        message = error.get("msg", "Invalid value")
        parts.append(f'{message} at "{loc}"' if loc else message)
    return "Validation error: " + "; ".join(parts)
