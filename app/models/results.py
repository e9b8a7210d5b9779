from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from app.schemas.schemas import SessionIdentity

T = TypeVar("T")

SOMETHING_WENT_WRONG = "Something went wrong"


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service call.

    Expected rule violations (duplicate email, wrong role, ...) are returned
    as success=False with the HTTP status to use; they are never raised.
    """
    success: bool
    status: int
    msg: str
    data: Optional[T] = None

    @classmethod
    def ok(cls, msg: str, data: T, status: int = 200) -> "ServiceResult[T]":
        return cls(success=True, status=status, msg=msg, data=data)

    @classmethod
    def fail(cls, msg: str, status: int = 400) -> "ServiceResult[T]":
        return cls(success=False, status=status, msg=msg)

    @classmethod
    def internal_error(cls) -> "ServiceResult[T]":
        return cls(success=False, status=403, msg=SOMETHING_WENT_WRONG)


@dataclass
class AuthOutcome:
    """
    Result of an authentication strategy.

    error=True means the check itself could not run (database down, provider
    unreachable); identity=None with error=False means the credentials were
    rejected and `message` says why.
    """
    message: str
    identity: Optional[SessionIdentity] = None
    error: bool = False

    @property
    def authenticated(self) -> bool:
        return self.identity is not None and not self.error

    @classmethod
    def success(cls, identity: SessionIdentity) -> "AuthOutcome":
        return cls(message="Successfully logged in", identity=identity)

    @classmethod
    def rejected(cls, message: str) -> "AuthOutcome":
        return cls(message=message)

    @classmethod
    def failed(cls) -> "AuthOutcome":
        return cls(message=SOMETHING_WENT_WRONG, error=True)
