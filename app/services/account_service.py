"""
Account Service - registration, login and approval workflow.

The same workflow serves companies and employers; each gets its own
instance bound to its account type and repository.

REGISTRATION (fail-fast, in this order):
1. Validate the form (RegisterRequest)
2. Reject a name or email that is already used
3. Password and confirmation must match
4. Hash the password (bcrypt)
5. Insert account + approval request in one transaction

LOGIN:
- Candidates are all accounts whose name OR email equals the credential
- First candidate whose password verifies wins
- An unapproved account never gets a session

Expected rule violations come back as ServiceResult / AuthOutcome values.
Only database and storage faults are caught here, logged, and reported as
"Something went wrong" without details.
"""

import logging
from typing import Any, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.security import hash_password, verify_password
from app.models import AuthOutcome, ServiceResult
from app.repositories import AccountRepository, CompanyRepository, EmployerRepository
from app.schemas.schemas import (
    AccountType, ApprovalDecision, ApprovalDecisionResult, ApprovalDecisionStatus,
    ApprovalStatus, GoogleProfile, PendingApproval, RegisteredAccount, RegisterRequest,
    RegistrationImage, SessionIdentity, format_validation_error,
)
from app.services.storage_service import StorageError, StorageService
from app.utils.file_upload import UploadedImage

logger = logging.getLogger(__name__)

NAME_USED = "Name was already used"
EMAIL_USED = "Email was already used"
NAME_OR_EMAIL_USED = "Name or email was already used"
PASSWORD_MISMATCH = "Password does not match"
USER_NOT_FOUND = "User doesn't exist"
WRONG_PASSWORD = "Wrong password"
NOT_APPROVED = "User isn't approved yet"
NOT_LOGGED_IN = "User isn't logged in"
APPROVAL_NOT_FOUND = "Registration approval not found"


class AccountService:
    def __init__(
        self,
        account_type: AccountType,
        repository: AccountRepository,
        storage: StorageService,
        image_bucket: str,
        image_url_expire_seconds: int,
    ):
        self.account_type = account_type
        self.repository = repository
        self.storage = storage
        self.image_bucket = image_bucket
        self.image_url_expire_seconds = image_url_expire_seconds

    # ============================================================
    # REGISTRATION
    # ============================================================

    def register(self, form: Any) -> ServiceResult[RegisteredAccount]:
        try:
            request = RegisterRequest.model_validate(form)
        except ValidationError as exc:
            message = format_validation_error(exc.errors())
            logger.info("Rejected %s registration form: %s", self.account_type.value, message)
            return ServiceResult.fail(message, 400)

        try:
            duplicates = self.repository.duplicate_name_email(request.official_name, request.email)
        except SQLAlchemyError:
            logger.exception("Duplicate check failed for %s registration", self.account_type.value)
            return ServiceResult.internal_error()

        conflict = self._conflict_message(request, duplicates)
        if conflict:
            return ServiceResult.fail(conflict, 400)

        if request.password != request.confirm_password:
            return ServiceResult.fail(PASSWORD_MISMATCH, 400)

        try:
            hashed_password = hash_password(request.password)
        except (ValueError, TypeError):
            logger.exception("Password hashing failed")
            return ServiceResult.internal_error()

        try:
            registered = self.repository.register(
                request.official_name, request.email, hashed_password
            )
        except IntegrityError:
            # A concurrent registration took the name or email after our check
            logger.info("Unique constraint hit during %s registration", self.account_type.value)
            return ServiceResult.fail(self._conflict_after_race(request), 400)
        except SQLAlchemyError:
            logger.exception("Inserting %s account failed", self.account_type.value)
            return ServiceResult.internal_error()

        logger.info("Registered %s %s", self.account_type.value, registered.account_id)
        return ServiceResult.ok("Successfully registered", registered, status=201)

    @staticmethod
    def _conflict_message(request: RegisterRequest, duplicates: List[dict]) -> Optional[str]:
        if any(row["email"] == request.email for row in duplicates):
            return EMAIL_USED
        if any(row["official_name"] == request.official_name for row in duplicates):
            return NAME_USED
        return None

    def _conflict_after_race(self, request: RegisterRequest) -> str:
        try:
            duplicates = self.repository.duplicate_name_email(request.official_name, request.email)
        except SQLAlchemyError:
            logger.exception("Duplicate re-check failed")
            return NAME_OR_EMAIL_USED
        return self._conflict_message(request, duplicates) or NAME_OR_EMAIL_USED

    # ============================================================
    # AUTHENTICATION
    # ============================================================

    def authenticate(self, username: str, password: str) -> AuthOutcome:
        """Local credential check. Never returns the password hash."""
        try:
            candidates = self.repository.match_name_email(username)
        except SQLAlchemyError:
            logger.exception("Login lookup failed for %s", self.account_type.value)
            return AuthOutcome.failed()

        if not candidates:
            return AuthOutcome.rejected(USER_NOT_FOUND)

        matched = None
        try:
            for candidate in candidates:
                if verify_password(password, candidate["password"]):
                    matched = candidate
                    break
        except (ValueError, TypeError):
            logger.exception("Stored password hash could not be verified")
            return AuthOutcome.failed()

        if matched is None:
            return AuthOutcome.rejected(WRONG_PASSWORD)

        if matched["approval_status"] != ApprovalStatus.approved.value:
            return AuthOutcome.rejected(NOT_APPROVED)

        return AuthOutcome.success(SessionIdentity(id=matched["id"], type=self.account_type))

    def deserialize(self, account_id: str) -> ServiceResult[dict]:
        """Reload the account behind a session (it may have been deleted since login)."""
        try:
            account = self.repository.get_by_id(account_id)
        except SQLAlchemyError:
            logger.exception("Loading %s %s failed", self.account_type.value, account_id)
            return ServiceResult.internal_error()

        if account is None:
            return ServiceResult.fail(USER_NOT_FOUND, 404)
        return ServiceResult.ok("Retrieve user successfully", account)

    # ============================================================
    # SESSION / ROLE GATE
    # ============================================================

    def get_current(self, identity: Optional[SessionIdentity]) -> ServiceResult[SessionIdentity]:
        if identity is None:
            return ServiceResult.internal_error()
        if identity.type != self.account_type:
            return ServiceResult.fail(NOT_LOGGED_IN, 400)
        return ServiceResult.ok("Successfully retrieve user", identity)

    def check_current(self, identity: Optional[SessionIdentity]) -> ServiceResult[SessionIdentity]:
        """Stricter gate used before logout: a wrong role is 401."""
        if identity is None:
            return ServiceResult.internal_error()
        if identity.type != self.account_type:
            return ServiceResult.fail(NOT_LOGGED_IN, 401)
        return ServiceResult.ok("Successfully retrieve checked user", identity)

    # ============================================================
    # REGISTRATION IMAGE
    # ============================================================

    def upload_registration_image(
        self, approval_id: str, image: UploadedImage
    ) -> ServiceResult[RegistrationImage]:
        """
        Store the proof image as `{approval_id}_register`, sign a GET URL
        for it and save the URL on the approval request.
        """
        try:
            approval = self.repository.get_approval(approval_id)
        except SQLAlchemyError:
            logger.exception("Loading approval %s failed", approval_id)
            return ServiceResult.internal_error()

        if approval is None:
            return ServiceResult.fail(APPROVAL_NOT_FOUND, 404)

        object_key = f"{approval_id}_register"
        try:
            self.storage.ensure_bucket(self.image_bucket)
            self.storage.put_object(self.image_bucket, object_key, image.content, image.content_type)
            image_url = self.storage.presigned_get_url(
                self.image_bucket, object_key, self.image_url_expire_seconds
            )
        except StorageError:
            logger.exception("Uploading registration image %s failed", object_key)
            return ServiceResult.internal_error()

        try:
            updated = self.repository.set_approval_image(approval_id, image_url)
        except SQLAlchemyError:
            logger.exception("Saving image URL on approval %s failed", approval_id)
            return ServiceResult.internal_error()

        if not updated:
            return ServiceResult.fail(APPROVAL_NOT_FOUND, 404)

        return ServiceResult.ok(
            "Successfully upload and insert registration approval image",
            RegistrationImage(approval_id=approval_id, url=image_url),
            status=201,
        )

    # ============================================================
    # ADMIN APPROVAL
    # ============================================================

    def list_pending_approvals(self) -> ServiceResult[List[PendingApproval]]:
        try:
            rows = self.repository.list_pending_approvals()
        except SQLAlchemyError:
            logger.exception("Listing %s approvals failed", self.account_type.value)
            return ServiceResult.internal_error()
        return ServiceResult.ok(
            "Successfully retrieve pending approvals",
            [PendingApproval(**row) for row in rows],
        )

    def decide_approval(self, decision: ApprovalDecision) -> ServiceResult[ApprovalDecisionResult]:
        """APPROVED flips the status; REJECTED deletes the account."""
        try:
            found = self.repository.decide(decision.id, decision.status)
        except SQLAlchemyError:
            logger.exception("Approval decision for %s %s failed", self.account_type.value, decision.id)
            return ServiceResult.internal_error()

        if not found:
            return ServiceResult.fail(USER_NOT_FOUND, 404)

        logger.info("%s %s marked %s", self.account_type.value, decision.id, decision.status.value)
        verb = "approved" if decision.status == ApprovalDecisionStatus.approved else "rejected"
        return ServiceResult.ok(
            f"Successfully {verb} user",
            ApprovalDecisionResult(id=decision.id, status=decision.status),
        )


class CompanyService(AccountService):
    def __init__(self, storage: StorageService, image_bucket: str, image_url_expire_seconds: int,
                 repository: Optional[CompanyRepository] = None):
        super().__init__(
            AccountType.company, repository or CompanyRepository(),
            storage, image_bucket, image_url_expire_seconds,
        )


class EmployerService(AccountService):
    def __init__(self, storage: StorageService, image_bucket: str, image_url_expire_seconds: int,
                 repository: Optional[EmployerRepository] = None):
        super().__init__(
            AccountType.employer, repository or EmployerRepository(),
            storage, image_bucket, image_url_expire_seconds,
        )

    def google_login(self, profile: GoogleProfile) -> AuthOutcome:
        """
        Sign in with a verified Google profile.

        - Known google_id: use that employer
        - Known email: link the Google account to that employer
        - Otherwise: register a new employer (no password) awaiting approval
        """
        try:
            account = self.repository.get_by_google_id(profile.sub)
            if account is None:
                account = self.repository.get_by_email(profile.email)
                if account is not None:
                    self.repository.link_google_id(account["id"], profile.sub)
                else:
                    registered = self._register_from_google(profile)
                    logger.info("Registered employer %s from Google sign-in", registered.account_id)
                    return AuthOutcome.rejected(NOT_APPROVED)
        except IntegrityError:
            # Name or email taken by a concurrent registration
            logger.info("Google sign-up for %s hit a unique constraint", profile.email)
            return AuthOutcome.rejected(NAME_OR_EMAIL_USED)
        except SQLAlchemyError:
            logger.exception("Google sign-in lookup failed")
            return AuthOutcome.failed()

        if account["approval_status"] != ApprovalStatus.approved.value:
            return AuthOutcome.rejected(NOT_APPROVED)

        return AuthOutcome.success(SessionIdentity(id=account["id"], type=self.account_type))

    def _register_from_google(self, profile: GoogleProfile) -> RegisteredAccount:
        return self.repository.register(
            self._free_official_name(profile), profile.email, None, google_id=profile.sub
        )

    def _free_official_name(self, profile: GoogleProfile) -> str:
        """Display name, else the email, else the email with a numeric suffix."""
        display_name = (profile.name or "").strip()
        for candidate in (display_name, profile.email):
            if candidate and not self.repository.name_taken(candidate):
                return candidate

        suffix = 2
        while self.repository.name_taken(f"{profile.email} ({suffix})"):
            suffix += 1
        return f"{profile.email} ({suffix})"
