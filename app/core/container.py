"""
Service container.

Every service is built once at startup and kept on app.state.services;
routes reach it through Depends(get_services). Tests build their own
container with in-memory collaborators.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from pymongo.collection import Collection

from app.core.config import Settings
from app.core.strategies import GoogleOAuthClient, GoogleStrategy, LocalStrategy
from app.db.mongodb import COLLECTIONS, get_collection
from app.repositories import JobFindingPostRepository, JobPostRepository
from app.schemas.schemas import AccountType, JobFindingPostResponse, JobPostResponse
from app.services.account_service import AccountService, CompanyService, EmployerService
from app.services.post_service import PostService
from app.services.session_service import SessionStore
from app.services.storage_service import StorageService


@dataclass
class Services:
    companies: CompanyService
    employers: EmployerService
    job_posts: PostService
    finding_posts: PostService
    sessions: SessionStore
    strategies: Dict[str, Union[LocalStrategy, GoogleStrategy]] = field(default_factory=dict)

    def accounts(self, account_type: AccountType) -> AccountService:
        if account_type == AccountType.company:
            return self.companies
        return self.employers

    def strategy(self, name: str):
        return self.strategies[name]


def build_services(
    settings: Settings,
    storage: Optional[StorageService] = None,
    session_collection: Optional[Collection] = None,
    google_client: Optional[GoogleOAuthClient] = None,
) -> Services:
    """Wire the real collaborators unless replacements are passed in."""
    storage = storage or StorageService.from_settings(settings)
    if session_collection is None:
        session_collection = get_collection(COLLECTIONS["sessions"])
    google_client = google_client or GoogleOAuthClient(
        settings.google_client_id, settings.google_client_secret
    )

    companies = CompanyService(
        storage, settings.registration_image_bucket, settings.storage_url_expire_seconds
    )
    employers = EmployerService(
        storage, settings.registration_image_bucket, settings.storage_url_expire_seconds
    )

    return Services(
        companies=companies,
        employers=employers,
        job_posts=PostService(JobPostRepository(), JobPostResponse, "Job post"),
        finding_posts=PostService(JobFindingPostRepository(), JobFindingPostResponse, "Job-finding post"),
        sessions=SessionStore(session_collection, settings.session_max_age_seconds),
        strategies={
            "local-company": LocalStrategy(companies),
            "local-employer": LocalStrategy(employers),
            "google-employer": GoogleStrategy(employers, google_client, settings.google_redirect_uri),
        },
    )
