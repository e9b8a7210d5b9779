"""
Post Routes - job posts and job-finding posts

Every route needs a logged-in session.

POST /job-posts/employer - Create job post (employers)
POST /job-posts/company - Create job post (companies)
GET /job-posts - Browse job posts (page, limit, search)
GET /job-posts/{post_id} - Job post details
PUT /job-posts/{post_id} - Update own job post
DELETE /job-posts/{post_id} - Delete own job post
GET /user/job-posts - Employer's own job posts
GET /company/job-posts - Company's own job posts

GET /finding-posts - Browse job-finding posts
POST /finding-posts - Create job-finding post
GET /finding-posts/{post_id} - Job-finding post details
PUT /finding-posts/{post_id} - Update own job-finding post
DELETE /finding-posts/{post_id} - Delete own job-finding post
GET /user/finding-posts - Own job-finding posts
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.responses import envelope
from app.core.auth import get_services, require_authenticated, require_company, require_employer
from app.core.container import Services
from app.schemas.schemas import JobFindingPostCreate, JobPostCreate, SessionIdentity

router = APIRouter(tags=["Posts"])

MAX_PAGE_SIZE = 50


# ============================================================
# JOB POSTS
# ============================================================

@router.post("/job-posts/employer", status_code=201)
async def create_job_post_as_employer(
    post: JobPostCreate,
    identity: SessionIdentity = Depends(require_employer),
    services: Services = Depends(get_services),
):
    return envelope(services.job_posts.create(identity, post))


@router.post("/job-posts/company", status_code=201)
async def create_job_post_as_company(
    post: JobPostCreate,
    identity: SessionIdentity = Depends(require_company),
    services: Services = Depends(get_services),
):
    return envelope(services.job_posts.create(identity, post))


@router.get("/job-posts")
async def list_job_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, max_length=100, description="Match in title"),
    identity: SessionIdentity = Depends(require_authenticated),
    services: Services = Depends(get_services),
):
    """Newest first."""
    return envelope(services.job_posts.list(page, limit, search))


@router.get("/job-posts/{post_id}")
async def get_job_post(
    post_id: str,
    identity: SessionIdentity = Depends(require_authenticated),
    services: Services = Depends(get_services),
):
    return envelope(services.job_posts.get(post_id))


@router.put("/job-posts/{post_id}")
async def update_job_post(
    post_id: str,
    post: JobPostCreate,
    identity: SessionIdentity = Depends(require_authenticated),
    services: Services = Depends(get_services),
):
    return envelope(services.job_posts.update(identity, post_id, post))


@router.delete("/job-posts/{post_id}")
async def delete_job_post(
    post_id: str,
    identity: SessionIdentity = Depends(require_authenticated),
    services: Services = Depends(get_services),
):
    return envelope(services.job_posts.delete(identity, post_id))


@router.get("/user/job-posts")
async def list_employer_job_posts(
    identity: SessionIdentity = Depends(require_employer),
    services: Services = Depends(get_services),
):
    return envelope(services.job_posts.list_by_owner(identity))


@router.get("/company/job-posts")
async def list_company_job_posts(
    identity: SessionIdentity = Depends(require_company),
    services: Services = Depends(get_services),
):
    return envelope(services.job_posts.list_by_owner(identity))


# ============================================================
# JOB-FINDING POSTS
# ============================================================

@router.get("/finding-posts")
async def list_finding_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, max_length=100),
    identity: SessionIdentity = Depends(require_authenticated),
    services: Services = Depends(get_services),
):
    return envelope(services.finding_posts.list(page, limit, search))


@router.post("/finding-posts", status_code=201)
async def create_finding_post(
    post: JobFindingPostCreate,
    identity: SessionIdentity = Depends(require_authenticated),
    services: Services = Depends(get_services),
):
    return envelope(services.finding_posts.create(identity, post))


@router.get("/finding-posts/{post_id}")
async def get_finding_post(
    post_id: str,
    identity: SessionIdentity = Depends(require_authenticated),
    services: Services = Depends(get_services),
):
    return envelope(services.finding_posts.get(post_id))


@router.put("/finding-posts/{post_id}")
async def update_finding_post(
    post_id: str,
    post: JobFindingPostCreate,
    identity: SessionIdentity = Depends(require_authenticated),
    services: Services = Depends(get_services),
):
    return envelope(services.finding_posts.update(identity, post_id, post))


@router.delete("/finding-posts/{post_id}")
async def delete_finding_post(
    post_id: str,
    identity: SessionIdentity = Depends(require_authenticated),
    services: Services = Depends(get_services),
):
    return envelope(services.finding_posts.delete(identity, post_id))


@router.get("/user/finding-posts")
async def list_own_finding_posts(
    identity: SessionIdentity = Depends(require_authenticated),
    services: Services = Depends(get_services),
):
    return envelope(services.finding_posts.list_by_owner(identity))
