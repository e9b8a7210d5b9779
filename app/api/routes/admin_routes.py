"""
Admin Routes - registration approval decisions

All routes need the X-Admin-Key header.

GET /admin/registration-approvals - Pending approvals of both account types
POST /admin/companies/approval - Approve or reject a company
POST /admin/employers/approval - Approve or reject an employer
"""

from fastapi import APIRouter, Depends

from app.api.responses import envelope
from app.core.auth import get_services, require_admin
from app.core.container import Services
from app.models import ServiceResult
from app.schemas.schemas import AccountType, ApprovalDecision

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/registration-approvals")
async def list_registration_approvals(services: Services = Depends(get_services)):
    """Oldest request first."""
    pending = []
    for account_type in AccountType:
        result = services.accounts(account_type).list_pending_approvals()
        if not result.success:
            return envelope(result)
        pending.extend(result.data)

    pending.sort(key=lambda approval: approval.created_at)
    return envelope(ServiceResult.ok("Successfully retrieve pending approvals", pending))


@router.post("/companies/approval")
async def decide_company_approval(decision: ApprovalDecision, services: Services = Depends(get_services)):
    """APPROVED lets the company log in; REJECTED deletes it."""
    return envelope(services.companies.decide_approval(decision))


@router.post("/employers/approval")
async def decide_employer_approval(decision: ApprovalDecision, services: Services = Depends(get_services)):
    """APPROVED lets the employer log in; REJECTED deletes it."""
    return envelope(services.employers.decide_approval(decision))
