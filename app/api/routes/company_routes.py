"""
Company Routes

POST /companies/register - Register company + approval request
POST /companies/login - Login, sets the `sid` cookie
POST /companies/logout - Logout
GET /companies/current - Current company session
POST /companies/registration-approvals/{approval_id}/image - Upload registration image
"""

from app.api.routes.account_routes import build_account_router
from app.schemas.schemas import AccountType

router = build_account_router(AccountType.company, "/companies", "Companies")
