"""
Models module - internal data structures passed between layers.

- ServiceResult: what every service operation returns; routes turn it into
  the {success, msg, data} envelope with `status` as the HTTP code
- AuthOutcome: what an authentication strategy hands back to the login route
"""

from app.models.results import AuthOutcome, ServiceResult, SOMETHING_WENT_WRONG

__all__ = ["AuthOutcome", "ServiceResult", "SOMETHING_WENT_WRONG"]
