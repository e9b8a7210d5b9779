"""
Response helpers - every endpoint answers with {success, msg, data?}.
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.models import SOMETHING_WENT_WRONG, ServiceResult


def failure(status_code: int, msg: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "msg": msg})


def success(status_code: int, msg: str, data: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "msg": msg, "data": jsonable_encoder(data, by_alias=True)},
    )


def envelope(result: ServiceResult) -> JSONResponse:
    """Turn a ServiceResult into its JSON envelope; a success without data counts as a failure."""
    if not result.success:
        return failure(result.status, result.msg)
    if result.data is None:
        return failure(403, SOMETHING_WENT_WRONG)
    return success(result.status, result.msg, result.data)
