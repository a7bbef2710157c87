# shared/helpers/json_response_helper.py
from fastapi import HTTPException
from typing import Any, Optional

from shared.utils.app_status_code import AppStatusCode
from shared.core.schemas import JsonOutResult


def success_response(data: Any, message: str = "Success", status_code: str = AppStatusCode.DATA_RETRIEVED_SUCCESSFULLY):
    return JsonOutResult(
        data=data,
        status="Success",
        status_code=status_code,
        message=message
    )


def failure_result(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, data: Optional[Any] = None) -> dict:
    """Failure envelope as a plain dict, ready for JSONResponse or HTTPException.detail."""
    return JsonOutResult(
        data=data,
        status="Failure",
        status_code=str(status_code),
        message=message
    ).model_dump()


def error_response(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, http_status: int = 400,
                   data: Optional[Any] = None):
    raise HTTPException(
        status_code=http_status,
        detail=failure_result(message, status_code, data)
    )
