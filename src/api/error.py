"""HTTP error mapping

Use cases report failures as libs.result.Error; routes raise ClientError and
the handlers below render every error as {"error": {"code", "message"}}.
"""

import logging
from typing import Optional
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from libs.result import Error
from src.app.use_cases.ledger import errors

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"

STATUS_BY_CODE = {
    errors.INVALID_AMOUNT: status.HTTP_400_BAD_REQUEST,
    errors.INSUFFICIENT_BALANCE: status.HTTP_402_PAYMENT_REQUIRED,
    errors.ACCOUNT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    errors.NO_OP_TRANSITION: status.HTTP_409_CONFLICT,
    errors.INVALID_STATUS_TRANSITION: status.HTTP_409_CONFLICT,
    errors.CONCURRENT_MODIFICATION: status.HTTP_409_CONFLICT,
    errors.IDEMPOTENCY_CONFLICT: status.HTTP_409_CONFLICT,
    errors.PERSISTENCE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    errors.RECONCILIATION_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        self.error = error
        self.status_code = status_code or STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST)
        super().__init__(error.message)


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error.code} {exc.error.reason}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.error.code, exc.error.message))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(VALIDATION_ERROR, f"Invalid request parameters: {details}"),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(INTERNAL_ERROR, "Internal server error"),
    )
