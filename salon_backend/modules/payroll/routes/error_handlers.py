# salon_backend/modules/payroll/routes/error_handlers.py

"""
Exception handlers that turn payroll errors into consistent API responses.
"""

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..exceptions import PayrollException
from ..schemas.error_schemas import ErrorResponse

logger = logging.getLogger(__name__)


async def handle_payroll_exception(request: Request, exc: PayrollException) -> JSONResponse:
    """Convert a PayrollException to an ErrorResponse body"""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} at {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} at {request.url.path}: {exc.message}")

    body = ErrorResponse(
        error=type(exc).__name__,
        message=exc.message,
        code=exc.code,
        details=exc.details or None,
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body))


def register_payroll_exception_handlers(app):
    """Register payroll exception handlers with the FastAPI app"""
    app.add_exception_handler(PayrollException, handle_payroll_exception)
