"""Global exception handlers for consistent error responses.

Usage:
    from libs.common.error_handler import add_exception_handlers

    app = FastAPI()
    add_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from libs.common.errors import InternalError, LMSError
from libs.common.logging import get_logger

logger = get_logger(__name__)


async def lms_error_handler(request: Request, exc: LMSError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Internal error on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def database_error_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    logger.exception("Unclassified database error on %s", request.url.path)
    error = InternalError("Internal server error.")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def add_exception_handlers(app: FastAPI) -> None:
    """
    Map the LMS error taxonomy (and stray database errors) onto JSON responses.
    """
    app.add_exception_handler(LMSError, lms_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
