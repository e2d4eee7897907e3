from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from loguru import logger
from app.errors.exceptions import GenerationFailed

def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )

def generation_failed_handler(request: Request, exc: GenerationFailed):
    """
    Render question generation failures in the shape the interview form expects.

    Args:
        request: FastAPI request instance
        exc: GenerationFailed raised by a generation route

    Returns:
        JSONResponse with the exception status and {"success": false, "error": ...}
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
    )

def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred."},
    )
