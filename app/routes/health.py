"""
Health check endpoint for the interview service.

Description:
Liveness probe for the container platform. It does not touch Firestore or the
model provider, so it stays green while a downstream is degraded.

Arguments:
- request: An instance of Request, required for rate limiting.

Returns:
- A JSON response such as {"status": "ok", "service": "mock-interview-service", "environment": "development"}.

Dependencies:
- fastapi: For defining the route.
- app.core.route_limiters: For rate limiting functionality.
- app.schemas.health_response: For defining the response model.
- loguru: For logging.

Author: @kcaparas1630

"""
import os
from fastapi import APIRouter, Request
from app.core.route_limiters import limiter
from app.schemas.health_response import HealthResponse
from loguru import logger

SERVICE_NAME = "mock-interview-service"

router = APIRouter(
    prefix="/api",
    tags=["health"],
    responses={404: {"description": "Not found"}}
)

@router.get("/health", response_model=HealthResponse)
@limiter.limit("10/minute")
async def health(request: Request):
    """
    Request parameter is required for rate limiting.
    """
    logger.debug("Health check endpoint called")
    return HealthResponse(
        status="ok",
        service=SERVICE_NAME,
        environment=os.getenv("ENV", "development")
    )
