from dotenv import load_dotenv
import os
from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
from slowapi.middleware import SlowAPIMiddleware
# Rate Limiter
from app.core.route_limiters import limiter
# Routers
from app.routes.health import router as health_router
from app.routes.interviews import router as interviews_router
from app.routes.vapi_generate import router as vapi_generate_router
from app.routes.feedback import router as feedback_router
from app.routes.voice_session import router as voice_session_router
# CORS Middleware
from app.core.cors_middleware import add_cors_middleware
# Logger
from loguru import logger
# Database
from app.database import get_firestore_client
# Error Handling
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY
from app.errors.exceptions import GenerationFailed

from app.errors.handlers import http_exception_handler, generation_failed_handler, generic_exception_handler

# Load environment variables
load_dotenv()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events."""
    # Startup
    try:
        if os.getenv("ENV") != "test":
            get_firestore_client()
        logger.info("Application startup completed successfully")
    except Exception as e:
        logger.error(f"Error during application startup: {e}")
        raise

    yield

    logger.info("Application shutdown")

# Initialize FastAPI app
app = FastAPI(
    title="Mock Interview Service API",
    description="Question generation, voice interview sessions and feedback for AI mock interviews",
    version="0.1.0",
    lifespan=lifespan
)
# Add CORS middleware
add_cors_middleware(app)

# Centralized error handlers
app.add_exception_handler(GenerationFailed, generation_failed_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
    )

# Add rate limiter to the app
try:
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    # Applies the default limit to routes without their own @limiter.limit
    app.add_middleware(SlowAPIMiddleware)
except Exception as e:
    logger.error(f"Error adding rate limiter: {e}")

# Include routers
app.include_router(health_router)
app.include_router(interviews_router)
app.include_router(vapi_generate_router)
app.include_router(feedback_router)
app.include_router(voice_session_router)
