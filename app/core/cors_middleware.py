"""
Description:
CORS setup for the interview web frontend.

Allowed origins come from CORS_ORIGINS, a comma-separated list. Without it only
the local Next.js dev server is allowed.

Dependencies:
- fastapi.middleware.cors: For CORS middleware functionality.
- loguru: For logging.

Author: @kcaparas1630
"""
import os
from typing import List
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

DEFAULT_ORIGINS = "http://localhost:3000"

def get_allowed_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", DEFAULT_ORIGINS)
    return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

def add_cors_middleware(app: FastAPI):
    origins = get_allowed_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(f"CORS middleware added for {len(origins)} origin(s)")
