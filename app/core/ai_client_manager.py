"""
AI Client Manager

One AsyncOpenAI client per model call site, so a slow feedback call never
queues behind question generation on the same connection pool.

Each call site reads its settings from the environment. A site-specific
variable wins over the shared one:

    question_generation: QUESTION_API_KEY / QUESTION_BASE_URL
    feedback:            FEEDBACK_API_KEY / FEEDBACK_BASE_URL
    shared:              NEBIUS_API_KEY / NEBIUS_BASE_URL
    LLM_TIMEOUT_SECONDS  request timeout for both (default 60)

Clients are created on first use and reused for the lifetime of the process.
"""

import os
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional
from openai import AsyncOpenAI
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.studio.nebius.com/v1"
DEFAULT_TIMEOUT_SECONDS = 60.0
QUESTION_GENERATION = "question_generation"
FEEDBACK = "feedback"

# Environment variable prefix per call site
SERVICE_ENV_PREFIXES = {
    QUESTION_GENERATION: "QUESTION",
    FEEDBACK: "FEEDBACK",
}


@dataclass(frozen=True)
class ClientSettings:
    api_key: Optional[str]
    base_url: str
    timeout: float

    @classmethod
    def from_env(cls, service_type: str) -> "ClientSettings":
        prefix = SERVICE_ENV_PREFIXES[service_type]
        return cls(
            api_key=os.getenv(f"{prefix}_API_KEY") or os.getenv("NEBIUS_API_KEY"),
            base_url=os.getenv(f"{prefix}_BASE_URL") or os.getenv("NEBIUS_BASE_URL", DEFAULT_BASE_URL),
            timeout=float(os.getenv("LLM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)),
        )


class AIClientManager:
    """Hands out one cached AsyncOpenAI client per call site."""

    def __init__(self):
        self._clients: Dict[str, AsyncOpenAI] = {}
        self._lock = threading.Lock()

    def _create_client(self, service_type: str) -> AsyncOpenAI:
        settings = ClientSettings.from_env(service_type)
        if not settings.api_key:
            logger.error(f"No API key for {service_type}")
            raise RuntimeError(
                f"No API key configured for {service_type}. "
                f"Set NEBIUS_API_KEY or {SERVICE_ENV_PREFIXES[service_type]}_API_KEY."
            )

        logger.info(f"Creating AI client for {service_type} at {settings.base_url}")
        # A failed call surfaces to the caller; nothing retries
        return AsyncOpenAI(api_key=settings.api_key, base_url=settings.base_url, timeout=settings.timeout, max_retries=0)

    def get_client(self, service_type: str) -> AsyncOpenAI:
        """
        Get the dedicated client for a call site.

        Args:
            service_type (str): "question_generation" or "feedback"

        Raises:
            ValueError: If service_type is not a known call site
            RuntimeError: If no API key is configured for it
        """
        if service_type not in SERVICE_ENV_PREFIXES:
            raise ValueError(f"Unsupported service type: {service_type}. Available: {list(SERVICE_ENV_PREFIXES)}")

        client = self._clients.get(service_type)
        if client is None:
            with self._lock:
                # Double-check locking pattern
                client = self._clients.get(service_type)
                if client is None:
                    client = self._create_client(service_type)
                    self._clients[service_type] = client
        return client


_ai_manager: Optional[AIClientManager] = None
_manager_lock = threading.Lock()

def get_ai_client_manager() -> AIClientManager:
    global _ai_manager

    if _ai_manager is None:
        with _manager_lock:
            if _ai_manager is None:
                _ai_manager = AIClientManager()

    return _ai_manager

def get_question_generation_client() -> AsyncOpenAI:
    return get_ai_client_manager().get_client(QUESTION_GENERATION)

def get_feedback_client() -> AsyncOpenAI:
    return get_ai_client_manager().get_client(FEEDBACK)
