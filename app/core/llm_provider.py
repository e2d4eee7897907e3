"""
LLM Provider Module

This module defines the narrow capability the rest of the service uses to talk
to a language model: "generate text for a prompt" and "generate a structured
object for a prompt and schema". Routes and services only depend on
`LLMProvider`, so swapping the hosted model or provider is a change to this
module alone.

The module contains:
- LLMProvider: The capability interface
- OpenAIChatProvider: Implementation over an OpenAI-compatible chat completions API
- get_question_llm / get_feedback_llm: FastAPI dependencies returning providers

Dependencies:
- openai: For AI client interactions and response generation.
- pydantic: For structured output validation.
- loguru: For logging operations.
- app.core.ai_client_manager: For the dedicated per-service clients.

Author: @kcaparas1630
"""

import json
import os
import time
from typing import Optional, Type, TypeVar
from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError
from loguru import logger
from app.core.ai_client_manager import get_question_generation_client, get_feedback_client
from app.errors.exceptions import StructuredOutputError
from app.helper.parse_questions import strip_code_fence

DEFAULT_MODEL = "meta-llama/Meta-Llama-3.1-8B-Instruct-fast"

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class LLMProvider:
    """Capability interface over a hosted language model."""

    async def generate_text(self, prompt: str, system: Optional[str] = None) -> str:
        raise NotImplementedError

    async def generate_object(self, prompt: str, schema: Type[SchemaT], system: Optional[str] = None) -> SchemaT:
        raise NotImplementedError


class OpenAIChatProvider(LLMProvider):
    """
    LLMProvider backed by an OpenAI-compatible chat completions endpoint.

    Structured generation uses JSON mode and appends the schema's JSON schema to
    the system message as a hint; the reply is validated with pydantic.
    """

    def __init__(self, client: AsyncOpenAI, model: Optional[str] = None, temperature: float = 0.4, max_tokens: int = 2000):
        self.client = client
        self.model = model or os.getenv("LLM_MODEL", DEFAULT_MODEL)
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _messages(self, prompt: str, system: Optional[str]):
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    async def generate_text(self, prompt: str, system: Optional[str] = None) -> str:
        llm_start_time = time.time()
        response = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=self._messages(prompt, system)
        )
        logger.info(f"LLM text call completed in {time.time() - llm_start_time:.3f}s")
        return response.choices[0].message.content or ""

    async def generate_object(self, prompt: str, schema: Type[SchemaT], system: Optional[str] = None) -> SchemaT:
        schema_hint = (
            "Respond with a single JSON object that matches this JSON schema exactly. "
            f"Do not include any other text.\n{json.dumps(schema.model_json_schema())}"
        )
        system = f"{system}\n\n{schema_hint}" if system else schema_hint

        llm_start_time = time.time()
        response = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            response_format={"type": "json_object"},
            messages=self._messages(prompt, system)
        )
        logger.info(f"LLM object call completed in {time.time() - llm_start_time:.3f}s")

        content = response.choices[0].message.content or ""
        logger.debug(f"Raw structured response: {content}")
        try:
            return schema.model_validate_json(strip_code_fence(content))
        except ValidationError as e:
            raise StructuredOutputError(f"Response does not match {schema.__name__}: {e}") from e


def get_question_llm() -> LLMProvider:
    """FastAPI dependency for the question generation model."""
    return OpenAIChatProvider(get_question_generation_client(), temperature=0.7)

def get_feedback_llm() -> LLMProvider:
    """FastAPI dependency for the feedback model."""
    return OpenAIChatProvider(get_feedback_client(), temperature=0.1)
