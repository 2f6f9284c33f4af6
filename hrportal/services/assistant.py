"""
Language Model Assistant

Wrapper around the OpenAI chat completions API used by the AI
procedures. Plain text replies for comments, descriptions and chat;
JSON replies validated against a pydantic model for structured output.
"""
from functools import lru_cache
from typing import Dict, List, Type, TypeVar
import json
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError
from hrportal.config import get_settings, Settings
from hrportal.core.exceptions import ProcedureError
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class AssistantError(Exception):
    """The model call failed or its reply was unusable."""


class AssistantClient:
    def __init__(self, settings: Settings, client: AsyncOpenAI = None):
        self.model = settings.OPENAI_MODEL
        self.client = client or AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
        )

    async def _complete(self, messages: List[Dict[str, str]], **options) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                **options,
            )
        except OpenAIError as exc:
            raise AssistantError(f"{type(exc).__name__}: {exc}") from exc

        content = completion.choices[0].message.content if completion.choices else None
        if not content or not content.strip():
            raise AssistantError("Empty reply from model")
        return content.strip()

    async def chat(self, messages: List[Dict[str, str]]) -> str:
        """Reply to a conversation given as role/content messages."""
        return await self._complete(messages)

    async def generate_text(self, prompt: str) -> str:
        return await self._complete([{"role": "user", "content": prompt}])

    async def generate_object(self, prompt: str, schema: Type[ModelT]) -> ModelT:
        """
        Ask for a JSON reply and validate it against `schema`.

        NOTE: JSON mode only guarantees syntactically valid JSON, so the
        shape is still checked here.
        """
        instructions = (
            "Respond with a single JSON object that matches this JSON schema:\n"
            f"{json.dumps(schema.model_json_schema())}"
        )
        content = await self._complete(
            [
                {"role": "system", "content": instructions},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
        )

        try:
            return schema.model_validate_json(content)
        except ValidationError as exc:
            raise AssistantError(f"Reply did not match {schema.__name__}: {exc}") from exc


@lru_cache()
def get_assistant() -> AssistantClient:
    """
    Dependency that provides the assistant client.

    Cached like storage; tests override it with a fake backend.
    """
    settings = get_settings()
    if not settings.OPENAI_API_KEY:
        logger.error("AI procedure called but OPENAI_API_KEY is not set")
        raise ProcedureError("AI features are not configured")
    return AssistantClient(settings)
