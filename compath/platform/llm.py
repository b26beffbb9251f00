import json
from typing import Any, Dict, Optional, Type, TypeVar

from fastapi import Request
from openai import AsyncOpenAI
from pydantic import BaseModel

from compath.platform.config import settings
from compath.platform.errors import AIUnavailableError
from compath.platform.logger import get_logger

logger = get_logger("llm")

ModelT = TypeVar("ModelT", bound=BaseModel)


def create_llm_client() -> AsyncOpenAI:
    """Gemini, reached through its OpenAI-compatible endpoint."""
    if not settings.GOOGLE_GEMINI_API_KEY:
        raise AIUnavailableError("GOOGLE_GEMINI_API_KEY is not configured")
    return AsyncOpenAI(api_key=settings.GOOGLE_GEMINI_API_KEY, base_url=settings.GEMINI_BASE_URL)


def parse_json_text(response_text: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of an LLM reply, tolerating markdown fences and
    trailing chatter after the closing brace.
    """
    try:
        return json.loads(response_text)
    except json.JSONDecodeError as json_err:
        logger.warning(f"JSON parse error, attempting cleanup: {json_err}")

    cleaned_text = response_text.strip()
    if cleaned_text.startswith("```"):
        cleaned_text = cleaned_text.replace("```json", "").replace("```", "").strip()

    first_brace = cleaned_text.find("{")
    last_brace = cleaned_text.rfind("}")
    if first_brace == -1 or last_brace <= first_brace:
        raise ValueError("LLM response contains no JSON object")

    return json.loads(cleaned_text[first_brace:last_brace + 1])


class LLMClient:
    """Shared calling conventions for every Gemini-backed service."""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: str = settings.GEMINI_MODEL):
        self.client = client or create_llm_client()
        self.model = model

    async def parse(self, system_prompt: str, user_prompt: str, output_model: Type[ModelT]) -> ModelT:
        """Structured output call; returns an instance of `output_model`."""
        response = await self.client.chat.completions.parse(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format=output_model,
        )
        parsed = response.choices[0].message.parsed
        if parsed is None:
            raise ValueError("LLM returned no parseable content")
        return parsed

    async def complete_json(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        """Free-form JSON call for replies whose shape we normalize ourselves."""
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
        )
        response_text = completion.choices[0].message.content or ""
        return parse_json_text(response_text)

    async def close(self) -> None:
        await self.client.close()


def get_llm_client(request: Request) -> Optional[LLMClient]:
    """The client opened by the application lifespan; None when AI is disabled."""
    return getattr(request.app.state, "llm_client", None)
