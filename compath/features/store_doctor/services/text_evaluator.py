from typing import Optional, Protocol

from fastapi import Depends

from compath.features.store_doctor.schemas.store_doctor import TextEvaluation
from compath.platform.llm import LLMClient, get_llm_client
from compath.platform.logger import get_logger

logger = get_logger("text_evaluator")

MAX_DESCRIPTION_CHARS = 6000

SYSTEM_PROMPTS = {
    "en": (
        "You are a Steam store page consultant. You review game descriptions the way "
        "a prospective buyer skims them, and you grade them honestly. Respond in English."
    ),
    "ja": (
        "あなたはSteamストアページのコンサルタントです。購入を検討しているユーザーの目線で"
        "ゲームの説明文を読み、率直に評価してください。日本語で回答してください。"
    ),
}

USER_PROMPT = """Evaluate the store description of the Steam game "{name}".

Short description:
{short_description}

Detailed description:
{description}

Score each aspect from 0 to 100:
- content_clarity: can a reader tell what the game is and how it plays?
- appeal: does it make the reader want to play?
- readability: is it easy to skim?
- completeness: are features, content volume and selling points covered?

Also give overall_score (0-100), a one or two sentence summary, up to 3 good_points
and up to 3 concrete improvements."""


class TextEvaluator(Protocol):
    async def evaluate(
        self,
        description_text: str,
        short_description: str,
        name: str,
        lang: str = "en",
    ) -> TextEvaluation:
        ...


class GeminiTextEvaluator:
    """Grades description copy with Gemini structured output."""

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def evaluate(
        self,
        description_text: str,
        short_description: str,
        name: str,
        lang: str = "en",
    ) -> TextEvaluation:
        system_prompt = SYSTEM_PROMPTS.get(lang, SYSTEM_PROMPTS["en"])
        user_prompt = USER_PROMPT.format(
            name=name or "Unknown",
            short_description=short_description or "(none)",
            description=description_text[:MAX_DESCRIPTION_CHARS],
        )
        evaluation = await self.llm.parse(system_prompt, user_prompt, TextEvaluation)
        logger.info(f"Text evaluation for '{name}': {evaluation.overall_score}")
        return evaluation


def get_text_evaluator(llm: Optional[LLMClient] = Depends(get_llm_client)) -> Optional[TextEvaluator]:
    """Evaluator dependency; None when no Gemini key is configured."""
    if llm is None:
        return None
    return GeminiTextEvaluator(llm)
