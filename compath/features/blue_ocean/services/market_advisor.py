"""
LLM commentary for a Blue Ocean analysis: a market reading and tag pivots.

The six-axis score never depends on this module. Both calls degrade to
"nothing to add" (None / an empty list) when the model fails or answers in an
unexpected shape, so the computed score is always returned.
"""

from typing import Any, Dict, List, Optional

from fastapi import Depends
from openai import OpenAIError
from pydantic import ValidationError

from compath.features.blue_ocean.schemas.blue_ocean import MarketInsight, MarketSample, PivotSuggestion
from compath.platform.llm import LLMClient, get_llm_client
from compath.platform.logger import get_logger

logger = get_logger("market_advisor")

MAX_PIVOTS = 3
MAX_PROMPT_COMPETITORS = 10

SYSTEM_PROMPT = (
    "You are an analyst of the Steam games market advising indie developers. "
    "Be concrete and candid. Always answer in English. Reply with JSON only."
)

ANALYSIS_PROMPT = """
Assess the market for this game concept.

CONCEPT
Tags: {tags}
Idea: {idea}

COMPETITION
Competing games found by search: {competitor_count}

TOP COMPETITORS
{competitors}

Answer in this JSON shape:
{{
  "estimated_demand": "high | medium | low",
  "quality_bar": "high | medium | low",
  "market_summary": "two or three sentences on the current market",
  "opportunities": ["...", "...", "..."],
  "threats": ["...", "..."],
  "competitor_weaknesses": ["...", "..."],
  "winning_strategy": "two or three sentences on how to win in this genre",
  "recommended_features": ["...", "...", "..."],
  "risk_level": "high | medium | low",
  "verdict": "one sentence: build it or pass"
}}"""

PIVOT_PROMPT = """
A developer plans a game with these tags, and {competitor_count} competing games already exist.

Current tags: {tags}
Idea: {idea}

Suggest {count} ways to shift the tag combination that cut the competition while
keeping the game something players would want to try. Be original.

Answer in this JSON shape:
{{
  "suggestions": [
    {{
      "add_tag": "tag to add",
      "remove_tag": "tag to drop, or empty",
      "new_concept": "the new concept in one or two sentences",
      "why_it_works": "one sentence",
      "example_pitch": "an elevator pitch"
    }}
  ]
}}"""


def describe_competitors(sample: MarketSample) -> str:
    lines = []
    for listing in sample.listings[:MAX_PROMPT_COMPETITORS]:
        genres = ", ".join(listing.genres) or "unknown genres"
        lines.append(f"- {listing.name or listing.id}: {listing.popularity_proxy} reviews, {genres}")
    return "\n".join(lines) or "(no data)"


def to_market_insight(raw: Dict[str, Any]) -> MarketInsight:
    return MarketInsight(
        estimated_demand=raw.get("estimated_demand"),
        risk_level=raw.get("risk_level"),
        summary=raw.get("market_summary") or "",
        strengths=raw.get("opportunities") or [],
        risks=raw.get("threats") or [],
        competitor_weaknesses=raw.get("competitor_weaknesses") or [],
        differentiation=raw.get("recommended_features") or [],
        winning_strategy=raw.get("winning_strategy") or "",
        verdict=raw.get("verdict") or "",
    )


def to_pivot(raw: Dict[str, Any]) -> PivotSuggestion:
    return PivotSuggestion(
        add_tags=[raw["add_tag"]] if raw.get("add_tag") else [],
        remove_tags=[raw["remove_tag"]] if raw.get("remove_tag") else [],
        concept=raw.get("new_concept") or "",
        reason=raw.get("why_it_works") or "",
        pitch=raw.get("example_pitch") or "",
    )


class MarketAdvisor:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def _ask(self, prompt: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.llm.complete_json(SYSTEM_PROMPT, prompt)
        except (OpenAIError, ValueError) as e:
            logger.warning(f"Market advice call failed: {e}")
            return None

    async def analyze(self, tags: List[str], sample: MarketSample, free_text: Optional[str] = None) -> Optional[MarketInsight]:
        raw = await self._ask(ANALYSIS_PROMPT.format(
            tags=", ".join(tags),
            idea=free_text or "(not given)",
            competitor_count=sample.total_count,
            competitors=describe_competitors(sample),
        ))
        if raw is None:
            return None
        try:
            return to_market_insight(raw)
        except (TypeError, ValidationError) as e:
            logger.warning(f"Unexpected market analysis shape: {e}")
            return None

    async def suggest_pivots(self, tags: List[str], competitor_count: int, free_text: Optional[str] = None) -> List[PivotSuggestion]:
        raw = await self._ask(PIVOT_PROMPT.format(
            tags=", ".join(tags),
            idea=free_text or "(not given)",
            competitor_count=competitor_count,
            count=MAX_PIVOTS,
        ))
        if raw is None:
            return []
        try:
            return [to_pivot(item) for item in (raw.get("suggestions") or [])[:MAX_PIVOTS]]
        except (AttributeError, TypeError, ValidationError) as e:
            logger.warning(f"Unexpected pivot suggestion shape: {e}")
            return []


def get_market_advisor(llm: Optional[LLMClient] = Depends(get_llm_client)) -> Optional[MarketAdvisor]:
    """None when AI is disabled; the analysis then carries only the computed score."""
    if llm is None:
        return None
    return MarketAdvisor(llm)
