from unittest.mock import AsyncMock, MagicMock

import pytest

from compath.features.blue_ocean.schemas.blue_ocean import ComparableListing, MarketSample
from compath.features.blue_ocean.services.market_advisor import (
    MAX_PIVOTS,
    MarketAdvisor,
    get_market_advisor,
)

SAMPLE = MarketSample(
    tags=["Roguelike", "Farming"],
    total_count=42,
    listings=[ComparableListing(id="1", name="Hades", popularity_proxy=200000, genres=["Action", "Indie"])],
)


def fake_llm(reply=None, error=None):
    llm = MagicMock()
    llm.complete_json = AsyncMock(return_value=reply, side_effect=error)
    return llm


@pytest.mark.asyncio
async def test_analysis_maps_the_model_reply():
    llm = fake_llm({
        "estimated_demand": "High",
        "quality_bar": "medium",
        "market_summary": "Crowded at the top, thin in the middle.",
        "opportunities": ["Cozy roguelikes are rare"],
        "threats": ["Hades sets a high bar"],
        "competitor_weaknesses": ["Little farming depth"],
        "winning_strategy": "Lean into the farming loop.",
        "recommended_features": ["Seasonal runs"],
        "risk_level": "unknown",
        "verdict": "Build it.",
    })

    insight = await MarketAdvisor(llm).analyze(["Roguelike", "Farming"], SAMPLE, "cozy dungeon farming")

    assert insight.estimated_demand == "high"
    assert insight.risk_level == "medium"
    assert insight.summary == "Crowded at the top, thin in the middle."
    assert insight.strengths == ["Cozy roguelikes are rare"]
    assert insight.risks == ["Hades sets a high bar"]
    assert insight.differentiation == ["Seasonal runs"]
    assert insight.verdict == "Build it."
    _, prompt = llm.complete_json.await_args.args
    assert "Roguelike, Farming" in prompt
    assert "cozy dungeon farming" in prompt
    assert "Competing games found by search: 42" in prompt
    assert "- Hades: 200000 reviews, Action, Indie" in prompt


@pytest.mark.asyncio
async def test_analysis_failure_adds_nothing():
    advisor = MarketAdvisor(fake_llm(error=ValueError("LLM response contains no JSON object")))
    assert await advisor.analyze(["Roguelike"], SAMPLE) is None


@pytest.mark.asyncio
async def test_analysis_bad_shape_adds_nothing():
    advisor = MarketAdvisor(fake_llm({"opportunities": "not a list"}))
    assert await advisor.analyze(["Roguelike"], SAMPLE) is None


@pytest.mark.asyncio
async def test_pivots_map_single_tags_to_lists():
    suggestion = {
        "add_tag": "Deckbuilder",
        "remove_tag": "",
        "new_concept": "Plant cards, harvest runs.",
        "why_it_works": "Few games mix the two.",
        "example_pitch": "Slay the Spire meets Stardew.",
    }
    llm = fake_llm({"suggestions": [suggestion] * (MAX_PIVOTS + 2)})

    pivots = await MarketAdvisor(llm).suggest_pivots(["Roguelike", "Farming"], 42)

    assert len(pivots) == MAX_PIVOTS
    assert pivots[0].add_tags == ["Deckbuilder"]
    assert pivots[0].remove_tags == []
    assert pivots[0].concept == "Plant cards, harvest runs."
    assert pivots[0].reason == "Few games mix the two."
    assert pivots[0].pitch == "Slay the Spire meets Stardew."
    _, prompt = llm.complete_json.await_args.args
    assert "42 competing games" in prompt


@pytest.mark.asyncio
async def test_pivot_failure_is_empty():
    advisor = MarketAdvisor(fake_llm(error=ValueError("no JSON")))
    assert await advisor.suggest_pivots(["Roguelike"], 10) == []


def test_no_advisor_without_llm_client():
    assert get_market_advisor(None) is None
    assert isinstance(get_market_advisor(fake_llm()), MarketAdvisor)
