from unittest.mock import AsyncMock, MagicMock

from compath.features.blue_ocean.schemas.blue_ocean import ComparableListing, MarketInsight, MarketSample, PivotSuggestion
from compath.features.blue_ocean.services.competitor_source import get_comparable_source
from compath.features.blue_ocean.services.market_advisor import get_market_advisor
from compath.platform.errors import ExternalServiceError


def fake_source(sample=None, error=None):
    source = MagicMock()
    source.collect = AsyncMock(return_value=sample, side_effect=error)
    return source


def test_analyze_returns_score_and_verdict(client, test_app):
    sample = MarketSample(
        tags=["Roguelike", "Farming"],
        total_count=40,
        combined_count=3,
        per_filter_counts={"Roguelike": 100, "Farming": 80},
        listings=[ComparableListing(id="1", popularity_proxy=3000), ComparableListing(id="2", popularity_proxy=400)],
    )
    source = fake_source(sample)
    test_app.dependency_overrides[get_comparable_source] = lambda: source

    response = client.post(
        "/api/v1/blue-ocean/analyze",
        json={"tags": [" Roguelike", "Farming", ""], "free_text": "cozy dungeon farming"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tags"] == ["Roguelike", "Farming"]
    assert data["free_text"] == "cozy dungeon farming"
    assert set(data["score"]["axes"]) == {"competition", "hit_density", "revenue", "niche", "synergy", "demand"}
    assert 0 <= data["score"]["total"] <= 100
    assert data["score"]["verdict"]["bucket"] == "blue_best"
    assert data["ai_analysis"] is None
    assert data["pivot_suggestions"] == []
    source.collect.assert_awaited_once_with(["Roguelike", "Farming"])


def test_analyze_requires_tags(client, test_app):
    test_app.dependency_overrides[get_comparable_source] = lambda: fake_source()

    response = client.post("/api/v1/blue-ocean/analyze", json={"tags": []})

    assert response.status_code == 400


def test_analyze_upstream_failure_is_502(client, test_app):
    source = fake_source(error=ExternalServiceError("steam", "down"))
    test_app.dependency_overrides[get_comparable_source] = lambda: source

    response = client.post("/api/v1/blue-ocean/analyze", json={"tags": ["Roguelike"]})

    assert response.status_code == 502


def test_tag_catalogue(client):
    response = client.get("/api/v1/blue-ocean/tags")

    assert response.status_code == 200
    data = response.json()["data"]
    assert set(data) == {"genres", "subgenres", "themes", "features"}
    assert "Roguelike" in data["subgenres"]


def test_analyze_includes_ai_commentary_when_available(client, test_app):
    sample = MarketSample(tags=["Roguelike"], total_count=12, listings=[ComparableListing(id="1", popularity_proxy=50)])
    test_app.dependency_overrides[get_comparable_source] = lambda: fake_source(sample)
    advisor = MagicMock()
    advisor.analyze = AsyncMock(return_value=MarketInsight(estimated_demand="high", verdict="Build it."))
    advisor.suggest_pivots = AsyncMock(return_value=[PivotSuggestion(add_tags=["Farming"], concept="Cozy runs")])
    test_app.dependency_overrides[get_market_advisor] = lambda: advisor

    response = client.post("/api/v1/blue-ocean/analyze", json={"tags": ["Roguelike"], "free_text": "cozy"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["ai_analysis"]["estimated_demand"] == "high"
    assert data["ai_analysis"]["verdict"] == "Build it."
    assert data["pivot_suggestions"][0]["add_tags"] == ["Farming"]
    advisor.analyze.assert_awaited_once_with(["Roguelike"], sample, "cozy")
    advisor.suggest_pivots.assert_awaited_once_with(["Roguelike"], 12, "cozy")
