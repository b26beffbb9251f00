import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from compath.features.blue_ocean.schemas.blue_ocean import AnalyzeIn, MarketAnalysisOut
from compath.features.blue_ocean.services.competitor_source import SteamComparableSource, get_comparable_source
from compath.features.blue_ocean.services.market_advisor import MarketAdvisor, get_market_advisor
from compath.features.blue_ocean.services.market_scorer import MarketScorer
from compath.features.blue_ocean.services.tags import POPULAR_TAGS
from compath.platform.errors import ExternalServiceError
from compath.platform.logger import get_logger
from compath.platform.response import api_response

logger = get_logger("blue_ocean_routes")
router = APIRouter(prefix="/blue-ocean", tags=["Blue Ocean"])


@router.post("/analyze")
async def analyze_market(
    analyze_in: AnalyzeIn,
    source: SteamComparableSource = Depends(get_comparable_source),
    advisor: Optional[MarketAdvisor] = Depends(get_market_advisor),
):
    tags = [tag.strip() for tag in analyze_in.tags if tag and tag.strip()]
    if not tags:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Select at least one tag")

    logger.info(f"Blue ocean analysis for {tags}")
    try:
        sample = await source.collect(tags)
    except ExternalServiceError as e:
        logger.error(f"Market sample failed for {tags}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to search Steam")

    result = MarketAnalysisOut(
        tags=tags,
        sample=sample,
        score=MarketScorer().score(sample),
        free_text=analyze_in.free_text,
    )
    if advisor is not None:
        result.ai_analysis, result.pivot_suggestions = await asyncio.gather(
            advisor.analyze(tags, sample, analyze_in.free_text),
            advisor.suggest_pivots(tags, sample.total_count, analyze_in.free_text),
        )
    return api_response(data=result.model_dump(), message="Market analyzed")


@router.get("/tags")
async def list_tags():
    return api_response(data=POPULAR_TAGS, message="Tag catalogue")
