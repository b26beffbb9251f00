from typing import Awaitable, Callable, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from compath.features.analyze.schemas.analyze import (
    CommunityIn,
    ReviewAnalysisIn,
    ReviewCacheOptions,
    ReviewText,
    TransformIn,
)
from compath.features.analyze.services.review_analyzer import ReviewAnalyzer, get_review_analyzer
from compath.features.steam.services.steam_client import SteamStoreClient, get_steam_client
from compath.platform.cache.dependencies import get_response_cache
from compath.platform.cache.memory import ResponseCache
from compath.platform.errors import ExternalServiceError
from compath.platform.logger import get_logger
from compath.platform.response import api_response

logger = get_logger("analyze_routes")
router = APIRouter(prefix="/analyze", tags=["Analyze"])


def cache_subject(analysis_in: ReviewAnalysisIn) -> Optional[str]:
    """
    Subject id for the cache: the explicit app_id, else the first review's
    app id, else its recommendation id. None disables caching.
    """
    if analysis_in.app_id:
        return str(analysis_in.app_id)
    first = analysis_in.reviews[0] if analysis_in.reviews else None
    if first is None:
        return None
    if first.app_id:
        return str(first.app_id)
    if first.recommendation_id:
        return f"review_{first.recommendation_id}"
    return None


async def run_cached(
    operation: str,
    analysis_in: ReviewAnalysisIn,
    cache: ResponseCache,
    compute: Callable[[List[ReviewText], bool], Awaitable[BaseModel]],
):
    """Cache lookup, then the LLM call on a miss. Returns (payload, cached)."""
    if not analysis_in.reviews:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Review data is required")

    subject_id = cache_subject(analysis_in)
    options = ReviewCacheOptions(
        mental_guard_mode=analysis_in.mental_guard_mode,
        review_count=len(analysis_in.reviews),
    )

    if subject_id:
        cached = cache.get(operation, subject_id, options)
        if cached is not None:
            return cached, True

    try:
        result = await compute(analysis_in.reviews, analysis_in.mental_guard_mode)
    except ExternalServiceError as e:
        logger.error(f"{operation} analysis failed for {subject_id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="AI analysis failed")

    payload = result.model_dump()
    if subject_id:
        cache.set(operation, subject_id, payload, options)
    return payload, False


@router.post("/summary")
async def summarize_reviews(
    analysis_in: ReviewAnalysisIn,
    analyzer: ReviewAnalyzer = Depends(get_review_analyzer),
    cache: ResponseCache = Depends(get_response_cache),
):
    summary, cached = await run_cached("summary", analysis_in, cache, analyzer.summarize)
    return api_response(data={"summary": summary, "cached": cached}, message="Summary generated")


@router.post("/keywords")
async def extract_keywords(
    analysis_in: ReviewAnalysisIn,
    analyzer: ReviewAnalyzer = Depends(get_review_analyzer),
    cache: ResponseCache = Depends(get_response_cache),
):
    keywords, cached = await run_cached("keywords", analysis_in, cache, analyzer.extract_keywords)
    return api_response(data={"keywords": keywords, "cached": cached}, message="Keywords extracted")


@router.post("/keywords-deep")
async def extract_keywords_deep(
    analysis_in: ReviewAnalysisIn,
    analyzer: ReviewAnalyzer = Depends(get_review_analyzer),
    cache: ResponseCache = Depends(get_response_cache),
):
    keywords, cached = await run_cached("keywordsDeep", analysis_in, cache, analyzer.extract_keywords_deep)
    return api_response(data={"keywords": keywords, "cached": cached}, message="Topics extracted")


@router.post("/transform")
async def transform_review(
    transform_in: TransformIn,
    analyzer: ReviewAnalyzer = Depends(get_review_analyzer),
):
    review = transform_in.review.strip()
    if not review:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Review text is required")

    try:
        feedback = await analyzer.transform(review)
    except ExternalServiceError as e:
        logger.error(f"Review transform failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="AI analysis failed")

    return api_response(data={"transformed": feedback.model_dump()}, message="Review transformed")


@router.post("/community")
async def analyze_community(
    community_in: CommunityIn,
    analyzer: ReviewAnalyzer = Depends(get_review_analyzer),
    steam: SteamStoreClient = Depends(get_steam_client),
    cache: ResponseCache = Depends(get_response_cache),
):
    app_id = (community_in.app_id or "").strip()
    if not app_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="app_id is required")

    cached = cache.get("community", app_id)
    if cached is not None:
        return api_response(data={"community": cached, "cached": True}, message="Community topics analyzed")

    try:
        threads = await steam.get_discussion_threads(app_id)
        analysis = await analyzer.analyze_threads(threads)
    except ExternalServiceError as e:
        logger.error(f"Community analysis failed for {app_id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Community analysis failed")

    payload = analysis.model_dump()
    cache.set("community", app_id, payload)
    return api_response(data={"community": payload, "cached": False}, message="Community topics analyzed")


@router.get("/cache/stats")
async def cache_stats(cache: ResponseCache = Depends(get_response_cache)):
    return api_response(data=cache.stats(), message="Cache statistics")


@router.post("/cache/clear")
async def clear_cache(cache: ResponseCache = Depends(get_response_cache)):
    cache.clear()
    cache.reset_stats()
    return api_response(message="Cache cleared")
