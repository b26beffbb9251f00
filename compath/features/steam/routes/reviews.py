from fastapi import APIRouter, Depends, HTTPException, status

from compath.features.steam.schemas.steam import ReviewsFetchIn, ReviewsFetchOut, UserGamesIn
from compath.features.steam.services.review_stats import calculate_review_stats
from compath.features.steam.services.steam_client import (
    SteamStoreClient,
    extract_app_id,
    get_steam_client,
)
from compath.features.steam.services.user_games import aggregate_user_games
from compath.platform.cache.dependencies import get_response_cache
from compath.platform.cache.memory import ResponseCache
from compath.platform.config import settings
from compath.platform.errors import ExternalServiceError
from compath.platform.logger import get_logger
from compath.platform.response import api_response

logger = get_logger("reviews_routes")
router = APIRouter(prefix="/reviews", tags=["Reviews"])


async def load_game_info(app_id: str, steam: SteamStoreClient, cache: ResponseCache):
    cached = cache.get("gameInfo", app_id)
    if cached is not None:
        return cached

    game_info = await steam.get_game_info(app_id)
    if game_info is None:
        return None

    payload = game_info.model_dump()
    cache.set("gameInfo", app_id, payload)
    return payload


@router.post("/fetch")
async def fetch_reviews(
    fetch_in: ReviewsFetchIn,
    steam: SteamStoreClient = Depends(get_steam_client),
    cache: ResponseCache = Depends(get_response_cache),
):
    app_id = extract_app_id(fetch_in.url)
    if not app_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid Steam store URL. Use https://store.steampowered.com/app/12345/...",
        )

    logger.info(f"Fetching reviews for AppID {app_id} ({fetch_in.language}, {fetch_in.playtime_filter}, {fetch_in.date_filter})")

    try:
        game_info = await load_game_info(app_id, steam, cache)
        reviews = await steam.fetch_reviews(
            app_id,
            language=fetch_in.language,
            playtime_filter=fetch_in.playtime_filter,
            date_filter=fetch_in.date_filter,
            count=min(fetch_in.count, settings.REVIEW_FETCH_LIMIT),
        )
    except ExternalServiceError as e:
        logger.error(f"Review fetch failed for {app_id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch reviews from Steam")

    result = ReviewsFetchOut(
        app_id=app_id,
        game_info=game_info,
        reviews=reviews,
        stats=calculate_review_stats(reviews),
        total_fetched=len(reviews),
    )
    return api_response(data=result.model_dump(), message="Reviews fetched")


@router.get("/game/{app_id}")
async def get_game(
    app_id: str,
    steam: SteamStoreClient = Depends(get_steam_client),
    cache: ResponseCache = Depends(get_response_cache),
):
    try:
        game_info = await load_game_info(app_id, steam, cache)
    except ExternalServiceError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch game info from Steam")

    if game_info is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")

    return api_response(data=game_info, message="Game info retrieved")


@router.post("/user-games")
async def aggregate_reviewer_games(
    user_games_in: UserGamesIn,
    steam: SteamStoreClient = Depends(get_steam_client),
):
    steam_ids = [steam_id for steam_id in user_games_in.steam_ids if steam_id]
    if not steam_ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="steam_ids is required")
    if not user_games_in.app_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="app_id is required")
    if not steam.api_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reviewer libraries are unavailable. Ask the server administrator to configure a Steam Web API key.",
        )

    steam_ids = steam_ids[:settings.USER_GAMES_MAX_IDS]
    logger.info(f"Aggregating libraries of {len(steam_ids)} reviewers of {user_games_in.app_id}")
    result = await aggregate_user_games(steam, steam_ids, user_games_in.app_id)
    return api_response(data=result.model_dump(), message="Reviewer libraries aggregated")
