import asyncio
import re
from typing import Any, Dict, List, Optional

import httpx
from bs4 import BeautifulSoup

from compath.features.steam.schemas.steam import DiscussionThread, GameInfo, OwnedGame, PriceOverview, SteamReview
from compath.platform.config import settings
from compath.platform.errors import ExternalServiceError
from compath.platform.logger import get_logger

logger = get_logger("steam_client")

APP_ID_PATTERNS = [
    re.compile(r"store\.steampowered\.com/app/(\d+)", re.IGNORECASE),
    re.compile(r"steampowered\.com/app/(\d+)", re.IGNORECASE),
    re.compile(r"/app/(\d+)", re.IGNORECASE),
]
COMMUNITY_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept-Language": "ja,en;q=0.9",
}
MAX_DISCUSSION_THREADS = 50
ICON_URL = "https://media.steampowered.com/steamcommunity/public/images/apps/{app_id}/{icon}.jpg"

REVIEWS_PER_PAGE = 100
MAX_REVIEW_PAGES = 15
MIN_REVIEW_LENGTH = 50

DAY_RANGES = {"30days": 30, "90days": 90, "180days": 180}
PLAYTIME_MINIMUM_HOURS = {"5hours": 5, "10hours": 10}


def extract_app_id(url: Optional[str]) -> Optional[str]:
    """
    Accepts a store URL (with or without scheme) or a bare numeric AppID.

    Returns None when nothing that looks like an AppID is present.
    """
    if not url:
        return None

    candidate = url.strip()
    if candidate.isdigit():
        return candidate

    for pattern in APP_ID_PATTERNS:
        match = pattern.search(candidate)
        if match:
            return match.group(1)
    return None


def extract_tags_from_html(page_html: str) -> List[str]:
    """Pull the user tags off a store page, in the order Steam displays them."""
    soup = BeautifulSoup(page_html or "", "html.parser")
    tags = []
    for node in soup.select(".app_tag"):
        tag = node.get_text(strip=True)
        if tag and tag != "+":
            tags.append(tag)
    return tags


def extract_discussion_threads(page_html: str) -> List[DiscussionThread]:
    """Thread titles and reply counts from the first page of a community discussion board."""
    soup = BeautifulSoup(page_html or "", "html.parser")
    threads = []
    for topic in soup.select(".forum_topic")[:MAX_DISCUSSION_THREADS]:
        name = topic.select_one(".forum_topic_name")
        title = name.get_text(strip=True) if name else ""
        if not title:
            continue
        replies = topic.select_one(".forum_topic_reply_count")
        threads.append(DiscussionThread(title=title, replies=replies.get_text(strip=True) if replies else ""))
    return threads


def to_game_info(app_id: str, data: Dict[str, Any]) -> GameInfo:
    price = data.get("price_overview")
    return GameInfo(
        app_id=str(app_id),
        name=data.get("name", ""),
        header_image=data.get("header_image"),
        short_description=data.get("short_description"),
        developers=data.get("developers") or [],
        publishers=data.get("publishers") or [],
        release_date=(data.get("release_date") or {}).get("date"),
        genres=[g.get("description", "") for g in data.get("genres") or []],
        categories=[c.get("description", "") for c in data.get("categories") or []],
        metacritic=(data.get("metacritic") or {}).get("score"),
        price_overview=PriceOverview(
            currency=price.get("currency"),
            initial=price.get("initial", 0) / 100,
            final=price.get("final", 0) / 100,
            discount_percent=price.get("discount_percent", 0),
        ) if price else None,
    )


def to_review(raw: Dict[str, Any], app_id: str) -> SteamReview:
    author = raw.get("author") or {}
    return SteamReview(
        recommendation_id=str(raw.get("recommendationid")),
        steam_id=author.get("steamid"),
        app_id=str(app_id),
        language=raw.get("language"),
        review=raw.get("review", ""),
        voted_up=bool(raw.get("voted_up")),
        votes_up=raw.get("votes_up") or 0,
        votes_funny=raw.get("votes_funny") or 0,
        weighted_vote_score=float(raw.get("weighted_vote_score") or 0),
        playtime_forever=round((author.get("playtime_forever") or 0) / 60, 1),
        playtime_at_review=round((author.get("playtime_at_review") or 0) / 60, 1),
        timestamp_created=raw.get("timestamp_created"),
        timestamp_updated=raw.get("timestamp_updated"),
        comment_count=raw.get("comment_count") or 0,
        steam_purchase=raw.get("steam_purchase"),
        received_for_free=raw.get("received_for_free"),
        written_during_early_access=raw.get("written_during_early_access"),
    )


def to_owned_game(raw: Dict[str, Any]) -> OwnedGame:
    app_id = str(raw.get("appid"))
    icon = raw.get("img_icon_url")
    return OwnedGame(
        app_id=app_id,
        name=raw.get("name", ""),
        playtime=raw.get("playtime_forever") or 0,
        icon_url=ICON_URL.format(app_id=app_id, icon=icon) if icon else None,
    )


class SteamStoreClient:
    """Thin async wrapper over the public Steam store, community and Web API endpoints."""

    def __init__(
        self,
        base_url: str = settings.STEAM_STORE_URL,
        timeout: float = settings.STEAM_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        page_delay: float = 0.2,
        community_url: str = settings.STEAM_COMMUNITY_URL,
        web_api_url: str = settings.STEAM_WEB_API_URL,
        api_key: Optional[str] = settings.STEAM_API_KEY,
    ):
        self.base_url = base_url.rstrip("/")
        self.community_url = community_url.rstrip("/")
        self.web_api_url = web_api_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport
        self.page_delay = page_delay

    async def _get(
        self,
        path: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
        base_url: Optional[str] = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(f"{base_url or self.base_url}{path}", params=params, headers=headers)
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as e:
            # the message would echo the query string, which can carry the Web API key
            logger.error(f"Steam request failed for {path}: HTTP {e.response.status_code}")
            raise ExternalServiceError("steam", f"GET {path} returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Steam request failed for {path}: {e}")
            raise ExternalServiceError("steam", f"GET {path} failed: {e}") from e

    async def get_app_details(self, app_id: str, language: str = "english") -> Optional[Dict[str, Any]]:
        response = await self._get("/api/appdetails", params={"appids": app_id, "l": language})
        entry = (response.json() or {}).get(str(app_id))
        if not entry or not entry.get("success"):
            return None
        return entry.get("data") or {}

    async def get_game_info(self, app_id: str) -> Optional[GameInfo]:
        data = await self.get_app_details(app_id)
        if data is None:
            return None
        return to_game_info(app_id, data)

    async def get_store_tags(self, app_id: str) -> List[str]:
        response = await self._get(
            f"/app/{app_id}",
            headers={"Accept-Language": "en-US,en;q=0.9"},
        )
        return extract_tags_from_html(response.text)

    async def search(self, term: str, language: str = "english", country: str = "US") -> List[Dict[str, Any]]:
        response = await self._get(
            "/api/storesearch",
            params={"term": term, "l": language, "cc": country},
        )
        return (response.json() or {}).get("items") or []

    async def get_discussion_threads(self, app_id: str) -> List[DiscussionThread]:
        response = await self._get(
            f"/app/{app_id}/discussions/",
            headers=COMMUNITY_HEADERS,
            base_url=self.community_url,
        )
        return extract_discussion_threads(response.text)

    async def get_owned_games(self, steam_id: str) -> Optional[List[OwnedGame]]:
        """
        A player's library via IPlayerService/GetOwnedGames.

        Returns None for private profiles, which answer without a `games`
        list, and for failed lookups.
        """
        if not self.api_key:
            raise ExternalServiceError("steam", "STEAM_API_KEY is not configured")
        try:
            response = await self._get(
                "/IPlayerService/GetOwnedGames/v1/",
                params={
                    "key": self.api_key,
                    "steamid": steam_id,
                    "include_appinfo": 1,
                    "include_played_free_games": 1,
                },
                base_url=self.web_api_url,
            )
        except ExternalServiceError:
            return None

        games = ((response.json() or {}).get("response") or {}).get("games")
        if games is None:
            logger.debug(f"Library of {steam_id} is private")
            return None
        return [to_owned_game(raw) for raw in games]

    async def fetch_reviews(
        self,
        app_id: str,
        language: str = "all",
        playtime_filter: str = "all",
        date_filter: str = "all",
        count: int = 200,
    ) -> List[SteamReview]:
        """
        Walk the review cursor API until `count` usable reviews are collected.

        Reviews shorter than MIN_REVIEW_LENGTH characters are skipped, as are
        reviews below the requested playtime. A failure on the first page is
        raised; a failure on a later page ends pagination with what we have.
        """
        reviews: List[SteamReview] = []
        cursor = "*"
        min_hours = PLAYTIME_MINIMUM_HOURS.get(playtime_filter, 0)
        day_range = DAY_RANGES.get(date_filter)

        for page in range(MAX_REVIEW_PAGES):
            params = {
                "json": 1,
                "language": language,
                "cursor": cursor,
                "num_per_page": REVIEWS_PER_PAGE,
                "filter": "recent",
                "review_type": "all",
                "purchase_type": "all",
            }
            if day_range:
                params["day_range"] = day_range

            try:
                response = await self._get(f"/appreviews/{app_id}", params=params)
            except ExternalServiceError:
                if page == 0:
                    raise
                logger.warning(f"Stopping review pagination for {app_id} after {page} pages")
                break

            data = response.json() or {}
            batch = data.get("reviews") or []
            if not data.get("success") or not batch:
                break

            for raw in batch:
                text = raw.get("review") or ""
                if len(text) < MIN_REVIEW_LENGTH:
                    continue
                review = to_review(raw, app_id)
                if review.playtime_forever < min_hours:
                    continue
                reviews.append(review)
                if len(reviews) >= count:
                    return reviews

            next_cursor = data.get("cursor")
            if not next_cursor or next_cursor == cursor:
                break
            cursor = next_cursor

            if self.page_delay:
                await asyncio.sleep(self.page_delay)

        return reviews


def get_steam_client() -> SteamStoreClient:
    return SteamStoreClient()
