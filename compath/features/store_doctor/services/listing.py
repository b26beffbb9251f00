import asyncio
import re
from typing import Any, Dict, List, Optional

from compath.features.steam.services.steam_client import SteamStoreClient, get_steam_client
from compath.features.store_doctor.schemas.store_doctor import ListingAttributes
from compath.platform.errors import ExternalServiceError
from compath.platform.logger import get_logger

logger = get_logger("store_listing")

HTML_TAG_PATTERN = re.compile(r"<[^>]+>")
BREAK_PATTERN = re.compile(r"<br\s*/?>", re.IGNORECASE)

# Store copy is read in the diagnosis language; the other copy is only checked for media.
STEAM_LANGUAGES = {"en": "english", "ja": "japanese"}
ALT_LANGUAGES = {"en": "japanese", "ja": "english"}


def count_languages(supported_languages: Optional[str]) -> int:
    """
    Count entries in Steam's `supported_languages` HTML.

    Steam appends a footnote ("<br><strong>*</strong>languages with full audio
    support") after the list, so only the part before the first <br> counts.
    """
    if not supported_languages:
        return 0
    head = BREAK_PATTERN.split(supported_languages, maxsplit=1)[0]
    plain = HTML_TAG_PATTERN.sub("", head).replace("*", "")
    return len([lang for lang in plain.split(",") if lang.strip()])


def build_listing_attributes(
    app_id: str,
    details: Dict[str, Any],
    tags: List[str],
    alt_details: Optional[Dict[str, Any]] = None,
) -> ListingAttributes:
    price = details.get("price_overview") or {}
    genres = [g.get("description", "") for g in details.get("genres") or []]
    return ListingAttributes(
        app_id=str(app_id),
        name=details.get("name", ""),
        tags=tags,
        trailer_count=len(details.get("movies") or []),
        screenshot_count=len(details.get("screenshots") or []),
        has_header_image=bool(details.get("header_image")),
        short_description=details.get("short_description") or "",
        detailed_description_html=details.get("detailed_description") or "",
        detailed_description_html_alt=(alt_details or {}).get("detailed_description") or "",
        language_count=count_languages(details.get("supported_languages")),
        genre_count=len(genres),
        category_count=len(details.get("categories") or []),
        header_image=details.get("header_image"),
        developers=details.get("developers") or [],
        release_date=(details.get("release_date") or {}).get("date"),
        genres=genres,
        is_free=bool(details.get("is_free")),
        price=price.get("final_formatted"),
    )


class StoreListingLoader:
    """Collects everything a diagnosis needs for one AppID."""

    def __init__(self, steam: SteamStoreClient):
        self.steam = steam

    async def _tags(self, app_id: str) -> List[str]:
        try:
            return await self.steam.get_store_tags(app_id)
        except ExternalServiceError as e:
            logger.warning(f"Tag scrape failed for {app_id}, continuing without tags: {e}")
            return []

    async def _alt_details(self, app_id: str, language: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.steam.get_app_details(app_id, language=language)
        except ExternalServiceError as e:
            logger.warning(f"Alternate-language details failed for {app_id}: {e}")
            return None

    async def load(self, app_id: str, lang: str = "en") -> Optional[ListingAttributes]:
        """Returns None when Steam has no such app. Raises ExternalServiceError if the details call fails."""
        details, alt_details, tags = await asyncio.gather(
            self.steam.get_app_details(app_id, language=STEAM_LANGUAGES.get(lang, "english")),
            self._alt_details(app_id, ALT_LANGUAGES.get(lang, "japanese")),
            self._tags(app_id),
        )
        if details is None:
            return None

        logger.info(f"Loaded listing {app_id}: {len(tags)} tags")
        return build_listing_attributes(app_id, details, tags, alt_details)


def get_listing_loader() -> StoreListingLoader:
    return StoreListingLoader(get_steam_client())
