import asyncio
from typing import Dict, List, Optional

from compath.features.blue_ocean.schemas.blue_ocean import ComparableListing, MarketSample
from compath.features.steam.services.steam_client import SteamStoreClient, get_steam_client
from compath.platform.config import settings
from compath.platform.errors import ExternalServiceError
from compath.platform.logger import get_logger

logger = get_logger("competitor_source")

MAX_FILTER_TAGS = 3


class SteamComparableSource:
    """
    Builds a MarketSample from Steam store search.

    One search per tag (first MAX_FILTER_TAGS tags) gives the single-filter
    counts, one search with every tag gives the combined count, and the
    union of ids is the competitor count. The first `sample_size` listings
    are looked up in detail for their review totals.
    """

    def __init__(self, steam: SteamStoreClient, sample_size: int = settings.MARKET_SAMPLE_SIZE):
        self.steam = steam
        self.sample_size = sample_size

    async def _popularity(self, item: Dict) -> Optional[ComparableListing]:
        app_id = str(item.get("id"))
        try:
            details = await self.steam.get_app_details(app_id)
        except ExternalServiceError as e:
            logger.warning(f"Skipping comparable {app_id}: {e}")
            return None
        if details is None:
            return None
        return ComparableListing(
            id=app_id,
            name=details.get("name") or item.get("name", ""),
            popularity_proxy=(details.get("recommendations") or {}).get("total", 0),
            genres=[g.get("description", "") for g in details.get("genres") or []],
        )

    async def collect(self, tags: List[str]) -> MarketSample:
        """Raises ExternalServiceError if the combined search fails."""
        filter_tags = tags[:MAX_FILTER_TAGS]
        combined_items = await self.steam.search(" ".join(tags))

        per_filter_counts: Dict[str, int] = {}
        seen: Dict[str, Dict] = {str(item.get("id")): item for item in combined_items}
        for tag in filter_tags:
            try:
                items = await self.steam.search(tag)
            except ExternalServiceError as e:
                logger.warning(f"Search for tag '{tag}' failed: {e}")
                continue
            per_filter_counts[tag] = len(items)
            for item in items:
                seen.setdefault(str(item.get("id")), item)

        sample_items = (combined_items or list(seen.values()))[:self.sample_size]
        details = await asyncio.gather(*(self._popularity(item) for item in sample_items))
        listings = [listing for listing in details if listing is not None]

        logger.info(f"Collected market sample for {tags}: {len(seen)} competitors, {len(listings)} detailed")
        return MarketSample(
            tags=tags,
            total_count=len(seen),
            combined_count=len(combined_items),
            per_filter_counts=per_filter_counts,
            listings=listings,
        )


def get_comparable_source() -> SteamComparableSource:
    return SteamComparableSource(get_steam_client())
