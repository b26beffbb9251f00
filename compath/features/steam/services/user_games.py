import asyncio
from typing import Dict, List

from compath.features.steam.schemas.steam import SharedGame, UserGamesOut
from compath.features.steam.services.steam_client import SteamStoreClient
from compath.platform.logger import get_logger
from compath.platform.utils.numbers import round_half_up

logger = get_logger("user_games")

LIBRARY_BATCH_SIZE = 5
MIN_PLAYTIME_MINUTES = 60
TOP_GAMES = 30


async def aggregate_user_games(
    steam: SteamStoreClient,
    steam_ids: List[str],
    exclude_app_id: str,
    batch_delay: float = 0.3,
) -> UserGamesOut:
    """
    Count which other games a set of reviewers play.

    Libraries are fetched LIBRARY_BATCH_SIZE at a time with `batch_delay`
    seconds between batches. Private profiles count towards `total_users`
    only. Games under an hour of playtime and the reviewed game itself are
    ignored. Percentages are relative to the public profiles.
    """
    counts: Dict[str, int] = {}
    first_seen: Dict[str, SharedGame] = {}
    processed = public = 0
    exclude = str(exclude_app_id)

    for start in range(0, len(steam_ids), LIBRARY_BATCH_SIZE):
        batch = steam_ids[start:start + LIBRARY_BATCH_SIZE]
        libraries = await asyncio.gather(*(steam.get_owned_games(steam_id) for steam_id in batch))

        for games in libraries:
            processed += 1
            if games is None:
                continue
            public += 1
            for game in games:
                if game.app_id == exclude or game.playtime < MIN_PLAYTIME_MINUTES:
                    continue
                counts[game.app_id] = counts.get(game.app_id, 0) + 1
                first_seen.setdefault(
                    game.app_id,
                    SharedGame(app_id=game.app_id, name=game.name, icon_url=game.icon_url, count=0, percentage=0),
                )

        if batch_delay and start + LIBRARY_BATCH_SIZE < len(steam_ids):
            await asyncio.sleep(batch_delay)

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[:TOP_GAMES]
    games = [
        first_seen[app_id].model_copy(update={
            "count": count,
            "percentage": round_half_up(count / public * 100),
        })
        for app_id, count in ranked
    ]

    logger.info(f"Aggregated libraries for app {exclude}: {public}/{processed} public, {len(counts)} distinct games")
    return UserGamesOut(
        games=games,
        total_users=processed,
        public_users=public,
        public_rate=round_half_up(public / processed * 100) if processed else 0,
    )
