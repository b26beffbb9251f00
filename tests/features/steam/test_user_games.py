from unittest.mock import AsyncMock, MagicMock

import pytest

from compath.features.steam.schemas.steam import OwnedGame
from compath.features.steam.services.user_games import LIBRARY_BATCH_SIZE, TOP_GAMES, aggregate_user_games


def game(app_id, playtime=600, name=None):
    return OwnedGame(app_id=app_id, name=name or f"Game {app_id}", playtime=playtime)


def fake_steam(libraries):
    steam = MagicMock()
    steam.get_owned_games = AsyncMock(side_effect=lambda steam_id: libraries.get(steam_id))
    return steam


@pytest.mark.asyncio
async def test_counts_shared_games_across_public_libraries():
    libraries = {
        "a": [game("620"), game("400"), game("70")],
        "b": [game("400"), game("70", playtime=59)],
        "c": [game("400"), game("220")],
        "d": None,
    }

    result = await aggregate_user_games(fake_steam(libraries), ["a", "b", "c", "d"], "620", batch_delay=0)

    assert [(g.app_id, g.count, g.percentage) for g in result.games] == [
        ("400", 3, 100),
        ("70", 1, 33),
        ("220", 1, 33),
    ]
    assert result.games[0].name == "Game 400"
    assert (result.total_users, result.public_users, result.public_rate) == (4, 3, 75)


@pytest.mark.asyncio
async def test_percentages_round_half_up():
    libraries = {str(i): [game("400")] if i < 5 else [] for i in range(8)}

    result = await aggregate_user_games(fake_steam(libraries), list(libraries), "620", batch_delay=0)

    # 5 of 8 public libraries
    assert result.games[0].percentage == 63
    assert result.public_rate == 100


@pytest.mark.asyncio
async def test_keeps_only_the_most_shared_games():
    libraries = {"a": [game(str(i)) for i in range(TOP_GAMES + 5)], "b": [game("7")]}

    result = await aggregate_user_games(fake_steam(libraries), ["a", "b"], "620", batch_delay=0)

    assert len(result.games) == TOP_GAMES
    assert result.games[0].app_id == "7"
    assert result.games[0].count == 2


@pytest.mark.asyncio
async def test_every_reviewer_is_looked_up_once():
    steam_ids = [f"id{i}" for i in range(LIBRARY_BATCH_SIZE * 2 + 1)]
    steam = fake_steam({})

    result = await aggregate_user_games(steam, steam_ids, "620", batch_delay=0)

    assert steam.get_owned_games.await_count == len(steam_ids)
    assert [call.args[0] for call in steam.get_owned_games.await_args_list] == steam_ids
    assert result.games == []
    assert (result.total_users, result.public_users, result.public_rate) == (len(steam_ids), 0, 0)


@pytest.mark.asyncio
async def test_no_reviewers():
    result = await aggregate_user_games(fake_steam({}), [], "620", batch_delay=0)
    assert (result.total_users, result.public_rate) == (0, 0)
