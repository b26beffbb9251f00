import httpx
import pytest

from compath.features.steam.services.steam_client import (
    MIN_REVIEW_LENGTH,
    SteamStoreClient,
    MAX_DISCUSSION_THREADS,
    extract_app_id,
    extract_discussion_threads,
    extract_tags_from_html,
    to_game_info,
)
from compath.platform.errors import ExternalServiceError

LONG_TEXT = "This game has a great combat loop and the art direction is lovely. " * 2


def raw_review(rec_id, voted_up=True, text=LONG_TEXT, playtime_minutes=600, language="english"):
    return {
        "recommendationid": rec_id,
        "author": {"steamid": f"7656{rec_id}", "playtime_forever": playtime_minutes, "playtime_at_review": 60},
        "language": language,
        "review": text,
        "voted_up": voted_up,
        "votes_up": 3,
        "weighted_vote_score": "0.55",
        "timestamp_created": 1700000000,
    }


def make_client(handler) -> SteamStoreClient:
    return SteamStoreClient(
        base_url="https://store.test",
        transport=httpx.MockTransport(handler),
        page_delay=0,
    )


class TestExtractAppId:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://store.steampowered.com/app/620/Portal_2/", "620"),
            ("store.steampowered.com/app/1145360", "1145360"),
            ("https://steampowered.com/app/42?l=japanese", "42"),
            ("/app/99/", "99"),
            ("  413150 ", "413150"),
        ],
    )
    def test_recognized_forms(self, url, expected):
        assert extract_app_id(url) == expected

    @pytest.mark.parametrize("url", [None, "", "https://example.com/game", "portal"])
    def test_unrecognized(self, url):
        assert extract_app_id(url) is None


def test_extract_tags_keeps_store_order_and_skips_plus():
    page = (
        '<a href="#" class="app_tag" style="">\n\t\tRoguelike\t\t\t\t</a>'
        '<a class="app_tag">Dungeons &amp; Dragons</a>'
        '<div class="app_tag add_button">+</div>'
    )
    assert extract_tags_from_html(page) == ["Roguelike", "Dungeons & Dragons"]


def test_to_game_info_converts_price_to_units():
    info = to_game_info("620", {
        "name": "Portal 2",
        "genres": [{"description": "Puzzle"}],
        "release_date": {"date": "18 Apr, 2011"},
        "price_overview": {"currency": "USD", "initial": 999, "final": 199, "discount_percent": 80},
    })
    assert info.name == "Portal 2"
    assert info.genres == ["Puzzle"]
    assert info.release_date == "18 Apr, 2011"
    assert info.price_overview.final == 1.99
    assert info.price_overview.discount_percent == 80


@pytest.mark.asyncio
async def test_get_app_details_unsuccessful_is_none():
    def handler(request):
        return httpx.Response(200, json={"620": {"success": False}})

    assert await make_client(handler).get_app_details("620") is None


@pytest.mark.asyncio
async def test_get_app_details_passes_language():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json={"620": {"success": True, "data": {"name": "Portal 2"}}})

    details = await make_client(handler).get_app_details("620", language="japanese")
    assert details == {"name": "Portal 2"}
    assert seen["l"] == "japanese"
    assert seen["appids"] == "620"


@pytest.mark.asyncio
async def test_http_errors_become_external_service_errors():
    def handler(request):
        return httpx.Response(500)

    with pytest.raises(ExternalServiceError):
        await make_client(handler).get_store_tags("620")


@pytest.mark.asyncio
async def test_search_returns_items():
    def handler(request):
        assert request.url.path == "/api/storesearch"
        assert request.url.params["term"] == "Roguelike"
        return httpx.Response(200, json={"total": 2, "items": [{"id": 1}, {"id": 2}]})

    assert await make_client(handler).search("Roguelike") == [{"id": 1}, {"id": 2}]


class TestFetchReviews:
    @pytest.mark.asyncio
    async def test_paginates_with_cursor_and_drops_short_reviews(self):
        pages = {
            "*": {"success": 1, "cursor": "c2", "reviews": [raw_review("1"), raw_review("2", text="too short")]},
            "c2": {"success": 1, "cursor": "c3", "reviews": [raw_review("3", voted_up=False)]},
            "c3": {"success": 1, "cursor": "c3", "reviews": []},
        }
        cursors = []

        def handler(request):
            cursor = request.url.params["cursor"]
            cursors.append(cursor)
            return httpx.Response(200, json=pages[cursor])

        reviews = await make_client(handler).fetch_reviews("620", count=10)

        assert [r.recommendation_id for r in reviews] == ["1", "3"]
        assert all(len(r.review) >= MIN_REVIEW_LENGTH for r in reviews)
        assert cursors == ["*", "c2", "c3"]
        assert reviews[0].playtime_forever == 10.0
        assert reviews[0].app_id == "620"

    @pytest.mark.asyncio
    async def test_stops_at_requested_count(self):
        def handler(request):
            batch = [raw_review(str(i)) for i in range(5)]
            return httpx.Response(200, json={"success": 1, "cursor": "next", "reviews": batch})

        reviews = await make_client(handler).fetch_reviews("620", count=3)
        assert len(reviews) == 3

    @pytest.mark.asyncio
    async def test_playtime_and_date_filters(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            batch = [raw_review("1", playtime_minutes=120), raw_review("2", playtime_minutes=900)]
            return httpx.Response(200, json={"success": 1, "cursor": "*", "reviews": batch})

        reviews = await make_client(handler).fetch_reviews(
            "620", playtime_filter="10hours", date_filter="30days", language="japanese"
        )

        assert [r.recommendation_id for r in reviews] == ["2"]
        assert seen["day_range"] == "30"
        assert seen["language"] == "japanese"

    @pytest.mark.asyncio
    async def test_first_page_failure_raises(self):
        def handler(request):
            return httpx.Response(503)

        with pytest.raises(ExternalServiceError):
            await make_client(handler).fetch_reviews("620")

    @pytest.mark.asyncio
    async def test_later_page_failure_keeps_collected_reviews(self):
        def handler(request):
            if request.url.params["cursor"] == "*":
                return httpx.Response(200, json={"success": 1, "cursor": "c2", "reviews": [raw_review("1")]})
            return httpx.Response(502)

        reviews = await make_client(handler).fetch_reviews("620")
        assert [r.recommendation_id for r in reviews] == ["1"]


def forum_topic(title, replies="3"):
    return (
        f'<div class="forum_topic"><div class="forum_topic_name">\n\t{title}\n</div>'
        f'<div class="forum_topic_reply_count">{replies}</div></div>'
    )


class TestDiscussionThreads:
    def test_extracts_titles_and_reply_counts(self):
        page = forum_topic("Game crashes on launch", "12") + forum_topic("") + forum_topic("Co-op &amp; friends", "")

        threads = extract_discussion_threads(page)

        assert [(t.title, t.replies) for t in threads] == [("Game crashes on launch", "12"), ("Co-op & friends", "")]

    def test_reads_at_most_the_first_page_of_topics(self):
        page = "".join(forum_topic(f"Thread {i}") for i in range(MAX_DISCUSSION_THREADS + 10))
        threads = extract_discussion_threads(page)
        assert len(threads) == MAX_DISCUSSION_THREADS
        assert threads[-1].title == f"Thread {MAX_DISCUSSION_THREADS - 1}"

    @pytest.mark.asyncio
    async def test_fetches_the_community_board(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["user_agent"] = request.headers["User-Agent"]
            return httpx.Response(200, text=forum_topic("Save bug"))

        steam = SteamStoreClient(
            community_url="https://community.test/",
            transport=httpx.MockTransport(handler),
        )
        threads = await steam.get_discussion_threads("620")

        assert seen["url"] == "https://community.test/app/620/discussions/"
        assert seen["user_agent"].startswith("Mozilla/5.0")
        assert [t.title for t in threads] == ["Save bug"]


class TestOwnedGames:
    def make_client(self, handler, api_key="secret"):
        return SteamStoreClient(
            web_api_url="https://api.test",
            api_key=api_key,
            transport=httpx.MockTransport(handler),
        )

    @pytest.mark.asyncio
    async def test_maps_library_entries(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen.update(request.url.params)
            return httpx.Response(200, json={"response": {"game_count": 2, "games": [
                {"appid": 400, "name": "Portal", "playtime_forever": 300, "img_icon_url": "abc"},
                {"appid": 70, "name": "Half-Life", "playtime_forever": 0, "img_icon_url": ""},
            ]}})

        games = await self.make_client(handler).get_owned_games("76561198000000001")

        assert seen["path"] == "/IPlayerService/GetOwnedGames/v1/"
        assert seen["key"] == "secret"
        assert seen["steamid"] == "76561198000000001"
        assert seen["include_appinfo"] == "1"
        assert [(g.app_id, g.name, g.playtime) for g in games] == [("400", "Portal", 300), ("70", "Half-Life", 0)]
        assert games[0].icon_url == "https://media.steampowered.com/steamcommunity/public/images/apps/400/abc.jpg"
        assert games[1].icon_url is None

    @pytest.mark.asyncio
    async def test_private_profile_is_none(self):
        def handler(request):
            return httpx.Response(200, json={"response": {}})

        assert await self.make_client(handler).get_owned_games("1") is None

    @pytest.mark.asyncio
    async def test_failed_lookup_is_none(self):
        def handler(request):
            return httpx.Response(401)

        assert await self.make_client(handler).get_owned_games("1") is None

    @pytest.mark.asyncio
    async def test_requires_web_api_key(self):
        def handler(request):
            raise AssertionError("no request expected without a key")

        with pytest.raises(ExternalServiceError):
            await self.make_client(handler, api_key=None).get_owned_games("1")
