from unittest.mock import AsyncMock, MagicMock

import pytest

from compath.features.store_doctor.services.listing import (
    StoreListingLoader,
    build_listing_attributes,
    count_languages,
)
from compath.platform.errors import ExternalServiceError

DETAILS = {
    "name": "Hades",
    "movies": [{"id": 1}, {"id": 2}],
    "screenshots": [{"id": i} for i in range(12)],
    "header_image": "https://cdn/header.jpg",
    "short_description": "Defy the god of the dead.",
    "detailed_description": "<h2>About</h2><p>Battle out of hell.</p>",
    "supported_languages": "English<strong>*</strong>, French, Japanese<strong>*</strong><br><strong>*</strong>languages with full audio support",
    "genres": [{"description": "Action"}, {"description": "Indie"}],
    "categories": [{"description": "Single-player"}, {"description": "Steam Achievements"}],
    "developers": ["Supergiant Games"],
    "release_date": {"date": "17 Sep, 2020"},
    "is_free": False,
    "price_overview": {"final_formatted": "$24.99"},
}


@pytest.mark.parametrize(
    "html, expected",
    [
        (DETAILS["supported_languages"], 3),
        ("English, Japanese, Simplified Chinese, Korean, German", 5),
        ("English", 1),
        ("", 0),
        (None, 0),
    ],
)
def test_count_languages(html, expected):
    assert count_languages(html) == expected


def test_build_listing_attributes():
    attrs = build_listing_attributes("1145360", DETAILS, ["Roguelike", "Indie"], {"detailed_description": "<img src='a.gif'>"})

    assert attrs.app_id == "1145360"
    assert attrs.trailer_count == 2
    assert attrs.screenshot_count == 12
    assert attrs.has_header_image is True
    assert attrs.language_count == 3
    assert attrs.genre_count == 2
    assert attrs.category_count == 2
    assert attrs.genres == ["Action", "Indie"]
    assert attrs.price == "$24.99"
    assert attrs.detailed_description_html_alt == "<img src='a.gif'>"
    assert attrs.tag_count == 2
    assert attrs.specific_tag_ratio == 0.5


def test_build_listing_attributes_tolerates_sparse_details():
    attrs = build_listing_attributes("1", {"name": "Bare"}, [])
    assert attrs.trailer_count == 0
    assert attrs.language_count == 0
    assert attrs.has_header_image is False
    assert attrs.price is None


def fake_steam(details=DETAILS, tags=None):
    steam = MagicMock()
    steam.get_app_details = AsyncMock(return_value=details)
    steam.get_store_tags = AsyncMock(return_value=tags if tags is not None else ["Roguelike"])
    return steam


@pytest.mark.asyncio
async def test_loader_reads_both_languages():
    steam = fake_steam()

    attrs = await StoreListingLoader(steam).load("1145360", "ja")

    assert attrs.name == "Hades"
    languages = [call.kwargs["language"] for call in steam.get_app_details.await_args_list]
    assert sorted(languages) == ["english", "japanese"]


@pytest.mark.asyncio
async def test_loader_continues_without_tags():
    steam = fake_steam()
    steam.get_store_tags.side_effect = ExternalServiceError("steam", "blocked")

    attrs = await StoreListingLoader(steam).load("1145360")

    assert attrs.tags == []


@pytest.mark.asyncio
async def test_loader_returns_none_for_unknown_app():
    attrs = await StoreListingLoader(fake_steam(details=None)).load("1")
    assert attrs is None
