from compath.features.steam.schemas.steam import SteamReview
from compath.features.steam.services.review_stats import calculate_review_stats


def review(rec_id, voted_up, language, playtime):
    return SteamReview(
        recommendation_id=rec_id,
        review="x" * 60,
        voted_up=voted_up,
        language=language,
        playtime_forever=playtime,
    )


def test_empty_reviews_give_zeroed_stats():
    stats = calculate_review_stats([])
    assert stats.total == 0
    assert stats.positive_rate == 0
    assert stats.by_language == []


def test_totals_rates_and_language_breakdown():
    reviews = [
        review("1", True, "english", 10.0),
        review("2", False, "english", 2.0),
        review("3", True, "japanese", 6.0),
        review("4", True, "english", 2.0),
    ]

    stats = calculate_review_stats(reviews)

    assert stats.total == 4
    assert stats.positive == 3
    assert stats.negative == 1
    assert stats.positive_rate == 75
    assert stats.average_playtime == 5.0

    english, japanese = stats.by_language
    assert (english.language, english.total, english.positive, english.negative) == ("english", 3, 2, 1)
    assert english.positive_rate == 67
    assert (japanese.language, japanese.total, japanese.positive_rate) == ("japanese", 1, 100)
