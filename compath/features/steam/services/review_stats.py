from typing import Dict, List

from compath.features.steam.schemas.steam import LanguageStat, ReviewStats, SteamReview


def calculate_review_stats(reviews: List[SteamReview]) -> ReviewStats:
    """Totals, positive rate, mean playtime and a per-language breakdown (largest first)."""
    if not reviews:
        return ReviewStats()

    positive = sum(1 for r in reviews if r.voted_up)
    total_playtime = sum(r.playtime_forever or 0 for r in reviews)

    per_language: Dict[str, Dict[str, int]] = {}
    for review in reviews:
        bucket = per_language.setdefault(review.language or "unknown", {"total": 0, "positive": 0})
        bucket["total"] += 1
        if review.voted_up:
            bucket["positive"] += 1

    by_language = [
        LanguageStat(
            language=language,
            total=counts["total"],
            positive=counts["positive"],
            negative=counts["total"] - counts["positive"],
            positive_rate=round(counts["positive"] / counts["total"] * 100),
        )
        for language, counts in per_language.items()
    ]
    by_language.sort(key=lambda stat: stat.total, reverse=True)

    return ReviewStats(
        total=len(reviews),
        positive=positive,
        negative=len(reviews) - positive,
        positive_rate=round(positive / len(reviews) * 100),
        average_playtime=round(total_playtime / len(reviews), 1),
        by_language=by_language,
    )
