"""
Six-axis market opportunity scoring.

Each axis turns one count or ratio from the comparable-listing sample into a
stepped 0-100 score. The total starts at a neutral 50 and every axis pulls it
up or down by its weight times its distance from 50.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from compath.features.blue_ocean.schemas.blue_ocean import (
    AxisScore,
    MarketSample,
    MarketScore,
    MarketStats,
    Position,
    Verdict,
)
from compath.platform.logger import get_logger
from compath.platform.utils.numbers import round_half_up

logger = get_logger("market_scorer")

AXIS_WEIGHTS = {
    "competition": 0.30,
    "hit_density": 0.30,
    "revenue": 0.15,
    "niche": 0.10,
    "synergy": 0.05,
    "demand": 0.10,
}

NEUTRAL_SCORE = 50

# Empirical cut-offs; tune here rather than in the step tables.
HIT_THRESHOLD = 1000
MEDIUM_THRESHOLD = 100
GOLDEN_ZONE_MAX_COMPETITION_RATIO = 1.0
GOLDEN_ZONE_MIN_HIT_DENSITY = 5.0

# (exclusive upper bound, score): lower measure is better
COMPETITION_STEPS = [(1, 90), (3, 75), (5, 60), (10, 40)]
NICHE_STEPS = [(100, 90), (500, 75), (2000, 55), (5000, 35)]
SYNERGY_STEPS = [(0.05, 90), (0.1, 75), (0.2, 60), (0.4, 45)]

# (inclusive lower bound, score): higher measure is better
HIT_DENSITY_STEPS = [(10, 90), (5, 75), (2, 60), (1, 45)]
REVENUE_STEPS = [(1000, 90), (500, 75), (200, 60), (100, 45)]
DEMAND_HIT_STEPS = [(10, 90), (5, 80), (2, 65), (1, 55)]
DEMAND_MEDIUM_STEPS = [(3, 45), (1, 35)]

VERDICTS = {
    "blue_best": {
        "color": "blue",
        "label": "Blue Ocean",
        "description": "Few competitors and a proven appetite for this combination. This is rare ground.",
        "recommendation": "Move quickly. Build a vertical slice and start collecting wishlists before others notice.",
        "position": (15, 85),
    },
    "blue_promising": {
        "color": "blue",
        "label": "Promising Blue Ocean",
        "description": "Competition is manageable and players are buying games like this.",
        "recommendation": "Worth pursuing. Sharpen what sets you apart and validate it with a demo or playtest.",
        "position": (30, 70),
    },
    "yellow": {
        "color": "yellow",
        "label": "Competitive Market",
        "description": "Demand exists but so do plenty of established games.",
        "recommendation": "You need a clear hook. Add a twist to the combination or aim at an underserved audience.",
        "position": (75, 30),
    },
    "red": {
        "color": "red",
        "label": "Red Ocean",
        "description": "Crowded and dominated by a few hits. New entries struggle to get noticed.",
        "recommendation": "Reconsider the tag combination, or commit to a marketing budget that can compete.",
        "position": (80, 75),
    },
    "purple": {
        "color": "purple",
        "label": "Unknown Demand",
        "description": "Few games and few hits. The space may be untapped or there may be no audience.",
        "recommendation": "Test demand cheaply first: a store page, a trailer and a wishlist target.",
        "position": (20, 25),
    },
}


def step_below(measure: float, steps: Sequence[Tuple[float, int]], default: int) -> int:
    for bound, score in steps:
        if measure < bound:
            return score
    return default


def step_at_least(measure: float, steps: Sequence[Tuple[float, int]], default: int) -> int:
    for bound, score in steps:
        if measure >= bound:
            return score
    return default


def combine(axes: Dict[str, AxisScore]) -> int:
    """Neutral 50 plus each axis' weighted deviation, clamped to 0-100."""
    total = NEUTRAL_SCORE + sum((axis.score - NEUTRAL_SCORE) * axis.weight for axis in axes.values())
    return max(0, min(100, round_half_up(total)))


class MarketScorer:
    """Pure scoring over a MarketSample. Thresholds can be overridden per instance."""

    def __init__(
        self,
        hit_threshold: int = HIT_THRESHOLD,
        medium_threshold: int = MEDIUM_THRESHOLD,
        golden_zone_max_competition_ratio: float = GOLDEN_ZONE_MAX_COMPETITION_RATIO,
        golden_zone_min_hit_density: float = GOLDEN_ZONE_MIN_HIT_DENSITY,
    ):
        self.hit_threshold = hit_threshold
        self.medium_threshold = medium_threshold
        self.golden_zone_max_competition_ratio = golden_zone_max_competition_ratio
        self.golden_zone_min_hit_density = golden_zone_min_hit_density

    def competition_ratio(self, total_count: int, proxies: List[int]) -> float:
        average = sum(proxies) / len(proxies) if proxies else 0
        if not average:
            average = total_count
        if not average:
            return 0.0
        return total_count / average

    def synergy_ratio(self, sample: MarketSample) -> Optional[float]:
        """combined / sum of single-filter counts, or None when there is nothing to compare."""
        filter_total = sum(sample.per_filter_counts.values())
        if not filter_total:
            return None
        return sample.combined_count / filter_total

    def verdict_for(self, total: int, competition_ratio: float, hit_density: float) -> Verdict:
        golden_zone = (
            competition_ratio < self.golden_zone_max_competition_ratio
            and hit_density >= self.golden_zone_min_hit_density
        )

        if total >= 85 or golden_zone:
            bucket = "blue_best"
        elif total >= 70:
            bucket = "blue_promising"
        elif total >= 55:
            bucket = "yellow"
        elif total >= 40:
            bucket = "red"
        else:
            bucket = "purple"

        template = VERDICTS[bucket]
        x, y = template["position"]
        return Verdict(
            bucket=bucket,
            color=template["color"],
            label=template["label"],
            description=template["description"],
            recommendation=template["recommendation"],
            position=Position(x=x, y=y),
            golden_zone=golden_zone,
        )

    def score(self, sample: MarketSample) -> MarketScore:
        proxies = [listing.popularity_proxy for listing in sample.listings]
        hit_count = sum(1 for proxy in proxies if proxy >= self.hit_threshold)
        medium_count = sum(1 for proxy in proxies if proxy >= self.medium_threshold)
        hit_density = hit_count / len(proxies) * 100 if proxies else 0.0
        avg_popularity = sum(proxies) / len(proxies) if proxies else 0.0

        competition = self.competition_ratio(sample.total_count, proxies)
        synergy = self.synergy_ratio(sample)

        if hit_count:
            demand = step_at_least(hit_count, DEMAND_HIT_STEPS, 20)
        else:
            demand = step_at_least(medium_count, DEMAND_MEDIUM_STEPS, 20)

        raw_axes = {
            "competition": (step_below(competition, COMPETITION_STEPS, 20), competition),
            "hit_density": (step_at_least(hit_density, HIT_DENSITY_STEPS, 25), hit_density),
            "revenue": (step_at_least(avg_popularity, REVENUE_STEPS, 25), avg_popularity),
            "niche": (step_below(sample.total_count, NICHE_STEPS, 20), sample.total_count),
            "synergy": (
                step_below(synergy, SYNERGY_STEPS, 30) if synergy is not None else NEUTRAL_SCORE,
                synergy or 0.0,
            ),
            "demand": (demand, hit_count if hit_count else medium_count),
        }
        axes = {
            name: AxisScore(score=score, weight=AXIS_WEIGHTS[name], measure=round(measure, 4))
            for name, (score, measure) in raw_axes.items()
        }

        total = combine(axes)
        verdict = self.verdict_for(total, competition, hit_density)
        logger.info(
            f"Market score for {sample.tags}: {total} ({verdict.bucket}), "
            f"competitors={sample.total_count}, hits={hit_count}"
        )

        return MarketScore(
            total=total,
            axes=axes,
            verdict=verdict,
            stats=MarketStats(
                competitor_count=sample.total_count,
                avg_reviews=round(avg_popularity, 1),
                hit_count=hit_count,
                hit_density=round(hit_density, 1),
            ),
        )
