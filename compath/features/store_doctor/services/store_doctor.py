from typing import Dict, List, Optional

from compath.features.store_doctor.schemas.store_doctor import (
    CategoryScore,
    Diagnosis,
    Finding,
    GameSummary,
    Grade,
    ListingAttributes,
)
from compath.features.store_doctor.services.catalog import SPECIFIC_TAGS
from compath.features.store_doctor.services.messages import get_message
from compath.features.store_doctor.services.rules import (
    BASIC_RULES,
    TAG_RULES,
    TEXT_LENGTH_RULES,
    TEXT_STRUCTURE_RULES,
    VISUAL_RULES,
    RuleOutcome,
    basic_facts,
    evaluate_groups,
    tag_facts,
    text_facts,
    visual_facts,
)
from compath.features.store_doctor.services.text_evaluator import TextEvaluator
from compath.platform.logger import get_logger
from compath.platform.utils.numbers import round_half_up

logger = get_logger("store_doctor")

CATEGORY_WEIGHTS = {
    "tags": 0.30,
    "visuals": 0.25,
    "text": 0.40,
    "basic": 0.05,
}

# (minimum score, letter, color), checked top down
GRADE_THRESHOLDS = [
    (90, "S", "#00d4aa"),
    (80, "A", "#4CAF50"),
    (70, "B", "#8BC34A"),
    (60, "C", "#FFC107"),
    (50, "D", "#FF9800"),
    (0, "F", "#f44336"),
]

STRUCTURE_SHARE = 0.3
CONTENT_SHARE = 0.7

EMPTY_TEXT_SCORE = 0
SHORT_TEXT_SCORE = 30
EVALUATOR_FALLBACK_SCORE = 50
MIN_EVALUATED_LENGTH = 100
SUGGESTED_TAG_LIMIT = 10


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def get_grade(score: int, lang: str = "en") -> Grade:
    for minimum, letter, color in GRADE_THRESHOLDS:
        if score >= minimum:
            return Grade(letter=letter, label=get_message(lang, f"grade_{letter}"), color=color)
    letter, color = GRADE_THRESHOLDS[-1][1], GRADE_THRESHOLDS[-1][2]
    return Grade(letter=letter, label=get_message(lang, f"grade_{letter}"), color=color)


def suggest_tags(existing: List[str]) -> List[str]:
    present = {tag.lower() for tag in existing}
    return [tag for tag in SPECIFIC_TAGS if tag.lower() not in present][:SUGGESTED_TAG_LIMIT]


def to_category(name: str, outcome: RuleOutcome, details: Optional[Dict] = None) -> CategoryScore:
    weight = CATEGORY_WEIGHTS[name]
    score = max(0, min(100, outcome.score))
    return CategoryScore(
        score=score,
        weight=weight,
        weighted_score=round(score * weight, 2),
        issues=outcome.issues,
        warnings=outcome.warnings,
        passed=outcome.passed,
        details=details if details is not None else dict(outcome.breakdown),
    )


class StoreDoctor:
    """
    Scores a store listing across tags, visuals, text and basic info.

    The only I/O is the optional text evaluator. When it is missing or fails,
    the text category falls back to a fixed content score and the diagnosis
    still completes.
    """

    def __init__(self, evaluator: Optional[TextEvaluator] = None):
        self.evaluator = evaluator

    def score_tags(self, attrs: ListingAttributes, lang: str = "en") -> CategoryScore:
        facts = tag_facts(attrs)
        outcome = evaluate_groups(TAG_RULES, facts, lang)
        details = {
            **outcome.breakdown,
            "tag_count": facts["tag_count"],
            "top_tags": attrs.tags[:5],
            "broad_in_top": facts["top_broad"],
            "specific_tag_ratio": facts["specific_tag_ratio"],
        }
        return to_category("tags", outcome, details)

    def score_visuals(self, attrs: ListingAttributes, lang: str = "en") -> CategoryScore:
        facts = visual_facts(attrs)
        outcome = evaluate_groups(VISUAL_RULES, facts, lang)
        return to_category("visuals", outcome, {**outcome.breakdown, **facts})

    def score_basic(self, attrs: ListingAttributes, lang: str = "en") -> CategoryScore:
        facts = basic_facts(attrs)
        outcome = evaluate_groups(BASIC_RULES, facts, lang)
        details = {
            **outcome.breakdown,
            "language_count": facts["language_count"],
            "genre_count": facts["genre_count"],
            "category_count": facts["category_count"],
        }
        return to_category("basic", outcome, details)

    async def score_content(self, attrs: ListingAttributes, plain_text: str, lang: str, outcome: RuleOutcome) -> Dict:
        """Content-quality sub-score. Appends AI findings to `outcome` when the evaluator answers."""
        if not plain_text:
            return {"score": EMPTY_TEXT_SCORE, "source": "empty"}
        if len(plain_text) < MIN_EVALUATED_LENGTH:
            return {"score": SHORT_TEXT_SCORE, "source": "too_short"}
        if self.evaluator is None:
            return {"score": EVALUATOR_FALLBACK_SCORE, "source": "unavailable"}

        try:
            evaluation = await self.evaluator.evaluate(plain_text, attrs.short_description, attrs.name, lang)
        except Exception as e:
            logger.warning(f"Text evaluation failed for {attrs.app_id}, using fallback score: {e}")
            return {"score": EVALUATOR_FALLBACK_SCORE, "source": "failed"}

        tip = get_message(lang, "ai_improvement_tip")
        outcome.passed.extend(Finding(severity="passed", message=point) for point in evaluation.good_points)
        outcome.warnings.extend(
            Finding(severity="warning", message=improvement, suggestion=tip)
            for improvement in evaluation.improvements
        )
        return {
            "score": clamp_score(evaluation.overall_score),
            "source": "ai",
            "summary": evaluation.summary,
            "scores": evaluation.scores.model_dump(),
        }

    async def score_text(self, attrs: ListingAttributes, lang: str = "en") -> CategoryScore:
        facts = text_facts(attrs)
        structure = evaluate_groups(TEXT_STRUCTURE_RULES, facts, lang)
        lengths = evaluate_groups(TEXT_LENGTH_RULES, facts, lang)

        outcome = RuleOutcome(
            issues=lengths.issues + structure.issues,
            warnings=lengths.warnings + structure.warnings,
            passed=lengths.passed + structure.passed,
            breakdown=dict(structure.breakdown),
        )
        content = await self.score_content(attrs, facts["plain_text"], lang, outcome)
        outcome.score = clamp_score(STRUCTURE_SHARE * structure.score + CONTENT_SHARE * content["score"])

        details = {
            "structural_score": structure.score,
            "content_score": content["score"],
            "content_source": content["source"],
            "ai_summary": content.get("summary"),
            "ai_scores": content.get("scores"),
            "structure": structure.breakdown,
            "short_desc_length": facts["short_desc_length"],
            "detailed_desc_length": facts["plain_length"],
            "has_images": facts["has_images"],
            "has_animation": facts["has_animation"],
            "has_headings": facts["has_headings"],
            "paragraph_breaks": facts["paragraph_breaks"],
        }
        return to_category("text", outcome, details)

    async def diagnose(self, attrs: ListingAttributes, lang: str = "en") -> Diagnosis:
        categories = {
            "tags": self.score_tags(attrs, lang),
            "visuals": self.score_visuals(attrs, lang),
            "text": await self.score_text(attrs, lang),
            "basic": self.score_basic(attrs, lang),
        }
        total = clamp_score(sum(category.score * category.weight for category in categories.values()))
        grade = get_grade(total, lang)
        logger.info(f"Diagnosed {attrs.app_id} ({attrs.name}): {total} / {grade.letter}")

        return Diagnosis(
            app_id=attrs.app_id,
            name=attrs.name,
            total_score=total,
            grade=grade,
            categories=categories,
            suggested_tags=suggest_tags(attrs.tags),
            game_info=GameSummary(
                app_id=attrs.app_id,
                name=attrs.name,
                header_image=attrs.header_image,
                developers=attrs.developers,
                release_date=attrs.release_date,
            ),
        )
