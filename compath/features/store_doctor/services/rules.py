"""
Point tables for the store listing diagnosis.

Every category is an ordered tuple of RuleGroups. Inside a group the first
rule whose predicate holds awards its points and emits its finding, so a
group can never contribute more than its best rule. The facts passed to the
predicates are plain dicts built by the *_facts helpers below; they double as
the format values for the localized messages.
"""
import html
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from compath.features.store_doctor.schemas.store_doctor import Finding, ListingAttributes
from compath.features.store_doctor.services.catalog import broad_tags_in, is_specific_tag
from compath.features.store_doctor.services.messages import get_message

Facts = Dict[str, Any]

TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")
ANIMATED_MEDIA_PATTERN = re.compile(r"\.(gif|webm|mp4)\b", re.IGNORECASE)
HEADING_MARKERS = ("<h1", "<h2", "<b>", "<strong")


@dataclass(frozen=True)
class ScoringRule:
    predicate: Callable[[Facts], bool]
    points: int
    severity: Optional[str] = None  # "critical", "warning", "passed" or None for no finding
    message: Optional[str] = None
    suggestion: Optional[str] = None


@dataclass(frozen=True)
class RuleGroup:
    name: str
    budget: int
    rules: Tuple[ScoringRule, ...]


@dataclass
class RuleOutcome:
    score: int = 0
    issues: List[Finding] = field(default_factory=list)
    warnings: List[Finding] = field(default_factory=list)
    passed: List[Finding] = field(default_factory=list)
    breakdown: Dict[str, int] = field(default_factory=dict)


def always(facts: Facts) -> bool:
    return True


def evaluate_group(group: RuleGroup, facts: Facts) -> Optional[ScoringRule]:
    """Return the first rule of the group that matches, or None."""
    for rule in group.rules:
        if rule.predicate(facts):
            return rule
    return None


def evaluate_groups(groups: Tuple[RuleGroup, ...], facts: Facts, lang: str = "en") -> RuleOutcome:
    outcome = RuleOutcome()
    total = 0

    for group in groups:
        rule = evaluate_group(group, facts)
        if rule is None:
            outcome.breakdown[group.name] = 0
            continue

        points = max(0, min(rule.points, group.budget))
        outcome.breakdown[group.name] = points
        total += points

        if rule.severity is None or rule.message is None:
            continue

        message = get_message(lang, rule.message, **facts)
        suggestion = get_message(lang, rule.suggestion, **facts) if rule.suggestion else None
        if rule.severity == "critical":
            outcome.issues.append(Finding(severity="critical", message=message, suggestion=suggestion))
        elif rule.severity == "warning":
            outcome.warnings.append(Finding(severity="warning", message=message, suggestion=suggestion))
        else:
            outcome.passed.append(Finding(severity="passed", message=message, suggestion=suggestion))

    outcome.score = min(100, total)
    return outcome


# ---------------------------------------------------------------------------
# Facts
# ---------------------------------------------------------------------------

def strip_html(value: str) -> str:
    text = TAG_PATTERN.sub(" ", value or "")
    return WHITESPACE_PATTERN.sub(" ", html.unescape(text)).strip()


def analyze_description(description_html: str, alt_html: str = "") -> Facts:
    """Structural facts about the long description.

    Media is looked for in both language copies, since some developers only
    embed their GIFs in one of them.
    """
    description_html = description_html or ""
    media_source = f"{description_html} {alt_html or ''}"
    lowered = description_html.lower()

    plain_text = strip_html(description_html)
    paragraph_breaks = lowered.count("<br") + lowered.count("</p>")
    plain_length = len(plain_text)
    animation_count = len(ANIMATED_MEDIA_PATTERN.findall(media_source))

    return {
        "plain_text": plain_text,
        "plain_length": plain_length,
        "has_description": plain_length > 0,
        "has_images": "<img" in media_source.lower(),
        "has_animation": animation_count > 0,
        "animation_count": animation_count,
        "has_headings": any(marker in lowered for marker in HEADING_MARKERS),
        "paragraph_breaks": paragraph_breaks,
        "breaks_per_thousand": (paragraph_breaks / plain_length * 1000) if plain_length else 0.0,
    }


def tag_facts(attrs: ListingAttributes) -> Facts:
    top_broad = broad_tags_in(attrs.tags[:5])
    return {
        "tag_count": attrs.tag_count,
        "top_broad": top_broad,
        "broad_tags": ", ".join(top_broad),
        "has_specific": any(is_specific_tag(tag) for tag in attrs.tags),
        "specific_tag_ratio": round(attrs.specific_tag_ratio, 2),
    }


def visual_facts(attrs: ListingAttributes) -> Facts:
    return {
        "trailer_count": attrs.trailer_count,
        "screenshot_count": attrs.screenshot_count,
        "has_header_image": attrs.has_header_image,
    }


def text_facts(attrs: ListingAttributes) -> Facts:
    facts = analyze_description(attrs.detailed_description_html, attrs.detailed_description_html_alt)
    short_description = strip_html(attrs.short_description)
    facts["short_desc_length"] = len(short_description)
    facts["short_description"] = short_description
    return facts


def basic_facts(attrs: ListingAttributes) -> Facts:
    return {
        "language_count": attrs.language_count,
        "genre_count": attrs.genre_count,
        "genre_names": ", ".join(attrs.genres),
        "category_count": attrs.category_count,
        "is_free": attrs.is_free,
        "price": attrs.price or "",
    }


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

TAG_RULES = (
    RuleGroup("tag_count", 40, (
        ScoringRule(lambda f: f["tag_count"] >= 20, 40, "passed", "tag_ok"),
        ScoringRule(lambda f: f["tag_count"] >= 15, 30, "warning", "tag_low", "tag_low_tip"),
        ScoringRule(lambda f: f["tag_count"] >= 10, 20, "warning", "tag_few", "tag_few_tip"),
        ScoringRule(lambda f: f["tag_count"] >= 1, 10, "critical", "tag_few", "tag_few_tip"),
        ScoringRule(always, 0, "critical", "tag_none", "tag_none_tip"),
    )),
    RuleGroup("top_tags", 30, (
        ScoringRule(lambda f: f["tag_count"] == 0, 0),
        ScoringRule(lambda f: not f["top_broad"], 30, "passed", "tag_top_ok"),
        ScoringRule(lambda f: len(f["top_broad"]) == 1, 20, "warning", "tag_broad", "tag_broad_tip"),
        ScoringRule(lambda f: len(f["top_broad"]) == 2, 10, "warning", "tag_broad", "tag_broad_tip"),
        ScoringRule(always, 0, "warning", "tag_broad", "tag_broad_tip"),
    )),
    RuleGroup("specific_tags", 30, (
        ScoringRule(lambda f: f["tag_count"] == 0, 0),
        ScoringRule(lambda f: f["has_specific"], 30, "passed", "tag_specific_ok"),
        ScoringRule(always, 0, "warning", "tag_no_specific", "tag_no_specific_tip"),
    )),
)

VISUAL_RULES = (
    RuleGroup("trailers", 40, (
        ScoringRule(lambda f: f["trailer_count"] >= 2, 40, "passed", "trailer_ok"),
        ScoringRule(lambda f: f["trailer_count"] == 1, 20, "warning", "trailer_one", "trailer_one_tip"),
        ScoringRule(always, 0, "critical", "trailer_none", "trailer_none_tip"),
    )),
    RuleGroup("screenshots", 40, (
        ScoringRule(lambda f: f["screenshot_count"] >= 15, 40, "passed", "screenshot_rich"),
        ScoringRule(lambda f: f["screenshot_count"] >= 10, 40, "passed", "screenshot_ok"),
        ScoringRule(lambda f: f["screenshot_count"] >= 5, 25, "warning", "screenshot_low", "screenshot_low_tip"),
        ScoringRule(lambda f: f["screenshot_count"] >= 1, 10, "warning", "screenshot_few", "screenshot_few_tip"),
        ScoringRule(always, 0, "critical", "screenshot_none", "screenshot_none_tip"),
    )),
    RuleGroup("header_image", 20, (
        ScoringRule(lambda f: f["has_header_image"], 20, "passed", "header_ok"),
        ScoringRule(always, 0, "critical", "header_none", "header_none_tip"),
    )),
)


def _well_broken(facts: Facts) -> bool:
    if facts["breaks_per_thousand"] >= 5:
        return True
    return facts["paragraph_breaks"] >= 1 and facts["plain_length"] <= 500


TEXT_STRUCTURE_RULES = (
    RuleGroup("media", 40, (
        ScoringRule(lambda f: f["has_images"] and f["has_animation"], 40, "passed", "media_animated"),
        ScoringRule(lambda f: f["has_images"], 30, "passed", "media_images", "media_images_tip"),
        ScoringRule(always, 0, "warning", "media_none", "media_none_tip"),
    )),
    RuleGroup("headings", 30, (
        ScoringRule(lambda f: f["has_headings"], 30, "passed", "headings_ok"),
        ScoringRule(always, 0, "warning", "headings_none", "headings_none_tip"),
    )),
    RuleGroup("paragraph_breaks", 30, (
        ScoringRule(_well_broken, 30, "passed", "breaks_ok"),
        ScoringRule(lambda f: f["paragraph_breaks"] > 0, 15, "warning", "breaks_sparse", "breaks_sparse_tip"),
        ScoringRule(always, 0, "warning", "breaks_none", "breaks_none_tip"),
    )),
)

# Findings only; text length feeds the content evaluation, not the structural score.
TEXT_LENGTH_RULES = (
    RuleGroup("short_description", 0, (
        ScoringRule(lambda f: f["short_desc_length"] == 0, 0, "critical", "short_desc_none", "short_desc_none_tip"),
        ScoringRule(lambda f: f["short_desc_length"] < 100, 0, "warning", "short_desc_short", "short_desc_short_tip"),
        ScoringRule(lambda f: f["short_desc_length"] > 300, 0, "warning", "short_desc_long", "short_desc_long_tip"),
        ScoringRule(always, 0, "passed", "short_desc_ok"),
    )),
    RuleGroup("detailed_description", 0, (
        ScoringRule(lambda f: f["plain_length"] == 0, 0, "critical", "detailed_desc_none", "detailed_desc_none_tip"),
        ScoringRule(lambda f: f["plain_length"] < 500, 0, "warning", "detailed_desc_short", "detailed_desc_short_tip"),
        ScoringRule(always, 0, "passed", "detailed_desc_ok"),
    )),
)

BASIC_RULES = (
    RuleGroup("languages", 40, (
        ScoringRule(lambda f: f["language_count"] >= 5, 40, "passed", "languages_ok"),
        ScoringRule(lambda f: f["language_count"] >= 3, 30, "passed", "languages_ok"),
        ScoringRule(lambda f: f["language_count"] == 2, 15, "warning", "languages_limited", "languages_limited_tip"),
        ScoringRule(lambda f: f["language_count"] == 1, 5, "warning", "languages_limited", "languages_limited_tip"),
        ScoringRule(always, 0, "warning", "languages_none", "languages_none_tip"),
    )),
    RuleGroup("genres", 30, (
        ScoringRule(lambda f: f["genre_count"] > 0, 30, "passed", "genres_ok"),
        ScoringRule(always, 0, "warning", "genres_none", "genres_none_tip"),
    )),
    RuleGroup("categories", 30, (
        ScoringRule(lambda f: f["category_count"] >= 5, 30, "passed", "categories_ok"),
        ScoringRule(lambda f: f["category_count"] >= 3, 20, "passed", "categories_ok"),
        ScoringRule(lambda f: f["category_count"] >= 1, 10, "warning", "categories_few", "categories_few_tip"),
        ScoringRule(always, 0, "warning", "categories_few", "categories_few_tip"),
    )),
    RuleGroup("price", 0, (
        ScoringRule(lambda f: f["is_free"], 0, "passed", "price_free"),
        ScoringRule(lambda f: bool(f["price"]), 0, "passed", "price_set"),
    )),
)
