from typing import Any, Dict, List, Optional

from fastapi import Depends, HTTPException, status
from openai import OpenAIError
from pydantic import ValidationError

from compath.features.analyze.schemas.analyze import (
    CommunityAnalysis,
    ConstructiveFeedback,
    DeepKeywordSet,
    Keyword,
    KeywordSet,
    ReviewSummary,
    ReviewText,
    Topic,
)
from compath.features.steam.schemas.steam import DiscussionThread
from compath.platform.errors import ExternalServiceError
from compath.platform.llm import LLMClient, get_llm_client
from compath.platform.logger import get_logger

logger = get_logger("review_analyzer")

SUMMARY_SAMPLE_SIZE = 20
KEYWORD_TEXT_LIMIT = 5000
DEEP_TEXT_LIMIT = 8000
MIN_TOPIC_SCORE = 30
MAX_COMMUNITY_TOPICS = 10
TRANSFORM_TEXT_LIMIT = 4000

SYSTEM_PROMPT = (
    "You analyze Steam game reviews for the game's developers. Be accurate and objective. "
    "Reviews may be in any language; always answer in English. Reply with JSON only."
)

MENTAL_GUARD_SUMMARY = """
MENTAL GUARD MODE IS ON. You are a calm, capable assistant shielding a developer from abuse:
- Drop insults, personal attacks and profanity entirely.
- Rewrite harsh negativity as neutral improvement requests.
- Keep technical information such as bugs, lag and UI problems.
- Use a matter-of-fact tone with no emotional attacks.
"""

MENTAL_GUARD_KEYWORDS = """
MENTAL GUARD MODE IS ON:
- Exclude abusive words ("trash", "scam", "refund" and the like).
- Strip aggressive adjectives and keep the nouns ("garbage controls" becomes "controls").
"""

MENTAL_GUARD_DEEP = """
MENTAL GUARD MODE IS ON: exclude abusive words and phrase every topic constructively.
"""

SUMMARY_PROMPT = """{guard}
Below are Steam reviews for one game. Summarize what players like and dislike.

POSITIVE REVIEWS (excerpt):
{positive}

NEGATIVE REVIEWS (excerpt):
{negative}

Answer in this JSON shape with six good points and six bad points:
{{
  "good_points": [{{"point": "...", "quote": "short supporting quote"}}],
  "bad_points": [{{"point": "...", "quote": "short supporting quote"}}],
  "categories": {{
    "gameplay": {{"positive": 0, "negative": 0, "keywords": []}},
    "graphics": {{"positive": 0, "negative": 0, "keywords": []}},
    "story": {{"positive": 0, "negative": 0, "keywords": []}},
    "performance": {{"positive": 0, "negative": 0, "keywords": []}},
    "price": {{"positive": 0, "negative": 0, "keywords": []}},
    "controls": {{"positive": 0, "negative": 0, "keywords": []}},
    "bugs": {{"positive": 0, "negative": 0, "keywords": []}},
    "localization": {{"positive": 0, "negative": 0, "keywords": []}}
  }}
}}"""

KEYWORDS_PROMPT = """{guard}
Extract the important recurring keywords from these game reviews.

Rules:
- Skip words too generic to be useful ("game", "fun", "recommend").
- Prefer nouns that describe the game ("controls", "soundtrack", "bugs", "story").
- Score each keyword 1-100 by how prominent it is.
- At most 30 keywords per side.

POSITIVE REVIEWS:
{positive}

NEGATIVE REVIEWS:
{negative}

Answer in this JSON shape:
{{
  "positive": [{{"word": "...", "score": 85, "count": 12}}],
  "negative": [{{"word": "...", "score": 75, "count": 8}}]
}}"""

DEEP_KEYWORDS_PROMPT = """{guard}
Find the main topics players discuss in these game reviews.

Rules:
- Skip words too generic to be useful ("game", "fun").
- Look for topics like scenario, controls, graphics, bugs, price, volume, difficulty, music, characters, UI.
- Count how often each topic is mentioned.
- Give every topic a one or two sentence summary of what reviewers say. Never leave a summary empty.
- At most 10 topics per side, most important first.

POSITIVE REVIEWS ({positive_count}):
{positive}

NEGATIVE REVIEWS ({negative_count}):
{negative}

Answer in this JSON shape; positive_topics and negative_topics are required:
{{
  "positive_topics": [{{"keyword": "...", "count": 25, "summary": "..."}}],
  "negative_topics": [{{"keyword": "...", "count": 15, "summary": "..."}}]
}}"""

TRANSFORM_PROMPT = """
You are a calm, capable secretary protecting a developer from abusive feedback.
Extract only the facts and the requested improvements from the review below.

Rules:
- Remove insults, personal attacks and profanity entirely.
- Rewrite strong negativity as mild improvement requests.
- Keep technical information such as bugs, crashes and UI problems exactly.
- Use a dry, matter-of-fact tone.

REVIEW:
{review}

Answer in this JSON shape:
{{
  "category": "controls | bugs | price | translation | gameplay | other",
  "summary": "one or two sentence neutral summary",
  "technical_issues": ["..."],
  "suggestions": ["..."],
  "severity": "high | medium | low"
}}"""

COMMUNITY_PROMPT = """
Below are thread titles from a Steam game's community discussion board, with reply counts.
Find the main topics players are talking about.

Rules:
- Group similar threads into one topic ("bug report", "crash", "glitch" become "Bugs and crashes").
- Count how many threads belong to each topic.
- Give every topic a one sentence summary.
- At most 10 topics, most discussed first.

THREADS:
{threads}

Answer in this JSON shape:
{{
  "topics": [{{"topic": "...", "count": 8, "summary": "..."}}]
}}"""


def _first(raw: Dict[str, Any], *names: str) -> List[Dict[str, Any]]:
    for name in names:
        value = raw.get(name)
        if value:
            return value
    return []


def normalize_deep_keywords(raw: Dict[str, Any]) -> DeepKeywordSet:
    """
    Make both views of a deep keyword reply available.

    The model sometimes answers with only topics or only scored keywords; the
    missing side is derived from the other. Keywords derived from topics are
    scored by rank: 100, 90, 80 ... never below MIN_TOPIC_SCORE.
    """
    positive = [Keyword(**k) for k in _first(raw, "positive")]
    negative = [Keyword(**k) for k in _first(raw, "negative")]
    positive_topics = [Topic(**t) for t in _first(raw, "positive_topics", "positiveTopics")]
    negative_topics = [Topic(**t) for t in _first(raw, "negative_topics", "negativeTopics")]

    if not positive and positive_topics:
        positive = topics_to_keywords(positive_topics)
    if not negative and negative_topics:
        negative = topics_to_keywords(negative_topics)
    if not positive_topics and positive:
        positive_topics = keywords_to_topics(positive)
    if not negative_topics and negative:
        negative_topics = keywords_to_topics(negative)

    return DeepKeywordSet(
        positive=positive,
        negative=negative,
        positive_topics=positive_topics,
        negative_topics=negative_topics,
    )


def topics_to_keywords(topics: List[Topic]) -> List[Keyword]:
    return [
        Keyword(word=topic.keyword, score=max(100 - index * 10, MIN_TOPIC_SCORE), count=topic.count)
        for index, topic in enumerate(topics)
    ]


def keywords_to_topics(keywords: List[Keyword]) -> List[Topic]:
    return [Topic(keyword=k.word, count=k.count or k.score or 0, summary="") for k in keywords]


def split_reviews(reviews: List[ReviewText]):
    positive = [r.review for r in reviews if r.voted_up]
    negative = [r.review for r in reviews if not r.voted_up]
    return positive, negative


class ReviewAnalyzer:
    """Gemini-backed review summaries, keyword extraction, feedback rewriting and discussion topics."""

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def _ask(self, prompt: str) -> Dict[str, Any]:
        try:
            return await self.llm.complete_json(SYSTEM_PROMPT, prompt)
        except (OpenAIError, ValueError) as e:
            logger.error(f"Review analysis call failed: {e}")
            raise ExternalServiceError("gemini", str(e)) from e

    async def summarize(self, reviews: List[ReviewText], mental_guard_mode: bool = False) -> ReviewSummary:
        positive, negative = split_reviews(reviews)
        prompt = SUMMARY_PROMPT.format(
            guard=MENTAL_GUARD_SUMMARY if mental_guard_mode else "",
            positive="\n---\n".join(positive[:SUMMARY_SAMPLE_SIZE]) or "none",
            negative="\n---\n".join(negative[:SUMMARY_SAMPLE_SIZE]) or "none",
        )
        raw = await self._ask(prompt)
        try:
            return ReviewSummary.model_validate(raw)
        except ValidationError as e:
            raise ExternalServiceError("gemini", f"unexpected summary shape: {e}") from e

    async def extract_keywords(self, reviews: List[ReviewText], mental_guard_mode: bool = False) -> KeywordSet:
        positive, negative = split_reviews(reviews)
        prompt = KEYWORDS_PROMPT.format(
            guard=MENTAL_GUARD_KEYWORDS if mental_guard_mode else "",
            positive=" ".join(positive)[:KEYWORD_TEXT_LIMIT],
            negative=" ".join(negative)[:KEYWORD_TEXT_LIMIT],
        )
        raw = await self._ask(prompt)
        try:
            keywords = KeywordSet.model_validate(raw)
        except ValidationError as e:
            raise ExternalServiceError("gemini", f"unexpected keyword shape: {e}") from e
        logger.info(f"Extracted keywords: {len(keywords.positive)} positive, {len(keywords.negative)} negative")
        return keywords

    async def extract_keywords_deep(self, reviews: List[ReviewText], mental_guard_mode: bool = False) -> DeepKeywordSet:
        positive, negative = split_reviews(reviews)
        prompt = DEEP_KEYWORDS_PROMPT.format(
            guard=MENTAL_GUARD_DEEP if mental_guard_mode else "",
            positive_count=len(positive),
            negative_count=len(negative),
            positive="\n---\n".join(positive)[:DEEP_TEXT_LIMIT],
            negative="\n---\n".join(negative)[:DEEP_TEXT_LIMIT],
        )
        raw = await self._ask(prompt)
        try:
            return normalize_deep_keywords(raw)
        except (TypeError, ValidationError) as e:
            raise ExternalServiceError("gemini", f"unexpected topic shape: {e}") from e

    async def transform(self, review: str) -> ConstructiveFeedback:
        """Rewrite one review as neutral, actionable feedback."""
        raw = await self._ask(TRANSFORM_PROMPT.format(review=review[:TRANSFORM_TEXT_LIMIT]))
        try:
            return ConstructiveFeedback.model_validate(raw)
        except ValidationError as e:
            raise ExternalServiceError("gemini", f"unexpected feedback shape: {e}") from e

    async def analyze_threads(self, threads: List[DiscussionThread]) -> CommunityAnalysis:
        """Group discussion thread titles into topics. No threads means no topics and no LLM call."""
        if not threads:
            return CommunityAnalysis()

        thread_list = "\n".join(
            f"- {thread.title} ({thread.replies})" if thread.replies else f"- {thread.title}"
            for thread in threads
        )
        raw = await self._ask(COMMUNITY_PROMPT.format(threads=thread_list))
        try:
            analysis = CommunityAnalysis.model_validate(raw)
        except ValidationError as e:
            raise ExternalServiceError("gemini", f"unexpected community shape: {e}") from e
        analysis.topics = analysis.topics[:MAX_COMMUNITY_TOPICS]
        return analysis


def get_review_analyzer(llm: Optional[LLMClient] = Depends(get_llm_client)) -> ReviewAnalyzer:
    if llm is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI features are unavailable. Ask the server administrator to configure a Gemini API key.",
        )
    return ReviewAnalyzer(llm)
