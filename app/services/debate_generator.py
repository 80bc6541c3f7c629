"""LLM-backed generation of debate headlines and stance cards."""

from __future__ import annotations

import json
import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from app.caching import CacheGateway, CacheKeys
from app.config import Settings, get_settings
from app.models.debate import CardStance, DebateType
from app.schemas.debate import GeneratedCard, GeneratedDebate
from app.schemas.match import MatchData
from app.services.freshness import CachedResource, FreshnessPolicy, get_freshness_policy
from app.utils.errors import ContentGenerationError, UpstreamError

logger = logging.getLogger(__name__)

_STANCES = {stance.value for stance in CardStance}

_RESPONSE_FORMAT = """Return a JSON object with this structure:
{
  "headline": "A compelling headline that will spark debate",
  "description": "Short context for the debate",
  "cards": [
    {"stance": "agree", "title": "...", "description": "..."},
    {"stance": "disagree", "title": "...", "description": "..."},
    {"stance": "wildcard", "title": "...", "description": "..."}
  ]
}"""

_PRE_MATCH_FOCUS = """This is a PRE-MATCH debate: the match has not been played yet.
Focus on lineup and selection decisions, player form, tactics, managerial choices,
rivalry history and bold predictions. Do not mention results or final scores."""

_POST_MATCH_FOCUS = """This is a POST-MATCH debate: the match has been played.
Focus on key moments and turning points, refereeing and VAR decisions, individual
performances, tactical changes, fan reactions and what the result means."""


def build_system_prompt(debate_type: DebateType) -> str:
    focus = _PRE_MATCH_FOCUS if debate_type == DebateType.pre_match else _POST_MATCH_FOCUS
    return (
        "You generate football debate topics for a fan discussion app.\n\n"
        f"{focus}\n\n{_RESPONSE_FORMAT}\n\n"
        "Make the debate engaging and controversial but respectful."
    )


def build_user_prompt(match: MatchData, debate_type: DebateType) -> str:
    lines = [
        f"Generate a {debate_type.value} debate for this match:",
        "",
        f"Match: {match.home_team} vs {match.away_team}",
        f"Date: {match.date}",
        f"Status: {match.status}",
    ]
    if match.venue:
        lines.append(f"Venue: {match.venue}")
    if match.league:
        lines.append(f"League: {match.league}")
    if match.season:
        lines.append(f"Season: {match.season}")
    lines.append("")

    if match.lineups is not None:
        home = ", ".join(f"{p.name} ({p.pos})" for p in match.lineups.home_starters)
        away = ", ".join(f"{p.name} ({p.pos})" for p in match.lineups.away_starters)
        lines += ["LINEUPS:", f"Home Starters: {home}", f"Away Starters: {away}", ""]

    stats = match.stats
    if stats is not None:
        if debate_type == DebateType.post_match:
            lines += [
                "MATCH STATS:",
                f"Final Score: {stats.home_score}-{stats.away_score}",
                f"Shots: {stats.home_shots}-{stats.away_shots}",
                f"Possession: {stats.home_possession}%-{stats.away_possession}%",
                f"Fouls: {stats.home_fouls}-{stats.away_fouls}",
                f"Cards: Yellow({stats.home_yellow_cards}-{stats.away_yellow_cards}) "
                f"Red({stats.home_red_cards}-{stats.away_red_cards})",
                "",
            ]
        elif stats.home_shots or stats.away_shots or stats.home_possession or stats.away_possession:
            lines += [
                "CURRENT FORM:",
                f"Shots: {stats.home_shots}-{stats.away_shots}",
                f"Possession: {stats.home_possession}%-{stats.away_possession}%",
                "",
            ]

    if match.news_headlines:
        lines.append("NEWS HEADLINES:")
        lines += [f"- {headline}" for headline in match.news_headlines]
        lines.append("")

    if match.social is not None:
        lines.append("SOCIAL MEDIA:")
        if match.social.top_topics:
            lines.append(f"Top Topics: {', '.join(match.social.top_topics)}")
        if match.social.notable_posts:
            lines.append("Most discussed posts:")
            lines += [f"- {post}" for post in match.social.notable_posts]
        lines.append("")

    lines.append("Return only valid JSON.")
    return "\n".join(lines)


def validate_generated_debate(payload: Any) -> GeneratedDebate:
    """
    Check LLM output and keep only usable cards.

    A card needs a known stance and a non-empty title; invalid cards are
    dropped one by one. Raises ContentGenerationError when the headline is
    missing or no card survives.
    """
    if not isinstance(payload, dict):
        raise ContentGenerationError("Generated debate is not a JSON object")

    headline = payload.get("headline")
    if not isinstance(headline, str) or not headline.strip():
        raise ContentGenerationError("Generated debate has no headline")

    description = payload.get("description")
    raw_cards = payload.get("cards")
    if not isinstance(raw_cards, list):
        raw_cards = []

    cards: list[GeneratedCard] = []
    for raw in raw_cards:
        if not isinstance(raw, dict):
            logger.warning("Dropping generated card that is not an object: %r", raw)
            continue
        stance = str(raw.get("stance") or "").strip().lower()
        title = raw.get("title")
        if stance not in _STANCES or not isinstance(title, str) or not title.strip():
            logger.warning("Dropping invalid generated card: stance=%r title=%r", raw.get("stance"), title)
            continue
        card_description = raw.get("description")
        cards.append(
            GeneratedCard(
                stance=CardStance(stance),
                title=title.strip(),
                description=card_description.strip() if isinstance(card_description, str) else "",
            )
        )

    if not cards:
        raise ContentGenerationError("Generated debate has no valid cards")

    return GeneratedDebate(
        headline=headline.strip(),
        description=description.strip() if isinstance(description, str) else "",
        cards=cards,
    )


class DebateGenerator:
    """Generates debate content through the OpenAI chat completions API."""

    def __init__(
        self,
        cache: CacheGateway,
        client: AsyncOpenAI | None = None,
        settings: Settings | None = None,
        policy: FreshnessPolicy | None = None,
    ):
        settings = settings or get_settings()
        self.cache = cache
        self.policy = policy or get_freshness_policy()
        self.model = settings.openai_model
        self.temperature = settings.openai_temperature
        self.max_tokens = settings.openai_max_tokens
        self.client = client if client is not None else get_openai_client(settings)

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    async def generate(
        self,
        match: MatchData,
        debate_type: DebateType,
        *,
        use_cache: bool = True,
    ) -> GeneratedDebate:
        """
        Generate validated debate content for a match.

        With ``use_cache=False`` any previously generated content for this
        match and type is discarded before calling the model.
        """
        key = CacheKeys.debate_prompt(match.match_id, debate_type.value)
        if use_cache:
            cached = await self.cache.get(key, GeneratedDebate)
            if cached is not None:
                logger.debug("Using cached %s content for match %s", debate_type.value, match.match_id)
                return cached
        else:
            await self.cache.delete(key)

        content = await self._complete(
            build_system_prompt(debate_type),
            build_user_prompt(match, debate_type),
        )
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            raise ContentGenerationError(f"Failed to parse generated debate: {e}") from e

        debate = validate_generated_debate(payload)
        await self.cache.set(key, debate, self.policy.ttl_for_resource(CachedResource.prompt))
        return debate

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        if self.client is None:
            raise ContentGenerationError("OpenAI API key is not configured")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise UpstreamError("openai", str(e)) from e

        if not response.choices:
            raise ContentGenerationError("OpenAI returned no choices")
        return (response.choices[0].message.content or "").strip()


_openai_client: AsyncOpenAI | None = None


def get_openai_client(settings: Settings | None = None) -> AsyncOpenAI | None:
    """Shared AsyncOpenAI client, or None when no API key is configured."""
    global _openai_client
    settings = settings or get_settings()
    if not settings.openai_api_key:
        return None
    if _openai_client is None:
        _openai_client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            max_retries=settings.openai_max_retries,
            timeout=settings.openai_timeout,
        )
    return _openai_client
