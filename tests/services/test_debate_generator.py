from unittest.mock import AsyncMock

import pytest
from openai import OpenAIError

from app.caching import CacheKeys
from app.config import Settings
from app.models.debate import CardStance, DebateType
from app.schemas.lineup import PlayerRecord
from app.schemas.match import LineupData, MatchData, MatchStats, SocialSignals
from app.services.debate_generator import (
    DebateGenerator,
    build_system_prompt,
    build_user_prompt,
    validate_generated_debate,
)
from app.utils.errors import ContentGenerationError, UpstreamError


def _match(**overrides) -> MatchData:
    data = {
        "match_id": "1001",
        "home_team": "Arsenal",
        "away_team": "Chelsea",
        "date": "2025-03-01T15:00:00+00:00",
        "status": "NS",
        "league": "Premier League",
    }
    data.update(overrides)
    return MatchData(**data)


class TestValidateGeneratedDebate:
    def test_valid_payload(self, sample_debate_payload):
        debate = validate_generated_debate(sample_debate_payload)
        assert debate.headline.startswith("Is Arsenal")
        assert [card.stance for card in debate.cards] == [
            CardStance.agree, CardStance.disagree, CardStance.wildcard,
        ]

    def test_invalid_cards_are_dropped_individually(self, sample_debate_payload):
        sample_debate_payload["cards"] += [
            {"stance": "neutral", "title": "Not a stance"},
            {"stance": "agree", "title": "   "},
            "not an object",
        ]
        debate = validate_generated_debate(sample_debate_payload)
        assert len(debate.cards) == 3

    def test_stance_is_case_insensitive(self):
        debate = validate_generated_debate(
            {"headline": "H", "cards": [{"stance": " Agree ", "title": "T"}]}
        )
        assert debate.cards[0].stance == CardStance.agree
        assert debate.cards[0].description == ""

    def test_missing_headline(self, sample_debate_payload):
        sample_debate_payload["headline"] = ""
        with pytest.raises(ContentGenerationError):
            validate_generated_debate(sample_debate_payload)

    def test_zero_valid_cards(self):
        with pytest.raises(ContentGenerationError, match="no valid cards"):
            validate_generated_debate({"headline": "H", "cards": [{"stance": "maybe", "title": "T"}]})

    def test_not_an_object(self):
        with pytest.raises(ContentGenerationError):
            validate_generated_debate(["headline"])


class TestPrompts:
    def test_system_prompt_depends_on_debate_type(self):
        assert "PRE-MATCH" in build_system_prompt(DebateType.pre_match)
        assert "POST-MATCH" in build_system_prompt(DebateType.post_match)

    def test_user_prompt_includes_context(self):
        match = _match(
            status="FT",
            stats=MatchStats(home_score=2, away_score=1, home_shots=15, away_shots=7),
            news_headlines=["Arsenal edge Chelsea"],
            social=SocialSignals(top_topics=["#ARSCHE"], notable_posts=["What a game"]),
        )
        prompt = build_user_prompt(match, DebateType.post_match)

        assert "Match: Arsenal vs Chelsea" in prompt
        assert "Final Score: 2-1" in prompt
        assert "- Arsenal edge Chelsea" in prompt
        assert "Top Topics: #ARSCHE" in prompt

    def test_pre_match_prompt_lists_lineups_without_result(self):
        match = _match(
            lineups=LineupData(home_starters=[PlayerRecord(name="D. Raya", pos="G")]),
            stats=MatchStats(),
        )
        prompt = build_user_prompt(match, DebateType.pre_match)

        assert "Home Starters: D. Raya (G)" in prompt
        assert "Final Score" not in prompt


@pytest.mark.asyncio
class TestDebateGenerator:
    async def test_generate_calls_model_and_caches_result(self, generator, cache, openai_client):
        debate = await generator.generate(_match(), DebateType.pre_match)

        assert len(debate.cards) == 3
        openai_client.chat.completions.create.assert_awaited_once()
        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert CacheKeys.debate_prompt("1001", "pre_match") in cache.store

    async def test_cached_content_is_reused(self, generator, openai_client):
        first = await generator.generate(_match(), DebateType.pre_match)
        second = await generator.generate(_match(), DebateType.pre_match)

        assert second == first
        assert openai_client.chat.completions.create.await_count == 1

    async def test_use_cache_false_discards_cached_content(self, generator, cache, openai_client):
        await generator.generate(_match(), DebateType.pre_match)
        await generator.generate(_match(), DebateType.pre_match, use_cache=False)

        assert openai_client.chat.completions.create.await_count == 2

    async def test_invalid_json_is_not_cached(self, generator, cache, openai_client, completion):
        openai_client.chat.completions.create.return_value = completion("not json")

        with pytest.raises(ContentGenerationError):
            await generator.generate(_match(), DebateType.pre_match)

        assert cache.store == {}

    async def test_zero_valid_cards_is_not_cached(self, generator, cache, openai_client, completion):
        openai_client.chat.completions.create.return_value = completion(
            {"headline": "H", "cards": [{"stance": "maybe", "title": "T"}]}
        )

        with pytest.raises(ContentGenerationError):
            await generator.generate(_match(), DebateType.pre_match)

        assert cache.store == {}

    async def test_openai_error_becomes_upstream_error(self, generator, openai_client):
        openai_client.chat.completions.create.side_effect = OpenAIError("rate limited")

        with pytest.raises(UpstreamError) as exc_info:
            await generator.generate(_match(), DebateType.pre_match)

        assert exc_info.value.source == "openai"

    async def test_empty_choices(self, generator, openai_client, completion):
        response = completion("{}")
        response.choices = []
        openai_client.chat.completions.create.return_value = response

        with pytest.raises(ContentGenerationError):
            await generator.generate(_match(), DebateType.pre_match)

    async def test_not_configured(self, cache):
        generator = DebateGenerator(cache, settings=Settings(openai_api_key=""))

        assert generator.is_configured is False
        with pytest.raises(ContentGenerationError):
            await generator.generate(_match(), DebateType.pre_match)


def test_generator_uses_injected_client(cache):
    client = AsyncMock()
    assert DebateGenerator(cache, client=client).client is client
