import pytest
from httpx import AsyncClient

from app.schemas.match import MatchInfo


def _info(status: str) -> MatchInfo:
    return MatchInfo(match_id="1001", home_team="Arsenal", away_team="Chelsea", status=status)


async def _generate(client: AsyncClient, debate_type: str = "pre_match", **extra) -> dict:
    response = await client.post(
        "/api/v1/debates/generate",
        json={"match_id": "1001", "debate_type": debate_type, **extra},
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest.mark.asyncio
class TestDebateGenerationAPI:
    """Tests for /api/v1/debates/generate."""

    async def test_generate_creates_debate(self, client: AsyncClient, football_client):
        football_client.fetch_match_info.return_value = _info("NS")

        data = await _generate(client)

        assert data["status"] == "created"
        debate = data["debate"]
        assert debate["match_id"] == "1001"
        assert debate["debate_type"] == "pre_match"
        assert [card["stance"] for card in debate["cards"]] == ["agree", "disagree", "wildcard"]
        assert debate["cards"][0]["vote_counts"] == {"upvotes": 0, "downvotes": 0, "emojis": {}}
        assert debate["analytics"]["engagement_score"] == 0.0

    async def test_generate_twice_returns_same_debate(self, client: AsyncClient, football_client):
        football_client.fetch_match_info.return_value = _info("NS")

        first = await _generate(client)
        second = await _generate(client)

        assert second["status"] == "existing"
        assert second["debate"]["id"] == first["debate"]["id"]

    async def test_force_regenerate(self, client: AsyncClient, football_client):
        football_client.fetch_match_info.return_value = _info("NS")

        first = await _generate(client)
        second = await _generate(client, force_regenerate=True)

        assert second["status"] == "regenerated"
        assert second["debate"]["id"] != first["debate"]["id"]

        response = await client.get(f"/api/v1/debates/{first['debate']['id']}")
        assert response.status_code == 404

    async def test_post_match_before_kickoff_is_skipped(self, client: AsyncClient, football_client):
        football_client.fetch_match_info.return_value = _info("NS")

        data = await _generate(client, debate_type="post_match")

        assert data["status"] == "skipped"
        assert data["debate"] is None
        assert data["message"]

        response = await client.get("/api/v1/debates/match?match_id=1001")
        assert response.json() == []

    async def test_unknown_match(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/debates/generate",
            json={"match_id": "404", "debate_type": "pre_match"},
        )
        assert response.status_code == 404

    async def test_invalid_generation_is_bad_gateway(
        self, client: AsyncClient, football_client, openai_client, completion
    ):
        football_client.fetch_match_info.return_value = _info("NS")
        openai_client.chat.completions.create.return_value = completion({"headline": "H", "cards": []})

        response = await client.post(
            "/api/v1/debates/generate",
            json={"match_id": "1001", "debate_type": "pre_match"},
        )

        assert response.status_code == 502
        assert (await client.get("/api/v1/debates/match?match_id=1001")).json() == []

    async def test_preview(self, client: AsyncClient, football_client):
        football_client.fetch_match_info.return_value = _info("FT")

        response = await client.get("/api/v1/debates/generate?match_id=1001&type=post_match")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "preview"
        assert len(data["content"]["cards"]) == 3
        assert (await client.get("/api/v1/debates/match?match_id=1001")).json() == []

    async def test_generation_health(self, client: AsyncClient):
        response = await client.get("/api/v1/debates/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["openai_configured"] is True
        assert data["cache_available"] is True


@pytest.mark.asyncio
class TestDebateCrudAPI:
    async def test_create_debate_conflict(self, client: AsyncClient):
        body = {"match_id": "1001", "debate_type": "pre_match", "headline": "Who starts?"}

        first = await client.post("/api/v1/debates", json=body)
        second = await client.post("/api/v1/debates", json=body)

        assert first.status_code == 201
        assert first.json()["cards"] == []
        assert second.status_code == 409

    async def test_add_card(self, client: AsyncClient):
        debate = (await client.post(
            "/api/v1/debates",
            json={"match_id": "1001", "debate_type": "pre_match", "headline": "Who starts?"},
        )).json()

        response = await client.post(
            "/api/v1/debates/cards",
            json={"debate_id": debate["id"], "stance": "agree", "title": "Havertz"},
        )

        assert response.status_code == 201
        detail = (await client.get(f"/api/v1/debates/{debate['id']}")).json()
        assert [card["title"] for card in detail["cards"]] == ["Havertz"]

    async def test_add_card_to_missing_debate(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/debates/cards",
            json={"debate_id": 999, "stance": "agree", "title": "Nobody"},
        )
        assert response.status_code == 404

    async def test_soft_delete_restore_and_hard_delete(self, client: AsyncClient, football_client):
        football_client.fetch_match_info.return_value = _info("NS")
        debate_id = (await _generate(client))["debate"]["id"]

        assert (await client.delete(f"/api/v1/debates/{debate_id}")).status_code == 200
        assert (await client.get(f"/api/v1/debates/{debate_id}")).status_code == 404

        restored = await client.post(f"/api/v1/debates/{debate_id}/restore")
        assert restored.status_code == 200
        assert restored.json()["deleted_at"] is None

        assert (await client.delete(f"/api/v1/debates/{debate_id}/hard")).status_code == 200
        assert (await client.post(f"/api/v1/debates/{debate_id}/restore")).status_code == 404

    async def test_restore_conflicts_with_replacement(self, client: AsyncClient, football_client):
        football_client.fetch_match_info.return_value = _info("NS")
        first = (await _generate(client))["debate"]["id"]
        await _generate(client, force_regenerate=True)

        response = await client.post(f"/api/v1/debates/{first}/restore")

        assert response.status_code == 409


@pytest.mark.asyncio
class TestVotesAndCommentsAPI:
    async def _debate(self, client: AsyncClient, football_client) -> dict:
        football_client.fetch_match_info.return_value = _info("NS")
        return (await _generate(client))["debate"]

    async def test_vote_requires_auth(self, client: AsyncClient, football_client):
        debate = await self._debate(client, football_client)

        response = await client.post(
            "/api/v1/debates/votes",
            json={"debate_card_id": debate["cards"][0]["id"], "vote_type": "upvote"},
        )

        assert response.status_code == 401

    async def test_votes_update_counts_and_engagement(
        self, client: AsyncClient, football_client, auth_headers
    ):
        debate = await self._debate(client, football_client)
        card_id = debate["cards"][0]["id"]

        upvote = await client.post(
            "/api/v1/debates/votes",
            json={"debate_card_id": card_id, "vote_type": "upvote"},
            headers=auth_headers,
        )
        emoji = await client.post(
            "/api/v1/debates/votes",
            json={"debate_card_id": card_id, "vote_type": "emoji", "emoji": "🔥"},
            headers=auth_headers,
        )
        duplicate = await client.post(
            "/api/v1/debates/votes",
            json={"debate_card_id": card_id, "vote_type": "upvote"},
            headers=auth_headers,
        )

        assert upvote.status_code == 201
        assert emoji.status_code == 201
        assert duplicate.status_code == 409

        detail = (await client.get(f"/api/v1/debates/{debate['id']}")).json()
        assert detail["cards"][0]["vote_counts"] == {"upvotes": 1, "downvotes": 0, "emojis": {"🔥": 1}}
        assert detail["analytics"]["total_votes"] == 2
        assert detail["analytics"]["engagement_score"] == 2.0

    async def test_emoji_vote_requires_emoji(self, client: AsyncClient, football_client, auth_headers):
        debate = await self._debate(client, football_client)

        response = await client.post(
            "/api/v1/debates/votes",
            json={"debate_card_id": debate["cards"][0]["id"], "vote_type": "emoji"},
            headers=auth_headers,
        )

        assert response.status_code == 422

    async def test_delete_vote(self, client: AsyncClient, football_client, auth_headers):
        debate = await self._debate(client, football_client)
        card_id = debate["cards"][1]["id"]
        await client.post(
            "/api/v1/debates/votes",
            json={"debate_card_id": card_id, "vote_type": "downvote"},
            headers=auth_headers,
        )

        deleted = await client.delete(
            f"/api/v1/debates/votes?debate_card_id={card_id}&vote_type=downvote",
            headers=auth_headers,
        )
        missing = await client.delete(
            f"/api/v1/debates/votes?debate_card_id={card_id}&vote_type=downvote",
            headers=auth_headers,
        )

        assert deleted.status_code == 200
        assert missing.status_code == 404
        detail = (await client.get(f"/api/v1/debates/{debate['id']}")).json()
        assert detail["analytics"]["total_votes"] == 0

    async def test_comments_and_replies(self, client: AsyncClient, football_client, auth_headers):
        debate = await self._debate(client, football_client)

        parent = await client.post(
            "/api/v1/debates/comments",
            json={"debate_id": debate["id"], "content": "  Rice is the best in the league  "},
            headers=auth_headers,
        )
        reply = await client.post(
            "/api/v1/debates/comments",
            json={"debate_id": debate["id"], "parent_comment_id": parent.json()["id"], "content": "Agreed"},
            headers=auth_headers,
        )

        assert parent.status_code == 201
        assert parent.json()["content"] == "Rice is the best in the league"
        assert parent.json()["user_first_name"] == "Jamie"
        assert reply.status_code == 201

        comments = (await client.get(f"/api/v1/debates/{debate['id']}/comments")).json()
        assert [c["content"] for c in comments] == ["Rice is the best in the league", "Agreed"]
        assert comments[1]["parent_comment_id"] == parent.json()["id"]

        detail = (await client.get(f"/api/v1/debates/{debate['id']}")).json()
        assert detail["analytics"]["total_comments"] == 2
        assert detail["analytics"]["engagement_score"] == 4.0

        response = await client.delete(
            f"/api/v1/debates/comments/{parent.json()['id']}", headers=auth_headers
        )
        assert response.status_code == 200
        assert (await client.get(f"/api/v1/debates/{debate['id']}/comments")).json() == []

    async def test_blank_comment_rejected(self, client: AsyncClient, football_client, auth_headers):
        debate = await self._debate(client, football_client)

        response = await client.post(
            "/api/v1/debates/comments",
            json={"debate_id": debate["id"], "content": "   "},
            headers=auth_headers,
        )

        assert response.status_code == 422

    async def test_top_debates(self, client: AsyncClient, football_client, auth_headers):
        debate = await self._debate(client, football_client)
        quiet = (await client.post(
            "/api/v1/debates",
            json={"match_id": "2002", "debate_type": "pre_match", "headline": "Quiet one"},
        )).json()
        await client.post(
            "/api/v1/debates/comments",
            json={"debate_id": debate["id"], "content": "Busy"},
            headers=auth_headers,
        )

        top = (await client.get("/api/v1/debates/top?limit=5")).json()

        assert [d["id"] for d in top] == [debate["id"], quiet["id"]]


@pytest.mark.asyncio
class TestUsersAPI:
    async def test_register_and_me(self, client: AsyncClient):
        created = await client.post(
            "/api/v1/users",
            json={"firstname": "Sam", "lastname": "Supporter", "email": "Sam@Example.com"},
        )

        assert created.status_code == 201
        data = created.json()
        assert data["email"] == "sam@example.com"

        me = await client.get(
            "/api/v1/users/me", headers={"Authorization": f"Bearer {data['access_token']}"}
        )
        assert me.status_code == 200
        assert me.json()["id"] == data["id"]

    async def test_duplicate_email(self, client: AsyncClient, sample_user):
        response = await client.post(
            "/api/v1/users",
            json={"firstname": "Other", "lastname": "Person", "email": sample_user.email},
        )
        assert response.status_code == 409

    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
