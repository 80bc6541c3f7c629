import logging

import httpx
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.schemas.provider import Tweet, TweetSearchResponse
from app.utils.errors import UpstreamError

logger = logging.getLogger(__name__)

SOURCE = "social"


class SocialClient:
    """Client for Twitter API v2 recent search."""

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.base_url = settings.twitter_api_base_url.rstrip("/")
        self.bearer_token = settings.twitter_bearer_token
        self.max_results = settings.twitter_max_results
        self.timeout = settings.upstream_timeout_seconds

    @property
    def is_configured(self) -> bool:
        return bool(self.bearer_token)

    async def search_recent_posts(self, query: str) -> list[Tweet]:
        """Recent English posts matching ``query``, retweets excluded.

        Returns an empty list when no bearer token is configured.
        """
        if not self.is_configured:
            logger.debug("Social search skipped: no bearer token configured")
            return []

        params = {
            "query": f"({query}) lang:en -is:retweet",
            "tweet.fields": "created_at,public_metrics,author_id",
            # The API rejects max_results outside 10..100.
            "max_results": min(max(self.max_results, 10), 100),
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    "GET",
                    f"{self.base_url}/tweets/search/recent",
                    headers={"Authorization": f"Bearer {self.bearer_token}"},
                    params=params,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                SOURCE,
                f"recent search returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(SOURCE, f"recent search request failed: {e}") from e

        try:
            payload = TweetSearchResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise UpstreamError(SOURCE, f"unexpected recent search payload: {e.error_count()} errors") from e
        return payload.data


_social_client: SocialClient | None = None


def get_social_client() -> SocialClient:
    global _social_client
    if _social_client is None:
        _social_client = SocialClient()
    return _social_client
