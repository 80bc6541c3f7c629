import logging

import httpx
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.schemas.provider import NewsSearchResponse
from app.utils.errors import UpstreamError

logger = logging.getLogger(__name__)

SOURCE = "news"


class NewsClient:
    """Client for Google News search via RapidAPI."""

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.base_url = settings.news_api_base_url.rstrip("/")
        self.api_key = settings.rapid_api_key
        self.host = settings.news_api_host
        self.default_language = settings.news_default_language
        self.timeout = settings.upstream_timeout_seconds

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_headers(self) -> dict[str, str]:
        return {
            "x-rapidapi-key": self.api_key,
            "x-rapidapi-host": self.host,
        }

    async def search(self, query: str, language: str | None = None) -> NewsSearchResponse:
        params = {"keyword": query, "lr": language or self.default_language}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    "GET",
                    f"{self.base_url}/search",
                    headers=self.get_headers(),
                    params=params,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                SOURCE,
                f"search returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(SOURCE, f"search request failed: {e}") from e

        try:
            return NewsSearchResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise UpstreamError(SOURCE, f"unexpected search payload: {e.error_count()} errors") from e


_news_client: NewsClient | None = None


def get_news_client() -> NewsClient:
    global _news_client
    if _news_client is None:
        _news_client = NewsClient()
    return _news_client
