"""
Tavily search provider (primary, key-gated).

POST {TAVILY_BASE_URL}/search
  request:  { api_key, query, search_depth, max_results, include_answer }
  response: { answer?: str, results?: [{ title, url, content }] }

Skipped entirely when TAVILY_API_KEY is not set.
"""

import logging
from typing import Optional

import httpx

from waitwise import config
from waitwise.errors import SearchProviderError
from waitwise.models.schemas import LiveContext, SearchResult
from waitwise.search.base import BaseSearchProvider
from waitwise.services.http import client_session

logger = logging.getLogger(__name__)


class TavilyProvider(BaseSearchProvider):
    name = "tavily"

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        search_depth: str = "basic",
    ):
        self.api_key = config.TAVILY_API_KEY if api_key is None else api_key
        self.search_depth = search_depth
        self._client = client

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def search(self, query: str) -> Optional[LiveContext]:
        payload = {
            "api_key": self.api_key,
            "query": query,
            "search_depth": self.search_depth,
            "max_results": config.SEARCH_MAX_RESULTS,
            "include_answer": True,
        }
        try:
            async with client_session(self._client) as client:
                resp = await client.post(
                    f"{config.TAVILY_BASE_URL}/search",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise SearchProviderError(self.name, f"status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SearchProviderError(self.name, f"request failed: {e}") from e
        except ValueError as e:
            raise SearchProviderError(self.name, "response is not JSON") from e

        if not isinstance(data, dict):
            raise SearchProviderError(self.name, "unexpected payload")

        results = [
            SearchResult(
                title=str(item.get("title") or ""),
                url=str(item.get("url") or ""),
                snippet=str(item.get("content") or ""),
            )
            for item in (data.get("results") or [])
            if isinstance(item, dict)
        ]
        answer = data.get("answer") if isinstance(data.get("answer"), str) else None
        return self.make_context(answer, results)
