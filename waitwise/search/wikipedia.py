"""
Wikipedia summary provider (keyless).

  1. opensearch for the best-matching article title
     GET https://en.wikipedia.org/w/api.php?action=opensearch&search=...
     → [query, [titles], [descriptions], [urls]]
  2. REST summary for that title
     GET https://en.wikipedia.org/api/rest_v1/page/summary/{title}
     → { title, extract, content_urls: { desktop: { page } } }
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from waitwise.errors import SearchProviderError
from waitwise.models.schemas import LiveContext, SearchResult
from waitwise.search.base import BaseSearchProvider
from waitwise.services.http import client_session

logger = logging.getLogger(__name__)

OPENSEARCH_URL = "https://en.wikipedia.org/w/api.php"
SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/{title}"


class WikipediaSummaryProvider(BaseSearchProvider):
    name = "wikipedia"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client

    async def search(self, query: str) -> Optional[LiveContext]:
        params = {
            "action": "opensearch",
            "search": query,
            "limit": 1,
            "namespace": 0,
            "format": "json",
        }
        try:
            async with client_session(self._client) as client:
                resp = await client.get(OPENSEARCH_URL, params=params)
                resp.raise_for_status()
                found = resp.json()
                if not (isinstance(found, list) and len(found) > 1 and found[1]):
                    return None
                title = str(found[1][0])

                resp = await client.get(SUMMARY_URL.format(title=quote(title.replace(" ", "_"), safe="")))
                if resp.status_code == 404:
                    return None
                resp.raise_for_status()
                page = resp.json()
        except httpx.HTTPError as e:
            raise SearchProviderError(self.name, f"request failed: {e}") from e
        except ValueError:
            logger.debug(f"[Search] {self.name}: response is not JSON")
            return None

        if not isinstance(page, dict):
            return None
        extract = page.get("extract")
        if not isinstance(extract, str) or not extract.strip():
            return None

        url = ((page.get("content_urls") or {}).get("desktop") or {}).get("page") or ""
        results = [SearchResult(title=page.get("title") or title, url=url, snippet=extract)] if url else []
        return self.make_context(extract, results)
