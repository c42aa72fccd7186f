"""
DuckDuckGo search providers (keyless).

DuckDuckGoHTMLProvider      — scrapes https://html.duckduckgo.com/html/?q=
    result anchors:  a.result__a   (title may contain <b> markup)
    snippets:        .result__snippet
    hrefs are often tracking wrappers: //duckduckgo.com/l/?uddg=<encoded url>&rut=...
    sponsored entries sit in .result--ad containers and are skipped

DuckDuckGoInstantProvider   — https://api.duckduckgo.com/?q=&format=json
    AbstractText / Answer / Definition + AbstractURL / DefinitionURL

Both are best-effort: an unparsable page yields None instead of an error.
"""

import logging
from typing import List, Optional
from urllib.parse import parse_qs, urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from waitwise import config
from waitwise.errors import SearchProviderError
from waitwise.models.schemas import LiveContext, SearchResult
from waitwise.search.base import BaseSearchProvider
from waitwise.services.http import client_session

logger = logging.getLogger(__name__)

HTML_URL = "https://html.duckduckgo.com/html/"
INSTANT_URL = "https://api.duckduckgo.com/"

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; WaitWise/1.0)",
    "Accept":     "text/html,application/xhtml+xml",
}


def decode_result_url(href: str) -> str:
    """Unwrap DuckDuckGo redirect links to their real destination."""
    if not href:
        return ""
    absolute = urljoin("https://duckduckgo.com", href)
    parsed = urlparse(absolute)
    if parsed.netloc.endswith("duckduckgo.com") and parsed.path.startswith("/l/"):
        target = parse_qs(parsed.query).get("uddg")
        if target and target[0]:
            return target[0]
    return absolute


def parse_results(html: str, limit: int) -> List[SearchResult]:
    soup = BeautifulSoup(html, "html.parser")
    results: List[SearchResult] = []
    for anchor in soup.select("a.result__a"):
        container = anchor.find_parent(class_="result")
        if container is not None and "result--ad" in container.get("class", []):
            continue
        url = decode_result_url(anchor.get("href", ""))
        title = anchor.get_text(" ", strip=True)
        if not url or not title:
            continue
        snippet_el = container.select_one(".result__snippet") if container else None
        results.append(SearchResult(
            title=title,
            url=url,
            snippet=snippet_el.get_text(" ", strip=True) if snippet_el else "",
        ))
        if len(results) >= limit:
            break
    return results


class DuckDuckGoHTMLProvider(BaseSearchProvider):
    name = "duckduckgo_html"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client

    async def search(self, query: str) -> Optional[LiveContext]:
        try:
            async with client_session(self._client) as client:
                resp = await client.get(HTML_URL, params={"q": query}, headers=BROWSER_HEADERS)
                resp.raise_for_status()
                html = resp.text
        except httpx.HTTPError as e:
            raise SearchProviderError(self.name, f"request failed: {e}") from e

        try:
            results = parse_results(html, config.SEARCH_MAX_RESULTS)
        except Exception as e:
            logger.debug(f"[Search] {self.name}: could not parse results page: {e!r}")
            return None
        return self.make_context(None, results)


class DuckDuckGoInstantProvider(BaseSearchProvider):
    name = "duckduckgo_instant"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client

    async def search(self, query: str) -> Optional[LiveContext]:
        params = {"q": query, "format": "json", "no_html": "1", "skip_disambig": "1"}
        try:
            async with client_session(self._client) as client:
                resp = await client.get(INSTANT_URL, params=params)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            raise SearchProviderError(self.name, f"request failed: {e}") from e
        except ValueError:
            logger.debug(f"[Search] {self.name}: response is not JSON")
            return None

        if not isinstance(data, dict):
            return None

        text = data.get("AbstractText") or data.get("Answer") or data.get("Definition") or ""
        url = data.get("AbstractURL") or data.get("DefinitionURL") or ""
        if not isinstance(text, str) or not text.strip():
            return None

        heading = data.get("Heading") or data.get("AbstractSource") or query
        results = [SearchResult(title=str(heading), url=str(url), snippet=text)] if url else []
        return self.make_context(text, results)
