"""
Search provider chain, tried in this order:

  1. Tavily                                  — primary, needs TAVILY_API_KEY
  2. DuckDuckGo HTML results                 — keyless
  3. DuckDuckGo instant answer + Wikipedia   — keyless, merged

To add a provider, extend BaseSearchProvider and insert it into build_resolver().
"""

from typing import Optional

import httpx

from waitwise.search.base import BaseSearchProvider
from waitwise.search.duckduckgo import DuckDuckGoHTMLProvider, DuckDuckGoInstantProvider
from waitwise.search.resolver import CombinedProvider, SearchResolver
from waitwise.search.tavily import TavilyProvider
from waitwise.search.wikipedia import WikipediaSummaryProvider

__all__ = [
    "BaseSearchProvider",
    "CombinedProvider",
    "SearchResolver",
    "build_resolver",
]


def build_resolver(client: Optional[httpx.AsyncClient] = None) -> SearchResolver:
    return SearchResolver([
        TavilyProvider(client=client),
        DuckDuckGoHTMLProvider(client=client),
        CombinedProvider(
            [DuckDuckGoInstantProvider(client=client), WikipediaSummaryProvider(client=client)],
            name="instant+wikipedia",
        ),
    ])
