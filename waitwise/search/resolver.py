"""
Multi-provider search resolution.

SearchResolver walks an ordered provider chain and returns the first
LiveContext with content. Disabled providers are skipped; a failing provider
is logged and the next one is tried. No content anywhere is a normal outcome
and yields None.

CombinedProvider runs several lightweight providers together and merges
whatever each contributes (e.g. instant answer + encyclopedia summary).
"""

import asyncio
import logging
from typing import List, Optional, Sequence

import httpx

from waitwise.errors import SearchProviderError, SearchUnavailableError
from waitwise.models.schemas import LiveContext, SearchResult
from waitwise.search.base import BaseSearchProvider

logger = logging.getLogger(__name__)


class CombinedProvider(BaseSearchProvider):
    def __init__(self, providers: Sequence[BaseSearchProvider], name: Optional[str] = None):
        self.providers = list(providers)
        self.name = name or "+".join(p.name for p in self.providers)

    @property
    def enabled(self) -> bool:
        return any(p.enabled for p in self.providers)

    async def search(self, query: str) -> Optional[LiveContext]:
        members = [p for p in self.providers if p.enabled]
        outcomes = await asyncio.gather(
            *(p.search(query) for p in members),
            return_exceptions=True,
        )

        summaries: List[str] = []
        sources: List[SearchResult] = []
        failures = 0
        for provider, outcome in zip(members, outcomes):
            if isinstance(outcome, (SearchProviderError, httpx.HTTPError)):
                failures += 1
                logger.warning(f"[Search] {provider.name} failed: {outcome}")
            elif isinstance(outcome, BaseException):
                raise outcome
            elif outcome is not None:
                if outcome.summary:
                    summaries.append(outcome.summary)
                sources.extend(outcome.sources)

        if members and failures == len(members):
            raise SearchProviderError(self.name, "all member providers failed")
        return self.make_context(" ".join(summaries) or None, sources)


class SearchResolver:
    def __init__(self, providers: Sequence[BaseSearchProvider]):
        self.providers = list(providers)

    async def search(self, query: str, require_provider: bool = False) -> Optional[LiveContext]:
        """
        First context with content, or None.
        With require_provider, raises SearchUnavailableError when no enabled
        provider could be reached at all (an empty answer still counts as reached).
        """
        query = (query or "").strip()
        if not query:
            return None

        reached = False
        for provider in self.providers:
            if not provider.enabled:
                logger.debug(f"[Search] {provider.name} disabled, skipping.")
                continue
            try:
                context = await provider.search(query)
            except (SearchProviderError, httpx.HTTPError) as e:
                logger.warning(f"[Search] {provider.name} failed, falling through: {e}")
                continue
            except Exception as e:
                logger.error(f"[Search] {provider.name} crashed, falling through: {e!r}", exc_info=True)
                continue

            reached = True
            if context is not None and context.has_content:
                logger.info(
                    f"[Search] {provider.name} answered '{query}' with {len(context.sources)} source(s)."
                )
                return context
            logger.info(f"[Search] {provider.name} returned nothing for '{query}'.")

        if require_provider and not reached:
            raise SearchUnavailableError("No search provider could be reached.")
        logger.info(f"[Search] No provider produced context for '{query}'.")
        return None
