from abc import ABC, abstractmethod
from typing import Iterable, Optional

from waitwise import config
from waitwise.models.schemas import LiveContext, SearchResult
from waitwise.services.normalizer import clamp


class BaseSearchProvider(ABC):
    """
    One web-search surface. search() returns a LiveContext, or None when the
    provider had nothing useful; it raises SearchProviderError when it failed.
    """
    name: str

    @property
    def enabled(self) -> bool:
        """Providers gated on a credential report False when it is missing."""
        return True

    @abstractmethod
    async def search(self, query: str) -> Optional[LiveContext]: ...

    def make_context(self, summary: Optional[str], results: Iterable[SearchResult]) -> Optional[LiveContext]:
        """Clamp every field and drop empty results; None if nothing is left."""
        limit = config.CONTEXT_FIELD_MAX_CHARS
        sources = [
            SearchResult(
                title=clamp(r.title, limit) or clamp(r.url, limit),
                url=r.url.strip(),
                snippet=clamp(r.snippet, limit),
            )
            for r in results
            if r.url and r.url.strip()
        ]
        context = LiveContext(
            summary=clamp(summary, limit) or None,
            sources=sources[: config.SEARCH_MAX_RESULTS],
            provider=self.name,
        )
        return context if context.has_content else None
