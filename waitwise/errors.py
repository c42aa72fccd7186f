"""Error taxonomy shared by the wait-time, search and HTTP layers."""

from typing import Optional


class WaitWiseError(Exception):
    """Base class for all WaitWise errors."""


class UpstreamError(WaitWiseError):
    """The wait-time provider returned a bad status or a malformed payload.

    Raised once per park. Never cached, so the next call retries upstream.
    """

    def __init__(self, park_id: int, message: str, status_code: Optional[int] = None):
        super().__init__(f"park {park_id}: {message}")
        self.park_id = park_id
        self.status_code = status_code


class SearchProviderError(WaitWiseError):
    """A single search provider failed.

    Never fatal: the resolver logs it and falls through to the next provider.
    """

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class NotFoundError(WaitWiseError):
    """A park or ride name could not be resolved.

    Core lookups return None instead; only the HTTP layer raises this.
    """


class SearchUnavailableError(WaitWiseError):
    """Web search was explicitly requested but no provider produced anything."""


class LLMError(WaitWiseError):
    """The chat completion endpoint failed or is not configured."""
