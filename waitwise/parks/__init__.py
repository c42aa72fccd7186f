"""
Wait-time provider registry — maps provider name to connector class.

To add a new provider:
  1. Create waitwise/parks/yourprovider.py extending BaseWaitTimeProvider
  2. Import it here and add it to PROVIDERS
  3. Select it with WAIT_TIME_PROVIDER=yourprovider
"""

from typing import Dict, Optional, Type

import httpx

from waitwise.parks.base import BaseWaitTimeProvider
from waitwise.parks.queue_times import QueueTimesConnector


# ── Registry ──────────────────────────────────
PROVIDERS: Dict[str, Type[BaseWaitTimeProvider]] = {
    "queue_times": QueueTimesConnector,
}


def build_provider(name: str, client: Optional[httpx.AsyncClient] = None) -> BaseWaitTimeProvider:
    provider_cls = PROVIDERS.get(name)
    if provider_cls is None:
        raise ValueError(f"Unknown wait-time provider '{name}'. Known: {', '.join(PROVIDERS)}")
    return provider_cls(client=client)
