"""
Process-wide services, created on startup and torn down on shutdown.

Routers reach them through the get_* helpers (as FastAPI dependencies, so
tests can override them).
"""

import httpx
import logging
from typing import Optional

from waitwise import config
from waitwise.parks import build_provider
from waitwise.parks.catalog import ParkCatalog, load_static_catalog
from waitwise.search import SearchResolver, build_resolver
from waitwise.services.aliases import AliasTables, load_alias_tables
from waitwise.services.cache import TTLCache
from waitwise.services.intent import IntentClassifier
from waitwise.services.llm import ChatCompletionClient
from waitwise.services.wait_times import SnapshotStore, WaitTimeAggregator

logger = logging.getLogger(__name__)

http_client: Optional[httpx.AsyncClient] = None
aliases:     Optional[AliasTables] = None
catalog:     Optional[ParkCatalog] = None
aggregator:  Optional[WaitTimeAggregator] = None
classifier:  Optional[IntentClassifier] = None
resolver:    Optional[SearchResolver] = None
llm:         Optional[ChatCompletionClient] = None


async def startup():
    global http_client, aliases, catalog, aggregator, classifier, resolver, llm
    http_client = httpx.AsyncClient(
        timeout=config.HTTP_TIMEOUT_SECONDS,
        headers={"User-Agent": config.USER_AGENT},
        follow_redirects=True,
    )
    aliases = load_alias_tables()
    catalog = load_static_catalog(aliases)

    store = SnapshotStore(
        build_provider(config.WAIT_TIME_PROVIDER, client=http_client),
        TTLCache(ttl=config.WAIT_CACHE_TTL_SECONDS),
    )
    aggregator = WaitTimeAggregator(catalog, store, aliases)
    classifier = IntentClassifier(aliases, catalog)
    resolver = build_resolver(client=http_client)
    llm = ChatCompletionClient(client=http_client)

    if not config.TAVILY_API_KEY:
        logger.info("TAVILY_API_KEY not set — primary search disabled, using keyless fallbacks.")
    if not llm.configured:
        logger.warning("LLM_API_KEY not set — /chat will return context without a model reply.")
    if not config.API_BEARER_TOKEN:
        logger.warning("API_BEARER_TOKEN not set — API authentication is disabled.")
    logger.info(f"Runtime ready: {len(catalog.parks)} parks, cache TTL {config.WAIT_CACHE_TTL_SECONDS:g}s.")


async def shutdown():
    global http_client
    if http_client is not None:
        await http_client.aclose()
        http_client = None
        logger.info("HTTP client closed.")


def get_catalog() -> ParkCatalog:
    return catalog


def get_aggregator() -> WaitTimeAggregator:
    return aggregator


def get_classifier() -> IntentClassifier:
    return classifier


def get_resolver() -> SearchResolver:
    return resolver


def get_llm() -> ChatCompletionClient:
    return llm


def get_http_client() -> Optional[httpx.AsyncClient]:
    return http_client
