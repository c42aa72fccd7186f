import asyncio
import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Response

from waitwise.errors import SearchUnavailableError
from waitwise.models.schemas import ChatRequest, ChatResponse, LiveContext, WaitLookup
from waitwise.runtime import get_aggregator, get_classifier, get_llm, get_resolver
from waitwise.search import SearchResolver
from waitwise.services.context import assemble_context, build_messages
from waitwise.services.intent import IntentClassifier
from waitwise.services.llm import ChatCompletionClient
from waitwise.services.wait_times import WaitTimeAggregator

router = APIRouter(tags=["chat"])
logger = logging.getLogger(__name__)


async def _nothing():
    return None


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    response: Response,
    classifier: IntentClassifier = Depends(get_classifier),
    aggregator: WaitTimeAggregator = Depends(get_aggregator),
    resolver: SearchResolver = Depends(get_resolver),
    llm: ChatCompletionClient = Depends(get_llm),
):
    req_start = time.perf_counter()
    user_text = next(
        (m.content for m in reversed(payload.messages) if m.role == "user" and m.content.strip()),
        None,
    )
    if user_text is None:
        raise HTTPException(status_code=400, detail="messages must contain a non-empty user message")

    intent = classifier.classify(user_text, force_search=payload.force_search)
    logger.info(
        "chat_intent web=%s waits=%s park_hint=%s",
        intent.wants_web_search, intent.wants_wait_times, intent.park_hint,
    )

    lookup, live = await asyncio.gather(
        aggregator.lookup(intent.effective_query) if intent.wants_wait_times else _nothing(),
        resolver.search(intent.effective_query, require_provider=payload.force_search)
        if intent.wants_web_search else _nothing(),
        return_exceptions=True,
    )
    if isinstance(lookup, Exception):
        logger.error(f"[Chat] Wait lookup failed: {lookup!r}")
        lookup = None
    lookup = lookup or WaitLookup(query=intent.effective_query)

    if isinstance(live, SearchUnavailableError):
        # Forced search with every provider down only fails when nothing else was found
        if not lookup.rides:
            raise live
        logger.warning(f"[Chat] {live} Answering with ride context only.")
        live = None
    elif isinstance(live, Exception):
        logger.error(f"[Chat] Search failed: {live!r}")
        live = None

    live = live if isinstance(live, LiveContext) else None

    context = assemble_context(intent, lookup.rides, live, fallback=lookup.fallback)
    reply = None
    if llm.configured:
        reply = await llm.complete(build_messages(context, payload.messages))

    total_ms = round((time.perf_counter() - req_start) * 1000, 2)
    response.headers["X-Total-Ms"] = str(total_ms)
    logger.info("chat_done rides=%d sources=%d total_ms=%.2f",
                len(lookup.rides), len(live.sources) if live else 0, total_ms)

    return ChatResponse(
        reply=reply,
        context=context,
        intent=intent,
        ride_waits=lookup.rides,
        sources=live.sources if live else [],
    )
