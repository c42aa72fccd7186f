"""Tests for process wiring and the catalog refresh job.

Covers:
- runtime.startup builds every service, shutdown closes the HTTP client
- refresh_park_catalog: skipped before startup, swaps the catalog after
- start_scheduler registers the refresh job
- ChatCompletionClient request shape and error mapping
"""

from __future__ import annotations

import json

import httpx
import pytest

from waitwise import runtime, scheduler
from waitwise.errors import LLMError
from waitwise.services.llm import ChatCompletionClient


class TestRuntime:
    """Tests for startup/shutdown."""

    @pytest.mark.asyncio
    async def test_startup_and_shutdown(self, monkeypatch):
        monkeypatch.setattr("waitwise.config.LLM_API_KEY", "")
        await runtime.startup()
        try:
            assert runtime.get_catalog().get(6).name == "Magic Kingdom"
            assert runtime.get_aggregator() is not None
            assert runtime.get_classifier() is not None
            assert runtime.get_resolver().providers
            assert isinstance(runtime.get_llm(), ChatCompletionClient)
            assert runtime.get_llm().configured is False
            client = runtime.get_http_client()
        finally:
            await runtime.shutdown()

        assert client.is_closed
        assert runtime.get_http_client() is None


class TestCatalogJob:
    """Tests for the scheduled catalog refresh."""

    @pytest.mark.asyncio
    async def test_skipped_without_runtime(self, monkeypatch):
        monkeypatch.setattr(runtime, "catalog", None)
        await scheduler.refresh_park_catalog()

    @pytest.mark.asyncio
    async def test_refresh_swaps_catalog(self, monkeypatch, catalog):
        listing = [{"id": 12, "name": "Disneyland Resort", "parks": [
            {"id": 16, "name": "Disneyland", "country": "United States"},
        ]}]
        client = httpx.AsyncClient(transport=httpx.MockTransport(
            lambda request: httpx.Response(200, json=listing)
        ))
        monkeypatch.setattr(runtime, "catalog", catalog)
        monkeypatch.setattr(runtime, "http_client", client)

        await scheduler.refresh_park_catalog()
        await client.aclose()

        assert [p.name for p in catalog.parks] == ["Disneyland"]

    def test_start_registers_job(self, monkeypatch):
        monkeypatch.setattr(scheduler.scheduler, "start", lambda: None)
        scheduler.start_scheduler()
        try:
            job = scheduler.scheduler.get_job("refresh_catalog")
            assert job is not None
            assert job.func is scheduler.refresh_park_catalog
        finally:
            scheduler.scheduler.remove_job("refresh_catalog")


class TestChatCompletionClient:
    """Tests for the OpenAI-compatible collaborator."""

    @pytest.mark.asyncio
    async def test_posts_messages(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": []})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            llm = ChatCompletionClient(client, base_url="https://llm.test/v1/", api_key="k", model="m")
            reply = await llm.complete([{"role": "user", "content": "hi"}])

        assert reply == {"choices": []}
        assert seen["url"] == "https://llm.test/v1/chat/completions"
        assert seen["auth"] == "Bearer k"
        assert seen["body"] == {"model": "m", "messages": [{"role": "user", "content": "hi"}]}

    @pytest.mark.asyncio
    async def test_upstream_error(self):
        async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500))) as client:
            llm = ChatCompletionClient(client, base_url="https://llm.test", api_key="k")
            with pytest.raises(LLMError):
                await llm.complete([])

    @pytest.mark.asyncio
    async def test_unconfigured(self):
        with pytest.raises(LLMError):
            await ChatCompletionClient(api_key="").complete([])
