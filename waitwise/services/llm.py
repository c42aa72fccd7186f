"""
Chat completion client (OpenAI-compatible).

The assembled message list is posted as-is and the JSON response is handed
back untouched; nothing here interprets the model's answer.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from waitwise import config
from waitwise.errors import LLMError
from waitwise.services.http import client_session

logger = logging.getLogger(__name__)


class ChatCompletionClient:
    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ):
        self._client = client
        self.base_url = (base_url or config.LLM_BASE_URL).rstrip("/")
        self.api_key = config.LLM_API_KEY if api_key is None else api_key
        self.model = model or config.LLM_MODEL

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def complete(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        if not self.configured:
            raise LLMError("LLM_API_KEY is not set")

        try:
            async with client_session(self._client) as client:
                resp = await client.post(
                    f"{self.base_url}/chat/completions",
                    json={"model": self.model, "messages": messages},
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    timeout=max(config.HTTP_TIMEOUT_SECONDS, 60),
                )
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"[LLM] Completion failed with status {e.response.status_code}")
            raise LLMError(f"chat completion failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"[LLM] Completion request failed: {e}")
            raise LLMError(f"chat completion request failed: {e}") from e
        except ValueError as e:
            raise LLMError("chat completion response is not JSON") from e
