from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from waitwise import config


@asynccontextmanager
async def client_session(client: Optional[httpx.AsyncClient] = None) -> AsyncIterator[httpx.AsyncClient]:
    """Use the shared client when one is given, otherwise a short-lived one."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(
        timeout=config.HTTP_TIMEOUT_SECONDS,
        headers={"User-Agent": config.USER_AGENT},
        follow_redirects=True,
    ) as fresh:
        yield fresh
