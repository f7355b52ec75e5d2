import asyncio
import logging
from typing import Awaitable, TypeVar

from .config import settings
from .exceptions import UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")

async def call_upstream(awaitable: Awaitable[T], name: str) -> T:
    """Await an external collaborator call bounded by the request timeout."""
    try:
        return await asyncio.wait_for(awaitable, timeout=settings.UPSTREAM_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.error(f"{name} timed out after {settings.UPSTREAM_TIMEOUT_SECONDS}s")
        raise UpstreamError()
