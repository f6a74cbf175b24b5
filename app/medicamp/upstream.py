import asyncio
import logging

from medicamp.constant_file import UPSTREAM_TIMEOUT

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """A third-party API refused or failed the call."""

    def __init__(self, service: str, message: str, status_code: int = None):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status_code = status_code


class UpstreamTimeout(UpstreamError):
    pass


async def call_upstream(service: str, fn, *args, timeout: float = UPSTREAM_TIMEOUT, **kwargs):
    """Run a blocking client call off the event loop, bounded by `timeout` seconds."""
    try:
        return await asyncio.wait_for(asyncio.to_thread(fn, *args, **kwargs), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("%s did not answer within %ss", service, timeout)
        raise UpstreamTimeout(service, f"no answer within {timeout}s")
