# src/probe/services/http_request_service.py
import asyncio
import logging
from typing import Optional

import aiohttp

from probe.errors import BodyReadError, FetchError
from probe.model import DEFAULT_USER_AGENT, FetchResult

logger = logging.getLogger(__name__)


class HttpRequestService:
    """
    Executes the single deep ping GET request.
    Manages the aiohttp session and wraps transport failures in FetchError.
    """

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, timeout: Optional[float] = None):
        self.user_agent = user_agent
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        if not self.session or self.session.closed:
            # The connection is never reused, so don't let it hang open
            connector = aiohttp.TCPConnector(force_close=True)
            timeout_obj = aiohttp.ClientTimeout(total=self.timeout)
            self.session = aiohttp.ClientSession(
                connector=connector,
                timeout=timeout_obj,
                headers={'User-Agent': self.user_agent},
            )
            logger.debug("HttpRequestService: Session initialized.")

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
            logger.debug("HttpRequestService: Session closed.")

    async def fetch(self, url: str) -> FetchResult:
        """
        Sends the GET request and reads the full body.
        Certificates are not verified for https URLs; validating them is not
        the job of this check.
        """
        if not self.session or self.session.closed:
            await self.initialize()

        verify_ssl = not url.lower().startswith("https")
        try:
            async with self.session.get(url, ssl=verify_ssl) as response:
                try:
                    body = await response.read()
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    raise BodyReadError(f"Reading body of {url} failed: {str(e) or type(e).__name__}",
                                        status=response.status) from e
                logger.debug("GET %s -> %s (%d bytes)", url, response.status, len(body))
                return FetchResult(status=response.status, body=body)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(f"GET {url} failed: {str(e) or type(e).__name__}") from e
