# src/loader/resolvers/http_resolver.py
import asyncio
import logging
from typing import Optional

import aiohttp

from loader.errors import LoaderError
from loader.model import LoaderSettings
from loader.resolvers.resolver_base import ResolverBase

logger = logging.getLogger(__name__)


class HttpResolver(ResolverBase):
    """
    Fetches http(s) resources.
    Manages the aiohttp session, concurrency (semaphore) and error mapping.
    """

    def __init__(self, settings: Optional[LoaderSettings] = None):
        self.settings = settings or LoaderSettings()
        self.semaphore = asyncio.Semaphore(self.settings.concurrency)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        if not self.session or self.session.closed:
            timeout_obj = aiohttp.ClientTimeout(total=self.settings.timeout)
            default_headers = {
                'Accept-Encoding': 'gzip, deflate',
                'User-Agent': self.settings.user_agent
            }
            self.session = aiohttp.ClientSession(
                timeout=timeout_obj, headers=default_headers
            )
            logger.debug("HttpResolver: Session initialized.")

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
            logger.debug("HttpResolver: Session closed.")

    def accept(self, url: str) -> bool:
        return url.startswith(("http://", "https://"))

    async def load(self, url: str) -> str:
        if not self.session or self.session.closed:
            await self.initialize()

        try:
            async with self.semaphore:
                async with self.session.get(url, max_redirects=self.settings.max_redirects) as response:
                    if not 200 <= response.status < 300:
                        raise LoaderError(url, f"HTTP {response.status}")
                    try:
                        text = await response.text(encoding="utf-8")
                    except UnicodeDecodeError:
                        content_bytes = await response.read()
                        text = content_bytes.decode('utf-8', errors='replace')
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise LoaderError(url, str(e) or type(e).__name__) from e

        logger.debug("HttpResolver: fetched %s (%d chars)", url, len(text))
        return text
