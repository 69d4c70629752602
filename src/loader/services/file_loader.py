# src/loader/services/file_loader.py
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, List, Optional

from loader.errors import NoResolverError
from loader.model import LoaderSettings
from loader.resolvers.fs_resolver import FSResolver
from loader.resolvers.http_resolver import HttpResolver
from loader.resolvers.noop_resolver import NoopResolver
from loader.resolvers.resolver_base import ResolverBase

logger = logging.getLogger(__name__)


class FileLoader:
    """
    Retrieves documents and scripts for the analyzer.

    Resolvers are consulted in registration order; the first one that accepts
    a URL serves it. Every URL is requested at most once per loader: repeated
    and concurrent requests share the same in-flight future.
    """

    def __init__(self, on_loaded: Optional[Callable[[str], None]] = None):
        self.resolvers: List[ResolverBase] = []
        self.requests: Dict[str, asyncio.Future] = {}
        self.on_loaded = on_loaded

    @classmethod
    def from_settings(cls, settings: LoaderSettings, **kwargs) -> "FileLoader":
        """Builds the standard chain: no-op patterns, local root, then HTTP."""
        loader = cls(**kwargs)
        for pattern in settings.noop_patterns:
            loader.add_resolver(NoopResolver(pattern))
        if settings.root:
            loader.add_resolver(FSResolver(settings.root, host=settings.host))
        loader.add_resolver(HttpResolver(settings))
        return loader

    def add_resolver(self, resolver: ResolverBase) -> None:
        self.resolvers.append(resolver)

    def request(self, url: str) -> asyncio.Future:
        """
        Returns a future resolving to the text behind `url`.
        Must be called while an event loop is running.
        """
        future = self.requests.get(url)
        if future is None:
            future = asyncio.ensure_future(self._load(url))
            self.requests[url] = future
        return future

    async def _load(self, url: str) -> str:
        for resolver in self.resolvers:
            if resolver.accept(url):
                logger.debug("Loading %s via %s", url, type(resolver).__name__)
                text = await resolver.load(url)
                if self.on_loaded:
                    self.on_loaded(url)
                return text
        raise NoResolverError(url)

    async def close(self) -> None:
        """Closes resolvers that hold network sessions."""
        for resolver in self.resolvers:
            if isinstance(resolver, HttpResolver):
                await resolver.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
