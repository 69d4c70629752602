# src/loader/resolvers/noop_resolver.py
from __future__ import annotations

import logging
import re
from typing import Pattern, Union

from loader.resolvers.resolver_base import ResolverBase

logger = logging.getLogger(__name__)


class NoopResolver(ResolverBase):
    """Answers every URL matching `pattern` with an empty document."""

    def __init__(self, pattern: Union[str, Pattern[str]]):
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def accept(self, url: str) -> bool:
        return bool(self.pattern.search(url))

    async def load(self, url: str) -> str:
        logger.debug("NoopResolver: skipping %s", url)
        return ""
