# src/loader/resolvers/resolver_base.py
from __future__ import annotations

from abc import ABC, abstractmethod


class ResolverBase(ABC):
    """Interface for all URL resolvers used by the FileLoader."""

    @abstractmethod
    def accept(self, url: str) -> bool:  # True = this resolver serves the URL
        """Decide whether this resolver is responsible for `url`."""
        raise NotImplementedError

    @abstractmethod
    async def load(self, url: str) -> str:
        """Return the UTF-8 text behind `url` or raise LoaderError."""
        raise NotImplementedError
