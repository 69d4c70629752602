# src/loader/resolvers/fs_resolver.py
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

from loader.errors import LoaderError
from loader.resolvers.resolver_base import ResolverBase
from loader.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)


class FSResolver(ResolverBase):
    """
    Serves documents from a local directory.

    Accepts `file://` URLs, scheme-less paths and, when `host` is given,
    `http(s)://<host>/...` URLs, which are mapped onto `root` so a site can
    be analyzed from a checkout without a web server. Whatever the scheme,
    only files under `root` are served.
    """

    def __init__(self, root: Union[str, Path], host: Optional[str] = None):
        self.root = Path(root).resolve()
        self.host = host.lower() if host else None

    def accept(self, url: str) -> bool:
        if url.startswith("file://") or UrlUtils.is_relative_url(url):
            return True
        if self.host and url.startswith(("http://", "https://")):
            return UrlUtils.host_of(url) == self.host
        return False

    def to_path(self, url: str) -> Path:
        """Maps a URL onto a file under `root`."""
        if url.startswith("file://"):
            path = Path(str(UrlUtils.url_path(url))).resolve()
        else:
            relative = str(UrlUtils.url_path(url)).lstrip("/")
            path = (self.root / relative).resolve()
        if path != self.root and self.root not in path.parents:
            raise LoaderError(url, f"path escapes the served root {self.root}")
        return path

    async def load(self, url: str) -> str:
        path = self.to_path(url)
        if not path.is_file():
            raise LoaderError(url, f"no such file {path}")
        logger.debug("FSResolver: reading %s", path)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LoaderError(url, str(e)) from e
