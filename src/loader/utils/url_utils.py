# src/loader/utils/url_utils.py
import logging
from pathlib import PurePosixPath
from urllib.parse import unquote, urljoin, urlparse

logger = logging.getLogger(__name__)


class UrlUtils:
    """A collection of static methods for URL parsing and manipulation."""

    @staticmethod
    def resolve_url(base_url: str, url: str) -> str:
        """
        Resolves a possibly relative reference against the URL of the document
        that contains it. Fragments and query strings are kept as written.
        """
        if isinstance(base_url, bytes):
            base_url = base_url.decode('utf-8')
        if isinstance(url, bytes):
            url = url.decode('utf-8')
        return urljoin(base_url, url.strip())

    @staticmethod
    def is_relative_url(url: str) -> bool:
        """
        Checks if a URL is relative.
        """
        try:
            parsed = urlparse(url)
            return not parsed.scheme and not parsed.netloc
        except ValueError:
            return False

    @staticmethod
    def url_path(url: str) -> PurePosixPath:
        """
        Returns the decoded path component of a URL, without query or fragment.
        An empty path becomes '/'.
        """
        path = unquote(urlparse(url).path) or '/'
        return PurePosixPath(path)

    @staticmethod
    def host_of(url: str) -> str:
        try:
            return urlparse(url).netloc.lower()
        except ValueError:
            logger.debug(f"Could not parse invalid URL: {url}")
            return ""
