# src/loader/errors.py


class LoaderError(Exception):
    """Raised when a resource cannot be retrieved."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Could not load {url}: {reason}")
        self.url = url
        self.reason = reason


class NoResolverError(LoaderError):
    """Raised when no registered resolver accepts a URL."""

    def __init__(self, url: str):
        super().__init__(url, "no resolver accepts this URL")
