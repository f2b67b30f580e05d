"""Exceptions raised across the crawl engine."""


class EngineLaunchError(Exception):
    """Raised when the rendering engine cannot be started. Fatal for the run."""

    def __init__(self, engine: str, original: Exception):
        self.engine = engine
        self.original = original
        super().__init__(f"Failed to launch {engine}: {original}")


class PageLoadError(Exception):
    """Raised when a single page cannot be fetched or rendered."""

    def __init__(self, url: str, reason: str = "no content"):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not load {url}: {reason}")
