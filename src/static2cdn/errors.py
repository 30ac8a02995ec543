"""Exceptions raised by the asset analyzer."""


class AnalysisError(Exception):
    """Base class for failures that end an analysis run."""


class ConfigurationError(AnalysisError):
    """Raised before any work starts when the run cannot be configured."""


class TransportError(Exception):
    """A single page could not be fetched (timeout, refused, too many redirects)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
