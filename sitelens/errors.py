"""Error taxonomy for the website analysis pipeline."""

from typing import Optional


class SiteLensError(Exception):
    """Base class for all errors raised by the analysis pipeline."""


class InvalidInputError(SiteLensError, ValueError):
    """The URL handed to the analyzer is malformed or uses a disallowed scheme.

    Raised before any network call is made.
    """


class ConfigurationError(SiteLensError):
    """A required setting (e.g. the provider API key) is missing."""


class ProviderError(SiteLensError):
    """The scraping provider returned a non-2xx response or could not be reached.

    ``status_code`` is ``None`` for transport-level failures (DNS, connect,
    timeout).  ``body`` carries the raw provider error text for diagnostics;
    it is meant for logs, not for end users.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProviderTimeoutError(ProviderError):
    """The provider did not answer (or a crawl job did not finish) in time."""
