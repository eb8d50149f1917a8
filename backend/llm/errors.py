"""
Provider error taxonomy.

Every failure an adapter can report for a single model derives from
ProviderError.  Cancellation is deliberately outside that hierarchy so
callers that catch ProviderError never mistake a disconnect for a
provider failure.
"""

from typing import Optional


class ProviderError(Exception):
    """Base class for failures scoped to one provider call."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider


class MissingCredentialError(ProviderError):
    """The provider's API key is not configured.

    Raised before any network call is attempted.
    """

    def __init__(self, env_key: str, provider: Optional[str] = None):
        super().__init__(f"{env_key} not configured", provider=provider)
        self.env_key = env_key


class ProviderHTTPError(ProviderError):
    """The provider answered the initial request with a non-2xx status."""

    def __init__(self, status_code: int, body: str, provider: Optional[str] = None):
        super().__init__(f"{status_code}: {body}", provider=provider)
        self.status_code = status_code
        self.body = body


class ProviderStreamError(ProviderError):
    """The provider reported an error inside an otherwise healthy stream."""


class StreamCancelled(Exception):
    """Cooperative cancellation observed while a stream was in flight."""

    def __init__(self, reason: Optional[str] = None):
        super().__init__(reason or "stream cancelled")
        self.reason = reason
