"""
Error taxonomy for the generation engine.

Provider faults (HTTP, auth, transport, unparseable content) are all
``TreeGenError`` subclasses so the orchestrator can fold them into the
mock fallback, while ``test_connection`` reports their message verbatim.
"""

from typing import Optional


class TreeGenError(Exception):
    """Base class for every error raised by the engine."""


class ConfigLoadError(TreeGenError):
    """Persisted provider configuration could not be read or decoded."""


class UnsupportedProvider(TreeGenError):
    """The config names a provider that has no adapter."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__("不支持的服务商")


class ProviderHttpError(TreeGenError):
    """Provider answered with a non-success HTTP status."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"


class ProviderAuthError(ProviderHttpError):
    """Credentials are missing or were rejected by the provider."""

    def __init__(self, message: str, status: int = 401):
        super().__init__(status, message)


class ProviderConnectionError(ProviderHttpError):
    """The request never produced an HTTP response (DNS, reset, timeout)."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(status or 0, message)


class MalformedResponse(TreeGenError):
    """Provider text does not contain a parseable JSON object."""


class UnrecognizedResponseShape(MalformedResponse):
    """Custom endpoint reply has no content in any known field."""
