"""Exception types raised by inat-rarity."""

from __future__ import annotations

#: How much of a response body to keep in error messages.
BODY_EXCERPT_CHARS = 500


class InatRarityError(Exception):
    """Base class for all inat-rarity errors."""


class TransportError(InatRarityError):
    """A request to the remote API failed for good.

    Raised after retries are exhausted, on a non-retryable HTTP status, or when
    the response body is not a JSON object.
    """

    def __init__(self, message: str, *, url: str, status: int | None = None, body: str = "") -> None:
        self.url = url
        self.status = status
        self.body = body[:BODY_EXCERPT_CHARS]
        detail = f"{message} [url={url}"
        if status is not None:
            detail += f" status={status}"
        detail += "]"
        if self.body:
            detail += f" body: {self.body}"
        super().__init__(detail)


class ConfigurationError(InatRarityError):
    """Invalid run input (missing username, unusable output directory, ...)."""
