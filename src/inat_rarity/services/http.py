"""
Shared HTTP client with an explicit retry policy.

Provides a pre-configured ``requests.Session`` that retries transient failures
(connection errors, 429 and 5xx gateway statuses) with capped exponential
backoff, honours ``Retry-After``, and sends the client's identifying headers on
every request. All API access goes through this session.

Usage::

    from inat_rarity.services.http import session

    resp = session.get("https://api.inaturalist.org/v1/taxa/1", timeout=30)
"""

from __future__ import annotations

from itertools import takewhile
from typing import TYPE_CHECKING

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from inat_rarity import __version__
from inat_rarity.config import get_settings

if TYPE_CHECKING:
    from inat_rarity.config import Settings

#: Statuses worth another attempt: rate limiting and transient server errors.
RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})

DEFAULT_TIMEOUT: tuple[float, float] = (10.0, 30.0)  # (connect, read) seconds
USER_AGENT = f"inat-rarity/{__version__}"


class RetryPolicy(Retry):
    """urllib3 retry strategy with backoff that starts at ``backoff_factor``.

    Stock urllib3 skips the sleep before the first retry. Here the n-th
    consecutive failure waits ``backoff_factor * 2 ** (n - 1)`` seconds, capped
    at ``backoff_max``. A ``Retry-After`` header on the response still takes
    precedence (see ``Retry.sleep``).
    """

    def get_backoff_time(self) -> float:
        consecutive = len(
            list(takewhile(lambda entry: entry.redirect_location is None, reversed(self.history)))
        )
        if consecutive == 0:
            return 0.0
        backoff = self.backoff_factor * (2 ** (consecutive - 1))
        return float(max(0.0, min(self.backoff_max, backoff)))

    def is_retryable_status(self, status: int) -> bool:
        """True if a response with this status should be attempted again."""
        return status in (self.status_forcelist or ())


def build_retry(
    max_retries: int = 7,
    backoff_base: float = 0.5,
    backoff_max: float = 60.0,
) -> RetryPolicy:
    """Build the retry policy used for every API call."""
    return RetryPolicy(
        total=max_retries,
        backoff_factor=backoff_base,
        backoff_max=backoff_max,
        status_forcelist=sorted(RETRY_STATUSES),
        allowed_methods=["GET", "HEAD"],
        respect_retry_after_header=True,
        raise_on_status=False,  # exhausted retries hand back the last response
    )


#: Default retry strategy (7 retries, 0.5s doubling to a 60s ceiling).
DEFAULT_RETRY = build_retry()


def create_session(
    retry: Retry | None = None,
    timeout: float | tuple[float, float] = DEFAULT_TIMEOUT,
    user_agent: str = USER_AGENT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with retry adapter mounted.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Default timeout applied to every request, either a single
            number or a ``(connect, read)`` pair.
        user_agent: Identifying client signature sent with every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = user_agent
    s.headers["Accept"] = "application/json"

    # Inject a default timeout so callers don't need to pass ``timeout=``.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


def session_from_settings(settings: Settings) -> requests.Session:
    """Build a session whose retry policy and timeouts come from ``settings``."""
    return create_session(
        retry=build_retry(settings.max_retries, settings.backoff_base, settings.backoff_max),
        timeout=(settings.connect_timeout, settings.read_timeout),
        user_agent=settings.user_agent,
    )


#: Module-level session: import and use directly.
session: requests.Session = session_from_settings(get_settings())
