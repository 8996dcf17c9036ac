"""
iNaturalist API client.

Low-level HTTP client for the iNaturalist API v1: request pacing, the single
``request_json`` entry point every call goes through, and thin endpoint
helpers. Retries and backoff live in the shared session
(``inat_rarity.services.http``); this module turns what comes back into JSON
or a ``TransportError``.

API docs: https://api.inaturalist.org/v1/docs/
Rate limits: ~1 req/sec sustained, 10k/day
Recommended practices: https://www.inaturalist.org/pages/api+recommended+practices
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import Any

import requests

from inat_rarity.errors import TransportError
from inat_rarity.services.http import RETRY_STATUSES, session

# ---------------------------------------------------------------------------
# API configuration
# ---------------------------------------------------------------------------
API_BASE = "https://api.inaturalist.org/v1"
SITE_BASE = "https://www.inaturalist.org"
SPECIES_PAGE_SIZE = 200  # /observations/species_counts
SCAN_PAGE_SIZE = 10  # /observations, recency scan

# ---------------------------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------------------------
DEFAULT_MIN_DELAY: float = 0.25  # seconds before every call; raise it if you hit 429s


def _rate_limit(min_delay: float) -> None:
    """Sleep ``min_delay`` seconds before a call, however long the last one took."""
    if min_delay > 0:
        time.sleep(min_delay)


def request_json(
    url: str,
    min_delay: float = DEFAULT_MIN_DELAY,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Make a paced GET request and return the decoded JSON object.

    Raises:
        TransportError: Network failure or retryable status after the retry
            policy gave up, any other non-2xx status, or a body that is not a
            JSON object.
    """
    _rate_limit(min_delay)
    try:
        resp = session.get(url, params=params or {})
    except requests.RequestException as exc:
        raise TransportError(f"Request failed: {exc}", url=url) from exc

    status = resp.status_code
    if status in RETRY_STATUSES:
        raise TransportError("Gave up after retries", url=url, status=status, body=resp.text)
    if not 200 <= status < 300:
        raise TransportError("Unexpected HTTP status", url=url, status=status, body=resp.text)

    try:
        data = resp.json()
    except ValueError as exc:
        raise TransportError("Bad JSON", url=url, status=status, body=resp.text) from exc
    if not isinstance(data, dict):
        raise TransportError("Expected a JSON object", url=url, status=status, body=resp.text)
    return data


def _join_ids(ids: Iterable[int]) -> str:
    return ",".join(str(i) for i in ids)


# ---------------------------------------------------------------------------
# Endpoint helpers
# ---------------------------------------------------------------------------


def get_species_counts(params: dict[str, Any], min_delay: float = DEFAULT_MIN_DELAY) -> dict[str, Any]:
    """GET /observations/species_counts: taxa with per-query observation counts."""
    return request_json(f"{API_BASE}/observations/species_counts", min_delay, params)


def get_taxa(taxon_ids: list[int], min_delay: float = DEFAULT_MIN_DELAY) -> dict[str, Any]:
    """GET /taxa/{id,id,...}: batch lookup with the ids in the path."""
    return request_json(
        f"{API_BASE}/taxa/{_join_ids(taxon_ids)}",
        min_delay,
        {"per_page": len(taxon_ids)},
    )


def search_taxa(taxon_ids: list[int], min_delay: float = DEFAULT_MIN_DELAY) -> dict[str, Any]:
    """GET /taxa?id=...: the same batch lookup in query-parameter form."""
    return request_json(
        f"{API_BASE}/taxa",
        min_delay,
        {"id": _join_ids(taxon_ids), "per_page": len(taxon_ids)},
    )


def get_observations(params: dict[str, Any], min_delay: float = DEFAULT_MIN_DELAY) -> dict[str, Any]:
    """GET /observations: search observations."""
    return request_json(f"{API_BASE}/observations", min_delay, params)


def get_observation(observation_id: int, min_delay: float = DEFAULT_MIN_DELAY) -> dict[str, Any]:
    """GET /observations/{id}: a single observation."""
    return request_json(f"{API_BASE}/observations/{observation_id}", min_delay)


def autocomplete_users(query: str, min_delay: float = DEFAULT_MIN_DELAY) -> dict[str, Any]:
    """GET /users/autocomplete: user profiles matching a login prefix."""
    return request_json(f"{API_BASE}/users/autocomplete", min_delay, {"q": query})


def observation_url(observation_id: int | str) -> str:
    return f"{SITE_BASE}/observations/{observation_id}"


def taxon_url(taxon_id: int | str) -> str:
    return f"{SITE_BASE}/taxa/{taxon_id}"


def person_url(login: str) -> str:
    return f"{SITE_BASE}/people/{login}"
