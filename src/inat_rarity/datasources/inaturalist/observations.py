"""Observation lookups: the bounded recency scan and report photo lookups."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from typing import Any

from inat_rarity.datasources.inaturalist import client
from inat_rarity.schemas import RecencyRecord

DEFAULT_MAX_PAGES = 8  # x SCAN_PAGE_SIZE = at most 80 observations per taxon

_SQUARE_PHOTO = re.compile(r"/square\.")

# =============================================================================
# Data Model
# =============================================================================


@dataclass
class ObservationPhoto:
    """An observation reduced to what the report shows for it."""

    id: int
    photo_url: str | None
    observed_on: str
    login: str

    @property
    def url(self) -> str:
        return client.observation_url(self.id)


# =============================================================================
# Parsing
# =============================================================================


def parse_observed_at(obs: dict[str, Any]) -> datetime | None:
    """Best timestamp for an observation.

    Prefers the precise ``time_observed_at``, keeping the observer's UTC
    offset (naive values are taken as UTC); falls back to the date-only
    ``observed_on`` at midnight UTC. Returns None if neither parses.
    """
    precise = obs.get("time_observed_at")
    if precise:
        try:
            parsed = datetime.fromisoformat(precise)
        except ValueError:
            pass
        else:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=UTC)
            return parsed

    observed_on = obs.get("observed_on")
    if observed_on:
        try:
            day = date.fromisoformat(observed_on)
        except ValueError:
            return None
        return datetime.combine(day, time.min, tzinfo=UTC)
    return None


def medium_photo_url(url: str | None) -> str | None:
    """Swap a ``square`` thumbnail URL for the ``medium`` rendition."""
    if not url:
        return None
    return _SQUARE_PHOTO.sub("/medium.", url)


def _observer_login(obs: dict[str, Any]) -> str:
    return str((obs.get("user") or {}).get("login") or "")


def _parse_observation_photo(obs: dict[str, Any]) -> ObservationPhoto:
    photos = obs.get("photos") or []
    return ObservationPhoto(
        id=int(obs["id"]),
        photo_url=medium_photo_url(photos[0].get("url")) if photos else None,
        observed_on=obs.get("observed_on") or "",
        login=_observer_login(obs),
    )


# =============================================================================
# Recency scan
# =============================================================================


def find_most_recent_other_observation(
    taxon_id: int,
    excluded_username: str,
    max_pages: int = DEFAULT_MAX_PAGES,
    *,
    min_delay: float = client.DEFAULT_MIN_DELAY,
) -> RecencyRecord:
    """
    Find the newest observation of a taxon made by anyone but ``excluded_username``.

    Walks observations newest-first, ``SCAN_PAGE_SIZE`` per page, for at most
    ``max_pages`` pages and stops at the first observer whose login differs
    (case-insensitively). The scan is bounded on purpose: popular taxa would
    otherwise cost thousands of requests. An older match beyond the window is
    not found and the record comes back empty.

    Args:
        taxon_id: Taxon to scan.
        excluded_username: Login whose observations are skipped.
        max_pages: Hard ceiling on requests for this taxon.
        min_delay: Minimum seconds between API calls.

    Returns:
        RecencyRecord for the first match, or an empty record.
    """
    excluded = excluded_username.casefold()
    for page in range(1, max_pages + 1):
        data = client.get_observations(
            {
                "taxon_id": taxon_id,
                "order": "desc",
                "order_by": "observed_on",
                "page": page,
                "per_page": client.SCAN_PAGE_SIZE,
            },
            min_delay,
        )
        results: list[dict[str, Any]] = data.get("results") or []
        if not results:
            break

        for obs in results:
            login = _observer_login(obs)
            if login and login.casefold() != excluded:
                return RecencyRecord(
                    last_other_observed_at=parse_observed_at(obs),
                    last_other_observation_id=obs.get("id"),
                    last_other_observer_login=login,
                )

    return RecencyRecord.empty()


# =============================================================================
# Report lookups
# =============================================================================


def fetch_user_latest_observation(
    username: str,
    taxon_id: int,
    *,
    min_delay: float = client.DEFAULT_MIN_DELAY,
) -> ObservationPhoto | None:
    """The user's own most recent observation of a taxon, if any."""
    data = client.get_observations(
        {
            "user_login": username,
            "taxon_id": taxon_id,
            "per_page": 1,
            "order": "desc",
            "order_by": "observed_on",
        },
        min_delay,
    )
    results = data.get("results") or []
    return _parse_observation_photo(results[0]) if results else None


def fetch_observation(
    observation_id: int,
    *,
    min_delay: float = client.DEFAULT_MIN_DELAY,
) -> ObservationPhoto | None:
    """A single observation by id, or None if the API has no such record."""
    data = client.get_observation(observation_id, min_delay)
    results = data.get("results") or []
    return _parse_observation_photo(results[0]) if results else None
