"""Rarity report HTML page renderer.

Builds one self-contained page with a card grid per ranking: the user's
least observed species, and the species whose latest sighting by someone
else is oldest.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from inat_rarity.datasources.inaturalist.client import observation_url, taxon_url
from inat_rarity.datasources.inaturalist.observations import ObservationPhoto
from inat_rarity.datasources.inaturalist.users import UserProfile
from inat_rarity.renderers import render_template


def _names(row: Mapping[str, str]) -> tuple[str, str]:
    scientific = row.get("scientific_name", "")
    return row.get("common_name") or scientific, scientific


def build_least_observed_cards(
    rows: Sequence[Mapping[str, str]],
    photos: Mapping[int, ObservationPhoto | None],
) -> list[dict[str, Any]]:
    """Cards for the least observed table.

    ``photos`` maps taxon id to the user's own latest observation of it.
    """
    cards = []
    for row in rows:
        taxon_id = int(row["taxon_id"])
        title, scientific = _names(row)
        obs = photos.get(taxon_id)
        cards.append(
            {
                "title": title,
                "scientific_name": scientific,
                "taxon_url": taxon_url(taxon_id),
                "photo_url": obs.photo_url if obs else None,
                "pills": [
                    f"Global: {row.get('global_observation_count', '0')}",
                    f"Yours: {row.get('user_observation_count', '0')}",
                ],
                "link_url": obs.url if obs else None,
                "link_text": "View your observation",
                "byline": None,
            }
        )
    return cards


def build_oldest_seen_cards(
    rows: Sequence[Mapping[str, str]],
    photos: Mapping[str, ObservationPhoto | None],
) -> list[dict[str, Any]]:
    """Cards for the oldest seen by others table.

    ``photos`` maps observation id to that observation. Rows without an
    observation id have nothing to link to and are skipped.
    """
    cards = []
    for row in rows:
        obs_id = row.get("last_other_observation_id", "")
        if not obs_id:
            continue
        title, scientific = _names(row)
        obs = photos.get(obs_id)
        login = (obs.login if obs else "") or row.get("last_other_observer_login", "")
        cards.append(
            {
                "title": title,
                "scientific_name": scientific,
                "taxon_url": taxon_url(row["taxon_id"]),
                "photo_url": obs.photo_url if obs else None,
                "pills": [f"Last seen: {row.get('last_other_observed_at', '')}"],
                "link_url": observation_url(obs_id),
                "link_text": "View observation",
                "byline": f"by @{login}" if login else None,
            }
        )
    return cards


def build_report_html(
    profile: UserProfile,
    least_rows: Sequence[Mapping[str, str]],
    oldest_rows: Sequence[Mapping[str, str]],
    least_photos: Mapping[int, ObservationPhoto | None] | None = None,
    oldest_photos: Mapping[str, ObservationPhoto | None] | None = None,
) -> str:
    """Render the full report page."""
    return render_template(
        "report.html.j2",
        profile=profile,
        least_cards=build_least_observed_cards(least_rows, least_photos or {}),
        oldest_cards=build_oldest_seen_cards(oldest_rows, oldest_photos or {}),
    )
