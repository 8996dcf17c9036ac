"""Species observed by a user: paginated species_counts listing."""

from __future__ import annotations

from typing import Any

from inat_rarity.datasources.inaturalist import client
from inat_rarity.schemas import SpeciesSummary


def _parse_species_summary(result: dict[str, Any]) -> SpeciesSummary | None:
    """Parse one species_counts result. Returns None if the taxon has no id."""
    taxon = result.get("taxon") or {}
    taxon_id = taxon.get("id")
    if not taxon_id:
        return None
    return SpeciesSummary(
        taxon_id=int(taxon_id),
        taxon_rank=taxon.get("rank") or "",
        scientific_name=taxon.get("name") or "",
        common_name=taxon.get("preferred_common_name") or None,
        user_observation_count=int(result.get("count") or 0),
    )


def list_user_species(
    username: str,
    *,
    min_delay: float = client.DEFAULT_MIN_DELAY,
) -> list[SpeciesSummary]:
    """
    Fetch every taxon the user has observed, with their per-taxon counts.

    Pages through ``/observations/species_counts`` until a page comes back
    empty. There is no page cap: a user's distinct species list is small
    enough to enumerate in full.

    Args:
        username: iNaturalist login.
        min_delay: Minimum seconds between API calls.

    Returns:
        SpeciesSummary list in API order.
    """
    species: list[SpeciesSummary] = []
    page = 1
    while True:
        data = client.get_species_counts(
            {"user_login": username, "page": page, "per_page": client.SPECIES_PAGE_SIZE},
            min_delay,
        )
        results: list[dict[str, Any]] = data.get("results") or []
        if not results:
            break
        for result in results:
            parsed = _parse_species_summary(result)
            if parsed is not None:
                species.append(parsed)
        page += 1
    return species
