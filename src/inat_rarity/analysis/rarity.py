"""Join species with counts and recency records, then rank them.

Two independent orderings come out of the same joined rows:

- least observed: fewest platform-wide observations first
- oldest seen by others: longest since anyone else recorded the taxon

Both sorts carry explicit tie-breaks so identical inputs always produce
identical output.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from inat_rarity.schemas import (
    EnrichedRecord,
    RarityReport,
    RecencyRecord,
    SpeciesSummary,
)

TOP_N = 20


def enrich(
    username: str,
    species: Iterable[SpeciesSummary],
    counts: Mapping[int, int],
    cache: Mapping[int, RecencyRecord],
) -> list[EnrichedRecord]:
    """Join each species with its count (default 0) and recency (default empty)."""
    return [
        EnrichedRecord.join(
            username,
            s,
            global_count=counts.get(s.taxon_id, 0),
            recency=cache.get(s.taxon_id),
        )
        for s in species
    ]


def rank_least_observed(records: Iterable[EnrichedRecord], top_n: int = TOP_N) -> list[EnrichedRecord]:
    """Ascending global count, then scientific name, then taxon id."""
    ordered = sorted(
        records,
        key=lambda r: (r.global_observation_count, r.scientific_name, r.taxon_id),
    )
    return ordered[:top_n]


def rank_oldest_seen(records: Iterable[EnrichedRecord], top_n: int = TOP_N) -> list[EnrichedRecord]:
    """Oldest last-seen-by-others first.

    Records without a timestamp are left out entirely: "nobody else within the
    scan window" is not ranked as infinitely old.
    """
    seen = [r for r in records if r.last_other_observed_at is not None]
    ordered = sorted(
        seen,
        key=lambda r: (r.last_other_observed_at, r.scientific_name, r.taxon_id),
    )
    return ordered[:top_n]


def build_report(
    species: Iterable[SpeciesSummary],
    counts: Mapping[int, int],
    cache: Mapping[int, RecencyRecord],
    *,
    username: str = "",
    top_n: int = TOP_N,
) -> RarityReport:
    """
    Build both rankings for one user.

    Args:
        species: The user's species list.
        counts: Global observation counts by taxon id.
        cache: Recency records by taxon id.
        username: Login stamped on every row.
        top_n: Size of each ranking.

    Returns:
        ``(least_observed, oldest_seen)`` as a RarityReport named tuple.
    """
    records = enrich(username, species, counts, cache)
    return RarityReport(rank_least_observed(records, top_n), rank_oldest_seen(records, top_n))
