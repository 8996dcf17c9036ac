"""Global observation counts for many taxa, fetched in batches."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any

from inat_rarity.datasources.inaturalist import client
from inat_rarity.errors import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 200  # tune down if the API answers 414 URI Too Long


def chunked(items: Sequence[int], size: int) -> Iterator[list[int]]:
    """Yield consecutive slices of ``items`` with at most ``size`` elements."""
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


def _parse_counts(data: dict[str, Any]) -> dict[int, int]:
    counts: dict[int, int] = {}
    for taxon in data.get("results") or []:
        taxon_id = taxon.get("id")
        if taxon_id:
            counts[int(taxon_id)] = int(taxon.get("observations_count") or 0)
    return counts


def fetch_batch_counts(
    taxon_ids: list[int],
    *,
    min_delay: float = client.DEFAULT_MIN_DELAY,
) -> dict[int, int]:
    """
    Resolve observation counts for one chunk of taxon ids.

    Tries the path form (``/taxa/1,2,3``) first. If that fails or yields
    nothing usable, repeats the lookup in query form (``/taxa?id=1,2,3``),
    which tolerates longer id lists. A chunk that fails both ways resolves to
    an empty mapping; the caller counts those taxa as 0.
    """
    lookups: list[tuple[str, Callable[[list[int], float], dict[str, Any]]]] = [
        ("path", client.get_taxa),
        ("query", client.search_taxa),
    ]
    for form, lookup in lookups:
        try:
            counts = _parse_counts(lookup(taxon_ids, min_delay))
        except TransportError as exc:
            logger.warning("Taxa %s lookup failed for %d ids: %s", form, len(taxon_ids), exc)
            continue
        if counts:
            return counts
        logger.info("Taxa %s lookup returned no counts for %d ids", form, len(taxon_ids))
    return {}


def fetch_global_counts(
    taxon_ids: Sequence[int],
    batch_size: int = DEFAULT_BATCH_SIZE,
    *,
    min_delay: float = client.DEFAULT_MIN_DELAY,
) -> dict[int, int]:
    """
    Fetch platform-wide observation counts for every taxon id.

    Args:
        taxon_ids: Ids to resolve. Duplicates are looked up once.
        batch_size: Ids per request.
        min_delay: Minimum seconds between API calls.

    Returns:
        Mapping of taxon id to observation count. Unresolved ids are absent.

    Raises:
        ConfigurationError: If ``batch_size`` is less than 1.
    """
    if batch_size < 1:
        msg = f"batch_size must be at least 1, got {batch_size}"
        raise ConfigurationError(msg)

    unique_ids = list(dict.fromkeys(taxon_ids))
    counts: dict[int, int] = {}
    for number, chunk in enumerate(chunked(unique_ids, batch_size), start=1):
        batch = fetch_batch_counts(chunk, min_delay=min_delay)
        counts.update(batch)
        logger.info("batch %d => %d counts", number, len(batch))
    return counts
