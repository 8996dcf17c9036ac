"""
Prefect flow that builds a user's rarity tables.

Lists the user's species, batch-fetches global counts, runs the bounded
recency scan for every taxon the cache hasn't seen, ranks, and writes the two
CSV tables. The recency cache is written after every scanned taxon, so a
re-run after an interruption picks up where the last one stopped.

Run locally:
    python -m inat_rarity.flows.report <username> [output_dir]
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

from prefect import flow, task

from inat_rarity.analysis.rarity import TOP_N, build_report
from inat_rarity.datasources import inaturalist
from inat_rarity.datasources.inaturalist.client import DEFAULT_MIN_DELAY
from inat_rarity.datasources.inaturalist.observations import DEFAULT_MAX_PAGES
from inat_rarity.datasources.inaturalist.taxa import DEFAULT_BATCH_SIZE
from inat_rarity.errors import ConfigurationError
from inat_rarity.schemas import RarityReport, RecencyRecord, SpeciesSummary
from inat_rarity.store import RecencyCache, cache_path
from inat_rarity.tables import least_observed_path, oldest_seen_path, write_table


def prepare_output_dir(username: str, output_dir: Path) -> Path:
    """Validate the run inputs and make sure ``output_dir`` exists.

    Raises:
        ConfigurationError: Blank username, or a directory that can't be
            created or written to.
    """
    if not username or not username.strip():
        msg = "A username is required"
        raise ConfigurationError(msg)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"Failed to create output dir: {output_dir} ({exc})"
        raise ConfigurationError(msg) from exc
    if not output_dir.is_dir():
        msg = f"Output path is not a directory: {output_dir}"
        raise ConfigurationError(msg)
    if not os.access(output_dir, os.W_OK | os.X_OK):
        msg = f"Output dir is not writable: {output_dir}"
        raise ConfigurationError(msg)
    return output_dir


@task(name="list-user-species")
def list_species(username: str, min_delay: float = DEFAULT_MIN_DELAY) -> list[SpeciesSummary]:
    """Fetch the user's full species list."""
    return inaturalist.list_user_species(username, min_delay=min_delay)


@task(name="fetch-global-counts")
def fetch_counts(
    taxon_ids: list[int],
    batch_size: int = DEFAULT_BATCH_SIZE,
    min_delay: float = DEFAULT_MIN_DELAY,
) -> dict[int, int]:
    """Fetch platform-wide observation counts in batches."""
    return inaturalist.fetch_global_counts(taxon_ids, batch_size, min_delay=min_delay)


@task(name="scan-recency")
def scan_recency(
    species: list[SpeciesSummary],
    username: str,
    cache_file: Path,
    max_pages: int = DEFAULT_MAX_PAGES,
    min_delay: float = DEFAULT_MIN_DELAY,
) -> tuple[dict[int, RecencyRecord], int]:
    """Run the bounded recency scan for every uncached taxon.

    Each result is written through to the cache before the next scan starts.
    Taxa already in the cache are skipped, whatever their stored value.

    Returns:
        All recency records, and how many were already cached beforehand.
    """
    cache = RecencyCache.open(cache_file)
    already_cached = len(cache)
    if already_cached:
        print(f"Loaded cache with {already_cached} taxa")

    total = len(species)
    for idx, s in enumerate(species, start=1):
        if s.taxon_id in cache:
            continue
        print(
            f"[{idx}/{total}] scanning other-observer last seen for "
            f"{s.taxon_id} {s.scientific_name}..."
        )
        record = inaturalist.find_most_recent_other_observation(
            s.taxon_id, username, max_pages, min_delay=min_delay
        )
        cache.put(s.taxon_id, record)

    return cache.as_dict(), already_cached


@task(name="write-tables")
def write_tables(report: RarityReport, username: str, output_dir: Path) -> tuple[Path, Path]:
    """Write both rankings as CSV."""
    least = write_table(least_observed_path(output_dir, username), report.least_observed)
    oldest = write_table(oldest_seen_path(output_dir, username), report.oldest_seen)
    return least, oldest


@flow(name="rarity-report", log_prints=True)
def rarity_report(
    username: str,
    output_dir: Path = Path(),
    min_delay: float = DEFAULT_MIN_DELAY,
    max_pages: int = DEFAULT_MAX_PAGES,
    batch_size: int = DEFAULT_BATCH_SIZE,
    top_n: int = TOP_N,
) -> dict[str, Any]:
    """
    Build the least observed and oldest seen by others tables for a user.

    Returns:
        Summary with species/count/scan totals and the written file paths.
    """
    output_dir = prepare_output_dir(username, Path(output_dir))
    if batch_size < 1:
        msg = f"batch_size must be at least 1, got {batch_size}"
        raise ConfigurationError(msg)

    print(f"Fetching species_counts for {username}...")
    species = list_species(username, min_delay)
    print(f"Found {len(species)} taxa")

    print(f"Fetching global observation counts in batches of {batch_size}...")
    counts = fetch_counts([s.taxon_id for s in species], batch_size, min_delay)

    cache_file = cache_path(output_dir, username)
    records, already_cached = scan_recency(species, username, cache_file, max_pages, min_delay)

    report = build_report(species, counts, records, username=username, top_n=top_n)
    least_path, oldest_path = write_tables(report, username, output_dir)
    print(f"Done.\n- {least_path}\n- {oldest_path}\nCache:\n- {cache_file}")

    return {
        "species": len(species),
        "counted": len(counts),
        "cached": already_cached,
        "scanned": len(records) - already_cached,
        "least_observed_path": str(least_path),
        "oldest_seen_path": str(oldest_path),
        "cache_path": str(cache_file),
    }


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m inat_rarity.flows.report <username> [output_dir]", file=sys.stderr)
        sys.exit(1)
    result = rarity_report(sys.argv[1], Path(sys.argv[2]) if len(sys.argv) > 2 else Path())
    print(f"Flow complete: {result}")
