"""CSV output tables.

Both rankings are written with the same column schema so they can be read
back (by the render flow, or a spreadsheet) without knowing which is which.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable
from pathlib import Path  # noqa: TC003

from inat_rarity.schemas import EnrichedRecord

COLUMNS: tuple[str, ...] = (
    "username",
    "taxon_id",
    "taxon_rank",
    "scientific_name",
    "common_name",
    "user_observation_count",
    "global_observation_count",
    "last_other_observed_at",
    "last_other_observation_id",
    "last_other_observer_login",
)


def least_observed_path(output_dir: Path, username: str) -> Path:
    return output_dir / f"{username}_least_observed_species_top20.csv"


def oldest_seen_path(output_dir: Path, username: str) -> Path:
    return output_dir / f"{username}_oldest_last_seen_by_others_top20.csv"


def write_table(path: Path, records: Iterable[EnrichedRecord]) -> Path:
    """Write ranked records to ``path`` (header row included)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=COLUMNS, extrasaction="ignore")
        writer.writeheader()
        for record in records:
            writer.writerow(record.to_row())
    return path


def read_table(path: Path) -> list[dict[str, str]]:
    """Read a table written by ``write_table``; missing columns read as ``""``."""
    with path.open(newline="", encoding="utf-8") as f:
        return [
            {column: row.get(column) or "" for column in COLUMNS}
            for row in csv.DictReader(f)
        ]
