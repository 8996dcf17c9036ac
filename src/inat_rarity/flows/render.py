"""
Prefect flow that renders the HTML report from the rarity tables.

Reads the two CSVs written by ``flows/report.py``, looks up the user's profile
and one photo per row, and writes ``<username>_inat_report.html``.

Run locally:
    python -m inat_rarity.flows.render <username> [output_dir]
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from prefect import flow, task

from inat_rarity.datasources import inaturalist
from inat_rarity.datasources.inaturalist.observations import ObservationPhoto
from inat_rarity.datasources.inaturalist.users import UserProfile
from inat_rarity.errors import ConfigurationError
from inat_rarity.renderers.report import build_report_html
from inat_rarity.tables import least_observed_path, oldest_seen_path, read_table

DEFAULT_RENDER_MIN_DELAY = 0.1


def report_path(output_dir: Path, username: str) -> Path:
    return output_dir / f"{username}_inat_report.html"


@task(name="load-tables")
def load_tables(username: str, output_dir: Path) -> tuple[list[dict[str, str]], list[dict[str, str]]]:
    """Read both CSV tables; both must exist."""
    paths = [least_observed_path(output_dir, username), oldest_seen_path(output_dir, username)]
    for path in paths:
        if not path.is_file():
            msg = f"Missing required CSV: {path}"
            raise ConfigurationError(msg)
    return read_table(paths[0]), read_table(paths[1])


@task(name="fetch-profile")
def fetch_profile(username: str, min_delay: float = DEFAULT_RENDER_MIN_DELAY) -> UserProfile:
    return inaturalist.fetch_user_profile(username, min_delay=min_delay)


@task(name="fetch-least-observed-photos")
def fetch_least_observed_photos(
    username: str,
    rows: list[dict[str, str]],
    min_delay: float = DEFAULT_RENDER_MIN_DELAY,
) -> dict[int, ObservationPhoto | None]:
    """The user's own latest observation for every least observed taxon."""
    photos: dict[int, ObservationPhoto | None] = {}
    for row in rows:
        taxon_id = int(row["taxon_id"])
        photos[taxon_id] = inaturalist.fetch_user_latest_observation(
            username, taxon_id, min_delay=min_delay
        )
    return photos


@task(name="fetch-oldest-seen-photos")
def fetch_oldest_seen_photos(
    rows: list[dict[str, str]],
    min_delay: float = DEFAULT_RENDER_MIN_DELAY,
) -> dict[str, ObservationPhoto | None]:
    """The other observer's observation for every oldest seen row that has one."""
    photos: dict[str, ObservationPhoto | None] = {}
    for row in rows:
        obs_id = row.get("last_other_observation_id", "")
        if obs_id:
            photos[obs_id] = inaturalist.fetch_observation(int(obs_id), min_delay=min_delay)
    return photos


@flow(name="render-report", log_prints=True)
def render_report(
    username: str,
    output_dir: Path = Path(),
    min_delay: float = DEFAULT_RENDER_MIN_DELAY,
) -> dict[str, Any]:
    """
    Render the HTML report for a user whose tables already exist.

    Returns:
        Summary with the report path and card counts.
    """
    if not username or not username.strip():
        msg = "A username is required"
        raise ConfigurationError(msg)
    output_dir = Path(output_dir)

    least_rows, oldest_rows = load_tables(username, output_dir)
    profile = fetch_profile(username, min_delay)

    print(f"Fetching photos for {len(least_rows) + len(oldest_rows)} rows...")
    least_photos = fetch_least_observed_photos(username, least_rows, min_delay)
    oldest_photos = fetch_oldest_seen_photos(oldest_rows, min_delay)

    html = build_report_html(profile, least_rows, oldest_rows, least_photos, oldest_photos)
    out = report_path(output_dir, username)
    out.write_text(html, encoding="utf-8")
    print(f"Wrote HTML report: {out}")

    return {
        "report_path": str(out),
        "least_observed": len(least_rows),
        "oldest_seen": len(oldest_photos),
    }


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m inat_rarity.flows.render <username> [output_dir]", file=sys.stderr)
        sys.exit(1)
    result = render_report(sys.argv[1], Path(sys.argv[2]) if len(sys.argv) > 2 else Path())
    print(f"Flow complete: {result}")
