"""
Tests for the HTML render flow.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from inat_rarity.datasources.inaturalist.observations import ObservationPhoto
from inat_rarity.datasources.inaturalist.users import UserProfile
from inat_rarity.errors import ConfigurationError
from inat_rarity.flows import render
from inat_rarity.schemas import EnrichedRecord, RecencyRecord
from inat_rarity.tables import least_observed_path, oldest_seen_path, write_table


def _write_tables(output_dir: Path) -> None:
    least = [
        EnrichedRecord(username="jay", taxon_id=1, scientific_name="Rarus", global_observation_count=2)
    ]
    oldest = [
        EnrichedRecord(
            username="jay",
            taxon_id=2,
            scientific_name="Vetus",
            recency=RecencyRecord.model_validate(
                {
                    "last_other_observed_at": "2011-01-01T00:00:00Z",
                    "last_other_observation_id": "99",
                    "last_other_observer_login": "alice",
                }
            ),
        ),
        EnrichedRecord(username="jay", taxon_id=3, scientific_name="Nemo"),
    ]
    write_table(least_observed_path(output_dir, "jay"), least)
    write_table(oldest_seen_path(output_dir, "jay"), oldest)


class TestLoadTables:
    def test_missing_csv(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Missing required CSV"):
            render.load_tables("jay", tmp_path)

    def test_reads_both(self, tmp_path: Path) -> None:
        _write_tables(tmp_path)
        least, oldest = render.load_tables("jay", tmp_path)
        assert [r["taxon_id"] for r in least] == ["1"]
        assert [r["taxon_id"] for r in oldest] == ["2", "3"]


@patch("inat_rarity.datasources.inaturalist.fetch_observation")
@patch("inat_rarity.datasources.inaturalist.fetch_user_latest_observation")
@patch("inat_rarity.datasources.inaturalist.fetch_user_profile")
class TestRenderReportFlow:
    def test_writes_html(
        self, mock_profile: Mock, mock_latest: Mock, mock_obs: Mock, tmp_path: Path
    ) -> None:
        _write_tables(tmp_path)
        mock_profile.return_value = UserProfile(login="jay")
        mock_latest.return_value = ObservationPhoto(
            id=5, photo_url="https://x/own.jpg", observed_on="2024-01-01", login="jay"
        )
        mock_obs.return_value = ObservationPhoto(
            id=99, photo_url="https://x/other.jpg", observed_on="2011-01-01", login="alice"
        )

        result = render.render_report("jay", tmp_path, min_delay=0)

        out = Path(result["report_path"])
        assert out == tmp_path / "jay_inat_report.html"
        html = out.read_text()
        assert "https://x/own.jpg" in html
        assert "https://x/other.jpg" in html
        assert "by @alice" in html
        mock_latest.assert_called_once_with("jay", 1, min_delay=0)
        # Only the row with an observation id is looked up
        mock_obs.assert_called_once_with(99, min_delay=0)
        assert result["oldest_seen"] == 1

    def test_missing_tables(
        self, mock_profile: Mock, mock_latest: Mock, mock_obs: Mock, tmp_path: Path
    ) -> None:
        with pytest.raises(ConfigurationError):
            render.render_report("jay", tmp_path, min_delay=0)
        mock_profile.assert_not_called()
