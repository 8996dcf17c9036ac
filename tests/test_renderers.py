"""Tests for the HTML report renderer."""

from __future__ import annotations

from inat_rarity.datasources.inaturalist.observations import ObservationPhoto
from inat_rarity.datasources.inaturalist.users import UserProfile
from inat_rarity.renderers.report import (
    build_least_observed_cards,
    build_oldest_seen_cards,
    build_report_html,
)

LEAST_ROWS = [
    {
        "taxon_id": "101",
        "scientific_name": "Rarus maximus",
        "common_name": "Great Rarity",
        "global_observation_count": "3",
        "user_observation_count": "1",
    },
    {
        "taxon_id": "102",
        "scientific_name": "Obscura minor",
        "common_name": "",
        "global_observation_count": "5",
        "user_observation_count": "2",
    },
]

OLDEST_ROWS = [
    {
        "taxon_id": "201",
        "scientific_name": "Vetus antiquus",
        "common_name": "Old One",
        "last_other_observed_at": "2009-07-01T00:00:00+00:00",
        "last_other_observation_id": "9001",
        "last_other_observer_login": "csvlogin",
    },
    {
        "taxon_id": "202",
        "scientific_name": "Sine id",
        "common_name": "",
        "last_other_observed_at": "2010-01-01T00:00:00+00:00",
        "last_other_observation_id": "",
        "last_other_observer_login": "",
    },
]

PHOTO = ObservationPhoto(
    id=9001,
    photo_url="https://static.inaturalist.org/photos/1/medium.jpg",
    observed_on="2009-07-01",
    login="alice",
)


class TestLeastObservedCards:
    def test_card_content(self) -> None:
        own = ObservationPhoto(id=5, photo_url="https://x/5.jpg", observed_on="", login="jay")
        cards = build_least_observed_cards(LEAST_ROWS, {101: own, 102: None})
        assert cards[0]["title"] == "Great Rarity"
        assert cards[0]["pills"] == ["Global: 3", "Yours: 1"]
        assert cards[0]["photo_url"] == "https://x/5.jpg"
        assert cards[0]["link_url"] == "https://www.inaturalist.org/observations/5"
        assert cards[0]["taxon_url"] == "https://www.inaturalist.org/taxa/101"

    def test_falls_back_to_scientific_name(self) -> None:
        cards = build_least_observed_cards(LEAST_ROWS, {})
        assert cards[1]["title"] == "Obscura minor"
        assert cards[1]["photo_url"] is None
        assert cards[1]["link_url"] is None


class TestOldestSeenCards:
    def test_rows_without_observation_skipped(self) -> None:
        cards = build_oldest_seen_cards(OLDEST_ROWS, {"9001": PHOTO})
        assert len(cards) == 1

    def test_card_content(self) -> None:
        [card] = build_oldest_seen_cards(OLDEST_ROWS, {"9001": PHOTO})
        assert card["pills"] == ["Last seen: 2009-07-01T00:00:00+00:00"]
        assert card["link_url"] == "https://www.inaturalist.org/observations/9001"
        assert card["byline"] == "by @alice"

    def test_byline_from_row_when_lookup_missing(self) -> None:
        [card] = build_oldest_seen_cards(OLDEST_ROWS, {})
        assert card["byline"] == "by @csvlogin"
        assert card["photo_url"] is None


class TestBuildReportHtml:
    def test_full_page(self) -> None:
        profile = UserProfile(login="jay", icon_url="https://x/users/1/medium.jpg")
        html = build_report_html(profile, LEAST_ROWS, OLDEST_ROWS, {}, {"9001": PHOTO})
        assert html.startswith("<!doctype html>")
        assert "iNaturalist report for jay" in html
        assert "https://www.inaturalist.org/people/jay" in html
        assert 'class="avatar"' in html
        assert "Least observed species (globally)" in html
        assert "Great Rarity" in html
        assert "Old One" in html
        assert "Sine id" not in html
        assert PHOTO.photo_url in html

    def test_escapes_text(self) -> None:
        rows = [{**LEAST_ROWS[0], "common_name": "<script>alert(1)</script>"}]
        html = build_report_html(UserProfile(login="jay"), rows, [])
        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html

    def test_empty_tables(self) -> None:
        html = build_report_html(UserProfile(login="jay"), [], [])
        assert html.count("Nothing to show.") == 2
        assert 'class="avatar"' not in html
