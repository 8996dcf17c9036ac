"""
Domain models for inat-rarity.

Pydantic models for data from the iNaturalist API and internal processing.
These define the canonical schema - datasources normalize API responses to
these, the cache store persists ``RecencyRecord`` and the CSV tables are
produced from ``EnrichedRecord``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Species
# =============================================================================


class SpeciesSummary(BaseModel):
    """One taxon observed by the user, from the species_counts endpoint."""

    model_config = ConfigDict(frozen=True)

    taxon_id: int
    taxon_rank: str = ""
    scientific_name: str = ""
    common_name: str | None = None
    user_observation_count: int = Field(default=0, ge=0)

    @property
    def display_name(self) -> str:
        """Common name if available, else scientific."""
        return self.common_name or self.scientific_name


#: taxon id -> platform-wide observation count. Missing ids count as 0.
TaxonGlobalCount = dict[int, int]


# =============================================================================
# Recency
# =============================================================================


class RecencyRecord(BaseModel):
    """Most recent observation of a taxon by someone other than the user.

    All fields are None when the bounded scan found nobody else. Presence of a
    record in the cache means the scan ran; it is never repeated.
    """

    model_config = ConfigDict(frozen=True)

    last_other_observed_at: datetime | None = None
    last_other_observation_id: int | None = None
    last_other_observer_login: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        # Cache files store missing values as empty strings
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("last_other_observed_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @classmethod
    def empty(cls) -> RecencyRecord:
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.last_other_observed_at is None

    def to_cache(self) -> dict[str, str]:
        """Serialize for the cache file; missing values become ``""``."""
        return {
            "last_other_observed_at": (
                self.last_other_observed_at.isoformat() if self.last_other_observed_at else ""
            ),
            "last_other_observation_id": (
                str(self.last_other_observation_id)
                if self.last_other_observation_id is not None
                else ""
            ),
            "last_other_observer_login": self.last_other_observer_login or "",
        }


# =============================================================================
# Report rows
# =============================================================================


class EnrichedRecord(BaseModel):
    """A species joined with its global count and recency record."""

    model_config = ConfigDict(frozen=True)

    username: str
    taxon_id: int
    taxon_rank: str = ""
    scientific_name: str = ""
    common_name: str | None = None
    user_observation_count: int = 0
    global_observation_count: int = 0
    recency: RecencyRecord = Field(default_factory=RecencyRecord)

    @classmethod
    def join(
        cls,
        username: str,
        species: SpeciesSummary,
        global_count: int = 0,
        recency: RecencyRecord | None = None,
    ) -> EnrichedRecord:
        return cls(
            username=username,
            taxon_id=species.taxon_id,
            taxon_rank=species.taxon_rank,
            scientific_name=species.scientific_name,
            common_name=species.common_name,
            user_observation_count=species.user_observation_count,
            global_observation_count=global_count,
            recency=recency or RecencyRecord.empty(),
        )

    @property
    def last_other_observed_at(self) -> datetime | None:
        return self.recency.last_other_observed_at

    def to_row(self) -> dict[str, str | int]:
        """Flatten into the CSV column mapping."""
        return {
            "username": self.username,
            "taxon_id": self.taxon_id,
            "taxon_rank": self.taxon_rank,
            "scientific_name": self.scientific_name,
            "common_name": self.common_name or "",
            "user_observation_count": self.user_observation_count,
            "global_observation_count": self.global_observation_count,
            **self.recency.to_cache(),
        }


class RarityReport(NamedTuple):
    """The two ranked top-N slices produced by the ranker.

    Unpacks as ``least, oldest = build_report(...)``.
    """

    least_observed: list[EnrichedRecord]
    oldest_seen: list[EnrichedRecord]
