"""iNaturalist data source for rarity reports.

Public API:
  - client: Low-level HTTP (paced, JSON-or-TransportError) and endpoint helpers
  - species: list_user_species
  - taxa: fetch_global_counts, fetch_batch_counts
  - observations: find_most_recent_other_observation, ObservationPhoto,
    fetch_user_latest_observation, fetch_observation
  - users: UserProfile, fetch_user_profile
"""

from inat_rarity.datasources.inaturalist.observations import (
    ObservationPhoto,
    fetch_observation,
    fetch_user_latest_observation,
    find_most_recent_other_observation,
)
from inat_rarity.datasources.inaturalist.species import list_user_species
from inat_rarity.datasources.inaturalist.taxa import fetch_batch_counts, fetch_global_counts
from inat_rarity.datasources.inaturalist.users import UserProfile, fetch_user_profile

__all__ = [
    "ObservationPhoto",
    "UserProfile",
    "fetch_batch_counts",
    "fetch_global_counts",
    "fetch_observation",
    "fetch_user_latest_observation",
    "fetch_user_profile",
    "find_most_recent_other_observation",
    "list_user_species",
]
