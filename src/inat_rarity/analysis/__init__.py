"""Cross-datasource analysis.

Pure functions over domain models: no I/O, no Prefect decorators.

- rarity.py - join species + counts + recency cache, rank least observed
  and oldest seen by others
"""

from inat_rarity.analysis.rarity import (
    build_report,
    enrich,
    rank_least_observed,
    rank_oldest_seen,
)

__all__ = ["build_report", "enrich", "rank_least_observed", "rank_oldest_seen"]
