"""inat-rarity - rarity reports for an iNaturalist observer.

Finds which of a user's species are least recorded platform-wide, and which
have gone longest without anyone else recording them.

Architecture::

    datasources/   iNaturalist API v1 (species lister, taxa counts, recency scan)
    store.py       Resumable per-user cache of recency scan results
    analysis/      Join + ranking (least observed, oldest seen by others)
    tables.py      CSV output tables
    renderers/     Pure data -> HTML (report page)
    flows/         Prefect orchestration (report builds CSVs, render builds HTML)
    services/      Shared utilities (HTTP session with retry policy)

Data flow: datasources -> store (cache) -> analysis -> tables -> renderers
"""

__version__ = "0.1.0"

from inat_rarity.config import Settings

__all__ = ["Settings", "__version__"]
