"""Resumable cache of recency scan results.

One JSON file per user (``<username>_inat_cache.json``) maps taxon id to the
``RecencyRecord`` found for it::

    {
      "48662": {
        "last_other_observed_at": "2024-05-02T17:14:00+00:00",
        "last_other_observation_id": "212345678",
        "last_other_observer_login": "someone"
      }
    }

The file is loaded once at start-up and rewritten in full after every newly
scanned taxon, so an interrupted run loses at most the scan in flight. A taxon
key being present means "already scanned": it is never scanned again, however
stale the value. Delete the file to force a full re-scan.

Single writer only. Concurrent runs against the same file are last-writer-wins.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path  # noqa: TC003
from typing import Any

from pydantic import ValidationError

from inat_rarity.schemas import RecencyRecord

logger = logging.getLogger(__name__)


def cache_path(output_dir: Path, username: str) -> Path:
    """Location of a user's cache file inside ``output_dir``."""
    return output_dir / f"{username}_inat_cache.json"


def load(path: Path) -> dict[int, RecencyRecord]:
    """Read a cache file into a mapping.

    A missing or unreadable file yields an empty mapping. An entry whose value
    fails validation still counts as scanned and loads as an empty record;
    only keys that aren't taxon ids are dropped. Never raises for bad content.
    """
    if not path.exists():
        return {}
    try:
        with path.open(encoding="utf-8") as f:
            raw: Any = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable cache %s: %s", path, exc)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring cache %s: expected a JSON object", path)
        return {}

    records: dict[int, RecencyRecord] = {}
    for key, value in raw.items():
        try:
            taxon_id = int(key)
        except ValueError:
            logger.warning("Dropping cache entry %r: not a taxon id", key)
            continue
        try:
            records[taxon_id] = RecencyRecord.model_validate(value or {})
        except ValidationError as exc:
            logger.warning("Cache entry %r is invalid, keeping it as empty: %s", key, exc)
            records[taxon_id] = RecencyRecord.empty()
    return records


def save(path: Path, records: dict[int, RecencyRecord]) -> Path:
    """Overwrite the cache file with ``records``.

    Writes a sibling temp file and renames it over the target, so a crash
    mid-write leaves the previous version intact.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {str(taxon_id): record.to_cache() for taxon_id, record in records.items()}
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
        f.write("\n")
    tmp.replace(path)
    return path


class RecencyCache:
    """Write-through store of recency records keyed by taxon id."""

    def __init__(self, path: Path, records: dict[int, RecencyRecord] | None = None) -> None:
        self.path = path
        self._records: dict[int, RecencyRecord] = dict(records or {})

    @classmethod
    def open(cls, path: Path) -> RecencyCache:
        """Load the cache at ``path`` (empty if missing or unreadable)."""
        return cls(path, load(path))

    def __contains__(self, taxon_id: object) -> bool:
        return taxon_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def get(self, taxon_id: int) -> RecencyRecord | None:
        return self._records.get(taxon_id)

    def put(self, taxon_id: int, record: RecencyRecord) -> None:
        """Store a record and flush the whole cache to disk immediately."""
        self._records[taxon_id] = record
        self.flush()

    def flush(self) -> Path:
        return save(self.path, self._records)

    def as_dict(self) -> dict[int, RecencyRecord]:
        """Snapshot of all cached records."""
        return dict(self._records)
