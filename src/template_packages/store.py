"""Persisted sources file.

Stores the PersistedRecord of every installed package so installed sources
can be rebuilt with ``PackageInstaller.deserialize`` on the next run.

Per KERNEL_PHILOSOPHY:
- "Could two teams want different behavior?" → YES (file location is policy)
- This is library mechanism - apps inject the file path

Per IMPLEMENTATION_PHILOSOPHY:
- Ruthless simplicity: Simple JSON file, no transactions
- YAGNI: Records keyed by mount point, nothing else
"""

import json
import logging
from pathlib import Path

from .schema import PersistedRecord

logger = logging.getLogger(__name__)


class SourcesStore:
    """
    Persisted sources file manager (with injected file path).

    File format (JSON):
    {
      "version": "1.0",
      "sources": [
        {
          "installerId": "0b0f3c0e-...",
          "mountPointUri": "~/.templates/packages/Contoso.Templates.1.2.0.nupkg",
          "lastChangeTime": "2025-10-26T12:00:00Z",
          "details": {"packageIdentifier": "Contoso.Templates", "packageVersion": "1.2.0", ...}
        }
      ]
    }
    """

    VERSION = "1.0"

    def __init__(self, store_path: Path):
        """Initialize store with app-provided file path.

        Args:
            store_path: Path to the sources file (app determines location)
        """
        self.store_path = store_path
        self._records: dict[str, PersistedRecord] = {}
        self._load()

    def _load(self) -> None:
        """Load sources file if it exists."""
        if not self.store_path.exists():
            self._records = {}
            return

        try:
            with open(self.store_path) as f:
                data = json.load(f)

            if data.get("version") != self.VERSION:
                logger.warning(f"Sources file version mismatch: expected {self.VERSION}, got {data.get('version')}")

            records = [PersistedRecord.from_dict(entry) for entry in data.get("sources", [])]
            self._records = {record.mount_point_uri: record for record in records}

            logger.debug(f"Loaded {len(self._records)} sources from {self.store_path}")

        except Exception as e:
            logger.error(f"Failed to load sources file {self.store_path}: {e}")
            self._records = {}

    def _save(self) -> None:
        """Save sources file."""
        self.store_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "version": self.VERSION,
            "sources": [record.to_dict() for record in self._records.values()],
        }

        with open(self.store_path, "w") as f:
            json.dump(data, f, indent=2)
        logger.debug(f"Saved {len(self._records)} sources to {self.store_path}")

    def add(self, record: PersistedRecord) -> None:
        """Add or replace the record stored for ``record.mount_point_uri``."""
        self._records[record.mount_point_uri] = record
        self._save()

    def remove(self, mount_point_uri: str) -> None:
        """Remove the record of a mount point (no-op if absent)."""
        if mount_point_uri in self._records:
            del self._records[mount_point_uri]
            self._save()

    def get(self, mount_point_uri: str) -> PersistedRecord | None:
        return self._records.get(mount_point_uri)

    def list_records(self) -> list[PersistedRecord]:
        return list(self._records.values())

    def is_installed(self, mount_point_uri: str) -> bool:
        return mount_point_uri in self._records
