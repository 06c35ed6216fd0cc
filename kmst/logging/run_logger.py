"""CSV logger for iteration-level swarm metrics."""

from __future__ import annotations

import csv
import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, MutableMapping, Optional


def _utc_stamp() -> str:
    now = dt.datetime.now(dt.timezone.utc)
    return now.strftime('%Y-%m-%dT%H:%M:%S.') + f"{now.microsecond // 1000:03d}Z"


@dataclass
class RunLogger:
    """Buffer one row per swarm iteration and write them as a single CSV.

    Every row carries the shared run metadata (k, seed, swarm size, ...)
    followed by the iteration metrics passed to `log_iteration`.
    """

    base_dir: Path
    filename: Optional[str] = None
    metadata: Optional[Dict[str, object]] = None

    _records: List[MutableMapping[str, object]] = field(default_factory=list, init=False)
    _resolved_path: Optional[Path] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.base_dir = Path(self.base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.metadata = dict(self.metadata) if self.metadata else {}

    def __len__(self) -> int:
        return len(self._records)

    def log_iteration(self, **metrics: object) -> None:
        record: MutableMapping[str, object] = {'timestamp': _utc_stamp()}
        record.update(self.metadata)
        record.update(metrics)
        self._records.append(record)

    def update_metadata(self, **extra: object) -> None:
        """Merge metadata shared by all rows logged from now on."""
        self.metadata.update(extra)

    def flush(self) -> Path:
        """Write buffered rows to disk and return the file path."""

        if not self._records:
            raise RuntimeError("No records to write; did the swarm run with this logger?")

        path = self._resolve_path()
        with path.open('w', newline='') as handle:
            writer = csv.DictWriter(handle, fieldnames=self._determine_fieldnames(), extrasaction='ignore')
            writer.writeheader()
            writer.writerows(self._records)
        return path

    def _resolve_path(self) -> Path:
        if self._resolved_path is None:
            stamp = dt.datetime.now(dt.timezone.utc).strftime('%Y%m%dT%H%M%S')
            self._resolved_path = self.base_dir / (self.filename or f"swarm_{stamp}.csv")
        return self._resolved_path

    def _determine_fieldnames(self) -> List[str]:
        keys: Dict[str, None] = {}
        for record in self._records:
            for key in record:
                keys.setdefault(key, None)
        return list(keys)
