"""
Structured logging for bigarith validation runs.

Produces:
  - manifest.json: One-time run metadata (versions, config and its hash)
  - checks.jsonl: One record per cross-check
  - failures.jsonl: Mismatching checks only, flushed as they happen
"""

import hashlib
import json
import platform
import sys
import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Any

import numpy as np


@dataclass
class RunManifest:
    """Run-level metadata, saved once per run."""
    run_id: str
    timestamp: str
    python_version: str
    numpy_version: str
    platform: str
    config: Dict[str, Any]
    config_hash: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def save(self, path: Path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2, default=str)


def _config_hash(config: Dict[str, Any]) -> str:
    """Deterministic hash of config dict."""
    s = json.dumps(config, sort_keys=True, default=str)
    return hashlib.sha256(s.encode()).hexdigest()[:16]


def create_manifest(run_id: str, config: Dict[str, Any]) -> RunManifest:
    """Create a RunManifest with auto-detected metadata."""
    return RunManifest(
        run_id=run_id,
        timestamp=time.strftime("%Y-%m-%dT%H:%M:%S%z"),
        python_version=sys.version,
        numpy_version=np.__version__,
        platform=platform.platform(),
        config=config,
        config_hash=_config_hash(config),
    )


class RunLogger:
    """Structured JSONL logger for one validation run.

    Writes two files:
      - checks.jsonl    (every check, flushed every 100 records)
      - failures.jsonl  (mismatches, flushed immediately)
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self._checks_path = self.output_dir / "checks.jsonl"
        self._failures_path = self.output_dir / "failures.jsonl"

        # Append mode so repeated runs into one directory accumulate
        self._checks_f = open(self._checks_path, 'a')
        self._failures_f = open(self._failures_path, 'a')

        self._checks_count = 0
        self._failures_count = 0

    def log_check(self, record: Dict[str, Any]):
        """Log one cross-check; records with passed=False also go to
        failures.jsonl."""
        record = dict(record, timestamp=time.time())
        self._checks_f.write(json.dumps(record, default=str) + "\n")
        self._checks_count += 1
        if self._checks_count % 100 == 0:
            self._checks_f.flush()
        if not record.get("passed", True):
            self.log_failure(record)

    def log_failure(self, record: Dict[str, Any]):
        record.setdefault("timestamp", time.time())
        self._failures_f.write(json.dumps(record, default=str) + "\n")
        self._failures_f.flush()
        self._failures_count += 1

    def close(self):
        """Flush and close all log files."""
        for f in [self._checks_f, self._failures_f]:
            if not f.closed:
                f.flush()
                f.close()

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "checks_logged": self._checks_count,
            "failures_logged": self._failures_count,
        }

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
