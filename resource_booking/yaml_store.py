from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any
import logging
import shutil
import threading

import yaml

from .notifications import BookingEvent

logger = logging.getLogger(__name__)


class EventLogStorageError(RuntimeError):
    pass


class YamlEventLog:
    """Observer that appends every booking event to a YAML list file.

    Rows have the shape ``{event_time, event_type, payload}``. A file that
    cannot be parsed is copied aside as ``<stem>.corrupt.<timestamp>`` and
    reset to an empty list.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._ensure_file()

    def _ensure_file(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.write_text("[]\n", encoding="utf-8")

    def notify(self, event: BookingEvent) -> None:
        row = {
            "event_time": event.occurred_at.isoformat(timespec="seconds"),
            "event_type": event.kind.value,
            "payload": event.to_dict(),
        }
        with self._lock:
            self._store([*self._load(), row])

    def read_events(self) -> list[dict[str, Any]]:
        with self._lock:
            return self._load()

    def _load(self) -> list[dict[str, Any]]:
        try:
            rows = yaml.safe_load(self.path.read_text(encoding="utf-8")) or []
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as error:
            self._quarantine(str(error))
            return []

        if not isinstance(rows, list):
            self._quarantine("top-level YAML is not a list")
            return []

        skipped = [index for index, row in enumerate(rows) if not isinstance(row, dict)]
        if skipped:
            logger.warning("Skipping non-mapping rows %s of %s", skipped, self.path.name)
        return [row for row in rows if isinstance(row, dict)]

    def _store(self, rows: list[dict[str, Any]]) -> None:
        document = yaml.safe_dump(rows, allow_unicode=True, sort_keys=False)
        staging = self.path.parent / f".{self.path.name}.tmp"
        try:
            staging.write_text(document, encoding="utf-8")
            staging.replace(self.path)
        except OSError as error:
            staging.unlink(missing_ok=True)
            raise EventLogStorageError(f"Failed to write event log: {self.path}") from error

    def _quarantine(self, reason: str) -> None:
        backup = self.path.with_name(f"{self.path.stem}.corrupt.{datetime.now():%Y%m%d%H%M%S}{self.path.suffix}")
        if self.path.exists():
            try:
                shutil.copy2(self.path, backup)
            except OSError:
                logger.warning("Could not back up corrupted event log %s", self.path)
        self.path.write_text("[]\n", encoding="utf-8")
        logger.warning("Reset corrupted event log %s (backup %s): %s", self.path.name, backup.name, reason)
