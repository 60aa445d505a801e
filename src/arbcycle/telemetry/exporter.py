"""JSON export of scan reports."""

import logging
from pathlib import Path
from typing import Any

import orjson

from arbcycle.core.event_bus import Event, EventBus, EventType
from arbcycle.core.types import ScanReport


logger = logging.getLogger(__name__)


class ReportExporter:
    """
    Writes scan reports to a JSON file.

    Each completed scan replaces the file contents with a list of all
    reports of the session, so the file is valid JSON after every pass.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._reports: list[dict[str, Any]] = []

    def attach(self, event_bus: EventBus) -> None:
        event_bus.subscribe_sync(EventType.SCAN_COMPLETE, self._on_complete)

    def _on_complete(self, event: Event[Any]) -> None:
        self.export(event.payload)

    def export(self, report: ScanReport) -> None:
        """Append a report and rewrite the file."""
        self._reports.append(report.to_dict())
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_bytes(orjson.dumps(self._reports, option=orjson.OPT_INDENT_2))
        logger.debug(f"Exported {len(self._reports)} reports to {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def report_count(self) -> int:
        return len(self._reports)
