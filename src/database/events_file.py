"""
File-backed event log (default, ``EVENT_STORE=file``).

Each connection event is appended as one JSON line to a per-day file
``events-YYYY-MM-DD.log`` (UTC) under the configured log directory. Queries
re-read today's file and return the newest lines first.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from src.integrations.contracts.interfaces import ConnectionEvent, EventStore

from .events import emit_to_console

logger = logging.getLogger(__name__)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class FileEventStore(EventStore):
    def __init__(self, log_dir: Path | str, today: Optional[Callable[[], date]] = None) -> None:
        self.log_dir = Path(log_dir)
        self._today = today or _utc_today

    @property
    def kind(self) -> str:
        return "file"

    def path_for(self, day: date) -> Path:
        return self.log_dir / f"events-{day.isoformat()}.log"

    @property
    def current_path(self) -> Path:
        return self.path_for(self._today())

    def record(self, event: ConnectionEvent) -> None:
        data = event.to_dict()
        line = json.dumps(data, default=str) + "\n"
        self.log_dir.mkdir(parents=True, exist_ok=True)
        with open(self.current_path, "a", encoding="utf-8") as f:
            f.write(line)
        emit_to_console(data)

    def recent(self, limit: int) -> List[Dict[str, Any]]:
        if limit <= 0:
            return []

        path = self.current_path
        if not path.exists():
            return []

        # Undecodable bytes become U+FFFD so a corrupt line surfaces as a raw record.
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            lines = [line.rstrip("\n") for line in f if line.strip()]

        events: List[Dict[str, Any]] = []
        for line in reversed(lines):
            events.append(self._parse_line(line))
            if len(events) >= limit:
                break
        return events

    @staticmethod
    def _parse_line(line: str) -> Dict[str, Any]:
        try:
            parsed = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("Malformed event log line kept as raw text: %r", line)
            return {"raw": line}
        if not isinstance(parsed, dict):
            return {"raw": line}
        return parsed
