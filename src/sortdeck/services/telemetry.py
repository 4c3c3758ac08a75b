from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Mapping


@dataclass
class TelemetryService:
    path: Path

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.log_many([(event_type, payload)])

    def log_events(self, events: Iterable[Mapping[str, object]]) -> None:
        """Record engine events, using each event's "type" as the record type."""
        batch: list[tuple[str, Mapping[str, object]]] = []
        for ev in events:
            payload = {k: v for k, v in ev.items() if k != "type"}
            batch.append((str(ev.get("type", "UNKNOWN")), payload))
        self.log_many(batch)

    def log_many(self, records: Iterable[tuple[str, Mapping[str, object]]]) -> None:
        lines: list[str] = []
        ts = datetime.now(tz=timezone.utc).isoformat()
        for event_type, payload in records:
            rec = {"ts": ts, "type": event_type, "payload": dict(payload)}
            lines.append(json.dumps(rec, ensure_ascii=False))
        if not lines:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
