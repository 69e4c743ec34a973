from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ssdnode.io.output.base import DetectionSink
from ssdnode.types import Detection


class JsonEventSink(DetectionSink):
    """Writes one JSON line per detection to stdout and/or an append-only file."""

    def __init__(self, stdout_enabled: bool, file_path: str | None = None) -> None:
        self._stdout_enabled = stdout_enabled
        self._file_path = Path(file_path).expanduser().resolve() if file_path else None
        self._file_handle = None
        self._lock = threading.Lock()
        self._frame = 0
        self._context: dict[str, Any] = {}

    def enabled(self) -> bool:
        return self._stdout_enabled or self._file_path is not None

    def open(self) -> None:
        if self._file_path is not None and self._file_handle is None:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = self._file_path.open("a", encoding="utf-8")

    def set_context(self, **context: Any) -> None:
        self._context = dict(context)

    def clear(self) -> None:
        self._frame += 1

    def add_detection(self, detection: Detection) -> None:
        event = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "frame": self._frame,
            **self._context,
            **detection.to_dict(),
        }
        self.emit(event)

    def emit(self, event: dict[str, Any]) -> None:
        payload = json.dumps(event, ensure_ascii=True)
        with self._lock:
            if self._stdout_enabled:
                print(payload, flush=True)
            if self._file_path is not None:
                if self._file_handle is None:
                    self.open()
                self._file_handle.write(payload + "\n")
                self._file_handle.flush()

    def close(self) -> None:
        with self._lock:
            if self._file_handle is not None:
                self._file_handle.close()
                self._file_handle = None

    def name(self) -> str:
        return "events"
