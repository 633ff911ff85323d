"""Plain-file log storage.

All artifacts live flat in one directory. There is no database: writes go
through small helpers that append text or dump JSON. Methods are blocking;
the Log Router calls them through asyncio.to_thread.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .core import FALLBACK_LOG_NAME, init_logs_dir, log_filename, raw_filename


class LogStore:
    def __init__(self, logs_dir: Path) -> None:
        self._dir = init_logs_dir(Path(logs_dir))

    @property
    def logs_dir(self) -> Path:
        return self._dir

    # ------------------------------------------------------------------
    # Path helpers
    # ------------------------------------------------------------------

    def log_path(self, key: str) -> Path:
        return self._dir / log_filename(key)

    def raw_path(self, key: str) -> Path:
        return self._dir / raw_filename(key)

    def fallback_path(self) -> Path:
        return self._dir / FALLBACK_LOG_NAME

    def exists(self, path: Path) -> bool:
        return path.is_file()

    # ------------------------------------------------------------------
    # Writes (errors="replace": lone surrogates from client JSON land as "?")
    # ------------------------------------------------------------------

    def append_text(self, path: Path, text: str) -> None:
        with path.open("a", encoding="utf-8", errors="replace") as f:
            f.write(text)

    def write_json(self, path: Path, data: Any) -> None:
        """Overwrite path with pretty-printed JSON."""
        text = json.dumps(data, indent=2, ensure_ascii=False)
        path.write_text(text, encoding="utf-8", errors="replace")
