"""Shared file handling for the JSON-file-backed repositories.

Each repository owns one JSON array on disk. Reads and writes go through an
in-process lock and writes replace the file atomically, so a reader never
sees a half-written file.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime
from pathlib import Path

from logistics.domain.exceptions import ConflictError


def dt_to_raw(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def dt_from_raw(raw: str | None) -> datetime | None:
    return datetime.fromisoformat(raw) if raw else None


class JsonFileStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._io_lock = threading.RLock()
        self._ensure_file()

    def _load_raw(self) -> list[dict]:
        with self._io_lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, rows: list[dict]) -> None:
        with self._io_lock:
            tmp = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
            tmp.write_text(json.dumps(rows, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp, self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")

    @staticmethod
    def _next_id(rows: list[dict]) -> int:
        if not rows:
            return 1
        return max(r["id"] for r in rows) + 1

    @staticmethod
    def _check_version(rows: list[dict], row_id: int | str, version: int, label: str) -> None:
        """Reject a save whose version does not match the stored row."""
        stored = next((r.get("version", 0) for r in rows if r["id"] == row_id), 0)
        if stored != version:
            raise ConflictError(
                f"{label} was modified concurrently "
                f"(expected version {version}, found {stored})"
            )

    def _upsert(self, rows: list[dict], row: dict, key: str = "id") -> None:
        for i, existing in enumerate(rows):
            if existing[key] == row[key]:
                rows[i] = row
                return
        rows.append(row)
