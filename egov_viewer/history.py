from __future__ import annotations

import json
import logging
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from egov_viewer.config import DEFAULT_HISTORY_LIMIT
from egov_viewer.models import TemplateData
from egov_viewer.schema_models import validate_template_payload

logger = logging.getLogger(__name__)

UNKNOWN_FOLDER_LABEL = "不明なフォルダ"


@dataclass(frozen=True)
class HistoryEntry:
    folder_name: str
    timestamp: int
    data: TemplateData

    def to_dict(self) -> dict:
        return {
            "folder_name": self.folder_name,
            "timestamp": self.timestamp,
            "data": self.data.to_dict(),
        }

    def summary(self) -> dict:
        return {
            "folder_name": self.folder_name,
            "timestamp": self.timestamp,
            "documents": len(self.data.documents),
            "zougens": len(self.data.zougens),
            "csvs": len(self.data.csvs),
        }


def _atomic_write_json(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)
        handle.flush()
        temp_path = Path(handle.name)
    temp_path.replace(path)


def _entry_from_payload(payload: object) -> HistoryEntry | None:
    if not isinstance(payload, dict):
        return None
    folder_name = payload.get("folder_name")
    timestamp = payload.get("timestamp")
    if not isinstance(folder_name, str) or not isinstance(timestamp, int):
        return None
    try:
        data = validate_template_payload(payload.get("data") or {})
    except ValidationError as exc:
        logger.warning("Dropping unreadable history entry '%s': %s", folder_name, exc.error_count())
        return None
    return HistoryEntry(folder_name=folder_name, timestamp=timestamp, data=TemplateData.from_dict(data))


class HistoryStore:
    """Conversion history keyed by origin label, newest first and bounded."""

    def __init__(self, path: Path | str, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit <= 0:
            raise ValueError("History limit must be greater than zero.")
        self.path = Path(path)
        self.limit = limit

    def _load(self) -> list[HistoryEntry]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("History file %s is unreadable, starting empty: %s", self.path, exc)
            return []

        items = raw.get("entries", []) if isinstance(raw, dict) else []
        if not isinstance(items, list):
            return []
        entries = [_entry_from_payload(item) for item in items]
        return [entry for entry in entries if entry is not None]

    def _save(self, entries: list[HistoryEntry]) -> None:
        _atomic_write_json(self.path, {"entries": [entry.to_dict() for entry in entries]})

    def entries(self) -> list[HistoryEntry]:
        return self._load()

    def get(self, folder_name: str) -> HistoryEntry | None:
        for entry in self._load():
            if entry.folder_name == folder_name:
                return entry
        return None

    def add(self, folder_name: str, data: TemplateData, timestamp: int | None = None) -> HistoryEntry:
        label = folder_name or UNKNOWN_FOLDER_LABEL
        entry = HistoryEntry(
            folder_name=label,
            timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
            data=data,
        )
        entries = [entry] + [item for item in self._load() if item.folder_name != label]
        if len(entries) > self.limit:
            evicted = [item.folder_name for item in entries[self.limit:]]
            logger.info("Evicting history entries beyond limit %s: %s", self.limit, evicted)
        self._save(entries[: self.limit])
        return entry

    def delete(self, folder_name: str) -> bool:
        entries = self._load()
        remaining = [entry for entry in entries if entry.folder_name != folder_name]
        if len(remaining) == len(entries):
            return False
        self._save(remaining)
        return True
