from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_HISTORY_PATH = "data/history.json"
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_OUTPUT_PATH = "output.html"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


@dataclass(frozen=True)
class ViewerSettings:
    history_path: Path
    history_limit: int
    output_path: Path
    cors_allowed_origins: list[str]

    def to_dict(self) -> dict:
        return {
            "history_path": str(self.history_path),
            "history_limit": self.history_limit,
            "output_path": str(self.output_path),
            "cors_allowed_origins": list(self.cors_allowed_origins),
        }


def _positive_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def load_settings() -> ViewerSettings:
    origins = os.getenv("EGOV_VIEWER_CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS)
    return ViewerSettings(
        history_path=Path(os.getenv("EGOV_VIEWER_HISTORY_PATH", DEFAULT_HISTORY_PATH)),
        history_limit=_positive_int(os.getenv("EGOV_VIEWER_HISTORY_LIMIT"), DEFAULT_HISTORY_LIMIT),
        output_path=Path(os.getenv("EGOV_VIEWER_OUTPUT_PATH", DEFAULT_OUTPUT_PATH)),
        cors_allowed_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
    )
