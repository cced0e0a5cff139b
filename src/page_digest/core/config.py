from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_APP_DIR = Path.home() / ".page_digest"
CONFIG_FILENAME = "config.json"
LOG_FILENAME = "page_digest.log"


@dataclass(frozen=True)
class FetchSettings:
    requests_per_second: float = 1.0
    burst: int = 3
    timeout_seconds: float = 30.0
    user_agent: str = "page-digest/0.1 (+https://example.invalid/page-digest)"
    # Treat 4xx/5xx responses as failures instead of parsing them.
    raise_for_status: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FetchSettings":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class AppPaths:
    app_dir: Path

    @property
    def config_path(self) -> Path:
        return self.app_dir / CONFIG_FILENAME

    @property
    def log_path(self) -> Path:
        return self.app_dir / LOG_FILENAME

    def ensure(self) -> None:
        self.app_dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class AppConfig:
    paths: AppPaths
    fetch: FetchSettings = field(default_factory=FetchSettings)
    log_level: str = "INFO"

    @classmethod
    def load(cls, app_dir: Path | None = None) -> "AppConfig":
        paths = AppPaths(app_dir=Path(app_dir) if app_dir is not None else DEFAULT_APP_DIR)
        path = paths.config_path
        if not path.exists():
            return cls(paths=paths)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable config %s (%s)", path, e)
            return cls(paths=paths)
        if not isinstance(data, dict):
            return cls(paths=paths)
        fetch_raw = data.get("fetch")
        fetch = FetchSettings.from_dict(fetch_raw) if isinstance(fetch_raw, dict) else FetchSettings()
        log_level = str(data.get("log_level") or "INFO").strip().upper()
        return cls(paths=paths, fetch=fetch, log_level=log_level)

    def save(self) -> None:
        self.paths.ensure()
        payload = {"fetch": asdict(self.fetch), "log_level": self.log_level}
        tmp = self.paths.config_path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        os.replace(tmp, self.paths.config_path)
