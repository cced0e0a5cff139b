from __future__ import annotations

import json
import logging
from pathlib import Path

from page_digest.core.config import AppConfig, FetchSettings
from page_digest.core.logging_config import configure_logging, resolve_level


def test_defaults_when_missing(app_dir: Path) -> None:
    cfg = AppConfig.load(app_dir)
    assert cfg.fetch == FetchSettings()
    assert cfg.fetch.requests_per_second == 1.0
    assert cfg.fetch.burst == 3
    assert cfg.fetch.timeout_seconds == 30.0


def test_save_and_load_round_trip(app_dir: Path) -> None:
    cfg = AppConfig.load(app_dir)
    custom = AppConfig(paths=cfg.paths, fetch=FetchSettings(requests_per_second=2.5, burst=5, raise_for_status=True))
    custom.save()
    loaded = AppConfig.load(app_dir)
    assert loaded.fetch == custom.fetch
    assert not (app_dir / "config.json.tmp").exists()


def test_unknown_keys_are_ignored(app_dir: Path) -> None:
    app_dir.mkdir(parents=True)
    (app_dir / "config.json").write_text(json.dumps({"fetch": {"burst": 7, "bogus": 1}, "other": True}), encoding="utf-8")
    assert AppConfig.load(app_dir).fetch.burst == 7


def test_corrupt_config_falls_back_to_defaults(app_dir: Path) -> None:
    app_dir.mkdir(parents=True)
    (app_dir / "config.json").write_text("{not json", encoding="utf-8")
    assert AppConfig.load(app_dir).fetch == FetchSettings()


def test_configure_logging_writes_to_log_file(app_dir: Path) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        cfg = AppConfig.load(app_dir)
        configure_logging(cfg)
        logging.getLogger("page_digest.test").info("hello log")
        for h in root.handlers:
            h.flush()
        assert "hello log" in cfg.paths.log_path.read_text(encoding="utf-8")
    finally:
        for h in root.handlers:
            h.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_log_level_round_trip_and_applied(app_dir: Path) -> None:
    cfg = AppConfig(paths=AppConfig.load(app_dir).paths, log_level="DEBUG")
    cfg.save()
    loaded = AppConfig.load(app_dir)
    assert loaded.log_level == "DEBUG"

    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        configure_logging(loaded)
        assert root.level == logging.DEBUG
        logging.getLogger("page_digest.test").debug("debug line")
        for h in root.handlers:
            h.flush()
        assert "debug line" in loaded.paths.log_path.read_text(encoding="utf-8")
    finally:
        for h in root.handlers:
            h.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_resolve_level_defaults_to_info() -> None:
    assert resolve_level("warning") == logging.WARNING
    assert resolve_level("chatty") == logging.INFO


def test_iteration_count_is_not_a_setting(app_dir: Path) -> None:
    app_dir.mkdir(parents=True)
    (app_dir / "config.json").write_text(json.dumps({"fetch": {"pbkdf2_iterations": 5}}), encoding="utf-8")
    cfg = AppConfig.load(app_dir)
    assert cfg.fetch == FetchSettings()
    assert not hasattr(cfg.fetch, "pbkdf2_iterations")
