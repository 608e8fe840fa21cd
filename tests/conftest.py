import json
import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from moon_dst.apply.orchestrator import _reset_pool
from moon_dst.config import get_settings
from moon_dst.tooling.moon import resolve_moon_bin


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    monkeypatch.delenv("MOON_DST_JOBS", raising=False)
    monkeypatch.delenv("MOON_DST_LOG_JSON", raising=False)
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    get_settings.cache_clear()
    resolve_moon_bin.cache_clear()
    _reset_pool()
    yield
    get_settings.cache_clear()
    resolve_moon_bin.cache_clear()
    _reset_pool()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def write_manifest() -> Callable[..., Path]:
    def _write(directory: Path, deps: dict[str, str] | None = None, raw: str | None = None) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "moon.mod.json"
        if raw is not None:
            path.write_text(raw, encoding="utf-8")
        else:
            payload: dict[str, object] = {"name": directory.name}
            if deps is not None:
                payload["deps"] = deps
            path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
